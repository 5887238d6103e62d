import os
from pathlib import Path

APP_NAME = "Shrthnder"

API_URL = os.getenv("SHRTHNDER_API_URL", "http://localhost:5001").rstrip("/")
HTTP_TIMEOUT_SECONDS = float(os.getenv("SHRTHNDER_HTTP_TIMEOUT", "10"))

DATA_DIR = Path(os.getenv("SHRTHNDER_DATA_DIR", "data"))
DB_PATH = DATA_DIR / "results.db"
EXPORT_PREFIX = "shrthnder_test_data"

# Job domains offered in the category tabs
CATEGORIES = ("general", "medical", "legal", "tech")
DEFAULT_CATEGORY = "general"

# Typing test
TICK_MS = 1000  # display refresh only, never used for scoring
DEFAULT_RATING = 5
MIN_RATING = 1
MAX_RATING = 10
