import sys

from shrthnder.main import main

sys.exit(main())
