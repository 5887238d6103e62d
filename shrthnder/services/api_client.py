from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from shrthnder.app import config
from shrthnder.app.errors import RuleLoadFailure, ShorthandError, SubmissionFailure
from shrthnder.app.models import ShorthandCategory, ShorthandRule
from shrthnder.app.validation import validate_rules

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or default)
    return default


class ApiClient:
    """
    REST client for the shorthand server: the rule provider and the
    result sink. A fresh AsyncClient is opened per call so the client can be
    used from whichever event loop the caller runs.
    """

    def __init__(self, base_url: str = config.API_URL, *,
                 timeout: float = config.HTTP_TIMEOUT_SECONDS,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout,
                                 transport=self._transport)

    async def fetch_categories(self) -> List[ShorthandCategory]:
        try:
            async with self._client() as client:
                r = await client.get("/api/shorthand", headers={"Content-Type": "application/json"})
        except httpx.HTTPError as e:
            raise RuleLoadFailure(f"could not reach rule server: {e}") from e
        if r.is_error:
            raise RuleLoadFailure(_error_message(r, "Failed to fetch categories"))
        try:
            data = r.json()
            if not isinstance(data, list):
                raise TypeError(f"expected a list, got {type(data).__name__}")
            return [ShorthandCategory.from_dict(item) for item in data]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise RuleLoadFailure(f"malformed category list: {e}") from e

    async def submit_result(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            async with self._client() as client:
                r = await client.post("/api/test-data", json=payload)
        except httpx.HTTPError as e:
            raise SubmissionFailure(f"could not reach result server: {e}") from e
        if r.is_error:
            raise SubmissionFailure(_error_message(r, "Failed to save test data"))
        logger.info("Submitted %s test results", payload.get("job_category"))
        try:
            return r.json()
        except ValueError:
            return {}

    async def update_category(self, category: str, test_text: str,
                              rules: Sequence[ShorthandRule], token: str) -> Dict[str, Any]:
        body = {"testText": test_text, "rules": [rule.to_dict() for rule in validate_rules(rules)]}
        headers = {"Authorization": f"Bearer {token}"}
        try:
            async with self._client() as client:
                r = await client.put(f"/api/shorthand/{category}", json=body, headers=headers)
        except httpx.HTTPError as e:
            raise ShorthandError(f"could not reach rule server: {e}") from e
        if r.is_error:
            raise ShorthandError(_error_message(r, "Failed to update category"))
        return r.json()
