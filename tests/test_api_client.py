""" Unit tests for the REST client, run against httpx's mock transport. """

import json

import httpx
import pytest

from shrthnder.app.errors import InvalidRuleError, RuleLoadFailure, ShorthandError, SubmissionFailure
from shrthnder.app.models import ShorthandRule
from shrthnder.services.api_client import ApiClient

CATEGORIES = [
    {"category": "general", "testText": "Hey everyone.",
     "rules": [{"shorthand": "btw", "expansion": "by the way"}]},
    {"id": "42", "category": "tech", "test_text": "The api is slow.",
     "rules": [{"shorthand": "api", "expansion": "application programming interface"},
               {"shorthand": "db", "expansion": "database"}]},
]


def _client(handler) -> ApiClient:
    return ApiClient("http://rules.test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_categories() -> None:
    seen = []
    def handler(request):
        seen.append((request.method, request.url.path))
        return httpx.Response(200, json=CATEGORIES)
    categories = await _client(handler).fetch_categories()
    assert seen == [("GET", "/api/shorthand")]
    assert [c.category for c in categories] == ["general", "tech"]
    assert categories[0].test_text == "Hey everyone."
    assert categories[1].test_text == "The api is slow."
    assert categories[1].rules[1] == ShorthandRule("db", "database")


@pytest.mark.asyncio
async def test_fetch_categories_server_error() -> None:
    def handler(request):
        return httpx.Response(500, json={"message": "Error fetching categories"})
    with pytest.raises(RuleLoadFailure, match="Error fetching categories"):
        await _client(handler).fetch_categories()


@pytest.mark.asyncio
async def test_fetch_categories_malformed() -> None:
    def not_json(request):
        return httpx.Response(200, content=b"<html>oops</html>")
    with pytest.raises(RuleLoadFailure):
        await _client(not_json).fetch_categories()

    def missing_fields(request):
        return httpx.Response(200, json=[{"rules": []}])
    with pytest.raises(RuleLoadFailure):
        await _client(missing_fields).fetch_categories()


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"message": "maintenance"}, [1, 2], ["general"],
                                  [{"category": "general", "rules": ["btw"]}]])
async def test_fetch_categories_wrong_shape(body) -> None:
    def handler(request):
        return httpx.Response(200, json=body)
    with pytest.raises(RuleLoadFailure):
        await _client(handler).fetch_categories()


@pytest.mark.asyncio
async def test_fetch_categories_unreachable() -> None:
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)
    with pytest.raises(RuleLoadFailure):
        await _client(handler).fetch_categories()


@pytest.mark.asyncio
async def test_submit_result() -> None:
    payload = {"job_category": "general", "time_saved": {"seconds": 5, "percentage": 50}}
    received = {}
    def handler(request):
        received["path"] = request.url.path
        received["body"] = json.loads(request.content)
        return httpx.Response(201, json={"message": "Test results saved successfully"})
    ack = await _client(handler).submit_result(payload)
    assert received == {"path": "/api/test-data", "body": payload}
    assert ack["message"] == "Test results saved successfully"


@pytest.mark.asyncio
async def test_submit_result_failure() -> None:
    def handler(request):
        return httpx.Response(400, json={"message": "job_category is required"})
    with pytest.raises(SubmissionFailure, match="job_category is required"):
        await _client(handler).submit_result({})

    def down(request):
        raise httpx.ReadTimeout("timed out", request=request)
    with pytest.raises(SubmissionFailure):
        await _client(down).submit_result({"job_category": "general"})


@pytest.mark.asyncio
async def test_update_category() -> None:
    received = {}
    def handler(request):
        received["auth"] = request.headers["Authorization"]
        received["path"] = request.url.path
        received["body"] = json.loads(request.content)
        return httpx.Response(200, json={"category": "legal"})
    rules = [ShorthandRule("atty", "attorney")]
    await _client(handler).update_category("legal", "The attorney.", rules, "tok")
    assert received == {
        "auth": "Bearer tok",
        "path": "/api/shorthand/legal",
        "body": {"testText": "The attorney.", "rules": [{"shorthand": "atty", "expansion": "attorney"}]},
    }

    def missing(request):
        return httpx.Response(404, json={"message": "Category not found"})
    with pytest.raises(ShorthandError, match="Category not found"):
        await _client(missing).update_category("astrology", "", [], "tok")


@pytest.mark.asyncio
async def test_update_category_rejects_bad_rules() -> None:
    calls = []
    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})
    bad = [ShorthandRule("btw", "by the way"), ShorthandRule("btw", "between")]
    with pytest.raises(InvalidRuleError):
        await _client(handler).update_category("general", "", bad, "tok")
    assert calls == []
