"""Tests for the KV and AI services behind the /api/kv and /api/ai routes."""

from __future__ import annotations

import pytest

from edgeflow.core.config import settings
from edgeflow.core.exceptions import AICompletionError, UnsupportedActionError
from edgeflow.services.ai_service import AIService
from edgeflow.services.kv_service import KVService


@pytest.fixture
def kv_service(kv_store) -> KVService:
    return KVService(kv_store)


@pytest.fixture
def ai_service(ai_client) -> AIService:
    return AIService(ai_client)


class TestKVService:
    async def test_put_then_get(self, kv_service):
        saved = await kv_service.put("users", "u1", {"name": "Ada"}, expiration_ttl=60, metadata={"role": "admin"})
        fetched = await kv_service.get("users", "u1")

        assert saved == {
            "success": True,
            "namespace": "users",
            "key": "u1",
            "message": "Value saved",
            "expirationTtl": 60,
            "metadata": {"role": "admin"},
        }
        assert fetched["success"] is True
        assert fetched["value"] == {"name": "Ada"}
        assert fetched["metadata"] == {"role": "admin"}

    async def test_missing_key(self, kv_service):
        result = await kv_service.get("users", "nobody")

        assert result["success"] is False
        assert result["error"] == "Key not found"

    @pytest.mark.parametrize("ttl", [0, -1])
    async def test_non_positive_ttl_never_expires(self, kv_service, clock, ttl):
        saved = await kv_service.put("ns", "k", 1, expiration_ttl=ttl)
        clock.advance(10_000)

        assert saved["expirationTtl"] is None
        assert (await kv_service.get("ns", "k"))["value"] == 1

    async def test_delete_reports_whether_key_existed(self, kv_service):
        await kv_service.put("ns", "k", 1)

        first = await kv_service.delete("ns", "k")
        second = await kv_service.delete("ns", "k")

        assert first["deleted"] is True
        assert second["deleted"] is False

    async def test_list_pages_with_cursor(self, kv_service):
        for name in ("a", "b", "c"):
            await kv_service.put("ns", name, name)

        first = await kv_service.list("ns", limit=2)
        second = await kv_service.list("ns", limit=2, cursor=first["cursor"])

        assert [k["name"] for k in first["keys"]] == ["a", "b"]
        assert first["list_complete"] is False
        assert [k["name"] for k in second["keys"]] == ["c"]
        assert second["list_complete"] is True

    @pytest.mark.parametrize("limit", [0, -3])
    async def test_non_positive_limit_returns_one_key(self, kv_service, limit):
        for name in ("a", "b"):
            await kv_service.put("ns", name, name)

        result = await kv_service.list("ns", limit=limit)

        assert [k["name"] for k in result["keys"]] == ["a"]
        assert result["list_complete"] is False

    async def test_missing_limit_uses_configured_page_size(self, kv_service, monkeypatch):
        monkeypatch.setattr(settings, "kv_list_limit", 2)
        for name in ("a", "b", "c"):
            await kv_service.put("ns", name, name)

        result = await kv_service.list("ns")

        assert len(result["keys"]) == 2

    async def test_list_limit_is_capped(self, kv_service, monkeypatch):
        monkeypatch.setattr(settings, "kv_list_limit", 1)
        await kv_service.put("ns", "a", 1)
        await kv_service.put("ns", "b", 2)

        result = await kv_service.list("ns", limit=500)

        assert [k["name"] for k in result["keys"]] == ["a"]

    async def test_batch_runs_operations_in_order(self, kv_service):
        result = await kv_service.batch([
            {"action": "put", "namespace": "stats", "key": "visits", "value": 5},
            {"action": "increment", "namespace": "stats", "key": "visits", "delta": 2},
            {"action": "get", "namespace": "stats", "key": "visits"},
            {"action": "delete", "namespace": "stats", "key": "visits"},
            {"action": "get", "namespace": "stats", "key": "visits"},
        ])

        assert result["total"] == 5
        assert result["successful"] == 4
        outcomes = [r["result"] for r in result["results"]]
        assert outcomes[1]["previousValue"] == 5
        assert outcomes[1]["newValue"] == 7
        assert outcomes[2]["value"] == 7
        assert outcomes[4]["success"] is False

    async def test_batch_reports_bad_operations_inline(self, kv_service):
        result = await kv_service.batch([
            {"action": "truncate", "key": "x"},
            {"action": "get"},
            {"action": "increment", "key": "n", "delta": "two"},
        ])

        assert result["successful"] == 0
        errors = [r["result"]["error"] for r in result["results"]]
        assert "truncate" in errors[0]
        assert errors[1] == "Missing key"
        assert "delta" in errors[2]

    async def test_batch_defaults_namespace(self, kv_service, kv_store):
        await kv_service.batch([{"action": "put", "key": "k", "value": "v"}])

        assert (await kv_store.get("default", "k")).value == "v"


class TestAIService:
    async def test_analyze(self, ai_service, ai_endpoint):
        ai_endpoint.reply("Trend is flat.")

        result = await ai_service.process("analyze", {"sales": [1, 1]}, {"prompt": "Check sales"})

        assert result["success"] is True
        assert result["action"] == "analyze"
        assert result["result"] == "Trend is flat."
        assert "timestamp" in result
        assert ai_endpoint.last_prompt.startswith("Check sales\n\nData:\n")

    async def test_generate_json(self, ai_service, ai_endpoint):
        ai_endpoint.reply('```json\n{"title": "Hi"}\n```')

        result = await ai_service.process("generate", {"topic": "greeting"}, {"format": "json"})

        assert result["result"] == {"title": "Hi"}
        assert result["format"] == "json"
        assert ai_endpoint.last_prompt.endswith("Respond with valid JSON only.")

    async def test_classify(self, ai_service, ai_endpoint):
        ai_endpoint.reply("spam\n")

        result = await ai_service.process("classify", {"content": "BUY NOW"}, {"categories": "normal, spam"})

        assert result["classification"] == "spam"
        assert result["categories"] == ["normal", "spam"]
        assert result["confidence"] == "high"
        assert "BUY NOW" in ai_endpoint.last_prompt

    async def test_classify_default_categories(self, ai_service, ai_endpoint):
        ai_endpoint.reply("other")

        result = await ai_service.process("classify", "plain text")

        assert result["categories"] == ["Category A", "Category B", "Category C"]
        assert result["confidence"] == "low"

    async def test_summarize(self, ai_service, ai_endpoint):
        ai_endpoint.reply("  Short.  ")

        result = await ai_service.process("summarize", "A long article body", {"maxLength": 50})

        assert result["summary"] == "Short."
        assert result["originalLength"] == len("A long article body")
        assert result["summaryLength"] == 6
        assert "at most 50 characters" in ai_endpoint.last_prompt

    async def test_extract_parses_entities(self, ai_service, ai_endpoint):
        ai_endpoint.reply('{"entities": [{"type": "person", "value": "Ada"}]}')

        result = await ai_service.process("extract", {"content": "Ada met Bob"}, {"entityTypes": "person"})

        assert result["entities"] == [{"type": "person", "value": "Ada"}]
        assert result["entityTypes"] == ["person"]

    async def test_extract_keeps_unparseable_answer(self, ai_service, ai_endpoint):
        ai_endpoint.reply("Ada is a person")

        result = await ai_service.process("extract", "Ada")

        assert result["entities"] == [{"type": "raw", "value": "Ada is a person"}]

    async def test_unknown_action(self, ai_service):
        with pytest.raises(UnsupportedActionError, match="translate"):
            await ai_service.process("translate", "hola")

    async def test_missing_client(self):
        with pytest.raises(AICompletionError, match="not configured"):
            await AIService(None).process("analyze", {})

    async def test_batch_classify(self, ai_service, ai_endpoint):
        ai_endpoint.reply("spam", "normal")

        result = await ai_service.batch("classify", ["BUY", "hello"], {"categories": "normal,spam"})

        assert result["action"] == "batch_classify"
        assert result["total"] == 2
        assert result["successful"] == 2
        assert result["failed"] == 0
        assert [r["result"]["classification"] for r in result["results"]] == ["spam", "normal"]

    async def test_batch_collects_item_failures(self, ai_service, ai_endpoint):
        ai_endpoint.status_code = 500

        result = await ai_service.batch("summarize", ["one", "two"])

        assert result["success"] is True
        assert result["successful"] == 0
        assert result["failed"] == 2
        assert all(r["success"] is False for r in result["results"])

    async def test_batch_rejects_other_actions(self, ai_service):
        with pytest.raises(UnsupportedActionError):
            await ai_service.batch("extract", ["x"])
