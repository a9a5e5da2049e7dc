"""Tests for AI_ANALYZE, AI_GENERATE and AI_CLASSIFY nodes."""

from __future__ import annotations

import pytest

from edgeflow.core.exceptions import AICompletionError, ExecutorError
from edgeflow.engine.types import NodeServices
from edgeflow.nodes import AIAnalyzeNode, AIClassifyNode, AIGenerateNode

from helpers import make_chain, make_context, make_node


class TestAIAnalyzeNode:
    async def test_sends_prompt_with_data(self, services, ai_endpoint):
        ai_endpoint.reply("Sales are up.")
        node = make_node("a", "AI_ANALYZE", prompt="Summarize ${region}")
        context = make_context(data={"region": "EU", "sales": 10}, services=services)

        result = await AIAnalyzeNode().execute(node, context.view())

        assert result.data == {"analysis": "Sales are up."}
        request = ai_endpoint.requests[-1]
        assert request["model"] == "qwen-turbo"
        assert request["max_tokens"] == 2000
        assert request["temperature"] == 0.7
        assert request["messages"][0] == {"role": "system", "content": "You are a test assistant."}
        assert ai_endpoint.last_prompt == 'Summarize EU\n\nData: {"region": "EU", "sales": 10}'

    async def test_model_override(self, services, ai_endpoint):
        node = make_node("a", "AI_ANALYZE", model="qwen-max")

        await AIAnalyzeNode().execute(node, make_context(services=services).view())

        assert ai_endpoint.requests[-1]["model"] == "qwen-max"

    async def test_missing_client(self):
        with pytest.raises(ExecutorError, match="not configured"):
            await AIAnalyzeNode().execute(make_node("a", "AI_ANALYZE"), make_context().view())

    async def test_upstream_error_fails_node(self, services, ai_endpoint):
        ai_endpoint.status_code = 500

        with pytest.raises(AICompletionError) as exc_info:
            await AIAnalyzeNode().execute(make_node("a", "AI_ANALYZE"), make_context(services=services).view())

        assert exc_info.value.node_id == "a"

    async def test_upstream_error_fails_run(self, run_workflow, ai_endpoint):
        ai_endpoint.status_code = 503
        workflow = make_chain(
            make_node("a", "AI_ANALYZE"),
            make_node("r", "RESPONSE"),
        )

        record = await run_workflow(workflow, {"text": "hi"})

        assert record.success is False
        assert record.error_type == "AICompletionError"
        assert record.logs[-1].node_id == "a"


class TestAIGenerateNode:
    async def test_markdown_format_hint(self, services, ai_endpoint):
        ai_endpoint.reply("# Report")
        node = make_node("g", "AI_GENERATE", prompt="Write a report", format="markdown")

        result = await AIGenerateNode().execute(node, make_context(services=services).view())

        assert result.data == {"generated": "# Report", "format": "markdown"}
        assert ai_endpoint.last_prompt.endswith("Respond in Markdown format.")

    async def test_json_answer_is_parsed(self, services, ai_endpoint):
        ai_endpoint.reply('```json\n{"score": 3}\n```')
        node = make_node("g", "AI_GENERATE", format="json")

        result = await AIGenerateNode().execute(node, make_context(services=services).view())

        assert result.data["generated"] == {"score": 3}

    async def test_invalid_json_keeps_text(self, services, ai_endpoint):
        ai_endpoint.reply("not json")
        node = make_node("g", "AI_GENERATE", format="json")

        result = await AIGenerateNode().execute(node, make_context(services=services).view())

        assert result.data["generated"] == "not json"

    async def test_text_format_has_no_hint(self, services, ai_endpoint):
        node = make_node("g", "AI_GENERATE", prompt="Hi")

        await AIGenerateNode().execute(node, make_context(services=services).view())

        assert ai_endpoint.last_prompt == "Hi\n\nInput data: {}"


class TestAIClassifyNode:
    async def test_known_category_is_high_confidence(self, services, ai_endpoint):
        ai_endpoint.reply(" spam \n")
        node = make_node("c", "AI_CLASSIFY", categories="normal, spam", field="content")
        context = make_context(data={"content": "BUY NOW"}, services=services)

        result = await AIClassifyNode().execute(node, context.view())

        assert result.data == {
            "classification": "spam",
            "content": "BUY NOW",
            "categories": ["normal", "spam"],
            "confidence": "high",
        }
        assert "Content: BUY NOW" in ai_endpoint.last_prompt

    async def test_unknown_answer_is_low_confidence(self, services, ai_endpoint):
        ai_endpoint.reply("maybe")
        node = make_node("c", "AI_CLASSIFY", categories="a,b")

        result = await AIClassifyNode().execute(node, make_context(services=services).view())

        assert result.data["confidence"] == "low"

    async def test_missing_field_classifies_whole_data(self, services, ai_endpoint):
        node = make_node("c", "AI_CLASSIFY", field="body")
        context = make_context(data={"title": "x"}, services=services)

        result = await AIClassifyNode().execute(node, context.view())

        assert result.data["content"] == '{"title": "x"}'

    async def test_services_without_ai(self):
        context = make_context(services=NodeServices())
        with pytest.raises(ExecutorError):
            await AIClassifyNode().execute(make_node("c", "AI_CLASSIFY"), context.view())
