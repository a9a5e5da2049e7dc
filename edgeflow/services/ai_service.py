"""AI service - one-shot processing calls for the /api/ai routes."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from ..core.exceptions import AICompletionError, UnsupportedActionError
from ..engine.types import utc_now
from ..nodes.ai.completion import FORMAT_HINTS, parse_json_answer

if TYPE_CHECKING:
    from ..engine.llm_provider import CompletionClient

logger = logging.getLogger(__name__)

ACTIONS = ("analyze", "generate", "classify", "summarize", "extract")
BATCH_ACTIONS = ("classify", "summarize")

DEFAULT_CATEGORIES = "Category A,Category B,Category C"
DEFAULT_ENTITY_TYPES = "person,location,organization,date,amount"
DEFAULT_SUMMARY_LENGTH = 200


def content_of(data: Any) -> str:
    """Text to work on: a string as-is, else its ``content`` field, else the JSON dump."""
    if isinstance(data, str):
        return data
    if isinstance(data, dict) and data.get("content"):
        content = data["content"]
        return content if isinstance(content, str) else json.dumps(content, ensure_ascii=False, default=str)
    return json.dumps(data, ensure_ascii=False, default=str)


def split_list(value: Any) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [part.strip() for part in str(value).split(",") if part.strip()]


class AIService:
    """Analyze, generate, classify, summarize and extract outside a workflow.

    Each action sends one prompt to the completion endpoint and returns a
    dict with ``success``, ``action`` and ``timestamp`` plus its own fields.
    """

    def __init__(self, client: CompletionClient | None) -> None:
        self._client = client

    async def process(
        self, action: str, data: Any, config: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Run one action.

        Raises:
            UnsupportedActionError: ``action`` is not one of ``ACTIONS``.
            AICompletionError: the endpoint is not configured or fails.
        """
        handler = {
            "analyze": self.analyze,
            "generate": self.generate,
            "classify": self.classify,
            "summarize": self.summarize,
            "extract": self.extract,
        }.get(action)
        if handler is None:
            raise UnsupportedActionError(action, ACTIONS)

        result = await handler(data, config or {})
        return {"success": True, "action": action, **result, "timestamp": utc_now().isoformat()}

    async def analyze(self, data: Any, config: dict[str, Any]) -> dict[str, Any]:
        prompt = config.get("prompt") or "Analyze the following data and point out key trends and anomalies."
        full_prompt = (
            f"{prompt}\n\nData:\n{json.dumps(data, ensure_ascii=False, indent=2, default=str)}\n\n"
            "Include an overview, key findings, anomalies and recommended actions."
        )
        return {"result": await self._complete(full_prompt, config.get("model"))}

    async def generate(self, data: Any, config: dict[str, Any]) -> dict[str, Any]:
        output_format = config.get("format") or "text"
        prompt = config.get("prompt") or "Generate content from the following information."
        full_prompt = f"{prompt}\n\nInput data:\n{json.dumps(data, ensure_ascii=False, indent=2, default=str)}"
        if output_format in FORMAT_HINTS:
            full_prompt += f"\n\n{FORMAT_HINTS[output_format]}"

        result: Any = await self._complete(full_prompt, config.get("model"))
        if output_format == "json":
            result = parse_json_answer(result)
        return {"result": result, "format": output_format}

    async def classify(self, data: Any, config: dict[str, Any]) -> dict[str, Any]:
        categories = split_list(config.get("categories") or DEFAULT_CATEGORIES)
        prompt = (
            f"Classify the following content into exactly one of these categories: {','.join(categories)}\n\n"
            f"Content:\n{content_of(data)}\n\n"
            'Reply with the category name only. If unsure, reply "unknown".'
        )
        classification = (await self._complete(prompt, config.get("model"))).strip()
        return {
            "classification": classification,
            "categories": categories,
            "confidence": "high" if classification in categories else "low",
        }

    async def summarize(self, data: Any, config: dict[str, Any]) -> dict[str, Any]:
        content = content_of(data)
        max_length = config.get("maxLength") or DEFAULT_SUMMARY_LENGTH
        prompt = (
            f"Write a concise summary of at most {max_length} characters for the following content:\n\n"
            f"{content}\n\nSummary:"
        )
        summary = (await self._complete(prompt, config.get("model"))).strip()
        return {
            "summary": summary,
            "originalLength": len(content),
            "summaryLength": len(summary),
        }

    async def extract(self, data: Any, config: dict[str, Any]) -> dict[str, Any]:
        entity_types = split_list(config.get("entityTypes") or DEFAULT_ENTITY_TYPES)
        prompt = (
            f"Extract entities of these types: {','.join(entity_types)}\n\n"
            f"Content:\n{content_of(data)}\n\n"
            'Respond with JSON only, shaped as {"entities": [{"type": "...", "value": "...", "context": "..."}]}'
        )
        answer = await self._complete(prompt, config.get("model"))

        parsed = parse_json_answer(answer)
        if isinstance(parsed, dict) and isinstance(parsed.get("entities"), list):
            entities = parsed["entities"]
        else:
            entities = [{"type": "raw", "value": answer}]
        return {"entities": entities, "entityTypes": entity_types}

    async def batch(
        self, action: str, items: list[Any], config: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Run classify or summarize over each item; item failures are collected."""
        if action not in BATCH_ACTIONS:
            raise UnsupportedActionError(action, BATCH_ACTIONS)

        results = []
        for item in items:
            try:
                result = await self.process(action, item, config)
            except AICompletionError as e:
                logger.warning("Batch %s failed for one item: %s", action, e.message)
                results.append({"item": item, "success": False, "error": e.message})
                continue
            results.append({"item": item, "success": True, "result": result})

        successful = sum(1 for r in results if r["success"])
        return {
            "success": True,
            "action": f"batch_{action}",
            "total": len(items),
            "successful": successful,
            "failed": len(items) - successful,
            "results": results,
        }

    async def _complete(self, prompt: str, model: str | None) -> str:
        if self._client is None:
            raise AICompletionError("AI completion client is not configured")
        return await self._client.complete(prompt, model=model or None)
