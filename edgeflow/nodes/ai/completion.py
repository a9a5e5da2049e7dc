"""AI nodes - analyze, generate and classify with a chat-completion model."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, TYPE_CHECKING

from ..base import (
    BaseNode,
    NodeTypeDescription,
    NodeProperty,
    NodePropertyOption,
)
from ...core.exceptions import AICompletionError, ExecutorError
from ...engine.types import NodeType

if TYPE_CHECKING:
    from ...engine.llm_provider import CompletionClient
    from ...engine.types import ContextView, NodeDefinition, NodeResult

logger = logging.getLogger(__name__)

FORMAT_HINTS = {
    "json": "Respond with valid JSON only.",
    "markdown": "Respond in Markdown format.",
    "html": "Respond in HTML format.",
}

_MODEL_PROPERTY = NodeProperty(
    display_name="Model",
    name="model",
    type="string",
    default="",
    placeholder="qwen-turbo",
    description="Leave empty to use the configured default model",
)


def dump_data(data: Mapping[str, Any]) -> str:
    """Serialize context data for inclusion in a prompt."""
    return json.dumps(dict(data), ensure_ascii=False, default=str)


def parse_json_answer(text: str) -> Any:
    """Parse a JSON answer, keeping the raw text when it is not valid JSON."""
    candidate = text.strip()
    if candidate.startswith("```"):
        candidate = candidate.strip("`")
        if candidate.startswith("json"):
            candidate = candidate[len("json"):]
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        logger.debug("AI answer is not valid JSON, keeping raw text")
        return text


class AICompletionNode(BaseNode):
    """Shared plumbing for nodes that call the completion endpoint."""

    def get_client(self, node: NodeDefinition, context: ContextView) -> CompletionClient:
        client = context.services.ai
        if client is None:
            raise ExecutorError("AI completion client is not configured", node_id=node.id)
        return client

    async def complete(self, node: NodeDefinition, context: ContextView, prompt: str) -> str:
        client = self.get_client(node, context)
        model = self.get_parameter(node, "model")
        try:
            return await client.complete(prompt, model=model)
        except AICompletionError as e:
            e.node_id = node.id
            raise


class AIAnalyzeNode(AICompletionNode):
    """Ask the model to analyze the current workflow data."""

    node_description = NodeTypeDescription(
        name=NodeType.AI_ANALYZE.value,
        display_name="AI Analyze",
        description="Analyze workflow data with an AI model",
        icon="fa:brain",
        group=["ai"],
        properties=[
            NodeProperty(
                display_name="Prompt",
                name="prompt",
                type="string",
                default="Analyze the following data",
                description="Instruction sent with the data. Supports ${key} placeholders.",
                interpolated=True,
            ),
            _MODEL_PROPERTY,
        ],
    )

    @property
    def type(self) -> str:
        return NodeType.AI_ANALYZE.value

    @property
    def description(self) -> str:
        return "Analyze workflow data with an AI model"

    async def execute(self, node: NodeDefinition, context: ContextView) -> NodeResult:
        prompt = self.interpolate(
            self.get_parameter(node, "prompt", "Analyze the following data"), context
        )
        full_prompt = f"{prompt}\n\nData: {dump_data(context.data)}"

        analysis = await self.complete(node, context, full_prompt)
        return self.output({"analysis": analysis})


class AIGenerateNode(AICompletionNode):
    """Generate content from a prompt and the current data."""

    node_description = NodeTypeDescription(
        name=NodeType.AI_GENERATE.value,
        display_name="AI Generate",
        description="Generate text, Markdown, HTML or JSON with an AI model",
        icon="fa:magic",
        group=["ai"],
        properties=[
            NodeProperty(
                display_name="Prompt",
                name="prompt",
                type="string",
                default="Generate content",
                interpolated=True,
            ),
            NodeProperty(
                display_name="Format",
                name="format",
                type="options",
                default="text",
                options=[
                    NodePropertyOption(name="Text", value="text"),
                    NodePropertyOption(name="JSON", value="json"),
                    NodePropertyOption(name="Markdown", value="markdown"),
                    NodePropertyOption(name="HTML", value="html"),
                ],
            ),
            _MODEL_PROPERTY,
        ],
    )

    @property
    def type(self) -> str:
        return NodeType.AI_GENERATE.value

    @property
    def description(self) -> str:
        return "Generate text, Markdown, HTML or JSON with an AI model"

    async def execute(self, node: NodeDefinition, context: ContextView) -> NodeResult:
        prompt = self.interpolate(self.get_parameter(node, "prompt", "Generate content"), context)
        output_format = self.get_parameter(node, "format", "text")

        full_prompt = f"{prompt}\n\nInput data: {dump_data(context.data)}"
        if output_format in FORMAT_HINTS:
            full_prompt += f"\n\n{FORMAT_HINTS[output_format]}"

        generated: Any = await self.complete(node, context, full_prompt)

        if output_format == "json":
            generated = parse_json_answer(generated)

        return self.output({"generated": generated, "format": output_format})


class AIClassifyNode(AICompletionNode):
    """Classify a field of the data into one of the configured categories."""

    node_description = NodeTypeDescription(
        name=NodeType.AI_CLASSIFY.value,
        display_name="AI Classify",
        description="Classify content into one of several categories",
        icon="fa:tags",
        group=["ai"],
        properties=[
            NodeProperty(
                display_name="Categories",
                name="categories",
                type="string",
                default="Category A,Category B",
                placeholder="normal,spam,abuse",
                description="Comma-separated category names",
            ),
            NodeProperty(
                display_name="Field",
                name="field",
                type="string",
                default="content",
                description="Data field holding the content to classify",
            ),
            _MODEL_PROPERTY,
        ],
    )

    @property
    def type(self) -> str:
        return NodeType.AI_CLASSIFY.value

    @property
    def description(self) -> str:
        return "Classify content into one of several categories"

    async def execute(self, node: NodeDefinition, context: ContextView) -> NodeResult:
        categories = str(self.get_parameter(node, "categories", "Category A,Category B"))
        field = self.get_parameter(node, "field", "content")

        content = context.data.get(field)
        if not content:
            content = dump_data(context.data)
        elif not isinstance(content, str):
            content = json.dumps(content, ensure_ascii=False, default=str)

        prompt = (
            f"Classify the following content into exactly one of these categories: {categories}\n\n"
            f"Content: {content}\n\n"
            "Reply with the category name only."
        )
        classification = (await self.complete(node, context, prompt)).strip()
        category_list = [c.strip() for c in categories.split(",") if c.strip()]

        return self.output({
            "classification": classification,
            "content": content,
            "categories": category_list,
            "confidence": "high" if classification in category_list else "low",
        })
