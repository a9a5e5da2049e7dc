"""Email node - hands an email instruction to the configured sender."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..base import (
    BaseNode,
    NodeTypeDescription,
    NodeProperty,
    NodePropertyOption,
)
from ...core.exceptions import ExecutorError
from ...engine.types import NodeType
from ...services.email_service import EmailMessage

if TYPE_CHECKING:
    from ...engine.types import ContextView, NodeDefinition, NodeResult


class EmailNode(BaseNode):
    """Send an email (plain text, HTML, or Markdown)."""

    node_description = NodeTypeDescription(
        name=NodeType.EMAIL.value,
        display_name="Email",
        description="Sends an email (plain text, HTML, or Markdown)",
        icon="fa:envelope",
        group=["output"],
        properties=[
            NodeProperty(
                display_name="To",
                name="to",
                type="string",
                default="",
                placeholder="recipient@example.com",
                interpolated=True,
            ),
            NodeProperty(
                display_name="Subject",
                name="subject",
                type="string",
                default="",
                interpolated=True,
            ),
            NodeProperty(
                display_name="Template",
                name="template",
                type="string",
                default="",
                placeholder="Hello ${name}",
                interpolated=True,
            ),
            NodeProperty(
                display_name="Format",
                name="format",
                type="options",
                default="plain",
                options=[
                    NodePropertyOption(name="Plain Text", value="plain"),
                    NodePropertyOption(name="HTML", value="html"),
                    NodePropertyOption(
                        name="Markdown", value="markdown", description="Sent as styled HTML"
                    ),
                ],
            ),
        ],
    )

    @property
    def type(self) -> str:
        return NodeType.EMAIL.value

    @property
    def description(self) -> str:
        return "Sends an email (plain text, HTML, or Markdown)"

    async def execute(self, node: NodeDefinition, context: ContextView) -> NodeResult:
        sender = context.services.email
        if sender is None:
            raise ExecutorError("Email sender is not configured", node_id=node.id)

        to = self.interpolate(str(self.get_parameter(node, "to", "")), context)
        subject = self.interpolate(str(self.get_parameter(node, "subject", "")), context)
        template = self.interpolate(str(self.get_parameter(node, "template", "")), context)
        body_format = self.get_parameter(node, "format", "plain")
        if body_format not in ("plain", "html", "markdown"):
            body_format = "plain"

        message = EmailMessage.build(to, subject, template, body_format)
        outcome = await sender.send(message)
        sent = bool(outcome.get("success", False))

        return self.output({
            "sent": sent,
            "to": to,
            "subject": subject,
            "message": f"Email queued ({message.message_id})" if sent else outcome.get("error", "Email not sent"),
        })
