"""Email collaborator - renders message bodies and hands them to a sender."""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

import markdown

from ..engine.types import utc_now

logger = logging.getLogger(__name__)

BodyFormat = Literal["plain", "html", "markdown"]

EMAIL_CSS = """
body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px; }
h1 { color: #2c3e50; border-bottom: 2px solid #3498db; padding-bottom: 10px; }
a { color: #3498db; }
code { background: #f4f4f4; padding: 2px 6px; border-radius: 3px; }
table { border-collapse: collapse; width: 100%; margin: 16px 0; }
th, td { border: 1px solid #ddd; padding: 12px; text-align: left; }
"""


def render_markdown_to_html(markdown_text: str) -> str:
    """Convert a markdown body to a styled HTML document."""
    html_content = markdown.markdown(
        markdown_text,
        extensions=["tables", "fenced_code", "nl2br", "sane_lists"],
    )
    return wrap_html_in_template(html_content)


def wrap_html_in_template(html_content: str) -> str:
    if "<html" in html_content.lower() or "<body" in html_content.lower():
        return html_content

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<style>{EMAIL_CSS}</style>
</head>
<body>
{html_content}
</body>
</html>"""


@dataclass
class EmailMessage:
    """An email instruction produced by the EMAIL node."""

    to: str
    subject: str
    body: str
    body_format: BodyFormat = "plain"
    html_body: str | None = None
    message_id: str = field(default_factory=lambda: f"msg-{uuid.uuid4().hex[:12]}")
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def build(cls, to: str, subject: str, body: str, body_format: BodyFormat = "plain") -> EmailMessage:
        html_body = None
        if body_format == "markdown":
            html_body = render_markdown_to_html(body)
        elif body_format == "html":
            html_body = wrap_html_in_template(body)
        return cls(to=to, subject=subject, body=body, body_format=body_format, html_body=html_body)


class EmailSender(ABC):
    """Delivery backend for email instructions."""

    @abstractmethod
    async def send(self, message: EmailMessage) -> dict[str, Any]:
        """Deliver a message; returns at least ``{"success": bool}``."""
        ...


class LoggingEmailSender(EmailSender):
    """Sender that records messages in memory and logs them instead of delivering.

    Plug a real provider in by implementing ``EmailSender.send``.
    """

    def __init__(self, max_messages: int = 100) -> None:
        self._max_messages = max_messages
        self.outbox: list[EmailMessage] = []

    async def send(self, message: EmailMessage) -> dict[str, Any]:
        self.outbox.append(message)
        if len(self.outbox) > self._max_messages:
            del self.outbox[: len(self.outbox) - self._max_messages]

        logger.info("Email queued to %s: %s (%s)", message.to, message.subject, message.message_id)
        return {"success": True, "message_id": message.message_id}
