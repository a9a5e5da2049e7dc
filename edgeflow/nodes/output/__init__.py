"""Output nodes - outbound requests, email and caller responses."""

from .email import EmailNode
from .http_request import HttpRequestNode
from .response import ResponseNode

__all__ = [
    "EmailNode",
    "HttpRequestNode",
    "ResponseNode",
]
