"""AI nodes - chat-completion integrations."""

from .completion import AIAnalyzeNode, AIGenerateNode, AIClassifyNode

__all__ = [
    "AIAnalyzeNode",
    "AIGenerateNode",
    "AIClassifyNode",
]
