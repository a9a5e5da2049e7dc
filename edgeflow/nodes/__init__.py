"""Workflow node implementations."""

from .base import BaseNode
from .triggers import WebhookNode, ScheduleNode, GeoTriggerNode
from .transform import TransformNode, FilterNode, MergeNode
from .ai import AIAnalyzeNode, AIGenerateNode, AIClassifyNode
from .edge import EdgeCacheNode, EdgeKVNode, EdgeRedirectNode
from .output import HttpRequestNode, EmailNode, ResponseNode

__all__ = [
    "BaseNode",
    "WebhookNode",
    "ScheduleNode",
    "GeoTriggerNode",
    "TransformNode",
    "FilterNode",
    "MergeNode",
    "AIAnalyzeNode",
    "AIGenerateNode",
    "AIClassifyNode",
    "EdgeCacheNode",
    "EdgeKVNode",
    "EdgeRedirectNode",
    "HttpRequestNode",
    "EmailNode",
    "ResponseNode",
]
