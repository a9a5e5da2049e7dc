"""Trigger nodes - workflow entry points."""

from .webhook import WebhookNode
from .schedule import ScheduleNode
from .geo_trigger import GeoTriggerNode

__all__ = [
    "WebhookNode",
    "ScheduleNode",
    "GeoTriggerNode",
]
