"""Transform nodes - data processing and manipulation."""

from .transform import TransformNode
from .filter import FilterNode
from .merge import MergeNode

__all__ = [
    "TransformNode",
    "FilterNode",
    "MergeNode",
]
