"""Node kind drivers."""

from labdriver.nodes.base import IMAGE_KEY, DriverOptions, NodeDriver, NodeState
from labdriver.nodes.registry import NodeRegistry, build_default_registry
from labdriver.nodes.staging import RenderWarning, StageResult

__all__ = [
    "IMAGE_KEY",
    "DriverOptions",
    "NodeDriver",
    "NodeRegistry",
    "NodeState",
    "RenderWarning",
    "StageResult",
    "build_default_registry",
]
