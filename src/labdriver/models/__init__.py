"""Pydantic models for node specifications and lab configuration."""

from labdriver.models.config import LabConfig, LabSettings, NodeDefinition
from labdriver.models.node import HostRequirements, ManagementNetwork, NodeSpec

__all__ = [
    "HostRequirements",
    "LabConfig",
    "LabSettings",
    "ManagementNetwork",
    "NodeDefinition",
    "NodeSpec",
]
