"""
labdriver - per-kind node drivers for containerized network labs.

Turns a generic node specification into a running vrnetlab-style device
container: stages the startup configuration, derives the launch environment
and hands container lifecycle off to a runtime backend.
"""

__version__ = "1.0.0"

# Re-export key components for easier access
from labdriver.models.config import LabConfig
from labdriver.models.node import HostRequirements, ManagementNetwork, NodeSpec

__all__ = [
    "HostRequirements",
    "LabConfig",
    "ManagementNetwork",
    "NodeSpec",
]
