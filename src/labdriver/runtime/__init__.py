"""Container runtime contract consumed by node drivers."""

from labdriver.runtime.base import (
    ContainerNotFoundError,
    ContainerRuntime,
    ContainerRuntimeError,
    RuntimeHandle,
)

__all__ = [
    "ContainerNotFoundError",
    "ContainerRuntime",
    "ContainerRuntimeError",
    "RuntimeHandle",
]
