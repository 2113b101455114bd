"""Base container runtime interface."""

from abc import ABC, abstractmethod
from typing import Any

from labdriver.models.node import NodeSpec


# Opaque container identifier handed back by create_container
RuntimeHandle = str


class ContainerRuntimeError(Exception):
    """Raised by runtime backends when a container operation fails."""


class ContainerNotFoundError(ContainerRuntimeError):
    """The target container does not exist."""


class ContainerRuntime(ABC):
    """Runtime backend interface that node drivers delegate to.

    Implementations own image pulls, container create/start/delete and any
    retry policy. Drivers await these coroutines directly, so cancellation
    and deadlines set by the caller reach the backend untouched.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Runtime name (e.g., 'docker', 'podman')."""
        ...

    @abstractmethod
    async def create_container(self, spec: NodeSpec) -> RuntimeHandle:
        """Create a container from a fully prepared node spec."""
        ...

    @abstractmethod
    async def start_container(self, handle: RuntimeHandle, spec: NodeSpec) -> Any:
        """Start a previously created container."""
        ...

    @abstractmethod
    async def delete_container(self, name: str) -> None:
        """Delete the container with the given name."""
        ...
