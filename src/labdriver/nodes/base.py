"""Base node driver interface."""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from labdriver.errors import LifecycleError
from labdriver.models.node import ManagementNetwork, NodeSpec
from labdriver.nodes.staging import StageResult
from labdriver.runtime.base import ContainerRuntime


logger = logging.getLogger(__name__)

# Key under which get_images() reports the node's main image
IMAGE_KEY = "image"


class NodeState(Enum):
    """Node driver lifecycle state."""
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    PRE_DEPLOYED = "pre-deployed"
    DEPLOYED = "deployed"
    POST_DEPLOYED = "post-deployed"
    DELETED = "deleted"


class DriverOptions(BaseModel):
    """Collaborators and switches injected into a driver at init time."""
    mgmt: Optional[ManagementNetwork] = None
    runtime: Optional[ContainerRuntime] = None
    renderer: Optional[Any] = Field(default=None, description="ConfigRenderer implementation")
    strict_render: bool = Field(default=False, description="Treat render failures as fatal")

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    @field_validator("renderer")
    @classmethod
    def validate_renderer(cls, v):
        """Renderer must provide generate_config()."""
        if v is not None and not callable(getattr(v, "generate_config", None)):
            raise ValueError("renderer must implement generate_config(dest_path, template_text)")
        return v


class NodeDriver(ABC):
    """Lifecycle contract every node kind implements.

    The orchestrator drives one instance through init -> pre_deploy ->
    deploy -> post_deploy. delete and save_config are called on their own.
    """

    kind_names: ClassVar[Tuple[str, ...]] = ()

    def __init__(self):
        """Initialize an empty driver, init() binds it to a node."""
        self._spec: Optional[NodeSpec] = None
        self._options = DriverOptions()
        self.state = NodeState.UNINITIALIZED

    @property
    def config(self) -> NodeSpec:
        """Node spec the driver was initialized with."""
        if self._spec is None:
            raise LifecycleError(f"{type(self).__name__} has not been initialized")
        return self._spec

    @property
    def runtime(self) -> Optional[ContainerRuntime]:
        return self._options.runtime

    @property
    def mgmt(self) -> ManagementNetwork:
        return self._options.mgmt or ManagementNetwork()

    @abstractmethod
    def init(self, spec: NodeSpec, options: Optional[DriverOptions] = None) -> None:
        """Bind the driver to a node spec and fill in kind defaults."""
        pass

    @abstractmethod
    async def pre_deploy(self) -> StageResult:
        """Prepare on-disk artifacts before the container is created."""
        pass

    @abstractmethod
    async def deploy(self) -> None:
        """Create and start the node's container."""
        pass

    @abstractmethod
    async def post_deploy(self, peers: Mapping[str, "NodeDriver"]) -> None:
        """Run steps that need the whole lab wired up."""
        pass

    @abstractmethod
    def get_images(self) -> Dict[str, str]:
        """Images the node needs, keyed by image role."""
        pass

    @abstractmethod
    async def delete(self) -> None:
        """Delete the node's container."""
        pass

    @abstractmethod
    async def save_config(self) -> None:
        """Extract the running configuration from the node."""
        pass

    def _require_state(self, operation: str, *allowed: NodeState) -> None:
        if self.state not in allowed:
            expected = ", ".join(s.value for s in allowed)
            raise LifecycleError(
                f"cannot {operation} node in state {self.state.value} (expected {expected})"
            )

    def _require_runtime(self) -> ContainerRuntime:
        if self.runtime is None:
            raise LifecycleError(f"no container runtime configured for node {self.config.short_name}")
        return self.runtime
