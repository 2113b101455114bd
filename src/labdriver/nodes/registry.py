"""Node kind registry."""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from labdriver.errors import KindRegistrationError, UnknownKindError
from labdriver.nodes.base import NodeDriver


logger = logging.getLogger(__name__)

NodeFactory = Callable[[], NodeDriver]


@dataclass(frozen=True)
class Credentials:
    """Default login credentials for a node kind."""
    username: str
    password: str


class NodeRegistry:
    """Maps node kind names to driver factories.

    Owned by the orchestrator and populated explicitly during its startup.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._factories: Dict[str, NodeFactory] = {}
        self._credentials: Dict[str, Credentials] = {}

    def register(self, kind_names: Iterable[str], factory: NodeFactory) -> None:
        """Register a driver factory under one or more kind names."""
        kind_names = list(kind_names)
        for name in kind_names:
            if name in self._factories:
                raise KindRegistrationError(f"Node kind {name} is already registered")

        for name in kind_names:
            self._factories[name] = factory
            logger.debug(f"Registered node kind: {name}")

    def set_default_credentials(self, kind_names: Iterable[str], username: str, password: str) -> None:
        """Record default credentials for the given kinds."""
        creds = Credentials(username=username, password=password)
        for name in kind_names:
            self._credentials[name] = creds

    def get_default_credentials(self, kind: str) -> Optional[Credentials]:
        return self._credentials.get(kind)

    def create(self, kind: str) -> NodeDriver:
        """Instantiate a fresh driver for a kind."""
        factory = self._factories.get(kind)
        if factory is None:
            raise UnknownKindError(f"Unknown node kind: {kind}")
        return factory()

    def list_kinds(self) -> List[str]:
        """List registered kind names."""
        return sorted(self._factories)


def build_default_registry() -> NodeRegistry:
    """Build a registry holding every built-in node kind."""
    from labdriver.nodes import vr_nxos

    registry = NodeRegistry()
    vr_nxos.register(registry)
    return registry
