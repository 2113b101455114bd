"""Lab file loading."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from labdriver.errors import LabConfigError
from labdriver.models.config import LabConfig
from labdriver.models.node import NodeSpec


logger = logging.getLogger(__name__)


class ConfigManager:
    """Loads a lab file and turns its node entries into node specs."""

    def __init__(self, lab_file: Path):
        """Initialize configuration manager."""
        self.lab_file = Path(lab_file)
        self.yaml = YAML(typ="safe")
        self.config: Optional[LabConfig] = None

    async def load(self) -> LabConfig:
        """Load and validate the lab file."""
        logger.info(f"Loading lab file {self.lab_file}")

        if not self.lab_file.exists():
            raise LabConfigError(f"Lab file not found: {self.lab_file}")

        data = await self._read_yaml(self.lab_file)
        if not isinstance(data, dict):
            raise LabConfigError(f"Lab file {self.lab_file} must contain a mapping")

        try:
            self.config = LabConfig(**data)
        except ValidationError as e:
            logger.error(f"Invalid lab file: {e}")
            raise LabConfigError(f"Invalid lab file {self.lab_file}: {e}") from e

        logger.debug(f"Loaded lab {self.config.name} with {len(self.config.nodes)} node(s)")
        return self.config

    async def _read_yaml(self, file_path: Path) -> Dict[str, Any]:
        """Read and parse YAML file."""
        content = file_path.read_text()
        try:
            return self.yaml.load(content)
        except YAMLError as e:
            raise LabConfigError(f"Cannot parse {file_path}: {e}") from e

    @property
    def lab_root(self) -> Path:
        """Directory holding per-node working directories."""
        config = self._require_config()
        if config.settings.lab_root:
            root = Path(config.settings.lab_root)
            if not root.is_absolute():
                root = self.lab_file.parent / root
            return root
        return self.lab_file.parent / f"clab-{config.name}"

    def node_specs(self) -> Dict[str, NodeSpec]:
        """Build a node spec for every node in the lab."""
        return {name: self.get_node_spec(name) for name in self._require_config().nodes}

    def get_node_spec(self, name: str) -> NodeSpec:
        """Build the node spec for one node."""
        config = self._require_config()
        node = config.nodes.get(name)
        if node is None:
            raise LabConfigError(f"Node {name} not found in lab {config.name}")

        startup_config = node.startup_config
        if startup_config and not Path(startup_config).is_absolute():
            startup_config = str(self.lab_file.parent / startup_config)

        return NodeSpec(
            kind=node.kind,
            image=node.image,
            short_name=name,
            long_name=f"clab-{config.name}-{name}",
            lab_dir=str(self.lab_root / name),
            startup_config=startup_config,
            env=dict(node.env),
        )

    def _require_config(self) -> LabConfig:
        if self.config is None:
            raise LabConfigError("Lab file has not been loaded")
        return self.config
