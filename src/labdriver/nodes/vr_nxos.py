"""Cisco NX-OS node running as a vrnetlab VM container."""

import asyncio
import logging
import os
from typing import Dict, Mapping, Optional

from labdriver.errors import ConfigRenderError
from labdriver.models.node import NodeSpec
from labdriver.nodes.base import IMAGE_KEY, DriverOptions, NodeDriver, NodeState
from labdriver.nodes.env import DEFAULT_PASSWORD, DEFAULT_USERNAME, default_vr_env, merge_env
from labdriver.nodes.staging import (
    CONFIG_DIR_NAME,
    STARTUP_CONFIG_FILE,
    StageResult,
    ensure_dirs,
    stage_startup_config,
)
from labdriver.utils.templates import JinjaConfigRenderer


logger = logging.getLogger(__name__)

KIND_NAMES = ("vr-nxos", "vr-cisco_nxos")

# In-container mount point vrnetlab reads the startup config from
CONTAINER_CONFIG_DIR = "/config"


class VrNxosNode(NodeDriver):
    """Driver for the vr-nxos kind."""

    kind_names = KIND_NAMES

    def init(self, spec: NodeSpec, options: Optional[DriverOptions] = None) -> None:
        """Fill in launch environment, config bind and launch.py arguments."""
        self._require_state("init", NodeState.UNINITIALIZED)
        self._spec = spec
        self._options = options or DriverOptions()

        if not spec.kind:
            spec.kind = self.kind_names[0]

        # env vars are read by launch.py inside the vrnetlab container
        spec.env = merge_env(default_vr_env(self.mgmt), spec.env)

        spec.binds = spec.binds + [
            f"{os.path.join(spec.lab_dir, CONFIG_DIR_NAME)}:{CONTAINER_CONFIG_DIR}"
        ]

        spec.cmd = (
            f"--username {spec.env['USERNAME']} --password {spec.env['PASSWORD']} "
            f"--hostname {spec.short_name} --connection-mode {spec.env['CONNECTION_MODE']} --trace"
        )

        spec.host_requirements.virt_required = True

        self.state = NodeState.INITIALIZED
        logger.debug(f"Initialized {spec.kind} node {spec.short_name}")

    async def pre_deploy(self) -> StageResult:
        """Create the lab directories and render the startup config."""
        self._require_state("pre-deploy", NodeState.INITIALIZED, NodeState.PRE_DEPLOYED)
        spec = self.config

        config_dir = await asyncio.to_thread(ensure_dirs, spec.lab_dir)

        result = await asyncio.to_thread(
            stage_startup_config,
            spec.startup_config,
            config_dir / STARTUP_CONFIG_FILE,
            self._options.renderer or JinjaConfigRenderer(spec),
            spec.short_name,
        )

        if result.warnings and self._options.strict_render:
            raise ConfigRenderError(str(result.warnings[0])) from result.warnings[0].error

        self.state = NodeState.PRE_DEPLOYED
        return result

    async def deploy(self) -> None:
        """Create the container from the prepared spec and start it."""
        self._require_state("deploy", NodeState.PRE_DEPLOYED)
        runtime = self._require_runtime()
        spec = self.config

        logger.info(f"Deploying node {spec.short_name} from image {spec.image}")
        handle = await runtime.create_container(spec)
        await runtime.start_container(handle, spec)

        self.state = NodeState.DEPLOYED

    async def post_deploy(self, peers: Mapping[str, NodeDriver]) -> None:
        self._require_state("post-deploy", NodeState.DEPLOYED)
        self.state = NodeState.POST_DEPLOYED

    def get_images(self) -> Dict[str, str]:
        return {IMAGE_KEY: self.config.image}

    async def delete(self) -> None:
        """Delete the node's container by its long name."""
        runtime = self._require_runtime()
        await runtime.delete_container(self.config.long_name)
        if self.state in (NodeState.DEPLOYED, NodeState.POST_DEPLOYED):
            self.state = NodeState.DELETED

    async def save_config(self) -> None:
        # vrnetlab NX-OS images offer no config extraction
        self._require_state(
            "save config", NodeState.DEPLOYED, NodeState.POST_DEPLOYED, NodeState.DELETED
        )


def register(registry) -> None:
    """Register the vr-nxos kinds and their default credentials."""
    registry.register(VrNxosNode.kind_names, VrNxosNode)
    registry.set_default_credentials(VrNxosNode.kind_names, DEFAULT_USERNAME, DEFAULT_PASSWORD)
