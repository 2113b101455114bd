"""Tests for the vr-nxos node driver."""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from labdriver.errors import ConfigReadError, ConfigRenderError, LifecycleError
from labdriver.models.node import ManagementNetwork, NodeSpec
from labdriver.nodes.base import DriverOptions, NodeState
from labdriver.nodes.vr_nxos import VrNxosNode
from labdriver.runtime.base import ContainerNotFoundError, ContainerRuntime


class RecordingRenderer:
    """Renderer with the plain two-argument generate_config signature."""

    def __init__(self):
        self.calls = []

    def generate_config(self, dest_path, template_text):
        self.calls.append((Path(dest_path), template_text))
        Path(dest_path).write_text(template_text.upper())


@pytest.fixture
def runtime():
    """Mocked container runtime."""
    mock = AsyncMock(spec=ContainerRuntime)
    mock.create_container.return_value = "c0ffee"
    return mock


@pytest.fixture
def spec(tmp_path):
    """Node spec for a single NX-OS node."""
    return NodeSpec(
        kind="vr-nxos",
        image="nxos:9.3",
        short_name="r1",
        long_name="clab-demo-r1",
        lab_dir=str(tmp_path / "clab-demo" / "r1"),
    )


@pytest.fixture
def mgmt():
    return ManagementNetwork(ipv4_subnet="172.100.100.0/24", ipv6_subnet="3fff:172:100:100::/80")


class TestInit:
    """Test init()."""

    def test_default_env(self, spec, mgmt):
        """Test defaults are filled in when the caller sets nothing."""
        node = VrNxosNode()
        node.init(spec, DriverOptions(mgmt=mgmt))

        assert spec.env == {
            "USERNAME": "admin",
            "PASSWORD": "admin",
            "CONNECTION_MODE": "tc",
            "VCPU": "2",
            "RAM": "4096",
            "DOCKER_NET_V4_ADDR": "172.100.100.0/24",
            "DOCKER_NET_V6_ADDR": "3fff:172:100:100::/80",
        }
        assert node.state == NodeState.INITIALIZED

    def test_caller_env_wins(self, spec):
        """Test caller supplied values override defaults."""
        spec.env = {"USERNAME": "netops", "RAM": "8192", "EXTRA": "1"}

        VrNxosNode().init(spec)

        assert spec.env["USERNAME"] == "netops"
        assert spec.env["PASSWORD"] == "admin"
        assert spec.env["RAM"] == "8192"
        assert spec.env["EXTRA"] == "1"
        assert "--username netops --password admin" in spec.cmd

    def test_command_line(self, spec):
        """Test launch arguments embed credentials, hostname and mode."""
        VrNxosNode().init(spec)

        assert spec.cmd == (
            "--username admin --password admin --hostname r1 "
            "--connection-mode tc --trace"
        )

    def test_config_bind_and_virtualization(self, spec):
        """Test the config dir is bind mounted and KVM is required."""
        spec.binds = ["/opt/licenses:/licenses"]

        VrNxosNode().init(spec)

        assert spec.binds == [
            "/opt/licenses:/licenses",
            f"{spec.lab_dir}/config:/config",
        ]
        assert spec.host_requirements.virt_required is True

    def test_missing_mgmt_uses_default_network(self, spec):
        """Test the default management subnets are used without options."""
        node = VrNxosNode()
        node.init(spec)

        assert spec.env["DOCKER_NET_V4_ADDR"] == "172.20.20.0/24"
        assert spec.env["DOCKER_NET_V6_ADDR"] == "2001:172:20:20::/64"
        assert node.runtime is None

    def test_init_twice_rejected(self, spec):
        """Test a driver binds to exactly one node."""
        node = VrNxosNode()
        node.init(spec)

        with pytest.raises(LifecycleError):
            node.init(spec)

    def test_invalid_options(self):
        """Test a bad collaborator fails when options are built."""
        with pytest.raises(ValueError):
            DriverOptions(renderer=object())

    def test_kind_defaults_to_primary_name(self, tmp_path):
        """Test a spec without a kind gets the driver's primary kind."""
        spec = NodeSpec(image="nxos:9.3", short_name="r1", lab_dir=str(tmp_path))

        VrNxosNode().init(spec)

        assert spec.kind == "vr-nxos"

    def test_get_images(self, spec):
        """Test exactly one image is reported."""
        node = VrNxosNode()
        node.init(spec)

        assert node.get_images() == {"image": "nxos:9.3"}


@pytest.mark.asyncio
class TestPreDeploy:
    """Test pre_deploy()."""

    async def test_no_startup_config(self, spec):
        """Test directories are created and nothing is rendered."""
        renderer = MagicMock()
        node = VrNxosNode()
        node.init(spec, DriverOptions(renderer=renderer))

        result = await node.pre_deploy()

        config_dir = Path(spec.lab_dir) / "config"
        assert config_dir.is_dir()
        assert not (config_dir / "startup-config.cfg").exists()
        assert result.rendered is None
        assert result.ok
        renderer.generate_config.assert_not_called()
        assert node.state == NodeState.PRE_DEPLOYED

    async def test_renders_startup_config(self, spec, tmp_path):
        """Test the template is rendered with node fields."""
        template = tmp_path / "r1.cfg.j2"
        template.write_text("hostname {{ short_name }}\nusername {{ env.USERNAME }}\n")
        spec.startup_config = str(template)

        node = VrNxosNode()
        node.init(spec)
        result = await node.pre_deploy()

        rendered = Path(spec.lab_dir) / "config" / "startup-config.cfg"
        assert result.rendered == rendered
        assert rendered.read_text() == "hostname r1\nusername admin\n"

    async def test_idempotent(self, spec, tmp_path):
        """Test a second pre_deploy succeeds with the same output."""
        template = tmp_path / "r1.cfg.j2"
        template.write_text("hostname {{ short_name }}\n")
        spec.startup_config = str(template)

        node = VrNxosNode()
        node.init(spec)
        await node.pre_deploy()
        rendered = Path(spec.lab_dir) / "config" / "startup-config.cfg"
        first = rendered.read_text()

        result = await node.pre_deploy()

        assert result.ok
        assert rendered.read_text() == first

    async def test_missing_source_is_fatal(self, spec, tmp_path):
        """Test an unreadable source aborts with a read error."""
        spec.startup_config = str(tmp_path / "missing.cfg")

        node = VrNxosNode()
        node.init(spec)

        with pytest.raises(ConfigReadError) as exc_info:
            await node.pre_deploy()

        assert isinstance(exc_info.value, OSError)
        assert not (Path(spec.lab_dir) / "config" / "startup-config.cfg").exists()
        assert node.state == NodeState.INITIALIZED

    async def test_render_failure_is_warning(self, spec, tmp_path):
        """Test a render failure is reported but does not abort."""
        template = tmp_path / "r1.cfg.j2"
        template.write_text("hostname {{ no_such_variable }}\n")
        spec.startup_config = str(template)

        node = VrNxosNode()
        node.init(spec)
        result = await node.pre_deploy()

        assert not result.ok
        assert len(result.warnings) == 1
        assert result.rendered is None
        assert node.state == NodeState.PRE_DEPLOYED

    async def test_render_failure_strict(self, spec, tmp_path):
        """Test strict rendering turns the warning into an error."""
        template = tmp_path / "r1.cfg.j2"
        template.write_text("hostname {{ no_such_variable }}\n")
        spec.startup_config = str(template)

        node = VrNxosNode()
        node.init(spec, DriverOptions(strict_render=True))

        with pytest.raises(ConfigRenderError):
            await node.pre_deploy()

    async def test_two_argument_renderer(self, spec, tmp_path):
        """Test a custom renderer gets only destination and template text."""
        template = tmp_path / "r1.cfg"
        template.write_text("hostname r1\n")
        spec.startup_config = str(template)
        renderer = RecordingRenderer()

        node = VrNxosNode()
        node.init(spec, DriverOptions(renderer=renderer))
        result = await node.pre_deploy()

        rendered = Path(spec.lab_dir) / "config" / "startup-config.cfg"
        assert renderer.calls == [(rendered, "hostname r1\n")]
        assert result.ok
        assert result.rendered == rendered
        assert rendered.read_text() == "HOSTNAME R1\n"

    async def test_non_utf8_startup_config(self, spec, tmp_path):
        """Test a source with non-UTF-8 bytes is rendered, not rejected."""
        template = tmp_path / "r1.cfg"
        template.write_bytes(b"hostname {{ short_name }}\nbanner motd \xe9\n")
        spec.startup_config = str(template)

        node = VrNxosNode()
        node.init(spec)
        result = await node.pre_deploy()

        assert result.ok
        rendered = Path(spec.lab_dir) / "config" / "startup-config.cfg"
        assert rendered.read_bytes() == b"hostname r1\nbanner motd \xe9\n"

    async def test_requires_init(self):
        """Test pre_deploy before init is rejected."""
        with pytest.raises(LifecycleError):
            await VrNxosNode().pre_deploy()


@pytest.mark.asyncio
class TestDeploy:
    """Test deploy(), post_deploy(), delete() and save_config()."""

    async def test_end_to_end(self, spec, runtime):
        """Test bring-up of a node without a startup config."""
        node = VrNxosNode()
        node.init(spec, DriverOptions(runtime=runtime))
        await node.pre_deploy()

        assert (Path(spec.lab_dir) / "config").is_dir()
        assert not (Path(spec.lab_dir) / "config" / "startup-config.cfg").exists()

        await node.deploy()

        runtime.create_container.assert_awaited_once_with(spec)
        runtime.start_container.assert_awaited_once_with("c0ffee", spec)
        assert "--username admin --password admin --hostname r1" in spec.cmd
        assert node.state == NodeState.DEPLOYED

        await node.post_deploy({})
        assert node.state == NodeState.POST_DEPLOYED

    async def test_create_error_propagates(self, spec, runtime):
        """Test runtime errors reach the caller unchanged."""
        error = RuntimeError("image not found")
        runtime.create_container.side_effect = error

        node = VrNxosNode()
        node.init(spec, DriverOptions(runtime=runtime))
        await node.pre_deploy()

        with pytest.raises(RuntimeError) as exc_info:
            await node.deploy()

        assert exc_info.value is error
        runtime.start_container.assert_not_awaited()

    async def test_start_error_no_rollback(self, spec, runtime):
        """Test a failed start leaves the created container alone."""
        runtime.start_container.side_effect = RuntimeError("kvm unavailable")

        node = VrNxosNode()
        node.init(spec, DriverOptions(runtime=runtime))
        await node.pre_deploy()

        with pytest.raises(RuntimeError, match="kvm unavailable"):
            await node.deploy()

        runtime.delete_container.assert_not_awaited()
        assert runtime.create_container.await_count == 1

    async def test_deploy_requires_pre_deploy(self, spec, runtime):
        """Test deploy before pre_deploy is rejected."""
        node = VrNxosNode()
        node.init(spec, DriverOptions(runtime=runtime))

        with pytest.raises(LifecycleError):
            await node.deploy()

        runtime.create_container.assert_not_awaited()

    async def test_deploy_without_runtime(self, spec):
        """Test deploy needs a runtime."""
        node = VrNxosNode()
        node.init(spec)
        await node.pre_deploy()

        with pytest.raises(LifecycleError):
            await node.deploy()

    async def test_deploy_cancellation(self, spec, runtime):
        """Test caller deadlines reach the runtime call."""
        async def slow_create(_spec):
            await asyncio.sleep(10)

        runtime.create_container.side_effect = slow_create

        node = VrNxosNode()
        node.init(spec, DriverOptions(runtime=runtime))
        await node.pre_deploy()

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(node.deploy(), timeout=0.05)

        runtime.start_container.assert_not_awaited()

    async def test_delete_uses_long_name(self, spec, runtime):
        """Test delete targets the container by long name."""
        node = VrNxosNode()
        node.init(spec, DriverOptions(runtime=runtime))
        await node.pre_deploy()
        await node.deploy()

        await node.delete()

        runtime.delete_container.assert_awaited_once_with("clab-demo-r1")
        assert node.state == NodeState.DELETED

    async def test_delete_before_deploy_surfaces_error(self, spec, runtime):
        """Test the runtime's not-found error is not swallowed."""
        error = ContainerNotFoundError("No such container: clab-demo-r1")
        runtime.delete_container.side_effect = error

        node = VrNxosNode()
        node.init(spec, DriverOptions(runtime=runtime))

        with pytest.raises(ContainerNotFoundError) as exc_info:
            await node.delete()

        assert exc_info.value is error
        assert node.state == NodeState.INITIALIZED

    async def test_save_config_noop(self, spec, runtime):
        """Test save_config does nothing once deployed."""
        node = VrNxosNode()
        node.init(spec, DriverOptions(runtime=runtime))
        await node.pre_deploy()
        await node.deploy()

        await node.save_config()

        runtime.delete_container.assert_not_awaited()

    async def test_save_config_requires_deploy(self, spec):
        """Test save_config before deploy is rejected."""
        node = VrNxosNode()
        node.init(spec)

        with pytest.raises(LifecycleError):
            await node.save_config()

    async def test_save_config_after_delete(self, spec, runtime):
        """Test save_config stays callable once the node was deployed."""
        node = VrNxosNode()
        node.init(spec, DriverOptions(runtime=runtime))
        await node.pre_deploy()
        await node.deploy()
        await node.delete()

        await node.save_config()

        assert node.state == NodeState.DELETED
