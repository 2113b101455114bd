"""Launch environment derivation for vrnetlab-based nodes."""

from typing import Dict, Mapping, Optional

from labdriver.models.node import ManagementNetwork


# vrnetlab default connection mode between the VM and container interfaces
VR_DEFAULT_CONN_MODE = "tc"

DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "admin"
DEFAULT_VCPU = 2
DEFAULT_RAM_MB = 4096


def merge_env(
    defaults: Optional[Mapping[str, str]],
    overrides: Optional[Mapping[str, str]],
) -> Dict[str, str]:
    """Merge two environment mappings, ``overrides`` wins on collisions.

    Neither input is modified.
    """
    result = dict(defaults or {})
    result.update(overrides or {})
    return result


def default_vr_env(
    mgmt: ManagementNetwork,
    username: str = DEFAULT_USERNAME,
    password: str = DEFAULT_PASSWORD,
    vcpu: int = DEFAULT_VCPU,
    ram_mb: int = DEFAULT_RAM_MB,
    connection_mode: str = VR_DEFAULT_CONN_MODE,
) -> Dict[str, str]:
    """Build the environment vrnetlab's launch.py reads its arguments from."""
    return {
        "USERNAME": username,
        "PASSWORD": password,
        "CONNECTION_MODE": connection_mode,
        "VCPU": str(vcpu),
        "RAM": str(ram_mb),
        "DOCKER_NET_V4_ADDR": mgmt.ipv4_subnet,
        "DOCKER_NET_V6_ADDR": mgmt.ipv6_subnet,
    }
