"""Node specification models."""

import ipaddress
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ManagementNetwork(BaseModel):
    """Management network the lab nodes are attached to."""
    network: str = Field(default="clab", description="Docker network name")
    ipv4_subnet: str = Field(default="172.20.20.0/24")
    ipv6_subnet: str = Field(default="2001:172:20:20::/64")

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("ipv4_subnet", "ipv6_subnet")
    @classmethod
    def validate_subnet(cls, v, info):
        """Validate subnet strings, an empty value disables the family."""
        if not v:
            return v
        version = 4 if info.field_name == "ipv4_subnet" else 6
        net = ipaddress.ip_network(v, strict=False)
        if net.version != version:
            raise ValueError(f"Expected an IPv{version} subnet, got {v}")
        return str(net)


class HostRequirements(BaseModel):
    """Host capabilities a node needs in order to run."""
    virt_required: bool = Field(default=False, description="Hardware virtualization (KVM)")


class NodeSpec(BaseModel):
    """Per-instance node configuration.

    Built by the orchestrator and handed to a node driver, which fills in
    the launch environment, binds and command line during ``init``.
    """
    kind: str = Field(default="", description="Node kind name")
    image: str = Field(..., description="Container image reference")
    short_name: str = Field(..., description="Node name inside the lab")
    long_name: str = Field(default="", description="Container name")
    lab_dir: str = Field(..., description="Per-node working directory")
    startup_config: str = Field(default="", description="Startup config template path")
    env: Dict[str, str] = Field(default_factory=dict)
    binds: List[str] = Field(default_factory=list)
    cmd: str = Field(default="")
    host_requirements: HostRequirements = Field(default_factory=HostRequirements)

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    @field_validator("short_name")
    @classmethod
    def validate_short_name(cls, v):
        """Node names end up in hostnames and container names."""
        if not v or any(c.isspace() for c in v):
            raise ValueError(f"Invalid node name: {v!r}")
        return v

    def model_post_init(self, __context):
        if not self.long_name:
            self.long_name = self.short_name
