"""Lab file configuration models."""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from labdriver.models.node import ManagementNetwork


class LabSettings(BaseModel):
    """Lab-wide settings."""
    log_level: str = Field(default="WARNING")
    lab_root: Optional[str] = Field(default=None, description="Defaults to ./clab-<lab name>")
    strict_render: bool = Field(default=False)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()


class NodeDefinition(BaseModel):
    """A node entry as written in the lab file."""
    kind: str = Field(..., description="Node kind name")
    image: str = Field(..., description="Container image reference")
    startup_config: str = Field(default="")
    env: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @field_validator("env", mode="before")
    @classmethod
    def stringify_env(cls, v):
        """YAML turns bare numbers into ints, environment values are strings."""
        if v is None:
            return {}
        return {str(key): str(value) for key, value in dict(v).items()}


class LabConfig(BaseModel):
    """Main lab file model."""
    name: str = Field(..., min_length=1)
    settings: LabSettings = Field(default_factory=LabSettings)
    mgmt: ManagementNetwork = Field(default_factory=ManagementNetwork)
    nodes: Dict[str, NodeDefinition] = Field(default_factory=dict)

    model_config = ConfigDict(extra="ignore")
