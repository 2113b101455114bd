"""On-disk staging of node configuration."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from labdriver.errors import ConfigReadError
from labdriver.utils.templates import CONFIG_ENCODING, CONFIG_ERRORS, ConfigRenderer


logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = "config"
STARTUP_CONFIG_FILE = "startup-config.cfg"


@dataclass
class RenderWarning:
    """Non-fatal startup config rendering failure."""
    source: str
    destination: str
    error: Exception

    def __str__(self) -> str:
        return f"failed to generate config {self.destination} from {self.source}: {self.error}"


@dataclass
class StageResult:
    """Outcome of staging a node's configuration."""
    config_dir: Path
    rendered: Optional[Path] = None
    warnings: List[RenderWarning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when nothing went wrong, not even a warning."""
        return not self.warnings


def ensure_dirs(lab_dir: Union[str, Path]) -> Path:
    """Create the lab directory and its config subdirectory.

    Safe to call repeatedly. Returns the config directory.
    """
    lab_path = Path(lab_dir)
    config_dir = lab_path / CONFIG_DIR_NAME

    lab_path.mkdir(mode=0o777, parents=True, exist_ok=True)
    config_dir.mkdir(mode=0o777, exist_ok=True)

    return config_dir


def stage_startup_config(
    src_path: Union[str, Path, None],
    dest_path: Union[str, Path],
    renderer: ConfigRenderer,
    node_name: Optional[str] = None,
) -> StageResult:
    """Render the startup config template at ``src_path`` into ``dest_path``.

    A missing source is a no-op. An unreadable source raises ConfigReadError
    before anything is written. The source is decoded as UTF-8 with
    undecodable bytes carried through as surrogates, so content never makes
    the read fail. Renderer failures are logged and reported as warnings on
    the result.
    """
    dest = Path(dest_path)
    result = StageResult(config_dir=dest.parent)

    if not src_path:
        return result

    try:
        raw = Path(src_path).read_bytes()
    except OSError as e:
        raise ConfigReadError(src_path, e) from e

    template_text = raw.decode(CONFIG_ENCODING, errors=CONFIG_ERRORS)

    try:
        renderer.generate_config(dest, template_text)
    except Exception as e:
        logger.error(f"node={node_name or dest.parent.parent.name}, failed to generate config: {e}")
        result.warnings.append(RenderWarning(source=str(src_path), destination=str(dest), error=e))
    else:
        result.rendered = dest

    return result
