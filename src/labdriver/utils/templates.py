"""Startup configuration rendering."""

import logging
from pathlib import Path
from typing import Any, Optional, Protocol, Union

from jinja2 import BaseLoader, Environment, StrictUndefined, TemplateError

from labdriver.models.node import NodeSpec


logger = logging.getLogger(__name__)

# Config text is decoded and re-encoded with these so arbitrary bytes round-trip
CONFIG_ENCODING = "utf-8"
CONFIG_ERRORS = "surrogateescape"


class StringTemplateLoader(BaseLoader):
    """Template loader for string templates."""

    def __init__(self, template_string: str):
        self.template_string = template_string

    def get_source(self, environment, template):
        return self.template_string, None, lambda: True


class ConfigRenderer(Protocol):
    """Anything that can turn a config template into a file on disk."""

    def generate_config(self, dest_path: Union[str, Path], template_text: str) -> None:
        ...


def render_template(template_str: str, **context: Any) -> str:
    """Render a Jinja2 template string with given context."""
    try:
        env = Environment(
            loader=StringTemplateLoader(template_str),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        template = env.get_template("")
        return template.render(**context)

    except TemplateError as e:
        logger.error(f"Template rendering error: {e}")
        raise


class JinjaConfigRenderer:
    """Default renderer: Jinja2 template in, rendered config file out.

    The node spec given at construction is exposed both as ``node`` and as
    its individual fields, so templates can use ``{{ short_name }}`` or
    ``{{ node.env.USERNAME }}``.
    """

    def __init__(self, node: Optional[NodeSpec] = None, **context: Any):
        self.node = node
        self.context = context

    def generate_config(self, dest_path: Union[str, Path], template_text: str) -> None:
        dest = Path(dest_path)

        variables = {}
        if self.node is not None:
            variables.update(self.node.model_dump())
            variables["node"] = self.node
        variables.update(self.context)

        content = render_template(template_text, **variables)

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(content, encoding=CONFIG_ENCODING, errors=CONFIG_ERRORS)
        logger.debug(f"Rendered config {dest}")
