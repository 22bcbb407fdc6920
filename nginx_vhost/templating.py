"""Jinja2-based renderer for vhost fragment templates."""

from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, PackageLoader, StrictUndefined, select_autoescape


def build_environment(template_dir: Optional[str] = None) -> Environment:
    """
    Build the Jinja2 environment.

    Args:
        template_dir: Directory overriding the packaged templates
    """
    if template_dir:
        loader = FileSystemLoader(template_dir)
    else:
        loader = PackageLoader("nginx_vhost", "templates")

    return Environment(
        loader=loader,
        autoescape=select_autoescape([]),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )


class TemplateRenderer:
    """
    Callable renderer handed to Concat resources.

    Example:
        render = TemplateRenderer()
        render("vhost_footer.conf.j2", {})
    """

    def __init__(self, template_dir: Optional[str] = None):
        self.env = build_environment(template_dir)

    def __call__(self, template: str, context: Dict[str, Any]) -> str:
        return self.env.get_template(template).render(**context)
