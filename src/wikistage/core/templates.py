"""HTML template loading and page rendering.

Both page templates are compiled once when the application is created. A
missing or broken template stops startup instead of failing on first request.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import jinja2
from aiohttp import web

from wikistage.core.page import Page

logger = logging.getLogger(__name__)

TemplateName = Literal["view", "edit"]


class TemplateLoadError(Exception):
    """Raised when a page template cannot be found or compiled."""


@dataclass(frozen=True)
class Templates:
    """Compiled page templates, read-only after startup."""

    view: jinja2.Template
    edit: jinja2.Template

    def get(self, name: TemplateName) -> jinja2.Template:
        return self.view if name == "view" else self.edit


def create_loader(templates_dir: Path | None) -> jinja2.BaseLoader:
    """Create a template loader.

    Args:
        templates_dir: Directory with view.html and edit.html, or None
                       to use the templates bundled with the package

    Returns:
        Jinja2 loader
    """
    if templates_dir is None:
        return jinja2.PackageLoader("wikistage", "templates")
    return jinja2.FileSystemLoader(templates_dir)


def load_templates(env: jinja2.Environment) -> Templates:
    """Compile the view and edit templates.

    Raises:
        TemplateLoadError: If either template is missing or invalid
    """
    try:
        view = env.get_template("view.html")
        edit = env.get_template("edit.html")
    except jinja2.TemplateNotFound as e:
        raise TemplateLoadError(f"Template not found: {e.name}") from e
    except jinja2.TemplateSyntaxError as e:
        raise TemplateLoadError(
            f"Invalid template {e.name or e.filename}, line {e.lineno}: {e.message}"
        ) from e
    return Templates(view=view, edit=edit)


def create_templates(templates_dir: Path | None) -> Templates:
    """Build the Jinja2 environment and compile page templates.

    Args:
        templates_dir: Template override directory, None for bundled templates

    Returns:
        Compiled templates

    Raises:
        TemplateLoadError: If either template is missing or invalid
    """
    env = jinja2.Environment(
        loader=create_loader(templates_dir),
        autoescape=jinja2.select_autoescape(["html"]),
        undefined=jinja2.StrictUndefined,
    )
    return load_templates(env)


def render_page(templates: Templates, name: TemplateName, page: Page) -> web.Response:
    """Render a page with the named template.

    Returns:
        HTML response, or a 500 response carrying the error text if
        template execution fails
    """
    try:
        html = templates.get(name).render(page=page)
    except Exception as e:
        logger.error(f"Failed to render {name} template for {page.title}: {e}")
        return web.Response(status=500, text=str(e))
    return web.Response(text=html, content_type="text/html")
