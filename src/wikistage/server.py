"""aiohttp server for Wikistage.

Application factory and route registration.
"""

import logging

from aiohttp import web

from wikistage.api.pages import create_page_routes, register_page_routes
from wikistage.app_keys import front_page_key, store_key, templates_key
from wikistage.config import Config
from wikistage.core.page import PageStore
from wikistage.core.templates import create_templates

logger = logging.getLogger(__name__)


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    Templates are compiled here, so a broken template prevents the
    application from being created at all.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application

    Raises:
        TemplateLoadError: If the view or edit template cannot be loaded
    """
    app = web.Application()

    app[templates_key] = create_templates(config.wiki.templates_dir)
    app[store_key] = PageStore(config.wiki.data_dir)
    app[front_page_key] = config.wiki.front_page

    register_page_routes(app, create_page_routes())

    return app


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    logger.info(f"Serving pages from {config.wiki.data_dir}")
    web.run_app(app, host=config.server.host, port=config.server.port)
