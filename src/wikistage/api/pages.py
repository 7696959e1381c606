"""Wiki page endpoints.

Handles viewing, editing and saving pages. Every page route is wrapped so the
request path is validated before the handler sees it; handlers receive an
already sanitized title and never parse URLs themselves.
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from urllib.parse import parse_qs

from aiohttp import web

from wikistage.app_keys import front_page_key, store_key, templates_key
from wikistage.core.page import Page
from wikistage.core.paths import match_path
from wikistage.core.templates import render_page
from wikistage.core.types import Action, Title

logger = logging.getLogger(__name__)

PageHandler = Callable[[web.Request, Title], Awaitable[web.StreamResponse]]


@dataclass(frozen=True)
class PageRoute:
    """A page handler and the HTTP methods it accepts."""

    handler: PageHandler
    methods: frozenset[str]


RouteTable = Mapping[Action, PageRoute]


async def view_page(request: web.Request, title: Title) -> web.StreamResponse:
    store = request.app[store_key]
    try:
        page = store.load(title)
    except OSError:
        raise web.HTTPFound(f"/edit/{title}") from None
    return render_page(request.app[templates_key], "view", page)


async def edit_page(request: web.Request, title: Title) -> web.StreamResponse:
    store = request.app[store_key]
    try:
        page = store.load(title)
    except OSError:
        # Missing page: start editing a new one
        page = Page(title=title)
    return render_page(request.app[templates_key], "edit", page)


async def read_body_field(request: web.Request) -> bytes:
    """Read the "body" form field as submitted bytes.

    URL-encoded forms are parsed from the raw request so percent-escaped
    bytes are kept exactly, whatever their encoding. A missing field is an
    empty body.
    """
    if request.content_type == "application/x-www-form-urlencoded":
        fields = parse_qs(await request.read(), keep_blank_values=True)
        return fields.get(b"body", [b""])[0]

    form = await request.post()
    body = form.get("body", "")
    if not isinstance(body, str):
        raise web.HTTPBadRequest(text="body must be a text field")
    return body.encode("utf-8")


async def save_page(request: web.Request, title: Title) -> web.StreamResponse:
    page = Page(title=title, body=await read_body_field(request))
    try:
        request.app[store_key].save(page)
    except OSError as e:
        logger.error(f"Failed to save page {title}: {e}")
        return web.Response(status=500, text=str(e))

    logger.info(f"Saved page {title}")
    raise web.HTTPFound(f"/view/{title}")


async def front_page(request: web.Request) -> web.StreamResponse:
    raise web.HTTPFound(f"/view/{request.app[front_page_key]}")


def create_page_routes() -> dict[Action, PageRoute]:
    """Build the route table mapping each action prefix to its handler."""
    read_methods = frozenset({"GET", "HEAD"})
    return {
        "view": PageRoute(view_page, read_methods),
        "edit": PageRoute(edit_page, read_methods),
        "save": PageRoute(save_page, frozenset({"POST"})),
    }


def make_handler(route: PageRoute) -> Callable[[web.Request], Awaitable[web.StreamResponse]]:
    """Wrap a page handler with path validation.

    Paths that fail validation get 404 regardless of method. Valid paths
    requested with a method the route does not accept get 405.
    """

    async def handler(request: web.Request) -> web.StreamResponse:
        match = match_path(request.path)
        if match is None:
            raise web.HTTPNotFound()
        if request.method not in route.methods:
            raise web.HTTPMethodNotAllowed(request.method, sorted(route.methods))
        return await route.handler(request, match.title)

    return handler


def register_page_routes(app: web.Application, routes: RouteTable) -> None:
    """Register the root redirect and every route in the table.

    Args:
        app: aiohttp application
        routes: Mapping from action prefix to page route
    """
    app.router.add_get("/", front_page)
    for action, route in routes.items():
        app.router.add_route("*", f"/{action}/{{title:.*}}", make_handler(route), name=action)
