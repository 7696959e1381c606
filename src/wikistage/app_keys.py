"""Application keys for type-safe app configuration access."""

from aiohttp import web

from wikistage.core.page import PageStore
from wikistage.core.templates import Templates

store_key = web.AppKey("store", PageStore)
templates_key = web.AppKey("templates", Templates)
front_page_key = web.AppKey("front_page", str)
