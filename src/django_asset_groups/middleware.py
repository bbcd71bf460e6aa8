"""Middleware giving every request its own AssetManager render pass."""

from __future__ import annotations

import logging
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from .cache import BuildCache
from .conf import get_manager_config, get_setting
from .manager import AssetManager, create_registry
from .utils import get_storage

logger = logging.getLogger(__name__)


class AssetGroupsMiddleware:
    """Attach a fresh AssetManager to ``request.asset_manager``.

    Render state is therefore scoped to one request. The filter registry and
    build cache are created once with the middleware and shared by all
    requests, so filters are built once and concurrent builds of the same
    artifact collapse into one.

    With ``AUTO_INJECT`` enabled, groups the templates did not render are
    injected into HTML responses: stylesheet tags before ``</head>`` and
    script tags before ``</body>``.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response
        self.build_cache = BuildCache(get_storage())
        self.registry = create_registry(get_manager_config())

    def create_manager(self) -> AssetManager:
        return AssetManager.from_settings(
            registry=self.registry, build_cache=self.build_cache
        )

    def __call__(self, request: HttpRequest) -> HttpResponse:
        manager = self.create_manager()
        request.asset_manager = manager  # type: ignore[attr-defined]

        response = self.get_response(request)

        if not get_setting("AUTO_INJECT"):
            return response
        content_type = response.get("Content-Type", "")
        if "text/html" not in content_type or getattr(response, "streaming", False):
            return response

        charset = response.charset or "utf-8"
        content = response.content.decode(charset)
        injected = inject_tags(content, manager)
        if injected == content:
            return response
        logger.debug("Injected asset tags into %s", request.path)
        response.content = injected.encode(charset)
        response["Content-Length"] = len(response.content)
        return response


def inject_tags(html: str, manager: AssetManager) -> str:
    """Insert the tags of not-yet-rendered groups into an HTML document."""
    if "</head>" in html:
        css = manager.render_css()
        if css:
            html = html.replace("</head>", f"{css}\n</head>", 1)
    if "</body>" in html:
        js = manager.render_js()
        if js:
            html = html.replace("</body>", f"{js}\n</body>", 1)
    return html
