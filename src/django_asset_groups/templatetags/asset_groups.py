"""Template tags rendering asset groups.

Usage::

    {% load asset_groups %}
    {% enable_assets "admin" %}
    <head>{% render_css %}</head>
    <body>... {% render_js "site" %}</body>

Tags use ``request.asset_manager`` when the middleware is installed and
otherwise keep one manager per template context.
"""

from __future__ import annotations

from typing import Any

from django import template
from django.utils.safestring import SafeString, mark_safe

from ..manager import AssetManager

register = template.Library()

_CONTEXT_KEY = "_asset_groups_manager"


def get_manager(context: template.Context) -> AssetManager:
    request = context.get("request")
    manager = getattr(request, "asset_manager", None)
    if manager is not None:
        return manager  # type: ignore[no-any-return]
    root = context.dicts[0]
    manager = root.get(_CONTEXT_KEY)
    if manager is None:
        manager = root[_CONTEXT_KEY] = AssetManager.from_settings()
    return manager  # type: ignore[no-any-return]


@register.simple_tag(takes_context=True)
def render_assets(context: template.Context, group_name: str | None = None, kind: Any = None) -> SafeString:
    return mark_safe(get_manager(context).render(group_name, kind))  # noqa: S308


@register.simple_tag(takes_context=True)
def render_css(context: template.Context, group_name: str | None = None) -> SafeString:
    return mark_safe(get_manager(context).render_css(group_name))  # noqa: S308


@register.simple_tag(takes_context=True)
def render_js(context: template.Context, group_name: str | None = None) -> SafeString:
    return mark_safe(get_manager(context).render_js(group_name))  # noqa: S308


@register.simple_tag(takes_context=True)
def enable_assets(context: template.Context, group_name: str, kind: Any = None) -> str:
    get_manager(context).enable(group_name, kind)
    return ""


@register.simple_tag(takes_context=True)
def disable_assets(context: template.Context, group_name: str, kind: Any = None) -> str:
    get_manager(context).disable(group_name, kind)
    return ""
