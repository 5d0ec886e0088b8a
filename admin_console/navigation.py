"""侧边菜单与面包屑解析。"""

from __future__ import annotations

from typing import Any

from admin_console.models import CompiledRoutes, RouteNode
from admin_console.services.route_service import iter_routes

DEFAULT_GROUP_ICON = "Folder"
DEFAULT_ITEM_ICON = "Document"


def _normalize_path(path: str) -> str:
    """统一路径格式，避免尾斜杠影响匹配。"""

    normalized = str(path or "").strip()
    if not normalized.startswith("/"):
        normalized = f"/{normalized}" if normalized else "/"
    normalized = normalized.rstrip("/")
    return normalized or "/"


def _normalize_icon(raw_icon: Any, default_icon: str) -> str:
    """规范化图标名，空值时回退默认图标。"""

    icon = str(raw_icon or "").strip()
    return icon if icon else default_icon


def _match_prefix_length(path: str, prefix: str) -> int:
    """返回前缀匹配长度，未命中时返回 -1。"""

    normalized_path = _normalize_path(path)
    normalized_prefix = _normalize_path(prefix)
    if normalized_path == normalized_prefix or normalized_path.startswith(f"{normalized_prefix}/"):
        return len(normalized_prefix)
    return -1


def match_route(path: str, routes: tuple[RouteNode, ...]) -> RouteNode | None:
    """按最长前缀匹配当前路径对应的路由（隐藏路由同样参与匹配）。"""

    matched: RouteNode | None = None
    matched_length = -1
    for route in iter_routes(routes):
        length = _match_prefix_length(path, route.path)
        if length > matched_length:
            matched_length = length
            matched = route
    return matched


def _ancestor_paths(path: str) -> list[str]:
    """'/a/b/c' -> ['/a', '/a/b', '/a/b/c']。"""

    parts = [part for part in _normalize_path(path).split("/") if part]
    return ["/" + "/".join(parts[: index + 1]) for index in range(len(parts))]


def _build_menu_items(routes: tuple[RouteNode, ...], active_path: str | None) -> list[dict[str, Any]]:
    items: list[dict[str, Any]] = []
    for route in routes:
        if not route.visible:
            continue
        is_group = route.component_ref is None and bool(route.children)
        active = active_path is not None and _match_prefix_length(active_path, route.path) >= 0
        items.append(
            {
                "menu_id": route.menu_id,
                "path": route.path,
                "title": route.title,
                "icon": _normalize_icon(route.icon, DEFAULT_GROUP_ICON if is_group else DEFAULT_ITEM_ICON),
                "jump_path": route.jump_path,
                "active": active,
                "children": _build_menu_items(route.children, active_path) if is_group else [],
            }
        )
    return items


def _collect_open_groups(items: list[dict[str, Any]], menu_open: dict[str, bool]) -> None:
    for item in items:
        if item["children"]:
            menu_open[item["path"]] = bool(item["active"])
            _collect_open_groups(item["children"], menu_open)


def build_navigation_context(path: str, compiled: CompiledRoutes) -> dict[str, Any]:
    """按当前路径构建侧边菜单与面包屑上下文。"""

    matched = match_route(path, compiled.routes)
    active_path = matched.path if matched else None

    menus = _build_menu_items(compiled.routes, active_path)
    menu_open: dict[str, bool] = {}
    _collect_open_groups(menus, menu_open)

    breadcrumbs: list[dict[str, str]] = []
    if active_path:
        for ancestor in _ancestor_paths(active_path):
            entry = compiled.route_map.get(ancestor)
            if entry is None:
                continue
            breadcrumbs.append({"path": ancestor, "title": entry.title, "jump_path": entry.jump_path})

    home: str | None = None
    if compiled.first_visible_path:
        entry = compiled.route_map.get(compiled.first_visible_path)
        home = entry.jump_path if entry else compiled.first_visible_path

    return {
        "home": home,
        "menus": menus,
        "menu_open": menu_open,
        "active_path": active_path,
        "active_menu_id": matched.menu_id if matched else None,
        "breadcrumbs": breadcrumbs,
        "breadcrumb_title": breadcrumbs[-1]["title"] if breadcrumbs else "",
    }
