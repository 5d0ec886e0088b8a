"""菜单树 -> 路由树编译。"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from admin_console.exceptions import DuplicateRoutePathError
from admin_console.models import CompiledRoutes, MenuNode, MenuTreeIssue, RouteMapEntry, RouteNode
from admin_console.services import component_registry

logger = logging.getLogger(__name__)

ComponentResolver = Callable[[str], Any]

_MULTI_SLASH = re.compile(r"/{2,}")


def join_route_path(parent_path: str, segment: str) -> str:
    """拼接父路径与相对片段，保证片段之间恰好一个分隔符。"""

    parent = _MULTI_SLASH.sub("/", str(parent_path or "").strip()).rstrip("/")
    child = _MULTI_SLASH.sub("/", str(segment or "").strip()).strip("/")
    if not parent.startswith("/"):
        parent = f"/{parent}" if parent else ""
    if not child:
        return parent or "/"
    return f"{parent}/{child}"


@dataclass
class _CompileState:
    """单次编译共享的状态，编译成功前不会暴露给调用方。"""

    resolve_component: ComponentResolver
    route_map: dict[str, RouteMapEntry] = field(default_factory=dict)
    owners: dict[str, int] = field(default_factory=dict)
    issues: list[MenuTreeIssue] = field(default_factory=list)

    def report(self, node: MenuNode, path: str, kind: str, message: str) -> None:
        self.issues.append(MenuTreeIssue(menu_id=node.id, path=path, kind=kind, message=message))
        logger.warning("菜单配置告警 kind=%s menu_id=%s path=%s: %s", kind, node.id, path, message)


def _compile_level(
    nodes: Iterable[MenuNode],
    parent_path: str,
    state: _CompileState,
) -> tuple[list[RouteNode], str | None]:
    """编译一层兄弟节点，返回路由列表与本层第一个可见路径。"""

    routes: list[RouteNode] = []
    first_visible_path: str | None = None

    for node in nodes:
        route_path = join_route_path(parent_path, node.path)
        if route_path in state.owners:
            raise DuplicateRoutePathError(route_path, (state.owners[route_path], node.id))
        state.owners[route_path] = node.id

        visible = True if node.visible is None else bool(node.visible)
        component = None
        redirect: str | None = None
        children: list[RouteNode] = []

        if node.comp_path is not None:
            component = state.resolve_component(node.comp_path)
            if component is None:
                state.report(node, route_path, "missing_component", f"未找到组件: {node.comp_path}")
        elif node.children:
            children, child_first_visible = _compile_level(node.children, route_path, state)
            if child_first_visible is not None:
                redirect = child_first_visible
            else:
                # 没有可见子路由时隐藏分组
                visible = False
        else:
            state.report(node, route_path, "dead_leaf", "目录菜单既没有组件也没有子菜单")

        state.route_map[route_path] = RouteMapEntry(title=node.name, jump_path=redirect or route_path)

        if first_visible_path is None and visible:
            first_visible_path = route_path

        routes.append(
            RouteNode(
                path=route_path,
                name=route_path,
                menu_id=node.id,
                title=node.name,
                icon=node.icon,
                component_ref=node.comp_path,
                component=component,
                redirect=redirect,
                visible=visible,
                children=tuple(children),
            )
        )

    return routes, first_visible_path


def compile_routes(
    nodes: list[MenuNode],
    parent_path: str = "/",
    *,
    resolve_component: ComponentResolver | None = None,
) -> CompiledRoutes:
    """按输入顺序编译菜单树。

    路径冲突时整次编译失败，不返回任何部分结果。
    """

    state = _CompileState(resolve_component=resolve_component or component_registry.resolve_component)
    routes, first_visible_path = _compile_level(nodes, parent_path, state)
    logger.debug("路由编译完成 routes=%d paths=%d", len(routes), len(state.route_map))
    return CompiledRoutes(
        routes=tuple(routes),
        route_map=state.route_map,
        first_visible_path=first_visible_path,
        issues=tuple(state.issues),
    )


def iter_routes(routes: Iterable[RouteNode]) -> Iterable[RouteNode]:
    """先序遍历路由树。"""

    for route in routes:
        yield route
        if route.children:
            yield from iter_routes(route.children)


def find_route(routes: Iterable[RouteNode], path: str) -> RouteNode | None:
    """按绝对路径查找路由。"""

    target = join_route_path("/", path)
    return next((route for route in iter_routes(routes) if route.path == target), None)
