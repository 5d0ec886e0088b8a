"""路由树编译产物。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .menu import MenuTreeIssue


@dataclass(frozen=True, slots=True)
class RouteNode:
    """编译后的路由节点。"""

    path: str
    name: str
    menu_id: int
    title: str
    icon: str | None = None
    component_ref: str | None = None
    component: Any = None
    redirect: str | None = None
    visible: bool = True
    children: tuple[RouteNode, ...] = ()

    @property
    def jump_path(self) -> str:
        return self.redirect or self.path


@dataclass(frozen=True, slots=True)
class RouteMapEntry:
    """面包屑等场景使用的路径索引项。"""

    title: str
    jump_path: str


@dataclass(frozen=True, slots=True)
class CompiledRoutes:
    """一次完整编译的结果。"""

    routes: tuple[RouteNode, ...] = ()
    route_map: dict[str, RouteMapEntry] = field(default_factory=dict)
    first_visible_path: str | None = None
    issues: tuple[MenuTreeIssue, ...] = ()
