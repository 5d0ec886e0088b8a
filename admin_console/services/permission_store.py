"""会话级权限状态：菜单树编译结果 + 按钮权限解析器。"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Iterable, Protocol

from admin_console.config import MENU_TREE_RESORT
from admin_console.models import ButtonPermission, CompiledRoutes, MenuNode, RouteMapEntry, RouteNode, SessionContext
from admin_console.services import menu_service, route_service
from admin_console.services.button_permission_service import ButtonPermissionResolver
from admin_console.services.permission_gate import ButtonPermissionGate
from admin_console.services.route_service import ComponentResolver

logger = logging.getLogger(__name__)


class PermissionApi(Protocol):
    def fetch_menu_tree(self, role_ids: Iterable[int] | None = None) -> Awaitable[list[MenuNode]]: ...

    def fetch_button_permissions(self, menu_id: int) -> Awaitable[list[ButtonPermission]]: ...


class PermissionStore:
    """一个登录会话对应一个实例，登出时调用 reset()。"""

    def __init__(
        self,
        api: PermissionApi,
        *,
        resolve_component: ComponentResolver | None = None,
        resort: bool = MENU_TREE_RESORT,
    ) -> None:
        self._api = api
        self._resolve_component = resolve_component
        self._resort = resort
        self.resolver = ButtonPermissionResolver(api.fetch_button_permissions)
        self._menu_tree: list[MenuNode] = []
        self._compiled = CompiledRoutes()
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def menu_tree(self) -> list[MenuNode]:
        return list(self._menu_tree)

    @property
    def compiled(self) -> CompiledRoutes:
        return self._compiled

    @property
    def route_tree(self) -> tuple[RouteNode, ...]:
        return self._compiled.routes

    @property
    def route_map(self) -> dict[str, RouteMapEntry]:
        return dict(self._compiled.route_map)

    @property
    def landing_path(self) -> str | None:
        """登录后默认跳转路径：第一个可见菜单（分组则取其重定向）。"""

        first = self._compiled.first_visible_path
        if first is None:
            return None
        entry = self._compiled.route_map.get(first)
        return entry.jump_path if entry else first

    async def initialize(self, session: SessionContext) -> CompiledRoutes:
        """拉取菜单树并编译路由。

        任一步骤失败都会原样抛出，已有状态保持不变。
        """

        tree = await self._api.fetch_menu_tree(session.role_ids)
        issues = menu_service.validate_menu_tree(tree)
        for issue in issues:
            logger.warning("菜单配置告警 kind=%s menu_id=%s: %s", issue.kind, issue.menu_id, issue.message)

        if self._resort:
            tree = menu_service.sort_menu_tree(tree)
        compiled = route_service.compile_routes(tree, "/", resolve_component=self._resolve_component)

        self._menu_tree = tree
        self._compiled = CompiledRoutes(
            routes=compiled.routes,
            route_map=compiled.route_map,
            first_visible_path=compiled.first_visible_path,
            issues=tuple(issues) + compiled.issues,
        )
        self._initialized = True
        logger.info(
            "权限初始化完成 user_id=%s roles=%s routes=%d paths=%d issues=%d",
            session.user_id,
            list(session.role_ids),
            len(compiled.routes),
            len(compiled.route_map),
            len(self._compiled.issues),
        )
        return self._compiled

    async def get_button_permissions(self, menu_id: int) -> list[str]:
        return await self.resolver.resolve(menu_id)

    def clear_button_permissions_cache(self, menu_id: int | None = None) -> None:
        """权限变更后调用，强制下次重新拉取。"""

        self.resolver.invalidate(menu_id)

    def create_gate(self, menu_id: Any = None) -> ButtonPermissionGate:
        return ButtonPermissionGate(self.resolver, menu_id)

    def reset(self) -> None:
        """重置权限状态（登出 / 切换会话）。"""

        self._initialized = False
        self._menu_tree = []
        self._compiled = CompiledRoutes()
        self.resolver.invalidate()
