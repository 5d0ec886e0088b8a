"""控制台权限引擎异常定义。

结构性错误（菜单树本身不可用）继承 ``MenuTreeError``，调用方必须放弃整棵树；
接口请求失败统一抛出 ``PermissionApiError``，由 UI 层按“无权限”处理。
"""

from __future__ import annotations

from typing import Any


class AdminConsoleError(Exception):
    """权限引擎异常基类。"""

    message: str = "权限引擎内部错误"
    code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = details or {}
        super().__init__(self.message)


class MenuTreeError(AdminConsoleError, ValueError):
    """菜单树结构错误，整棵树编译失败。"""

    message = "菜单树结构非法"
    code = "MENU_TREE_ERROR"


class DuplicateMenuIdError(MenuTreeError):
    code = "DUPLICATE_MENU_ID"

    def __init__(self, menu_id: int) -> None:
        super().__init__(f"菜单 ID 重复: {menu_id}", details={"menu_id": menu_id})
        self.menu_id = menu_id


class DuplicateRoutePathError(MenuTreeError):
    code = "DUPLICATE_ROUTE_PATH"

    def __init__(self, path: str, menu_ids: tuple[int, int]) -> None:
        super().__init__(
            f"路由路径冲突: {path} (菜单 {menu_ids[0]} 与 {menu_ids[1]})",
            details={"path": path, "menu_ids": list(menu_ids)},
        )
        self.path = path
        self.menu_ids = menu_ids


class CyclicMenuReferenceError(MenuTreeError):
    code = "CYCLIC_MENU_REFERENCE"

    def __init__(self, chain: list[int]) -> None:
        rendered = " -> ".join(str(item) for item in chain)
        super().__init__(f"菜单父级引用成环: {rendered}", details={"chain": list(chain)})
        self.chain = list(chain)


class PermissionApiError(AdminConsoleError):
    """权限接口请求失败（网络、超时、HTTP 错误或响应格式异常）。"""

    message = "权限接口请求失败"
    code = "HTTP_ERROR"

    def __init__(
        self,
        message: str | None = None,
        code: str | None = None,
        *,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)
        self.status_code = status_code
