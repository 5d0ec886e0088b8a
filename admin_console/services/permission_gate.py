"""按钮级鉴权判断：绑定当前激活菜单，提供 has / has_any / has_all。"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from admin_console.exceptions import PermissionApiError
from admin_console.services.button_permission_service import ButtonPermissionResolver

logger = logging.getLogger(__name__)


class ButtonPermissionGate:
    """按钮权限门禁。

    在第一次成功解析之前以及解析失败之后，所有判断都返回 False。
    """

    def __init__(self, resolver: ButtonPermissionResolver, menu_id: int | None = None) -> None:
        self._resolver = resolver
        self._menu_id = menu_id
        self._codes: frozenset[str] = frozenset()
        self._inflight = 0
        self._generation = 0

    @property
    def menu_id(self) -> int | None:
        return self._menu_id

    @property
    def loading(self) -> bool:
        return self._inflight > 0

    @property
    def codes(self) -> frozenset[str]:
        return self._codes

    async def activate(self, menu_id: Any) -> bool:
        """切换到新的激活菜单并加载其按钮权限。"""

        self._menu_id = menu_id
        return await self.reload()

    async def reload(self) -> bool:
        """重新加载当前菜单的按钮权限，成功返回 True。"""

        self._generation += 1
        generation = self._generation
        menu_id = self._menu_id

        # bool 是 int 的子类，需单独排除
        if not isinstance(menu_id, int) or isinstance(menu_id, bool) or not menu_id:
            self._codes = frozenset()
            return False

        self._inflight += 1
        try:
            codes = await self._resolver.resolve(menu_id)
        except PermissionApiError as exc:
            logger.warning("加载按钮权限失败 menu_id=%s code=%s: %s", menu_id, exc.code, exc.message)
            if generation == self._generation:
                self._codes = frozenset()
            return False
        except Exception:
            logger.exception("加载按钮权限异常 menu_id=%s", menu_id)
            if generation == self._generation:
                self._codes = frozenset()
            return False
        finally:
            self._inflight -= 1

        if generation != self._generation:
            # 期间已切换菜单，丢弃过期结果
            return False
        self._codes = frozenset(codes)
        return True

    def has(self, code: str) -> bool:
        return code in self._codes

    def has_any(self, codes: Iterable[str]) -> bool:
        return any(code in self._codes for code in codes)

    def has_all(self, codes: Iterable[str]) -> bool:
        return all(code in self._codes for code in codes)
