"""按钮权限解析：按菜单缓存，并对同一菜单的并发请求去重。"""

from __future__ import annotations

import asyncio
from functools import partial
import logging
from typing import Any, Awaitable, Callable, Iterable

from admin_console.models import ButtonPermission

logger = logging.getLogger(__name__)

ButtonPermissionFetcher = Callable[[int], Awaitable[Iterable[Any]]]


def _read_field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def extract_enabled_codes(records: Iterable[ButtonPermission | dict[str, Any]]) -> tuple[str, ...]:
    """只保留启用状态的按钮权限，投影为 code 并保序去重。"""

    codes: list[str] = []
    for item in records or []:
        if _read_field(item, "status") != 1:
            continue
        code = str(_read_field(item, "code") or "").strip()
        if not code or code in codes:
            continue
        codes.append(code)
    return tuple(codes)


class ButtonPermissionResolver:
    """按钮权限解析器（每个会话一个实例）。

    ``_cache`` 只保存成功结果；``_pending`` 保存进行中的请求，
    同一菜单 ID 同一时刻最多只有一个底层请求。
    """

    def __init__(self, fetch_button_permissions: ButtonPermissionFetcher) -> None:
        self._fetch = fetch_button_permissions
        self._cache: dict[int, tuple[str, ...]] = {}
        self._pending: dict[int, asyncio.Task[tuple[str, ...]]] = {}

    async def resolve(self, menu_id: int) -> list[str]:
        """返回菜单的启用按钮权限 code 列表。"""

        cached = self._cache.get(menu_id)
        if cached is not None:
            return list(cached)

        task = self._pending.get(menu_id)
        if task is None:
            task = asyncio.get_running_loop().create_task(self._load(menu_id))
            self._pending[menu_id] = task
            task.add_done_callback(partial(self._settle, menu_id))

        # 调用方放弃等待时不取消共享请求
        codes = await asyncio.shield(task)
        return list(codes)

    async def _load(self, menu_id: int) -> tuple[str, ...]:
        records = await self._fetch(menu_id)
        return extract_enabled_codes(records)

    def _settle(self, menu_id: int, task: asyncio.Task[tuple[str, ...]]) -> None:
        """请求结束后的收尾：无论成败都移除 pending，成功时写缓存。"""

        if self._pending.get(menu_id) is not task:
            # 请求期间已被 invalidate，结果不入缓存
            if not task.cancelled():
                task.exception()
            return

        del self._pending[menu_id]
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning("按钮权限加载失败 menu_id=%s: %s", menu_id, error)
            return
        self._cache[menu_id] = task.result()

    def peek(self, menu_id: int) -> list[str] | None:
        """同步读取缓存，不触发请求。"""

        cached = self._cache.get(menu_id)
        return None if cached is None else list(cached)

    def is_pending(self, menu_id: int) -> bool:
        return menu_id in self._pending

    def invalidate(self, menu_id: int | None = None) -> None:
        """清除缓存：指定菜单 ID 时只清该菜单，否则全部清空。"""

        if menu_id is not None:
            self._cache.pop(menu_id, None)
            self._pending.pop(menu_id, None)
            return
        self._cache.clear()
        self._pending.clear()
