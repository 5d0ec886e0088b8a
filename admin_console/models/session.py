"""会话上下文。"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SessionContext:
    """登录后得到的用户身份与角色集合，由调用方显式传入。"""

    user_id: int
    role_ids: tuple[int, ...] = ()
