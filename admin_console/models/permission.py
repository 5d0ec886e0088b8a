"""按钮权限与 API 权限模型。"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ButtonPermission(BaseModel):
    """按钮权限条目（按菜单归属，code 全局唯一）。"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    code: str
    name: str = ""
    status: Literal[0, 1] = 1
    id: int | None = None
    menu_id: int | None = None

    @property
    def is_enabled(self) -> bool:
        return self.status == 1


class ApiPermission(BaseModel):
    """API 权限条目，例如 ``GET:/api/user/list``。"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    code: str
    name: str = ""
    method: str = "GET"
