"""菜单树模型。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MenuIssueKind = Literal["missing_component", "dead_leaf", "leaf_with_children", "orphan_parent"]


class MenuNode(BaseModel):
    """菜单节点：既是导航单元，也是按钮权限的归属单元。

    ``comp_path`` 非空表示页面（叶子），为空表示目录（分组）。
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: int
    path: str = Field(..., min_length=1)
    name: str = ""
    icon: str | None = None
    comp_path: str | None = None
    parent_id: int | None = None
    sort: int = 0
    status: Literal[0, 1] = 1
    visible: bool | None = None
    children: list[MenuNode] = Field(default_factory=list)
    button_permission_codes: list[str] = Field(default_factory=list)
    api_permission_codes: list[str] = Field(default_factory=list)
    create_time: str | None = None
    update_time: str | None = None

    @field_validator("path", mode="before")
    @classmethod
    def _strip_path(cls, value: Any) -> Any:
        # 仅保留相对片段，前后分隔符在拼接路径时统一处理
        if isinstance(value, str):
            return value.strip().strip("/")
        return value

    @field_validator("icon", "comp_path", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("children", "button_permission_codes", "api_permission_codes", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def is_leaf(self) -> bool:
        return self.comp_path is not None

    @property
    def is_enabled(self) -> bool:
        return self.status == 1


MenuNode.model_rebuild()


@dataclass(frozen=True, slots=True)
class MenuTreeIssue:
    """菜单树告警项：节点仍会编译，但需要提示配置人员。"""

    menu_id: int
    path: str
    kind: MenuIssueKind
    message: str
