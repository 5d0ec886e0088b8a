"""页面组件注册中心。

菜单中的 ``compPath`` 只是字符串引用，这里把引用映射到可延迟加载的视图对象。
"""

from __future__ import annotations

from dataclasses import dataclass
import importlib
import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ComponentHandle:
    """组件句柄：``target`` 形如 ``package.module:attr``，首次使用时才导入。"""

    reference: str
    target: str

    def load(self) -> Any:
        module_name, _, attr = self.target.partition(":")
        module = importlib.import_module(module_name)
        if not attr:
            return module
        return getattr(module, attr)


_components: dict[str, ComponentHandle] = {}


def _normalize_reference(reference: str) -> str:
    return str(reference or "").strip()


def _normalize_target(target: str) -> str:
    """校验导入目标格式，非法时返回空串。"""

    value = str(target or "").strip()
    module_name, sep, attr = value.partition(":")
    if not module_name.strip() or (sep and not attr.strip()):
        return ""
    return value


def register_component(reference: str, target: str) -> ComponentHandle:
    """注册组件引用。"""

    normalized_reference = _normalize_reference(reference)
    normalized_target = _normalize_target(target)
    if not normalized_reference:
        raise ValueError("组件引用不能为空")
    if not normalized_target:
        raise ValueError(f"组件导入目标非法: {target!r}")
    if normalized_reference in _components:
        raise ValueError(f"组件已注册: {normalized_reference}")

    handle = ComponentHandle(reference=normalized_reference, target=normalized_target)
    _components[handle.reference] = handle
    return handle


def resolve_component(reference: str) -> ComponentHandle | None:
    """按引用解析组件句柄，未注册时返回 None。"""

    return _components.get(_normalize_reference(reference))


def list_components() -> list[ComponentHandle]:
    """返回全部已注册组件。"""

    return list(_components.values())


def load_component_manifest(path: Path) -> int:
    """从 JSON 清单批量注册组件，返回新注册数量。

    清单格式为 ``{"/src/views/user/user.vue": "views.user:UserView"}``，
    非法条目与已注册条目会被跳过。
    """

    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.warning("组件清单读取失败: %s", path)
        return 0
    if not isinstance(payload, dict):
        logger.warning("组件清单格式错误，应为 JSON 对象: %s", path)
        return 0

    registered = 0
    for reference, target in payload.items():
        normalized_reference = _normalize_reference(reference)
        if not normalized_reference or normalized_reference in _components:
            continue
        if not isinstance(target, str) or not _normalize_target(target):
            logger.warning("忽略非法组件条目 reference=%s", normalized_reference)
            continue
        register_component(normalized_reference, target)
        registered += 1
    return registered


def reset_registry() -> None:
    """重置注册中心（主要用于测试）。"""

    _components.clear()
