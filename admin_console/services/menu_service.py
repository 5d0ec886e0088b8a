"""菜单树校验、排序与组装。"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from admin_console.exceptions import CyclicMenuReferenceError, DuplicateMenuIdError
from admin_console.models import MenuNode, MenuTreeIssue

logger = logging.getLogger(__name__)


def parse_menu_tree(payload: Iterable[Any]) -> list[MenuNode]:
    """将接口返回的原始菜单树转换为模型。"""

    return [item if isinstance(item, MenuNode) else MenuNode.model_validate(item) for item in payload]


def iter_menu_nodes(nodes: Iterable[MenuNode]) -> Iterable[MenuNode]:
    """深度优先（先序）遍历所有节点。"""

    for node in nodes:
        yield node
        if node.children:
            yield from iter_menu_nodes(node.children)


def validate_menu_tree(nodes: list[MenuNode]) -> list[MenuTreeIssue]:
    """校验菜单树。

    ID 重复属于结构错误，直接抛出；页面节点挂载子菜单只记录告警，不做修复。
    """

    seen: set[int] = set()
    issues: list[MenuTreeIssue] = []
    for node in iter_menu_nodes(nodes):
        if node.id in seen:
            raise DuplicateMenuIdError(node.id)
        seen.add(node.id)

        if node.is_leaf and node.children:
            issues.append(
                MenuTreeIssue(
                    menu_id=node.id,
                    path=node.path,
                    kind="leaf_with_children",
                    message=f"页面菜单 {node.id} 声明了 {len(node.children)} 个子菜单，子菜单不会参与路由",
                )
            )
    return issues


def sort_menu_tree(nodes: list[MenuNode]) -> list[MenuNode]:
    """按 sort 升序稳定排序每一层兄弟节点，返回新树。"""

    ordered = sorted(nodes, key=lambda item: item.sort)
    return [
        node.model_copy(update={"children": sort_menu_tree(node.children)}) if node.children else node
        for node in ordered
    ]


def flatten_menu_tree(nodes: list[MenuNode]) -> list[MenuNode]:
    """扁平化菜单树（去掉 children），用于菜单管理的增删改场景。"""

    return [node.model_copy(update={"children": []}) for node in iter_menu_nodes(nodes)]


def _find_cycle(start_id: int, parents: dict[int, int | None]) -> list[int] | None:
    """沿父级链向上查找环，返回成环的 ID 链。"""

    chain: list[int] = []
    visited: set[int] = set()
    current: int | None = start_id
    while current is not None and current in parents:
        if current in visited:
            return chain[chain.index(current):] + [current]
        visited.add(current)
        chain.append(current)
        current = parents[current]
    return None


def build_menu_tree(records: Iterable[Any]) -> tuple[list[MenuNode], list[MenuTreeIssue]]:
    """根据 parent_id 将扁平菜单记录组装为树，兄弟节点按 sort 稳定排序。

    父级不存在的记录会被丢弃并记录告警；父级链成环直接抛出结构错误。
    """

    flat = [node.model_copy(update={"children": []}) for node in parse_menu_tree(records)]

    by_id: dict[int, MenuNode] = {}
    for node in flat:
        if node.id in by_id:
            raise DuplicateMenuIdError(node.id)
        by_id[node.id] = node

    parents = {node.id: node.parent_id for node in flat}
    for node in flat:
        cycle = _find_cycle(node.id, parents)
        if cycle:
            raise CyclicMenuReferenceError(cycle)

    issues: list[MenuTreeIssue] = []
    children_map: dict[int | None, list[MenuNode]] = {}
    for node in flat:
        parent_id = node.parent_id
        if parent_id is not None and parent_id not in by_id:
            issues.append(
                MenuTreeIssue(
                    menu_id=node.id,
                    path=node.path,
                    kind="orphan_parent",
                    message=f"菜单 {node.id} 的父级 {parent_id} 不存在，已忽略",
                )
            )
            logger.warning("菜单父级不存在 menu_id=%s parent_id=%s", node.id, parent_id)
            continue
        children_map.setdefault(parent_id, []).append(node)

    def _assemble(parent_id: int | None) -> list[MenuNode]:
        siblings = sorted(children_map.get(parent_id, []), key=lambda item: item.sort)
        return [node.model_copy(update={"children": _assemble(node.id)}) for node in siblings]

    return _assemble(None), issues
