"""模型集合。"""

from .menu import MenuNode, MenuTreeIssue
from .permission import ApiPermission, ButtonPermission
from .route import CompiledRoutes, RouteMapEntry, RouteNode
from .session import SessionContext

__all__ = [
    "ApiPermission",
    "ButtonPermission",
    "CompiledRoutes",
    "MenuNode",
    "MenuTreeIssue",
    "RouteMapEntry",
    "RouteNode",
    "SessionContext",
]
