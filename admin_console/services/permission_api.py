"""权限接口客户端（菜单树、按钮权限、API 权限）。

只负责一次请求与响应解包；重试、令牌刷新由外部传输层处理。
接口统一返回 ``{"message": "...", "data": ...}`` 包装。
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

import httpx
from pydantic import ValidationError

from admin_console.config import PERMISSION_API_BASE_URL, PERMISSION_API_TIMEOUT_SECONDS, PERMISSION_API_TOKEN
from admin_console.exceptions import PermissionApiError
from admin_console.models import ApiPermission, ButtonPermission, MenuNode

logger = logging.getLogger(__name__)


class PermissionApiClient:
    """基于 httpx.AsyncClient 的权限接口客户端。"""

    def __init__(
        self,
        base_url: str = PERMISSION_API_BASE_URL,
        *,
        token: str = PERMISSION_API_TOKEN,
        timeout_seconds: float = PERMISSION_API_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> PermissionApiClient:
        return self

    async def __aexit__(self, *_exc: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_data(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """发起 GET 请求并返回包装中的 data 字段。"""

        try:
            response = await self._client.get(path, params=params)
        except httpx.TimeoutException as exc:
            raise PermissionApiError("权限接口请求超时", "TIMEOUT_ERROR", details={"path": path}) from exc
        except httpx.HTTPError as exc:
            raise PermissionApiError(f"无法连接权限接口: {exc}", "NETWORK_ERROR", details={"path": path}) from exc

        payload = _safe_json(response)
        if response.status_code >= 400:
            message = payload.get("message") if isinstance(payload, dict) else None
            raise PermissionApiError(
                str(message or response.reason_phrase or "权限接口返回错误"),
                "HTTP_ERROR",
                status_code=response.status_code,
                details={"path": path},
            )
        if not isinstance(payload, dict) or "data" not in payload:
            raise PermissionApiError(
                "权限接口响应格式错误",
                "INVALID_RESPONSE",
                status_code=response.status_code,
                details={"path": path},
            )

        data = payload.get("data")
        if data is None:
            raise PermissionApiError(
                str(payload.get("message") or "权限接口未返回数据"),
                "EMPTY_RESPONSE",
                status_code=response.status_code,
                details={"path": path},
            )
        return data

    async def fetch_menu_tree(self, role_ids: Iterable[int] | None = None) -> list[MenuNode]:
        """获取当前会话角色可见的菜单树（服务端按角色过滤）。"""

        params: dict[str, Any] = {}
        normalized_roles = [str(int(role_id)) for role_id in role_ids or []]
        if normalized_roles:
            params["roleIds"] = ",".join(normalized_roles)

        data = await self._get_data("/menu/tree", params=params or None)
        tree = data.get("tree") if isinstance(data, dict) else None
        if not isinstance(tree, list):
            raise PermissionApiError("菜单树响应缺少 tree 字段", "INVALID_RESPONSE", details={"path": "/menu/tree"})
        nodes = _validate_list(MenuNode, tree, "/menu/tree")
        logger.debug("获取菜单树成功 roots=%d", len(nodes))
        return nodes

    async def fetch_menu_detail(self, menu_id: int) -> MenuNode:
        path = f"/menu/{menu_id}"
        data = await self._get_data(path)
        try:
            return MenuNode.model_validate(data)
        except ValidationError as exc:
            raise PermissionApiError("菜单详情格式错误", "INVALID_RESPONSE", details={"path": path}) from exc

    async def fetch_button_permissions(self, menu_id: int) -> list[ButtonPermission]:
        """获取菜单下的全部按钮权限（包含禁用项）。"""

        path = f"/permission/button/menu/{menu_id}"
        return _validate_list(ButtonPermission, await self._get_data(path), path)

    async def fetch_api_permissions(self) -> list[ApiPermission]:
        path = "/permission/list"
        return _validate_list(ApiPermission, await self._get_data(path), path)


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _validate_list(model: Any, data: Any, path: str) -> list[Any]:
    if not isinstance(data, list):
        raise PermissionApiError("权限接口响应应为列表", "INVALID_RESPONSE", details={"path": path})
    try:
        return [model.model_validate(item) for item in data]
    except ValidationError as exc:
        raise PermissionApiError(f"权限接口数据校验失败: {path}", "INVALID_RESPONSE", details={"path": path}) from exc
