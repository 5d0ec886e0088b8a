from __future__ import annotations

import asyncio

import httpx
import pytest

from admin_console import navigation
from admin_console.exceptions import DuplicateMenuIdError, DuplicateRoutePathError, PermissionApiError
from admin_console.models import SessionContext
from admin_console.services import component_registry
from admin_console.services.permission_api import PermissionApiClient
from admin_console.services.permission_store import PermissionStore
from tests.factories import FakePermissionApi, menu, sample_menu_payload

SESSION = SessionContext(user_id=1, role_ids=(1,))


@pytest.mark.integration
@pytest.mark.asyncio
async def test_initialize_compiles_routes_and_landing_path(fake_api: FakePermissionApi) -> None:
    component_registry.register_component("/src/views/home/home.vue", "json:dumps")
    store = PermissionStore(fake_api)

    compiled = await store.initialize(SESSION)

    assert store.is_initialized is True
    assert fake_api.menu_tree_calls == [(1,)]
    assert compiled is store.compiled
    assert [route.path for route in store.route_tree] == ["/home", "/rbac", "/system"]
    assert store.route_map["/rbac"].jump_path == "/rbac/user"
    assert store.landing_path == "/home"
    assert store.route_tree[0].component is not None
    kinds = sorted({issue.kind for issue in compiled.issues})
    assert kinds == ["dead_leaf", "missing_component"]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_initialize_resorts_by_sort_key_when_enabled() -> None:
    api = FakePermissionApi(
        tree=[
            menu(1, "b", compPath="b.vue", sort=2),
            menu(2, "a", compPath="a.vue", sort=1),
            menu(3, "c", compPath="c.vue", sort=2),
        ]
    )

    resorted = PermissionStore(api, resolve_component=lambda _ref: object(), resort=True)
    authored = PermissionStore(api, resolve_component=lambda _ref: object(), resort=False)
    await resorted.initialize(SESSION)
    await authored.initialize(SESSION)

    assert [route.path for route in resorted.route_tree] == ["/a", "/b", "/c"]
    assert [route.path for route in authored.route_tree] == ["/b", "/a", "/c"]
    assert resorted.landing_path == "/a"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_landing_path_follows_group_redirect() -> None:
    api = FakePermissionApi(
        tree=[
            menu(1, "hidden", compPath="h.vue", visible=False),
            menu(2, "rbac", children=[menu(3, "user", compPath="u.vue")]),
        ]
    )
    store = PermissionStore(api, resolve_component=lambda _ref: object())

    await store.initialize(SESSION)

    assert store.landing_path == "/rbac/user"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_failed_initialize_keeps_previous_state(fake_api: FakePermissionApi) -> None:
    store = PermissionStore(fake_api, resolve_component=lambda _ref: object())
    await store.initialize(SESSION)
    previous = store.compiled

    fake_api.tree = [menu(1, "a", compPath="a.vue"), menu(2, "a", compPath="b.vue")]
    with pytest.raises(DuplicateRoutePathError):
        await store.initialize(SESSION)
    assert store.compiled is previous

    fake_api.tree = [menu(1, "a", compPath="a.vue"), menu(1, "b", compPath="b.vue")]
    with pytest.raises(DuplicateMenuIdError):
        await store.initialize(SESSION)
    assert store.compiled is previous

    fake_api.menu_tree_error = PermissionApiError("无法连接权限接口", "NETWORK_ERROR")
    with pytest.raises(PermissionApiError):
        await store.initialize(SESSION)
    assert store.compiled is previous
    assert store.is_initialized is True


@pytest.mark.integration
@pytest.mark.asyncio
async def test_gate_bound_to_active_menu_from_navigation(fake_api: FakePermissionApi) -> None:
    store = PermissionStore(fake_api, resolve_component=lambda _ref: object())
    await store.initialize(SESSION)

    nav = navigation.build_navigation_context("/rbac/user", store.compiled)
    gate = store.create_gate()
    other = store.create_gate()
    await asyncio.gather(gate.activate(nav["active_menu_id"]), other.activate(nav["active_menu_id"]))

    assert gate.has("user:add") is True
    assert gate.has("user:delete") is False
    assert other.has_all(["user:add", "user:edit"]) is True
    assert fake_api.button_calls == [3]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_clear_cache_after_permission_mutation(fake_api: FakePermissionApi) -> None:
    store = PermissionStore(fake_api)
    assert await store.get_button_permissions(5) == ["x"]

    fake_api.buttons[5] = [{"code": "x", "status": 1}, {"code": "y", "status": 1}]
    assert await store.get_button_permissions(5) == ["x"]

    store.clear_button_permissions_cache(5)
    assert await store.get_button_permissions(5) == ["x", "y"]
    assert fake_api.button_calls == [5, 5]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_reset_clears_routes_and_cache(fake_api: FakePermissionApi) -> None:
    store = PermissionStore(fake_api, resolve_component=lambda _ref: object())
    await store.initialize(SESSION)
    await store.get_button_permissions(3)

    store.reset()

    assert store.is_initialized is False
    assert store.route_tree == ()
    assert store.route_map == {}
    assert store.landing_path is None
    assert store.resolver.peek(3) is None


@pytest.mark.integration
@pytest.mark.asyncio
async def test_store_over_http_client_end_to_end() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        if request.url.path == "/api/menu/tree":
            return httpx.Response(200, json={"message": "success", "data": {"tree": sample_menu_payload()}})
        return httpx.Response(
            200,
            json={"message": "success", "data": [{"code": "x", "status": 1}, {"code": "y", "status": 0}]},
        )

    async with PermissionApiClient("http://console.test/api", transport=httpx.MockTransport(handler)) as api:
        store = PermissionStore(api, resolve_component=lambda _ref: object())
        await store.initialize(SESSION)
        results = await asyncio.gather(*(store.get_button_permissions(5) for _ in range(4)))

    assert results == [["x"]] * 4
    assert calls == ["/api/menu/tree", "/api/permission/button/menu/5"]
    assert store.route_map["/rbac"].title == "权限管理"
