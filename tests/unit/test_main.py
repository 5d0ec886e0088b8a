from __future__ import annotations

import pytest

import main
from admin_console.exceptions import PermissionApiError
from admin_console.models import RouteNode
from tests.factories import FakePermissionApi


class _FakeClient(FakePermissionApi):
    """替换 PermissionApiClient，支持 async with。"""

    instances: list["_FakeClient"] = []

    def __init__(self, base_url: str) -> None:
        super().__init__(buttons={5: [{"code": "menu:add", "status": 1}, {"code": "menu:delete", "status": 0}]})
        self.base_url = base_url
        self.closed = False
        _FakeClient.instances.append(self)

    async def __aenter__(self) -> "_FakeClient":
        return self

    async def __aexit__(self, *_exc) -> None:
        self.closed = True


@pytest.fixture
def fake_client(monkeypatch):
    _FakeClient.instances = []
    monkeypatch.setattr(main, "PermissionApiClient", _FakeClient)
    monkeypatch.setattr(main, "COMPONENT_MANIFEST", None)
    return _FakeClient


@pytest.mark.unit
def test_main_prints_route_tree_and_button_codes(fake_client, capsys) -> None:
    exit_code = main.main(["--base-url", "http://api.test", "--role", "1", "--role", "2", "--menu-id", "5"])

    output = capsys.readouterr().out
    client = fake_client.instances[0]
    assert exit_code == 0
    assert client.base_url == "http://api.test"
    assert client.menu_tree_calls == [(1, 2)]
    assert client.closed is True
    assert "/rbac 权限管理 [redirect=/rbac/user]" in output
    assert "  /rbac/user 用户管理" in output
    assert "默认落地页: /home" in output
    assert "菜单 5 按钮权限: menu:add" in output


@pytest.mark.unit
def test_main_returns_error_code_when_menu_tree_fails(fake_client, monkeypatch) -> None:
    original_init = _FakeClient.__init__

    def failing_init(self, base_url: str) -> None:
        original_init(self, base_url)
        self.menu_tree_error = PermissionApiError("无法连接权限接口", "NETWORK_ERROR")

    monkeypatch.setattr(_FakeClient, "__init__", failing_init)

    assert main.main([]) == 1


@pytest.mark.unit
def test_render_routes_marks_hidden_routes() -> None:
    routes = (RouteNode(path="/a", name="/a", menu_id=1, title="A", visible=False),)

    assert main.render_routes(routes) == ["/a A [hidden]"]


@pytest.mark.unit
def test_parser_uses_configured_app_name(monkeypatch) -> None:
    monkeypatch.setattr(main, "APP_NAME", "OpsConsole")

    parser = main.build_parser()

    assert parser.prog == "OpsConsole"
    assert parser.description.startswith("OpsConsole ")
