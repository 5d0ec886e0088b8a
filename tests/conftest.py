"""测试公共 fixture。"""

from __future__ import annotations

import pytest

from admin_console.services import component_registry
from tests.factories import FakePermissionApi


@pytest.fixture(autouse=True)
def clean_component_registry():
    component_registry.reset_registry()
    yield
    component_registry.reset_registry()


@pytest.fixture
def fake_api() -> FakePermissionApi:
    return FakePermissionApi(
        buttons={
            3: [
                {"code": "user:add", "name": "新增用户", "status": 1},
                {"code": "user:edit", "name": "编辑用户", "status": 1},
                {"code": "user:delete", "name": "删除用户", "status": 0},
            ],
            5: [
                {"code": "x", "status": 1},
                {"code": "y", "status": 0},
            ],
        }
    )
