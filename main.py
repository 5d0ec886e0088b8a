"""命令行入口：拉取菜单树并打印编译后的路由树与按钮权限。"""

from __future__ import annotations

import argparse
import asyncio
import logging

from admin_console.config import APP_NAME, COMPONENT_MANIFEST, LOG_LEVEL, PERMISSION_API_BASE_URL
from admin_console.exceptions import AdminConsoleError
from admin_console.models import RouteNode, SessionContext
from admin_console.services import component_registry
from admin_console.services.permission_api import PermissionApiClient
from admin_console.services.permission_store import PermissionStore

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=APP_NAME, description=f"{APP_NAME} 路由与按钮权限预览")
    parser.add_argument("--base-url", default=PERMISSION_API_BASE_URL, help="权限接口地址")
    parser.add_argument("--user-id", type=int, default=1, help="当前用户 ID")
    parser.add_argument("--role", dest="role_ids", type=int, action="append", default=[], help="角色 ID，可重复")
    parser.add_argument("--menu-id", type=int, default=None, help="同时打印该菜单的按钮权限")
    return parser


def render_routes(routes: tuple[RouteNode, ...], depth: int = 0) -> list[str]:
    """把路由树渲染为缩进文本。"""

    lines: list[str] = []
    for route in routes:
        flags: list[str] = []
        if not route.visible:
            flags.append("hidden")
        if route.redirect:
            flags.append(f"redirect={route.redirect}")
        if route.component_ref:
            flags.append(f"component={route.component_ref}")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        lines.append(f"{'  ' * depth}{route.path} {route.title}{suffix}")
        lines.extend(render_routes(route.children, depth + 1))
    return lines


async def run(args: argparse.Namespace) -> int:
    if COMPONENT_MANIFEST is not None:
        component_registry.load_component_manifest(COMPONENT_MANIFEST)

    session = SessionContext(user_id=args.user_id, role_ids=tuple(args.role_ids))
    async with PermissionApiClient(args.base_url) as api:
        store = PermissionStore(api)
        try:
            await store.initialize(session)
        except AdminConsoleError as exc:
            logger.error("菜单初始化失败 code=%s: %s", exc.code, exc.message)
            return 1

        for line in render_routes(store.route_tree):
            print(line)
        print(f"默认落地页: {store.landing_path or 'N/A'}")

        if args.menu_id is not None:
            try:
                codes = await store.get_button_permissions(args.menu_id)
            except AdminConsoleError as exc:
                logger.error("按钮权限加载失败 menu_id=%s code=%s: %s", args.menu_id, exc.code, exc.message)
                return 1
            print(f"菜单 {args.menu_id} 按钮权限: {', '.join(codes) or '(无)'}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """启动预览。"""

    args = build_parser().parse_args(argv)
    return asyncio.run(run(args))


if __name__ == "__main__":
    raise SystemExit(main())
