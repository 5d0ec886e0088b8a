"""控制台配置（通过 .env 覆盖）。"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# 优先加载项目根目录下的 .env
BASE_DIR = Path(__file__).resolve().parents[1]
load_dotenv(BASE_DIR / ".env")


def _to_int(value: str | None, default: int, *, minimum: int = 0) -> int:
    """安全解析整数环境变量。"""

    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= minimum else default


def _to_bool(value: str | None, default: bool = False) -> bool:
    """安全解析布尔环境变量。"""

    if value is None:
        return default
    return str(value).strip().lower() in {"1", "true", "on", "yes"}


def _to_path(value: str | None) -> Path | None:
    """解析可选文件路径，相对路径以项目根目录为基准。"""

    raw = str(value or "").strip()
    if not raw:
        return None
    path = Path(raw)
    return path if path.is_absolute() else BASE_DIR / path


APP_NAME = os.getenv("APP_NAME", "AdminConsole")
LOG_LEVEL = os.getenv("LOG_LEVEL", "info").upper()

PERMISSION_API_BASE_URL = os.getenv("PERMISSION_API_BASE_URL", "http://localhost:3000/api")
PERMISSION_API_TOKEN = os.getenv("PERMISSION_API_TOKEN", "")
PERMISSION_API_TIMEOUT_SECONDS = _to_int(os.getenv("PERMISSION_API_TIMEOUT_SECONDS"), 10, minimum=1)

# 菜单树编译前是否按 sort 字段重新稳定排序
MENU_TREE_RESORT = _to_bool(os.getenv("MENU_TREE_RESORT"), default=True)
COMPONENT_MANIFEST = _to_path(os.getenv("COMPONENT_MANIFEST"))
