"""
サーバ設定（環境変数から読み込む）
"""

import os
from pathlib import Path


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


BASE_DIR = Path(__file__).resolve().parent.parent.parent

HOST = os.getenv("CHECKERS_HOST", "0.0.0.0")
PORT = int(os.getenv("CHECKERS_PORT", os.getenv("PORT", "8000")))
LOG_LEVEL = os.getenv("CHECKERS_LOG_LEVEL", "INFO").upper()

# 固定ルーム（CHECKERS_PIN_ROOM有効時はクライアント指定のルームIDを無視する）
FIXED_ROOM = os.getenv("CHECKERS_ROOM", "main")
PIN_ROOM = _env_flag("CHECKERS_PIN_ROOM", "1")

# ルールを変更できる席
RULES_OWNER_SEAT = os.getenv("CHECKERS_RULES_OWNER", "white").lower()

# CORS（本番環境では制限すべき）
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

FRONTEND_DIR = Path(os.getenv("CHECKERS_FRONTEND_DIR", str(BASE_DIR / "frontend")))
