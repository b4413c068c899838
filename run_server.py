#!/usr/bin/env python
"""
チェッカー 開発サーバ起動スクリプト
"""

import sys
import os

# プロジェクトルートをパスに追加
project_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, project_root)

# appを直接インポート
from src.api import config
from src.api.main import app
import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("チェッカー 対局サーバを起動します")
    print("=" * 60)
    print(f"APIサーバ: http://localhost:{config.PORT}")
    print(f"API ドキュメント: http://localhost:{config.PORT}/docs")
    print(f"WebSocket: ws://localhost:{config.PORT}/ws (ルーム: {config.FIXED_ROOM})")
    print("=" * 60)
    print()

    # appオブジェクトを直接渡す
    uvicorn.run(
        app,
        host=config.HOST,
        port=config.PORT,
        reload=False,  # Windowsでは問題が出やすいのでオフ
        log_level=config.LOG_LEVEL.lower()
    )
