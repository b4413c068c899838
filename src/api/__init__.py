"""
チェッカー対局サーバのAPI層（FastAPI + WebSocket中継）
"""
