"""
チェッカー対局サーバ
"""
