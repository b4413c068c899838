"""
チェッカー対局サーバのセットアップスクリプト
"""

from setuptools import setup, find_packages

setup(
    name="checkers-relay",
    version="1.0.0",
    description="チェッカー - ルール設定可能な対局エンジンとリアルタイム中継サーバ",
    author="",
    packages=find_packages(include=["src", "src.*"]),
    package_dir={"": "."},
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.118.0",
        "uvicorn[standard]>=0.37.0",
        "pydantic>=2.11.10",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "hypothesis>=6.0.0",
            "httpx>=0.27.0",
        ],
    },
)
