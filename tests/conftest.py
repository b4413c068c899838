"""
pytest共通設定とフィクスチャ
"""

import pytest
import sys
from pathlib import Path

# プロジェクトルートをパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture
def empty_board():
    """空の盤面を提供するフィクスチャ"""
    from src.engine import Board
    return Board()


@pytest.fixture
def initial_board():
    """標準の初期配置の盤面を提供するフィクスチャ"""
    from src.engine.initial_setup import load_initial_board
    return load_initial_board()


@pytest.fixture
def initial_state():
    """対局開始時の状態を提供するフィクスチャ"""
    from src.engine.initial_setup import create_initial_state
    return create_initial_state()


@pytest.fixture
def default_rules():
    """既定のルール設定を提供するフィクスチャ"""
    from src.engine import RuleConfig
    return RuleConfig()


@pytest.fixture
def short_king_rules():
    """キングが1マスずつしか動けないルールを提供するフィクスチャ"""
    from src.engine import RuleConfig
    return RuleConfig(flying_king_move=False, flying_king_capture=False)


@pytest.fixture
def no_penalty_rules():
    """取り逃しのペナルティがないルールを提供するフィクスチャ"""
    from src.engine import RuleConfig
    return RuleConfig(skip_capture_penalty_remove_moved=False)


@pytest.fixture
def white_player():
    """白プレイヤーを提供するフィクスチャ"""
    from src.engine import Player
    return Player.WHITE


@pytest.fixture
def black_player():
    """黒プレイヤーを提供するフィクスチャ"""
    from src.engine import Player
    return Player.BLACK


@pytest.fixture
def make_state():
    """盤面テキストから状態を作るフィクスチャ"""
    from src.engine import GameState, Player, RuleConfig
    from src.engine.initial_setup import load_board_from_text

    def _make_state(text, turn=Player.WHITE, rules=None):
        return GameState(
            board=load_board_from_text(text),
            turn=turn,
            rules=rules if rules is not None else RuleConfig(),
        )

    return _make_state
