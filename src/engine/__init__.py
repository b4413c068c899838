"""
チェッカーのゲームエンジン - パッケージ初期化
"""

from .piece import Piece, Player, PieceType, PIECE_SYMBOLS, sign, is_king, forward_direction
from .board import Board, BOARD_SIZE, in_bounds, clone_board
from .move import Move, MoveType, MoveResult
from .rule_config import RuleConfig, MultiCapture, DEFAULT_RULES
from .game_state import GameState, MoveOutcome, MoveRejection
from .rules import Rules

__all__ = [
    'Piece',
    'Player',
    'PieceType',
    'PIECE_SYMBOLS',
    'sign',
    'is_king',
    'forward_direction',
    'Board',
    'BOARD_SIZE',
    'in_bounds',
    'clone_board',
    'Move',
    'MoveType',
    'MoveResult',
    'RuleConfig',
    'MultiCapture',
    'DEFAULT_RULES',
    'GameState',
    'MoveOutcome',
    'MoveRejection',
    'Rules',
]
