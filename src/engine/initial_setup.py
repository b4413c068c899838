"""
初期盤面の設定とユーティリティ
"""

from typing import Optional
from .board import Board, BOARD_SIZE, is_playable_square
from .game_state import GameState
from .piece import Piece, Player, PieceType, PIECE_SYMBOLS
from .rule_config import RuleConfig, DEFAULT_RULES

# 各陣営の初期配置の行
BLACK_START_ROWS = range(0, 3)
WHITE_START_ROWS = range(5, 8)

# 盤面テキストで空マスとして扱う文字
EMPTY_CHARS = ".-_ "


def load_initial_board() -> Board:
    """
    標準の初期盤面を作成
    黒は上側（行0〜2）、白は下側（行5〜7）の暗いマスに12枚ずつ
    """
    board = Board()

    for row in range(BOARD_SIZE):
        if row in BLACK_START_ROWS:
            owner = Player.BLACK
        elif row in WHITE_START_ROWS:
            owner = Player.WHITE
        else:
            continue
        for col in range(BOARD_SIZE):
            if is_playable_square(row, col):
                board.place_piece((row, col), Piece(PieceType.MAN, owner))

    return board


def create_initial_state(rules: Optional[RuleConfig] = None) -> GameState:
    """
    対局開始時の状態を作成（白が先手）
    リセットもこれで新しい状態を作る
    """
    return GameState(
        board=load_initial_board(),
        turn=Player.WHITE,
        winner=None,
        last_move=None,
        rules=rules if rules is not None else DEFAULT_RULES,
    )


def parse_piece_from_text(char: str) -> Optional[Piece]:
    """
    1文字から駒を解析
    例: 'w' -> 白の駒, 'B' -> 黒のキング, '.' -> None
    """
    if len(char) != 1:
        raise ValueError(f"Invalid piece text: {char!r}")
    if char in EMPTY_CHARS:
        return None
    for (piece_type, owner), symbol in PIECE_SYMBOLS.items():
        if symbol == char:
            return Piece(piece_type, owner)
    raise ValueError(f"Invalid piece character: {char!r}")


def load_board_from_text(text: str) -> Board:
    """
    テキスト図から盤面を読み込む
    8行x8文字、w/W = 白の駒/キング、b/B = 黒の駒/キング、'.' = 空マス
    空行と前後の空白は無視する

    例:
        ........
        ..b.....
        ...w....
    （8行に満たない分は空の行として扱う）
    """
    lines = [line.strip() for line in text.strip("\n").splitlines()]
    lines = [line for line in lines if line]
    if len(lines) > BOARD_SIZE:
        raise ValueError(f"Too many rows: {len(lines)}")

    board = Board()
    for row, line in enumerate(lines):
        if len(line) != BOARD_SIZE:
            raise ValueError(f"Row {row} must have {BOARD_SIZE} columns: {line!r}")
        for col, char in enumerate(line):
            piece = parse_piece_from_text(char)
            if piece is not None:
                board.place_piece((row, col), piece)

    return board
