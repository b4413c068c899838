"""
チェッカーの盤面を管理するモジュール
"""

from typing import Iterator, List, Optional, Tuple
from .piece import Piece, Player

# 盤面サイズ
BOARD_SIZE = 8

Position = Tuple[int, int]

# 斜め4方向
DIAGONAL_DIRECTIONS: List[Tuple[int, int]] = [(-1, -1), (-1, 1), (1, -1), (1, 1)]


def in_bounds(row: int, col: int) -> bool:
    """座標が盤面内か確認"""
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def is_playable_square(row: int, col: int) -> bool:
    """駒を置けるマス（暗いマス）か確認"""
    return in_bounds(row, col) and (row + col) % 2 == 1


class Board:
    """チェッカーのゲームボードを表すクラス"""

    def __init__(self):
        # 8x8の盤面を初期化（行優先、Noneは空マス）
        self.cells: List[List[Optional[Piece]]] = [
            [None for _ in range(BOARD_SIZE)]
            for _ in range(BOARD_SIZE)
        ]

    def is_valid_position(self, position: Position) -> bool:
        """位置が盤面内か確認"""
        row, col = position
        return in_bounds(row, col)

    def get_piece(self, position: Position) -> Optional[Piece]:
        """指定位置の駒を取得"""
        if not self.is_valid_position(position):
            raise ValueError(f"Invalid position: {position}")
        row, col = position
        return self.cells[row][col]

    def is_empty(self, position: Position) -> bool:
        """指定位置が空マスか確認"""
        return self.get_piece(position) is None

    def is_occupied(self, position: Position) -> bool:
        """指定位置に駒があるか確認"""
        return self.get_piece(position) is not None

    def get_owner(self, position: Position) -> Optional[Player]:
        """指定位置の駒の所有者を取得"""
        piece = self.get_piece(position)
        return piece.owner if piece else None

    def place_piece(self, position: Position, piece: Piece) -> None:
        """指定位置に駒を置く（既存の駒は上書き）"""
        if not self.is_valid_position(position):
            raise ValueError(f"Invalid position: {position}")
        row, col = position
        self.cells[row][col] = piece

    def remove_piece(self, position: Position) -> Optional[Piece]:
        """指定位置の駒を取り除いて返す"""
        piece = self.get_piece(position)
        row, col = position
        self.cells[row][col] = None
        return piece

    def iter_pieces(self, player: Optional[Player] = None) -> Iterator[Tuple[Position, Piece]]:
        """盤上の駒を行優先で列挙（playerを指定するとその陣営のみ）"""
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                piece = self.cells[row][col]
                if piece is None:
                    continue
                if player is not None and piece.owner != player:
                    continue
                yield (row, col), piece

    def count_pieces(self, player: Player) -> int:
        """指定プレイヤーの駒数を数える"""
        return sum(1 for _ in self.iter_pieces(player))

    def copy(self) -> 'Board':
        """盤面のコピーを作成（行単位の深いコピー）"""
        new_board = Board()
        new_board.cells = [row[:] for row in self.cells]
        return new_board

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return self.cells == other.cells

    def __str__(self):
        """盤面の文字列表現を返す"""
        result = ["   " + " ".join(str(i) for i in range(BOARD_SIZE))]
        for row in range(BOARD_SIZE):
            row_str = f"{row} |"
            for col in range(BOARD_SIZE):
                piece = self.cells[row][col]
                if piece is not None:
                    row_str += str(piece)
                elif (row + col) % 2 == 1:
                    row_str += "."
                else:
                    row_str += " "
                row_str += "|"
            result.append(row_str)
        return "\n".join(result)

    def to_codes(self) -> List[List[int]]:
        """盤面を符号付き整数の8x8配列に変換（API用）"""
        return [
            [piece.code if piece else 0 for piece in row]
            for row in self.cells
        ]

    @staticmethod
    def from_codes(codes: List[List[int]]) -> 'Board':
        """符号付き整数の8x8配列から盤面を復元"""
        if len(codes) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in codes):
            raise ValueError("Board must be an 8x8 grid")
        board = Board()
        board.cells = [[Piece.from_code(code) for code in row] for row in codes]
        return board


def clone_board(board: Board) -> Board:
    """盤面の深いコピーを返す"""
    return board.copy()
