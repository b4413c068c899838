"""
チェッカーの駒の種類と陣営を定義するモジュール
"""

from enum import Enum
from typing import Optional


class Player(Enum):
    """プレイヤーの定義（値は盤面コードの符号と一致）"""
    WHITE = 1   # 先手（白） - 下側から上へ進む
    BLACK = -1  # 後手（黒） - 上側から下へ進む

    @property
    def opponent(self):
        """相手プレイヤーを返す"""
        return Player.BLACK if self == Player.WHITE else Player.WHITE

    @property
    def forward_direction(self) -> int:
        """前進方向の行の増分（白は行0へ、黒は行7へ）"""
        return forward_direction(self)

    @property
    def promotion_row(self) -> int:
        """成る（キングになる）行"""
        return 0 if self == Player.WHITE else 7


class PieceType(Enum):
    """駒の種類（値は盤面コードの絶対値と一致）"""
    MAN = 1   # 普通の駒
    KING = 2  # 成った駒


# 駒の表示記号
PIECE_SYMBOLS = {
    (PieceType.MAN, Player.WHITE): "w",
    (PieceType.KING, Player.WHITE): "W",
    (PieceType.MAN, Player.BLACK): "b",
    (PieceType.KING, Player.BLACK): "B",
}


class Piece:
    """チェッカーの駒を表すクラス（生成後は変更しない）"""

    __slots__ = ("piece_type", "owner")

    def __init__(self, piece_type: PieceType, owner: Player):
        self.piece_type = piece_type
        self.owner = owner

    def __str__(self):
        """駒の文字列表現（例: 'w', 'B'）"""
        return PIECE_SYMBOLS[(self.piece_type, self.owner)]

    def __repr__(self):
        return f"Piece({self.piece_type.name}, {self.owner.name})"

    def __eq__(self, other):
        if not isinstance(other, Piece):
            return NotImplemented
        return self.piece_type == other.piece_type and self.owner == other.owner

    def __hash__(self):
        return hash((self.piece_type, self.owner))

    @property
    def is_king(self) -> bool:
        return self.piece_type == PieceType.KING

    @property
    def code(self) -> int:
        """
        符号付き整数コード
        1 = 白の駒, 2 = 白のキング, -1 = 黒の駒, -2 = 黒のキング
        """
        return self.owner.value * self.piece_type.value

    def promoted(self) -> 'Piece':
        """キングに成った駒を返す（既にキングならそのまま）"""
        if self.is_king:
            return self
        return Piece(PieceType.KING, self.owner)

    @staticmethod
    def from_code(code: int) -> Optional['Piece']:
        """符号付き整数コードから駒を復元（0はNone）"""
        if code == 0:
            return None
        if code not in (-2, -1, 1, 2):
            raise ValueError(f"Invalid piece code: {code}")
        owner = Player.WHITE if code > 0 else Player.BLACK
        return Piece(PieceType(abs(code)), owner)


def sign(piece: Optional[Piece]) -> int:
    """駒の陣営の符号を返す（空マスは0）"""
    if piece is None:
        return 0
    return piece.owner.value


def is_king(piece: Optional[Piece]) -> bool:
    """キングかどうか（空マスはFalse）"""
    return piece is not None and piece.is_king


def forward_direction(player: Player) -> int:
    """
    前進方向を返す
    黒が上側（行0〜2）から開始する前提: 白は-1、黒は+1
    """
    return -1 if player == Player.WHITE else 1
