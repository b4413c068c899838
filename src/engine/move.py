"""
チェッカーの手（Move）と手の結果（MoveResult）を表現するモジュール
"""

from enum import Enum, auto
from typing import Optional, Tuple
from .piece import Player


class MoveType(Enum):
    """手の種類"""
    NORMAL = auto()   # 通常の移動
    CAPTURE = auto()  # 駒を飛び越えて取る


class Move:
    """チェッカーの一手を表すクラス"""

    def __init__(
        self,
        move_type: MoveType,
        from_pos: Tuple[int, int],
        to_pos: Tuple[int, int],
        captured_pos: Optional[Tuple[int, int]] = None,
        player: Optional[Player] = None
    ):
        self.move_type = move_type
        self.from_pos = from_pos          # 移動元
        self.to_pos = to_pos              # 移動先
        self.captured_pos = captured_pos  # 飛び越えた敵の駒の位置（取る手のみ）
        self.player = player              # プレイヤー

    @property
    def is_capture(self) -> bool:
        return self.move_type == MoveType.CAPTURE

    def __str__(self):
        player = self.player.name if self.player else "?"
        if self.is_capture:
            return f"{player} {self.from_pos} x{self.captured_pos} -> {self.to_pos}"
        return f"{player} {self.from_pos} -> {self.to_pos}"

    def __repr__(self):
        return (
            f"Move(type={self.move_type.name}, "
            f"from={self.from_pos}, to={self.to_pos}, "
            f"over={self.captured_pos}, "
            f"player={self.player.name if self.player else None})"
        )

    def __eq__(self, other):
        if not isinstance(other, Move):
            return NotImplemented
        return (
            self.move_type == other.move_type
            and self.from_pos == other.from_pos
            and self.to_pos == other.to_pos
            and self.captured_pos == other.captured_pos
            and self.player == other.player
        )

    def __hash__(self):
        return hash((self.move_type, self.from_pos, self.to_pos, self.captured_pos, self.player))

    def to_dict(self) -> dict:
        """手を辞書形式に変換（API用）"""
        return {
            "type": self.move_type.name,
            "from": self.from_pos,
            "to": self.to_pos,
            "over": self.captured_pos,
            "player": self.player.name if self.player else None
        }

    @staticmethod
    def create_normal_move(
        from_pos: Tuple[int, int],
        to_pos: Tuple[int, int],
        player: Player
    ) -> 'Move':
        """通常の移動手を作成"""
        return Move(
            move_type=MoveType.NORMAL,
            from_pos=from_pos,
            to_pos=to_pos,
            player=player
        )

    @staticmethod
    def create_capture_move(
        from_pos: Tuple[int, int],
        captured_pos: Tuple[int, int],
        to_pos: Tuple[int, int],
        player: Player
    ) -> 'Move':
        """駒を取る手を作成"""
        return Move(
            move_type=MoveType.CAPTURE,
            from_pos=from_pos,
            to_pos=to_pos,
            captured_pos=captured_pos,
            player=player
        )


class MoveResult:
    """
    受理された手の記録
    実際に起きたこと（取った駒の位置、ペナルティで駒が消えたか）を保持する
    """

    def __init__(
        self,
        from_pos: Tuple[int, int],
        to_pos: Tuple[int, int],
        captured_pos: Optional[Tuple[int, int]] = None,
        penalty_removed: bool = False
    ):
        self.from_pos = from_pos
        self.to_pos = to_pos
        self.captured_pos = captured_pos
        self.penalty_removed = penalty_removed

    def __repr__(self):
        return (
            f"MoveResult(from={self.from_pos}, to={self.to_pos}, "
            f"captured={self.captured_pos}, penalty_removed={self.penalty_removed})"
        )

    def __eq__(self, other):
        if not isinstance(other, MoveResult):
            return NotImplemented
        return (
            self.from_pos == other.from_pos
            and self.to_pos == other.to_pos
            and self.captured_pos == other.captured_pos
            and self.penalty_removed == other.penalty_removed
        )

    def to_dict(self) -> dict:
        """結果を辞書形式に変換（API用）"""
        return {
            "from": self.from_pos,
            "to": self.to_pos,
            "captured": self.captured_pos,
            "penalty_removed": self.penalty_removed
        }
