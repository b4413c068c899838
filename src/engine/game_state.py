"""
対局の状態（スナップショット）を表すモジュール
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from .board import Board
from .move import MoveResult
from .piece import Player
from .rule_config import RuleConfig


@dataclass(frozen=True)
class GameState:
    """
    対局状態のスナップショット

    手を適用するたびに新しいインスタンスに置き換える（盤面も含めて変更しない）
    winnerが決まった後は、リセットで新しい状態を作るまで手を受け付けない
    """
    board: Board
    turn: Player = Player.WHITE
    winner: Optional[Player] = None
    last_move: Optional[MoveResult] = None
    rules: RuleConfig = field(default_factory=RuleConfig)

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    def with_rules(self, rules: RuleConfig) -> 'GameState':
        """ルールを差し替えた新しい状態を返す"""
        return replace(self, rules=rules)

    def to_dict(self) -> dict:
        """状態を辞書形式に変換（API用）"""
        return {
            "board": self.board.to_codes(),
            "turn": self.turn.name,
            "winner": self.winner.name if self.winner else None,
            "last_move": self.last_move.to_dict() if self.last_move else None,
            "rules": self.rules.to_dict(),
        }


class MoveRejection(Enum):
    """手を拒否した理由"""
    GAME_OVER = "ゲームは既に終了しています"
    NOT_YOUR_TURN = "手番ではありません"
    OUT_OF_BOUNDS = "盤外の座標です"
    NOT_YOUR_PIECE = "自分の駒ではありません"
    DESTINATION_OCCUPIED = "移動先に駒があります"
    ILLEGAL_MOVE = "合法手ではありません"


@dataclass(frozen=True)
class MoveOutcome:
    """
    手の提出結果
    拒否された場合stateは元の状態のまま
    """
    state: GameState
    rejection: Optional[MoveRejection] = None

    @property
    def success(self) -> bool:
        return self.rejection is None

    @property
    def message(self) -> str:
        if self.rejection is None:
            return "手を適用しました"
        return self.rejection.value
