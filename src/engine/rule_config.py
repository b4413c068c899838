"""
対局ルールの設定を表すモジュール
"""

from dataclasses import dataclass, asdict, replace
from enum import Enum
from typing import Any, Mapping


class MultiCapture(Enum):
    """連続取りの扱い"""
    OPTIONAL = "optional"
    # 設定としては受け付けるが、連続取りの強制はまだ実装していない
    FORCED = "forced"


@dataclass(frozen=True)
class RuleConfig:
    """
    対局ルール（不変）

    変更するときは部分更新ではなく、レコード全体を差し替える
    """
    must_capture: bool = True
    skip_capture_penalty_remove_moved: bool = True
    multi_capture: MultiCapture = MultiCapture.OPTIONAL
    flying_king_move: bool = True
    flying_king_capture: bool = True
    men_backward_capture: bool = False

    @property
    def penalty_enabled(self) -> bool:
        """取れるのに取らなかった駒を没収するか"""
        return self.must_capture and self.skip_capture_penalty_remove_moved

    def with_changes(self, **changes: Any) -> 'RuleConfig':
        """一部を変えた新しい設定を返す"""
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """設定を辞書形式に変換（API用）"""
        data = asdict(self)
        data["multi_capture"] = self.multi_capture.value
        return data

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> 'RuleConfig':
        """
        辞書形式から設定を作成
        真偽値は強制変換し、multi_captureは"forced"以外をすべて"optional"とみなす
        欠けている項目はFalse扱い（部分更新はしない）
        """
        multi = MultiCapture.FORCED if data.get("multi_capture") == "forced" else MultiCapture.OPTIONAL
        return RuleConfig(
            must_capture=bool(data.get("must_capture")),
            skip_capture_penalty_remove_moved=bool(data.get("skip_capture_penalty_remove_moved")),
            multi_capture=multi,
            flying_king_move=bool(data.get("flying_king_move")),
            flying_king_capture=bool(data.get("flying_king_capture")),
            men_backward_capture=bool(data.get("men_backward_capture")),
        )


DEFAULT_RULES = RuleConfig()
