"""
対局ルームの管理（席の割り当て、再接続、ルール変更、リセット）

ルームごとにasyncio.Lockを持ち、状態を変更する操作は1つずつ処理する
読み取りは現在のスナップショット（GameState）をそのまま使う
"""

import asyncio
import logging
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

from ..engine import GameState, MoveOutcome, Player, RuleConfig, Rules
from ..engine.initial_setup import create_initial_state

logger = logging.getLogger(__name__)


class Seat(Enum):
    """接続の役割"""
    WHITE = "white"
    BLACK = "black"
    SPECTATOR = "spectator"

    @property
    def player(self) -> Optional[Player]:
        """席に対応するプレイヤー（観戦者はNone）"""
        if self == Seat.WHITE:
            return Player.WHITE
        if self == Seat.BLACK:
            return Player.BLACK
        return None

    @staticmethod
    def parse(value: Optional[str]) -> Optional['Seat']:
        """文字列から席を解析（不明な値はNone）"""
        try:
            return Seat(value)
        except ValueError:
            return None


PLAYER_SEATS = (Seat.WHITE, Seat.BLACK)


def parse_rules_owner(value: Optional[str]) -> Seat:
    """
    ルール管理者の席を解析する
    白か黒のみ受け付け、それ以外は警告を出して白にする
    """
    seat = Seat.parse(value.lower() if value else value)
    if seat not in PLAYER_SEATS:
        logger.warning("ルール管理者の席が不正です: %r（white を使用します）", value)
        return Seat.WHITE
    return seat


class GameRoom:
    """1つの対局ルーム"""

    def __init__(self, room_id: str, rules_owner: Seat = Seat.WHITE):
        self.room_id = room_id
        self.rules_owner = rules_owner
        self.state: GameState = create_initial_state()
        # 席 -> 接続ID
        self.players: Dict[Seat, Optional[str]] = {seat: None for seat in PLAYER_SEATS}
        # クライアントID -> 席（再接続用、切断しても消さない）
        self.client_map: Dict[str, Seat] = {}
        self.lock = asyncio.Lock()

    def role_of(self, connection_id: str) -> Seat:
        """接続の役割を返す"""
        for seat in PLAYER_SEATS:
            if self.players[seat] == connection_id:
                return seat
        return Seat.SPECTATOR

    def presence(self) -> Dict[str, bool]:
        """各席にプレイヤーが接続しているか"""
        return {seat.value: self.players[seat] is not None for seat in PLAYER_SEATS}

    async def join(
        self,
        connection_id: str,
        requested_seat: Optional[Seat] = None,
        client_id: Optional[str] = None
    ) -> Seat:
        """
        ルームに参加して役割を返す
        1. 既知のクライアントIDなら元の席に戻す
        2. 希望の席が空いていればその席
        3. 空いている席（白が優先）
        4. どちらも埋まっていれば観戦者
        """
        async with self.lock:
            if client_id and client_id in self.client_map:
                seat = self.client_map[client_id]
                self.players[seat] = connection_id
                logger.info("ルーム %s: %s が %s として再接続", self.room_id, client_id, seat.value)
                return seat

            seat = Seat.SPECTATOR
            if requested_seat in PLAYER_SEATS and self.players[requested_seat] is None:
                seat = requested_seat
            else:
                for candidate in PLAYER_SEATS:
                    if self.players[candidate] is None:
                        seat = candidate
                        break

            if seat != Seat.SPECTATOR:
                self.players[seat] = connection_id
                if client_id:
                    self.client_map[client_id] = seat

            logger.info("ルーム %s: 接続 %s が %s として参加", self.room_id, connection_id, seat.value)
            return seat

    async def leave(self, connection_id: str) -> bool:
        """
        接続が抜けた席を空ける
        返り値: 在席状況が変わったか
        """
        async with self.lock:
            changed = False
            for seat in PLAYER_SEATS:
                if self.players[seat] == connection_id:
                    self.players[seat] = None
                    changed = True
            if changed:
                logger.info("ルーム %s: 接続 %s が退出", self.room_id, connection_id)
            return changed

    async def update_rules(self, connection_id: str, payload: Mapping) -> bool:
        """
        ルールを丸ごと差し替える（ルール管理者の席のみ）
        返り値: 受理したか
        """
        async with self.lock:
            if self.role_of(connection_id) != self.rules_owner:
                logger.warning("ルーム %s: ルール変更の権限がありません (%s)", self.room_id, connection_id)
                return False
            self.state = self.state.with_rules(RuleConfig.from_dict(payload))
            logger.info("ルーム %s: ルールを更新 %s", self.room_id, self.state.rules.to_dict())
            return True

    async def make_move(
        self,
        connection_id: str,
        from_pos: Tuple[int, int],
        to_pos: Tuple[int, int]
    ) -> Optional[MoveOutcome]:
        """
        手を指す
        返り値: 手の結果（観戦者からの手はNone）
        """
        async with self.lock:
            player = self.role_of(connection_id).player
            if player is None:
                logger.warning("ルーム %s: 観戦者は手を指せません (%s)", self.room_id, connection_id)
                return None

            outcome = Rules.play_move(self.state, player, from_pos, to_pos)
            if outcome.success:
                self.state = outcome.state
            else:
                logger.info(
                    "ルーム %s: %s の手を拒否 %s -> %s: %s",
                    self.room_id, player.name, from_pos, to_pos, outcome.message
                )
            return outcome

    async def reset(self, connection_id: str) -> bool:
        """
        対局をリセット（着席しているプレイヤーのみ）
        ルールも初期値に戻る
        """
        async with self.lock:
            if self.role_of(connection_id) == Seat.SPECTATOR:
                return False
            self.state = create_initial_state()
            logger.info("ルーム %s: 対局をリセット", self.room_id)
            return True

    def legal_targets(self, row: int, col: int) -> Dict[str, List[dict]]:
        """指定マスの駒の移動先（UIのハイライト用、読み取りのみ）"""
        state = self.state
        return {
            "moves": [m.to_dict() for m in Rules.legal_simple_moves(state.board, row, col, state.rules)],
            "captures": [m.to_dict() for m in Rules.legal_captures(state.board, row, col, state.rules)],
        }


class RoomRegistry:
    """ルームIDからルームを引く"""

    def __init__(
        self,
        default_room: str = "main",
        pin_room: bool = True,
        rules_owner: Seat = Seat.WHITE
    ):
        self.default_room = default_room
        self.pin_room = pin_room
        self.rules_owner = rules_owner
        self.rooms: Dict[str, GameRoom] = {}

    def resolve_room_id(self, requested: Optional[str]) -> str:
        """固定ルームの場合はクライアントの指定を無視する"""
        if self.pin_room or not requested:
            return self.default_room
        return requested

    def get_room(self, room_id: str) -> GameRoom:
        """ルームを取得（なければ作成）"""
        if room_id not in self.rooms:
            self.rooms[room_id] = GameRoom(room_id, rules_owner=self.rules_owner)
        return self.rooms[room_id]

    def find_room(self, room_id: str) -> Optional[GameRoom]:
        """既存のルームを取得（なければNone）"""
        return self.rooms.get(room_id)
