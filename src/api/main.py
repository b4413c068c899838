"""
チェッカー FastAPI サーバ
WebSocketで対局状態を中継し、参照用のRESTエンドポイントを提供
"""

import json
import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field, StrictInt, ValidationError

from ..engine import BOARD_SIZE, in_bounds
from . import config
from .session import GameRoom, RoomRegistry, Seat, parse_rules_owner

# ログ設定
logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="チェッカー API",
    description="チェッカー対局の中継サーバ",
    version="1.0.0"
)

# 静的ファイルをマウント（CSS, JS, HTML）
if config.FRONTEND_DIR.exists():
    app.mount("/static", StaticFiles(directory=str(config.FRONTEND_DIR)), name="static")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

registry = RoomRegistry(
    default_room=config.FIXED_ROOM,
    pin_room=config.PIN_ROOM,
    rules_owner=parse_rules_owner(config.RULES_OWNER_SEAT),
)


class ConnectionManager:
    """ルームごとのWebSocket接続を管理し、メッセージを配信する"""

    def __init__(self):
        self.connections: Dict[str, Dict[str, WebSocket]] = {}

    def add(self, room_id: str, connection_id: str, websocket: WebSocket):
        self.connections.setdefault(room_id, {})[connection_id] = websocket

    def remove(self, room_id: str, connection_id: str):
        room_connections = self.connections.get(room_id)
        if room_connections is None:
            return
        room_connections.pop(connection_id, None)
        if not room_connections:
            del self.connections[room_id]

    async def broadcast(self, room_id: str, message: dict):
        """ルーム内の全接続に送信（送信に失敗した接続は切断扱いにする）"""
        for connection_id, websocket in list(self.connections.get(room_id, {}).items()):
            try:
                await websocket.send_json(message)
            except (RuntimeError, WebSocketDisconnect) as e:
                logger.warning("送信失敗 %s: %s", connection_id, e)
                self.remove(room_id, connection_id)


manager = ConnectionManager()


# Pydanticモデル（WebSocketメッセージ用）

class JoinRoomMessage(BaseModel):
    room_id: Optional[str] = None
    seat: Optional[str] = None
    client_id: Optional[str] = None


class UpdateRulesMessage(BaseModel):
    rules: Dict[str, Any] = Field(default_factory=dict)


class MakeMoveMessage(BaseModel):
    # 文字列や真偽値の座標は変換せずに拒否する
    from_row: StrictInt
    from_col: StrictInt
    to_row: StrictInt
    to_col: StrictInt


class RoomSession:
    """1つのWebSocket接続のセッション"""

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket
        self.connection_id = str(uuid.uuid4())
        self.room: Optional[GameRoom] = None

    async def send(self, message: dict):
        await self.websocket.send_json(message)

    async def send_error(self, message: str):
        await self.send({"type": "error", "message": message})

    async def broadcast_state(self):
        await manager.broadcast(self.room.room_id, {"type": "state", "state": self.room.state.to_dict()})

    async def broadcast_presence(self, room: GameRoom):
        await manager.broadcast(room.room_id, {"type": "presence", "players": room.presence()})

    async def handle(self, data: Any):
        """受信したメッセージを処理"""
        if not isinstance(data, dict):
            await self.send_error("メッセージはオブジェクトである必要があります")
            return

        message_type = data.get("type")
        if message_type == "join_room":
            await self.join(JoinRoomMessage.model_validate(data))
            return

        if message_type not in ("update_rules", "make_move", "reset_game"):
            await self.send_error(f"不明なメッセージ: {message_type}")
            return

        if self.room is None:
            await self.send_error("ルームに参加していません")
            return

        if message_type == "update_rules":
            message = UpdateRulesMessage.model_validate(data)
            if await self.room.update_rules(self.connection_id, message.rules):
                await self.broadcast_state()
            else:
                await self.send_error("ルールを変更する権限がありません")

        elif message_type == "make_move":
            message = MakeMoveMessage.model_validate(data)
            outcome = await self.room.make_move(
                self.connection_id,
                (message.from_row, message.from_col),
                (message.to_row, message.to_col),
            )
            if outcome is None:
                await self.send_error("観戦者は手を指せません")
            elif not outcome.success:
                await self.send_error(outcome.message)
            else:
                await self.broadcast_state()

        else:  # reset_game
            if await self.room.reset(self.connection_id):
                await self.broadcast_state()
            else:
                await self.send_error("観戦者はリセットできません")

    async def join(self, message: JoinRoomMessage):
        """ルームに参加（既に参加中なら元のルームから抜ける）"""
        await self.leave()

        room = registry.get_room(registry.resolve_room_id(message.room_id))
        role = await room.join(self.connection_id, Seat.parse(message.seat), message.client_id)
        self.room = room
        manager.add(room.room_id, self.connection_id, self.websocket)

        await self.send({
            "type": "room_joined",
            "room_id": room.room_id,
            "role": role.value,
            "state": room.state.to_dict(),
        })
        await self.broadcast_presence(room)

    async def leave(self):
        """参加中のルームから抜ける"""
        room = self.room
        if room is None:
            return
        self.room = None
        manager.remove(room.room_id, self.connection_id)
        if await room.leave(self.connection_id):
            await self.broadcast_presence(room)


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """対局の中継"""
    await websocket.accept()
    session = RoomSession(websocket)
    logger.info("接続 %s", session.connection_id)

    try:
        while True:
            text = await websocket.receive_text()
            try:
                data = json.loads(text)
            except ValueError:
                await session.send_error("JSONとして解析できません")
                continue

            try:
                await session.handle(data)
            except ValidationError as e:
                logger.info("不正なメッセージ %s: %s", session.connection_id, e)
                await session.send_error("メッセージの形式が正しくありません")
    except WebSocketDisconnect:
        logger.info("切断 %s", session.connection_id)
    finally:
        await session.leave()


# エンドポイント

@app.get("/api")
async def root():
    """APIルート"""
    return {
        "message": "チェッカー API へようこそ",
        "version": "1.0.0",
        "default_room": registry.default_room,
        "endpoints": [
            "/ws",
            "/api/rooms/{room_id}/state",
            "/api/rooms/{room_id}/legal_targets",
            "/seat/{seat}",
        ]
    }


def _get_room_or_404(room_id: str) -> GameRoom:
    room = registry.find_room(room_id)
    if room is None:
        raise HTTPException(status_code=404, detail="ルームが見つかりません")
    return room


@app.get("/api/rooms/{room_id}/state")
async def get_state(room_id: str):
    """ルームの対局状態を取得"""
    room = _get_room_or_404(room_id)
    return {
        "room_id": room.room_id,
        "players": room.presence(),
        "state": room.state.to_dict(),
    }


@app.get("/api/rooms/{room_id}/legal_targets")
async def get_legal_targets(room_id: str, row: int, col: int):
    """指定マスの駒の移動先を取得"""
    room = _get_room_or_404(room_id)
    if not in_bounds(row, col):
        raise HTTPException(status_code=400, detail=f"座標は0〜{BOARD_SIZE - 1}で指定してください")
    return room.legal_targets(row, col)


@app.get("/seat/{seat}")
async def seat_link(seat: str):
    """席を指定して参加するための短縮リンク"""
    if Seat.parse(seat) not in (Seat.WHITE, Seat.BLACK):
        raise HTTPException(status_code=404, detail="席が見つかりません")
    return RedirectResponse(url=f"/#seat={seat}")


# フロントエンド用の静的ファイル配信
@app.get("/")
async def serve_index():
    """ルートでindex.htmlを提供"""
    index_file = config.FRONTEND_DIR / "index.html"
    if index_file.exists():
        return FileResponse(index_file)
    return {"message": "チェッカー API サーバが稼働中です。/docs でAPIドキュメントを確認できます。"}


@app.get("/{filename:path}")
async def serve_static_files(filename: str):
    """その他の静的ファイルを提供"""
    # APIエンドポイントと競合しないようにチェック
    if filename.startswith("api/") or filename in ["docs", "redoc", "openapi.json"]:
        raise HTTPException(status_code=404, detail="ファイルが見つかりません")

    file_path = (config.FRONTEND_DIR / filename).resolve()
    if config.FRONTEND_DIR.resolve() not in file_path.parents:
        raise HTTPException(status_code=404, detail="ファイルが見つかりません")
    if file_path.exists() and file_path.is_file():
        return FileResponse(file_path)
    raise HTTPException(status_code=404, detail="ファイルが見つかりません")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
