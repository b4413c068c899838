"""
チェッカーのルール判定を行うモジュール

合法手の生成、手の適用、勝敗判定はすべて純粋関数として実装する
（引数の盤面・状態は変更せず、新しい値を返す）
"""

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from .board import Board, BOARD_SIZE, DIAGONAL_DIRECTIONS, in_bounds
from .game_state import GameState, MoveOutcome, MoveRejection
from .move import Move, MoveResult
from .piece import Player, forward_direction
from .rule_config import RuleConfig

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class Rules:
    """チェッカーのルールを管理するクラス"""

    # ------------------------------------------------------------------
    # 合法手の生成
    # ------------------------------------------------------------------

    @staticmethod
    def legal_simple_moves(board: Board, row: int, col: int, rules: RuleConfig) -> List[Move]:
        """
        指定マスの駒の、駒を取らない移動を取得
        空マスなら空リスト
        """
        piece = board.get_piece((row, col))
        if piece is None:
            return []
        if piece.is_king:
            return Rules._get_king_moves(board, (row, col), piece.owner, rules.flying_king_move)
        return Rules._get_man_moves(board, (row, col), piece.owner)

    @staticmethod
    def legal_captures(board: Board, row: int, col: int, rules: RuleConfig) -> List[Move]:
        """
        指定マスの駒の、駒を取る手を取得
        各手のcaptured_posが飛び越える敵の駒、to_posが着地点
        """
        piece = board.get_piece((row, col))
        if piece is None:
            return []
        if piece.is_king:
            return Rules._get_king_captures(board, (row, col), piece.owner, rules.flying_king_capture)
        return Rules._get_man_captures(board, (row, col), piece.owner, rules.men_backward_capture)

    @staticmethod
    def _get_man_moves(board: Board, from_pos: Position, player: Player) -> List[Move]:
        """普通の駒の移動: 前方の斜め1マスのみ（後退はルール設定に関係なく不可）"""
        row, col = from_pos
        dr = forward_direction(player)
        moves = []

        for dc in (-1, 1):
            target = (row + dr, col + dc)
            if in_bounds(*target) and board.is_empty(target):
                moves.append(Move.create_normal_move(from_pos, target, player))

        return moves

    @staticmethod
    def _get_man_captures(
        board: Board,
        from_pos: Position,
        player: Player,
        allow_backward: bool
    ) -> List[Move]:
        """
        普通の駒の取り: 隣の敵の駒を1つ飛び越えて、その先の空マスに着地
        後ろ向きの取りはmen_backward_captureが有効なときのみ
        """
        row, col = from_pos
        if allow_backward:
            row_directions = [-1, 1]
        else:
            row_directions = [forward_direction(player)]

        return [
            move
            for dr in row_directions
            for dc in (-1, 1)
            for move in Rules._short_capture(board, from_pos, player, dr, dc)
        ]

    @staticmethod
    def _short_capture(
        board: Board,
        from_pos: Position,
        player: Player,
        dr: int,
        dc: int
    ) -> List[Move]:
        """1方向への2マス跳びの取り（該当しなければ空リスト）"""
        row, col = from_pos
        over = (row + dr, col + dc)
        landing = (row + 2 * dr, col + 2 * dc)

        if not in_bounds(*landing):
            return []

        jumped = board.get_piece(over)
        if jumped is None or jumped.owner == player:
            return []
        if not board.is_empty(landing):
            return []

        return [Move.create_capture_move(from_pos, over, landing, player)]

    @staticmethod
    def _get_king_moves(board: Board, from_pos: Position, player: Player, flying: bool) -> List[Move]:
        """
        キングの移動
        flying=False: 斜め4方向に1マス
        flying=True: 斜め4方向に、駒か盤端にぶつかるまでの全ての空マス
        """
        row, col = from_pos
        moves = []

        for dr, dc in DIAGONAL_DIRECTIONS:
            r, c = row + dr, col + dc
            while in_bounds(r, c) and board.is_empty((r, c)):
                moves.append(Move.create_normal_move(from_pos, (r, c), player))
                if not flying:
                    break
                r, c = r + dr, c + dc

        return moves

    @staticmethod
    def _get_king_captures(board: Board, from_pos: Position, player: Player, flying: bool) -> List[Move]:
        """
        キングの取り
        flying=False: 普通の駒と同じ2マス跳びを4方向で
        flying=True: 各方向で最初にぶつかる駒が敵なら、その先の空マス全てが着地点
        """
        if not flying:
            return [
                move
                for dr, dc in DIAGONAL_DIRECTIONS
                for move in Rules._short_capture(board, from_pos, player, dr, dc)
            ]

        row, col = from_pos
        captures = []

        for dr, dc in DIAGONAL_DIRECTIONS:
            r, c = row + dr, col + dc
            jumped: Optional[Position] = None

            while in_bounds(r, c):
                piece = board.get_piece((r, c))
                if piece is None:
                    # 敵を飛び越えた後の空マスは全て着地点
                    if jumped is not None:
                        captures.append(Move.create_capture_move(from_pos, jumped, (r, c), player))
                elif piece.owner == player or jumped is not None:
                    # 味方の駒、または2つ目の駒で打ち切り
                    break
                else:
                    jumped = (r, c)
                r, c = r + dr, c + dc

        return captures

    @staticmethod
    def any_capture_available(board: Board, player: Player, rules: RuleConfig) -> bool:
        """指定プレイヤーのどれかの駒が取れる状態か"""
        for (row, col), _ in board.iter_pieces(player):
            if Rules.legal_captures(board, row, col, rules):
                return True
        return False

    @staticmethod
    def get_legal_moves(board: Board, player: Player, rules: RuleConfig) -> List[Move]:
        """
        指定プレイヤーの合法手をすべて取得（取りの手を先に並べる）
        取りが義務でも、取らない手はペナルティ付きで指せるので含める
        """
        captures = []
        simple_moves = []

        for (row, col), _ in board.iter_pieces(player):
            captures.extend(Rules.legal_captures(board, row, col, rules))
            simple_moves.extend(Rules.legal_simple_moves(board, row, col, rules))

        return captures + simple_moves

    @staticmethod
    def has_any_legal_move(board: Board, player: Player, rules: RuleConfig) -> bool:
        """指定プレイヤーに指せる手が1つでもあるか"""
        for (row, col), _ in board.iter_pieces(player):
            if Rules.legal_captures(board, row, col, rules):
                return True
            if Rules.legal_simple_moves(board, row, col, rules):
                return True
        return False

    @staticmethod
    def find_legal_move(
        board: Board,
        from_pos: Position,
        to_pos: Position,
        rules: RuleConfig
    ) -> Optional[Move]:
        """移動元と移動先に一致する合法手を探す（取りの手を優先）"""
        row, col = from_pos
        for move in Rules.legal_captures(board, row, col, rules):
            if move.to_pos == to_pos:
                return move
        for move in Rules.legal_simple_moves(board, row, col, rules):
            if move.to_pos == to_pos:
                return move
        return None

    # ------------------------------------------------------------------
    # 手の適用
    # ------------------------------------------------------------------

    @staticmethod
    def apply_move(state: GameState, move: Move) -> GameState:
        """
        状態に手を適用して次の状態を返す

        手が合法であることは呼び出し側で確認済みとするが、取りかどうかは
        元の盤面から取りの手を再計算して判定する（渡された種類は信用しない）

        手順:
        1. 盤面をコピーして移動元を空にする
        2. 元の盤面で取りを再計算し、着地点が一致すれば飛び越えた駒を除去
        3. 普通の駒が最奥の行に着いたらキングに成る
        4. 駒を置く
        5. 取れたのに取らなかった場合、ルールによって動かした駒を没収
        6. last_moveを記録
        7. 手番を交代
        """
        board = state.board
        rules = state.rules
        from_pos, to_pos = move.from_pos, move.to_pos
        piece = board.get_piece(from_pos)
        if piece is None:
            logger.warning("移動元に駒がありません: %s", from_pos)
            return state

        player = piece.owner
        new_board = board.copy()
        new_board.remove_piece(from_pos)

        captured_pos = None
        for capture in Rules.legal_captures(board, from_pos[0], from_pos[1], rules):
            if capture.to_pos == to_pos:
                captured_pos = capture.captured_pos
                new_board.remove_piece(captured_pos)
                break
        is_capture = captured_pos is not None

        placed = piece
        if not piece.is_king and to_pos[0] == player.promotion_row:
            placed = piece.promoted()
        new_board.place_piece(to_pos, placed)

        penalty_removed = False
        capture_was_available = Rules.any_capture_available(board, player, rules)
        if rules.penalty_enabled and capture_was_available and not is_capture:
            new_board.remove_piece(to_pos)
            penalty_removed = True
            logger.debug("取りを見逃したため %s の駒を没収: %s", player.name, to_pos)

        logger.debug(
            "%s %s -> %s (captured=%s, promoted=%s)",
            player.name, from_pos, to_pos, captured_pos, placed is not piece
        )

        return replace(
            state,
            board=new_board,
            turn=state.turn.opponent,
            last_move=MoveResult(from_pos, to_pos, captured_pos, penalty_removed),
        )

    # ------------------------------------------------------------------
    # 勝敗判定
    # ------------------------------------------------------------------

    @staticmethod
    def evaluate_winner(state: GameState) -> Optional[Player]:
        """
        勝者を判定する
        - 駒が0になった側の負け
        - 手番側に指せる手がなければ手番側の負け（引き分けにはしない）
        - それ以外はNone（続行）
        """
        board = state.board
        if board.count_pieces(Player.WHITE) == 0:
            return Player.BLACK
        if board.count_pieces(Player.BLACK) == 0:
            return Player.WHITE
        if not Rules.has_any_legal_move(board, state.turn, state.rules):
            return state.turn.opponent
        return None

    @staticmethod
    def is_game_over(state: GameState) -> Tuple[bool, Optional[Player]]:
        """
        ゲームが終了したか確認
        返り値: (終了フラグ, 勝者)
        """
        winner = Rules.evaluate_winner(state)
        return winner is not None, winner

    # ------------------------------------------------------------------
    # 手の提出（検証 + 適用 + 勝敗判定）
    # ------------------------------------------------------------------

    @staticmethod
    def validate_move(
        state: GameState,
        player: Player,
        from_pos: Position,
        to_pos: Position
    ) -> Optional[MoveRejection]:
        """
        提出された手を検証する
        返り値: 拒否理由（問題なければNone）
        """
        if state.is_over:
            return MoveRejection.GAME_OVER
        if state.turn != player:
            return MoveRejection.NOT_YOUR_TURN
        if not _is_square(from_pos) or not _is_square(to_pos):
            return MoveRejection.OUT_OF_BOUNDS
        from_pos, to_pos = tuple(from_pos), tuple(to_pos)

        piece = state.board.get_piece(from_pos)
        if piece is None or piece.owner != player:
            return MoveRejection.NOT_YOUR_PIECE
        if state.board.is_occupied(to_pos):
            return MoveRejection.DESTINATION_OCCUPIED
        if Rules.find_legal_move(state.board, from_pos, to_pos, state.rules) is None:
            return MoveRejection.ILLEGAL_MOVE
        return None

    @staticmethod
    def play_move(
        state: GameState,
        player: Player,
        from_pos: Position,
        to_pos: Position
    ) -> MoveOutcome:
        """
        手を検証して適用し、勝敗を判定する
        拒否した場合は元の状態をそのまま返す（手番も変わらない）
        """
        rejection = Rules.validate_move(state, player, from_pos, to_pos)
        if rejection is not None:
            logger.debug("手を拒否: %s %s -> %s (%s)", player.name, from_pos, to_pos, rejection.name)
            return MoveOutcome(state=state, rejection=rejection)

        move = Move.create_normal_move(tuple(from_pos), tuple(to_pos), player)
        next_state = Rules.apply_move(state, move)
        winner = Rules.evaluate_winner(next_state)
        if winner is not None:
            logger.info("%s の勝利", winner.name)
            next_state = replace(next_state, winner=winner)

        return MoveOutcome(state=next_state)


def _is_square(position) -> bool:
    """整数2つの盤内座標か確認"""
    if not isinstance(position, (tuple, list)) or len(position) != 2:
        return False
    row, col = position
    for value in (row, col):
        if isinstance(value, bool) or not isinstance(value, int):
            return False
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE
