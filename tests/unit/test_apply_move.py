"""
単体テスト: 手の適用のテスト
取りの除去、成り、取り逃しのペナルティ、手番の交代を確認
"""

import pytest
from src.engine import Move, MoveResult, Piece, PieceType, Player, RuleConfig, Rules


def normal(from_pos, to_pos, player=Player.WHITE):
    return Move.create_normal_move(from_pos, to_pos, player)


class TestApplyMove:
    """手の適用のテストクラス"""

    def test_apply_simple_move(self, initial_state):
        """通常の移動が正しく適用されることを確認"""
        next_state = Rules.apply_move(initial_state, normal((5, 0), (4, 1)))

        assert next_state.board.is_empty((5, 0)), "元の位置に駒が残っています"
        assert next_state.board.get_piece((4, 1)) == Piece(PieceType.MAN, Player.WHITE)
        assert next_state.turn == Player.BLACK
        assert next_state.last_move == MoveResult((5, 0), (4, 1), None, False)

    def test_original_state_unchanged(self, initial_state):
        """元の状態と盤面が変更されないことを確認"""
        before = initial_state.board.to_codes()
        next_state = Rules.apply_move(initial_state, normal((5, 0), (4, 1)))

        assert initial_state.board.to_codes() == before, "元の盤面が変更されています"
        assert initial_state.turn == Player.WHITE
        assert next_state.board is not initial_state.board

    def test_apply_capture_removes_jumped_piece(self, make_state):
        """取りで飛び越えた駒が除去されることを確認"""
        state = make_state("""
            ........
            ........
            ...b....
            ....w...
            ........
            ........
            ........
            b.......
        """)
        next_state = Rules.apply_move(state, normal((3, 4), (1, 2)))

        assert next_state.board.is_empty((2, 3)), "飛び越えた駒が残っています"
        assert next_state.board.is_empty((3, 4))
        assert next_state.board.get_piece((1, 2)) == Piece(PieceType.MAN, Player.WHITE)
        assert next_state.last_move.captured_pos == (2, 3)
        assert not next_state.last_move.penalty_removed
        assert next_state.turn == Player.BLACK

    def test_capture_is_rederived_from_board(self, make_state):
        """渡された手の種類に関係なく、盤面から取りを判定することを確認"""
        state = make_state("""
            ........
            ........
            ...b....
            ....w...
        """)
        move = Move.create_capture_move((3, 4), (0, 0), (1, 2), Player.WHITE)
        next_state = Rules.apply_move(state, move)

        assert next_state.last_move.captured_pos == (2, 3)

    def test_flying_king_capture_far_landing(self, make_state):
        """キングが敵の遠くに着地しても敵が除去されることを確認"""
        state = make_state("""
            ........
            ........
            ........
            ........
            ...b....
            ........
            ........
            W.......
        """)
        next_state = Rules.apply_move(state, normal((7, 0), (1, 6)))

        assert next_state.board.is_empty((4, 3))
        assert next_state.board.get_piece((1, 6)) == Piece(PieceType.KING, Player.WHITE)
        assert next_state.last_move.captured_pos == (4, 3)

    def test_apply_move_on_empty_square_returns_same_state(self, initial_state):
        """移動元が空なら状態を変えないことを確認"""
        assert Rules.apply_move(initial_state, normal((4, 1), (3, 2))) is initial_state


class TestPromotion:
    """成りのテストクラス"""

    def test_white_man_promotes_on_row_zero(self, make_state):
        """白の駒が行0に着くとキングになることを確認"""
        state = make_state("""
            ........
            ..w.....
            ........
            ........
            ........
            ........
            ........
            b.......
        """)
        next_state = Rules.apply_move(state, normal((1, 2), (0, 1)))

        assert next_state.board.get_piece((0, 1)) == Piece(PieceType.KING, Player.WHITE)

    def test_black_man_promotes_on_row_seven(self, make_state):
        """黒の駒が行7に着くとキングになることを確認"""
        state = make_state("""
            .......w
            ........
            ........
            ........
            ........
            ........
            .b......
        """, turn=Player.BLACK)
        next_state = Rules.apply_move(state, normal((6, 1), (7, 0), Player.BLACK))

        assert next_state.board.get_piece((7, 0)) == Piece(PieceType.KING, Player.BLACK)
        assert next_state.turn == Player.WHITE

    def test_promotion_by_capture(self, make_state):
        """取りで最奥の行に着いても成ることを確認"""
        state = make_state("""
            ........
            ..b.....
            ...w....
            ........
            ........
            ........
            ........
            b.......
        """)
        next_state = Rules.apply_move(state, normal((2, 3), (0, 1)))

        assert next_state.board.get_piece((0, 1)) == Piece(PieceType.KING, Player.WHITE)
        assert next_state.board.is_empty((1, 2))

    def test_king_stays_king(self, make_state):
        """キングが最奥の行に着いてもキングのままであることを確認"""
        state = make_state("""
            ........
            ..W.....
            ........
            ........
            ........
            ........
            ........
            b.......
        """)
        next_state = Rules.apply_move(state, normal((1, 2), (0, 3)))

        piece = next_state.board.get_piece((0, 3))
        assert piece.piece_type == PieceType.KING
        assert piece.code == 2, "キングの値が変わっています"

    def test_man_does_not_promote_elsewhere(self, initial_state):
        """最奥の行以外では成らないことを確認"""
        next_state = Rules.apply_move(initial_state, normal((5, 0), (4, 1)))

        assert next_state.board.get_piece((4, 1)).piece_type == PieceType.MAN


class TestCapturePenalty:
    """取り逃しのペナルティのテストクラス"""

    BOARD = """
        ........
        ........
        ...b....
        ....w...
        ........
        w.......
        ........
        ........
    """

    def test_other_piece_forfeited(self, make_state):
        """取れるのに別の駒を動かすと、動かした駒が没収されることを確認"""
        state = make_state(self.BOARD)
        next_state = Rules.apply_move(state, normal((5, 0), (4, 1)))

        assert next_state.board.is_empty((4, 1)), "ペナルティで駒が消えていません"
        assert next_state.board.is_empty((5, 0))
        assert next_state.last_move.penalty_removed
        assert next_state.last_move.captured_pos is None
        assert next_state.turn == Player.BLACK, "ペナルティでも手番は交代するべきです"
        assert next_state.board.count_pieces(Player.WHITE) == 1

    def test_capturing_piece_forfeited_on_simple_move(self, make_state):
        """取れる駒自身が取らずに動いても没収されることを確認"""
        state = make_state(self.BOARD)
        next_state = Rules.apply_move(state, normal((3, 4), (2, 5)))

        assert next_state.board.is_empty((2, 5))
        assert next_state.last_move.penalty_removed

    def test_no_penalty_when_capturing(self, make_state):
        """取った場合はペナルティがないことを確認"""
        state = make_state(self.BOARD)
        next_state = Rules.apply_move(state, normal((3, 4), (1, 2)))

        assert next_state.board.is_occupied((1, 2))
        assert not next_state.last_move.penalty_removed

    def test_no_penalty_when_disabled(self, make_state, no_penalty_rules):
        """ペナルティ無効なら取らなくても駒は残ることを確認"""
        state = make_state(self.BOARD, rules=no_penalty_rules)
        next_state = Rules.apply_move(state, normal((5, 0), (4, 1)))

        assert next_state.board.is_occupied((4, 1))
        assert not next_state.last_move.penalty_removed

    def test_no_penalty_without_must_capture(self, make_state):
        """must_captureが無効ならペナルティもないことを確認"""
        rules = RuleConfig(must_capture=False, skip_capture_penalty_remove_moved=True)
        state = make_state(self.BOARD, rules=rules)
        next_state = Rules.apply_move(state, normal((5, 0), (4, 1)))

        assert next_state.board.is_occupied((4, 1))
        assert not next_state.last_move.penalty_removed

    def test_no_penalty_without_available_capture(self, initial_state):
        """取りがなければペナルティもないことを確認"""
        next_state = Rules.apply_move(initial_state, normal((5, 0), (4, 1)))

        assert not next_state.last_move.penalty_removed

    def test_penalty_removes_promoted_piece(self, make_state):
        """成った駒でも取り逃しなら没収されることを確認"""
        state = make_state("""
            ........
            ..w.....
            ........
            ........
            ...b....
            ....w...
        """)
        next_state = Rules.apply_move(state, normal((1, 2), (0, 1)))

        assert next_state.board.is_empty((0, 1))
        assert next_state.last_move.penalty_removed


class TestRuleConfig:
    """ルール設定のテストクラス"""

    def test_defaults(self, default_rules):
        """既定値を確認"""
        assert default_rules.must_capture
        assert default_rules.skip_capture_penalty_remove_moved
        assert default_rules.multi_capture.value == "optional"
        assert default_rules.flying_king_move
        assert default_rules.flying_king_capture
        assert not default_rules.men_backward_capture

    def test_from_dict_coerces_values(self):
        """辞書からの作成で値が強制変換されることを確認"""
        rules = RuleConfig.from_dict({
            "must_capture": 1,
            "skip_capture_penalty_remove_moved": "",
            "multi_capture": "something",
            "flying_king_move": "yes",
        })

        assert rules.must_capture is True
        assert rules.skip_capture_penalty_remove_moved is False
        assert rules.multi_capture.value == "optional"
        assert rules.flying_king_move is True
        assert rules.flying_king_capture is False
        assert rules.men_backward_capture is False

    def test_forced_multi_capture_is_accepted(self):
        """forcedは設定として受け付けることを確認"""
        rules = RuleConfig.from_dict({"multi_capture": "forced"})
        assert rules.multi_capture.value == "forced"

    def test_round_trip(self):
        """辞書形式への変換と復元を確認"""
        rules = RuleConfig(flying_king_move=False, men_backward_capture=True)
        assert RuleConfig.from_dict(rules.to_dict()) == rules

    def test_immutable(self, default_rules):
        """ルールは変更できないことを確認"""
        with pytest.raises(AttributeError):
            default_rules.must_capture = False

    def test_with_changes(self, default_rules):
        """一部を変えた新しい設定が作れることを確認"""
        changed = default_rules.with_changes(flying_king_move=False)

        assert not changed.flying_king_move
        assert default_rules.flying_king_move
