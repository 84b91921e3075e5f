"""走法评分测试"""
import pytest

from core.cards import str_to_cards
from core.hands import HandType
from core.actions import Combo
from core.state import GameState, Phase
from ai.config import AIConfig
from ai.hand_evaluator import HandEvaluator
from ai.move_evaluator import GameContext, GamePhase, MoveEvaluator


def combo(s: str) -> Combo:
    return Combo.from_cards(str_to_cards(s))


def evaluate(s: str):
    return HandEvaluator.evaluate(str_to_cards(s))


class TestGameContext:
    """局面信息测试"""

    def test_landlord_opponents_are_farmers(self):
        ctx = GameContext(player_index=0, landlord_index=0, hand_sizes=(20, 9, 4))
        assert ctx.is_landlord
        assert ctx.opponent_hand_sizes == (9, 4)
        assert ctx.min_opponent_cards == 4

    def test_farmer_opponent_is_landlord(self):
        ctx = GameContext(player_index=1, landlord_index=0, hand_sizes=(12, 9, 2))
        assert not ctx.is_landlord
        assert ctx.opponent_hand_sizes == (12,)
        assert not ctx.opponent_near_win

    def test_own_hand_not_an_opponent(self):
        ctx = GameContext(player_index=0, landlord_index=0, hand_sizes=(1, 10, 10))
        assert not ctx.opponent_near_win

    def test_near_win(self):
        ctx = GameContext(player_index=2, landlord_index=0, hand_sizes=(3, 10, 10))
        assert ctx.opponent_near_win

    def test_no_sizes(self):
        assert GameContext(player_index=0).min_opponent_cards == 99

    def test_teammate(self):
        ctx = GameContext(player_index=1, landlord_index=0, last_played_by=2)
        assert ctx.is_teammate
        assert not GameContext(player_index=1, landlord_index=0, last_played_by=0).is_teammate
        assert not GameContext(player_index=0, landlord_index=0, last_played_by=2).is_teammate

    @pytest.mark.parametrize("total,phase", [
        (51, GamePhase.EARLY),
        (12, GamePhase.EARLY),
        (11, GamePhase.MID),
        (6, GamePhase.MID),
        (5, GamePhase.LATE),
    ])
    def test_phase(self, total, phase):
        assert GameContext(player_index=0, total_cards=total).phase == phase

    def test_from_state(self):
        state = GameState(
            phase=Phase.PLAYING,
            hands=(tuple(str_to_cards("3S 4S")), tuple(str_to_cards("5S")), tuple(str_to_cards("6S 7S 8S"))),
            landlord_index=2,
            current_turn=0,
            last_played_by=1,
            pass_count=1,
        )
        ctx = GameContext.from_state(state, 0)
        assert ctx.hand_sizes == (2, 1, 3)
        assert ctx.total_cards == 6
        assert ctx.is_teammate
        assert GameContext.from_state(state, 0, phase_basis="hand").total_cards == 2


class TestComponents:
    """各评分项测试"""

    def test_breaking_straight_penalized(self):
        before = evaluate("3S 4H 5D 6C 7S KS")
        assert MoveEvaluator.score_structure(combo("5D"), before) < 0
        assert MoveEvaluator.score_structure(combo("KS"), before) == 0
        assert MoveEvaluator.score_structure(combo("3S 4H 5D 6C 7S"), before) == 0

    def test_splitting_pair_penalized(self):
        before = evaluate("9S 9H KS")
        assert MoveEvaluator.score_structure(combo("9S"), before) == -20

    def test_trash_reduction(self):
        before = evaluate("3S 8H KS")
        after = evaluate("8H KS")
        assert MoveEvaluator.score_trash_reduction(combo("3S"), before, after) == 30

    def test_initiative_long_straight(self):
        assert MoveEvaluator.score_initiative(evaluate("3S 4H 5D 6C 7S 8S 9S 10S")) == 80

    def test_initiative_only_trash(self):
        assert MoveEvaluator.score_initiative(evaluate("3S 5H 7D 9C")) == -30

    def test_bomb_early_penalized(self):
        before = evaluate("9S 9H 9D 9C 3S")
        early = GameContext(player_index=0, landlord_index=0, hand_sizes=(20, 17, 17), total_cards=54)
        late = GameContext(player_index=0, landlord_index=0, hand_sizes=(5, 1, 1), total_cards=4)
        bomb = combo("9S 9H 9D 9C")
        assert MoveEvaluator.score_control(bomb, before, early) == -80
        # 后期 +20，对手快出完 +60
        assert MoveEvaluator.score_control(bomb, before, late) == 80

    def test_exit_plan(self):
        before = evaluate("3S 5H")
        after = evaluate("5H")
        assert MoveEvaluator.score_exit_plan(before, after) == 60

    def test_minimum_margin(self):
        assert MoveEvaluator.score_minimum_margin(combo("3S")) == pytest.approx(25.5)
        assert MoveEvaluator.score_minimum_margin(combo("5S 5H")) == 15
        assert MoveEvaluator.score_minimum_margin(combo("3S 4H 5D 6C 7S")) == 20
        assert MoveEvaluator.score_minimum_margin(combo("9S 9H 9D 9C")) == 0

    def test_low_single_preferred(self):
        assert (MoveEvaluator.score_minimum_margin(combo("4S"))
                > MoveEvaluator.score_minimum_margin(combo("KS")))


class TestPhaseMultiplier:

    @pytest.mark.parametrize("phase,move_type,expected", [
        (GamePhase.EARLY, HandType.BOMB, 50),
        (GamePhase.EARLY, HandType.SINGLE, 120),
        (GamePhase.MID, HandType.ROCKET, 100),
        (GamePhase.LATE, HandType.ROCKET, 150),
        (GamePhase.LATE, HandType.PAIR, 130),
    ])
    def test_multiplier(self, phase, move_type, expected):
        assert MoveEvaluator.apply_phase_multiplier(100, phase, move_type) == pytest.approx(expected)


class TestScorePass:
    """不要评分测试"""

    def test_base(self):
        ctx = GameContext(player_index=0, landlord_index=0, last_played_by=1, hand_sizes=(5, 10, 10))
        assert MoveEvaluator.score_pass(evaluate("JS QH"), ctx) == 20

    def test_teammate_bonus(self):
        ctx = GameContext(player_index=1, landlord_index=0, last_played_by=2, hand_sizes=(10, 6, 10))
        assert MoveEvaluator.score_pass(evaluate("JS QH KD 9S 9H 9D"), ctx) == 60

    def test_trash_bonus(self):
        ctx = GameContext(player_index=0, landlord_index=0, last_played_by=1, hand_sizes=(5, 10, 10))
        assert MoveEvaluator.score_pass(evaluate("3S 5H 7D 9C JS"), ctx) == 20
        assert MoveEvaluator.score_pass(evaluate("3S 4S 5H 7D 9C"), ctx) == 50

    def test_near_win_penalty(self):
        ctx = GameContext(player_index=1, landlord_index=0, last_played_by=0, hand_sizes=(2, 5, 10))
        assert MoveEvaluator.score_pass(evaluate("JS QH"), ctx) == -40

    def test_control_bonus(self):
        ctx = GameContext(player_index=0, landlord_index=0, last_played_by=1, hand_sizes=(5, 10, 10))
        assert MoveEvaluator.score_pass(evaluate("AS 2S 2H"), ctx) == 45


class TestScoreMove:

    def test_weights_scale_components(self):
        before = evaluate("3S 8H KS")
        after = evaluate("8H KS")
        ctx = GameContext(player_index=0, landlord_index=0, hand_sizes=(3, 10, 10), total_cards=8)
        move = combo("3S")

        base = MoveEvaluator.score_move(move, before, after, ctx)
        zero = AIConfig(weights={k: 0.0 for k in AIConfig().weights})
        assert MoveEvaluator.score_move(move, before, after, ctx, zero) == 0
        assert base != 0
