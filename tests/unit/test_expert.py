"""专家 AI 测试"""
import logging
import random

import numpy as np
import pytest

from core.cards import Deck, str_to_cards
from core.hands import HandType
from core.rules import HandAnalyzer, HandComparator
from core.actions import Combo
from core.state import BidAction, GameState
from ai import AIConfig, ExpertAI, EasyAI, ScoredMove, build_ai
from ai.hand_evaluator import HandEvaluator
from ai.move_evaluator import GameContext


def scored(*scores):
    return [ScoredMove(move=Combo.from_cards(str_to_cards(f"{3 + i}S")), score=s)
            for i, s in enumerate(scores)]


def lead_context(**kwargs):
    defaults = dict(player_index=0, landlord_index=0, hand_sizes=(20, 17, 17), total_cards=54)
    defaults.update(kwargs)
    return GameContext(**defaults)


class TestSelect:
    """候选选择测试"""

    def test_empty(self):
        assert ExpertAI(seed=0).select([]) is None

    def test_single_candidate(self):
        moves = scored(10)
        assert ExpertAI(seed=0).select(moves) is moves[0]

    def test_clear_winner(self):
        moves = scored(10, 100, 50)
        for seed in range(10):
            assert ExpertAI(seed=seed).select(moves).score == 100

    def test_near_best_sampled(self):
        moves = scored(100, 99.9, 10)
        picks = {ExpertAI(seed=seed).select(moves).score for seed in range(50)}
        assert picks <= {100, 99.9}
        assert len(picks) == 2

    def test_negative_scores(self):
        moves = scored(-100, -105, -300)
        for seed in range(10):
            assert ExpertAI(seed=seed).select(moves).score in (-100, -105)

    def test_large_scores_do_not_overflow(self):
        moves = scored(1e6, 0.99e6)
        assert ExpertAI(seed=0).select(moves).score in (1e6, 0.99e6)

    def test_pass_candidate(self):
        moves = [ScoredMove(move=None, score=50)] + scored(-10)
        picked = ExpertAI(seed=0).select(moves)
        assert picked.is_pass

    def test_seeded_reproducible(self):
        moves = scored(100, 99, 98, 97)
        a = ExpertAI(rng=np.random.default_rng(3))
        b = ExpertAI(rng=np.random.default_rng(3))
        assert [a.select(moves).score for _ in range(20)] == [b.select(moves).score for _ in range(20)]


class TestOpeningBonus:

    @pytest.mark.parametrize("cards,bonus", [
        ("3S 4S 5S 6S 7S 8S 9S 10S", 50),
        ("3S 4S 5S 6S 7S", 0),
        ("3S 3H 4S 4H 5S 5H", 40),
        ("3S 3H 3D 4S 4H 4D", 45),
        ("3S 3H 3D 4S 4H", 25),
        ("3S 3H 3D 4S", 20),
        ("9S", 0),
    ])
    def test_bonus(self, cards, bonus):
        assert ExpertAI().opening_bonus(Combo.from_cards(str_to_cards(cards))) == bonus


class TestFindMove:
    """出牌决策测试"""

    def test_lead_plays_valid_cards_from_hand(self):
        hand = str_to_cards("3S 4H 5D 6C 7S 9H 9D KS AS 2H")
        move = ExpertAI(seed=0).find_move(hand, None, lead_context())
        assert move
        assert set(move).issubset(hand)
        assert HandAnalyzer.analyze(move).is_valid

    def test_response_beats(self):
        hand = str_to_cards("3S 4H 7D 9C 9S KS")
        last = HandAnalyzer.analyze(str_to_cards("5S"))
        ctx = GameContext(player_index=1, landlord_index=0, last_played_by=0, hand_sizes=(15, 6, 17),
                          total_cards=38)
        ai = ExpertAI(seed=1)
        for _ in range(20):
            move = ai.find_move(hand, last, ctx)
            if move is not None:
                assert HandComparator.can_beat(HandAnalyzer.analyze(move), last)

    def test_pass_when_nothing_beats(self):
        hand = str_to_cards("3S 4H 5D")
        last = HandAnalyzer.analyze(str_to_cards("2S"))
        ctx = GameContext(player_index=1, landlord_index=0, last_played_by=0, hand_sizes=(10, 3, 10))
        assert ExpertAI(seed=0).find_move(hand, last, ctx) is None

    def test_never_passes_when_opponent_near_win(self):
        hand = str_to_cards("3S 3H 7D 9C JS QS KS 2D")
        last = HandAnalyzer.analyze(str_to_cards("5S"))
        ctx = GameContext(player_index=1, landlord_index=0, last_played_by=0,
                          hand_sizes=(1, 8, 10), total_cards=19)
        for seed in range(20):
            move = ExpertAI(seed=seed).find_move(hand, last, ctx)
            assert move is not None
            assert HandComparator.can_beat(HandAnalyzer.analyze(move), last)

    def test_lead_from_full_house(self):
        hand = str_to_cards("8S 8H 8D 6C 6S")
        move = ExpertAI(seed=0).find_move(hand, None, lead_context(hand_sizes=(5, 10, 10), total_cards=25))
        assert move is not None
        assert HandAnalyzer.analyze(move).type in {
            HandType.SINGLE, HandType.PAIR, HandType.TRIPLE,
            HandType.TRIPLE_WITH_SINGLE, HandType.TRIPLE_WITH_PAIR,
        }


class TestFallback:
    """异常兜底测试"""

    def test_scoring_failure_falls_back(self, monkeypatch, caplog):
        def boom(hand):
            raise RuntimeError("boom")

        monkeypatch.setattr(HandEvaluator, "evaluate", staticmethod(boom))
        hand = str_to_cards("9S 3H KD")

        with caplog.at_level(logging.ERROR, logger="ai.expert"):
            move = ExpertAI(seed=0).find_move(hand, None, lead_context())

        assert move == str_to_cards("3H")
        assert "fallback" in caplog.text

    def test_fallback_when_responding(self, monkeypatch):
        def boom(hand):
            raise RuntimeError("boom")

        monkeypatch.setattr(HandEvaluator, "evaluate", staticmethod(boom))
        hand = str_to_cards("4S 4H 9S 9H")
        last = HandAnalyzer.analyze(str_to_cards("5S 5H"))
        ctx = GameContext(player_index=1, landlord_index=0, last_played_by=0, hand_sizes=(10, 4, 10))
        assert ExpertAI(seed=0).find_move(hand, last, ctx) == str_to_cards("9S 9H")


class TestDecide:

    def test_decide_from_state(self):
        deal = Deck.standard().shuffle(random.Random(4)).deal()
        state = GameState.initial(None).start_new_round(deal).with_bid(0, BidAction.CALL)
        move = ExpertAI(seed=0).decide(state, 0)
        assert move
        assert state.with_play(0, move).ok


class TestBuildAI:

    def test_expert(self):
        assert isinstance(build_ai(AIConfig()), ExpertAI)

    def test_easy(self):
        assert isinstance(build_ai(AIConfig(difficulty="easy")), EasyAI)

    def test_shares_rng(self):
        rng = np.random.default_rng(0)
        assert build_ai(AIConfig(), rng=rng).rng is rng
