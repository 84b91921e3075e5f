"""规则引擎测试"""
import itertools
import random

import pytest

from core.cards import str_to_cards
from core.hands import HandAnalysis, HandType
from core.rules import HandAnalyzer, HandComparator, is_consecutive


def analyze(s: str) -> HandAnalysis:
    return HandAnalyzer.analyze(str_to_cards(s))


def hand_type(s: str) -> HandType:
    return analyze(s).type


class TestIsConsecutive:

    def test_consecutive(self):
        assert is_consecutive([3, 4, 5])
        assert is_consecutive([9])

    def test_gap(self):
        assert not is_consecutive([3, 5, 6])


class TestAnalyzeBasic:
    """基础牌型识别测试"""

    def test_empty(self):
        assert HandAnalyzer.analyze([]).type == HandType.INVALID

    def test_single(self):
        result = analyze("5S")
        assert result.type == HandType.SINGLE
        assert result.compare_value == 5
        assert hand_type("BJ") == HandType.SINGLE

    def test_pair(self):
        assert hand_type("5S 5H") == HandType.PAIR

    def test_two_different_cards(self):
        assert hand_type("5S 6H") == HandType.INVALID

    def test_rocket(self):
        result = analyze("SJ BJ")
        assert result.type == HandType.ROCKET
        assert result.is_bomb_like

    def test_triple(self):
        assert hand_type("5S 5H 5D") == HandType.TRIPLE

    def test_bomb(self):
        result = analyze("9S 9H 9D 9C")
        assert result.type == HandType.BOMB
        assert result.compare_value == 9

    def test_triple_with_single(self):
        result = analyze("3S 3H 3D 4C")
        assert result.type == HandType.TRIPLE_WITH_SINGLE
        assert result.primary == (3,)
        assert result.kickers == (4,)

    def test_triple_with_pair(self):
        result = analyze("5S 5H 5D 3S 3H")
        assert result.type == HandType.TRIPLE_WITH_PAIR
        assert result.compare_value == 5
        assert result.kickers == (3,)

    def test_two_pairs_invalid(self):
        assert hand_type("5S 5H 6S 6H") == HandType.INVALID


class TestAnalyzeSequences:
    """连续牌型识别测试"""

    def test_straight_5(self):
        result = analyze("3S 4H 5D 6C 7S")
        assert result.type == HandType.STRAIGHT
        assert result.length == 5
        assert result.base_rank == 3

    def test_straight_12(self):
        result = analyze("3S 4S 5S 6S 7S 8S 9S 10S JS QS KS AS")
        assert result.type == HandType.STRAIGHT
        assert result.length == 12

    def test_straight_with_two_invalid(self):
        assert hand_type("10S JH QD KC AS 2S") == HandType.INVALID

    def test_straight_too_short(self):
        assert hand_type("3S 4H 5D 6C") == HandType.INVALID

    def test_straight_gap(self):
        assert hand_type("3S 4H 5D 6C 8S") == HandType.INVALID

    def test_consecutive_pairs(self):
        result = analyze("3S 3H 4S 4H 5S 5H")
        assert result.type == HandType.CONSECUTIVE_PAIRS
        assert result.length == 3

    def test_two_consecutive_pairs_invalid(self):
        assert hand_type("3S 3H 4S 4H") == HandType.INVALID

    def test_consecutive_pairs_with_extra_card_invalid(self):
        assert hand_type("3S 3H 4S 4H 5S 5H 9C") == HandType.INVALID

    def test_consecutive_pairs_with_two_invalid(self):
        assert hand_type("KS KH AS AH 2S 2H") == HandType.INVALID

    def test_airplane(self):
        result = analyze("3S 3H 3D 4S 4H 4D")
        assert result.type == HandType.AIRPLANE
        assert result.length == 2

    def test_airplane_non_consecutive_invalid(self):
        assert hand_type("3S 3H 3D 5S 5H 5D") == HandType.INVALID

    def test_airplane_with_twos_invalid(self):
        assert hand_type("AS AH AD 2S 2H 2D") == HandType.INVALID

    def test_airplane_with_singles(self):
        result = analyze("3S 3H 3D 4S 4H 4D 7C 9C")
        assert result.type == HandType.AIRPLANE_WITH_SINGLES
        assert result.primary == (3, 4)
        assert result.kickers == (7, 9)

    def test_airplane_with_pairs(self):
        result = analyze("3S 3H 3D 4S 4H 4D 7C 7S 9C 9S")
        assert result.type == HandType.AIRPLANE_WITH_PAIRS
        assert result.kickers == (7, 9)

    def test_airplane_with_wrong_kicker_count(self):
        assert hand_type("3S 3H 3D 4S 4H 4D 7C 8C 9C") == HandType.INVALID


class TestAnalyzeQuads:
    """四带二测试"""

    def test_quad_with_singles(self):
        result = analyze("9S 9H 9D 9C 3S 5H")
        assert result.type == HandType.QUAD_WITH_SINGLES
        assert result.compare_value == 9

    def test_quad_with_same_rank_kickers(self):
        assert hand_type("9S 9H 9D 9C 3S 3H") == HandType.QUAD_WITH_SINGLES

    def test_quad_with_pairs(self):
        result = analyze("9S 9H 9D 9C 3S 3H 5S 5H")
        assert result.type == HandType.QUAD_WITH_PAIRS
        assert result.kickers == (3, 5)

    def test_quad_with_two_singles_and_pair_invalid(self):
        assert hand_type("9S 9H 9D 9C 3S 4H 5S 5H") == HandType.INVALID


class TestOrderIndependence:
    """识别结果与输入顺序无关"""

    @pytest.mark.parametrize("s", [
        "3S 3H 3D 4C",
        "3S 4H 5D 6C 7S 8S",
        "3S 3H 3D 4S 4H 4D 7C 7S 9C 9S",
        "9S 9H 9D 9C 3S 5H",
    ])
    def test_permutations(self, s):
        cards = str_to_cards(s)
        expected = HandAnalyzer.analyze(cards)
        rng = random.Random(0)
        for _ in range(10):
            shuffled = list(cards)
            rng.shuffle(shuffled)
            assert HandAnalyzer.analyze(shuffled) == expected


class TestCanBeat:
    """大小比较测试"""

    def test_lead_accepts_any_valid(self):
        assert HandComparator.can_beat(analyze("3S"), None)
        assert not HandComparator.can_beat(analyze("3S 5H"), None)

    def test_higher_single(self):
        assert HandComparator.can_beat(analyze("4S"), analyze("3S"))
        assert not HandComparator.can_beat(analyze("3H"), analyze("3S"))

    def test_two_beats_ace(self):
        assert HandComparator.can_beat(analyze("2S"), analyze("AS"))

    def test_different_type(self):
        assert not HandComparator.can_beat(analyze("7S 7H"), analyze("5S"))

    def test_straight_same_length(self):
        assert HandComparator.can_beat(analyze("4S 5H 6D 7C 8S"), analyze("3S 4H 5D 6C 7S"))

    def test_straight_different_length(self):
        assert not HandComparator.can_beat(
            analyze("4S 5H 6D 7C 8S 9S"), analyze("3S 4H 5D 6C 7S")
        )

    def test_triple_with_single_compares_triple(self):
        assert HandComparator.can_beat(analyze("5S 5H 5D 3C"), analyze("4S 4H 4D AC"))

    def test_bomb_beats_non_bomb(self):
        assert HandComparator.can_beat(analyze("3S 3H 3D 3C"), analyze("2S 2H"))

    def test_bigger_bomb(self):
        assert HandComparator.can_beat(analyze("9S 9H 9D 9C"), analyze("8S 8H 8D 8C"))
        assert not HandComparator.can_beat(analyze("8S 8H 8D 8C"), analyze("9S 9H 9D 9C"))

    def test_rocket_beats_bomb(self):
        assert HandComparator.can_beat(analyze("SJ BJ"), analyze("2S 2H 2D 2C"))

    def test_bomb_cannot_beat_rocket(self):
        assert not HandComparator.can_beat(analyze("2S 2H 2D 2C"), analyze("SJ BJ"))

    def test_non_bomb_cannot_beat_bomb(self):
        assert not HandComparator.can_beat(analyze("2S"), analyze("3S 3H 3D 3C"))

    def test_invalid_never_beats(self):
        assert not HandComparator.can_beat(HandAnalysis.INVALID, analyze("3S"))

    def test_antisymmetric(self):
        hands = [analyze(s) for s in (
            "3S", "2S", "BJ", "5S 5H", "7S 7H", "9S 9H 9D 9C", "3S 3H 3D 3C", "SJ BJ",
            "3S 4H 5D 6C 7S", "4S 5H 6D 7C 8S",
        )]
        for a, b in itertools.permutations(hands, 2):
            assert not (HandComparator.can_beat(a, b) and HandComparator.can_beat(b, a))


class TestInvalidReason:
    """提示信息测试"""

    def test_legal_play_has_no_reason(self):
        assert HandComparator.invalid_reason(analyze("4S"), analyze("3S")) is None
        assert HandComparator.invalid_reason(analyze("3S"), None) is None

    def test_invalid_combination(self):
        assert HandComparator.invalid_reason(analyze("3S 5H"), None) == "Invalid hand combination"

    def test_weak_bomb(self):
        reason = HandComparator.invalid_reason(analyze("8S 8H 8D 8C"), analyze("9S 9H 9D 9C"))
        assert reason == "Bomb is not strong enough"

    def test_bomb_against_rocket(self):
        reason = HandComparator.invalid_reason(analyze("9S 9H 9D 9C"), analyze("SJ BJ"))
        assert reason == "Can only beat with a stronger bomb or rocket"

    def test_non_bomb_against_bomb(self):
        reason = HandComparator.invalid_reason(analyze("2S"), analyze("9S 9H 9D 9C"))
        assert reason == "Can only beat with a stronger bomb or rocket"

    def test_wrong_type(self):
        reason = HandComparator.invalid_reason(analyze("7S 7H"), analyze("5S"))
        assert reason == "Must play the same hand type (single)"

    def test_wrong_length(self):
        reason = HandComparator.invalid_reason(
            analyze("4S 5H 6D 7C 8S 9S"), analyze("3S 4H 5D 6C 7S")
        )
        assert reason == "Must have the same length (5)"

    def test_not_strong_enough(self):
        assert HandComparator.invalid_reason(analyze("3H"), analyze("3S")) == "Not strong enough"
