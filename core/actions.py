"""
出牌组合与组合生成器

枚举手牌中所有合法牌型，以及能压过上家的子集
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple
import itertools

from .cards import Card, Rank, MAX_SEQUENCE_RANK, group_by_rank, sort_by_power
from .hands import (
    HandAnalysis,
    HandType,
    MIN_STRAIGHT_LEN,
    MAX_STRAIGHT_LEN,
    MIN_PAIRS_LEN,
    MAX_PAIRS_LEN,
    MIN_AIRPLANE_LEN,
    MAX_AIRPLANE_LEN,
    MAX_AIRPLANE_KICKER_LEN,
)
from .rules import HandAnalyzer, HandComparator


@dataclass(frozen=True, slots=True)
class Combo:
    """
    可出的一手牌

    Attributes:
        cards: 具体的牌 (按牌力排序)
        analysis: 牌型识别结果
    """
    cards: Tuple[Card, ...]
    analysis: HandAnalysis

    @classmethod
    def from_cards(cls, cards: Sequence[Card]) -> 'Combo':
        sorted_cards = tuple(sort_by_power(cards))
        return cls(cards=sorted_cards, analysis=HandAnalyzer.analyze(sorted_cards))

    @property
    def type(self) -> HandType:
        return self.analysis.type

    @property
    def compare_value(self) -> int:
        return self.analysis.compare_value

    @property
    def ranks(self) -> Tuple[int, ...]:
        return tuple(c.power for c in self.cards)

    @property
    def is_bomb_like(self) -> bool:
        return self.analysis.is_bomb_like

    @property
    def signature(self) -> Tuple[HandType, Tuple[int, ...]]:
        """去重键: 牌型 + 牌力多重集"""
        return (self.type, self.ranks)

    def __len__(self) -> int:
        return len(self.cards)

    def __str__(self) -> str:
        return f"Combo({self.type.name}, {' '.join(str(c) for c in self.cards)})"


class ComboDetector:
    """
    组合生成器

    根据手牌生成所有可能的出牌组合。每个牌力选择、每种带牌牌力组合
    各生成一次；候选都会经过 HandAnalyzer 复核，只保留识别为目标牌型的
    """

    def __init__(self, hand: Sequence[Card]):
        """
        Args:
            hand: 手牌 (最多 20 张)
        """
        self.hand = sort_by_power(hand)
        self.by_rank: Dict[int, List[Card]] = group_by_rank(self.hand)
        self.counts: Dict[int, int] = {r: len(cs) for r, cs in self.by_rank.items()}

    @classmethod
    def find_all_combos(cls, hand: Sequence[Card]) -> List[Combo]:
        """所有可出的组合 (主动出牌)"""
        return cls(hand).generate_all()

    @classmethod
    def find_beating_combos(
        cls,
        hand: Sequence[Card],
        last_played: Optional[HandAnalysis],
    ) -> List[Combo]:
        """能压过 last_played 的组合，last_played 为 None 时等同 find_all_combos"""
        return cls(hand).generate_responses(last_played)

    # === 辅助 ===

    def _take(self, rank: int, n: int) -> List[Card]:
        return self.by_rank[rank][:n]

    def _ranks_with(self, min_count: int, sequence_only: bool = False) -> List[int]:
        return [
            r for r, c in self.counts.items()
            if c >= min_count and (not sequence_only or r <= MAX_SEQUENCE_RANK)
        ]

    @staticmethod
    def _make(cards: List[Card], expected: HandType) -> Optional[Combo]:
        combo = Combo.from_cards(cards)
        if combo.type != expected:
            return None
        return combo

    def _runs(self, min_count: int, min_len: int, max_len: int) -> List[List[int]]:
        """
        连续牌力序列

        Args:
            min_count: 每个牌力至少需要的张数 (1=顺子, 2=连对, 3=飞机)
            min_len: 最短长度
            max_len: 最长长度
        """
        eligible = set(self._ranks_with(min_count, sequence_only=True))
        runs = []
        for length in range(min_len, max_len + 1):
            for start in sorted(eligible):
                run = list(range(start, start + length))
                if all(r in eligible for r in run):
                    runs.append(run)
        return runs

    def _kicker_singles(self, exclude: Iterable[int], n: int) -> List[Tuple[int, ...]]:
        """n 张带牌的所有牌力多重集 (同点最多取手中张数)"""
        excluded = set(exclude)
        pool: List[int] = []
        for rank, count in self.counts.items():
            if rank not in excluded:
                pool.extend([rank] * min(count, n))
        return list(dict.fromkeys(itertools.combinations(pool, n)))

    def _kicker_pairs(self, exclude: Iterable[int], n: int) -> List[Tuple[int, ...]]:
        """n 个对子带牌的所有牌力组合"""
        excluded = set(exclude)
        pair_ranks = [r for r, c in self.counts.items() if c >= 2 and r not in excluded]
        return list(itertools.combinations(pair_ranks, n))

    def _with_kickers(self, base: List[Card], kickers: Tuple[int, ...], per_rank: int) -> List[Card]:
        cards = list(base)
        for rank in sorted(set(kickers)):
            cards.extend(self._take(rank, kickers.count(rank) * per_rank))
        return cards

    # === 基础牌型 ===

    def gen_singles(self) -> List[Combo]:
        return [Combo.from_cards(self._take(r, 1)) for r in self.counts]

    def gen_pairs(self) -> List[Combo]:
        return [Combo.from_cards(self._take(r, 2)) for r in self._ranks_with(2)]

    def gen_triples(self) -> List[Combo]:
        return [Combo.from_cards(self._take(r, 3)) for r in self._ranks_with(3)]

    def gen_bombs(self) -> List[Combo]:
        return [Combo.from_cards(self._take(r, 4)) for r in self._ranks_with(4)]

    def gen_rocket(self) -> List[Combo]:
        if Rank.SMALL_JOKER in self.counts and Rank.BIG_JOKER in self.counts:
            cards = self._take(Rank.SMALL_JOKER, 1) + self._take(Rank.BIG_JOKER, 1)
            return [Combo.from_cards(cards)]
        return []

    # === 带牌 ===

    def gen_triple_with_single(self) -> List[Combo]:
        result = []
        for triple in self._ranks_with(3):
            for kicker in self.counts:
                if kicker == triple:
                    continue
                combo = self._make(self._take(triple, 3) + self._take(kicker, 1),
                                   HandType.TRIPLE_WITH_SINGLE)
                if combo is not None:
                    result.append(combo)
        return result

    def gen_triple_with_pair(self) -> List[Combo]:
        result = []
        for triple in self._ranks_with(3):
            for kicker in self._ranks_with(2):
                if kicker == triple:
                    continue
                combo = self._make(self._take(triple, 3) + self._take(kicker, 2),
                                   HandType.TRIPLE_WITH_PAIR)
                if combo is not None:
                    result.append(combo)
        return result

    def gen_quad_with_singles(self) -> List[Combo]:
        result = []
        for quad in self._ranks_with(4):
            for kickers in self._kicker_singles([quad], 2):
                cards = self._with_kickers(self._take(quad, 4), kickers, 1)
                combo = self._make(cards, HandType.QUAD_WITH_SINGLES)
                if combo is not None:
                    result.append(combo)
        return result

    def gen_quad_with_pairs(self) -> List[Combo]:
        result = []
        for quad in self._ranks_with(4):
            for kickers in self._kicker_pairs([quad], 2):
                cards = self._with_kickers(self._take(quad, 4), kickers, 2)
                combo = self._make(cards, HandType.QUAD_WITH_PAIRS)
                if combo is not None:
                    result.append(combo)
        return result

    # === 连续牌型 ===

    def _gen_serial(self, repeat: int, min_len: int, max_len: int,
                    expected: HandType) -> List[Combo]:
        result = []
        for run in self._runs(repeat, min_len, max_len):
            cards = [c for r in run for c in self._take(r, repeat)]
            combo = self._make(cards, expected)
            if combo is not None:
                result.append(combo)
        return result

    def gen_straights(self) -> List[Combo]:
        """顺子 (5-12 张)"""
        return self._gen_serial(1, MIN_STRAIGHT_LEN, MAX_STRAIGHT_LEN, HandType.STRAIGHT)

    def gen_consecutive_pairs(self) -> List[Combo]:
        """连对 (3-10 对)"""
        return self._gen_serial(2, MIN_PAIRS_LEN, MAX_PAIRS_LEN, HandType.CONSECUTIVE_PAIRS)

    def gen_airplanes(self) -> List[Combo]:
        """飞机不带 (2-6 个三张)"""
        return self._gen_serial(3, MIN_AIRPLANE_LEN, MAX_AIRPLANE_LEN, HandType.AIRPLANE)

    def gen_airplane_with_singles(self) -> List[Combo]:
        """飞机带单 (2-4 个三张)"""
        result = []
        for run in self._runs(3, MIN_AIRPLANE_LEN, MAX_AIRPLANE_KICKER_LEN):
            body = [c for r in run for c in self._take(r, 3)]
            for kickers in self._kicker_singles(run, len(run)):
                combo = self._make(self._with_kickers(body, kickers, 1),
                                   HandType.AIRPLANE_WITH_SINGLES)
                if combo is not None:
                    result.append(combo)
        return result

    def gen_airplane_with_pairs(self) -> List[Combo]:
        """飞机带对 (2-4 个三张)"""
        result = []
        for run in self._runs(3, MIN_AIRPLANE_LEN, MAX_AIRPLANE_KICKER_LEN):
            body = [c for r in run for c in self._take(r, 3)]
            for kickers in self._kicker_pairs(run, len(run)):
                combo = self._make(self._with_kickers(body, kickers, 2),
                                   HandType.AIRPLANE_WITH_PAIRS)
                if combo is not None:
                    result.append(combo)
        return result

    def generate_all(self) -> List[Combo]:
        """
        生成所有可能的出牌组合 (主动出牌)

        Returns:
            去重后的合法组合列表，顺序固定
        """
        generators = (
            self.gen_singles,
            self.gen_pairs,
            self.gen_triples,
            self.gen_triple_with_single,
            self.gen_triple_with_pair,
            self.gen_straights,
            self.gen_consecutive_pairs,
            self.gen_airplanes,
            self.gen_airplane_with_singles,
            self.gen_airplane_with_pairs,
            self.gen_quad_with_singles,
            self.gen_quad_with_pairs,
            self.gen_bombs,
            self.gen_rocket,
        )

        combos: List[Combo] = []
        seen: Set[Tuple[HandType, Tuple[int, ...]]] = set()
        for gen in generators:
            for combo in gen():
                if not combo.analysis.is_valid or combo.signature in seen:
                    continue
                seen.add(combo.signature)
                combos.append(combo)
        return combos

    def generate_responses(self, last_played: Optional[HandAnalysis]) -> List[Combo]:
        """
        生成能压过上家的组合

        Args:
            last_played: 上家的牌型 (None 表示主动出牌)
        """
        combos = self.generate_all()
        if last_played is None:
            return combos
        return [c for c in combos if HandComparator.can_beat(c.analysis, last_played)]
