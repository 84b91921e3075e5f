"""
手牌结构评估

识别值得保留的"核心"结构 (顺子、连对、飞机)、散牌与控制牌，
并估计出完手牌所需的最少手数

注意: 核心识别是贪心的 (从长到短、互不重叠)，不是最优拆牌；
min_turns_to_empty 是启发式估计，只适合用于不同手牌之间的比较
"""
from enum import Enum
from dataclasses import dataclass
from typing import Dict, List, Sequence, Set, Tuple

from core.cards import Card, Rank, CONTROL_RANK, MAX_SEQUENCE_RANK, group_by_rank
from core.hands import (
    MIN_STRAIGHT_LEN,
    MAX_STRAIGHT_LEN,
    MIN_PAIRS_LEN,
    MIN_AIRPLANE_LEN,
)

# 散牌: 3-10 的孤张
TRASH_MAX_RANK = Rank.TEN


class CoreKind(Enum):
    """核心结构类型"""
    STRAIGHT = "straight"
    CONSECUTIVE_PAIRS = "consecutive_pairs"
    AIRPLANE = "airplane"


# 每单位长度的价值: 越难凑的结构越值钱
_CORE_UNIT_VALUE: Dict[CoreKind, int] = {
    CoreKind.STRAIGHT: 10,
    CoreKind.CONSECUTIVE_PAIRS: 15,
    CoreKind.AIRPLANE: 20,
}

# 每个牌力占用的张数
CORE_WIDTH: Dict[CoreKind, int] = {
    CoreKind.STRAIGHT: 1,
    CoreKind.CONSECUTIVE_PAIRS: 2,
    CoreKind.AIRPLANE: 3,
}


@dataclass(frozen=True, slots=True)
class Core:
    """
    核心结构

    Attributes:
        kind: 结构类型
        start_rank: 起始牌力
        length: 长度 (顺子张数 / 连对对数 / 飞机三张数)
        ranks: 包含的牌力
    """
    kind: CoreKind
    start_rank: int
    length: int
    ranks: Tuple[int, ...]

    @property
    def end_rank(self) -> int:
        return self.start_rank + self.length - 1

    @property
    def value(self) -> int:
        return self.length * _CORE_UNIT_VALUE[self.kind]

    @property
    def card_count(self) -> int:
        return self.length * CORE_WIDTH[self.kind]

    def contains(self, rank: int) -> bool:
        return rank in self.ranks


@dataclass(frozen=True)
class HandEvaluation:
    """
    手牌结构摘要 (只读，手牌变化时重新计算)

    Attributes:
        rank_counts: 牌力 -> 张数
        cards_by_rank: 牌力 -> 具体的牌
        singles / pairs / triples / quads: 恰好 1/2/3/4 张的牌力 (升序)
        straight_cores / pair_cores / airplane_cores: 各类核心 (价值降序)
        trash_singles: 未被顺子吸收的 3-10 孤张
        control_cards: 控制牌 (A, 2, 王)，每张一项
        has_bomb / has_rocket: 是否有炸弹 / 王炸
        total_cards: 手牌数
        min_turns_to_empty: 出完所需手数的估计
    """
    rank_counts: Dict[int, int]
    cards_by_rank: Dict[int, List[Card]]
    singles: Tuple[int, ...]
    pairs: Tuple[int, ...]
    triples: Tuple[int, ...]
    quads: Tuple[int, ...]
    straight_cores: Tuple[Core, ...]
    pair_cores: Tuple[Core, ...]
    airplane_cores: Tuple[Core, ...]
    trash_singles: Tuple[int, ...]
    control_cards: Tuple[int, ...]
    has_bomb: bool
    has_rocket: bool
    total_cards: int
    min_turns_to_empty: int

    @property
    def control_card_count(self) -> int:
        return len(self.control_cards)

    @property
    def all_cores(self) -> Tuple[Core, ...]:
        return self.straight_cores + self.pair_cores + self.airplane_cores

    def core_ranks(self) -> Set[int]:
        """所有核心结构包含的牌力"""
        return {r for core in self.all_cores for r in core.ranks}

    def is_part_of_core(self, rank: int) -> bool:
        return any(core.contains(rank) for core in self.all_cores)

    @property
    def quality_score(self) -> float:
        """结构质量 (越高越好)"""
        score = float(sum(core.value for core in self.all_cores))
        score -= len(self.trash_singles) * 5
        score += self.control_card_count * 10
        if self.has_bomb:
            score += 30
        if self.has_rocket:
            score += 50
        return score


class HandEvaluator:
    """
    手牌结构评估器

    所有方法都是静态方法，无状态
    """

    @staticmethod
    def evaluate(hand: Sequence[Card]) -> HandEvaluation:
        """
        评估手牌结构

        Args:
            hand: 手牌

        Returns:
            结构摘要
        """
        cards_by_rank = group_by_rank(hand)
        rank_counts = {r: len(cs) for r, cs in cards_by_rank.items()}

        by_count: Dict[int, List[int]] = {1: [], 2: [], 3: [], 4: []}
        for rank, count in rank_counts.items():
            by_count[count].append(rank)
        singles, pairs, triples, quads = (sorted(by_count[i]) for i in (1, 2, 3, 4))

        straight_cores = HandEvaluator._detect_cores(
            CoreKind.STRAIGHT,
            [r for r in rank_counts if r <= MAX_SEQUENCE_RANK],
            MIN_STRAIGHT_LEN,
            MAX_STRAIGHT_LEN,
        )
        pair_cores = HandEvaluator._detect_cores(
            CoreKind.CONSECUTIVE_PAIRS,
            [r for r in pairs if r <= MAX_SEQUENCE_RANK],
            MIN_PAIRS_LEN,
        )
        airplane_cores = HandEvaluator._detect_cores(
            CoreKind.AIRPLANE,
            [r for r in triples if r <= MAX_SEQUENCE_RANK],
            MIN_AIRPLANE_LEN,
        )

        # 散牌只看顺子是否吸收 (孤张不可能属于连对/飞机)
        straight_ranks = {r for core in straight_cores for r in core.ranks}
        trash_singles = tuple(
            r for r in singles if r <= TRASH_MAX_RANK and r not in straight_ranks
        )

        control_cards = tuple(
            r for r in sorted(rank_counts) if r >= CONTROL_RANK for _ in range(rank_counts[r])
        )

        min_turns = HandEvaluator._estimate_min_turns(
            len(hand),
            straight_cores,
            pair_cores,
            airplane_cores,
            len(singles),
            len(pairs),
            len(triples),
        )

        return HandEvaluation(
            rank_counts=rank_counts,
            cards_by_rank=cards_by_rank,
            singles=tuple(singles),
            pairs=tuple(pairs),
            triples=tuple(triples),
            quads=tuple(quads),
            straight_cores=straight_cores,
            pair_cores=pair_cores,
            airplane_cores=airplane_cores,
            trash_singles=trash_singles,
            control_cards=control_cards,
            has_bomb=bool(quads),
            has_rocket=Rank.SMALL_JOKER in rank_counts and Rank.BIG_JOKER in rank_counts,
            total_cards=len(hand),
            min_turns_to_empty=min_turns,
        )

    @staticmethod
    def _detect_cores(
        kind: CoreKind,
        ranks: Sequence[int],
        min_len: int,
        max_len: int = 0,
    ) -> Tuple[Core, ...]:
        """
        贪心识别核心

        从最长的候选长度开始，依次尝试每个起点；候选只有在其牌力不与
        已接受的、同等或更长的核心重叠时才被接受

        Args:
            kind: 结构类型
            ranks: 可用牌力
            min_len: 最短长度
            max_len: 最长长度，0 表示不超过可用牌力数
        """
        available = sorted(set(ranks))
        if len(available) < min_len:
            return ()

        longest = len(available) if max_len == 0 else min(max_len, len(available))
        present = set(available)
        cores: List[Core] = []

        for length in range(longest, min_len - 1, -1):
            for start in available:
                run = tuple(range(start, start + length))
                if not all(r in present for r in run):
                    continue
                overlaps = any(
                    core.length >= length and any(r in core.ranks for r in run)
                    for core in cores
                )
                if not overlaps:
                    cores.append(Core(kind=kind, start_rank=start, length=length, ranks=run))

        cores.sort(key=lambda c: c.value, reverse=True)
        return tuple(cores)

    @staticmethod
    def _estimate_min_turns(
        total_cards: int,
        straights: Sequence[Core],
        pair_cores: Sequence[Core],
        airplanes: Sequence[Core],
        single_count: int,
        pair_count: int,
        triple_count: int,
    ) -> int:
        """
        出完手牌所需手数的粗略估计 (贪心下界)

        每类最好的核心各记一手；三张各带走一个单张/对子；剩下的
        单张、对子各记一手。核心里的牌不会从单张/对子计数中扣除，
        所以结果可能偏大或偏小，只用于比较
        """
        if total_cards == 0:
            return 0

        turns = 0
        if straights:
            turns += 1
        if pair_cores:
            turns += 1
        if airplanes:
            turns += 1

        attachable_singles = min(max(triple_count, 0), single_count)
        attachable_pairs = min(max(triple_count, 0), pair_count)

        airplane_triples = airplanes[0].length if airplanes else 0
        turns += max(0, min(triple_count - airplane_triples, triple_count))

        turns += pair_count - attachable_pairs
        turns += single_count - attachable_singles

        return max(1, min(turns, total_cards))
