"""
简单 AI 与兜底走法

不做组合枚举，只按牌力分组找最小的可压牌；专家 AI 出错时也用它兜底
"""
from typing import Dict, List, Optional, Sequence

from core.cards import Card, Rank, MAX_SEQUENCE_RANK, group_by_rank, sort_by_power
from core.hands import HandAnalysis, HandType


def _lowest_of_size(
    by_rank: Dict[int, List[Card]],
    size: int,
    above: int,
) -> Optional[List[Card]]:
    for rank in sorted(by_rank):
        if rank > above and len(by_rank[rank]) >= size:
            return by_rank[rank][:size]
    return None


def _lowest_straight(
    by_rank: Dict[int, List[Card]],
    length: int,
    above_base: int,
) -> Optional[List[Card]]:
    for start in sorted(by_rank):
        if start <= above_base:
            continue
        run = range(start, start + length)
        if run[-1] <= MAX_SEQUENCE_RANK and all(r in by_rank for r in run):
            return [by_rank[r][0] for r in run]
    return None


def _rocket(by_rank: Dict[int, List[Card]]) -> Optional[List[Card]]:
    if Rank.SMALL_JOKER in by_rank and Rank.BIG_JOKER in by_rank:
        return [by_rank[Rank.SMALL_JOKER][0], by_rank[Rank.BIG_JOKER][0]]
    return None


def _lowest_bomb(by_rank: Dict[int, List[Card]], above: int = 0) -> Optional[List[Card]]:
    for rank in sorted(by_rank):
        if rank > above and len(by_rank[rank]) == 4:
            return list(by_rank[rank])
    return _rocket(by_rank)


def find_fallback_move(
    hand: Sequence[Card],
    last_played: Optional[HandAnalysis],
) -> Optional[List[Card]]:
    """
    确定性的最小可出牌

    Args:
        hand: 手牌
        last_played: 需要压的牌型 (None 表示主动出牌)

    Returns:
        要出的牌；None 表示不要
    """
    if not hand:
        return None

    cards = sort_by_power(hand)

    # 主动出牌: 最小单张
    if last_played is None:
        return [cards[0]]

    by_rank = group_by_rank(cards)
    required = last_played.compare_value

    if last_played.type == HandType.ROCKET:
        return None

    if last_played.type == HandType.BOMB:
        return _lowest_bomb(by_rank, above=required)

    move: Optional[List[Card]] = None
    if last_played.type == HandType.SINGLE:
        move = _lowest_of_size(by_rank, 1, required)
    elif last_played.type == HandType.PAIR:
        move = _lowest_of_size(by_rank, 2, required)
    elif last_played.type == HandType.TRIPLE:
        move = _lowest_of_size(by_rank, 3, required)
    elif last_played.type == HandType.STRAIGHT:
        move = _lowest_straight(by_rank, last_played.length, last_played.base_rank)

    # 同牌型压不住 (或复杂牌型)，用最小的炸弹
    return move or _lowest_bomb(by_rank)


class EasyAI:
    """最小可出牌 AI"""

    name = "easy"

    def find_move(
        self,
        hand: Sequence[Card],
        last_played: Optional[HandAnalysis],
        context=None,
    ) -> Optional[List[Card]]:
        return find_fallback_move(hand, last_played)

    def decide(self, state, player_index: int) -> Optional[List[Card]]:
        return self.find_move(state.hand(player_index), state.last_played_hand)
