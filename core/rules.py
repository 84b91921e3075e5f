"""
规则引擎 - 牌型识别、大小比较

所有方法都是纯函数，无状态
"""
from typing import Dict, List, Optional, Sequence

from .cards import Card, Rank, MAX_SEQUENCE_RANK
from .hands import (
    HandAnalysis,
    HandType,
    MIN_STRAIGHT_LEN,
    MIN_PAIRS_LEN,
    MIN_AIRPLANE_LEN,
)


def is_consecutive(ranks: Sequence[int]) -> bool:
    """
    检查牌力列表是否连续

    Args:
        ranks: 已排序的牌力列表
    """
    for i in range(len(ranks) - 1):
        if ranks[i + 1] - ranks[i] != 1:
            return False
    return True


def _is_sequence(ranks: Sequence[int], min_len: int) -> bool:
    """连续、够长，且不含 2 和王"""
    return (
        len(ranks) >= min_len
        and max(ranks) <= MAX_SEQUENCE_RANK
        and is_consecutive(ranks)
    )


class HandAnalyzer:
    """
    牌型识别

    只依赖各牌力的张数，与输入顺序无关
    """

    @staticmethod
    def analyze(cards: Sequence[Card]) -> HandAnalysis:
        """
        识别牌型

        Args:
            cards: 牌列表

        Returns:
            牌型识别结果，无法识别时为 HandAnalysis.INVALID
        """
        if not cards:
            return HandAnalysis.INVALID
        return HandAnalyzer.analyze_ranks([c.power for c in cards])

    @staticmethod
    def analyze_ranks(powers: Sequence[int]) -> HandAnalysis:
        """按牌力列表识别牌型"""
        n = len(powers)
        if n == 0:
            return HandAnalysis.INVALID

        counter = count_ranks_from_powers(powers)
        ranks = sorted(counter)
        counts = sorted(counter.values())

        # 单张
        if n == 1:
            return HandAnalysis(HandType.SINGLE, primary=(ranks[0],))

        # 王炸必须先于对子判断
        if n == 2:
            if ranks == [Rank.SMALL_JOKER, Rank.BIG_JOKER]:
                return HandAnalysis(HandType.ROCKET, primary=(16, 17))
            if counts == [2]:
                return HandAnalysis(HandType.PAIR, primary=(ranks[0],))
            return HandAnalysis.INVALID

        # 三张
        if n == 3:
            if counts == [3]:
                return HandAnalysis(HandType.TRIPLE, primary=(ranks[0],))
            return HandAnalysis.INVALID

        # 炸弹 或 三带一
        if n == 4:
            if counts == [4]:
                return HandAnalysis(HandType.BOMB, primary=(ranks[0],))
            if counts == [1, 3]:
                return HandAnalysis(
                    HandType.TRIPLE_WITH_SINGLE,
                    primary=(_ranks_with_count(counter, 3)[0],),
                    kickers=tuple(_ranks_with_count(counter, 1)),
                )
            return HandAnalysis.INVALID

        # 三带二
        if n == 5 and counts == [2, 3]:
            return HandAnalysis(
                HandType.TRIPLE_WITH_PAIR,
                primary=(_ranks_with_count(counter, 3)[0],),
                kickers=(_ranks_with_count(counter, 2)[0],),
            )

        # 顺子: 每个牌力一张且连续
        if len(ranks) == n and _is_sequence(ranks, MIN_STRAIGHT_LEN):
            return HandAnalysis(
                HandType.STRAIGHT,
                primary=tuple(ranks),
                length=n,
                base_rank=ranks[0],
            )

        # 连对: 所有牌都是对子且连续
        if all(c == 2 for c in counts) and _is_sequence(ranks, MIN_PAIRS_LEN):
            return HandAnalysis(
                HandType.CONSECUTIVE_PAIRS,
                primary=tuple(ranks),
                length=len(ranks),
                base_rank=ranks[0],
            )

        # 飞机不带: 所有牌都是三张且连续
        if all(c == 3 for c in counts) and _is_sequence(ranks, MIN_AIRPLANE_LEN):
            return HandAnalysis(
                HandType.AIRPLANE,
                primary=tuple(ranks),
                length=len(ranks),
                base_rank=ranks[0],
            )

        quads = _ranks_with_count(counter, 4)

        # 四带二单 (两张带牌可以同点)
        if n == 6 and len(quads) == 1:
            kickers = sorted(p for p in powers if p != quads[0])
            return HandAnalysis(
                HandType.QUAD_WITH_SINGLES,
                primary=(quads[0],),
                kickers=tuple(kickers),
            )

        # 四带二对
        if n == 8 and len(quads) == 1:
            pairs = _ranks_with_count(counter, 2)
            if len(pairs) == 2:
                return HandAnalysis(
                    HandType.QUAD_WITH_PAIRS,
                    primary=(quads[0],),
                    kickers=tuple(pairs),
                )
            return HandAnalysis.INVALID

        # 飞机带翅膀
        if n >= 8:
            return HandAnalyzer._analyze_airplane_with_kickers(counter, powers)

        return HandAnalysis.INVALID

    @staticmethod
    def _analyze_airplane_with_kickers(
        counter: Dict[int, int],
        powers: Sequence[int],
    ) -> HandAnalysis:
        """飞机带单 / 飞机带对"""
        triples = _ranks_with_count(counter, 3)
        if not _is_sequence(triples, MIN_AIRPLANE_LEN):
            return HandAnalysis.INVALID

        triple_count = len(triples)
        kickers = sorted(p for p in powers if p not in triples)

        # 飞机带单: 带牌张数 == 三张数
        if len(kickers) == triple_count:
            return HandAnalysis(
                HandType.AIRPLANE_WITH_SINGLES,
                primary=tuple(triples),
                kickers=tuple(kickers),
                length=triple_count,
                base_rank=triples[0],
            )

        # 飞机带对: 带牌全部是对子，且对数 == 三张数
        if len(kickers) == triple_count * 2:
            pair_ranks = sorted(r for r in counter if r not in triples)
            if len(pair_ranks) == triple_count and all(counter[r] == 2 for r in pair_ranks):
                return HandAnalysis(
                    HandType.AIRPLANE_WITH_PAIRS,
                    primary=tuple(triples),
                    kickers=tuple(pair_ranks),
                    length=triple_count,
                    base_rank=triples[0],
                )

        return HandAnalysis.INVALID


def count_ranks_from_powers(powers: Sequence[int]) -> Dict[int, int]:
    counter: Dict[int, int] = {}
    for p in powers:
        counter[p] = counter.get(p, 0) + 1
    return counter


def _ranks_with_count(counter: Dict[int, int], count: int) -> List[int]:
    return sorted(r for r, c in counter.items() if c == count)


class HandComparator:
    """
    大小比较

    王炸 > 炸弹 > 其他牌型；其他牌型必须同类型 (连续牌型还需同长度) 才能比较
    """

    @staticmethod
    def can_beat(current: HandAnalysis, previous: Optional[HandAnalysis]) -> bool:
        """
        current 能否压过 previous

        Args:
            current: 要出的牌
            previous: 桌面上的牌 (None 表示主动出牌)
        """
        # 主动出牌: 任何合法牌型都可以
        if previous is None or not previous.is_valid:
            return current.is_valid

        if not current.is_valid:
            return False

        # 王炸最大
        if current.type == HandType.ROCKET:
            return True

        # 炸弹压一切非炸弹，炸弹之间比大小，不能压王炸
        if current.type == HandType.BOMB:
            if previous.type == HandType.ROCKET:
                return False
            if previous.type == HandType.BOMB:
                return current.compare_value > previous.compare_value
            return True

        # 上家是炸弹/王炸，只有炸弹/王炸能压
        if previous.is_bomb_like:
            return False

        if current.type != previous.type:
            return False

        # 连续牌型: 长度相同，起始牌更大
        if current.is_sequence:
            if current.length != previous.length:
                return False
            return current.base_rank > previous.base_rank

        return current.compare_value > previous.compare_value

    @staticmethod
    def invalid_reason(
        current: HandAnalysis,
        previous: Optional[HandAnalysis],
    ) -> Optional[str]:
        """
        无法压过时的原因 (给玩家看)

        Returns:
            合法时返回 None，否则每条失败路径对应一个不同的提示
        """
        if not current.is_valid:
            return "Invalid hand combination"
        if previous is None or not previous.is_valid:
            return None

        if current.type == HandType.ROCKET:
            return None

        if current.type == HandType.BOMB:
            if previous.type == HandType.ROCKET:
                return "Can only beat with a stronger bomb or rocket"
            if previous.type == HandType.BOMB and current.compare_value <= previous.compare_value:
                return "Bomb is not strong enough"
            return None

        if previous.is_bomb_like:
            return "Can only beat with a stronger bomb or rocket"

        if current.type != previous.type:
            return f"Must play the same hand type ({previous.type.name.lower()})"

        if current.is_sequence:
            if current.length != previous.length:
                return f"Must have the same length ({previous.length})"
            if current.base_rank <= previous.base_rank:
                return "Not strong enough"
        elif current.compare_value <= previous.compare_value:
            return "Not strong enough"

        return None
