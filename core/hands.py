"""
牌型定义

斗地主共有 14 种合法牌型，外加 INVALID
"""
from enum import IntEnum
from dataclasses import dataclass
from typing import ClassVar, Tuple


class HandType(IntEnum):
    """牌型"""
    INVALID = 0               # 非法牌型
    SINGLE = 1                # 单张
    PAIR = 2                  # 对子
    TRIPLE = 3                # 三张
    TRIPLE_WITH_SINGLE = 4    # 三带一
    TRIPLE_WITH_PAIR = 5      # 三带二
    STRAIGHT = 6              # 顺子 (至少5张)
    CONSECUTIVE_PAIRS = 7     # 连对 (至少3对)
    AIRPLANE = 8              # 飞机不带 (至少2个三张)
    AIRPLANE_WITH_SINGLES = 9   # 飞机带单
    AIRPLANE_WITH_PAIRS = 10    # 飞机带对
    QUAD_WITH_SINGLES = 11    # 四带二单
    QUAD_WITH_PAIRS = 12      # 四带二对
    BOMB = 13                 # 炸弹
    ROCKET = 14               # 王炸


# 需要比较长度的连续牌型
SEQUENCE_TYPES = frozenset({
    HandType.STRAIGHT,
    HandType.CONSECUTIVE_PAIRS,
    HandType.AIRPLANE,
    HandType.AIRPLANE_WITH_SINGLES,
    HandType.AIRPLANE_WITH_PAIRS,
})

BOMB_TYPES = frozenset({HandType.BOMB, HandType.ROCKET})

# 顺子/连对/飞机的长度范围
MIN_STRAIGHT_LEN = 5
MAX_STRAIGHT_LEN = 12
MIN_PAIRS_LEN = 3
MAX_PAIRS_LEN = 10
MIN_AIRPLANE_LEN = 2
MAX_AIRPLANE_LEN = 6
# 带翅膀的飞机只枚举到 4 连，控制组合数
MAX_AIRPLANE_KICKER_LEN = 4


@dataclass(frozen=True, slots=True)
class HandAnalysis:
    """
    牌型识别结果

    Attributes:
        type: 牌型
        primary: 主牌牌力 (如三带一中的三张)
        kickers: 带牌牌力
        length: 连续牌型的长度 (顺子张数 / 连对对数 / 飞机三张数)
        base_rank: 连续牌型的起始牌力
    """
    type: HandType
    primary: Tuple[int, ...] = ()
    kickers: Tuple[int, ...] = ()
    length: int = 0
    base_rank: int = 0

    INVALID: ClassVar['HandAnalysis']

    @property
    def is_valid(self) -> bool:
        return self.type != HandType.INVALID

    @property
    def is_bomb_like(self) -> bool:
        return self.type in BOMB_TYPES

    @property
    def is_sequence(self) -> bool:
        return self.type in SEQUENCE_TYPES

    @property
    def compare_value(self) -> int:
        """比较值: 主牌中的最大牌力"""
        if not self.primary:
            return 0
        return max(self.primary)

    def __str__(self) -> str:
        return (
            f"HandAnalysis(type={self.type.name}, primary={list(self.primary)}, "
            f"kickers={list(self.kickers)}, len={self.length}, base={self.base_rank})"
        )


HandAnalysis.INVALID = HandAnalysis(type=HandType.INVALID)
