"""
牌的定义与发牌

斗地主使用 54 张牌：
- 3-10, J, Q, K, A, 2 各 4 张 (四种花色)
- 小王、大王各 1 张 (无花色)

牌力 (power) 即 Rank 的整数值: 3..15 为普通牌 (2 = 15)，小王 16，大王 17
"""
from enum import Enum, IntEnum
from dataclasses import dataclass
from typing import Counter as CounterType, Dict, List, Optional, Sequence, Tuple
from collections import Counter
import random


class Rank(IntEnum):
    """牌面值 (数值即牌力)"""
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14
    TWO = 15
    SMALL_JOKER = 16
    BIG_JOKER = 17


class Suit(Enum):
    """花色"""
    SPADES = "spades"
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    NONE = "none"  # 仅用于大小王


# 普通花色 (发牌顺序)
SUITS: Tuple[Suit, ...] = (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS)

# 普通牌面值 (不含王)
ORDINARY_RANKS: Tuple[Rank, ...] = tuple(r for r in Rank if r <= Rank.TWO)

JOKERS: Tuple[Rank, ...] = (Rank.SMALL_JOKER, Rank.BIG_JOKER)

# 顺子/连对/飞机中允许出现的最大牌力 (A)
MAX_SEQUENCE_RANK = Rank.ACE

# 控制牌的最小牌力 (A, 2, 大小王)
CONTROL_RANK = Rank.ACE

# 牌面值到显示字符的映射
RANK_TO_STR: Dict[int, str] = {
    3: '3', 4: '4', 5: '5', 6: '6', 7: '7',
    8: '8', 9: '9', 10: '10', 11: 'J', 12: 'Q',
    13: 'K', 14: 'A', 15: '2', 16: 'SJ', 17: 'BJ'
}

# 显示字符到牌面值的映射
STR_TO_RANK: Dict[str, int] = {v: k for k, v in RANK_TO_STR.items()}

SUIT_TO_STR: Dict[Suit, str] = {
    Suit.SPADES: 'S',
    Suit.HEARTS: 'H',
    Suit.DIAMONDS: 'D',
    Suit.CLUBS: 'C',
}

STR_TO_SUIT: Dict[str, Suit] = {v: k for k, v in SUIT_TO_STR.items()}

# 同牌力时的花色排序
_SUIT_ORDER: Dict[Suit, int] = {
    Suit.SPADES: 0, Suit.HEARTS: 1, Suit.DIAMONDS: 2, Suit.CLUBS: 3, Suit.NONE: 4,
}


@dataclass(frozen=True, slots=True)
class Card:
    """
    不可变的牌

    相等性与哈希由 (rank, suit) 决定

    Attributes:
        rank: 牌面值
        suit: 花色 (王为 Suit.NONE)
    """
    rank: Rank
    suit: Suit

    def __post_init__(self):
        if self.rank in JOKERS and self.suit != Suit.NONE:
            raise ValueError(f"Joker cannot have suit {self.suit.value}")
        if self.rank not in JOKERS and self.suit == Suit.NONE:
            raise ValueError(f"Card {RANK_TO_STR[self.rank]} requires a suit")

    @property
    def power(self) -> int:
        return int(self.rank)

    @property
    def is_joker(self) -> bool:
        return self.rank in JOKERS

    @property
    def id(self) -> str:
        """稳定的标识 (用于选牌集合)"""
        return f"{self.suit.value}_{RANK_TO_STR[self.rank]}"

    def __str__(self) -> str:
        if self.is_joker:
            return RANK_TO_STR[self.rank]
        return f"{RANK_TO_STR[self.rank]}{SUIT_TO_STR[self.suit]}"


def sort_key(card: Card) -> Tuple[int, int]:
    """规范排序键: 先牌力，再花色"""
    return (card.power, _SUIT_ORDER[card.suit])


def sort_by_power(cards: Sequence[Card]) -> List[Card]:
    """按牌力升序排列"""
    return sorted(cards, key=sort_key)


def sort_by_power_desc(cards: Sequence[Card]) -> List[Card]:
    """按牌力降序排列"""
    return sorted(cards, key=sort_key, reverse=True)


def _build_full_deck() -> Tuple[Card, ...]:
    cards = [Card(rank, suit) for suit in SUITS for rank in ORDINARY_RANKS]
    cards.append(Card(Rank.SMALL_JOKER, Suit.NONE))
    cards.append(Card(Rank.BIG_JOKER, Suit.NONE))
    return tuple(cards)


# 完整牌组 (54 张，规范顺序)
FULL_DECK: Tuple[Card, ...] = _build_full_deck()

DECK_SIZE = 54
HAND_SIZE = 17
BOTTOM_SIZE = 3


def count_ranks(cards: Sequence[Card]) -> CounterType[int]:
    """统计各牌力的张数"""
    return Counter(card.power for card in cards)


def group_by_rank(cards: Sequence[Card]) -> Dict[int, List[Card]]:
    """
    按牌力分组

    Returns:
        牌力 -> 该牌力的牌 (按花色排序)，键按牌力升序插入
    """
    groups: Dict[int, List[Card]] = {}
    for card in sort_by_power(cards):
        groups.setdefault(card.power, []).append(card)
    return groups


def cards_to_str(cards: Sequence[Card]) -> str:
    """
    将牌列表转换为可读字符串

    Returns:
        如 "3S 3H 4C SJ"，空列表返回 "Pass"
    """
    if not cards:
        return "Pass"
    return ' '.join(str(c) for c in sort_by_power(cards))


def ranks_to_str(ranks: Sequence[int]) -> str:
    """将牌力列表转换为字符串，如 "3 3 4 SJ" """
    return ' '.join(RANK_TO_STR[r] for r in sorted(ranks))


def str_to_cards(s: str) -> List[Card]:
    """
    将字符串转换为牌列表

    Args:
        s: 空白分隔的牌，如 "3S 10H QD SJ BJ"

    Returns:
        牌列表
    """
    cards = []
    for token in s.split():
        token = token.upper()
        if token in ('SJ', 'BJ'):
            cards.append(Card(Rank(STR_TO_RANK[token]), Suit.NONE))
            continue
        rank_str, suit_str = token[:-1], token[-1]
        if rank_str not in STR_TO_RANK or suit_str not in STR_TO_SUIT:
            raise ValueError(f"Cannot parse card {token!r}")
        cards.append(Card(Rank(STR_TO_RANK[rank_str]), STR_TO_SUIT[suit_str]))
    return cards


@dataclass(frozen=True)
class DealResult:
    """发牌结果: 三家各 17 张 + 3 张底牌"""
    player0: Tuple[Card, ...]
    player1: Tuple[Card, ...]
    player2: Tuple[Card, ...]
    bottom_cards: Tuple[Card, ...]

    @property
    def hands(self) -> Tuple[Tuple[Card, ...], ...]:
        return (self.player0, self.player1, self.player2)

    def all_cards(self) -> List[Card]:
        return [*self.player0, *self.player1, *self.player2, *self.bottom_cards]


class Deck:
    """
    一副牌

    只被发牌流程持有: 洗牌后发一次即丢弃
    """

    def __init__(self, cards: Optional[Sequence[Card]] = None):
        self.cards: List[Card] = list(FULL_DECK if cards is None else cards)

    @classmethod
    def standard(cls) -> 'Deck':
        """标准 54 张牌"""
        return cls(FULL_DECK)

    def shuffle(self, rng: Optional[random.Random] = None) -> 'Deck':
        """洗牌 (可注入随机源)"""
        (rng or random.Random()).shuffle(self.cards)
        return self

    def deal(self) -> DealResult:
        """
        发牌: 17 + 17 + 17 + 3 张底牌

        Raises:
            ValueError: 牌数不是 54 张或有重复牌
        """
        if len(self.cards) != DECK_SIZE or len(set(self.cards)) != DECK_SIZE:
            raise ValueError(f"Deck must have {DECK_SIZE} unique cards to deal")

        return DealResult(
            player0=tuple(self.cards[0:17]),
            player1=tuple(self.cards[17:34]),
            player2=tuple(self.cards[34:51]),
            bottom_cards=tuple(self.cards[51:54]),
        )

    def __len__(self) -> int:
        return len(self.cards)
