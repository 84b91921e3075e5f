"""
Core Layer - 纯游戏逻辑 (无 AI 依赖)

Modules:
    cards: 牌、牌组与发牌
    hands: 牌型定义
    rules: 牌型识别与大小比较
    actions: 出牌组合生成
    state: 游戏状态
"""
from .cards import (
    Rank,
    Suit,
    Card,
    Deck,
    DealResult,
    FULL_DECK,
    RANK_TO_STR,
    STR_TO_RANK,
    cards_to_str,
    str_to_cards,
    ranks_to_str,
    sort_by_power,
    sort_by_power_desc,
    count_ranks,
    group_by_rank,
)

from .hands import (
    HandType,
    HandAnalysis,
    MIN_STRAIGHT_LEN,
    MIN_PAIRS_LEN,
    MIN_AIRPLANE_LEN,
)

from .rules import HandAnalyzer, HandComparator

from .actions import Combo, ComboDetector

from .state import (
    Phase,
    BidAction,
    PlayResult,
    GameState,
    NUM_PLAYERS,
)

__all__ = [
    # cards
    "Rank",
    "Suit",
    "Card",
    "Deck",
    "DealResult",
    "FULL_DECK",
    "RANK_TO_STR",
    "STR_TO_RANK",
    "cards_to_str",
    "str_to_cards",
    "ranks_to_str",
    "sort_by_power",
    "sort_by_power_desc",
    "count_ranks",
    "group_by_rank",
    # hands
    "HandType",
    "HandAnalysis",
    "MIN_STRAIGHT_LEN",
    "MIN_PAIRS_LEN",
    "MIN_AIRPLANE_LEN",
    # rules
    "HandAnalyzer",
    "HandComparator",
    # actions
    "Combo",
    "ComboDetector",
    # state
    "Phase",
    "BidAction",
    "PlayResult",
    "GameState",
    "NUM_PLAYERS",
]
