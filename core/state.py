"""
游戏状态定义

使用不可变数据结构:
- 每次状态转移都返回新实例，便于撤销/回放
- 渲染层可以安全地并发读取快照
"""
from dataclasses import dataclass, field, replace
from typing import FrozenSet, List, Optional, Sequence, Tuple
from enum import Enum
import logging

from .cards import Card, DealResult, DECK_SIZE, sort_by_power
from .hands import HandAnalysis
from .rules import HandAnalyzer, HandComparator

logger = logging.getLogger(__name__)

NUM_PLAYERS = 3

# 连续两家不要后，桌面清空
PASSES_TO_RESET = 2


class Phase(Enum):
    """游戏阶段"""
    INITIAL = "initial"      # 未发牌
    BIDDING = "bidding"      # 叫牌阶段
    PLAYING = "playing"      # 出牌阶段
    GAME_OVER = "game_over"  # 游戏结束


class BidAction(Enum):
    """叫牌动作"""
    PASS = "pass"
    CALL = "call"  # 叫地主
    ROB = "rob"    # 抢地主


@dataclass(frozen=True)
class PlayResult:
    """
    出牌结果

    Attributes:
        state: 成功时的新状态
        error: 失败时给玩家看的原因
    """
    state: Optional['GameState'] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state is not None


@dataclass(frozen=True)
class GameState:
    """
    不可变游戏状态

    Attributes:
        phase: 游戏阶段
        hands: 三家手牌 (按牌力排序)
        bottom_cards: 底牌 (地主认领前)
        landlord_index: 地主座位，叫牌结束前为 None
        current_turn: 当前行动玩家 (0..2)
        last_played_hand: 桌面上需要压的牌型
        last_played_cards: 桌面上的牌
        last_played_by: 桌面上的牌是谁出的
        pass_count: 连续不要次数
        selected_card_ids: 人类玩家已选中的牌
        ui_message: 临时提示
        winner_index: 赢家座位
        human_index: 人类玩家座位，None 表示全部由 AI 控制
        play_history: 出牌历史 ((player, cards), ...)，不要记为空元组
        bombs_count: 已打出的炸弹/王炸数
    """
    phase: Phase
    hands: Tuple[Tuple[Card, ...], ...]
    bottom_cards: Tuple[Card, ...] = ()
    landlord_index: Optional[int] = None
    current_turn: int = 0
    last_played_hand: Optional[HandAnalysis] = None
    last_played_cards: Optional[Tuple[Card, ...]] = None
    last_played_by: Optional[int] = None
    pass_count: int = 0
    selected_card_ids: FrozenSet[str] = field(default_factory=frozenset)
    ui_message: Optional[str] = None
    winner_index: Optional[int] = None
    human_index: Optional[int] = 0
    play_history: Tuple[Tuple[int, Tuple[Card, ...]], ...] = ()
    bombs_count: int = 0

    @classmethod
    def initial(cls, human_index: Optional[int] = 0) -> 'GameState':
        """未发牌的空状态"""
        return cls(
            phase=Phase.INITIAL,
            hands=((), (), ()),
            human_index=human_index,
        )

    # === 查询 ===

    def hand(self, player_index: int) -> Tuple[Card, ...]:
        return self.hands[player_index]

    @property
    def hand_sizes(self) -> Tuple[int, ...]:
        return tuple(len(h) for h in self.hands)

    @property
    def total_cards_remaining(self) -> int:
        """三家剩余手牌总数"""
        return sum(self.hand_sizes)

    @property
    def played_cards(self) -> List[Card]:
        return [c for _, cards in self.play_history for c in cards]

    @property
    def selected_cards(self) -> List[Card]:
        if self.human_index is None:
            return []
        return [c for c in self.hands[self.human_index] if c.id in self.selected_card_ids]

    @property
    def is_player_turn(self) -> bool:
        return self.human_index is not None and self.current_turn == self.human_index

    @property
    def can_play(self) -> bool:
        return self.phase == Phase.PLAYING and self.is_player_turn and bool(self.selected_card_ids)

    @property
    def can_pass(self) -> bool:
        """当前玩家能否不要 (桌面上有需要压的牌)"""
        return self.phase == Phase.PLAYING and self.last_played_hand is not None

    @property
    def is_finished(self) -> bool:
        return self.phase == Phase.GAME_OVER

    @property
    def winning_side(self) -> Optional[str]:
        """"landlord" 或 "farmer" """
        if self.winner_index is None:
            return None
        return "landlord" if self.winner_index == self.landlord_index else "farmer"

    def is_spring(self) -> bool:
        """春天: 农民一手未出 (地主胜)，或地主只出了首手 (农民胜)"""
        if self.winner_index is None or self.landlord_index is None:
            return False
        landlord_plays = sum(
            1 for player, cards in self.play_history if cards and player == self.landlord_index
        )
        farmer_plays = sum(
            1 for player, cards in self.play_history if cards and player != self.landlord_index
        )
        if self.winning_side == "landlord":
            return farmer_plays == 0
        return landlord_plays <= 1

    def card_count(self) -> int:
        """手牌 + 底牌 + 已出的牌，恒为 54"""
        return self.total_cards_remaining + len(self.bottom_cards) + len(self.played_cards)

    # === 状态转移 ===

    def start_new_round(self, deal: DealResult) -> 'GameState':
        """
        发牌后进入叫牌阶段

        Raises:
            ValueError: 发牌结果不是 54 张不重复的牌
        """
        all_cards = deal.all_cards()
        if len(all_cards) != DECK_SIZE or len(set(all_cards)) != DECK_SIZE:
            raise ValueError(f"Deal must contain {DECK_SIZE} unique cards")

        return GameState(
            phase=Phase.BIDDING,
            hands=tuple(tuple(sort_by_power(h)) for h in deal.hands),
            bottom_cards=tuple(deal.bottom_cards),
            current_turn=0,
            human_index=self.human_index,
        )

    def with_bid(self, player_index: int, action: BidAction) -> 'GameState':
        """
        叫牌 (固定规则: 第一个叫的人当地主)

        Args:
            player_index: 叫牌玩家
            action: 叫牌动作

        Returns:
            新状态；非叫牌阶段或未轮到该玩家时原样返回
        """
        if self.phase != Phase.BIDDING or player_index != self.current_turn:
            return self

        if action in (BidAction.CALL, BidAction.ROB):
            hands = list(self.hands)
            hands[player_index] = tuple(sort_by_power(hands[player_index] + self.bottom_cards))
            logger.info(f"Player {player_index} becomes landlord")
            return GameState(
                phase=Phase.PLAYING,
                hands=tuple(hands),
                bottom_cards=(),
                landlord_index=player_index,
                current_turn=player_index,  # 地主先出
                human_index=self.human_index,
            )

        return replace(self, current_turn=(self.current_turn + 1) % NUM_PLAYERS)

    def toggle_select(self, card_id: str) -> 'GameState':
        """
        切换人类玩家的选牌

        非出牌阶段、非人类回合或牌不在手中时原样返回
        """
        if self.phase != Phase.PLAYING or not self.is_player_turn:
            return self
        if not any(c.id == card_id for c in self.hands[self.human_index]):
            return self

        if card_id in self.selected_card_ids:
            selection = self.selected_card_ids - {card_id}
        else:
            selection = self.selected_card_ids | {card_id}
        return replace(self, selected_card_ids=frozenset(selection))

    def try_play_selected(self) -> PlayResult:
        """人类玩家出选中的牌"""
        if self.phase != Phase.PLAYING:
            return PlayResult(error="Not in playing phase")
        if not self.is_player_turn:
            return PlayResult(error="Not your turn")

        selected = self.selected_cards
        if not selected:
            return PlayResult(error="No cards selected")

        return self.with_play(self.human_index, selected)

    def with_play(self, player_index: int, cards: Sequence[Card]) -> PlayResult:
        """
        出牌

        Args:
            player_index: 出牌玩家
            cards: 要出的牌

        Returns:
            成功时带新状态，失败时带原因 (状态不变)
        """
        if self.phase != Phase.PLAYING:
            return PlayResult(error="Not in playing phase")
        if player_index != self.current_turn:
            return PlayResult(error="Not your turn")
        if not cards:
            return PlayResult(error="No cards selected")

        hand = self.hands[player_index]
        played = set(cards)
        if len(played) != len(cards) or not played.issubset(hand):
            return PlayResult(error="Cards are not in hand")

        analysis = HandAnalyzer.analyze(cards)
        if not analysis.is_valid:
            return PlayResult(error="Invalid hand combination")

        if not HandComparator.can_beat(analysis, self.last_played_hand):
            reason = HandComparator.invalid_reason(analysis, self.last_played_hand)
            return PlayResult(error=reason or "Cannot beat last played hand")

        played_cards = tuple(sort_by_power(cards))
        new_hand = tuple(c for c in hand if c not in played)
        hands = list(self.hands)
        hands[player_index] = new_hand

        finished = not new_hand
        message = None
        if finished:
            message = "You win!" if player_index == self.human_index else f"Player {player_index} wins!"

        return PlayResult(state=GameState(
            phase=Phase.GAME_OVER if finished else Phase.PLAYING,
            hands=tuple(hands),
            bottom_cards=self.bottom_cards,
            landlord_index=self.landlord_index,
            current_turn=self.current_turn if finished else (player_index + 1) % NUM_PLAYERS,
            last_played_hand=analysis,
            last_played_cards=played_cards,
            last_played_by=player_index,
            pass_count=0,
            ui_message=message,
            winner_index=player_index if finished else None,
            human_index=self.human_index,
            play_history=self.play_history + ((player_index, played_cards),),
            bombs_count=self.bombs_count + (1 if analysis.is_bomb_like else 0),
        ))

    def pass_turn(self) -> 'GameState':
        """
        不要

        只有桌面上有需要压的牌时才生效；连续两家不要后桌面清空，
        下一家 (即最后出牌的人) 自由出牌
        """
        if not self.can_pass:
            return self

        pass_count = self.pass_count + 1
        reset = pass_count >= PASSES_TO_RESET

        return replace(
            self,
            current_turn=(self.current_turn + 1) % NUM_PLAYERS,
            last_played_hand=None if reset else self.last_played_hand,
            last_played_cards=None if reset else self.last_played_cards,
            last_played_by=None if reset else self.last_played_by,
            pass_count=0 if reset else pass_count,
            selected_card_ids=frozenset() if self.is_player_turn else self.selected_card_ids,
            play_history=self.play_history + ((self.current_turn, ()),),
        )

    def with_ui_message(self, message: Optional[str]) -> 'GameState':
        return replace(self, ui_message=message)

    def clear_ui_message(self) -> 'GameState':
        if self.ui_message is None:
            return self
        return replace(self, ui_message=None)
