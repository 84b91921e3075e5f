"""
对局控制器

持有当前 GameState，向界面层广播状态变化，并驱动 AI 回合。
状态本身不可变，控制器只负责替换引用
"""
from typing import Callable, List, Optional
import random
import logging

import numpy as np

from core.cards import Deck, cards_to_str
from core.state import BidAction, GameState, Phase
from ai import build_ai, find_fallback_move

from .config import GameConfig

logger = logging.getLogger(__name__)

Listener = Callable[[GameState], None]


class GameController:
    """
    对局控制器

    Example:
        controller = GameController(GameConfig(human_index=None, seed=0))
        controller.new_round()
        controller.run_until_human()
    """

    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config or GameConfig()
        self._rng = random.Random(self.config.seed)
        self._np_rng = np.random.default_rng(self.config.seed)
        self.ai = build_ai(self.config.ai, rng=self._np_rng)

        self._state = GameState.initial(self.config.human_index)
        self._listeners: List[Listener] = []

    @property
    def state(self) -> GameState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        注册状态监听

        Returns:
            取消注册的函数
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: GameState) -> bool:
        if state is self._state:
            return False
        self._state = state
        for listener in list(self._listeners):
            listener(state)
        return True

    # === 对局流程 ===

    def new_round(self) -> GameState:
        """洗牌、发牌，并按固定规则确定地主"""
        deal = Deck.standard().shuffle(self._rng).deal()
        state = GameState.initial(self.config.human_index).start_new_round(deal)

        seat = self.config.landlord_seat
        while state.current_turn != seat:
            state = state.with_bid(state.current_turn, BidAction.PASS)
        state = state.with_bid(seat, BidAction.CALL)

        logger.info(f"New round started, landlord is player {state.landlord_index}")
        self._set_state(state)
        return state

    def toggle_select(self, card_id: str) -> GameState:
        self._set_state(self._state.toggle_select(card_id))
        return self._state

    def play_selected(self) -> bool:
        """
        人类玩家出选中的牌

        Returns:
            是否出牌成功；失败时原因写入 ui_message
        """
        result = self._state.try_play_selected()
        if not result.ok:
            self._set_state(self._state.with_ui_message(result.error))
            return False

        self._set_state(result.state)
        self._log_if_finished()
        return True

    def pass_turn(self) -> bool:
        """人类玩家不要"""
        if not self._state.is_player_turn:
            return False
        return self._set_state(self._state.pass_turn())

    def clear_message(self):
        self._set_state(self._state.clear_ui_message())

    # === AI ===

    @property
    def needs_ai_turn(self) -> bool:
        state = self._state
        return state.phase == Phase.PLAYING and not state.is_player_turn

    def advance(self) -> bool:
        """
        执行一个 AI 回合

        Returns:
            状态是否发生变化
        """
        if not self.needs_ai_turn:
            return False

        state = self._state
        player = state.current_turn
        move = self.ai.decide(state, player)

        if move is None:
            if not state.can_pass:
                # 有牌权时不能不要
                logger.warning(f"AI player {player} tried to pass while leading")
                move = find_fallback_move(state.hand(player), None)
            else:
                return self._set_state(state.pass_turn())

        result = state.with_play(player, move)
        if not result.ok:
            logger.warning(
                f"AI player {player} made illegal move {cards_to_str(move)}: {result.error}"
            )
            fallback = find_fallback_move(state.hand(player), state.last_played_hand)
            result = state.with_play(player, fallback) if fallback else None
            if result is None or not result.ok:
                if state.can_pass:
                    return self._set_state(state.pass_turn())
                raise ValueError(f"Player {player} has no legal move while leading")

        self._set_state(result.state)
        self._log_if_finished()
        return True

    def run_until_human(self, max_steps: int = 1000) -> GameState:
        """连续执行 AI 回合，直到轮到人类玩家或对局结束"""
        steps = 0
        while self.needs_ai_turn:
            if steps >= max_steps:
                raise RuntimeError(f"Game did not reach a human turn after {max_steps} AI steps")
            self.advance()
            steps += 1
        return self._state

    def _log_if_finished(self):
        state = self._state
        if state.is_finished:
            logger.info(
                f"Game over: player {state.winner_index} wins ({state.winning_side}), "
                f"{len(state.play_history)} turns, {state.bombs_count} bombs"
            )
