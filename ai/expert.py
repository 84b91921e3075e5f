"""
专家 AI

决策流程:
1. 评估当前手牌结构
2. 有牌权时枚举所有组合；否则枚举能压过上家的组合，并加入"不要"
3. 用 MoveEvaluator 给每个候选打分
4. 在接近最高分的候选中做低温 softmax 采样，保持强势的同时不完全可预测

枚举/评分过程中的任何异常都会被记录并替换为确定性的兜底走法，
保证 AI 回合不会卡住对局
"""
from dataclasses import dataclass
from typing import List, Optional, Sequence
import logging

import numpy as np

from core.cards import Card, cards_to_str
from core.hands import HandAnalysis, HandType
from core.actions import Combo, ComboDetector

from .config import AIConfig
from .easy import find_fallback_move
from .hand_evaluator import HandEvaluation, HandEvaluator
from .move_evaluator import GameContext, MoveEvaluator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredMove:
    """带分数的候选走法，move 为 None 表示不要"""
    move: Optional[Combo]
    score: float

    @property
    def is_pass(self) -> bool:
        return self.move is None

    def __repr__(self) -> str:
        name = self.move.type.name if self.move is not None else "PASS"
        return f"ScoredMove({name}, score={self.score:.1f})"


class ExpertAI:
    """
    启发式评分 AI

    随机性只来自注入的 numpy Generator，固定种子即可复现决策
    """

    name = "expert"

    def __init__(
        self,
        config: Optional[AIConfig] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        """
        Args:
            config: AI 配置
            rng: 随机源 (优先)
            seed: 未提供 rng 时用于创建随机源
        """
        self.config = config or AIConfig()
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def decide(self, state, player_index: int) -> Optional[List[Card]]:
        """根据游戏状态为 player_index 选择出牌"""
        context = GameContext.from_state(state, player_index, self.config.phase_basis)
        return self.find_move(state.hand(player_index), state.last_played_hand, context)

    def find_move(
        self,
        hand: Sequence[Card],
        last_played: Optional[HandAnalysis],
        context: GameContext,
    ) -> Optional[List[Card]]:
        """
        选择出牌

        Args:
            hand: 手牌
            last_played: 需要压的牌型 (None 表示有牌权)
            context: 局面信息

        Returns:
            要出的牌；None 表示不要
        """
        try:
            return self._find_move(hand, last_played, context)
        except Exception:
            logger.exception(
                f"Expert AI failed for player {context.player_index}, using fallback move"
            )
            return find_fallback_move(hand, last_played)

    def _find_move(
        self,
        hand: Sequence[Card],
        last_played: Optional[HandAnalysis],
        context: GameContext,
    ) -> Optional[List[Card]]:
        before = HandEvaluator.evaluate(hand)

        if last_played is None:
            scored = self.score_openings(hand, before, context)
            selected = self.select(scored)
            if selected is None or selected.move is None:
                return find_fallback_move(hand, None)
            logger.debug(f"Player {context.player_index} leads {cards_to_str(selected.move.cards)}")
            return list(selected.move.cards)

        legal = ComboDetector.find_beating_combos(hand, last_played)
        if not legal:
            return None

        scored = self.score_moves(hand, legal, before, context)

        # 对手快出完时，有牌可压就必须压
        if not (self.config.never_pass_when_threatened and context.opponent_near_win):
            scored.append(ScoredMove(move=None, score=MoveEvaluator.score_pass(before, context)))

        selected = self.select(scored)
        if selected is None or selected.move is None:
            logger.debug(f"Player {context.player_index} passes")
            return None
        logger.debug(f"Player {context.player_index} plays {cards_to_str(selected.move.cards)}")
        return list(selected.move.cards)

    def score_moves(
        self,
        hand: Sequence[Card],
        combos: Sequence[Combo],
        before: HandEvaluation,
        context: GameContext,
    ) -> List[ScoredMove]:
        """模拟每个组合打出后的手牌并打分"""
        scored = []
        for combo in combos:
            played = set(combo.cards)
            after = HandEvaluator.evaluate([c for c in hand if c not in played])
            score = MoveEvaluator.score_move(combo, before, after, context, self.config)
            scored.append(ScoredMove(move=combo, score=score))
        return scored

    def score_openings(
        self,
        hand: Sequence[Card],
        before: HandEvaluation,
        context: GameContext,
    ) -> List[ScoredMove]:
        """有牌权时的候选: 所有组合 + 大牌型奖励"""
        combos = ComboDetector.find_all_combos(hand)
        return [
            ScoredMove(move=m.move, score=m.score + self.opening_bonus(m.move))
            for m in self.score_moves(hand, combos, before, context)
        ]

    def opening_bonus(self, combo: Combo) -> float:
        """一次甩出更多牌的牌型额外加分"""
        bonuses = self.config.opening_bonuses
        if combo.type == HandType.STRAIGHT and len(combo) >= 8:
            return bonuses.get("long_straight", 0.0)
        if combo.type == HandType.CONSECUTIVE_PAIRS and len(combo) >= 6:
            return bonuses.get("long_pairs", 0.0)
        if combo.type == HandType.AIRPLANE:
            return bonuses.get("airplane", 0.0)
        if combo.type == HandType.TRIPLE_WITH_PAIR:
            return bonuses.get("triple_with_pair", 0.0)
        if combo.type == HandType.TRIPLE_WITH_SINGLE:
            return bonuses.get("triple_with_single", 0.0)
        return 0.0

    def select(self, scored: Sequence[ScoredMove]) -> Optional[ScoredMove]:
        """
        在接近最优的候选中采样

        候选为得分不低于 best - ratio * |best| 的走法；只有一个时直接选，
        否则按温度 softmax 采样

        Returns:
            选中的走法，没有候选时返回 None
        """
        if not scored:
            return None

        ranked = sorted(scored, key=lambda m: m.score, reverse=True)
        if len(ranked) == 1:
            return ranked[0]

        best = ranked[0].score
        threshold = best - self.config.near_best_ratio * abs(best)
        top = [m for m in ranked if m.score >= threshold]

        if len(top) == 1:
            return top[0]

        scores = np.array([m.score for m in top], dtype=np.float64)
        logits = (scores - scores.max()) / self.config.temperature
        probs = np.exp(logits)
        probs /= probs.sum()

        idx = int(self.rng.choice(len(top), p=probs))
        return top[idx]
