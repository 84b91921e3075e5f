"""
走法评分

按六项启发式给候选出牌打分，再乘以阶段系数:
1. 结构保留     (-100 ~ 0)   拆散核心结构扣分
2. 散牌消化     (0 ~ +50)    出掉 3-10 孤张加分
3. 牌权价值     (-30 ~ +80)  拿到牌权后能一次出很多牌时加分
4. 控制牌纪律   (-80 ~ +20)  前期浪费炸弹/2/王扣分
5. 出完计划     (0 ~ +60)    减少出完所需手数加分
6. 最小压制     (0 ~ +30)    用刚好够大的牌压
"""
from enum import Enum
from dataclasses import dataclass
from typing import Optional, Tuple, TYPE_CHECKING

from core.cards import Rank
from core.hands import HandType
from core.actions import Combo

from .config import AIConfig
from .hand_evaluator import HandEvaluation

if TYPE_CHECKING:
    from core.state import GameState

# 对手剩余牌数不超过此值时视为快出完
NEAR_WIN_CARDS = 3

EARLY_PHASE_CARDS = 12
MID_PHASE_CARDS = 6


class GamePhase(Enum):
    """对局阶段"""
    EARLY = "early"
    MID = "mid"
    LATE = "late"


@dataclass(frozen=True)
class GameContext:
    """
    评分所需的局面信息

    Attributes:
        player_index: 当前 AI 座位
        landlord_index: 地主座位
        last_played_by: 桌面上的牌是谁出的
        hand_sizes: 三家剩余手牌数 (按座位)
        pass_count: 连续不要次数
        total_cards: 阶段判断所用的牌数
    """
    player_index: int
    landlord_index: Optional[int] = None
    last_played_by: Optional[int] = None
    hand_sizes: Tuple[int, ...] = ()
    pass_count: int = 0
    total_cards: int = 0

    @classmethod
    def from_state(
        cls,
        state: 'GameState',
        player_index: int,
        phase_basis: str = "table",
    ) -> 'GameContext':
        """从游戏状态构建"""
        if phase_basis == "hand":
            total = len(state.hand(player_index))
        else:
            total = state.total_cards_remaining
        return cls(
            player_index=player_index,
            landlord_index=state.landlord_index,
            last_played_by=state.last_played_by,
            hand_sizes=state.hand_sizes,
            pass_count=state.pass_count,
            total_cards=total,
        )

    @property
    def is_landlord(self) -> bool:
        return self.landlord_index is not None and self.player_index == self.landlord_index

    @property
    def is_teammate(self) -> bool:
        """桌面上的牌是否是队友出的 (两个农民互为队友)"""
        if self.landlord_index is None or self.last_played_by is None:
            return False
        if self.last_played_by == self.player_index:
            return False
        return self.player_index != self.landlord_index and self.last_played_by != self.landlord_index

    @property
    def opponent_hand_sizes(self) -> Tuple[int, ...]:
        """对手的剩余牌数: 地主的对手是两个农民，农民的对手是地主"""
        if not self.hand_sizes:
            return ()
        if self.landlord_index is None:
            return tuple(n for i, n in enumerate(self.hand_sizes) if i != self.player_index)
        if self.is_landlord:
            return tuple(n for i, n in enumerate(self.hand_sizes) if i != self.player_index)
        return (self.hand_sizes[self.landlord_index],)

    @property
    def min_opponent_cards(self) -> int:
        sizes = self.opponent_hand_sizes
        return min(sizes) if sizes else 99

    @property
    def opponent_near_win(self) -> bool:
        return self.min_opponent_cards <= NEAR_WIN_CARDS

    @property
    def phase(self) -> GamePhase:
        if self.total_cards >= EARLY_PHASE_CARDS:
            return GamePhase.EARLY
        if self.total_cards >= MID_PHASE_CARDS:
            return GamePhase.MID
        return GamePhase.LATE


class MoveEvaluator:
    """
    走法评分器

    所有方法都是静态方法，无状态
    """

    @staticmethod
    def score_move(
        move: Combo,
        before: HandEvaluation,
        after: HandEvaluation,
        context: GameContext,
        config: Optional[AIConfig] = None,
    ) -> float:
        """
        给一手出牌打分

        Args:
            move: 候选出牌
            before: 出牌前的手牌评估
            after: 出牌后的手牌评估
            context: 局面信息
            config: 权重配置

        Returns:
            得分 (越高越好)
        """
        config = config or AIConfig()

        score = 0.0
        score += config.weight("structure") * MoveEvaluator.score_structure(move, before)
        score += config.weight("trash") * MoveEvaluator.score_trash_reduction(move, before, after)
        score += config.weight("initiative") * MoveEvaluator.score_initiative(after)
        score += config.weight("control") * MoveEvaluator.score_control(move, before, context)
        score += config.weight("exit_plan") * MoveEvaluator.score_exit_plan(before, after)
        score += config.weight("minimum_margin") * MoveEvaluator.score_minimum_margin(move)

        return MoveEvaluator.apply_phase_multiplier(score, context.phase, move.type)

    @staticmethod
    def score_structure(move: Combo, before: HandEvaluation) -> float:
        """拆散核心或对子扣分，核心越长扣得越多"""
        penalty = 0.0
        used = set(move.ranks)

        for core in before.straight_cores:
            hit = sum(1 for r in core.ranks if r in used)
            if 0 < hit < core.length:
                penalty -= 50 * (core.length / 12)

        for core in before.pair_cores:
            hit = sum(1 for r in core.ranks if r in used)
            if 0 < hit < core.length:
                penalty -= 40 * (core.length / 10)

        for core in before.airplane_cores:
            hit = sum(1 for r in core.ranks if r in used)
            if 0 < hit < core.length:
                penalty -= 60 * (core.length / 6)

        # 拆对子出单张
        for rank in before.pairs:
            if rank in used and move.ranks.count(rank) == 1:
                penalty -= 20

        return penalty

    @staticmethod
    def score_trash_reduction(move: Combo, before: HandEvaluation, after: HandEvaluation) -> float:
        score = 0.0

        reduced = len(before.trash_singles) - len(after.trash_singles)
        if reduced > 0:
            score += reduced * 30

        used = set(move.ranks)
        trash_used = sum(1 for r in before.trash_singles if r in used)

        # 散牌当带牌
        if move.type in (HandType.TRIPLE_WITH_SINGLE, HandType.AIRPLANE_WITH_SINGLES):
            score += trash_used * 10

        # 顺子顺走散牌
        if move.type == HandType.STRAIGHT:
            score += trash_used * 20

        return score

    @staticmethod
    def score_initiative(after: HandEvaluation) -> float:
        """拿到牌权后能一次甩出的结构越大越好"""
        score = 0.0

        if after.straight_cores:
            longest = after.straight_cores[0].length
            if longest >= 8:
                score += 80
            elif longest >= 5:
                score += 40

        if after.pair_cores:
            longest = after.pair_cores[0].length
            if longest >= 5:
                score += 60
            elif longest >= 3:
                score += 30

        if after.airplane_cores:
            score += 70

        # 拿了牌权也只剩散牌
        if len(after.trash_singles) > 3 and after.control_card_count == 0:
            score -= 30

        return score

    @staticmethod
    def score_control(move: Combo, before: HandEvaluation, context: GameContext) -> float:
        score = 0.0
        phase = context.phase

        if move.is_bomb_like:
            if phase == GamePhase.EARLY:
                score -= 80
            elif phase == GamePhase.MID:
                score -= 40
            else:
                score += 20

            # 对手快出完时炸弹是值得的
            if context.opponent_near_win:
                score += 60

        used = set(move.ranks)
        uses_twos = Rank.TWO in used
        uses_jokers = Rank.SMALL_JOKER in used or Rank.BIG_JOKER in used

        if uses_twos or uses_jokers:
            if phase == GamePhase.EARLY and move.type != HandType.BOMB:
                score -= 40
            elif phase == GamePhase.LATE:
                score += 10

        # 留着控制牌
        if (before.control_card_count > 0 and not uses_twos and not uses_jokers
                and move.type != HandType.BOMB):
            score += 10

        return score

    @staticmethod
    def score_exit_plan(before: HandEvaluation, after: HandEvaluation) -> float:
        improvement = before.min_turns_to_empty - after.min_turns_to_empty
        if improvement > 0:
            return improvement * 60

        if after.quality_score > before.quality_score * 0.8:
            return 20

        return 0.0

    @staticmethod
    def score_minimum_margin(move: Combo) -> float:
        """同样能压时，优先用小牌"""
        if move.type == HandType.SINGLE:
            return (20 - move.compare_value) * 1.5
        if move.type in (HandType.PAIR, HandType.TRIPLE):
            return (20 - move.compare_value) * 1.0
        if move.type == HandType.STRAIGHT:
            return (15 - len(move)) * 2
        return 0.0

    @staticmethod
    def apply_phase_multiplier(score: float, phase: GamePhase, move_type: HandType) -> float:
        """前期压低炸弹，后期放大炸弹"""
        is_bomb = move_type in (HandType.BOMB, HandType.ROCKET)
        if phase == GamePhase.EARLY:
            return score * (0.5 if is_bomb else 1.2)
        if phase == GamePhase.MID:
            return score
        return score * (1.5 if is_bomb else 1.3)

    @staticmethod
    def score_pass(current: HandEvaluation, context: GameContext) -> float:
        """
        给"不要"打分

        队友出牌且自己牌多、手牌很散、控制牌充足时倾向不要；
        对手快出完时重罚
        """
        score = 20.0

        if context.is_teammate and current.total_cards > 5:
            score += 40

        if len(current.trash_singles) > 4:
            score += 30

        if context.opponent_near_win:
            score -= 60

        if current.control_card_count >= 3:
            score += 25

        return score
