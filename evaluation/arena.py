"""
对战竞技场

让三个 AI 连续对局，统计地主胜率、对局长度、炸弹与春天
"""
from typing import List, Optional
from dataclasses import dataclass
import logging

import numpy as np

from ai.config import AIConfig
from game.config import GameConfig
from game.controller import GameController

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """对局结果"""
    winner: int
    landlord: int
    winning_side: str  # "landlord" or "farmer"
    length: int
    bombs: int
    spring: bool


@dataclass
class ArenaResult:
    """多局统计"""
    n_games: int
    landlord_win_rate: float
    mean_length: float
    std_length: float
    bombs_per_game: float
    spring_rate: float
    matches: List[MatchResult]

    @classmethod
    def from_matches(cls, matches: List[MatchResult]) -> 'ArenaResult':
        if not matches:
            return cls(0, 0.0, 0.0, 0.0, 0.0, 0.0, [])

        lengths = np.array([m.length for m in matches], dtype=np.float64)
        return cls(
            n_games=len(matches),
            landlord_win_rate=float(np.mean([m.winning_side == "landlord" for m in matches])),
            mean_length=float(lengths.mean()),
            std_length=float(lengths.std()),
            bombs_per_game=float(np.mean([m.bombs for m in matches])),
            spring_rate=float(np.mean([m.spring for m in matches])),
            matches=matches,
        )

    def __repr__(self) -> str:
        return (
            f"ArenaResult(games={self.n_games}, "
            f"landlord_win_rate={self.landlord_win_rate:.2%}, "
            f"length={self.mean_length:.1f}±{self.std_length:.1f}, "
            f"bombs={self.bombs_per_game:.2f}, "
            f"spring_rate={self.spring_rate:.2%})"
        )


class Arena:
    """
    对战竞技场

    三家都由同一配置的 AI 控制，每局用独立的种子
    """

    def __init__(
        self,
        ai_config: Optional[AIConfig] = None,
        seed: Optional[int] = None,
        landlord_seat: int = 1,
        max_steps: int = 1000,
    ):
        self.ai_config = ai_config or AIConfig()
        self.seed = seed
        self.landlord_seat = landlord_seat
        self.max_steps = max_steps

    def play_one(self, seed: Optional[int] = None) -> MatchResult:
        """进行一局"""
        controller = GameController(GameConfig(
            human_index=None,
            landlord_seat=self.landlord_seat,
            seed=seed,
            ai=self.ai_config,
        ))
        controller.new_round()
        state = controller.run_until_human(self.max_steps)

        if not state.is_finished:
            raise RuntimeError("All-AI game stopped before finishing")

        return MatchResult(
            winner=state.winner_index,
            landlord=state.landlord_index,
            winning_side=state.winning_side,
            length=len(state.play_history),
            bombs=state.bombs_count,
            spring=state.is_spring(),
        )

    def play(self, n_games: int = 100, verbose: bool = False) -> ArenaResult:
        """
        连续对局

        Args:
            n_games: 对局数
            verbose: 是否打印进度

        Returns:
            统计结果
        """
        seeds = np.random.default_rng(self.seed).integers(0, 2**31 - 1, size=n_games)
        matches = []

        for i, game_seed in enumerate(seeds):
            matches.append(self.play_one(int(game_seed)))

            if verbose and (i + 1) % 10 == 0:
                logger.info(f"Played {i + 1}/{n_games} games")

        result = ArenaResult.from_matches(matches)
        logger.info(f"Arena finished: {result}")
        return result
