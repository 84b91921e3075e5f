"""
AI Layer - 启发式出牌 AI

Modules:
    config: AI 配置
    hand_evaluator: 手牌结构评估
    move_evaluator: 走法评分
    expert: 专家 AI
    easy: 简单 AI 与兜底走法
"""
from typing import Optional

import numpy as np

from .config import AIConfig, EXPERT, EXPERT_LOOSE, EASY
from .hand_evaluator import CoreKind, Core, HandEvaluation, HandEvaluator
from .move_evaluator import GamePhase, GameContext, MoveEvaluator
from .expert import ScoredMove, ExpertAI
from .easy import EasyAI, find_fallback_move


def build_ai(config: Optional[AIConfig] = None, rng: Optional[np.random.Generator] = None):
    """根据配置创建 AI"""
    config = config or AIConfig()
    if config.difficulty == "easy":
        return EasyAI()
    return ExpertAI(config, rng=rng)


__all__ = [
    # config
    "AIConfig",
    "EXPERT",
    "EXPERT_LOOSE",
    "EASY",
    # hand_evaluator
    "CoreKind",
    "Core",
    "HandEvaluation",
    "HandEvaluator",
    # move_evaluator
    "GamePhase",
    "GameContext",
    "MoveEvaluator",
    # expert
    "ScoredMove",
    "ExpertAI",
    # easy
    "EasyAI",
    "find_fallback_move",
    "build_ai",
]
