"""
Evaluation Layer - AI 自对弈评估

Modules:
    arena: 对战竞技场
"""
from .arena import (
    MatchResult,
    ArenaResult,
    Arena,
)

__all__ = [
    "MatchResult",
    "ArenaResult",
    "Arena",
]
