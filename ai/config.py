"""
AI 配置

定义出牌 AI 的超参数
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Literal


def _default_weights() -> Dict[str, float]:
    return {
        "structure": 1.0,
        "trash": 1.0,
        "initiative": 1.0,
        "control": 1.0,
        "exit_plan": 1.0,
        "minimum_margin": 1.0,
    }


def _default_opening_bonuses() -> Dict[str, float]:
    return {
        "long_straight": 50.0,       # 8 张及以上的顺子
        "long_pairs": 40.0,          # 6 张及以上的连对
        "airplane": 45.0,
        "triple_with_pair": 25.0,
        "triple_with_single": 20.0,
    }


@dataclass
class AIConfig:
    """
    出牌 AI 配置

    Attributes:
        difficulty: "expert" 为启发式评分 AI，"easy" 为最小可出牌 AI
        temperature: softmax 采样温度 (越低越接近贪心)
        near_best_ratio: 候选集合为得分不低于最高分 (1 - ratio) 倍的走法
        phase_basis: 阶段判断依据，"table" 为三家剩余牌总数，"hand" 为自己的手牌数
        never_pass_when_threatened: 对手快出完时，有牌可压就不考虑不要
        weights: 六项评分的权重
        opening_bonuses: 主动出牌时大牌型的额外奖励
    """
    difficulty: Literal["expert", "easy"] = "expert"
    temperature: float = 0.3
    near_best_ratio: float = 0.1
    phase_basis: Literal["table", "hand"] = "table"
    never_pass_when_threatened: bool = True
    weights: Dict[str, float] = field(default_factory=_default_weights)
    opening_bonuses: Dict[str, float] = field(default_factory=_default_opening_bonuses)

    def __post_init__(self):
        if self.temperature <= 0:
            raise ValueError(f"temperature must be positive, got {self.temperature}")
        if not 0 <= self.near_best_ratio < 1:
            raise ValueError(f"near_best_ratio must be in [0, 1), got {self.near_best_ratio}")

    def weight(self, name: str) -> float:
        return self.weights.get(name, 1.0)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'AIConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "difficulty": self.difficulty,
            "temperature": self.temperature,
            "near_best_ratio": self.near_best_ratio,
            "phase_basis": self.phase_basis,
            "never_pass_when_threatened": self.never_pass_when_threatened,
            "weights": dict(self.weights),
            "opening_bonuses": dict(self.opening_bonuses),
        }


# 预定义配置
EXPERT = AIConfig()

# 更随机的专家 AI
EXPERT_LOOSE = AIConfig(temperature=1.0, near_best_ratio=0.25)

EASY = AIConfig(difficulty="easy")
