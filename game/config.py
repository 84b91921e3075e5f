"""
对局配置
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ai.config import AIConfig


@dataclass
class GameConfig:
    """
    对局配置

    Attributes:
        human_index: 人类玩家座位，None 表示三家都由 AI 控制
        landlord_seat: 固定叫地主的座位
        seed: 随机种子 (洗牌与 AI 采样)，None 表示不固定
        ai: AI 配置
    """
    human_index: Optional[int] = 0
    landlord_seat: int = 1
    seed: Optional[int] = None
    ai: AIConfig = field(default_factory=AIConfig)

    def __post_init__(self):
        if self.human_index is not None and self.human_index not in (0, 1, 2):
            raise ValueError(f"human_index must be 0, 1, 2 or None, got {self.human_index}")
        if self.landlord_seat not in (0, 1, 2):
            raise ValueError(f"landlord_seat must be 0, 1 or 2, got {self.landlord_seat}")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'GameConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        if isinstance(filtered.get("ai"), dict):
            filtered["ai"] = AIConfig.from_dict(filtered["ai"])
        return cls(**filtered)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "human_index": self.human_index,
            "landlord_seat": self.landlord_seat,
            "seed": self.seed,
            "ai": self.ai.to_dict(),
        }
