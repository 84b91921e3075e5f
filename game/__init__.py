"""
Game Layer - 对局流程

Modules:
    config: 对局配置
    controller: 对局控制器
"""
from .config import GameConfig
from .controller import GameController

__all__ = [
    "GameConfig",
    "GameController",
]
