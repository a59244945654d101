"""
Game Layer - 回合控制与对局调度

Modules:
    controller: 回合控制器 (玩家 vs AI)
    agents: AI 智能体
    observation: AI 观测
    scheduler: 倒计时与延迟任务
    notifications: 界面通知
    config: 游戏配置
"""
from .config import GameConfig, NUM_PLAYERS

from .scheduler import (
    TaskHandle,
    Scheduler,
    ThreadingScheduler,
    ManualScheduler,
)

from .notifications import (
    NotificationLevel,
    Notification,
    Notifier,
)

from .observation import Observation, ObservationBuilder

from .agents import Agent, GreedyAgent

from .controller import (
    ValidationResult,
    GameSnapshot,
    TurnController,
)

__all__ = [
    # config
    "GameConfig",
    "NUM_PLAYERS",
    # scheduler
    "TaskHandle",
    "Scheduler",
    "ThreadingScheduler",
    "ManualScheduler",
    # notifications
    "NotificationLevel",
    "Notification",
    "Notifier",
    # observation
    "Observation",
    "ObservationBuilder",
    # agents
    "Agent",
    "GreedyAgent",
    # controller
    "ValidationResult",
    "GameSnapshot",
    "TurnController",
]
