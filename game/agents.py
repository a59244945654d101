"""
AI 智能体

TurnController 在 AI 回合调用 Agent.act 选择出牌
"""
from typing import List, Optional

from core.hands import Hand
from core.rules import RuleEngine

from .observation import Observation


class Agent:
    """智能体基类"""

    def __init__(self, name: str = "agent"):
        self.name = name

    def act(self, obs: Observation, playable: List[Hand]) -> Optional[Hand]:
        """
        选择出牌

        Args:
            obs: 观测
            playable: 当前全部可出牌型 (已按"便宜"程度升序排列)

        Returns:
            要出的牌型，None 表示 pass
        """
        raise NotImplementedError

    def reset(self):
        """重置状态"""
        pass


class GreedyAgent(Agent):
    """
    贪心智能体 (无前瞻)

    规则:
    1. 桌面是单张 2 且能砍 (三连对/四条)，优先砍
    2. 否则出最便宜的牌 (playable[0])
    3. 无牌可出则 pass
    """

    def __init__(self, name: str = "greedy"):
        super().__init__(name)

    def act(self, obs: Observation, playable: List[Hand]) -> Optional[Hand]:
        if not playable:
            return None

        for hand in playable:
            if RuleEngine.is_chop(hand, obs.table_hand):
                return hand

        return playable[0]
