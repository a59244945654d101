"""
游戏配置

定义发牌、计时相关的参数
"""
from dataclasses import dataclass

from core.cards import DECK_SIZE
from core.moves import MAX_ENUMERATION_HAND_SIZE


# 玩家数固定为 2 (玩家 vs AI)
NUM_PLAYERS = 2


@dataclass
class GameConfig:
    """
    游戏配置

    Attributes:
        cards_per_player: 每人发牌张数 (1..13，余下的牌不发)
        turn_seconds: 玩家回合倒计时 (秒)
        ai_thinking_seconds: AI "思考" 延迟 (秒)
        deal_delay_seconds: 发牌动画延迟 (秒)，0 表示立即发牌
    """
    cards_per_player: int = 12
    turn_seconds: int = 10
    ai_thinking_seconds: float = 1.5
    deal_delay_seconds: float = 0.5

    def __post_init__(self):
        if self.cards_per_player < 1:
            raise ValueError("cards_per_player must be at least 1")
        if self.cards_per_player > MAX_ENUMERATION_HAND_SIZE:
            raise ValueError(
                f"cards_per_player must not exceed {MAX_ENUMERATION_HAND_SIZE}"
            )
        if self.cards_per_player * NUM_PLAYERS > DECK_SIZE:
            raise ValueError(
                f"Cannot deal {self.cards_per_player} cards to {NUM_PLAYERS} players "
                f"from a {DECK_SIZE}-card deck"
            )
        if self.turn_seconds < 1:
            raise ValueError("turn_seconds must be at least 1")
        if self.ai_thinking_seconds < 0 or self.deal_delay_seconds < 0:
            raise ValueError("Delays must not be negative")

    @classmethod
    def from_dict(cls, d: dict) -> 'GameConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)
