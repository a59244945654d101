"""
观测

将游戏状态转换为某一方视角的只读视图，作为 Agent 的输入
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from core.cards import Card
from core.hands import Hand
from core.state import GameState, Player


@dataclass(frozen=True)
class Observation:
    """
    单方视角观测 (不包含对手手牌)

    Attributes:
        hand_cards: 自己的手牌
        table_hand: 需要压过的牌型 (开新一轮时为 None)
        opponent_cards_left: 对手剩余张数
        is_opening: 是否开新一轮
        must_play_opening_card: 是否必须带开局牌
        opening_card: 开局牌
        perspective: 视角玩家
    """
    hand_cards: Tuple[Card, ...]
    table_hand: Optional[Hand]
    opponent_cards_left: int
    is_opening: bool
    must_play_opening_card: bool
    opening_card: Card
    perspective: Player


class ObservationBuilder:
    """负责将 GameState 转换为 Observation"""

    def build(self, state: GameState, perspective: Optional[Player] = None) -> Observation:
        """
        从游戏状态构建观测

        Args:
            state: 游戏状态
            perspective: 视角玩家 (默认为当前玩家)

        Returns:
            Observation 对象
        """
        player = perspective or state.current_player
        return Observation(
            hand_cards=state.get_hand(player),
            table_hand=state.table_hand_for(player),
            opponent_cards_left=len(state.get_hand(player.opponent)),
            is_opening=state.is_opening_round(player),
            must_play_opening_card=state.must_play_opening_card(player),
            opening_card=state.opening_card,
            perspective=player,
        )
