"""
Core Layer - 纯游戏逻辑 (无调度、无 IO)

Modules:
    cards: 牌定义、发牌与编码
    hands: 牌型定义
    rules: 规则引擎
    moves: 出牌生成
    state: 游戏状态
"""
from .cards import (
    Suit,
    Rank,
    Card,
    SUITS,
    RANKS,
    RANK_VALUES,
    SUIT_VALUES,
    THREE_OF_SPADES,
    create_deck,
    shuffle_deck,
    deal_cards,
    sort_hand,
    has_four_twos,
    cards_to_str,
    str_to_card,
    str_to_cards,
)

from .hands import (
    HandType,
    Hand,
    CHOP_TYPES,
    MIN_STRAIGHT_LEN,
)

from .rules import RuleEngine

from .moves import (
    MoveGenerator,
    get_playable_hands,
    MAX_ENUMERATION_HAND_SIZE,
)

from .state import (
    Phase,
    Player,
    TurnRecord,
    GameState,
    DEAL_ORDER,
)

__all__ = [
    # cards
    "Suit",
    "Rank",
    "Card",
    "SUITS",
    "RANKS",
    "RANK_VALUES",
    "SUIT_VALUES",
    "THREE_OF_SPADES",
    "create_deck",
    "shuffle_deck",
    "deal_cards",
    "sort_hand",
    "has_four_twos",
    "cards_to_str",
    "str_to_card",
    "str_to_cards",
    # hands
    "HandType",
    "Hand",
    "CHOP_TYPES",
    "MIN_STRAIGHT_LEN",
    # rules
    "RuleEngine",
    # moves
    "MoveGenerator",
    "get_playable_hands",
    "MAX_ENUMERATION_HAND_SIZE",
    # state
    "Phase",
    "Player",
    "TurnRecord",
    "GameState",
    "DEAL_ORDER",
]
