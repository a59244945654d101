"""
牌型定义

进攻共 6 种合法牌型 (另有 INVALID 表示非法组合)
"""
from enum import IntEnum
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .cards import Card, Rank, THREE_OF_SPADES


class HandType(IntEnum):
    """牌型 (数值即排序优先级，越小越"便宜")"""
    SINGLE = 0               # 单张
    PAIR = 1                 # 对子
    TRIPLE = 2               # 三张
    STRAIGHT = 3             # 顺子 (Sảnh，至少 3 张，不含 2)
    THREE_PAIR_STRAIGHT = 4  # 三连对 (Ba Đôi Thông，不含 2)
    FOUR_OF_A_KIND = 5       # 四条 (Tứ Quý)
    INVALID = 6              # 非法牌型

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", " ")


# 可以"砍" 单张 2 的牌型
CHOP_TYPES: Tuple[HandType, ...] = (HandType.THREE_PAIR_STRAIGHT, HandType.FOUR_OF_A_KIND)

MIN_STRAIGHT_LEN = 3
THREE_PAIR_STRAIGHT_LEN = 6


@dataclass(frozen=True)
class Hand:
    """
    不可变牌型表示

    由 RuleEngine.identify_hand_combination 产生，每次决策后即丢弃。

    Attributes:
        cards: 牌 (已排序)
        hand_type: 牌型
        rank_value: 比较用的牌力 (INVALID 为 -1)
        length: 顺子长度 (仅 STRAIGHT)
        suit_value: 花色大小 (仅 SINGLE)
    """
    cards: Tuple[Card, ...]
    hand_type: HandType
    rank_value: int
    length: Optional[int] = None
    suit_value: Optional[int] = None

    @classmethod
    def invalid(cls) -> 'Hand':
        return cls(cards=(), hand_type=HandType.INVALID, rank_value=-1)

    @classmethod
    def from_cards(cls, cards: Iterable[Card]) -> 'Hand':
        """从牌创建牌型 (自动识别)"""
        from .rules import RuleEngine
        return RuleEngine.identify_hand_combination(list(cards))

    @property
    def is_valid(self) -> bool:
        return self.hand_type != HandType.INVALID

    @property
    def is_lone_two(self) -> bool:
        """是否为单张 2 (Heo)"""
        return self.hand_type == HandType.SINGLE and self.cards[0].rank == Rank.TWO

    @property
    def is_chop_type(self) -> bool:
        return self.hand_type in CHOP_TYPES

    def contains(self, card: Card) -> bool:
        return card in self.cards

    @property
    def has_three_of_spades(self) -> bool:
        return THREE_OF_SPADES in self.cards

    @property
    def sort_key(self) -> Tuple[int, int, int, int]:
        """出牌排序键: 牌型 → 牌力 → 顺子长度 → 花色"""
        return (
            int(self.hand_type),
            self.rank_value,
            self.length or 0,
            self.suit_value or 0,
        )

    def describe(self) -> str:
        """如 "pair (5♠, 5♥)" """
        return f"{self.hand_type.label} ({', '.join(c.id for c in self.cards)})"

    def __len__(self) -> int:
        return len(self.cards)
