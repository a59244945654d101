"""
出牌生成器

枚举手牌的全部非空子集 (2^n - 1)，经牌型识别与压牌判断后得到可出牌型。
手牌不超过 13 张，最多 8191 个子集，直接穷举即可。
"""
from typing import Iterator, List, Optional, Sequence

from .cards import Card, THREE_OF_SPADES, sorted_cards
from .hands import Hand
from .rules import RuleEngine


# 穷举的手牌上限 (2^13 - 1 = 8191 个子集)
MAX_ENUMERATION_HAND_SIZE = 13


class MoveGenerator:
    """
    合法出牌生成器

    结果按 (牌型, 牌力, 顺子长度, 花色) 升序排列，下标 0 即"最便宜"的出法
    """

    def __init__(self, hand_cards: Sequence[Card]):
        """
        Args:
            hand_cards: 手牌
        """
        if len(hand_cards) > MAX_ENUMERATION_HAND_SIZE:
            raise ValueError(
                f"Hand of {len(hand_cards)} cards exceeds the enumeration limit "
                f"of {MAX_ENUMERATION_HAND_SIZE}"
            )
        self.hand = list(sorted_cards(hand_cards))

    def subsets(self) -> Iterator[List[Card]]:
        """按位掩码生成全部非空子集"""
        n = len(self.hand)
        for mask in range(1, 1 << n):
            yield [self.hand[j] for j in range(n) if (mask >> j) & 1]

    def generate_all(self) -> List[Hand]:
        """
        生成所有合法牌型 (新一轮主动出牌)

        Returns:
            已排序的牌型列表
        """
        return self.generate_responses(None)

    def generate_responses(
        self,
        table_hand: Optional[Hand],
        required_card: Optional[Card] = None,
    ) -> List[Hand]:
        """
        生成能压过桌面牌型的所有出法

        Args:
            table_hand: 桌面牌型 (None 表示新一轮)
            required_card: 必须包含的牌 (首轮 3♠)

        Returns:
            已排序的牌型列表
        """
        playable: List[Hand] = []
        for subset in self.subsets():
            if required_card is not None and required_card not in subset:
                continue
            hand = RuleEngine.identify_hand_combination(subset)
            if not hand.is_valid:
                continue
            if RuleEngine.can_play_over(hand, table_hand):
                playable.append(hand)

        playable.sort(key=lambda h: h.sort_key)
        return playable


def get_playable_hands(
    hand: Sequence[Card],
    table_hand: Optional[Hand],
    is_starting_new_round: bool,
    must_play_three_of_spades: bool = False,
    opening_card: Card = THREE_OF_SPADES,
) -> List[Hand]:
    """
    当前可出的所有牌型

    Args:
        hand: 手牌
        table_hand: 桌面牌型
        is_starting_new_round: 是否开新一轮 (桌面为空或对手已 pass)，此时按空桌处理
        must_play_three_of_spades: 是否为首轮且必须带开局牌
        opening_card: 开局必须出的牌 (通常为 3♠)

    Returns:
        升序排列的牌型列表
    """
    generator = MoveGenerator(hand)
    required = opening_card if must_play_three_of_spades else None
    against = None if is_starting_new_round else table_hand
    return generator.generate_responses(against, required_card=required)
