"""
规则引擎 - 牌型识别、压牌合法性

所有方法都是纯函数，无状态；非法情况返回 INVALID / False 而不抛异常
"""
from typing import List, Optional, Sequence

from .cards import Card, Rank, sort_hand
from .hands import Hand, HandType, MIN_STRAIGHT_LEN, THREE_PAIR_STRAIGHT_LEN


class RuleEngine:
    """
    进攻规则引擎

    提供牌型识别、压牌判断等功能
    所有方法都是静态方法，无状态
    """

    @staticmethod
    def is_consecutive(values: Sequence[int]) -> bool:
        """
        检查牌力列表是否连续

        Args:
            values: 已排序的牌力列表

        Returns:
            是否连续
        """
        for i in range(len(values) - 1):
            if values[i + 1] - values[i] != 1:
                return False
        return True

    @staticmethod
    def identify_hand_combination(cards: Sequence[Card]) -> Hand:
        """
        识别牌型

        按张数优先级检查，命中即返回；输入无需排序 (内部排序副本)

        Args:
            cards: 牌

        Returns:
            Hand (无法识别时为 INVALID)
        """
        if not cards:
            return Hand.invalid()

        ordered: List[Card] = list(cards)
        sort_hand(ordered)
        n = len(ordered)
        values = [c.value for c in ordered]
        same_value = len(set(values)) == 1
        has_two = any(c.rank == Rank.TWO for c in ordered)
        frozen = tuple(ordered)

        # 单张
        if n == 1:
            return Hand(frozen, HandType.SINGLE, values[0], suit_value=ordered[0].suit_value)

        # 对子
        if n == 2 and same_value:
            return Hand(frozen, HandType.PAIR, values[0])

        # 三张
        if n == 3 and same_value:
            return Hand(frozen, HandType.TRIPLE, values[0])

        # 四条 (优先于顺子检查)
        if n == 4 and same_value:
            return Hand(frozen, HandType.FOUR_OF_A_KIND, values[0])

        # 三连对: 三个对子且点数连续，不能含 2
        if n == THREE_PAIR_STRAIGHT_LEN and not has_two:
            pairs_ok = all(values[i] == values[i + 1] for i in range(0, n, 2))
            if pairs_ok and RuleEngine.is_consecutive(values[0::2]):
                return Hand(frozen, HandType.THREE_PAIR_STRAIGHT, values[-1])

        # 顺子: 至少 3 张，点数连续，不能含 2
        if n >= MIN_STRAIGHT_LEN and not has_two and RuleEngine.is_consecutive(values):
            return Hand(frozen, HandType.STRAIGHT, values[-1], length=n)

        return Hand.invalid()

    @staticmethod
    def is_chop(candidate: Hand, table_hand: Optional[Hand]) -> bool:
        """三连对或四条砍单张 2"""
        return (
            table_hand is not None
            and table_hand.is_lone_two
            and candidate.is_chop_type
        )

    @staticmethod
    def can_play_over(candidate: Hand, table_hand: Optional[Hand]) -> bool:
        """
        判断能否压过桌面上的牌

        Args:
            candidate: 要出的牌型
            table_hand: 桌面牌型 (None 表示新一轮，任意合法牌型均可)

        Returns:
            是否合法
        """
        if candidate.hand_type == HandType.INVALID:
            return False

        if table_hand is None or not table_hand.cards:
            return True

        if RuleEngine.is_chop(candidate, table_hand):
            return True

        # 砍牌以外不同牌型不能互压
        if candidate.hand_type != table_hand.hand_type:
            return False

        if candidate.hand_type == HandType.SINGLE:
            if candidate.rank_value != table_hand.rank_value:
                return candidate.rank_value > table_hand.rank_value
            return (candidate.suit_value or 0) > (table_hand.suit_value or 0)

        if candidate.hand_type == HandType.STRAIGHT:
            # 长度不同的顺子不可比较
            if candidate.length != table_hand.length:
                return False
            return candidate.rank_value > table_hand.rank_value

        # 对子 / 三张 / 四条 / 三连对
        return candidate.rank_value > table_hand.rank_value
