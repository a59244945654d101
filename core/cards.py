"""
牌的定义与发牌

进攻 (Tiến Lên) 使用一副 52 张牌:
- 点数从小到大: 3, 4, 5, 6, 7, 8, 9, 10, J, Q, K, A, 2
- 花色从小到大: 黑桃 ♠, 梅花 ♣, 方块 ♦, 红桃 ♥
"""
from enum import Enum
from dataclasses import dataclass
from typing import List, Tuple, Dict, Optional, Sequence, Iterable
import random


class Suit(Enum):
    """花色"""
    SPADES = "♠"
    CLUBS = "♣"
    DIAMONDS = "♦"
    HEARTS = "♥"


class Rank(Enum):
    """点数 (按游戏顺序定义，不是数值顺序)"""
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    ACE = "A"
    TWO = "2"


SUITS: Tuple[Suit, ...] = (Suit.SPADES, Suit.CLUBS, Suit.DIAMONDS, Suit.HEARTS)

RANKS: Tuple[Rank, ...] = (
    Rank.THREE, Rank.FOUR, Rank.FIVE, Rank.SIX, Rank.SEVEN,
    Rank.EIGHT, Rank.NINE, Rank.TEN, Rank.JACK, Rank.QUEEN,
    Rank.KING, Rank.ACE, Rank.TWO,
)

# 点数到牌力的映射 (预计算，比较为 O(1))
RANK_VALUES: Dict[Rank, int] = {rank: i for i, rank in enumerate(RANKS)}

# 花色大小 (同点数单张比较用)
SUIT_VALUES: Dict[Suit, int] = {suit: i for i, suit in enumerate(SUITS)}

# 花色字母 (文本输入用)
SUIT_LETTERS: Dict[str, Suit] = {
    "S": Suit.SPADES,
    "C": Suit.CLUBS,
    "D": Suit.DIAMONDS,
    "H": Suit.HEARTS,
}

DECK_SIZE = len(SUITS) * len(RANKS)


@dataclass(frozen=True)
class Card:
    """
    不可变的牌

    Attributes:
        rank: 点数
        suit: 花色
    """
    rank: Rank
    suit: Suit

    @property
    def id(self) -> str:
        """牌的唯一标识，如 "3♠" """
        return f"{self.rank.value}{self.suit.value}"

    @property
    def value(self) -> int:
        """牌力 (0 = 3, 12 = 2)"""
        return RANK_VALUES[self.rank]

    @property
    def suit_value(self) -> int:
        return SUIT_VALUES[self.suit]

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (self.value, self.suit_value)

    def __str__(self) -> str:
        return self.id

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"


THREE_OF_SPADES = Card(Rank.THREE, Suit.SPADES)


def create_deck() -> List[Card]:
    """
    生成一副完整的 52 张牌

    Returns:
        按花色、点数顺序排列的牌列表
    """
    return [Card(rank, suit) for suit in SUITS for rank in RANKS]


def shuffle_deck(deck: Sequence[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Fisher-Yates 洗牌

    不修改输入，返回新的列表

    Args:
        deck: 牌序列
        rng: 随机数生成器 (用于固定种子)

    Returns:
        洗好的新列表
    """
    rng = rng or random.Random()
    shuffled = list(deck)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def deal_cards(deck: List[Card], num_players: int, cards_per_player: int) -> List[List[Card]]:
    """
    发牌

    从牌堆末尾逐张轮流发给每个玩家，发完后各手牌排序。
    会从传入的 deck 中移除已发出的牌。

    Args:
        deck: 洗好的牌堆
        num_players: 玩家数
        cards_per_player: 每人张数

    Returns:
        每个玩家的手牌 (已排序)
    """
    needed = num_players * cards_per_player
    if len(deck) < needed:
        raise ValueError(
            f"Cannot deal {cards_per_player} cards to {num_players} players "
            f"from a deck of {len(deck)}"
        )

    hands: List[List[Card]] = [[] for _ in range(num_players)]
    for _ in range(cards_per_player):
        for hand in hands:
            hand.append(deck.pop())

    for hand in hands:
        sort_hand(hand)
    return hands


def sort_hand(hand: List[Card]) -> None:
    """按 (牌力, 花色) 原地稳定排序"""
    hand.sort(key=lambda c: c.sort_key)


def sorted_cards(cards: Iterable[Card]) -> Tuple[Card, ...]:
    return tuple(sorted(cards, key=lambda c: c.sort_key))


def count_twos(cards: Iterable[Card]) -> int:
    return sum(1 for c in cards if c.rank == Rank.TWO)


def has_four_twos(cards: Iterable[Card]) -> bool:
    """四张 2 (Tứ Quý Heo) 直接获胜"""
    return count_twos(cards) == 4


def lowest_card(cards: Iterable[Card]) -> Optional[Card]:
    return min(cards, key=lambda c: c.sort_key, default=None)


def card_to_str(card: Card) -> str:
    return card.id


def cards_to_str(cards: Iterable[Card]) -> str:
    """
    将牌转换为可读字符串

    Returns:
        如 "3♠ 3♥ 4♦"
    """
    return " ".join(c.id for c in sorted_cards(cards))


def str_to_card(s: str) -> Card:
    """
    解析单张牌

    Args:
        s: 如 "3S", "10h", "2♥", "QD"

    Returns:
        Card
    """
    text = s.strip().upper()
    if len(text) < 2:
        raise ValueError(f"Invalid card: {s!r}")

    rank_text, suit_text = text[:-1], text[-1]
    suit = SUIT_LETTERS.get(suit_text)
    if suit is None:
        suit = next((x for x in SUITS if x.value == suit_text), None)
    if suit is None:
        raise ValueError(f"Invalid suit in card: {s!r}")

    if rank_text == "T":
        rank_text = "10"
    try:
        rank = Rank(rank_text)
    except ValueError:
        raise ValueError(f"Invalid rank in card: {s!r}") from None
    return Card(rank, suit)


def str_to_cards(s: str) -> List[Card]:
    """解析以空格或逗号分隔的多张牌"""
    return [str_to_card(part) for part in s.replace(",", " ").split()]
