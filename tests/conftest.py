"""测试公共工具"""
from typing import List, Optional, Sequence

import pytest

from core.cards import Card, create_deck, str_to_cards
from core.hands import Hand
from core.rules import RuleEngine
from game import GameConfig, ManualScheduler, Notifier, TurnController


def cards(text: str) -> List[Card]:
    """"3S 4S 5S" -> [Card, ...]"""
    return str_to_cards(text)


def hand(text: str) -> Hand:
    return RuleEngine.identify_hand_combination(cards(text))


def stacked_deck(player_cards: Sequence[Card], ai_cards: Sequence[Card]) -> List[Card]:
    """
    构造一副"做过手脚"的牌堆

    deal_cards 从末尾轮流发牌，因此把 (玩家, AI) 交替序列倒序放在末尾
    """
    assert len(player_cards) == len(ai_cards)
    dealt: List[Card] = []
    for p, a in zip(player_cards, ai_cards):
        dealt.extend([p, a])
    rest = [c for c in create_deck() if c not in dealt]
    return rest + list(reversed(dealt))


def make_controller(
    player_text: str,
    ai_text: str,
    scheduler: Optional[ManualScheduler] = None,
    notifier: Optional[Notifier] = None,
    **config_kwargs,
) -> TurnController:
    """用指定手牌创建控制器并立即发牌 (无发牌延迟)"""
    player_cards = cards(player_text)
    ai_cards = cards(ai_text)
    params = dict(
        cards_per_player=len(player_cards),
        turn_seconds=10,
        ai_thinking_seconds=1.5,
        deal_delay_seconds=0,
    )
    params.update(config_kwargs)
    controller = TurnController(
        config=GameConfig(**params),
        scheduler=scheduler or ManualScheduler(),
        notifier=notifier or Notifier(),
        deck_builder=lambda rng: stacked_deck(player_cards, ai_cards),
    )
    controller.reset_game()
    return controller


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()
