"""游戏状态测试"""
import pytest

from core.cards import THREE_OF_SPADES
from core.hands import Hand
from core.state import GameState, Phase, Player

from conftest import cards, hand


def dealt(player_text: str, ai_text: str, **kwargs) -> GameState:
    return GameState.initial(**kwargs).with_deal(cards(player_text), cards(ai_text), 10)


class TestInitialState:
    """初始状态测试"""

    def test_dealing_phase(self):
        state = GameState.initial(turn_seconds=10)
        assert state.phase == Phase.DEALING
        assert state.is_dealing is True
        assert state.player_hand == ()
        assert state.turn_timer == 10
        assert state.is_active is False

    def test_keeps_scores(self):
        state = GameState.initial(player_score=2, ai_score=3)
        assert (state.player_score, state.ai_score) == (2, 3)

    def test_immutability(self):
        state = GameState.initial()
        with pytest.raises(Exception):
            state.winner = Player.AI


class TestDeal:
    """发牌测试"""

    def test_holder_of_three_of_spades_opens(self):
        state = dealt("3S 9D", "4H 5C")
        assert state.current_player is Player.PLAYER
        assert state.first_player_of_the_game is Player.PLAYER
        assert state.opening_card == THREE_OF_SPADES
        assert state.phase == Phase.PLAYER_TURN
        assert "3♠" in state.status_message

    def test_ai_opens(self):
        state = dealt("4H 5C", "3S 9D")
        assert state.current_player is Player.AI
        assert state.status_message == "AI to play 3♠."

    def test_opening_card_when_three_of_spades_undealt(self):
        state = dealt("4H 5C", "3C 9D")
        assert state.opening_card == cards("3C")[0]
        assert state.current_player is Player.AI

    def test_hands_sorted(self):
        state = dealt("9D 3S", "5C 4H")
        assert [c.id for c in state.player_hand] == ["3♠", "9♦"]
        assert [c.id for c in state.ai_hand] == ["4♥", "5♣"]

    def test_deal_twice_rejected(self):
        state = dealt("3S", "4H")
        with pytest.raises(ValueError):
            state.with_deal(cards("5S"), cards("6S"), 10)

    def test_instant_win_player(self):
        state = dealt("2S 2C 2D 2H 5S", "3S 4S 6S 7S 8S", ai_score=1)
        assert state.winner is Player.PLAYER
        assert state.is_dealing is False
        assert state.turn_history == ()
        assert state.player_score == 1
        assert state.ai_score == 1
        assert state.status_message == "Tứ Quý Heo! You win instantly!"
        assert state.phase == Phase.FINISHED

    def test_instant_win_ai(self):
        state = dealt("3S 4S 6S 7S 8S", "2S 2C 2D 2H 5S")
        assert state.winner is Player.AI
        assert state.ai_score == 1
        assert state.status_message == "Tứ Quý Heo! AI wins instantly!"


class TestPlay:
    """出牌测试"""

    def test_play_moves_cards_to_table(self):
        state = dealt("3S 4S 9D", "5H 6C 7C")
        state = state.with_play(Player.PLAYER, hand("3S"))
        assert state.table == (THREE_OF_SPADES,)
        assert [c.id for c in state.player_hand] == ["4♠", "9♦"]
        assert state.current_player is Player.AI
        assert state.is_first_turn_of_game is False
        assert state.turn_history[-1].hand == hand("3S")
        assert state.status_message == "You played single (3♠). AI thinking..."

    def test_wrong_turn(self):
        state = dealt("3S 4S", "5H 6C")
        with pytest.raises(ValueError):
            state.with_play(Player.AI, hand("5H"))

    def test_invalid_hand(self):
        state = dealt("3S 4S", "5H 6C")
        with pytest.raises(ValueError):
            state.with_play(Player.PLAYER, Hand.invalid())

    def test_cards_not_in_hand(self):
        state = dealt("3S 4S", "5H 6C")
        with pytest.raises(ValueError):
            state.with_play(Player.PLAYER, hand("5H"))

    def test_alternation(self):
        state = dealt("3S 4S 9D", "5H 6C 7C")
        state = state.with_play(Player.PLAYER, hand("3S"))
        assert state.current_player is Player.AI
        state = state.with_play(Player.AI, hand("5H"))
        assert state.current_player is Player.PLAYER
        assert state.phase == Phase.PLAYER_TURN

    def test_winner(self):
        state = dealt("3S 4S 9S", "5H 6C")
        state = state.with_play(Player.PLAYER, hand("3S"))
        state = state.with_play(Player.AI, hand("5H"))
        state = state.with_play(Player.PLAYER, hand("9S"))
        state = state.with_pass(Player.AI)
        assert state.winner is None
        state = state.with_play(Player.PLAYER, Hand.from_cards(state.player_hand))
        assert state.winner is Player.PLAYER
        assert state.phase == Phase.FINISHED
        assert state.player_hand == ()

    def test_play_after_win_rejected(self):
        state = dealt("3S", "5H 6C")
        state = state.with_play(Player.PLAYER, hand("3S"))
        assert state.winner is Player.PLAYER
        assert state.player_score == 1
        assert state.status_message == "You win!"
        with pytest.raises(ValueError):
            state.with_play(Player.AI, hand("5H"))
        with pytest.raises(ValueError):
            state.with_pass(Player.AI)

    def test_cards_conserved(self):
        state = dealt("3S 4S 5S 9D", "5H 6C 7C 8C")
        before = state.cards_remaining
        state = state.with_play(Player.PLAYER, hand("3S 4S 5S"))
        assert state.cards_remaining == before


class TestPass:
    """pass 测试"""

    def test_pass_opens_new_round_for_opponent(self):
        state = dealt("3S 4S", "5H 6C")
        state = state.with_play(Player.PLAYER, hand("3S"))
        state = state.with_pass(Player.AI)
        assert state.current_player is Player.PLAYER
        assert state.is_opening_round(Player.PLAYER) is True
        assert state.table_hand_for(Player.PLAYER) is None
        # 桌面保持不变
        assert state.table == (THREE_OF_SPADES,)
        assert state.status_message == "AI passed. Your turn."

    def test_pass_flags(self):
        state = dealt("3S 4S", "5H 6C")
        state = state.with_pass(Player.PLAYER, auto=True)
        record = state.turn_history[-1]
        assert record.passed and record.auto and not record.error
        assert state.status_message == "Time's up! You passed."

    def test_error_pass(self):
        state = dealt("4S 5S", "3S 6C")
        state = state.with_pass(Player.AI, error=True)
        assert state.turn_history[-1].error is True
        assert state.status_message == "Error in AI turn. Your turn."

    def test_pass_wrong_turn(self):
        state = dealt("3S 4S", "5H 6C")
        with pytest.raises(ValueError):
            state.with_pass(Player.AI)


class TestQueries:
    """查询测试"""

    def test_responding_round(self):
        state = dealt("3S 4S", "5H 6C")
        state = state.with_play(Player.PLAYER, hand("3S"))
        assert state.is_opening_round(Player.AI) is False
        assert state.table_hand_for(Player.AI) == hand("3S")

    def test_must_play_opening_card(self):
        state = dealt("3S 4S", "5H 6C")
        assert state.must_play_opening_card(Player.PLAYER) is True
        assert state.must_play_opening_card(Player.AI) is False
        state = state.with_play(Player.PLAYER, hand("3S"))
        assert state.must_play_opening_card(Player.PLAYER) is False

    def test_playable_hands_first_turn(self):
        state = dealt("3S 4S 5S", "5H 6C 7C")
        moves = state.playable_hands(Player.PLAYER)
        assert all(THREE_OF_SPADES in m.cards for m in moves)

    def test_playable_hands_responding(self):
        state = dealt("3S 4S 9D", "5H 6C 7C")
        state = state.with_play(Player.PLAYER, hand("3S"))
        moves = state.playable_hands(Player.AI)
        assert [m.cards[0].id for m in moves] == ["5♥", "6♣", "7♣"]

    def test_pause(self):
        state = dealt("3S 4S", "5H 6C")
        paused = state.with_pause(True)
        assert paused.is_paused and not paused.is_active
        assert paused.status_message == "Game Paused"
        assert paused.with_pause(False).status_message == "Your turn."

    def test_timer_clamped(self):
        state = dealt("3S 4S", "5H 6C")
        assert state.with_timer(-3).turn_timer == 0
