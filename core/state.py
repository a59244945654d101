"""
游戏状态定义

使用不可变数据结构，每次状态转移返回新对象:
- 读者只会看到完整的新状态
- 易于快照与测试
"""
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple
from enum import Enum

from .cards import Card, THREE_OF_SPADES, has_four_twos, lowest_card, sorted_cards
from .hands import Hand
from .moves import get_playable_hands


class Phase(Enum):
    """游戏阶段 (暂停为独立标志，不改变阶段)"""
    DEALING = "dealing"          # 发牌中
    PLAYER_TURN = "player_turn"  # 玩家回合
    AI_TURN = "ai_turn"          # AI 回合
    FINISHED = "finished"        # 游戏结束


class Player(Enum):
    """玩家"""
    PLAYER = "player"
    AI = "ai"

    @property
    def opponent(self) -> 'Player':
        return Player.AI if self is Player.PLAYER else Player.PLAYER

    @property
    def display_name(self) -> str:
        return "You" if self is Player.PLAYER else "AI"


# 发牌顺序
DEAL_ORDER: Tuple[Player, ...] = (Player.PLAYER, Player.AI)


@dataclass(frozen=True)
class TurnRecord:
    """
    一次行动记录

    Attributes:
        player: 行动者
        hand: 出的牌型 (pass 为 None)
        passed: 是否 pass
        auto: 是否超时自动 pass
        error: 是否因 AI 异常被迫 pass
    """
    player: Player
    hand: Optional[Hand] = None
    passed: bool = False
    auto: bool = False
    error: bool = False


@dataclass(frozen=True)
class GameState:
    """
    不可变游戏状态

    Attributes:
        player_hand: 玩家手牌
        ai_hand: AI 手牌
        table: 桌面上的牌 (== last_played_hand.cards)
        last_played_hand: 需要压过的牌型，None 表示新一轮
        current_player: 当前行动玩家
        turn_history: 行动历史
        winner: 赢家
        turn_timer: 玩家回合剩余秒数
        is_paused: 是否暂停
        is_dealing: 是否发牌中
        first_player_of_the_game: 开局玩家 (持有开局牌者)
        is_first_turn_of_game: 是否为本局第一手
        opening_card: 开局必须出的牌 (已发出的最小牌，通常为 3♠)
        player_score: 玩家累计胜局
        ai_score: AI 累计胜局
        status_message: 状态提示
    """
    player_hand: Tuple[Card, ...] = ()
    ai_hand: Tuple[Card, ...] = ()
    table: Tuple[Card, ...] = ()
    last_played_hand: Optional[Hand] = None
    current_player: Player = Player.PLAYER
    turn_history: Tuple[TurnRecord, ...] = ()
    winner: Optional[Player] = None
    turn_timer: int = 0
    is_paused: bool = False
    is_dealing: bool = True
    first_player_of_the_game: Optional[Player] = None
    is_first_turn_of_game: bool = True
    opening_card: Card = THREE_OF_SPADES
    player_score: int = 0
    ai_score: int = 0
    status_message: str = "Dealing cards..."

    @classmethod
    def initial(
        cls,
        player_score: int = 0,
        ai_score: int = 0,
        turn_seconds: int = 0,
    ) -> 'GameState':
        """
        发牌前的初始状态

        Args:
            player_score: 保留的玩家分数
            ai_score: 保留的 AI 分数
            turn_seconds: 回合倒计时

        Returns:
            发牌阶段状态
        """
        return cls(
            player_score=player_score,
            ai_score=ai_score,
            turn_timer=turn_seconds,
        )

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        if self.is_dealing:
            return Phase.DEALING
        if self.winner is not None:
            return Phase.FINISHED
        if self.current_player is Player.PLAYER:
            return Phase.PLAYER_TURN
        return Phase.AI_TURN

    @property
    def is_finished(self) -> bool:
        return self.winner is not None

    @property
    def is_active(self) -> bool:
        """可以行动: 非发牌、非暂停、未结束"""
        return not self.is_dealing and not self.is_paused and self.winner is None

    def get_hand(self, player: Player) -> Tuple[Card, ...]:
        """获取指定玩家的手牌"""
        return self.player_hand if player is Player.PLAYER else self.ai_hand

    def last_turn_of(self, player: Player) -> Optional[TurnRecord]:
        for record in reversed(self.turn_history):
            if record.player is player:
                return record
        return None

    def is_opening_round(self, player: Player) -> bool:
        """桌面为空，或对手上一手 pass，则由该玩家开新一轮"""
        if self.last_played_hand is None or not self.last_played_hand.cards:
            return True
        last = self.last_turn_of(player.opponent)
        return last is not None and last.passed

    def must_play_opening_card(self, player: Player) -> bool:
        return self.is_first_turn_of_game and self.first_player_of_the_game is player

    def table_hand_for(self, player: Player) -> Optional[Hand]:
        """该玩家需要压过的牌型 (开新一轮时为 None)"""
        if self.is_opening_round(player):
            return None
        return self.last_played_hand

    def playable_hands(self, player: Player) -> List[Hand]:
        """该玩家当前全部可出牌型"""
        opening = self.is_opening_round(player)
        return get_playable_hands(
            self.get_hand(player),
            self.table_hand_for(player),
            opening,
            self.must_play_opening_card(player),
            self.opening_card,
        )

    @property
    def cards_remaining(self) -> int:
        return len(self.player_hand) + len(self.ai_hand) + len(self.table)

    # ------------------------------------------------------------------
    # 状态转移
    # ------------------------------------------------------------------

    def with_deal(
        self,
        player_hand: Sequence[Card],
        ai_hand: Sequence[Card],
        turn_seconds: int,
    ) -> 'GameState':
        """
        发牌后的新状态

        四张 2 直接获胜；否则持有开局牌者先出

        Args:
            player_hand: 玩家手牌
            ai_hand: AI 手牌
            turn_seconds: 回合倒计时

        Returns:
            新状态
        """
        if not self.is_dealing:
            raise ValueError("Not in dealing phase")

        hands: Dict[Player, Tuple[Card, ...]] = {
            Player.PLAYER: sorted_cards(player_hand),
            Player.AI: sorted_cards(ai_hand),
        }
        dealt = replace(
            self,
            player_hand=hands[Player.PLAYER],
            ai_hand=hands[Player.AI],
            is_dealing=False,
            is_paused=False,
            turn_timer=turn_seconds,
        )

        for player in DEAL_ORDER:
            if has_four_twos(hands[player]):
                message = (
                    "Tứ Quý Heo! You win instantly!"
                    if player is Player.PLAYER
                    else "Tứ Quý Heo! AI wins instantly!"
                )
                return dealt._with_winner(player, message)

        opening_card = lowest_card(hands[Player.PLAYER] + hands[Player.AI])
        if opening_card is None:
            raise ValueError("Cannot start a game with empty hands")
        first_player = Player.PLAYER if opening_card in hands[Player.PLAYER] else Player.AI

        if first_player is Player.PLAYER:
            message = f"Your turn (must play {opening_card.id}). Select cards to play."
        else:
            message = f"AI to play {opening_card.id}."

        return replace(
            dealt,
            current_player=first_player,
            first_player_of_the_game=first_player,
            is_first_turn_of_game=True,
            opening_card=opening_card,
            status_message=message,
        )

    def with_play(self, player: Player, hand: Hand) -> 'GameState':
        """
        出牌后的新状态

        Args:
            player: 出牌者
            hand: 已通过校验的牌型

        Returns:
            新状态
        """
        self._check_turn(player)
        if not hand.is_valid:
            raise ValueError("Cannot play an invalid hand")

        current = self.get_hand(player)
        missing = [c for c in hand.cards if c not in current]
        if missing:
            raise ValueError(f"Cards not in hand: {', '.join(c.id for c in missing)}")

        remaining = tuple(c for c in current if c not in hand.cards)
        record = TurnRecord(player=player, hand=hand)
        who = player.display_name
        next_step = "AI thinking..." if player is Player.PLAYER else "Your turn."

        new_state = replace(
            self,
            player_hand=remaining if player is Player.PLAYER else self.player_hand,
            ai_hand=remaining if player is Player.AI else self.ai_hand,
            table=hand.cards,
            last_played_hand=hand,
            current_player=player.opponent,
            turn_history=self.turn_history + (record,),
            is_first_turn_of_game=False,
            status_message=f"{who} played {hand.describe()}. {next_step}",
        )

        if not remaining:
            message = "You win!" if player is Player.PLAYER else "AI wins!"
            return new_state._with_winner(player, message)
        return new_state

    def with_pass(self, player: Player, auto: bool = False, error: bool = False) -> 'GameState':
        """
        pass 后的新状态

        Args:
            player: pass 的玩家
            auto: 超时自动 pass
            error: AI 异常导致的 pass

        Returns:
            新状态
        """
        self._check_turn(player)

        if player is Player.PLAYER:
            message = "Time's up! You passed." if auto else "You passed. AI thinking..."
        elif error:
            message = "Error in AI turn. Your turn."
        else:
            message = "AI passed. Your turn."

        return replace(
            self,
            current_player=player.opponent,
            turn_history=self.turn_history + (
                TurnRecord(player=player, passed=True, auto=auto, error=error),
            ),
            is_first_turn_of_game=False,
            status_message=message,
        )

    def with_pause(self, paused: bool) -> 'GameState':
        if paused:
            message = "Game Paused"
        elif self.current_player is Player.PLAYER:
            message = "Your turn."
        else:
            message = "AI's turn."
        return replace(self, is_paused=paused, status_message=message)

    def with_timer(self, seconds: int) -> 'GameState':
        return replace(self, turn_timer=max(0, seconds))

    def with_sorted_hand(self) -> 'GameState':
        return replace(self, player_hand=sorted_cards(self.player_hand))

    def with_status(self, message: str) -> 'GameState':
        return replace(self, status_message=message)

    def _with_winner(self, player: Player, message: str) -> 'GameState':
        return replace(
            self,
            winner=player,
            player_score=self.player_score + (1 if player is Player.PLAYER else 0),
            ai_score=self.ai_score + (1 if player is Player.AI else 0),
            status_message=message,
        )

    def _check_turn(self, player: Player) -> None:
        if self.is_dealing:
            raise ValueError("Cards are still being dealt")
        if self.winner is not None:
            raise ValueError("Game is finished")
        if self.current_player is not player:
            raise ValueError(f"Not {player.value}'s turn")
