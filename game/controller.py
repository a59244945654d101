"""
回合控制器

持有唯一的 GameState，负责:
- 发牌与重开
- 玩家操作 (选牌、出牌、pass、暂停、理牌)
- 玩家回合倒计时 (超时自动 pass)
- AI 回合调度 (思考延迟后出牌)

所有改变状态的处理函数在同一把锁内执行，互不交错。
"""
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple
import logging
import random
import threading

from core.cards import Card, create_deck, shuffle_deck, deal_cards, sorted_cards
from core.hands import Hand
from core.rules import RuleEngine
from core.state import GameState, Phase, Player

from .agents import Agent, GreedyAgent
from .config import GameConfig, NUM_PLAYERS
from .notifications import Notifier
from .observation import ObservationBuilder
from .scheduler import Scheduler, TaskHandle, ThreadingScheduler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """玩家操作的校验结果"""

    legal: bool
    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> 'ValidationResult':
        return cls(True)

    @classmethod
    def reject(cls, reason: str) -> 'ValidationResult':
        return cls(False, reason)

    def __bool__(self) -> bool:
        return self.legal


@dataclass(frozen=True)
class GameSnapshot:
    """
    展示层只读快照

    AI 手牌只暴露张数，直到分出胜负才公开具体的牌
    """
    player_hand: Tuple[Card, ...]
    ai_card_count: int
    ai_hand: Optional[Tuple[Card, ...]]
    table: Tuple[Card, ...]
    selected: Tuple[Card, ...]
    status_message: str
    turn_timer: int
    current_player: Player
    phase: Phase
    is_paused: bool
    is_dealing: bool
    winner: Optional[Player]
    player_score: int
    ai_score: int

    @classmethod
    def from_state(cls, state: GameState, selected: Tuple[Card, ...] = ()) -> 'GameSnapshot':
        return cls(
            player_hand=state.player_hand,
            ai_card_count=len(state.ai_hand),
            ai_hand=state.ai_hand if state.winner is not None else None,
            table=state.table,
            selected=selected,
            status_message=state.status_message,
            turn_timer=state.turn_timer,
            current_player=state.current_player,
            phase=state.phase,
            is_paused=state.is_paused,
            is_dealing=state.is_dealing,
            winner=state.winner,
            player_score=state.player_score,
            ai_score=state.ai_score,
        )


SnapshotListener = Callable[[GameSnapshot], None]
DeckBuilder = Callable[[random.Random], List[Card]]


def default_deck_builder(rng: random.Random) -> List[Card]:
    return shuffle_deck(create_deck(), rng)


class TurnController:
    """
    进攻回合控制器 (玩家 vs AI)

    每局一个实例；调用 reset_game() 开始
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        scheduler: Optional[Scheduler] = None,
        agent: Optional[Agent] = None,
        notifier: Optional[Notifier] = None,
        seed: Optional[int] = None,
        deck_builder: Optional[DeckBuilder] = None,
    ):
        """
        Args:
            config: 游戏配置
            scheduler: 调度器 (默认 ThreadingScheduler)
            agent: AI 智能体 (默认 GreedyAgent)
            notifier: 通知分发器
            seed: 洗牌随机种子
            deck_builder: 生成洗好的牌堆 (默认 create_deck + shuffle_deck)
        """
        self.config = config or GameConfig()
        self.scheduler = scheduler or ThreadingScheduler()
        self.agent = agent or GreedyAgent()
        self.notifier = notifier or Notifier()

        self._rng = random.Random(seed)
        self._deck_builder = deck_builder or default_deck_builder
        self._obs_builder = ObservationBuilder()
        self._lock = threading.RLock()
        self._listeners: List[SnapshotListener] = []

        self._state = GameState.initial(turn_seconds=self.config.turn_seconds)
        self._selected: Tuple[Card, ...] = ()

        # 调度句柄
        self._deal_handle: Optional[TaskHandle] = None
        self._turn_timer_handle: Optional[TaskHandle] = None
        self._ai_turn_handle: Optional[TaskHandle] = None

    # ------------------------------------------------------------------
    # 只读访问
    # ------------------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def selected_cards(self) -> Tuple[Card, ...]:
        return self._selected

    @property
    def timer_running(self) -> bool:
        return self._turn_timer_handle is not None

    @property
    def ai_turn_pending(self) -> bool:
        return self._ai_turn_handle is not None

    def snapshot(self) -> GameSnapshot:
        with self._lock:
            return GameSnapshot.from_state(self._state, self._selected)

    def playable_hands(self) -> List[Hand]:
        """玩家当前可出的牌型 (提示用)；非玩家回合返回空列表"""
        with self._lock:
            state = self._state
            if state.phase is not Phase.PLAYER_TURN or state.is_paused:
                return []
            return state.playable_hands(Player.PLAYER)

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        订阅状态变化

        Returns:
            取消订阅的函数
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # 对局生命周期
    # ------------------------------------------------------------------

    def reset_game(self, keep_scores: bool = False, seed: Optional[int] = None):
        """
        重新开局

        Args:
            keep_scores: 是否保留累计分数 (下一局)
            seed: 重新设定洗牌种子
        """
        with self._lock:
            self._cancel_all()
            if seed is not None:
                self._rng = random.Random(seed)

            prev = self._state
            self._state = GameState.initial(
                player_score=prev.player_score if keep_scores else 0,
                ai_score=prev.ai_score if keep_scores else 0,
                turn_seconds=self.config.turn_seconds,
            )
            self._selected = ()
            logger.debug(f"Reset game (keep_scores={keep_scores})")
            self._publish()

            if self.config.deal_delay_seconds > 0:
                self._deal_handle = self.scheduler.call_later(
                    self.config.deal_delay_seconds,
                    lambda: self._deal(keep_scores),
                )
            else:
                self._deal(keep_scores)

    def close(self):
        """取消所有定时任务并释放调度器"""
        with self._lock:
            self._cancel_all()
        self.scheduler.shutdown()

    def _deal(self, keep_scores: bool):
        with self._lock:
            self._deal_handle = None
            if not self._state.is_dealing:
                return

            deck = self._deck_builder(self._rng)
            player_hand, ai_hand = deal_cards(deck, NUM_PLAYERS, self.config.cards_per_player)
            self._state = self._state.with_deal(player_hand, ai_hand, self.config.turn_seconds)
            state = self._state
            logger.info(
                f"Dealt {self.config.cards_per_player} cards each, "
                f"opening card {state.opening_card.id}, first player {state.current_player.value}"
            )

            if state.winner is Player.PLAYER:
                self.notifier.success("Tứ Quý Heo! You win instantly!")
            elif state.winner is Player.AI:
                self.notifier.error("Tứ Quý Heo! AI wins instantly!")
            elif keep_scores:
                self.notifier.info("New round started!")
            else:
                self.notifier.info("New game started! Good luck!")

            if state.winner is None:
                self._enter_turn()
            self._publish()

    # ------------------------------------------------------------------
    # 玩家操作
    # ------------------------------------------------------------------

    def select_card(self, card: Card) -> ValidationResult:
        """选中 / 取消选中一张牌"""
        with self._lock:
            result = self._check_player_can_act()
            if not result:
                return result

            if self._state.turn_timer <= 0:
                self.notifier.info("Time's up! Your turn was automatically passed.")
                self._apply_player_pass(auto=True)
                return ValidationResult.reject("Time's up")

            if card not in self._state.player_hand:
                return ValidationResult.reject(f"{card.id} is not in your hand")

            if card in self._selected:
                self._selected = tuple(c for c in self._selected if c != card)
            else:
                self._selected = sorted_cards(self._selected + (card,))
            self._publish()
            return ValidationResult.ok()

    def clear_selection(self):
        with self._lock:
            self._selected = ()
            self._publish()

    def play_selected_cards(self) -> ValidationResult:
        """
        打出选中的牌

        Returns:
            校验结果；被拒绝时状态不变，回合与倒计时继续
        """
        with self._lock:
            result = self._check_player_can_act()
            if not result:
                return result

            state = self._state
            if state.turn_timer <= 0:
                self.notifier.error("Time's up! Your turn was automatically passed.")
                self._apply_player_pass(auto=True)
                return ValidationResult.reject("Time's up")

            if not self._selected:
                return self._reject_info("Please select cards to play.")

            hand = RuleEngine.identify_hand_combination(self._selected)
            if not hand.is_valid:
                return self._reject_error("Invalid card combination selected.")

            if state.must_play_opening_card(Player.PLAYER) and not hand.contains(state.opening_card):
                return self._reject_error(
                    f"Your first hand must include the {state.opening_card.id}."
                )

            if not RuleEngine.can_play_over(hand, state.table_hand_for(Player.PLAYER)):
                return self._reject_error(
                    "Your hand cannot beat the last played hand or is not a valid chop."
                )

            self._apply_play(Player.PLAYER, hand)
            return ValidationResult.ok()

    def pass_turn(self, is_auto_pass: bool = False) -> ValidationResult:
        """
        pass

        Args:
            is_auto_pass: 是否为超时自动 pass (不受"开新一轮必须出牌"限制)
        """
        with self._lock:
            result = self._check_player_can_act()
            if not result:
                return result

            state = self._state
            if not is_auto_pass and state.is_opening_round(Player.PLAYER):
                if state.playable_hands(Player.PLAYER):
                    return self._reject_info("You must play a card to start a new round.")

            self._apply_player_pass(auto=is_auto_pass)
            return ValidationResult.ok()

    def toggle_pause(self) -> ValidationResult:
        """暂停 / 继续"""
        with self._lock:
            state = self._state
            if state.is_dealing:
                return ValidationResult.reject("Cards are being dealt")
            if state.winner is not None:
                return ValidationResult.reject("Game is finished")

            paused = not state.is_paused
            self._state = state.with_pause(paused)
            if paused:
                self._cancel_turn_timer()
                self._cancel_ai_turn()
                logger.debug("Game paused")
            else:
                logger.debug("Game resumed")
                self._enter_turn(reset_timer=False)
            self._publish()
            return ValidationResult.ok()

    def sort_player_hand(self) -> ValidationResult:
        """理牌"""
        with self._lock:
            state = self._state
            if state.is_paused or state.winner is not None or state.is_dealing:
                return ValidationResult.reject("Cannot sort now")
            self._state = state.with_sorted_hand()
            self.notifier.info("Hand sorted!")
            self._publish()
            return ValidationResult.ok()

    # ------------------------------------------------------------------
    # 回合流转
    # ------------------------------------------------------------------

    def _check_player_can_act(self) -> ValidationResult:
        state = self._state
        if state.is_dealing:
            return ValidationResult.reject("Cards are being dealt")
        if state.winner is not None:
            return ValidationResult.reject("Game is finished")
        if state.is_paused:
            return ValidationResult.reject("Game is paused")
        if state.current_player is not Player.PLAYER:
            return ValidationResult.reject("Not your turn")
        return ValidationResult.ok()

    def _reject_info(self, message: str) -> ValidationResult:
        self.notifier.info(message)
        return ValidationResult.reject(message)

    def _reject_error(self, message: str) -> ValidationResult:
        self.notifier.error(message)
        return ValidationResult.reject(message)

    def _apply_play(self, player: Player, hand: Hand):
        if player is Player.PLAYER:
            self._cancel_turn_timer()
            self._selected = ()

        self._state = self._state.with_play(player, hand)
        logger.info(f"{player.value} played {hand.describe()}")

        if self._state.winner is not None:
            self._finish()
        else:
            self._enter_turn()
        self._publish()

    def _apply_player_pass(self, auto: bool):
        self._cancel_turn_timer()
        self._selected = ()
        self._state = self._state.with_pass(Player.PLAYER, auto=auto).with_timer(
            self.config.turn_seconds
        )
        logger.info(f"player passed{' (timeout)' if auto else ''}")
        self._enter_turn()
        self._publish()

    def _finish(self):
        self._cancel_all()
        if self._state.winner is Player.PLAYER:
            self.notifier.success("Congratulations! You won the game!")
        else:
            self.notifier.error("AI won the game.")
        logger.info(
            f"Winner: {self._state.winner.value} "
            f"(score {self._state.player_score}-{self._state.ai_score})"
        )

    def _enter_turn(self, reset_timer: bool = True):
        """进入当前玩家的回合: 玩家启动倒计时，AI 安排思考延迟"""
        state = self._state
        if not state.is_active:
            return

        if state.current_player is Player.PLAYER:
            self._start_turn_timer(reset=reset_timer)
            if reset_timer and state.turn_history and state.is_opening_round(Player.PLAYER):
                self.notifier.info("AI passed. You start a new round.")
        else:
            self._schedule_ai_turn()

    # ------------------------------------------------------------------
    # 倒计时
    # ------------------------------------------------------------------

    def _start_turn_timer(self, reset: bool = True):
        self._cancel_turn_timer()
        if reset or self._state.turn_timer <= 0:
            self._state = self._state.with_timer(self.config.turn_seconds)

        handle: Optional[TaskHandle] = None

        def tick():
            self._tick(handle)

        handle = self.scheduler.call_every(1.0, tick)
        self._turn_timer_handle = handle

    def _cancel_turn_timer(self):
        if self._turn_timer_handle is not None:
            self._turn_timer_handle.cancel()
            self._turn_timer_handle = None

    def _tick(self, handle: Optional[TaskHandle]):
        with self._lock:
            if handle is None or handle is not self._turn_timer_handle:
                return

            state = self._state
            if state.phase is not Phase.PLAYER_TURN or state.is_paused:
                self._cancel_turn_timer()
                return

            remaining = state.turn_timer - 1
            self._state = state.with_timer(remaining)
            if remaining > 0:
                self._publish()
                return

            self._cancel_turn_timer()
            self.notifier.info("Time's up! Your turn has been passed automatically.")
            self._apply_player_pass(auto=True)

    # ------------------------------------------------------------------
    # AI 回合
    # ------------------------------------------------------------------

    def _schedule_ai_turn(self):
        self._cancel_ai_turn()
        handle: Optional[TaskHandle] = None

        def fire():
            self._ai_turn(handle)

        handle = self.scheduler.call_later(self.config.ai_thinking_seconds, fire)
        self._ai_turn_handle = handle

    def _cancel_ai_turn(self):
        if self._ai_turn_handle is not None:
            self._ai_turn_handle.cancel()
            self._ai_turn_handle = None

    def _ai_turn(self, handle: Optional[TaskHandle]):
        with self._lock:
            if handle is None or handle is not self._ai_turn_handle:
                return
            self._ai_turn_handle = None

            state = self._state
            # 触发时再次检查 (可能已暂停或重开)
            if state.phase is not Phase.AI_TURN or state.is_paused:
                return

            try:
                obs = self._obs_builder.build(state, Player.AI)
                playable = state.playable_hands(Player.AI)
                choice = self.agent.act(obs, playable)
                if choice is not None and choice not in playable:
                    raise ValueError(f"Agent chose an illegal hand: {choice.describe()}")
            except Exception as e:
                logger.exception("Error during AI turn")
                self._state = (
                    state.with_pass(Player.AI, error=True)
                    .with_pause(True)
                    .with_timer(self.config.turn_seconds)
                    .with_status("Critical AI error. Your turn. Game paused.")
                )
                self.notifier.error("A critical error occurred in the AI. Game paused.", str(e))
                self._publish()
                return

            if choice is None:
                self._state = state.with_pass(Player.AI)
                logger.info("ai passed")
                self._enter_turn()
                self._publish()
            else:
                self._apply_play(Player.AI, choice)

    # ------------------------------------------------------------------
    # 内部工具
    # ------------------------------------------------------------------

    def _cancel_all(self):
        if self._deal_handle is not None:
            self._deal_handle.cancel()
            self._deal_handle = None
        self._cancel_turn_timer()
        self._cancel_ai_turn()

    def _publish(self):
        snapshot = GameSnapshot.from_state(self._state, self._selected)
        for listener in list(self._listeners):
            listener(snapshot)
