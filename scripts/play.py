#!/usr/bin/env python3
"""
终端对战脚本 (玩家 vs AI)

Usage:
    python scripts/play.py
    python scripts/play.py --seed 42 --cards 13 --turn-seconds 30

命令:
    3S 4S 5S   打出这些牌 (花色 S/C/D/H，也可用 ♠♣♦♥)
    pass       pass
    sort       理牌
    pause      暂停 / 继续
    hint       显示可出的牌
    next       下一局 (保留分数) / 重新开始
    q          退出
"""
import argparse
import logging
import sys
import threading
from pathlib import Path

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core.cards import str_to_cards, cards_to_str
from core.state import Phase, Player
from game import GameConfig, GameSnapshot, Notification, TurnController

logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
)


def parse_args():
    parser = argparse.ArgumentParser(description="Tiến Lên: play against the AI")

    parser.add_argument("--seed", type=int, default=None, help="Shuffle seed")
    parser.add_argument("--cards", type=int, default=12, help="Cards per player")
    parser.add_argument("--turn-seconds", type=int, default=30, help="Turn countdown")
    parser.add_argument("--ai-delay", type=float, default=1.5, help="AI thinking delay")
    parser.add_argument("--verbose", action="store_true", help="Log engine events")

    return parser.parse_args()


class TerminalView:
    """把快照和通知打印到终端"""

    def __init__(self):
        self._last_status = None
        self._lock = threading.Lock()

    def on_snapshot(self, snapshot: GameSnapshot):
        # 倒计时每秒都会推送，只在状态文字变化时重绘
        if snapshot.status_message == self._last_status:
            return
        self._last_status = snapshot.status_message
        with self._lock:
            print(render(snapshot))

    def on_notification(self, notification: Notification):
        with self._lock:
            print(f"[{notification.level.value}] {notification.message}")


def render(snapshot: GameSnapshot) -> str:
    lines = ["", "=" * 60]
    lines.append(f"Score: You {snapshot.player_score} - AI {snapshot.ai_score}")
    if snapshot.ai_hand is not None:
        lines.append(f"AI hand ({snapshot.ai_card_count}): {cards_to_str(snapshot.ai_hand)}")
    else:
        lines.append(f"AI cards: {snapshot.ai_card_count}")
    table = cards_to_str(snapshot.table) if snapshot.table else "(empty)"
    lines.append(f"Table: {table}")
    lines.append(f"Your hand ({len(snapshot.player_hand)}): {cards_to_str(snapshot.player_hand)}")
    lines.append("-" * 60)
    lines.append(snapshot.status_message)
    if snapshot.winner is None and snapshot.current_player is Player.PLAYER and not snapshot.is_paused:
        lines.append(f"Time left: {snapshot.turn_timer}s")
    lines.append("=" * 60)
    return "\n".join(lines)


def play_cards(controller: TurnController, text: str):
    try:
        cards = str_to_cards(text)
    except ValueError as e:
        print(e)
        return

    controller.clear_selection()
    for card in cards:
        result = controller.select_card(card)
        if not result:
            print(result.reason)
            controller.clear_selection()
            return
    controller.play_selected_cards()


def main():
    args = parse_args()
    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    try:
        config = GameConfig(
            cards_per_player=args.cards,
            turn_seconds=args.turn_seconds,
            ai_thinking_seconds=args.ai_delay,
        )
    except ValueError as e:
        sys.exit(f"Invalid options: {e}")

    controller = TurnController(config=config, seed=args.seed)
    view = TerminalView()
    controller.subscribe(view.on_snapshot)
    controller.notifier.subscribe(view.on_notification)

    print("=" * 60)
    print("Tiến Lên")
    print("=" * 60)
    controller.reset_game()

    try:
        while True:
            command = input().strip()
            if not command:
                continue
            lowered = command.lower()

            if lowered in ("q", "quit", "exit"):
                break
            elif lowered == "pass":
                result = controller.pass_turn()
            elif lowered == "sort":
                result = controller.sort_player_hand()
            elif lowered == "pause":
                result = controller.toggle_pause()
            elif lowered in ("next", "new", "restart"):
                controller.reset_game(keep_scores=controller.snapshot().winner is not None)
                continue
            elif lowered == "hint":
                if controller.snapshot().phase is not Phase.PLAYER_TURN:
                    continue
                hands = controller.playable_hands()
                for hand in hands[:10]:
                    print(f"  {hand.describe()}")
                if len(hands) > 10:
                    print(f"  ... {len(hands) - 10} more")
                if not hands:
                    print("  Nothing beats the table. Pass.")
                continue
            else:
                play_cards(controller, command)
                continue

            if not result:
                print(result.reason)
    except (EOFError, KeyboardInterrupt):
        pass
    finally:
        controller.close()
        print("Bye!")


if __name__ == "__main__":
    main()
