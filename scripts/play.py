#!/usr/bin/env python3
"""
对战脚本

Usage:
    python scripts/play.py --mode watch              # 观看 AI 对战
    python scripts/play.py --mode play               # 与 AI 对战
    python scripts/play.py --mode watch --games 3 --seed 42 --delay 0
"""
import argparse
import logging
import sys
from pathlib import Path
import time

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core.cards import cards_to_str, str_to_cards
from core.state import GameState
from ai import AIConfig
from game import GameConfig, GameController

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Dou Dizhu Play")

    parser.add_argument(
        "--mode",
        type=str,
        default="watch",
        choices=["watch", "play"],
        help="Mode: watch AI or play against AI",
    )
    parser.add_argument("--games", type=int, default=1, help="Number of games")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--delay", type=float, default=1.0, help="Delay between moves")
    parser.add_argument(
        "--difficulty",
        type=str,
        default="expert",
        choices=["expert", "easy"],
        help="AI difficulty",
    )
    parser.add_argument("--temperature", type=float, default=0.3, help="AI sampling temperature")
    parser.add_argument("--debug", action="store_true", help="Show AI decision logs")

    return parser.parse_args()


def seat_name(state: GameState, index: int) -> str:
    role = "地主" if index == state.landlord_index else "农民"
    if index == state.human_index:
        return f"你({role})"
    return f"玩家{index}({role})"


def print_game_state(state: GameState, show_all: bool):
    """打印游戏状态"""
    print("\n" + "=" * 60)
    print(f"当前玩家: {seat_name(state, state.current_turn)}")
    print("-" * 60)

    for i, hand in enumerate(state.hands):
        if show_all or i == state.human_index:
            print(f"[{seat_name(state, i)}] 手牌 ({len(hand)}): {cards_to_str(hand)}")
        else:
            print(f" {seat_name(state, i)}  手牌数: {len(hand)}")

    if state.last_played_cards:
        print(f"\n桌面: {cards_to_str(state.last_played_cards)} "
              f"({seat_name(state, state.last_played_by)})")

    print("=" * 60)


def print_last_move(state: GameState):
    if not state.play_history:
        return
    player, cards = state.play_history[-1]
    print(f"\n{seat_name(state, player)} 出牌: {cards_to_str(cards)}")


def print_result(state: GameState):
    print("\n" + "=" * 60)
    if state.human_index is not None:
        human_side = "landlord" if state.human_index == state.landlord_index else "farmer"
        print("恭喜你赢了!" if human_side == state.winning_side else "你输了!")
    print(f"胜者: {seat_name(state, state.winner_index)}")
    if state.is_spring():
        print("春天!")
    print(f"总手数: {len(state.play_history)}  炸弹: {state.bombs_count}")
    print("=" * 60)


def build_config(args, human_index) -> GameConfig:
    return GameConfig(
        human_index=human_index,
        seed=args.seed,
        ai=AIConfig(difficulty=args.difficulty, temperature=args.temperature),
    )


def watch_game(args):
    """观看 AI 对战"""
    controller = GameController(build_config(args, human_index=None))

    for game_idx in range(args.games):
        print(f"\n{'='*60}")
        print(f"Game {game_idx + 1}/{args.games}")
        print("=" * 60)

        controller.new_round()

        while controller.needs_ai_turn:
            print_game_state(controller.state, show_all=True)
            controller.advance()
            print_last_move(controller.state)
            time.sleep(args.delay)

        print_result(controller.state)


def human_turn(controller: GameController) -> bool:
    """
    处理一次人类输入

    Returns:
        False 表示退出
    """
    state = controller.state
    prompt = "\n输入要出的牌 (如 '3S 3H')，'p' 不要，'q' 退出: "
    choice = input(prompt).strip()

    if choice.lower() == "q":
        return False
    if choice.lower() == "p":
        if not controller.pass_turn():
            print("现在不能不要")
        return True

    try:
        cards = str_to_cards(choice)
    except ValueError as e:
        print(f"无法识别: {e}")
        return True

    for card_id in state.selected_card_ids:
        controller.toggle_select(card_id)
    for card in cards:
        controller.toggle_select(card.id)

    if not controller.play_selected():
        print(f"不能出: {controller.state.ui_message}")
        controller.clear_message()
    return True


def play_game(args):
    """与 AI 对战"""
    controller = GameController(build_config(args, human_index=0))

    for game_idx in range(args.games):
        print(f"\n{'='*60}")
        print(f"Game {game_idx + 1}/{args.games}")
        print("=" * 60)

        controller.new_round()
        state = controller.state
        print("你是地主!" if state.landlord_index == state.human_index else "你是农民!")

        while not controller.state.is_finished:
            if controller.needs_ai_turn:
                controller.advance()
                print_last_move(controller.state)
                time.sleep(args.delay)
                continue

            print_game_state(controller.state, show_all=False)
            if not human_turn(controller):
                print("退出游戏")
                return

        print_result(controller.state)


def main():
    args = parse_args()

    if args.debug:
        logging.getLogger("ai").setLevel(logging.DEBUG)

    print("=" * 60)
    print("斗地主")
    print("=" * 60)

    if args.mode == "watch":
        watch_game(args)
    elif args.mode == "play":
        play_game(args)


if __name__ == "__main__":
    main()
