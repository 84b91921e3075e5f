#!/usr/bin/env python3
"""
评估脚本: AI 自对弈统计

Usage:
    python scripts/evaluate.py --games 100
    python scripts/evaluate.py --games 200 --temperature 1.0 --output results.json
"""
import argparse
import logging
import sys
from pathlib import Path
import json

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from ai import AIConfig
from evaluation import Arena

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Dou Dizhu AI Evaluation")

    parser.add_argument("--games", type=int, default=100, help="Number of games")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument(
        "--difficulty",
        type=str,
        default="expert",
        choices=["expert", "easy"],
        help="AI difficulty",
    )
    parser.add_argument("--temperature", type=float, default=0.3, help="AI sampling temperature")
    parser.add_argument("--landlord-seat", type=int, default=1, choices=[0, 1, 2])
    parser.add_argument("--output", type=str, help="Output file for results")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")

    return parser.parse_args()


def main():
    args = parse_args()

    config = AIConfig(difficulty=args.difficulty, temperature=args.temperature)
    logger.info(f"Evaluating {args.difficulty} AI over {args.games} games")

    arena = Arena(ai_config=config, seed=args.seed, landlord_seat=args.landlord_seat)
    result = arena.play(n_games=args.games, verbose=args.verbose)

    logger.info("=" * 50)
    logger.info("Evaluation Results")
    logger.info("=" * 50)
    logger.info(f"Landlord Win Rate: {result.landlord_win_rate:.2%}")
    logger.info(f"Average Length: {result.mean_length:.1f} ± {result.std_length:.1f}")
    logger.info(f"Bombs per Game: {result.bombs_per_game:.2f}")
    logger.info(f"Spring Rate: {result.spring_rate:.2%}")
    logger.info("=" * 50)

    if args.output:
        with open(args.output, "w") as f:
            json.dump({
                "config": config.to_dict(),
                "games_played": result.n_games,
                "landlord_win_rate": result.landlord_win_rate,
                "mean_length": result.mean_length,
                "std_length": result.std_length,
                "bombs_per_game": result.bombs_per_game,
                "spring_rate": result.spring_rate,
            }, f, indent=2)
        logger.info(f"Results saved to {args.output}")


if __name__ == "__main__":
    main()
