#!/usr/bin/env python3
"""
Auto-assist Evaluation for Tiger Sweeper
Plays many games with the assist player and reports how far it gets
"""

import argparse
import os
import random
import sys
import time
from dataclasses import dataclass
from typing import List, Optional

import matplotlib.pyplot as plt
import numpy as np

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from ai.inference import MoveKind, get_ai_move, get_assist_move
from game.difficulties import DIFFICULTIES
from game.session import DEFAULT_LIVES, GameSession, GameStatus


@dataclass
class EpisodeResult:
    """Outcome of one auto-played game"""
    won: bool
    steps: int
    certain_moves: int
    guesses: int
    lives_lost: int
    open_fraction: float


def play_episode(difficulty: str, lives: int, seed: int, max_steps: int = 5000) -> EpisodeResult:
    """
    Play one game to the end with the assist player

    Certain moves come from the deterministic pass; everything else
    (probability shortcuts and outright guesses) is counted as a guess.
    """
    session = GameSession(difficulty=difficulty, lives=lives, rng=random.Random(seed))
    steps = certain_moves = guesses = 0

    while not session.state.status.is_terminal and steps < max_steps:
        state = session.state
        move = get_assist_move(state, allow_guess=True)
        if move is None:
            break

        if get_ai_move(state) == move:
            certain_moves += 1
        else:
            guesses += 1

        if move.kind is MoveKind.FLAG:
            session.toggle_flag(move.x, move.y)
        else:
            session.open(move.x, move.y)
        steps += 1

    board = session.state.board
    safe_cells = [cell for cell in board.cells() if not cell.is_mine]
    opened = sum(1 for cell in safe_cells if cell.is_open)

    return EpisodeResult(
        won=session.state.status is GameStatus.WON,
        steps=steps,
        certain_moves=certain_moves,
        guesses=guesses,
        lives_lost=lives - session.state.lives,
        open_fraction=opened / len(safe_cells) if safe_cells else 1.0,
    )


def evaluate(difficulty: str, episodes: int, lives: int, seed: int) -> List[EpisodeResult]:
    results = []
    start = time.time()
    for i in range(episodes):
        results.append(play_episode(difficulty, lives, seed + i))
        if (i + 1) % max(1, episodes // 10) == 0:
            wins = sum(r.won for r in results)
            print(f"  {i + 1}/{episodes} games, win rate {wins / len(results):.1%} "
                  f"({time.time() - start:.1f}s)")
    return results


def summarize(results: List[EpisodeResult]) -> dict:
    wins = np.array([r.won for r in results], dtype=np.float64)
    open_fraction = np.array([r.open_fraction for r in results], dtype=np.float64)
    guesses = np.array([r.guesses for r in results], dtype=np.float64)
    certain = np.array([r.certain_moves for r in results], dtype=np.float64)
    lives_lost = np.array([r.lives_lost for r in results], dtype=np.float64)
    total_moves = certain.sum() + guesses.sum()

    return {
        'games': len(results),
        'win_rate': float(wins.mean()) if len(results) else 0.0,
        'mean_open_fraction': float(open_fraction.mean()) if len(results) else 0.0,
        'std_open_fraction': float(open_fraction.std()) if len(results) else 0.0,
        'mean_guesses': float(guesses.mean()) if len(results) else 0.0,
        'mean_lives_lost': float(lives_lost.mean()) if len(results) else 0.0,
        'certain_move_share': float(certain.sum() / total_moves) if total_moves else 0.0,
    }


def plot_results(results: List[EpisodeResult], difficulty: str, save_path: str):
    """Histogram of how much of the board was cleared, split by outcome"""
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(12, 5))

    won = [r.open_fraction for r in results if r.won]
    lost = [r.open_fraction for r in results if not r.won]
    bins = np.linspace(0.0, 1.0, 21)
    ax1.hist([won, lost], bins=bins, stacked=True, label=['won', 'lost'])
    ax1.set_title(f'Board cleared ({difficulty})')
    ax1.set_xlabel('Fraction of safe cells opened')
    ax1.set_ylabel('Games')
    ax1.legend()

    ax2.hist([r.guesses for r in results], bins=20)
    ax2.set_title('Guesses per game')
    ax2.set_xlabel('Guesses')
    ax2.set_ylabel('Games')

    plt.tight_layout()
    plt.savefig(save_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    print(f"Plot saved to {save_path}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Evaluate the Tiger Sweeper auto-assist player",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python evaluation.py --difficulty easy --episodes 200
  python evaluation.py --difficulty hardest --episodes 50 --lives 1 --plot hardest.png
        """
    )
    parser.add_argument('--difficulty', choices=list(DIFFICULTIES), default='easy',
                        help='Game difficulty (default: easy)')
    parser.add_argument('--episodes', type=int, default=100,
                        help='Number of games to play (default: 100)')
    parser.add_argument('--lives', type=int, default=DEFAULT_LIVES,
                        help=f'Lives per game (default: {DEFAULT_LIVES})')
    parser.add_argument('--seed', type=int, default=0,
                        help='Base random seed (default: 0)')
    parser.add_argument('--plot', type=str, default=None,
                        help='Save a results plot to this path')
    args = parser.parse_args(argv)

    if args.episodes <= 0 or args.lives <= 0:
        print("episodes and lives must be positive")
        return 1

    print("Tiger Sweeper auto-assist evaluation")
    print("=" * 50)
    print(f"Difficulty: {args.difficulty}  Episodes: {args.episodes}  Lives: {args.lives}")
    print("=" * 50)

    results = evaluate(args.difficulty, args.episodes, args.lives, args.seed)
    summary = summarize(results)

    print("\nResults")
    print("-" * 50)
    print(f"Win rate:            {summary['win_rate']:.1%}")
    print(f"Board cleared:       {summary['mean_open_fraction']:.1%} "
          f"(std {summary['std_open_fraction']:.1%})")
    print(f"Guesses per game:    {summary['mean_guesses']:.2f}")
    print(f"Lives lost per game: {summary['mean_lives_lost']:.2f}")
    print(f"Certain move share:  {summary['certain_move_share']:.1%}")

    if args.plot:
        plot_results(results, args.difficulty, args.plot)
    return 0


if __name__ == "__main__":
    sys.exit(main())
