"""
Tiger Sweeper - Main Entry Point
Plays a session in the terminal and records results to ~/.tiger-sweeper
"""

import argparse
import os
import sys

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from game.difficulties import DIFFICULTIES
from game.session import GameSession, GameState, GameStatus
from records import GameRecorder, LeaderboardStore, PreferencesStore, StreakStore


HELP = """Commands (0-based coordinates):
  o X Y   open a cell (or chord an open number)
  f X Y   toggle a flag
  h       hint          a   auto-assist step
  u       undo          p   pause / resume
  s       toggle probability overlay
  r [D]   new game, optionally difficulty D ({})
  l       leaderboard   q   quit""".format(", ".join(DIFFICULTIES))


def _cell_text(cell, state: GameState, probabilities: dict) -> str:
    key = (cell.x, cell.y)
    if cell.is_flagged:
        return "F"
    if cell.is_open:
        if cell.is_mine:
            return "X" if cell.is_exploded else "*"
        return str(cell.adjacent_mines) if cell.adjacent_mines else "."
    if key == state.hint_cell:
        return "?"
    if key in probabilities:
        return f"{probabilities[key]}%"
    return "#"


def render(state: GameState, probabilities: dict) -> str:
    """Text rendering of the board with the status line"""
    board = state.board
    lines = ["    " + " ".join(f"{x:>3}" for x in range(board.width))]
    for row in board.rows:
        out = [f"{_cell_text(cell, state, probabilities):>3}" for cell in row]
        lines.append(f"{row[0].y:>3} " + " ".join(out))

    status = state.status.value + (" (paused)" if state.paused else "")
    lines.append(f"status: {status}  lives: {state.lives}  mines left: {state.remaining_mines}"
                 f"  time: {state.timer_seconds}s")
    if state.hint_cell is not None:
        lines.append(f"hint: {state.hint_cell} safe with {state.hint_confidence}% confidence")
    return "\n".join(lines)


def handle_command(session: GameSession, leaderboard: LeaderboardStore, command: str) -> bool:
    """Apply one command line; returns False when the player quits"""
    parts = command.replace(",", " ").split()
    if not parts:
        return True
    verb, args = parts[0].lower(), parts[1:]

    if verb in ("q", "quit", "exit"):
        return False
    if verb in ("o", "f") and len(args) == 2:
        try:
            x, y = int(args[0]), int(args[1])
        except ValueError:
            print("Coordinates must be integers.")
            return True
        if verb == "o":
            session.open(x, y)
        else:
            session.toggle_flag(x, y)
    elif verb == "h":
        session.hint()
    elif verb == "a":
        session.assist_step()
    elif verb == "u":
        session.undo()
    elif verb == "p":
        session.toggle_pause()
    elif verb == "s":
        session.set_show_probabilities(not session.state.preferences.show_probabilities)
    elif verb == "r":
        session.reset(args[0] if args else None)
    elif verb == "l":
        entries = leaderboard.entries(session.state.difficulty)
        if not entries:
            print("No times recorded yet")
        for rank, entry in enumerate(entries[:10], 1):
            print(f"  {rank:2d}. {entry.format_time()}  lives {entry.lives}  {entry.format_date()}")
    else:
        print(HELP)
    return True


def main():
    """Main entry point for the terminal game"""
    parser = argparse.ArgumentParser(description="Tiger Sweeper")
    parser.add_argument('--difficulty', choices=list(DIFFICULTIES), default=None,
                        help='Difficulty to start with (default: last played)')
    args = parser.parse_args()

    preferences = PreferencesStore()
    leaderboard = LeaderboardStore()
    streaks = StreakStore()

    session = GameSession(difficulty=args.difficulty or preferences.get_last_difficulty(),
                          preferences=preferences.load())
    recorder = GameRecorder(leaderboard, streaks, preferences).attach(session)

    print(HELP)
    try:
        while True:
            session.tick()
            print()
            print(render(session.state, session.probability_hints()))
            if session.state.status is GameStatus.WON:
                print(f"You won! Rank #{recorder.last_rank}. "
                      f"Streak: {streaks.get(session.state.difficulty).describe()}")
            elif session.state.status is GameStatus.LOST:
                print(f"You lost. Streak: {streaks.get(session.state.difficulty).describe()}")
            if not handle_command(session, leaderboard, input("> ")):
                break
    except (KeyboardInterrupt, EOFError):
        print("\nGame interrupted by user")
    finally:
        recorder.detach()
    return 0


if __name__ == "__main__":
    sys.exit(main())
