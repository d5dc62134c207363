# arena.py
"""
Bot-vs-bot Knucklebones runs for comparing difficulty tiers.

- Each game: both boards start empty, players alternate, the mover rolls a die
  (seeded numpy Generator) and asks controller.choose_column for a column.
- A move fills the mover's column and cancels matching dice in the opponent's
  same column (knucklebones_engine.simulate_placement).
- The game ends as soon as either board is full; higher total score wins.
- Bot A moves first in even games, bot B in odd games.
- Prints a summary (wins/draws, low/median/high margin) and can plot margins.
"""

from __future__ import annotations
import argparse
import os
import statistics
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple
import numpy as np
import matplotlib.pyplot as plt

from controller import DIFFICULTIES, choose_column
from knucklebones_engine import format_board, is_full, new_board, simulate_placement, total_score, warmup

@dataclass
class ArenaParams:
    bot_a: str = "hard"
    bot_b: str = "medium"
    games: int = 20
    seed: Optional[int] = 3000
    verbose: bool = False

@dataclass
class GameResult:
    score_a: int
    score_b: int
    turns: int

    @property
    def margin(self) -> int:
        return self.score_a - self.score_b

def _format_total_time(seconds: float) -> str:
    """Format as HH:MM:SS.fffffff (7 fractional digits)."""
    t = seconds
    h = int(t // 3600); t -= 3600 * h
    m = int(t // 60);   t -= 60 * m
    s = int(t);         t -= s
    return f"{h:02d}:{m:02d}:{s:02d}.{int(round(t * 10_000_000)):07d}"

# ---- Play a single game ----

def run_game(bot_a: str, bot_b: str, seed: Optional[int], a_first: bool = True,
             verbose: bool = False) -> GameResult:
    rng = np.random.default_rng(seed)
    boards = [new_board(), new_board()]
    bots = (bot_a, bot_b)
    mover = 0 if a_first else 1
    turns = 0

    while not (is_full(boards[0]) or is_full(boards[1])):
        other = 1 - mover
        die = int(rng.integers(1, 7))
        col = choose_column(boards[mover], boards[other], die, bots[mover], rng=rng)
        boards[mover], boards[other] = simulate_placement(boards[mover], boards[other], col, die)
        turns += 1

        if verbose:
            print(f"\nTurn {turns}  {'A' if mover == 0 else 'B'} ({bots[mover]}) rolled {die} -> column {col}")
            print("A:")
            print(format_board(boards[0]))
            print("B:")
            print(format_board(boards[1]))
            print(f"Score A: {total_score(boards[0])}  Score B: {total_score(boards[1])}")

        mover = other

    return GameResult(total_score(boards[0]), total_score(boards[1]), turns)

def run_series(params: ArenaParams) -> List[GameResult]:
    results: List[GameResult] = []
    seed = params.seed
    for i in range(params.games):
        results.append(run_game(params.bot_a, params.bot_b, seed, a_first=(i % 2 == 0), verbose=params.verbose))
        if seed is not None:
            seed += 1
        if params.verbose:
            print(f"{i + 1} / {params.games} games played")
    return results

# ---- Summary helpers ----

def tally(results: List[GameResult]) -> Tuple[int, int, int]:
    wins = sum(1 for r in results if r.margin > 0)
    losses = sum(1 for r in results if r.margin < 0)
    return wins, losses, len(results) - wins - losses

def print_summary(params: ArenaParams, results: List[GameResult], total_seconds: float):
    n = len(results)
    print(f"{n} games completed! ({params.bot_a} vs {params.bot_b})")
    print(f"Total time: {_format_total_time(total_seconds)}")
    if n == 0:
        return

    wins, losses, draws = tally(results)
    margins = [r.margin for r in results]
    print(f"A wins: {wins}  B wins: {losses}  Draws: {draws}")
    print(f"A win rate: {int(round(100.0 * wins / n))}%")
    print(f"Low Margin: {min(margins)}")
    print(f"Median Margin: {statistics.median(margins)}")
    print(f"High Margin: {max(margins)}")
    print(f"Mean Score A: {statistics.mean(r.score_a for r in results):.1f}  "
          f"Mean Score B: {statistics.mean(r.score_b for r in results):.1f}")

# ---- Plotting helpers ----

def plot_results(params: ArenaParams, results: List[GameResult], show=True, outdir=None):
    """
    Quick-look plots:
      - Histogram of score margins (A - B)
      - Bar chart of A wins / B wins / draws
    Optionally saves PNGs if outdir is provided.
    """
    if not results:
        print("No results to plot.")
        return []

    margins = np.array([r.margin for r in results], dtype=float)

    fig1 = plt.figure()
    plt.hist(margins, bins="auto", edgecolor="black")
    plt.axvline(0, linestyle=":", linewidth=1)
    plt.axvline(margins.mean(), linestyle="--", linewidth=1, label=f"Mean {margins.mean():.1f}")
    plt.title(f"Score Margin ({params.bot_a} - {params.bot_b})")
    plt.xlabel("Margin")
    plt.ylabel("Count")
    plt.legend()
    plt.tight_layout()

    fig2 = plt.figure()
    wins, losses, draws = tally(results)
    plt.bar([f"{params.bot_a} (A)", f"{params.bot_b} (B)", "draw"], [wins, losses, draws])
    plt.title("Outcomes")
    plt.ylabel("Games")
    plt.tight_layout()

    paths: List[str] = []
    if outdir:
        os.makedirs(outdir, exist_ok=True)
        paths = [
            os.path.join(outdir, "margin_hist.png"),
            os.path.join(outdir, "outcomes.png"),
        ]
        for p, fig in zip(paths, [fig1, fig2]):
            fig.savefig(p, dpi=150)
        print("Saved plots:")
        for p in paths:
            print(" -", p)

    if show:
        plt.show()
    else:
        plt.close(fig1); plt.close(fig2)
    return paths

# ---- CLI ----

def main(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(description="Knucklebones bot arena (serial)")
    ap.add_argument("--bot-a", choices=DIFFICULTIES, default="hard")
    ap.add_argument("--bot-b", choices=DIFFICULTIES, default="medium")
    ap.add_argument("--seed", type=int, default=3000)
    ap.add_argument("--games", type=int, default=20, help="Number of games to run (serial)")
    ap.add_argument("--quiet", action="store_true")
    ap.add_argument("--plot", action="store_true", help="Show result plots after runs")
    ap.add_argument("--save-plots", metavar="DIR", default=None, help="Save plots to DIR (e.g., 'plots').")
    ap.add_argument("--no-show", action="store_true", help="Create/Save plots without opening a window")
    args = ap.parse_args(argv)

    params = ArenaParams(bot_a=args.bot_a, bot_b=args.bot_b, games=args.games,
                         seed=args.seed, verbose=not args.quiet)

    # Warm up Numba once to avoid first-move stalls
    warmup()
    t0 = time.perf_counter()
    results = run_series(params)
    print_summary(params, results, time.perf_counter() - t0)

    if args.plot or args.save_plots is not None:
        plot_results(params, results, show=not args.no_show, outdir=args.save_plots)

if __name__ == "__main__":
    main()
