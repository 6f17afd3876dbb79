import argparse
import logging
import os
import random
import sys
from typing import List, Optional, Sequence

import pandas as pd
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from tqdm import tqdm

# Project root on the path so the script runs without installing the package.
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from agents.heuristic_bot import STYLES, HeuristicBot
from agents.random_bot import RandomBot
from agents.runner import MAX_GAME_TURNS, play_bot_game
from splendor_engine.factory import create_game

project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
BOT_KINDS = ("random",) + STYLES


def load_config(config_path: Optional[str] = None) -> dict:
    path = config_path or os.path.join(project_root, "configs", "simulate_config.yaml")
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def make_bot(kind: str, seat: int, rng: random.Random):
    if kind == "random":
        return RandomBot(seat, rng=rng)
    if kind in STYLES:
        return HeuristicBot(seat, style=kind, rng=rng)
    raise ValueError(f"Unknown bot kind '{kind}', expected one of {BOT_KINDS}")


def run_simulation(bot_kinds: Sequence[str], num_games: int, seed: Optional[int] = None,
                   max_turns: int = MAX_GAME_TURNS, progress: bool = True) -> pd.DataFrame:
    """
    Plays num_games bot-vs-bot games and returns one row per game.
    Game i is shuffled with seed + i so a run can be reproduced.
    """
    rng = random.Random(seed)
    rows = []
    names = [f"{kind}_{seat}" for seat, kind in enumerate(bot_kinds)]
    for i in tqdm(range(num_games), disable=not progress, desc="Simulating"):
        game_seed = None if seed is None else seed + i
        game = create_game(names, seed=game_seed)
        bots = [make_bot(kind, seat, rng) for seat, kind in enumerate(bot_kinds)]
        result = play_bot_game(game, bots, max_turns=max_turns)
        row = {
            "game_id": i,
            "winner_seat": result.winner_index,
            "winner": result.winner_name,
            "turns": result.turns,
            "stalled": result.stalled,
            "truncated": result.truncated,
        }
        for seat, score in enumerate(result.scores):
            row[f"score_{seat}"] = score
        rows.append(row)
    return pd.DataFrame(rows)


def summarize(df: pd.DataFrame, bot_kinds: Sequence[str]) -> Table:
    table = Table(title=f"Simulation Summary ({len(df)} games)")
    table.add_column("Seat", justify="right", style="cyan")
    table.add_column("Bot", style="magenta")
    table.add_column("Wins", justify="right")
    table.add_column("Win Rate", justify="right")
    table.add_column("Avg Score", justify="right")
    finished = df["winner_seat"].notna().sum() if len(df) else 0
    for seat, kind in enumerate(bot_kinds):
        wins = int((df["winner_seat"] == seat).sum()) if len(df) else 0
        rate = f"{wins / finished:.1%}" if finished else "-"
        avg = f"{df[f'score_{seat}'].mean():.2f}" if len(df) else "-"
        table.add_row(str(seat), kind, str(wins), rate, avg)
    if len(df):
        table.caption = (f"avg turns {df['turns'].mean():.1f} | stalled {int(df['stalled'].sum())} | "
                         f"truncated {int(df['truncated'].sum())}")
    return table


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Run bot-vs-bot Splendor games")
    parser.add_argument("--config", type=str, default=None, help="Path to a YAML config file")
    parser.add_argument("--games", type=int, default=None, help="Number of games (Overrides config)")
    parser.add_argument("--seed", type=int, default=None, help="Base seed (Overrides config)")
    parser.add_argument("--bots", nargs="+", default=None, choices=BOT_KINDS, help="Bot per seat (Overrides config)")
    parser.add_argument("--csv", type=str, default=None, help="Write per-game rows to this CSV file")
    args = parser.parse_args(argv)

    console = Console()
    try:
        config = load_config(args.config)
    except (OSError, yaml.YAMLError) as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        return

    logging.basicConfig(level=str(config.get("log_level", "WARNING")).upper(), format="%(message)s",
                        handlers=[RichHandler()])

    num_games = args.games if args.games is not None else config.get("num_games", 100)
    seed = args.seed if args.seed is not None else config.get("seed")
    bot_kinds = args.bots or config.get("bots", ["balanced", "random"])
    max_turns = config.get("max_turns", MAX_GAME_TURNS)
    csv_path = args.csv or config.get("results_csv")

    console.print(f"\n[bold blue]Simulating {num_games} games:[/bold blue] {' vs '.join(bot_kinds)}")
    df = run_simulation(bot_kinds, num_games, seed=seed, max_turns=max_turns)
    console.print(summarize(df, bot_kinds))

    if csv_path:
        df.to_csv(csv_path, index=False)
        console.print(f"[green]Saved results to {csv_path}[/green]")


if __name__ == "__main__":
    main()
