# splendor_engine/main_text.py

"""
Hot-seat console front end.

Every selection goes through the menu helpers below, which either return a
complete action or raise ActionBuildError; an impossible selection is
reported and the player is asked again.
"""

import argparse
import logging
from typing import IO, List, Optional, Sequence

from rich.console import Console, Group
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from .actions import (
    BuyCard,
    DiscardTokens,
    ReserveCard,
    TakeTokens,
    buy_from_market,
    buy_from_reserved,
    discard,
    reserve_from_market,
    reserve_from_top,
    take,
)
from .card import DevelopmentCard, NobleTile
from .constants import CARD_LEVELS, MAX_GEMS_PER_PLAYER, MAX_PLAYERS, MIN_PLAYERS, WINNING_SCORE, GemColor
from .errors import ActionBuildError
from .factory import create_game
from .game import Game, TurnPhase
from .legal import get_legal_actions
from .state import GameView, PlayerView

logger = logging.getLogger(__name__)

STANDARD_CHOICES = [c.value for c in GemColor.get_standard_gems()]
ALL_CHOICES = [c.value for c in GemColor.get_all_gems()]


# --- Rendering ---

def format_cost(cost) -> str:
    if not cost:
        return "free"
    return " ".join(f"{c.value}:{v}" for c, v in cost.items())


def format_card(card: DevelopmentCard) -> str:
    return f"#{card.card_id} L{card.level} {card.points}P {card.gem_type.value} | cost {format_cost(card.cost)}"


def format_noble(noble: NobleTile) -> str:
    return f"{noble.name} (+{noble.points}P) req {format_cost(noble.cost)}"


def render_board(view: GameView) -> Panel:
    board = view.board
    gems = Table(title="Supply", show_header=True, expand=True)
    for color in GemColor.get_all_gems():
        gems.add_column(color.value, justify="center")
    gems.add_row(*(str(board.gem_stacks[c]) for c in GemColor.get_all_gems()))

    nobles = Table(title="Nobles", show_header=False, expand=True)
    nobles.add_column("idx", style="cyan", width=4)
    nobles.add_column("noble")
    for i, noble in enumerate(board.nobles):
        nobles.add_row(f"[{i}]", format_noble(noble))
    if not board.nobles:
        nobles.add_row("", "(none left)")

    markets = Table(title="Market", show_header=True, expand=True)
    markets.add_column("Level", style="yellow", width=6)
    markets.add_column("Slot", style="cyan", width=5)
    markets.add_column("Card")
    for level in sorted(CARD_LEVELS, reverse=True):
        cards = board.face_up_cards[level]
        if not cards:
            markets.add_row(str(level), "", "(no cards showing)")
        for i, card in enumerate(cards):
            markets.add_row(str(level) if i == 0 else "", f"[{i}]", format_card(card))
        markets.add_row("", "", f"[dim]{board.deck_sizes[level]} left in deck[/dim]")

    return Panel(Group(gems, nobles, markets), title="Board", border_style="blue")


def render_players(view: GameView) -> Table:
    table = Table(title="Players", expand=True)
    table.add_column("Player", style="cyan")
    table.add_column("Score", justify="right", style="magenta")
    table.add_column("Tokens")
    table.add_column("Bonuses")
    table.add_column("Cards", justify="right")
    table.add_column("Reserved", justify="right")
    table.add_column("Nobles", justify="right")
    for i, player in enumerate(view.players):
        marker = "> " if i == view.current_player_index else "  "
        table.add_row(
            marker + player.name,
            str(player.score),
            format_cost({c: v for c, v in player.gems.items() if v}),
            format_cost({c: v for c, v in player.bonuses.items() if v}),
            str(len(player.cards)),
            str(len(player.reserved_cards)),
            str(len(player.nobles)),
        )
    return table


# --- Menu helpers ---

def market_card_action(view: GameView, level: int, index: int, reserve: bool = False):
    """Buy or reserve the market card at (level, index) as seen in view."""
    if level not in CARD_LEVELS:
        raise ActionBuildError(f"Level must be one of {CARD_LEVELS}.")
    cards = view.board.face_up_cards[level]
    if not cards:
        raise ActionBuildError("No cards available at that level.")
    if not 0 <= index < len(cards):
        raise ActionBuildError(f"Choose a card index between 0 and {len(cards) - 1}.")
    return reserve_from_market(level, index) if reserve else buy_from_market(level, index)


def reserved_card_action(player: PlayerView, index: int) -> BuyCard:
    if not player.reserved_cards:
        raise ActionBuildError("You have no reserved cards.")
    if not 0 <= index < len(player.reserved_cards):
        raise ActionBuildError(f"Choose a reserved index between 0 and {len(player.reserved_cards) - 1}.")
    return buy_from_reserved(index)


class MenuSystem:
    """Prompts for choices and turns them into actions."""

    def __init__(self, console: Console, stream: Optional[IO[str]] = None):
        self.console = console
        self.stream = stream

    def ask(self, prompt: str, choices: Optional[List[str]] = None, default: Optional[str] = None) -> str:
        kwargs = {"console": self.console, "stream": self.stream, "choices": choices}
        if default is not None:
            kwargs["default"] = default
        return Prompt.ask(prompt, **kwargs).strip()

    def ask_int(self, prompt: str, low: int, high: int) -> int:
        while True:
            raw = self.ask(f"{prompt} ({low}-{high})")
            try:
                value = int(raw)
            except ValueError:
                self.console.print("[red]Please enter a valid number.[/red]")
                continue
            if low <= value <= high:
                return value
            self.console.print(f"[red]Please enter a number between {low} and {high}.[/red]")

    def choose_main_action(self) -> int:
        self.console.print("Choose your action:\n  1) Take tokens\n  2) Buy a card\n  3) Reserve a card")
        return self.ask_int("Enter choice", 1, 3)

    def build_take_tokens_action(self) -> TakeTokens:
        self.console.print("  1) Take 3 different colors (1 each)\n  2) Take 2 of the same color")
        if self.ask_int("Enter choice", 1, 2) == 2:
            color = self.ask("Color", choices=STANDARD_CHOICES)
            return take({color: 2})
        colors = [self.ask(f"Color {i}", choices=STANDARD_CHOICES) for i in range(1, 4)]
        return take([(color, 1) for color in colors])

    def build_buy_card_action(self, view: GameView) -> BuyCard:
        self.console.print("Buy card from:\n  1) Board (face-up)\n  2) Your reserved cards")
        if self.ask_int("Enter choice", 1, 2) == 2:
            player = view.current_player
            if not player.reserved_cards:
                raise ActionBuildError("You have no reserved cards.")
            for i, card in enumerate(player.reserved_cards):
                self.console.print(f"  [{i}] {format_card(card)}")
            return reserved_card_action(player, self.ask_int("Reserved card index", 0, len(player.reserved_cards) - 1))
        level = self.ask_int("Level", 1, 3)
        return market_card_action(view, level, self._ask_market_index(view, level))

    def build_reserve_card_action(self, view: GameView) -> ReserveCard:
        self.console.print("Reserve from:\n  1) Board (face-up)\n  2) Top of a deck (blind)")
        if self.ask_int("Enter choice", 1, 2) == 2:
            return reserve_from_top(self.ask_int("Deck level", 1, 3))
        level = self.ask_int("Level", 1, 3)
        return market_card_action(view, level, self._ask_market_index(view, level), reserve=True)

    def _ask_market_index(self, view: GameView, level: int) -> int:
        cards = view.board.face_up_cards[level]
        if not cards:
            raise ActionBuildError("No cards available at that level.")
        return self.ask_int("Card index", 0, len(cards) - 1)

    def build_discard_action(self, player: PlayerView, must_discard: int) -> DiscardTokens:
        self.console.print(f"You must discard down to {MAX_GEMS_PER_PLAYER} tokens "
                           f"({must_discard} to go). Your tokens: {format_cost(player.gems)}")
        planned = {}
        while sum(planned.values()) < must_discard:
            color = GemColor.parse(self.ask("Color", choices=ALL_CHOICES))
            owned = player.gems[color] - planned.get(color, 0)
            if owned <= 0:
                self.console.print("[red]You have no tokens of that type left.[/red]")
                continue
            amount = self.ask_int(f"Discard how many {color.value}", 1, owned)
            planned[color] = planned.get(color, 0) + amount
        return discard(planned)

    def choose_noble(self, nobles: Sequence[NobleTile]) -> Optional[NobleTile]:
        self.console.print("You qualify for more than one noble. Choose one (or -1 to skip):")
        for i, noble in enumerate(nobles):
            self.console.print(f"  [{i}] {format_noble(noble)}")
        idx = self.ask_int("Noble index", -1, len(nobles) - 1)
        return nobles[idx] if idx >= 0 else None


# --- Game loop ---

class GameController:
    def __init__(self, game: Game, console: Optional[Console] = None, stream: Optional[IO[str]] = None):
        self.game = game
        self.console = console or Console()
        self.menu = MenuSystem(self.console, stream)

    def play(self) -> None:
        while not self.game.is_game_over():
            if not get_legal_actions(self.game):
                self.console.print(f"[bold red]{self.game.current_player.name} has no legal action; "
                                   f"the game cannot continue.[/bold red]")
                break
            self.play_turn()
        self.show_result()

    def play_turn(self) -> None:
        view = self.game.snapshot()
        player = view.current_player
        self.console.rule(f"[bold]{player.name}'s turn[/bold] (prestige {player.score})")
        self.console.print(render_board(view))
        self.console.print(render_players(view))

        while True:
            try:
                choice = self.menu.choose_main_action()
                if choice == 1:
                    action = self.menu.build_take_tokens_action()
                elif choice == 2:
                    action = self.menu.build_buy_card_action(view)
                else:
                    action = self.menu.build_reserve_card_action(view)
            except ActionBuildError as e:
                self.console.print(f"[red][Error] {e}[/red]")
                continue
            result = self.game.validate_action(action)
            if result:
                break
            self.console.print(f"[red][Error] {result.message}[/red]")

        self.game.apply_action(action)

        while self.game.phase is TurnPhase.DISCARD:
            discard_action = self.menu.build_discard_action(self.game.snapshot().current_player,
                                                            self.game.tokens_over_limit())
            result = self.game.validate_action(discard_action)
            if not result:
                self.console.print(f"[red][Error] {result.message}[/red]")
                continue
            self.game.apply_discard(discard_action)
            self.console.print(f"[Info] You now have {self.game.current_player.get_total_gems()} tokens.")

        noble = self.game.auto_claim_noble()
        if noble is None:
            choices = self.game.pending_noble_choices()
            if choices:
                noble = self.menu.choose_noble(choices)
                if noble is not None:
                    self.game.claim_noble(noble)
        if noble is not None:
            self.console.print(f"[green][Info] You gained noble {noble.name} for +{noble.points} prestige![/green]")

        self.game.end_turn()

    def show_result(self) -> None:
        view = self.game.snapshot()
        self.console.rule("[bold]Game over[/bold]")
        self.console.print(render_players(view))
        winner = self.game.determine_winner()
        if self.game.is_game_over() and winner is not None:
            self.console.print(f"[bold green]Winner: {winner.name} with {winner.score} prestige.[/bold green]")
        else:
            self.console.print("No winner could be determined.")


def ask_player_names(menu: MenuSystem) -> List[str]:
    count = menu.ask_int("Enter number of players", MIN_PLAYERS, MAX_PLAYERS)
    names = []
    for i in range(1, count + 1):
        while True:
            name = menu.ask(f"Enter name for player {i}", default="") or f"Player {i}"
            if name not in names:
                break
            menu.console.print(f"[red]The name {name} is already taken.[/red]")
        names.append(name)
    return names


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Play Splendor in the terminal")
    parser.add_argument("--names", nargs="+", default=None, help="Player names in seating order (2-4)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for shuffling decks and nobles")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(message)s", handlers=[RichHandler()])

    console = Console()
    console.print(Panel("[bold]Splendor[/bold] (Console Edition)", border_style="green"))
    names = args.names or ask_player_names(MenuSystem(console))
    try:
        game = create_game(names, seed=args.seed)
    except ValueError as e:
        parser.error(str(e))
    console.print(f"[Info] Game created. First to reach {WINNING_SCORE} prestige triggers the final round.")
    GameController(game, console).play()


if __name__ == "__main__":
    main()
