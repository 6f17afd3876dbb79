# splendor_engine/constants.py

"""
Rule constants and the fixed card catalogue.

Every other module imports its numbers from here instead of hard-coding
them.
"""

from enum import Enum
from typing import List

# --- Game Setup ---

MIN_PLAYERS = 2
MAX_PLAYERS = 4

# (Num Players) -> standard tokens per color; gold is always GOLD_TOKENS
TOKENS_PER_COLOR = {2: 4, 3: 5, 4: 7}
GOLD_TOKENS = 5

# --- Card and Noble Constants ---

CARD_LEVELS = (1, 2, 3)
FACE_UP_CARDS_PER_LEVEL = 4

NOBLE_POINTS = 3

# --- Player Limits ---

MAX_GEMS_PER_PLAYER = 10
MAX_RESERVED_CARDS = 3

WINNING_SCORE = 15


class GemColor(Enum):
    WHITE = "white"
    BLUE = "blue"
    GREEN = "green"
    RED = "red"
    BLACK = "black"
    GOLD = "gold"

    @property
    def is_standard(self) -> bool:
        return self is not GemColor.GOLD

    @classmethod
    def get_standard_gems(cls) -> List["GemColor"]:
        return [cls.WHITE, cls.BLUE, cls.GREEN, cls.RED, cls.BLACK]

    @classmethod
    def get_all_gems(cls) -> List["GemColor"]:
        return [cls.WHITE, cls.BLUE, cls.GREEN, cls.RED, cls.BLACK, cls.GOLD]

    @classmethod
    def parse(cls, name: str) -> "GemColor":
        """Looks a color up by value or member name, ignoring case."""
        key = name.strip().lower()
        for color in cls:
            if color.value == key:
                return color
        raise ValueError(f"Unknown gem color: {name!r}")


# --- Card Catalogue ---

W, U, G, R, K = GemColor.get_standard_gems()

# Format: (points, bonus, white, blue, green, red, black)
_LEVEL_1_CARDS_DATA = [
    (0, U, 1, 0, 1, 1, 1),
    (0, U, 1, 0, 1, 2, 1),
    (0, U, 2, 0, 2, 0, 1),
    (0, U, 0, 0, 1, 3, 1),
    (0, U, 4, 0, 0, 0, 0),
    (1, U, 0, 2, 2, 3, 0),
    (0, U, 2, 0, 1, 0, 0),
    (0, U, 3, 0, 0, 0, 0),
    (0, G, 1, 1, 0, 1, 1),
    (0, G, 1, 1, 0, 1, 2),
    (0, G, 0, 2, 0, 2, 1),
    (0, G, 1, 3, 0, 0, 1),
    (0, G, 0, 4, 0, 0, 0),
    (1, G, 3, 0, 2, 0, 2),
    (0, G, 0, 2, 0, 0, 1),
    (0, G, 0, 3, 0, 0, 0),
    (0, R, 1, 1, 1, 0, 1),
    (0, R, 2, 1, 1, 0, 1),
    (0, R, 1, 0, 2, 0, 2),
    (0, R, 3, 0, 1, 0, 1),
    (0, R, 0, 0, 4, 0, 0),
    (1, R, 2, 0, 0, 3, 2),
    (0, R, 0, 0, 2, 0, 1),
    (0, R, 0, 0, 3, 0, 0),
    (0, K, 1, 1, 1, 1, 0),
    (0, K, 1, 2, 1, 1, 0),
    (0, K, 2, 1, 2, 0, 0),
    (0, K, 1, 1, 0, 3, 0),
    (0, K, 0, 0, 0, 4, 0),
    (1, K, 0, 3, 3, 2, 0),
    (0, K, 1, 0, 0, 2, 0),
    (0, K, 0, 0, 0, 3, 0),
    (0, W, 0, 1, 1, 1, 1),
    (0, W, 0, 1, 2, 1, 1),
    (0, W, 0, 2, 1, 2, 0),
    (0, W, 0, 1, 3, 1, 0),
    (0, W, 0, 0, 0, 0, 4),
    (1, W, 2, 2, 0, 0, 3),
    (0, W, 0, 1, 2, 0, 0),
    (0, W, 0, 0, 0, 0, 3),
]

_LEVEL_2_CARDS_DATA = [
    (1, U, 0, 2, 4, 1, 0),
    (2, U, 0, 5, 0, 0, 0),
    (2, U, 5, 3, 0, 0, 0),
    (2, U, 0, 0, 5, 3, 0),
    (3, U, 0, 6, 0, 0, 0),
    (1, U, 3, 2, 0, 0, 3),
    (1, G, 1, 4, 2, 0, 0),
    (2, G, 0, 0, 5, 0, 0),
    (2, G, 0, 0, 5, 3, 0),
    (2, G, 3, 0, 0, 0, 5),
    (3, G, 0, 0, 6, 0, 0),
    (1, G, 3, 0, 2, 3, 0),
    (1, R, 4, 0, 0, 2, 1),
    (2, R, 0, 0, 0, 5, 0),
    (2, R, 0, 5, 0, 3, 0),
    (2, R, 0, 0, 3, 5, 0),
    (3, R, 0, 0, 0, 6, 0),
    (1, R, 0, 3, 0, 2, 3),
    (1, K, 1, 0, 0, 4, 2),
    (2, K, 0, 0, 0, 0, 5),
    (2, K, 5, 0, 0, 0, 3),
    (2, K, 0, 3, 0, 0, 5),
    (3, K, 0, 0, 0, 0, 6),
    (1, K, 2, 0, 3, 0, 3),
    (1, W, 0, 1, 1, 0, 4),
    (2, W, 5, 0, 0, 0, 0),
    (2, W, 0, 0, 0, 5, 3),
    (2, W, 5, 0, 3, 0, 0),
    (3, W, 6, 0, 0, 0, 0),
    (1, W, 0, 0, 3, 2, 2),
]

_LEVEL_3_CARDS_DATA = [
    (3, U, 3, 0, 3, 5, 3),
    (4, U, 7, 0, 0, 0, 0),
    (4, U, 6, 3, 0, 0, 3),
    (5, U, 7, 3, 0, 0, 0),
    (3, G, 3, 3, 0, 3, 5),
    (4, G, 0, 7, 0, 0, 0),
    (4, G, 3, 6, 3, 0, 0),
    (5, G, 0, 7, 3, 0, 0),
    (3, R, 5, 3, 3, 0, 3),
    (4, R, 0, 0, 7, 0, 0),
    (4, R, 0, 3, 6, 3, 0),
    (5, R, 0, 0, 7, 3, 0),
    (3, K, 3, 5, 3, 3, 0),
    (4, K, 0, 0, 0, 7, 0),
    (4, K, 0, 0, 3, 6, 3),
    (5, K, 0, 0, 0, 7, 3),
    (3, W, 0, 3, 5, 3, 3),
    (4, W, 0, 0, 0, 0, 7),
    (4, W, 3, 0, 0, 3, 6),
    (5, W, 3, 0, 0, 0, 7),
]

# Format: (name, white, blue, green, red, black)
_NOBLES_DATA = [
    ("Mary Stuart", 0, 4, 4, 0, 0),
    ("Charles V", 0, 0, 4, 4, 0),
    ("Machiavelli", 0, 0, 0, 4, 4),
    ("Isabella of Castile", 4, 0, 0, 0, 4),
    ("Soliman the Magnificent", 4, 4, 0, 0, 0),
    ("Catherine of Medici", 0, 3, 3, 3, 0),
    ("Anne of Brittany", 3, 3, 3, 0, 0),
    ("Henry VIII", 3, 0, 0, 3, 3),
    ("Elisabeth of Austria", 0, 0, 3, 3, 3),
    ("Francis I of France", 3, 3, 0, 0, 3),
]
