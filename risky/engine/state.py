"""
Game state representation.
Territory store, players, and card piles. The Game facade in game.py is the only mutator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Stage(Enum):
    """Stage of the game; determines which operations are legal."""
    INITIALIZING = "initializing"  # Never observable once the game is constructed
    CLAIM = "claim"
    POPULATE = "populate"
    DRAFT = "draft"
    ATTACK = "attack"
    INVADE = "invade"
    MANEUVER = "maneuver"
    FINISHED = "finished"


@dataclass
class TerritoryInfo:
    """State of a single territory."""
    owner: int | None = None  # player index, None only during the claim stage
    armies: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"owner": self.owner, "armies": self.armies}


@dataclass
class Player:
    """A player and their counters. index is fixed at creation and is the turn order."""
    index: int
    name: str = ""
    defeated: bool = False
    owned_territories: int = 0
    draft_armies: int = 0  # Armies still to be placed (claim/populate/draft stages)
    single_star_cards: int = 0
    double_star_cards: int = 0
    captures_this_turn: int = 0
    continent_bonus: int = 0  # Cached; recomputed whenever owned_territories changes

    def __post_init__(self):
        if not self.name:
            self.name = f"Player {self.index + 1}"

    @property
    def stars(self) -> int:
        """Total stars held: single cards count one, double cards two."""
        return self.single_star_cards + self.double_star_cards * 2

    def reset_turn_data(self) -> None:
        self.captures_this_turn = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "name": self.name,
            "defeated": self.defeated,
            "owned_territories": self.owned_territories,
            "draft_armies": self.draft_armies,
            "single_star_cards": self.single_star_cards,
            "double_star_cards": self.double_star_cards,
            "stars": self.stars,
            "captures_this_turn": self.captures_this_turn,
            "continent_bonus": self.continent_bonus,
        }


@dataclass
class CardPiles:
    """Draw and discard piles of single and double star cards."""
    draw_single: int = 0
    draw_double: int = 0
    discard_single: int = 0
    discard_double: int = 0

    @property
    def draw_total(self) -> int:
        return self.draw_single + self.draw_double

    def to_dict(self) -> dict[str, int]:
        return {
            "draw_single": self.draw_single,
            "draw_double": self.draw_double,
            "discard_single": self.discard_single,
            "discard_double": self.discard_double,
        }


@dataclass(frozen=True)
class Invasion:
    """Source and destination of the capture that opened the invade stage."""
    from_territory: int
    to_territory: int
