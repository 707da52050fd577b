"""
Shared fixtures: the sample map, a tiny three-territory line map, and a scripted
random source so combat and card draws can be steered from a test.
"""

import pytest

from risky.engine.definitions import geography_from_snapshot
from risky.engine.game import Game, new_game
from risky.engine.sample_map import load_sample_geography
from risky.engine.state import Stage


class ScriptedRandom:
    """Stands in for random.Random: returns queued values, then a default."""

    def __init__(self, rolls=(), default_roll=0.5, draws=(), default_draw=0):
        self.rolls = list(rolls)
        self.default_roll = default_roll
        self.draws = list(draws)
        self.default_draw = default_draw
        self.random_calls = 0

    def random(self) -> float:
        self.random_calls += 1
        return self.rolls.pop(0) if self.rolls else self.default_roll

    def randrange(self, n: int) -> int:
        value = self.draws.pop(0) if self.draws else self.default_draw
        assert 0 <= value < n
        return value


LINE_SNAPSHOT = {
    "regions": [
        {"name": "west", "bonus": 2, "territories": ["a"]},
        {"name": "rest", "bonus": 5, "territories": ["b", "c"]},
    ],
    "links": [["a", "b"], ["b", "c"]],
}


@pytest.fixture
def geography():
    return load_sample_geography()


@pytest.fixture
def line_geography():
    return geography_from_snapshot(LINE_SNAPSHOT)


@pytest.fixture
def rng():
    return ScriptedRandom()


def claim_in_order(game: Game) -> None:
    """Claim every territory in handle order (players alternate)."""
    for handle in range(len(game.geography)):
        game.claim(handle)


def set_player(game: Game, index: int, **fields) -> None:
    """Overwrite a player's counters in place (the public accessors hand out copies)."""
    player = game._players[index]
    for name, value in fields.items():
        setattr(player, name, value)


def populate_homes(game: Game, homes: dict[int, int]) -> None:
    """Stack each player's initial armies on their home territory."""
    while game.stage == Stage.POPULATE:
        game.populate(homes[game.current_player_index])


@pytest.fixture
def draft_game(geography, rng):
    """
    Two players on the sample map, in player 1's first draft stage.
    Player 0 owns 0, 2, 4, 6, 8 (41 armies on frostmark); player 1 owns 1, 3, 5, 7
    (41 armies on pinegate) and has 3 draft armies.
    """
    game = new_game(geography, 2, rng=rng)
    claim_in_order(game)
    populate_homes(game, {0: 0, 1: 1})
    return game


@pytest.fixture
def attack_game(draft_game):
    """draft_game after player 1 drafts all 3 armies onto pinegate (44 armies)."""
    draft_game.draft(1, 3)
    return draft_game
