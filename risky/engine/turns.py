"""
Turn order.
Players form a fixed circle; advancing skips defeated players.
"""

from typing import Callable, Sequence

from risky.engine.state import Player


class TurnManager:
    """Tracks the current player within a fixed, circular player sequence."""

    def __init__(self, players: Sequence[Player], current_index: int = 0):
        self._players = players
        self.current_index = current_index

    @property
    def current(self) -> Player:
        return self._players[self.current_index]

    def find_next(self, is_valid: Callable[[Player], bool] | None = None) -> int | None:
        """Index of the next undefeated player satisfying is_valid, or None if the scan wraps around."""
        count = len(self._players)
        nxt = self.current_index
        while True:
            nxt = (nxt + 1) % count
            if nxt == self.current_index:
                return None
            player = self._players[nxt]
            if not player.defeated and (is_valid is None or is_valid(player)):
                return nxt

    def advance(self, is_valid: Callable[[Player], bool] | None = None) -> bool:
        """
        Move to the next eligible player. Returns False (and changes nothing) if
        no other player qualifies. The outgoing player's per-turn data is reset.
        """
        nxt = self.find_next(is_valid)
        if nxt is None:
            return False
        self.current.reset_turn_data()
        self.current_index = nxt
        return True
