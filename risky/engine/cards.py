"""
Star card economy.
Cards are drawn from a weighted deck of single and double star cards, traded in for
bonus armies, and reshuffled from the discard pile once the deck runs out.
Card counts are conserved: draw + discard + held always equals the starting deck.
"""

import logging
from dataclasses import dataclass

from risky.engine import (
    ARMIES_FOR_STARS,
    DOUBLE_STAR_CARDS,
    MAX_TRADE_STARS,
    MIN_TRADE_STARS,
    SINGLE_STAR_CARDS,
)
from risky.engine.errors import InvalidArgumentError
from risky.engine.state import CardPiles, Player

logger = logging.getLogger(__name__)

SINGLE = "single"
DOUBLE = "double"


def armies_for_stars(stars: int) -> int:
    """Bonus armies granted for trading in 2-10 stars."""
    if not isinstance(stars, int) or stars < MIN_TRADE_STARS or stars > MAX_TRADE_STARS:
        raise InvalidArgumentError(
            f"Stars must be between {MIN_TRADE_STARS} and {MAX_TRADE_STARS}, got {stars}")
    return ARMIES_FOR_STARS[stars - MIN_TRADE_STARS]


@dataclass
class TradeIn:
    """Cards spent for a trade-in and the resulting bonus."""
    stars: int
    single_spent: int
    double_spent: int
    bonus_armies: int


class CardEconomy:
    """Owns the draw and discard piles. rng needs randrange(n)."""

    def __init__(self, rng, single: int = SINGLE_STAR_CARDS, double: int = DOUBLE_STAR_CARDS):
        self._rng = rng
        self.piles = CardPiles(draw_single=single, draw_double=double)

    def give_card(self, player: Player) -> str | None:
        """
        Draw a card for the player, weighted by the remaining counts.
        Reshuffles the discard pile into the deck if the deck is empty.
        Returns "single", "double", or None when no cards are left anywhere.
        """
        piles = self.piles
        if piles.draw_total == 0:
            if piles.discard_single + piles.discard_double == 0:
                logger.debug("No star cards left to give %s", player.name)
                return None
            piles.draw_single, piles.draw_double = piles.discard_single, piles.discard_double
            piles.discard_single = piles.discard_double = 0
            logger.debug("Reshuffled discard pile into deck (%d single, %d double)",
                         piles.draw_single, piles.draw_double)

        if self._rng.randrange(piles.draw_total) < piles.draw_single:
            piles.draw_single -= 1
            player.single_star_cards += 1
            return SINGLE
        piles.draw_double -= 1
        player.double_star_cards += 1
        return DOUBLE

    @staticmethod
    def validate_trade_in(player: Player, stars: int) -> TradeIn:
        """
        Check that the player can form the star total from their cards.
        Double cards are spent first, then single cards make up the rest.
        An odd total needs at least one single star card.
        """
        max_stars = min(MAX_TRADE_STARS, player.stars)
        if not isinstance(stars, int) or stars < MIN_TRADE_STARS or stars > max_stars:
            raise InvalidArgumentError(
                f"Cannot trade in {stars} stars: must be between {MIN_TRADE_STARS} and {max_stars}")
        if player.single_star_cards == 0 and stars % 2 != 0:
            raise InvalidArgumentError(
                f"Cannot trade in an odd number of stars ({stars}) with only double star cards")

        double_spent = min(stars // 2, player.double_star_cards)
        single_spent = stars - double_spent * 2
        return TradeIn(
            stars=stars,
            single_spent=single_spent,
            double_spent=double_spent,
            bonus_armies=armies_for_stars(stars),
        )

    def trade_in(self, player: Player, stars: int) -> TradeIn:
        """Move the spent cards to the discard pile. The caller grants the bonus armies."""
        trade = self.validate_trade_in(player, stars)
        player.double_star_cards -= trade.double_spent
        player.single_star_cards -= trade.single_spent
        self.piles.discard_double += trade.double_spent
        self.piles.discard_single += trade.single_spent
        return trade

    @staticmethod
    def transfer_cards(loser: Player, winner: Player) -> tuple[int, int]:
        """Give all of loser's cards to winner. Returns (single, double) moved."""
        single, double = loser.single_star_cards, loser.double_star_cards
        winner.single_star_cards += single
        winner.double_star_cards += double
        loser.single_star_cards = loser.double_star_cards = 0
        return single, double

    def card_counts(self, players) -> dict[str, int]:
        """Total single and double cards across piles and hands (constant over a game)."""
        piles = self.piles
        return {
            SINGLE: piles.draw_single + piles.discard_single + sum(p.single_star_cards for p in players),
            DOUBLE: piles.draw_double + piles.discard_double + sum(p.double_star_cards for p in players),
        }
