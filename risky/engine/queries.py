"""
Query functions for UI integration.
These functions help the UI understand what actions are available
without mutating game state.
"""

from dataclasses import dataclass
from typing import Any

from risky.engine import MAX_ATTACKERS, MAX_DEFENDERS, MAX_TRADE_STARS, MIN_TRADE_STARS
from risky.engine.cards import CardEconomy
from risky.engine.errors import GameError
from risky.engine.game import Game, valid_count
from risky.engine.regions import get_controlled_regions
from risky.engine.state import Player, Stage

# Which operations are legal in which stage
STAGE_ALLOWED_ACTIONS = {
    Stage.CLAIM: ["claim"],
    Stage.POPULATE: ["populate"],
    Stage.DRAFT: ["draft", "trade_in_cards"],
    Stage.ATTACK: ["attack", "skip"],
    Stage.INVADE: ["invade", "skip"],
    Stage.MANEUVER: ["maneuver", "skip"],
    Stage.FINISHED: [],
}


@dataclass
class ValidationResult:
    """Result of action validation."""
    valid: bool
    error: str | None = None
    error_type: str | None = None  # Exception class name, e.g. "InvalidStateError"

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "error": self.error, "error_type": self.error_type}


def get_available_actions(game: Game) -> list[str]:
    """Operation names allowed in the current stage."""
    actions = list(STAGE_ALLOWED_ACTIONS.get(game.stage, []))
    if "trade_in_cards" in actions and not get_tradeable_star_counts(game.current_player):
        actions.remove("trade_in_cards")
    return actions


# ===== Action Validation =====

def _failure(e: GameError) -> ValidationResult:
    return ValidationResult(False, str(e), type(e).__name__)


def _stage_failure(game: Game, stage: Stage) -> ValidationResult | None:
    if game.stage != stage:
        return ValidationResult(
            False,
            f"Cannot act during the {game.stage.value} stage (expected {stage.value})",
            "InvalidStateError",
        )
    return None


def _owned_by_current(game: Game, territory: int | str) -> bool:
    return game.territory_info(territory).owner == game.current_player_index


def validate_claim(game: Game, territory: int | str) -> ValidationResult:
    failure = _stage_failure(game, Stage.CLAIM)
    if failure:
        return failure
    try:
        info = game.territory_info(territory)
    except GameError as e:
        return _failure(e)
    if info.owner is not None:
        return ValidationResult(False, "The territory is already claimed", "InvalidArgumentError")
    return ValidationResult(True)


def validate_populate(game: Game, territory: int | str) -> ValidationResult:
    failure = _stage_failure(game, Stage.POPULATE)
    if failure:
        return failure
    try:
        owned = _owned_by_current(game, territory)
    except GameError as e:
        return _failure(e)
    if not owned:
        return ValidationResult(False, "The territory belongs to another player", "InvalidArgumentError")
    if game.current_player.draft_armies <= 0:
        return ValidationResult(False, "No armies left to place", "InvalidArgumentError")
    return ValidationResult(True)


def validate_draft(game: Game, territory: int | str, num_armies: int) -> ValidationResult:
    failure = _stage_failure(game, Stage.DRAFT)
    if failure:
        return failure
    try:
        owned = _owned_by_current(game, territory)
    except GameError as e:
        return _failure(e)
    if not owned:
        return ValidationResult(False, "The territory belongs to another player", "InvalidArgumentError")
    available = game.current_player.draft_armies
    if not valid_count(num_armies, 0, available):
        return ValidationResult(
            False, f"Can draft between 0 and {available} armies", "InvalidArgumentError")
    return ValidationResult(True)


def validate_attack(
    game: Game,
    from_territory: int | str,
    to_territory: int | str,
    attackers: int,
    defenders: int,
) -> ValidationResult:
    failure = _stage_failure(game, Stage.ATTACK)
    if failure:
        return failure
    try:
        source = game.territory_info(from_territory)
        target = game.territory_info(to_territory)
        src = _handle(game, from_territory)
        dst = _handle(game, to_territory)
    except GameError as e:
        return _failure(e)
    if source.owner != game.current_player_index:
        return ValidationResult(False, "The territory belongs to another player", "InvalidArgumentError")
    if not game.geography.are_adjacent(src, dst):
        return ValidationResult(False, "The territories are not adjacent", "InvalidArgumentError")
    if target.owner == game.current_player_index:
        return ValidationResult(False, "You can't attack your own territory", "InvalidArgumentError")
    if not valid_count(attackers, 1, max_attackers(game, src)):
        return ValidationResult(False, "Invalid number of attackers", "InvalidArgumentError")
    if not valid_count(defenders, 1, max_defenders(game, dst)):
        return ValidationResult(False, "Invalid number of defenders", "InvalidArgumentError")
    return ValidationResult(True)


def validate_invade(game: Game, num_armies: int) -> ValidationResult:
    failure = _stage_failure(game, Stage.INVADE)
    if failure:
        return failure
    limit = max_movable(game, game.invasion.from_territory)
    if not valid_count(num_armies, 0, limit):
        return ValidationResult(False, f"Can move between 0 and {limit} armies", "InvalidArgumentError")
    return ValidationResult(True)


def validate_maneuver(
    game: Game,
    from_territory: int | str,
    to_territory: int | str,
    num_armies: int,
) -> ValidationResult:
    failure = _stage_failure(game, Stage.MANEUVER)
    if failure:
        return failure
    try:
        src = _handle(game, from_territory)
        dst = _handle(game, to_territory)
    except GameError as e:
        return _failure(e)
    if not _owned_by_current(game, src) or not _owned_by_current(game, dst):
        return ValidationResult(False, "The territory belongs to another player", "InvalidArgumentError")
    limit = max_movable(game, src)
    if not valid_count(num_armies, 0, limit):
        return ValidationResult(False, f"Can move between 0 and {limit} armies", "InvalidArgumentError")
    if not game.geography.are_adjacent(src, dst):
        return ValidationResult(False, "The territories are not adjacent", "InvalidArgumentError")
    return ValidationResult(True)


def validate_trade_in(game: Game, stars: int) -> ValidationResult:
    failure = _stage_failure(game, Stage.DRAFT)
    if failure:
        return failure
    try:
        CardEconomy.validate_trade_in(game.current_player, stars)
    except GameError as e:
        return _failure(e)
    return ValidationResult(True)


# ===== Targets and limits =====

def _handle(game: Game, territory: int | str) -> int:
    if isinstance(territory, str):
        return game.geography.index_of(territory)
    game.territory_info(territory)  # raises TerritoryNotFoundError for bad handles
    return territory


def max_attackers(game: Game, from_territory: int | str) -> int:
    """Most armies that can attack from a territory (0 if it cannot attack)."""
    return max(0, min(MAX_ATTACKERS, game.territory_info(from_territory).armies - 1))


def max_defenders(game: Game, to_territory: int | str) -> int:
    """Most armies that can defend a territory."""
    return min(MAX_DEFENDERS, game.territory_info(to_territory).armies)


def max_movable(game: Game, from_territory: int | str) -> int:
    """Most armies that can leave a territory (one must stay behind)."""
    return max(0, game.territory_info(from_territory).armies - 1)


def get_attack_targets(game: Game, from_territory: int | str) -> list[int]:
    """Adjacent enemy territories that can be attacked from from_territory."""
    src = _handle(game, from_territory)
    if game.territory_info(src).owner != game.current_player_index or max_attackers(game, src) == 0:
        return []
    territories = game.territories
    return sorted(
        t for t in game.geography.neighbors(src)
        if territories[t].owner != game.current_player_index
    )


def get_attack_sources(game: Game) -> list[int]:
    """Territories of the current player that have at least one valid attack target."""
    territories = game.territories
    return [
        i for i, info in enumerate(territories)
        if info.owner == game.current_player_index and get_attack_targets(game, i)
    ]


def get_maneuver_targets(game: Game, from_territory: int | str) -> list[int]:
    """Adjacent territories of the current player that can receive armies from from_territory."""
    src = _handle(game, from_territory)
    if game.territory_info(src).owner != game.current_player_index:
        return []
    territories = game.territories
    return sorted(
        t for t in game.geography.neighbors(src)
        if territories[t].owner == game.current_player_index
    )


def get_tradeable_star_counts(player: Player) -> list[int]:
    """Star totals the player could trade in right now."""
    counts = []
    for stars in range(MIN_TRADE_STARS, min(MAX_TRADE_STARS, player.stars) + 1):
        if player.single_star_cards == 0 and stars % 2 != 0:
            continue
        counts.append(stars)
    return counts


# ===== Summaries =====

def get_player_stats(game: Game) -> list[dict[str, Any]]:
    """Per-player counters plus total armies and controlled regions, for the UI."""
    territories = game.territories
    stats = []
    for player in game.players:
        entry = player.to_dict()
        entry["armies"] = sum(t.armies for t in territories if t.owner == player.index)
        entry["regions"] = get_controlled_regions(player.index, territories, game.geography)
        stats.append(entry)
    return stats


def get_game_summary(game: Game) -> dict[str, Any]:
    """Summary of the current game state for UI display."""
    winner = game.winner
    return {
        "stage": game.stage.value,
        "current_player": game.current_player_index,
        "winner": winner.index if winner else None,
        "unclaimed_territories": game.unclaimed_territories,
        "invasion": (
            {"from": game.invasion.from_territory, "to": game.invasion.to_territory}
            if game.invasion else None
        ),
        "card_piles": game.card_piles.to_dict(),
        "players": get_player_stats(game),
        "available_actions": get_available_actions(game),
    }
