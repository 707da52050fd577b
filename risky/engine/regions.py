"""
Region (continent) bonus calculation.
"""

from typing import Sequence

from risky.engine.definitions import Geography
from risky.engine.state import TerritoryInfo


def calculate_region_bonus(
    player_index: int,
    owned_territories: int,
    territories: Sequence[TerritoryInfo],
    geography: Geography,
) -> int:
    """
    Sum the bonuses of every region wholly owned by the player.

    Regions larger than the player's territory count are rejected without
    looking at ownership.
    """
    bonus = 0
    for region in geography.regions:
        if owned_territories < len(region.territories):
            continue
        if all(territories[t].owner == player_index for t in region.territories):
            bonus += region.bonus
    return bonus


def get_controlled_regions(
    player_index: int,
    territories: Sequence[TerritoryInfo],
    geography: Geography,
) -> list[str]:
    """Names of the regions wholly owned by the player (for UI display)."""
    return [
        region.name for region in geography.regions
        if all(territories[t].owner == player_index for t in region.territories)
    ]
