"""
Game events for UI hooks and logging.
Events describe what happened during an engine operation.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class GameEvent:
    """Base event class. All events have a type and payload."""
    type: str
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "payload": self.payload}


# ===== Event Type Constants =====

# Stage/Turn events
STAGE_CHANGED = "stage_changed"
TURN_STARTED = "turn_started"

# Placement events
TERRITORY_CLAIMED = "territory_claimed"
ARMIES_PLACED = "armies_placed"
ARMIES_MOVED = "armies_moved"

# Combat events
ATTACK_RESOLVED = "attack_resolved"
TERRITORY_CAPTURED = "territory_captured"

# Card events
CARD_AWARDED = "card_awarded"
CARDS_TRADED = "cards_traded"
CARDS_TRANSFERRED = "cards_transferred"

# Elimination/Victory events
PLAYER_DEFEATED = "player_defeated"
VICTORY = "victory"


# ===== Event Factory Functions =====

def stage_changed(old_stage: str, new_stage: str, player: int) -> GameEvent:
    return GameEvent(STAGE_CHANGED, {
        "old_stage": old_stage,
        "new_stage": new_stage,
        "player": player,
    })


def turn_started(player: int, draft_armies: int) -> GameEvent:
    return GameEvent(TURN_STARTED, {
        "player": player,
        "draft_armies": draft_armies,
    })


def territory_claimed(player: int, territory: int) -> GameEvent:
    return GameEvent(TERRITORY_CLAIMED, {
        "player": player,
        "territory": territory,
    })


def armies_placed(player: int, territory: int, count: int, reason: str) -> GameEvent:
    """reason: "populate" or "draft"."""
    return GameEvent(ARMIES_PLACED, {
        "player": player,
        "territory": territory,
        "count": count,
        "reason": reason,
    })


def armies_moved(
    player: int,
    from_territory: int,
    to_territory: int,
    count: int,
    reason: str,  # "invade", "maneuver"
) -> GameEvent:
    return GameEvent(ARMIES_MOVED, {
        "player": player,
        "from_territory": from_territory,
        "to_territory": to_territory,
        "count": count,
        "reason": reason,
    })


def attack_resolved(
    player: int,
    from_territory: int,
    to_territory: int,
    attackers: int,
    defenders: int,
    attacker_losses: int,
    defender_losses: int,
    roll: float,
) -> GameEvent:
    return GameEvent(ATTACK_RESOLVED, {
        "player": player,
        "from_territory": from_territory,
        "to_territory": to_territory,
        "attackers": attackers,
        "defenders": defenders,
        "attacker_losses": attacker_losses,
        "defender_losses": defender_losses,
        "roll": roll,
    })


def territory_captured(
    territory: int,
    old_owner: int,
    new_owner: int,
    armies_moved_in: int,
) -> GameEvent:
    return GameEvent(TERRITORY_CAPTURED, {
        "territory": territory,
        "old_owner": old_owner,
        "new_owner": new_owner,
        "armies_moved_in": armies_moved_in,
    })


def card_awarded(player: int, kind: str) -> GameEvent:
    """kind: "single" or "double"."""
    return GameEvent(CARD_AWARDED, {
        "player": player,
        "kind": kind,
    })


def cards_traded(
    player: int,
    stars: int,
    single_spent: int,
    double_spent: int,
    bonus_armies: int,
) -> GameEvent:
    return GameEvent(CARDS_TRADED, {
        "player": player,
        "stars": stars,
        "single_spent": single_spent,
        "double_spent": double_spent,
        "bonus_armies": bonus_armies,
    })


def cards_transferred(from_player: int, to_player: int, single: int, double: int) -> GameEvent:
    return GameEvent(CARDS_TRANSFERRED, {
        "from_player": from_player,
        "to_player": to_player,
        "single": single,
        "double": double,
    })


def player_defeated(player: int, defeated_by: int) -> GameEvent:
    return GameEvent(PLAYER_DEFEATED, {
        "player": player,
        "defeated_by": defeated_by,
    })


def victory(winner: int, winner_name: str) -> GameEvent:
    """Emitted when only one undefeated player remains."""
    return GameEvent(VICTORY, {
        "winner": winner,
        "winner_name": winner_name,
    })
