"""
Combat resolution.
Instead of rolling dice, a single uniform draw is compared against precomputed
win probabilities for 1-3 attacking dice against 1 or 2 defending dice.
"""

from dataclasses import dataclass

# Chance the attacker wins with 1, 2, or 3 dice against one defender
SINGLE_WIN = (15 / 36, 125 / 216, 855 / 1296)

# Chance the attacker wins with 1, 2, or 3 dice against two defenders
# (checked only after the both-lose case has been ruled out)
DOUBLE_WIN = (55 / 216, 715 / 1296, 5501 / 7776)

# Chance both sides lose one army with 1, 2, or 3 dice against two defenders
BOTH_LOSE = (0.0, 420 / 1296, 2611 / 7776)


@dataclass
class AttackResult:
    """Losses from a single attack."""
    roll: float
    attacker_losses: int
    defender_losses: int
    # Committed attackers still able to move in on capture
    surviving_attackers: int


def resolve_attack(rng, attackers: int, defenders: int) -> AttackResult:
    """
    Resolve one attack of 1-3 attackers against 1-2 defenders.

    Draws exactly one value from rng.random(). Does not touch game state;
    the caller validates the declaration and applies the losses.
    """
    i = attackers - 1
    roll = rng.random()

    if defenders == 1:
        if roll < SINGLE_WIN[i]:
            return AttackResult(roll, attacker_losses=0, defender_losses=1, surviving_attackers=attackers)
        return AttackResult(roll, attacker_losses=1, defender_losses=0, surviving_attackers=attackers)

    if roll < BOTH_LOSE[i]:
        return AttackResult(roll, attacker_losses=1, defender_losses=1, surviving_attackers=attackers - 1)

    losses = 1 if attackers == 1 else 2
    if roll < DOUBLE_WIN[i]:
        return AttackResult(roll, attacker_losses=0, defender_losses=losses, surviving_attackers=attackers)
    return AttackResult(roll, attacker_losses=losses, defender_losses=0, surviving_attackers=attackers)
