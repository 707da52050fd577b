"""
The Game facade: stage state machine and the only mutator of game state.

Every operation checks the stage and its arguments before changing anything,
so a call that raises leaves the game exactly as it was.
"""

import logging
import random
from dataclasses import replace
from typing import Sequence

from risky.engine import (
    INITIAL_ARMIES_BASE,
    INITIAL_ARMIES_STEP,
    MAX_ATTACKERS,
    MAX_DEFENDERS,
    MAX_PLAYERS,
    MIN_DRAFT_ARMIES,
    MIN_PLAYERS,
    TERRITORIES_PER_ARMY,
)
from risky.engine.cards import CardEconomy, armies_for_stars
from risky.engine.combat import resolve_attack
from risky.engine.definitions import Geography
from risky.engine.errors import InvalidArgumentError, InvalidStateError, TerritoryNotFoundError
from risky.engine.events import (
    GameEvent,
    armies_moved,
    armies_placed,
    attack_resolved,
    card_awarded,
    cards_traded,
    cards_transferred,
    player_defeated,
    stage_changed,
    territory_captured,
    territory_claimed,
    turn_started,
    victory,
)
from risky.engine.regions import calculate_region_bonus
from risky.engine.state import CardPiles, Invasion, Player, Stage, TerritoryInfo
from risky.engine.turns import TurnManager

logger = logging.getLogger(__name__)


def valid_count(value, low: int, high: int) -> bool:
    """True if value is an int (not a bool) in [low, high]."""
    return isinstance(value, int) and not isinstance(value, bool) and low <= value <= high


class Game:
    """Current state of a game, plus the operations that advance it."""

    def __init__(
        self,
        geography: Geography,
        num_players: int,
        rng,
        player_names: Sequence[str] | None = None,
    ):
        if geography is None or len(geography) == 0:
            raise InvalidArgumentError("A game needs a geography with at least one territory")
        if not isinstance(num_players, int) or num_players < MIN_PLAYERS or num_players > MAX_PLAYERS:
            raise InvalidArgumentError(
                f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}, got {num_players}")
        if player_names is not None and len(player_names) != num_players:
            raise InvalidArgumentError(
                f"Expected {num_players} player names, got {len(player_names)}")

        self._geography = geography
        self._rng = rng
        self._territories = [TerritoryInfo() for _ in range(len(geography))]
        self._players = tuple(
            Player(index=i, name=player_names[i] if player_names else "")
            for i in range(num_players)
        )
        self._turns = TurnManager(self._players)
        self._cards = CardEconomy(rng)
        self._invasion: Invasion | None = None
        self._unclaimed_territories = 0
        self._stage = Stage.INITIALIZING
        self._events: list[GameEvent] = []

        self._set_stage(Stage.CLAIM)

    # ===== Read accessors =====

    @property
    def stage(self) -> Stage:
        return self._stage

    @property
    def geography(self) -> Geography:
        return self._geography

    @property
    def players(self) -> tuple[Player, ...]:
        """Copies of every player, in turn order."""
        return tuple(replace(p) for p in self._players)

    @property
    def current_player_index(self) -> int:
        return self._turns.current_index

    @property
    def current_player(self) -> Player:
        """Copy of the player whose turn it is (meaningless once the game is finished)."""
        return replace(self._turns.current)

    @property
    def winner(self) -> Player | None:
        """The last undefeated player, once the game is finished."""
        if self._stage != Stage.FINISHED:
            return None
        return replace(next(p for p in self._players if not p.defeated))

    @property
    def invasion(self) -> Invasion | None:
        """From/to territories of the pending invasion (invade stage only)."""
        return self._invasion

    @property
    def unclaimed_territories(self) -> int:
        return self._unclaimed_territories if self._stage == Stage.CLAIM else 0

    @property
    def territories(self) -> tuple[TerritoryInfo, ...]:
        """Copies of every territory's state, indexed by handle."""
        return tuple(TerritoryInfo(t.owner, t.armies) for t in self._territories)

    @property
    def card_piles(self) -> CardPiles:
        p = self._cards.piles
        return CardPiles(p.draw_single, p.draw_double, p.discard_single, p.discard_double)

    @property
    def events(self) -> tuple[GameEvent, ...]:
        """Events recorded since the last drain_events() call."""
        return tuple(self._events)

    def card_counts(self) -> dict[str, int]:
        return self._cards.card_counts(self._players)

    def territory_info(self, territory: int | str) -> TerritoryInfo:
        """Owner and armies of a territory (a copy; changing it has no effect)."""
        info = self._territories[self._territory_index(territory)]
        return TerritoryInfo(info.owner, info.armies)

    def drain_events(self) -> list[GameEvent]:
        """Return the events recorded since the last call and clear them."""
        events, self._events = self._events, []
        return events

    @staticmethod
    def armies_for_stars(stars: int) -> int:
        return armies_for_stars(stars)

    # ===== Operations =====

    def claim(self, territory: int | str) -> None:
        """
        Claim an unowned territory for the current player, placing one army on it,
        and pass to the next player. The last claim moves the game to populate.
        """
        self._assert_stage(Stage.CLAIM)
        index = self._territory_index(territory)
        if self._territories[index].owner is not None:
            raise InvalidArgumentError(f"{self._name(index)} is already claimed")

        player = self._turns.current
        info = self._territories[index]
        info.owner = player.index
        info.armies = 1
        self._on_territory_gained(player)
        self._record(territory_claimed(player.index, index))
        logger.debug("%s claimed %s", player.name, self._name(index))

        self._turns.advance()
        self._unclaimed_territories -= 1
        if self._unclaimed_territories == 0:
            self._set_stage(Stage.POPULATE)

    def populate(self, territory: int | str) -> None:
        """
        Place one initial army on a territory owned by the current player and pass
        to the next player who still has armies. Moves to draft once every initial
        army has been placed.
        """
        self._assert_stage(Stage.POPULATE)
        index = self._territory_index(territory)
        self._assert_owned(index)
        player = self._turns.current
        if player.draft_armies <= 0:
            raise InvalidArgumentError(f"{player.name} has no armies left to place")

        self._territories[index].armies += 1
        player.draft_armies -= 1
        self._record(armies_placed(player.index, index, 1, "populate"))

        if not self._turns.advance(lambda p: p.draft_armies > 0) and player.draft_armies == 0:
            self._turns.advance()
            self._set_stage(Stage.DRAFT)

    def draft(self, territory: int | str, num_armies: int) -> None:
        """
        Place draft armies on a territory owned by the current player. Moves to the
        attack stage once the player has no draft armies left.
        """
        self._assert_stage(Stage.DRAFT)
        index = self._territory_index(territory)
        self._assert_owned(index)
        player = self._turns.current
        if not valid_count(num_armies, 0, player.draft_armies):
            raise InvalidArgumentError(
                f"Can draft between 0 and {player.draft_armies} armies, got {num_armies}")

        self._territories[index].armies += num_armies
        player.draft_armies -= num_armies
        self._record(armies_placed(player.index, index, num_armies, "draft"))
        if player.draft_armies == 0:
            self._set_stage(Stage.ATTACK)

    def attack(self, from_territory: int | str, to_territory: int | str, attackers: int, defenders: int) -> bool:
        """
        Attack an adjacent enemy territory with 1-3 attackers (leaving at least one
        army behind) against 1-2 defenders (no more than the territory holds).

        Returns True if the territory was captured. After a capture that leaves more
        than one army in the source territory, the game moves to the invade stage.
        If the defender holds, attackers/defenders for the next attack must be
        re-clamped to the new army counts (see queries.max_attackers).
        """
        self._assert_stage(Stage.ATTACK)
        src = self._territory_index(from_territory)
        dst = self._territory_index(to_territory)
        self._assert_owned(src)
        self._assert_adjacent(src, dst)
        player = self._turns.current
        source, target = self._territories[src], self._territories[dst]
        if target.owner == player.index:
            raise InvalidArgumentError("You can't attack your own territory")
        if not valid_count(attackers, 1, min(MAX_ATTACKERS, source.armies - 1)):
            raise InvalidArgumentError(
                f"Attackers must be between 1 and {min(MAX_ATTACKERS, source.armies - 1)}, got {attackers}")
        if not valid_count(defenders, 1, min(MAX_DEFENDERS, target.armies)):
            raise InvalidArgumentError(
                f"Defenders must be between 1 and {min(MAX_DEFENDERS, target.armies)}, got {defenders}")

        result = resolve_attack(self._rng, attackers, defenders)
        source.armies -= result.attacker_losses
        target.armies -= result.defender_losses
        self._record(attack_resolved(
            player.index, src, dst, attackers, defenders,
            result.attacker_losses, result.defender_losses, result.roll,
        ))
        logger.debug(
            "%s attacked %s from %s (%d vs %d): attacker lost %d, defender lost %d",
            player.name, self._name(dst), self._name(src), attackers, defenders,
            result.attacker_losses, result.defender_losses,
        )

        if target.armies != 0:
            return False

        self._capture(src, dst, result.surviving_attackers)
        return True

    def invade(self, num_armies: int) -> None:
        """Move additional armies into the just-captured territory and return to attack."""
        self._assert_stage(Stage.INVADE)
        invasion = self._invasion
        source = self._territories[invasion.from_territory]
        if not valid_count(num_armies, 0, source.armies - 1):
            raise InvalidArgumentError(
                f"Can move between 0 and {source.armies - 1} armies, got {num_armies}")

        source.armies -= num_armies
        self._territories[invasion.to_territory].armies += num_armies
        self._record(armies_moved(
            self.current_player_index, invasion.from_territory, invasion.to_territory, num_armies, "invade"))
        self._invasion = None
        self._set_stage(Stage.ATTACK)

    def maneuver(self, from_territory: int | str, to_territory: int | str, num_armies: int) -> None:
        """
        Move armies between two adjacent territories owned by the current player,
        ending the turn.
        """
        self._assert_stage(Stage.MANEUVER)
        src = self._territory_index(from_territory)
        dst = self._territory_index(to_territory)
        self._assert_owned(src)
        self._assert_owned(dst)
        source = self._territories[src]
        if not valid_count(num_armies, 0, source.armies - 1):
            raise InvalidArgumentError(
                f"Can move between 0 and {source.armies - 1} armies, got {num_armies}")
        self._assert_adjacent(src, dst)

        source.armies -= num_armies
        self._territories[dst].armies += num_armies
        self._record(armies_moved(self.current_player_index, src, dst, num_armies, "maneuver"))
        self._end_turn()

    def skip(self) -> None:
        """Skip the attack, invade, or maneuver stage."""
        if self._stage == Stage.ATTACK:
            self._set_stage(Stage.MANEUVER)
        elif self._stage == Stage.MANEUVER:
            self._end_turn()
        elif self._stage == Stage.INVADE:
            self._invasion = None
            self._set_stage(Stage.ATTACK)
        else:
            raise InvalidStateError(f"The {self._stage.value} stage cannot be skipped")

    def trade_in_cards(self, stars: int) -> int:
        """
        Trade in star cards for bonus draft armies (draft stage only).
        Returns the number of armies granted.
        """
        self._assert_stage(Stage.DRAFT)
        player = self._turns.current
        trade = self._cards.trade_in(player, stars)
        player.draft_armies += trade.bonus_armies
        self._record(cards_traded(
            player.index, stars, trade.single_spent, trade.double_spent, trade.bonus_armies))
        logger.debug("%s traded in %d stars for %d armies", player.name, stars, trade.bonus_armies)
        return trade.bonus_armies

    # ===== Internals =====

    def _capture(self, src: int, dst: int, moving: int) -> None:
        player = self._turns.current
        source, target = self._territories[src], self._territories[dst]
        defender = self._players[target.owner]

        source.armies -= moving
        target.armies += moving
        target.owner = player.index
        self._on_territory_gained(player)
        self._on_territory_lost(defender)
        self._record(territory_captured(dst, defender.index, player.index, moving))
        logger.info("%s captured %s from %s", player.name, self._name(dst), defender.name)

        if player.captures_this_turn == 0:
            kind = self._cards.give_card(player)
            if kind is not None:
                self._record(card_awarded(player.index, kind))
        player.captures_this_turn += 1

        if defender.defeated:
            single, double = self._cards.transfer_cards(defender, player)
            self._record(player_defeated(defender.index, player.index))
            self._record(cards_transferred(defender.index, player.index, single, double))
            logger.info("%s was defeated by %s", defender.name, player.name)
            if sum(1 for p in self._players if not p.defeated) == 1:
                self._set_stage(Stage.FINISHED)
                self._record(victory(player.index, player.name))
                logger.info("%s won the game", player.name)
                return

        if source.armies > 1:
            self._invasion = Invasion(src, dst)
            self._set_stage(Stage.INVADE)

    def _end_turn(self) -> None:
        self._turns.advance()
        self._set_stage(Stage.DRAFT)

    def _on_territory_gained(self, player: Player) -> None:
        player.owned_territories += 1
        self._update_continent_bonus(player)

    def _on_territory_lost(self, player: Player) -> None:
        player.owned_territories -= 1
        if player.owned_territories == 0:
            player.defeated = True
        self._update_continent_bonus(player)

    def _update_continent_bonus(self, player: Player) -> None:
        player.continent_bonus = calculate_region_bonus(
            player.index, player.owned_territories, self._territories, self._geography)

    def _initial_armies(self) -> int:
        return INITIAL_ARMIES_BASE - (len(self._players) - 2) * INITIAL_ARMIES_STEP

    def _set_stage(self, stage: Stage) -> None:
        if stage == self._stage:
            return
        old = self._stage
        self._stage = stage
        if old != Stage.INITIALIZING:
            self._record(stage_changed(old.value, stage.value, self.current_player_index))
        logger.debug("Stage %s -> %s (player %d)", old.value, stage.value, self.current_player_index)
        self._on_stage_entered(stage)

    def _on_stage_entered(self, stage: Stage) -> None:
        if stage == Stage.CLAIM:
            self._unclaimed_territories = len(self._territories)
            for player in self._players:
                player.draft_armies = self._initial_armies()

        elif stage == Stage.POPULATE:
            # The player after the last claim may have nothing left to place
            if self._turns.current.draft_armies == 0 and not self._turns.advance(lambda p: p.draft_armies > 0):
                self._turns.advance()
                self._set_stage(Stage.DRAFT)

        elif stage == Stage.DRAFT:
            player = self._turns.current
            new_armies = max(MIN_DRAFT_ARMIES, player.owned_territories // TERRITORIES_PER_ARMY) \
                + player.continent_bonus
            player.draft_armies += new_armies
            self._record(turn_started(player.index, player.draft_armies))

    def _territory_index(self, territory: int | str) -> int:
        if isinstance(territory, str):
            return self._geography.index_of(territory)
        if isinstance(territory, bool) or not isinstance(territory, int) \
                or territory < 0 or territory >= len(self._territories):
            raise TerritoryNotFoundError(f"Territory {territory!r} is not part of this map")
        return territory

    def _assert_stage(self, stage: Stage) -> None:
        if self._stage != stage:
            raise InvalidStateError(
                f"The game is not in the {stage.value} stage (current stage: {self._stage.value})")

    def _assert_owned(self, index: int) -> None:
        if self._territories[index].owner != self.current_player_index:
            raise InvalidArgumentError(f"{self._name(index)} belongs to another player")

    def _assert_adjacent(self, a: int, b: int) -> None:
        if not self._geography.are_adjacent(a, b):
            raise InvalidArgumentError(f"{self._name(a)} and {self._name(b)} are not adjacent")

    def _name(self, index: int) -> str:
        return self._geography.name_of(index)

    def _record(self, event: GameEvent) -> None:
        self._events.append(event)


def new_game(
    geography: Geography,
    player_count: int,
    *,
    rng=None,
    seed: int | None = None,
    player_names: Sequence[str] | None = None,
) -> Game:
    """
    Create a game in the claim stage.

    rng is any object with random() and randrange(n) (e.g. random.Random). When it is
    omitted, a private random.Random(seed) is created; equal seeds replay equal games.
    """
    if rng is None:
        rng = random.Random(seed)
    return Game(geography, player_count, rng, player_names=player_names)
