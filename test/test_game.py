"""
Game facade: stage transitions, operation preconditions, and the capture/defeat flow.
"""

import pytest

from risky.engine.definitions import Geography
from risky.engine.errors import (
    GameError,
    InvalidArgumentError,
    InvalidStateError,
    TerritoryNotFoundError,
)
from risky.engine.events import (
    CARD_AWARDED,
    CARDS_TRANSFERRED,
    PLAYER_DEFEATED,
    TERRITORY_CAPTURED,
    TERRITORY_CLAIMED,
    VICTORY,
)
from risky.engine.game import Game, new_game
from risky.engine.state import Invasion, Stage

from conftest import ScriptedRandom, claim_in_order, populate_homes, set_player


def snapshot(game: Game):
    """Everything observable about a game, for before/after comparisons."""
    return (
        game.stage,
        game.current_player_index,
        game.territories,
        [p.to_dict() for p in game.players],
        game.card_piles.to_dict(),
        game.invasion,
        game.unclaimed_territories,
    )


# ===== Construction =====

@pytest.mark.parametrize("count", [0, 1, 7])
def test_player_count_out_of_range(geography, count):
    with pytest.raises(InvalidArgumentError):
        new_game(geography, count)


def test_missing_or_empty_geography():
    with pytest.raises(InvalidArgumentError):
        new_game(None, 2)
    with pytest.raises(InvalidArgumentError):
        new_game(Geography(territories=()), 2)


def test_player_names_must_match_count(geography):
    with pytest.raises(InvalidArgumentError):
        new_game(geography, 3, player_names=["a", "b"])
    game = new_game(geography, 2, player_names=["Red", "Blue"])
    assert [p.name for p in game.players] == ["Red", "Blue"]


def test_default_player_names(geography):
    game = new_game(geography, 3)
    assert [p.name for p in game.players] == ["Player 1", "Player 2", "Player 3"]


@pytest.mark.parametrize("count,armies", [(2, 40), (3, 35), (4, 30), (5, 25), (6, 20)])
def test_initial_armies(geography, count, armies):
    game = new_game(geography, count, seed=1)
    assert game.stage == Stage.CLAIM
    assert all(p.draft_armies == armies for p in game.players)
    assert game.unclaimed_territories == 9
    assert game.current_player_index == 0


def test_new_game_starts_with_full_deck(geography):
    game = new_game(geography, 2, seed=1)
    piles = game.card_piles
    assert (piles.draw_single, piles.draw_double) == (30, 12)
    assert (piles.discard_single, piles.discard_double) == (0, 0)
    assert all(t.owner is None and t.armies == 0 for t in game.territories)


def test_armies_for_stars_static():
    assert Game.armies_for_stars(2) == 2
    assert Game.armies_for_stars(10) == 30
    with pytest.raises(InvalidArgumentError):
        Game.armies_for_stars(1)


# ===== Claim =====

def test_claim_assigns_territory_and_passes_turn(geography, rng):
    game = new_game(geography, 2, rng=rng)
    game.claim(4)
    info = game.territory_info(4)
    assert (info.owner, info.armies) == (0, 1)
    assert game.players[0].owned_territories == 1
    assert game.current_player_index == 1
    assert game.unclaimed_territories == 8


def test_claim_by_name(geography, rng):
    game = new_game(geography, 2, rng=rng)
    game.claim("wolfden")
    assert game.territory_info(8).owner == 0


def test_claim_taken_territory_rejected(geography, rng):
    game = new_game(geography, 2, rng=rng)
    game.claim(0)
    before = snapshot(game)
    with pytest.raises(InvalidArgumentError):
        game.claim(0)
    assert snapshot(game) == before


@pytest.mark.parametrize("handle", [-1, 9, 1.5, None, True, "atlantis"])
def test_unknown_territory(geography, rng, handle):
    game = new_game(geography, 2, rng=rng)
    with pytest.raises(TerritoryNotFoundError):
        game.claim(handle)


def test_claim_completes_into_populate(geography, rng):
    game = new_game(geography, 2, rng=rng)
    claim_in_order(game)
    assert game.stage == Stage.POPULATE
    assert [p.draft_armies for p in game.players] == [40, 40]
    assert sum(p.owned_territories for p in game.players) == 9
    assert all(t.armies == 1 for t in game.territories)
    # nine claims alternate, so player 1 places first
    assert game.current_player_index == 1


def test_claim_updates_continent_bonus(line_geography, rng):
    game = new_game(line_geography, 2, rng=rng)
    game.claim("a")
    assert game.players[0].continent_bonus == 2


def test_operations_gated_by_stage(geography, rng):
    game = new_game(geography, 2, rng=rng)
    before = snapshot(game)
    with pytest.raises(InvalidStateError):
        game.populate(0)
    with pytest.raises(InvalidStateError):
        game.draft(0, 1)
    with pytest.raises(InvalidStateError):
        game.attack(0, 1, 1, 1)
    with pytest.raises(InvalidStateError):
        game.invade(0)
    with pytest.raises(InvalidStateError):
        game.maneuver(0, 1, 0)
    with pytest.raises(InvalidStateError):
        game.skip()
    with pytest.raises(InvalidStateError):
        game.trade_in_cards(2)
    assert snapshot(game) == before


def test_stage_error_checked_before_territory(geography, rng):
    game = new_game(geography, 2, rng=rng)
    with pytest.raises(InvalidStateError):
        game.populate(99)


# ===== Populate =====

def test_populate_places_and_alternates(geography, rng):
    game = new_game(geography, 2, rng=rng)
    claim_in_order(game)
    game.populate(1)
    assert game.territory_info(1).armies == 2
    assert game.players[1].draft_armies == 39
    assert game.current_player_index == 0


def test_populate_enemy_territory_rejected(geography, rng):
    game = new_game(geography, 2, rng=rng)
    claim_in_order(game)
    with pytest.raises(InvalidArgumentError):
        game.populate(0)  # owned by player 0, current is player 1


def test_populate_without_armies_rejected(geography, rng):
    game = new_game(geography, 2, rng=rng)
    claim_in_order(game)
    set_player(game, game.current_player_index, draft_armies=0)
    before = snapshot(game)
    with pytest.raises(InvalidArgumentError):
        game.populate(1)
    assert snapshot(game) == before


def test_populate_lone_player_keeps_placing(geography, rng):
    game = new_game(geography, 2, rng=rng)
    claim_in_order(game)
    set_player(game, 0, draft_armies=0)
    set_player(game, 1, draft_armies=2)
    game.populate(1)
    assert game.current_player_index == 1
    assert game.stage == Stage.POPULATE
    game.populate(1)
    # Everyone is done: the turn passes on and the draft begins
    assert game.stage == Stage.DRAFT
    assert game.current_player_index == 0


def test_populate_completes_into_draft(draft_game):
    game = draft_game
    assert game.stage == Stage.DRAFT
    assert game.current_player_index == 1
    assert game.players[0].draft_armies == 0
    # four territories, no region: the minimum of three
    assert game.players[1].draft_armies == 3
    assert game.territory_info(0).armies == 41
    assert game.territory_info(1).armies == 41


# ===== Draft =====

def test_draft_partial_then_full(draft_game):
    game = draft_game
    game.draft(3, 1)
    assert game.territory_info(3).armies == 2
    assert game.stage == Stage.DRAFT
    game.draft(1, 2)
    assert game.stage == Stage.ATTACK
    assert game.current_player.draft_armies == 0


def test_draft_zero_is_allowed(draft_game):
    draft_game.draft(1, 0)
    assert draft_game.stage == Stage.DRAFT
    assert draft_game.current_player.draft_armies == 3


@pytest.mark.parametrize("count", [-1, 4, 2.5])
def test_draft_count_out_of_range(draft_game, count):
    before = snapshot(draft_game)
    with pytest.raises(InvalidArgumentError):
        draft_game.draft(1, count)
    assert snapshot(draft_game) == before


def test_draft_enemy_territory_rejected(draft_game):
    with pytest.raises(InvalidArgumentError):
        draft_game.draft(0, 1)


def test_trade_in_odd_stars_with_only_doubles(draft_game):
    set_player(draft_game, 1, double_star_cards=2)
    before = snapshot(draft_game)
    with pytest.raises(InvalidArgumentError):
        draft_game.trade_in_cards(3)
    assert snapshot(draft_game) == before


def test_trade_in_grants_draft_armies(draft_game):
    set_player(draft_game, 1, double_star_cards=2)
    assert draft_game.trade_in_cards(4) == 7
    player = draft_game.current_player
    assert player.draft_armies == 3 + 7
    assert player.double_star_cards == 0
    assert draft_game.card_piles.discard_double == 2


def test_trade_in_only_during_draft(attack_game):
    set_player(attack_game, 1, single_star_cards=2)
    with pytest.raises(InvalidStateError):
        attack_game.trade_in_cards(2)


# ===== Attack =====

def test_attack_both_lose_on_zero_roll(attack_game, rng):
    game = attack_game
    rng.rolls = [0.0]
    captured = game.attack(1, 0, 3, 2)
    assert captured is False
    assert game.territory_info(1).armies == 43
    assert game.territory_info(0).armies == 40
    assert game.stage == Stage.ATTACK


def test_attack_defender_holds(attack_game, rng):
    game = attack_game
    rng.rolls = [0.99]
    assert game.attack(1, 0, 3, 2) is False
    assert game.territory_info(1).armies == 42
    assert game.territory_info(0).armies == 41
    assert game.territory_info(0).owner == 0


@pytest.mark.parametrize("args", [
    (0, 1, 1, 1),  # source owned by the other player
    (1, 8, 1, 1),  # not adjacent
    (1, 3, 1, 1),  # own territory
    (1, 0, 0, 1),  # too few attackers
    (1, 0, 4, 1),  # too many attackers
    (1, 0, 1, 0),  # too few defenders
    (1, 0, 1, 3),  # too many defenders
    (1, 2, 1, 2),  # more defenders than armies in the territory
    (3, 4, 1, 1),  # source has a single army
])
def test_attack_invalid_declarations(attack_game, rng, args):
    before = snapshot(attack_game)
    with pytest.raises(InvalidArgumentError):
        attack_game.attack(*args)
    assert snapshot(attack_game) == before
    assert rng.random_calls == 0


def test_attack_unknown_territory(attack_game):
    with pytest.raises(TerritoryNotFoundError):
        attack_game.attack(1, 42, 1, 1)


def test_capture_moves_attackers_and_opens_invasion(attack_game, rng):
    game = attack_game
    rng.rolls = [0.0]
    game.drain_events()
    assert game.attack(1, 2, 3, 1) is True

    target = game.territory_info(2)
    assert (target.owner, target.armies) == (1, 3)
    assert game.territory_info(1).armies == 41
    assert game.players[1].owned_territories == 5
    assert game.players[0].owned_territories == 4
    assert game.stage == Stage.INVADE
    assert game.invasion == Invasion(1, 2)

    # First capture of the turn earns a card
    player = game.players[1]
    assert player.captures_this_turn == 1
    assert player.single_star_cards == 1
    assert game.card_piles.draw_single == 29

    types = [e.type for e in game.drain_events()]
    assert TERRITORY_CAPTURED in types
    assert CARD_AWARDED in types


def test_capture_with_one_army_left_stays_in_attack(draft_game, rng):
    game = draft_game
    game.draft(3, 1)               # dunmere: 2
    game.draft(1, 2)
    rng.rolls = [0.0]
    assert game.attack(3, 4, 1, 1) is True
    assert game.territory_info(3).armies == 1
    assert game.territory_info(4).armies == 1
    assert game.territory_info(4).owner == 1
    assert game.stage == Stage.ATTACK
    assert game.invasion is None


def test_invade_limits(attack_game, rng):
    game = attack_game
    rng.rolls = [0.0]
    game.attack(1, 2, 3, 1)
    before = snapshot(game)
    with pytest.raises(InvalidArgumentError):
        game.invade(41)
    with pytest.raises(InvalidArgumentError):
        game.invade(-1)
    assert snapshot(game) == before
    game.invade(0)
    assert game.stage == Stage.ATTACK
    assert game.territory_info(2).armies == 3


def test_skip_invasion_returns_to_attack(attack_game, rng):
    game = attack_game
    rng.rolls = [0.0]
    game.attack(1, 2, 3, 1)
    game.skip()
    assert game.stage == Stage.ATTACK
    assert game.invasion is None


def test_only_first_capture_earns_a_card(attack_game, rng):
    game = attack_game
    rng.rolls = [0.0]
    game.attack(1, 2, 3, 1)        # capture icefall
    game.invade(40)                # icefall: 43
    # 0.5 against two defenders: defender loses two each time
    while game.territory_info(0).armies > 1:
        assert game.attack(2, 0, 3, 2) is False
    rng.rolls = [0.0]
    assert game.attack(2, 0, 3, 1) is True
    player = game.players[1]
    assert player.captures_this_turn == 2
    assert player.stars == 1
    # The whole north now belongs to player 1
    assert player.continent_bonus == 2


def test_last_territory_lost_finishes_game(line_geography):
    rng = ScriptedRandom()
    game = new_game(line_geography, 2, rng=rng)
    claim_in_order(game)           # P0: a, c   P1: b
    populate_homes(game, {0: 0, 1: 1})
    game.draft(1, 3)
    game.skip()
    game.skip()                    # player 0's turn
    assert game.current_player_index == 0
    assert game.current_player.draft_armies == 3 + 2
    game.draft(0, 5)               # a: 46

    set_player(game, 1, single_star_cards=2, double_star_cards=1)
    while game.territory_info(1).armies > 2:
        assert game.attack(0, 1, 3, 2) is False
    assert game.attack(0, 1, 3, 2) is True

    loser = game.players[1]
    assert loser.defeated
    assert loser.owned_territories == 0
    assert loser.stars == 0
    winner = game.players[0]
    assert winner.single_star_cards == 2 + 1   # transferred plus the capture card
    assert winner.double_star_cards == 1
    assert winner.continent_bonus == 7
    assert game.stage == Stage.FINISHED
    assert game.winner == winner
    assert game.invasion is None

    types = [e.type for e in game.events]
    assert PLAYER_DEFEATED in types
    assert types[-1] == VICTORY
    # card award, then defeat, then the loser's cards change hands
    assert types.index(CARD_AWARDED) < types.index(PLAYER_DEFEATED) < types.index(CARDS_TRANSFERRED)

    with pytest.raises(InvalidStateError):
        game.skip()
    with pytest.raises(InvalidStateError):
        game.attack(0, 1, 1, 1)


def test_defeat_with_survivors_continues(line_geography):
    game = new_game(line_geography, 3, rng=ScriptedRandom())
    claim_in_order(game)           # P0: a   P1: b   P2: c
    populate_homes(game, {0: 0, 1: 1, 2: 2})
    assert game.current_player_index == 0
    assert game.current_player.draft_armies == 3 + 2
    game.draft(0, 5)               # a: 41
    while game.territory_info(1).armies > 2:
        game.attack(0, 1, 3, 2)
    assert game.attack(0, 1, 3, 2) is True

    assert game.players[1].defeated
    assert game.stage == Stage.INVADE
    assert game.winner is None
    game.skip()
    game.skip()
    game.skip()
    # player 1 is skipped
    assert game.current_player_index == 2
    assert game.stage == Stage.DRAFT


# ===== Maneuver and turn end =====

def test_maneuver_moves_armies_and_ends_turn(attack_game):
    game = attack_game
    game.skip()
    assert game.stage == Stage.MANEUVER
    game.maneuver(1, 3, 10)
    assert game.territory_info(1).armies == 34
    assert game.territory_info(3).armies == 11
    assert game.current_player_index == 0
    assert game.stage == Stage.DRAFT
    assert game.current_player.draft_armies == 3


@pytest.mark.parametrize("args", [
    (1, 3, 44),   # must leave one army behind
    (1, 3, -1),
    (1, 0, 1),    # destination not owned
    (0, 2, 1),    # source not owned
    (1, 5, 1),    # own territories, not adjacent
])
def test_maneuver_invalid(attack_game, args):
    attack_game.skip()
    before = snapshot(attack_game)
    with pytest.raises(InvalidArgumentError):
        attack_game.maneuver(*args)
    assert snapshot(attack_game) == before


def test_skip_maneuver_resets_captures(attack_game, rng):
    game = attack_game
    rng.rolls = [0.0]
    game.attack(1, 2, 3, 1)
    game.skip()
    game.skip()
    assert game.players[1].captures_this_turn == 1
    game.skip()
    assert game.players[1].captures_this_turn == 0
    assert game.current_player_index == 0
    assert game.stage == Stage.DRAFT


def test_skip_not_allowed_during_draft(draft_game):
    with pytest.raises(InvalidStateError):
        draft_game.skip()


# ===== Events and errors =====

def test_events_recorded_and_drained(geography, rng):
    game = new_game(geography, 2, rng=rng)
    game.claim(0)
    events = game.drain_events()
    assert [e.type for e in events] == [TERRITORY_CLAIMED]
    assert events[0].payload == {"player": 0, "territory": 0}
    assert game.drain_events() == []


def test_errors_are_value_errors(geography, rng):
    game = new_game(geography, 2, rng=rng)
    with pytest.raises(ValueError):
        game.skip()
    with pytest.raises(GameError):
        game.claim(100)


def test_territory_info_is_a_copy(draft_game):
    info = draft_game.territory_info(1)
    info.armies = 1000
    assert draft_game.territory_info(1).armies == 41


def test_player_accessors_are_copies(draft_game):
    draft_game.players[0].draft_armies = 999
    draft_game.players[1].defeated = True
    current = draft_game.current_player
    current.owned_territories = 0
    current.single_star_cards = 5
    assert draft_game.players[0].draft_armies == 0
    assert not draft_game.players[1].defeated
    assert draft_game.current_player.owned_territories == 4
    assert draft_game.current_player.stars == 0


def test_events_are_read_only(geography, rng):
    game = new_game(geography, 2, rng=rng)
    game.claim(0)
    assert isinstance(game.events, tuple)
    with pytest.raises(AttributeError):
        game.events = []
    assert [e.type for e in game.events] == [TERRITORY_CLAIMED]


def test_bool_counts_rejected(draft_game):
    with pytest.raises(InvalidArgumentError):
        draft_game.draft(1, True)
