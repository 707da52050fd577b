"""
Main entry point for the territorial conquest rules engine.
Demonstrates core functionality with a simple scripted scenario on the sample map.
"""

import sys

from risky.config import DEFAULT_PLAYER_COUNT, DEFAULT_SEED, configure_logging
from risky.engine.game import new_game
from risky.engine.queries import get_game_summary, max_attackers, max_defenders
from risky.engine.sample_map import load_sample_geography
from risky.engine.state import Stage
from risky.engine.utils import describe_territory, print_game_state


def main(seed: int | None = DEFAULT_SEED):
    configure_logging()
    print("Territorial Conquest Rules Engine")
    print("=" * 60)

    geography = load_sample_geography()
    game = new_game(geography, DEFAULT_PLAYER_COUNT, seed=seed, player_names=["Red", "Blue"])

    # ===== Claim: players take turns claiming territories in map order =====
    print("\n[CLAIM]")
    for handle in range(len(geography)):
        game.claim(handle)
    print_game_state(game)

    # ===== Populate: each player stacks their initial armies on one home territory =====
    print("\n[POPULATE]")
    homes = {0: geography.index_of("frostmark"), 1: geography.index_of("pinegate")}
    while game.stage == Stage.POPULATE:
        game.populate(homes[game.current_player_index])
    print_game_state(game)

    # ===== Draft, then attack the neighbouring home until it falls or we run out =====
    attacker = game.current_player_index
    src, dst = homes[attacker], homes[1 - attacker]
    print(f"\n[DRAFT] {game.current_player.name} drafts {game.current_player.draft_armies} armies")
    game.draft(src, game.current_player.draft_armies)

    print(f"\n[ATTACK] {describe_territory(game, src)} -> {describe_territory(game, dst)}")
    while game.stage == Stage.ATTACK and max_attackers(game, src) > 0:
        captured = game.attack(src, dst, max_attackers(game, src), max_defenders(game, dst))
        if captured:
            print(f"Captured! {describe_territory(game, dst)}")
            break
    if game.stage == Stage.INVADE:
        game.invade(0)
    if game.stage == Stage.ATTACK:
        game.skip()
    if game.stage == Stage.MANEUVER:
        game.skip()

    print_game_state(game, verbose=True)
    print("Summary:", get_game_summary(game))
    print(f"Events recorded: {len(game.drain_events())}")


if __name__ == "__main__":
    main(int(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_SEED)
