"""
Utility functions for displaying game state.
"""

from risky.engine.game import Game


def print_game_state(game: Game, verbose: bool = False):
    """
    Pretty-print the current game state.

    Args:
        game: Game to print
        verbose: If True, also show card counts and piles
    """
    current = game.current_player
    print(f"\n{'='*60}")
    print(f"Stage: {game.stage.value} | Player: {current.name} | Draft armies: {current.draft_armies}")
    print(f"{'='*60}")

    territories = game.territories
    for region in game.geography.regions:
        print(f"\n{region.name} (bonus {region.bonus})")
        for handle in region.territories:
            info = territories[handle]
            owner_str = game.players[info.owner].name if info.owner is not None else "unclaimed"
            print(f"  - {game.geography.name_of(handle)}: {owner_str}, {info.armies} armies")

    print(f"\n{'Players':.<40}")
    for player in game.players:
        status = "defeated" if player.defeated else f"{player.owned_territories} territories"
        line = f"  {player.name}: {status}, bonus {player.continent_bonus}"
        if verbose:
            line += f", cards {player.single_star_cards}x1 {player.double_star_cards}x2"
        print(line)

    if verbose:
        print(f"\nCard piles: {game.card_piles.to_dict()}")
    print()


def describe_territory(game: Game, territory: int) -> str:
    """One-line description of a territory, e.g. "frostmark (Player 1, 3 armies)"."""
    info = game.territory_info(territory)
    owner = game.players[info.owner].name if info.owner is not None else "unclaimed"
    return f"{game.geography.name_of(territory)} ({owner}, {info.armies} armies)"
