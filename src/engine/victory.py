"""Victory condition checking.

The game ends when exactly one player still has territory.
"""

from ..models.game import Game


def check_victory(game: Game) -> bool:
    """Check whether a single player remains alive.

    Args:
        game: Current game state

    Returns:
        True if the game has a winner (game.winner_id is set), False otherwise
    """
    alive = game.alive_players()

    if len(alive) == 1:
        game.winner_id = alive[0].id
        return True

    game.winner_id = None
    return False
