"""Conquest resolution: applying a finished battle to the board.

This module handles:
1. Transferring every cell of the loser to the winner
2. Recounting both players' cells and eliminating the loser
3. Recording the battle in the game's log
"""

import logging
from dataclasses import dataclass

from ..models import BattleRecord, BattleState, Game

logger = logging.getLogger(__name__)


@dataclass
class ConquestResult:
    """Result of one conquest.

    Attributes:
        winner_id: Player who kept their clock running
        loser_id: Player whose clock ran out
        cells_transferred: Number of cells that changed owner
        record: Battle record appended to the log
    """

    winner_id: int
    loser_id: int
    cells_transferred: int
    record: BattleRecord


def resolve_conquest(game: Game, battle: BattleState, winner_id: int, loser_id: int) -> ConquestResult:
    """Give the loser's whole territory to the winner.

    The loser is eliminated regardless of which side attacked. Cells of
    other players are untouched, so the total number of owned cells is
    conserved. No contiguity repair is attempted; enclaves stay as they are.

    Args:
        game: Current game state (grid, players and log are updated)
        battle: Final state of the duel
        winner_id: Player who won the duel
        loser_id: Player who lost the duel

    Returns:
        ConquestResult describing the transfer
    """
    if {winner_id, loser_id} != {battle.attacker_id, battle.defender_id}:
        raise ValueError(
            f"Players {winner_id} and {loser_id} are not the sides of this battle "
            f"({battle.attacker_id} vs {battle.defender_id})"
        )
    if game.grid is None:
        raise ValueError("Cannot resolve a conquest without a grid")

    for pid in (winner_id, loser_id):
        if not 0 <= pid < len(game.players):
            raise ValueError(f"Unknown player {pid}")

    winner = game.get_player(winner_id)
    loser = game.get_player(loser_id)
    attacker = game.get_player(battle.attacker_id)
    defender = game.get_player(battle.defender_id)

    moved = game.grid.reassign_owner(loser_id, winner_id)
    winner.cells_count = game.grid.count_owned_by(winner_id)
    loser.eliminate()

    record = BattleRecord(
        attacker_name=attacker.name,
        defender_name=defender.name,
        winner_name=winner.name,
        category=battle.category,
        attacker_score=battle.attacker_score,
        defender_score=battle.defender_score,
        duration=battle.elapsed,
    )
    game.battle_log.append(record)

    logger.info(
        f"{winner.name} conquered {loser.name}: {moved} cells transferred, "
        f"score {battle.attacker_score}-{battle.defender_score} in {record.duration}s"
    )

    return ConquestResult(
        winner_id=winner_id,
        loser_id=loser_id,
        cells_transferred=moved,
        record=record,
    )
