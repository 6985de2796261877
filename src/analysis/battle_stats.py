"""Per-player battle statistics for the game sidebar and final standings.

Statistics are keyed by player name because battle records store names:
eliminated players and names that only appear in the log are counted too.
"""

from dataclasses import dataclass

from ..models import BattleRecord, Player


@dataclass
class PlayerStats:
    """Aggregated battle history of one player.

    Attributes:
        name: Player name
        wins: Battles won
        battles: Battles fought as attacker or defender
        total_score: Correct answers over all battles
    """

    name: str
    wins: int = 0
    battles: int = 0
    total_score: int = 0


def calculate_player_stats(players: list[Player], battle_log: list[BattleRecord]) -> list[PlayerStats]:
    """Aggregate the battle log per player name.

    Args:
        players: Players of the game, alive or not, in seat order
        battle_log: Records of all finished battles

    Returns:
        Stats sorted by wins, most first; ties keep seat order, then order
        of first appearance in the log
    """
    stats: dict[str, PlayerStats] = {p.name: PlayerStats(name=p.name) for p in players}

    for record in battle_log:
        attacker = stats.setdefault(record.attacker_name, PlayerStats(name=record.attacker_name))
        defender = stats.setdefault(record.defender_name, PlayerStats(name=record.defender_name))

        attacker.battles += 1
        attacker.total_score += record.attacker_score
        defender.battles += 1
        defender.total_score += record.defender_score

        if record.winner_name in stats:
            stats[record.winner_name].wins += 1

    return sorted(stats.values(), key=lambda s: s.wins, reverse=True)
