"""Battle state and battle history models."""

from dataclasses import dataclass

from .question import Question


@dataclass
class PendingBattle:
    """An attack chosen on the map, waiting for its topic."""

    attacker_id: int
    defender_id: int


@dataclass
class BattleState:
    """Live state of one timed duel.

    Each side has an independent countdown in seconds; only the side whose
    turn it is loses time. The state exists only during the BATTLE phase.
    """

    attacker_id: int
    defender_id: int
    attacker_time: int  # Seconds remaining for the attacker
    defender_time: int  # Seconds remaining for the defender
    current_turn_id: int  # Side that must answer now
    category: str
    time_limit: int  # Starting clock for both sides
    current_question: Question | None = None
    penalty_until: int | None = None  # Epoch ms until which answers are ignored
    attacker_score: int = 0
    defender_score: int = 0

    def __post_init__(self):
        """Validate battle data after initialization."""
        if self.attacker_id == self.defender_id:
            raise ValueError(f"Player {self.attacker_id} cannot battle itself")
        if self.current_turn_id not in (self.attacker_id, self.defender_id):
            raise ValueError(
                f"Invalid current_turn_id: {self.current_turn_id} "
                f"(must be {self.attacker_id} or {self.defender_id})"
            )

    def opponent_of(self, player_id: int) -> int:
        return self.defender_id if player_id == self.attacker_id else self.attacker_id

    def time_of(self, player_id: int) -> int:
        return self.attacker_time if player_id == self.attacker_id else self.defender_time

    @property
    def elapsed(self) -> int:
        """Seconds spent by both sides together."""
        return 2 * self.time_limit - (self.attacker_time + self.defender_time)


@dataclass(frozen=True)
class BattleRecord:
    """Immutable summary of a finished battle.

    Attributes:
        attacker_name: Name of the attacking player
        defender_name: Name of the defending player
        winner_name: Name of the player who kept their clock
        category: Topic the battle was fought on
        attacker_score: Correct answers given by the attacker
        defender_score: Correct answers given by the defender
        duration: Seconds elapsed on both clocks together
    """

    attacker_name: str
    defender_name: str
    winner_name: str
    category: str
    attacker_score: int
    defender_score: int
    duration: int
