"""Game state container."""

from dataclasses import dataclass, field

from ..utils import GameRNG
from .battle import BattleRecord, BattleState, PendingBattle
from .grid import Grid
from .phase import GamePhase
from .player import Player, PlayerConfig
from .question import Question
from .settings import GameSettings


@dataclass
class Game:
    """Main game state container.

    One Game is one session: every command of the controller reads and
    writes this object, and persistence snapshots exactly this object. The
    grid owns the cells, the player list and battle log live here, and the
    live battle state is a reference to what the battle engine is running.
    """

    seed: int | None = None  # RNG seed
    rng: GameRNG | None = None  # Seeded RNG instance
    phase: GamePhase = GamePhase.MENU
    settings: GameSettings = field(default_factory=GameSettings)
    player_configs: list[PlayerConfig] = field(default_factory=list)  # Menu seats
    players: list[Player] = field(default_factory=list)  # Indexed by player ID
    grid: Grid | None = None  # None until a game is started
    current_player_id: int | None = None  # Player choosing an attack
    pending_battle: PendingBattle | None = None  # Set during TOPIC_SELECTION
    battle: BattleState | None = None  # Set during BATTLE
    battle_log: list[BattleRecord] = field(default_factory=list)  # Append-only history
    winner_id: int | None = None  # Set on GAME_OVER
    custom_questions: list[Question] = field(default_factory=list)  # User-authored pool entries

    def __post_init__(self):
        """Initialize RNG if not provided."""
        if self.rng is None:
            self.rng = GameRNG(self.seed)
        if self.current_player_id is not None and not (
            0 <= self.current_player_id < len(self.players)
        ):
            raise ValueError(f"Invalid current_player_id: {self.current_player_id}")

    def get_player(self, player_id: int) -> Player:
        return self.players[player_id]

    def alive_players(self) -> list[Player]:
        return [p for p in self.players if p.is_alive]

    def total_cells_owned(self) -> int:
        return sum(p.cells_count for p in self.players)
