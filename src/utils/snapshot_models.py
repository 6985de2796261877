"""Pydantic models describing a persisted game snapshot.

Loading validates the whole document against these models before any
dataclass is rebuilt, so a malformed save is rejected in one place.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from ..models.phase import GamePhase


class SettingsModel(BaseModel):
    grid_size: int = Field(ge=1)
    player_count: int = Field(ge=1)
    time_limit: int = Field(ge=1)


class PlayerConfigModel(BaseModel):
    name: str
    color: str


class PlayerModel(BaseModel):
    id: int = Field(ge=0)
    name: str
    color: str
    is_alive: bool
    cells_count: int = Field(ge=0)


class GridModel(BaseModel):
    """Row-major owner IDs, one entry per cell."""

    size: int = Field(ge=1)
    owners: list[int | None]

    @model_validator(mode="after")
    def check_cell_count(self) -> "GridModel":
        if len(self.owners) != self.size * self.size:
            raise ValueError(
                f"Grid of size {self.size} needs {self.size * self.size} owners, "
                f"got {len(self.owners)}"
            )
        return self


class QuestionModel(BaseModel):
    id: int
    text: str
    answers: list[str] = Field(min_length=4, max_length=4)
    correct_index: int = Field(ge=0, le=3)
    category: str


class PendingBattleModel(BaseModel):
    attacker_id: int
    defender_id: int


class BattleStateModel(BaseModel):
    attacker_id: int
    defender_id: int
    attacker_time: int
    defender_time: int
    current_turn_id: int
    category: str
    time_limit: int = Field(ge=1)
    current_question: QuestionModel | None = None
    penalty_until: int | None = None
    attacker_score: int = Field(default=0, ge=0)
    defender_score: int = Field(default=0, ge=0)


class BattleRecordModel(BaseModel):
    attacker_name: str
    defender_name: str
    winner_name: str
    category: str
    attacker_score: int
    defender_score: int
    duration: int


class GameSnapshot(BaseModel):
    """Full persisted state of one game session."""

    version: int
    seed: int | None = None
    rng_state: Any = None
    phase: GamePhase
    settings: SettingsModel
    player_configs: list[PlayerConfigModel] = Field(default_factory=list)
    players: list[PlayerModel] = Field(default_factory=list)
    grid: GridModel | None = None
    current_player_id: int | None = None
    pending_battle: PendingBattleModel | None = None
    battle: BattleStateModel | None = None
    battle_log: list[BattleRecordModel] = Field(default_factory=list)
    winner_id: int | None = None
    custom_questions: list[QuestionModel] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_phase_consistency(self) -> "GameSnapshot":
        in_game = (
            GamePhase.MAP_SELECTION,
            GamePhase.TOPIC_SELECTION,
            GamePhase.BATTLE,
            GamePhase.GAME_OVER,
        )
        if self.phase in in_game and (self.grid is None or not self.players):
            raise ValueError(f"Phase {self.phase.value} requires a grid and players")
        if self.phase == GamePhase.TOPIC_SELECTION and self.pending_battle is None:
            raise ValueError("TOPIC_SELECTION requires a pending battle")
        if self.phase == GamePhase.BATTLE and self.battle is None:
            raise ValueError("BATTLE requires a battle state")
        for index, player in enumerate(self.players):
            if player.id != index:
                raise ValueError(f"Player at position {index} has id {player.id}")
        return self

    @model_validator(mode="after")
    def check_references(self) -> "GameSnapshot":
        """Every player ID in the snapshot must name a seated player."""
        seats = range(len(self.players))

        if self.current_player_id is not None and self.current_player_id not in seats:
            raise ValueError(f"Unknown current player {self.current_player_id}")
        if self.phase in (GamePhase.MAP_SELECTION, GamePhase.TOPIC_SELECTION, GamePhase.BATTLE):
            if self.current_player_id is None:
                raise ValueError(f"Phase {self.phase.value} requires a current player")
            if not self.players[self.current_player_id].is_alive:
                raise ValueError(f"Current player {self.current_player_id} is eliminated")
        if self.winner_id is not None and self.winner_id not in seats:
            raise ValueError(f"Unknown winner {self.winner_id}")

        for label, sides in (("pending battle", self.pending_battle), ("battle", self.battle)):
            if sides is None:
                continue
            for pid in (sides.attacker_id, sides.defender_id):
                if pid not in seats:
                    raise ValueError(f"Unknown player {pid} in {label}")
            if sides.attacker_id == sides.defender_id:
                raise ValueError(f"Player {sides.attacker_id} cannot fight itself in {label}")

        if self.grid is not None:
            counts = dict.fromkeys(seats, 0)
            for owner in self.grid.owners:
                if owner is None:
                    continue
                if owner not in counts:
                    raise ValueError(f"Grid cell owned by unknown player {owner}")
                counts[owner] += 1
            for player in self.players:
                if player.cells_count != counts[player.id]:
                    raise ValueError(
                        f"Player {player.id} claims {player.cells_count} cells "
                        f"but owns {counts[player.id]}"
                    )
        return self
