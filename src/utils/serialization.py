"""Game state serialization to/from JSON.

This module provides functions to save and load a whole game session
(phase, settings, players, grid, battle, battle log and custom questions)
under a versioned storage key. A snapshot written by another version is
treated as absent; there is no migration.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..models import (
    BattleRecord,
    BattleState,
    Cell,
    Game,
    GameSettings,
    Grid,
    PendingBattle,
    Player,
    PlayerConfig,
    Question,
)
from .constants import SNAPSHOT_VERSION, STORAGE_KEY
from .rng import GameRNG
from .snapshot_models import BattleStateModel, GameSnapshot, QuestionModel

logger = logging.getLogger(__name__)

STATE_DIR_ENV = "QUIZ_CONQUEST_STATE_DIR"


def default_state_dir() -> Path:
    """Directory for save files: $QUIZ_CONQUEST_STATE_DIR or ./state in the project."""
    configured = os.getenv(STATE_DIR_ENV)
    if configured:
        return Path(configured)
    return Path(__file__).parent.parent.parent / "state"


def snapshot_path(storage_key: str = STORAGE_KEY, state_dir: str | Path | None = None) -> Path:
    base = Path(state_dir) if state_dir is not None else default_state_dir()
    return base / f"{storage_key}.json"


def save_game(
    game: Game, storage_key: str = STORAGE_KEY, state_dir: str | Path | None = None
) -> Path:
    """Save game state to JSON file.

    Args:
        game: Game state to save
        storage_key: Versioned key naming the save slot
        state_dir: Directory for the save file (default: see default_state_dir)

    Returns:
        Path of the written file
    """
    path = snapshot_path(storage_key, state_dir)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        json.dump(serialize_game(game), f, indent=2)

    return path


def load_game(storage_key: str = STORAGE_KEY, state_dir: str | Path | None = None) -> Game | None:
    """Load game state from JSON file.

    Returns:
        Loaded Game, or None when there is no usable snapshot (file absent,
        other version, unreadable or malformed)
    """
    path = snapshot_path(storage_key, state_dir)
    if not path.exists():
        return None

    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Discarding unreadable snapshot {path}: {e}")
        return None

    return restore_game(data)


def restore_game(data: Any) -> Game | None:
    """Rebuild a Game from snapshot data, or None if it cannot be used."""
    if not isinstance(data, dict):
        logger.warning(f"Discarding snapshot of type {type(data).__name__}")
        return None
    if data.get("version") != SNAPSHOT_VERSION:
        logger.info(
            f"Ignoring snapshot version {data.get('version')} (current {SNAPSHOT_VERSION})"
        )
        return None

    try:
        return deserialize_game(data)
    except (ValidationError, ValueError, KeyError, TypeError, IndexError) as e:
        logger.warning(f"Discarding malformed snapshot: {e}")
        return None


def serialize_game(game: Game) -> dict[str, Any]:
    """Convert Game object to JSON-compatible dictionary.

    Args:
        game: Game to serialize

    Returns:
        Dictionary representation of game state
    """
    return {
        "version": SNAPSHOT_VERSION,
        "seed": game.seed,
        "rng_state": game.rng.get_state(),  # Save RNG state for determinism
        "phase": game.phase.value,
        "settings": {
            "grid_size": game.settings.grid_size,
            "player_count": game.settings.player_count,
            "time_limit": game.settings.time_limit,
        },
        "player_configs": [{"name": c.name, "color": c.color} for c in game.player_configs],
        "players": [_serialize_player(p) for p in game.players],
        "grid": _serialize_grid(game.grid) if game.grid is not None else None,
        "current_player_id": game.current_player_id,
        "pending_battle": (
            {
                "attacker_id": game.pending_battle.attacker_id,
                "defender_id": game.pending_battle.defender_id,
            }
            if game.pending_battle is not None
            else None
        ),
        "battle": _serialize_battle(game.battle) if game.battle is not None else None,
        "battle_log": [_serialize_record(r) for r in game.battle_log],
        "winner_id": game.winner_id,
        "custom_questions": [_serialize_question(q) for q in game.custom_questions],
    }


def deserialize_game(data: dict[str, Any]) -> Game:
    """Reconstruct Game object from dictionary.

    Raises:
        pydantic.ValidationError: If the snapshot shape is invalid
        ValueError: If a rebuilt model rejects its data
    """
    snapshot = GameSnapshot.model_validate(data)

    rng = GameRNG(snapshot.seed)
    if snapshot.rng_state is not None:
        rng.set_state(snapshot.rng_state)

    grid = None
    if snapshot.grid is not None:
        size = snapshot.grid.size
        grid = Grid(
            size,
            [
                Cell(x=i % size, y=i // size, owner_id=owner)
                for i, owner in enumerate(snapshot.grid.owners)
            ],
        )

    return Game(
        seed=snapshot.seed,
        rng=rng,
        phase=snapshot.phase,
        settings=GameSettings(**snapshot.settings.model_dump()),
        player_configs=[PlayerConfig(**c.model_dump()) for c in snapshot.player_configs],
        players=[Player(**p.model_dump()) for p in snapshot.players],
        grid=grid,
        current_player_id=snapshot.current_player_id,
        pending_battle=(
            PendingBattle(**snapshot.pending_battle.model_dump())
            if snapshot.pending_battle is not None
            else None
        ),
        battle=_deserialize_battle(snapshot.battle) if snapshot.battle is not None else None,
        battle_log=[BattleRecord(**r.model_dump()) for r in snapshot.battle_log],
        winner_id=snapshot.winner_id,
        custom_questions=[_deserialize_question(q) for q in snapshot.custom_questions],
    )


def _serialize_player(player: Player) -> dict[str, Any]:
    """Convert Player to dictionary."""
    return {
        "id": player.id,
        "name": player.name,
        "color": player.color,
        "is_alive": player.is_alive,
        "cells_count": player.cells_count,
    }


def _serialize_grid(grid: Grid) -> dict[str, Any]:
    return {"size": grid.size, "owners": [cell.owner_id for cell in grid]}


def _serialize_question(question: Question) -> dict[str, Any]:
    """Convert Question to dictionary."""
    return {
        "id": question.id,
        "text": question.text,
        "answers": list(question.answers),
        "correct_index": question.correct_index,
        "category": question.category,
    }


def _deserialize_question(model: QuestionModel) -> Question:
    return Question(**model.model_dump())


def _serialize_battle(battle: BattleState) -> dict[str, Any]:
    """Convert BattleState to dictionary."""
    return {
        "attacker_id": battle.attacker_id,
        "defender_id": battle.defender_id,
        "attacker_time": battle.attacker_time,
        "defender_time": battle.defender_time,
        "current_turn_id": battle.current_turn_id,
        "category": battle.category,
        "time_limit": battle.time_limit,
        "current_question": (
            _serialize_question(battle.current_question)
            if battle.current_question is not None
            else None
        ),
        "penalty_until": battle.penalty_until,
        "attacker_score": battle.attacker_score,
        "defender_score": battle.defender_score,
    }


def _deserialize_battle(model: BattleStateModel) -> BattleState:
    fields = model.model_dump(exclude={"current_question"})
    question = (
        _deserialize_question(model.current_question)
        if model.current_question is not None
        else None
    )
    return BattleState(current_question=question, **fields)


def _serialize_record(record: BattleRecord) -> dict[str, Any]:
    """Convert BattleRecord to dictionary."""
    return {
        "attacker_name": record.attacker_name,
        "defender_name": record.defender_name,
        "winner_name": record.winner_name,
        "category": record.category,
        "attacker_score": record.attacker_score,
        "defender_score": record.defender_score,
        "duration": record.duration,
    }
