"""Tests for game state serialization."""

import json

import pytest

from src.engine import GameController
from src.models import GamePhase, GameSettings, PlayerConfig, Question
from src.utils import SNAPSHOT_VERSION, STORAGE_KEY
from src.utils.serialization import (
    STATE_DIR_ENV,
    default_state_dir,
    load_game,
    restore_game,
    save_game,
    serialize_game,
    snapshot_path,
)


def started_controller(seed=42, player_count=2):
    controller = GameController()
    controller.start_game(
        GameSettings(grid_size=5, player_count=player_count, time_limit=30),
        [PlayerConfig(name="Ann", color="#FF5733"), PlayerConfig(name="Bob", color="#3357FF")],
        seed=seed,
    )
    return controller


def enter_battle(controller):
    attacker = controller.current_player_id
    for cell in controller.grid:
        if cell.owner_id not in (None, attacker) and controller.grid.is_adjacent_to(cell, attacker):
            controller.select_cell(cell.x, cell.y)
            break
    controller.select_topic("Algebra")


def test_save_and_load_game(tmp_path):
    """Test that a game can be saved and loaded correctly."""
    controller = started_controller()
    path = save_game(controller.game, state_dir=tmp_path)

    assert path == tmp_path / f"{STORAGE_KEY}.json"

    loaded = load_game(state_dir=tmp_path)

    assert loaded is not None
    assert loaded.seed == 42
    assert loaded.phase == GamePhase.MAP_SELECTION
    assert loaded.settings == controller.settings
    assert loaded.current_player_id == controller.current_player_id
    assert [c.owner_id for c in loaded.grid] == [c.owner_id for c in controller.grid]
    assert [(p.name, p.color, p.cells_count) for p in loaded.players] == [
        (p.name, p.color, p.cells_count) for p in controller.players
    ]


def test_snapshot_is_plain_json():
    controller = started_controller()
    snapshot = controller.snapshot()

    assert restore_game(json.loads(json.dumps(snapshot))) is not None
    assert snapshot["version"] == SNAPSHOT_VERSION
    assert snapshot["grid"]["size"] == 5
    assert len(snapshot["grid"]["owners"]) == 25


def test_save_preserves_rng_state(tmp_path):
    """Games continue identically after a save/load."""
    controller = started_controller(seed=9)
    save_game(controller.game, state_dir=tmp_path)
    loaded = load_game(state_dir=tmp_path)

    assert [controller.game.rng.randrange(1000) for _ in range(10)] == [
        loaded.rng.randrange(1000) for _ in range(10)
    ]


def test_save_preserves_battle(tmp_path):
    controller = started_controller()
    enter_battle(controller)
    controller.tick()
    battle = controller.battle

    save_game(controller.game, state_dir=tmp_path)
    resumed = GameController.load(state_dir=tmp_path)

    assert resumed.phase == GamePhase.BATTLE
    restored = resumed.battle
    assert restored is resumed.battle_engine.state
    assert (restored.attacker_id, restored.defender_id) == (battle.attacker_id, battle.defender_id)
    assert restored.attacker_time == 29
    assert restored.defender_time == 30
    assert restored.current_question == battle.current_question

    # The resumed battle keeps running
    assert resumed.tick() is True
    assert resumed.battle.attacker_time == 28


def test_save_preserves_battle_log_and_custom_questions(tmp_path):
    controller = started_controller()
    controller.questions.save_question(
        Question(id=900, text="2 + 2?", answers=["3", "4", "5", "6"], correct_index=1, category="Sums")
    )
    enter_battle(controller)
    controller.end_battle(controller.battle.attacker_id, controller.battle.defender_id)

    save_game(controller.game, state_dir=tmp_path)
    loaded = load_game(state_dir=tmp_path)

    assert loaded.phase == GamePhase.GAME_OVER
    assert loaded.battle_log == controller.battle_log
    assert loaded.winner_id == controller.game.winner_id
    assert [q.id for q in loaded.custom_questions] == [900]


def test_load_missing_file_returns_none(tmp_path):
    assert load_game(state_dir=tmp_path) is None


def test_load_unreadable_file_returns_none(tmp_path):
    snapshot_path(state_dir=tmp_path).write_text("{not json")
    assert load_game(state_dir=tmp_path) is None


def test_other_version_is_treated_as_absent():
    snapshot = started_controller().snapshot()
    snapshot["version"] = SNAPSHOT_VERSION - 1

    assert restore_game(snapshot) is None


@pytest.mark.parametrize(
    "mutate",
    [
        lambda s: s.pop("settings"),
        lambda s: s["grid"]["owners"].pop(),
        lambda s: s.update(phase="CONQUERING"),
        lambda s: s.update(phase="BATTLE"),
        lambda s: s.update(current_player_id=7),
        lambda s: s["players"][0].update(id=3),
        lambda s: s["players"][0].update(cells_count=-1),
        lambda s: s["players"][0].update(cells_count=s["players"][0]["cells_count"] + 1),
        lambda s: s["grid"]["owners"].__setitem__(0, 5),
        lambda s: s.update(current_player_id=None),
        lambda s: s.update(winner_id=4),
        lambda s: s.update(pending_battle={"attacker_id": 0, "defender_id": 9}),
    ],
)
def test_malformed_snapshot_is_rejected(mutate):
    snapshot = started_controller().snapshot()
    mutate(snapshot)

    assert restore_game(snapshot) is None


@pytest.mark.parametrize(
    "mutate",
    [
        lambda s: s["players"][0].update(cells_count=99),
        lambda s: s["battle"].update(defender_id=7),
        lambda s: s["battle"].update(attacker_id=s["battle"]["defender_id"]),
        lambda s: s["players"][s["current_player_id"]].update(is_alive=False),
    ],
)
def test_inconsistent_battle_snapshot_starts_at_menu(mutate):
    controller = started_controller()
    enter_battle(controller)
    snapshot = controller.snapshot()
    mutate(snapshot)

    resumed = GameController.from_snapshot(snapshot)

    assert resumed.phase == GamePhase.MENU
    assert resumed.battle is None
    assert resumed.battle_engine.state is None


def test_non_dict_snapshot_is_rejected():
    assert restore_game(["not", "a", "game"]) is None


def test_controller_falls_back_to_menu(tmp_path):
    snapshot_path(state_dir=tmp_path).write_text(json.dumps({"version": SNAPSHOT_VERSION}))

    controller = GameController.load(state_dir=tmp_path)

    assert controller.phase == GamePhase.MENU
    assert controller.grid is None
    assert controller.players == []


def test_from_snapshot_round_trip():
    controller = started_controller()
    clone = GameController.from_snapshot(controller.snapshot())

    assert serialize_game(clone.game) == controller.snapshot()


def test_state_dir_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv(STATE_DIR_ENV, str(tmp_path))

    assert default_state_dir() == tmp_path
    assert snapshot_path("slot") == tmp_path / "slot.json"
