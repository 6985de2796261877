"""Tests for the game controller state machine."""

import pytest

from src.engine import AnswerResult, CapacityError, GameController
from src.models import GamePhase, GameSettings, PlayerConfig, Question


class FakeClock:
    def __init__(self, now=5_000_000):
        self.now = now

    def __call__(self):
        return self.now


def start(controller, grid_size=5, player_count=2, time_limit=45, seed=42):
    configs = [PlayerConfig(name=f"Player {i + 1}", color="#123456") for i in range(player_count)]
    controller.start_game(
        GameSettings(grid_size=grid_size, player_count=player_count, time_limit=time_limit),
        configs,
        seed=seed,
    )
    return controller


def find_target(controller, attacker_id=None):
    """First enemy cell adjacent to the attacker's territory."""
    if attacker_id is None:
        attacker_id = controller.current_player_id
    for cell in controller.grid:
        if cell.owner_id not in (None, attacker_id) and controller.grid.is_adjacent_to(
            cell, attacker_id
        ):
            return cell
    raise AssertionError(f"Player {attacker_id} has no target")


def enter_battle(controller, category="Algebra"):
    target = find_target(controller)
    assert controller.select_cell(target.x, target.y)
    assert controller.select_topic(category)
    return target


def answer_correctly(controller):
    return controller.submit_answer(controller.battle.current_question.correct_index)


def answer_wrong(controller):
    return controller.submit_answer((controller.battle.current_question.correct_index + 1) % 4)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def controller(clock):
    return GameController(clock=clock)


class TestStartGame:
    def test_start_generates_owned_map(self, controller):
        start(controller)

        assert controller.phase == GamePhase.MAP_SELECTION
        assert all(cell.owner_id is not None for cell in controller.grid)
        assert sum(p.cells_count for p in controller.players) == 25
        assert all(p.cells_count >= 1 and p.is_alive for p in controller.players)
        assert controller.current_player_id in (0, 1)

    def test_counts_match_grid(self, controller):
        start(controller, grid_size=6, player_count=4)
        for player in controller.players:
            assert player.cells_count == controller.grid.count_owned_by(player.id)

    def test_capacity_error_leaves_menu_untouched(self, controller):
        with pytest.raises(CapacityError):
            start(controller, grid_size=2, player_count=5)

        assert controller.phase == GamePhase.MENU
        assert controller.grid is None
        assert controller.players == []

    def test_pads_missing_player_configs(self, controller):
        controller.start_game(
            GameSettings(grid_size=4, player_count=3),
            [PlayerConfig(name="Ann", color="#FF5733")],
            seed=1,
        )

        names = [p.name for p in controller.players]
        assert names == ["Ann", "Player 2", "Player 3"]
        assert all(p.color.startswith("#") and len(p.color) == 7 for p in controller.players)

    def test_truncates_extra_player_configs(self, controller):
        configs = [PlayerConfig(name=n, color="#000000") for n in ("A", "B", "C")]
        controller.start_game(GameSettings(grid_size=4, player_count=2), configs, seed=1)

        assert [p.name for p in controller.players] == ["A", "B"]

    def test_same_seed_same_game(self, clock):
        first = start(GameController(clock=clock), seed=7)
        second = start(GameController(clock=clock), seed=7)

        assert [c.owner_id for c in first.grid] == [c.owner_id for c in second.grid]
        assert first.current_player_id == second.current_player_id

    def test_ignored_outside_menu(self, controller):
        start(controller)
        grid = controller.grid

        assert controller.start_game(GameSettings(), [], seed=3) is False
        assert controller.grid is grid


class TestSelectCell:
    def test_adjacent_enemy_cell_opens_topic_selection(self, controller):
        start(controller)
        attacker = controller.current_player_id
        target = find_target(controller)

        assert controller.select_cell(target.x, target.y) is True
        assert controller.phase == GamePhase.TOPIC_SELECTION
        assert controller.pending_battle.attacker_id == attacker
        assert controller.pending_battle.defender_id == target.owner_id

    def test_own_cell_is_noop(self, controller):
        start(controller)
        own = next(iter(controller.grid.cells_owned_by(controller.current_player_id)))

        assert controller.select_cell(own.x, own.y) is False
        assert controller.phase == GamePhase.MAP_SELECTION
        assert controller.pending_battle is None

    def test_non_adjacent_enemy_cell_is_noop(self, controller):
        start(controller, grid_size=3, player_count=2)
        game = controller.game
        for cell in game.grid:
            cell.owner_id = 1
        game.grid.cell_at(0, 0).owner_id = 0
        game.current_player_id = 0

        assert controller.select_cell(2, 2) is False
        assert controller.phase == GamePhase.MAP_SELECTION

    def test_off_grid_is_noop(self, controller):
        start(controller)
        assert controller.select_cell(10, 10) is False

    def test_ignored_outside_map_selection(self, controller):
        assert controller.select_cell(0, 0) is False
        assert controller.phase == GamePhase.MENU


class TestSelectTopic:
    def test_topic_starts_battle(self, controller):
        start(controller)
        attacker = controller.current_player_id
        target = find_target(controller)
        controller.select_cell(target.x, target.y)

        assert controller.select_topic("Algebra") is True
        battle = controller.battle
        assert controller.phase == GamePhase.BATTLE
        assert controller.pending_battle is None
        assert battle.attacker_id == attacker
        assert battle.defender_id == target.owner_id
        assert battle.attacker_time == battle.defender_time == 45
        assert battle.current_turn_id == attacker
        assert battle.current_question.category == "Algebra"

    def test_ignored_outside_topic_selection(self, controller):
        start(controller)
        assert controller.select_topic("Algebra") is False
        assert controller.phase == GamePhase.MAP_SELECTION
        assert controller.battle is None


class TestBattleFlow:
    def test_answer_ignored_outside_battle(self, controller):
        assert controller.submit_answer(0) == AnswerResult.IGNORED
        start(controller)
        assert controller.submit_answer(0) == AnswerResult.IGNORED

    def test_turn_alternation(self, controller):
        start(controller)
        enter_battle(controller)
        battle = controller.battle
        attacker, defender = battle.attacker_id, battle.defender_id

        assert answer_correctly(controller) == AnswerResult.CORRECT
        assert battle.current_turn_id == defender
        assert answer_wrong(controller) == AnswerResult.INCORRECT
        assert battle.current_turn_id == defender

    def test_penalty_gating(self, controller, clock):
        start(controller)
        enter_battle(controller)
        battle = controller.battle

        answer_wrong(controller)
        scores = (battle.attacker_score, battle.defender_score)
        turn = battle.current_turn_id

        assert answer_correctly(controller) == AnswerResult.IGNORED
        assert (battle.attacker_score, battle.defender_score) == scores
        assert battle.current_turn_id == turn

        clock.now += 3000
        assert answer_correctly(controller) == AnswerResult.CORRECT

    def test_tick_only_in_battle(self, controller):
        assert controller.tick() is False
        start(controller)
        assert controller.tick() is False

    def test_attacker_runs_out_of_time(self, controller):
        start(controller, time_limit=3)
        enter_battle(controller)
        attacker = controller.battle.attacker_id
        defender = controller.battle.defender_id

        controller.tick()
        controller.tick()
        assert controller.phase == GamePhase.BATTLE
        controller.tick()

        assert controller.battle is None
        assert controller.players[attacker].is_alive is False
        assert controller.players[defender].cells_count == 25
        assert controller.phase == GamePhase.GAME_OVER
        assert controller.winner.id == defender

    def test_idle_clock_never_moves(self, controller):
        start(controller, time_limit=10)
        enter_battle(controller)
        for _ in range(5):
            controller.tick()
        assert controller.battle.attacker_time == 5
        assert controller.battle.defender_time == 10

    def test_duplicate_end_signal_is_ignored(self, controller):
        start(controller, player_count=3)
        enter_battle(controller)
        battle = controller.battle
        winner, loser = battle.attacker_id, battle.defender_id

        first = controller.end_battle(winner, loser)
        log_length = len(controller.battle_log)
        second = controller.end_battle(winner, loser)

        assert first is not None
        assert second is None
        assert len(controller.battle_log) == log_length == 1

    def test_end_battle_rejects_outsiders(self, controller):
        start(controller, player_count=3)
        enter_battle(controller)
        battle = controller.battle
        outsider = ({0, 1, 2} - {battle.attacker_id, battle.defender_id}).pop()

        with pytest.raises(ValueError, match="not fighting"):
            controller.end_battle(outsider, battle.defender_id)
        assert controller.phase == GamePhase.BATTLE
        assert controller.battle is battle

    def test_failed_resolution_keeps_battle_running(self, controller):
        start(controller, time_limit=2)
        enter_battle(controller)
        battle = controller.battle
        grid = controller.grid
        controller.game.grid = None

        controller.tick()
        with pytest.raises(ValueError, match="without a grid"):
            controller.tick()

        assert controller.phase == GamePhase.BATTLE
        assert controller.battle is battle
        assert controller.battle_engine.state is battle
        assert controller.battle_log == []

        controller.game.grid = grid
        result = controller.end_battle(battle.defender_id, battle.attacker_id)

        assert result is not None
        assert controller.phase == GamePhase.GAME_OVER
        assert controller.battle is None

    def test_winner_moves_next_when_rivals_remain(self, controller):
        start(controller, grid_size=6, player_count=3)
        enter_battle(controller)
        battle = controller.battle
        controller.battle.defender_time = 0
        answer_correctly(controller)  # observation after the answer ends the battle

        assert controller.phase == GamePhase.MAP_SELECTION
        assert controller.current_player_id == battle.attacker_id
        assert controller.players[battle.defender_id].is_alive is False

    def test_eliminated_player_stays_eliminated(self, controller):
        start(controller, grid_size=6, player_count=3)
        enter_battle(controller)
        loser = controller.battle.defender_id
        controller.end_battle(controller.battle.attacker_id, loser)

        enter_battle(controller)
        controller.end_battle(controller.battle.defender_id, controller.battle.attacker_id)

        assert controller.players[loser].is_alive is False
        assert controller.players[loser].cells_count == 0
        assert controller.grid.count_owned_by(loser) == 0


class TestScenario:
    def test_five_by_five_two_players(self, controller):
        """5x5 board, 2 players, 45 s: player 0 conquers player 1."""
        start(controller, grid_size=5, player_count=2, time_limit=45)
        assert sum(p.cells_count for p in controller.players) == 25

        controller.game.current_player_id = 0
        target = find_target(controller, attacker_id=0)
        assert controller.select_cell(target.x, target.y)
        assert controller.phase == GamePhase.TOPIC_SELECTION
        assert controller.pending_battle.attacker_id == 0
        assert controller.pending_battle.defender_id == 1

        assert controller.select_topic("Math")
        battle = controller.battle
        assert controller.phase == GamePhase.BATTLE
        assert battle.attacker_time == battle.defender_time == 45
        assert battle.current_turn_id == 0

        for _ in range(3):
            assert answer_correctly(controller) == AnswerResult.CORRECT
        assert battle.current_turn_id == 1
        assert battle.attacker_score == 2
        assert battle.defender_score == 1

        battle.defender_time = 0
        controller.tick()

        assert controller.players[0].cells_count == 25
        assert controller.players[1].is_alive is False
        assert controller.players[1].cells_count == 0
        assert controller.phase == GamePhase.GAME_OVER
        assert controller.winner.id == 0

        record = controller.battle_log[-1]
        assert record.winner_name == "Player 1"
        assert record.category == "Math"
        assert (record.attacker_score, record.defender_score) == (2, 1)
        assert record.duration == 90 - (45 + 0)

    def test_game_over_is_terminal_until_reset(self, controller):
        start(controller)
        enter_battle(controller)
        controller.end_battle(controller.battle.attacker_id, controller.battle.defender_id)
        assert controller.phase == GamePhase.GAME_OVER

        assert controller.start_game(GameSettings(), [], seed=1) is False
        assert controller.select_cell(0, 0) is False
        assert controller.tick() is False

        controller.reset_game()
        assert controller.phase == GamePhase.MENU
        assert controller.start_game(GameSettings(), [], seed=1) is True


class TestReset:
    def test_reset_mid_battle_discards_battle(self, controller):
        start(controller)
        enter_battle(controller)
        controller.questions.save_question(
            Question(id=500, text="x", answers=["a", "b", "c", "d"], correct_index=0, category="Logic")
        )

        controller.reset_game()

        assert controller.phase == GamePhase.MENU
        assert controller.battle is None
        assert controller.battle_engine.state is None
        assert controller.grid is None
        assert controller.players == []
        assert controller.battle_log == []
        assert controller.settings.grid_size == 5
        assert "Logic" in controller.categories()
