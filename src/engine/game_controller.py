"""Game controller: the phase state machine behind the presentation layer.

Phases flow MENU -> MAP_SELECTION -> TOPIC_SELECTION -> BATTLE and back to
MAP_SELECTION after each conquest, until one player is left (GAME_OVER).
Commands that do not fit the current phase are ignored without raising,
since the presentation layer only offers valid actions.

Battle time is driven by ``tick()``, called once per second by the host.
Every battle mutation (a tick or an answer) is followed by a separate
observation step that resolves the battle when a clock has run out. The
resolution is guarded on the BATTLE phase, so a duplicate end signal
cannot resolve the same battle twice.
"""

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from ..models import (
    BattleRecord,
    BattleState,
    Game,
    GamePhase,
    GameSettings,
    Grid,
    PendingBattle,
    Player,
    PlayerConfig,
)
from ..utils import STORAGE_KEY, GameRNG, now_ms
from ..utils.serialization import load_game, restore_game, save_game, serialize_game
from .battle import AnswerResult, BattleEngine
from .conquest import ConquestResult, resolve_conquest
from .map_generator import generate_map
from .question_pool import QuestionPool
from .victory import check_victory

logger = logging.getLogger(__name__)


class GameController:
    """Owns one Game and exposes the engine's commands and read-only views."""

    def __init__(self, game: Game | None = None, clock: Callable[[], int] = now_ms):
        """Wrap an existing game (e.g. loaded from disk) or start at the menu.

        Args:
            game: Game state to control; a fresh MENU game if None
            clock: Epoch-millisecond clock used for penalty windows
        """
        self.game = game if game is not None else Game()
        self.battle_engine = BattleEngine(clock=clock)
        self.questions = QuestionPool(custom=self.game.custom_questions, rng=self.game.rng)

        if self.game.phase == GamePhase.BATTLE and self.game.battle is not None:
            self.battle_engine.restore(self.game.battle, self.questions.draw)

    # =========================================================================
    # READ-ONLY VIEWS
    # =========================================================================

    @property
    def phase(self) -> GamePhase:
        return self.game.phase

    @property
    def settings(self) -> GameSettings:
        return self.game.settings

    @property
    def grid(self) -> Grid | None:
        return self.game.grid

    @property
    def players(self) -> list[Player]:
        return self.game.players

    @property
    def current_player_id(self) -> int | None:
        return self.game.current_player_id

    @property
    def pending_battle(self) -> PendingBattle | None:
        return self.game.pending_battle

    @property
    def battle(self) -> BattleState | None:
        return self.game.battle

    @property
    def battle_log(self) -> list[BattleRecord]:
        return self.game.battle_log

    @property
    def winner(self) -> Player | None:
        if self.game.winner_id is None:
            return None
        return self.game.get_player(self.game.winner_id)

    def categories(self) -> list[str]:
        """Topics on offer during TOPIC_SELECTION."""
        return self.questions.categories()

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def start_game(
        self,
        settings: GameSettings,
        player_configs: Sequence[PlayerConfig],
        seed: int | None = None,
    ) -> bool:
        """Generate a map and enter MAP_SELECTION.

        Nothing is changed if generation fails: CapacityError and
        MapGenerationError propagate with the game still in MENU.

        Args:
            settings: Grid size, player count and battle clock
            player_configs: Names and colours; padded or truncated to
                settings.player_count
            seed: Reseed the game RNG for a reproducible game

        Returns:
            True if a game was started, False if not in MENU
        """
        if self.game.phase != GamePhase.MENU:
            logger.debug(f"start_game ignored in phase {self.game.phase.value}")
            return False

        rng = GameRNG(seed) if seed is not None else self.game.rng
        result = generate_map(settings.grid_size, settings.player_count, rng)

        configs = normalize_player_configs(player_configs, settings.player_count, rng)
        players = [
            Player(id=pid, name=cfg.name, color=cfg.color, cells_count=result.cell_counts[pid])
            for pid, cfg in enumerate(configs)
        ]

        game = self.game
        if seed is not None:
            game.seed = seed
            game.rng = rng
            self.questions.rng = rng
        game.settings = settings
        game.player_configs = list(configs)
        game.players = players
        game.grid = result.grid
        game.current_player_id = rng.randrange(len(players))
        game.pending_battle = None
        game.battle = None
        game.battle_log = []
        game.winner_id = None
        game.phase = GamePhase.MAP_SELECTION
        self.battle_engine.discard()

        logger.info(
            f"Game started: {settings.grid_size}x{settings.grid_size}, "
            f"{len(players)} players, {settings.time_limit}s battles, "
            f"{players[game.current_player_id].name} moves first"
        )
        return True

    def select_cell(self, x: int, y: int) -> bool:
        """Attack the cell at (x, y) with the current player.

        Only an enemy-owned cell adjacent to the current player's territory
        is accepted; it records the pending battle and moves to
        TOPIC_SELECTION.

        Returns:
            True if an attack was recorded
        """
        game = self.game
        if game.phase != GamePhase.MAP_SELECTION or game.current_player_id is None:
            logger.debug(f"select_cell ignored in phase {game.phase.value}")
            return False

        cell = game.grid.cell_at(x, y)
        attacker_id = game.current_player_id
        if cell is None or cell.owner_id is None or cell.owner_id == attacker_id:
            return False
        if not game.grid.is_adjacent_to(cell, attacker_id):
            return False

        game.pending_battle = PendingBattle(attacker_id=attacker_id, defender_id=cell.owner_id)
        game.phase = GamePhase.TOPIC_SELECTION
        logger.info(f"Player {attacker_id} attacks player {cell.owner_id} at ({x}, {y})")
        return True

    def select_topic(self, category: str) -> bool:
        """Start the pending battle on ``category``.

        Returns:
            True if the battle started
        """
        game = self.game
        if game.phase != GamePhase.TOPIC_SELECTION or game.pending_battle is None:
            logger.debug(f"select_topic ignored in phase {game.phase.value}")
            return False

        pending = game.pending_battle
        game.battle = self.battle_engine.start_battle(
            attacker_id=pending.attacker_id,
            defender_id=pending.defender_id,
            category=category,
            time_limit=game.settings.time_limit,
            question_source=self.questions.draw,
        )
        game.pending_battle = None
        game.phase = GamePhase.BATTLE
        return True

    def submit_answer(self, answer_index: int) -> AnswerResult:
        """Answer the current battle question for the side on turn."""
        if self.game.phase != GamePhase.BATTLE:
            logger.debug(f"submit_answer ignored in phase {self.game.phase.value}")
            return AnswerResult.IGNORED

        result = self.battle_engine.submit_answer(answer_index)
        self._observe_battle()
        return result

    def tick(self) -> bool:
        """Advance the battle clock by one second.

        The decrement and the end-of-battle check are two separate steps;
        the battle engine never resolves a conquest from inside its tick.

        Returns:
            True if a battle clock was advanced
        """
        if self.game.phase != GamePhase.BATTLE:
            return False

        self.battle_engine.tick()
        self._observe_battle()
        return True

    def end_battle(self, winner_id: int, loser_id: int) -> ConquestResult | None:
        """Resolve the running battle in favour of ``winner_id``.

        Guarded on the BATTLE phase: a second end signal for a battle that
        was already resolved returns None and changes nothing.
        """
        game = self.game
        if game.phase != GamePhase.BATTLE:
            logger.debug("end_battle ignored: battle already resolved")
            return None

        battle = self.battle_engine.state
        if battle is None:
            raise RuntimeError("Phase is BATTLE but no battle is running")
        if {winner_id, loser_id} != {battle.attacker_id, battle.defender_id}:
            raise ValueError(f"Players {winner_id} and {loser_id} are not fighting this battle")

        result = resolve_conquest(game, battle, winner_id, loser_id)

        self.battle_engine.discard()
        game.battle = None

        if check_victory(game):
            game.phase = GamePhase.GAME_OVER
            logger.info(f"Game over: {game.get_player(game.winner_id).name} wins")
        else:
            game.current_player_id = winner_id
            game.phase = GamePhase.MAP_SELECTION

        return result

    def reset_game(self) -> None:
        """Abandon the current game and return to MENU.

        Settings, player configs and custom questions are kept.
        """
        game = self.game
        self.battle_engine.discard()
        game.phase = GamePhase.MENU
        game.grid = None
        game.players = []
        game.current_player_id = None
        game.pending_battle = None
        game.battle = None
        game.battle_log = []
        game.winner_id = None
        logger.info("Game reset to menu")

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def snapshot(self) -> dict:
        """Full state as a plain JSON-compatible dict."""
        return serialize_game(self.game)

    def save(self, storage_key: str = STORAGE_KEY, state_dir: str | Path | None = None) -> Path:
        return save_game(self.game, storage_key=storage_key, state_dir=state_dir)

    @classmethod
    def from_snapshot(cls, data: dict, clock: Callable[[], int] = now_ms) -> "GameController":
        """Controller for a snapshot, or for a fresh MENU game if it is unusable."""
        return cls(restore_game(data), clock=clock)

    @classmethod
    def load(
        cls,
        storage_key: str = STORAGE_KEY,
        state_dir: str | Path | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> "GameController":
        """Controller for the saved game, or for a fresh MENU game if none is usable."""
        return cls(load_game(storage_key=storage_key, state_dir=state_dir), clock=clock)

    # =========================================================================
    # INTERNAL
    # =========================================================================

    def _observe_battle(self) -> ConquestResult | None:
        """Resolve the battle if one side's clock has run out."""
        battle = self.battle_engine.state
        if battle is None:
            return None

        loser_id = self.battle_engine.expired_loser_id()
        if loser_id is None:
            return None

        return self.end_battle(battle.opponent_of(loser_id), loser_id)


def normalize_player_configs(
    configs: Sequence[PlayerConfig], count: int, rng: GameRNG
) -> list[PlayerConfig]:
    """Fit the configured seats to ``count`` players.

    Extra configs are dropped; missing ones get a default name
    ("Player N") and a random colour.
    """
    normalized = list(configs[:count])
    for i in range(len(normalized), count):
        normalized.append(PlayerConfig(name=f"Player {i + 1}", color=rng.color()))
    return normalized
