"""Game session management for the local presentation layer."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from fastapi import WebSocket

from ..analysis import calculate_player_stats
from ..engine.battle import AnswerResult
from ..engine.game_controller import GameController
from ..models import BattleState, GameSettings, PlayerConfig
from ..models.question import Question
from ..utils import STORAGE_KEY

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """The single active game behind the API.

    Wraps the controller with persistence (every mutation is saved under
    the versioned storage key) and the WebSocket connections that receive
    state updates.
    """

    controller: GameController = field(default_factory=GameController)
    connections: list[WebSocket] = field(default_factory=list)
    storage_key: str = STORAGE_KEY
    state_dir: Path | None = None  # None: default state directory

    @classmethod
    def load(cls, storage_key: str = STORAGE_KEY, state_dir: Path | None = None) -> "GameSession":
        """Resume the saved game, or start at the menu if there is none."""
        controller = GameController.load(storage_key=storage_key, state_dir=state_dir)
        logger.info(f"Session loaded in phase {controller.phase.value}")
        return cls(controller=controller, storage_key=storage_key, state_dir=state_dir)

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def start_game(
        self, settings: GameSettings, player_configs: list[PlayerConfig], seed: int | None = None
    ) -> bool:
        accepted = self.controller.start_game(settings, player_configs, seed=seed)
        if accepted:
            self.persist()
        return accepted

    def select_cell(self, x: int, y: int) -> bool:
        accepted = self.controller.select_cell(x, y)
        if accepted:
            self.persist()
        return accepted

    def select_topic(self, category: str) -> bool:
        accepted = self.controller.select_topic(category)
        if accepted:
            self.persist()
        return accepted

    def submit_answer(self, index: int) -> AnswerResult:
        result = self.controller.submit_answer(index)
        if result != AnswerResult.IGNORED:
            self.persist()
        return result

    def reset_game(self) -> None:
        self.controller.reset_game()
        self.persist()

    def save_question(self, question: Question) -> None:
        self.controller.questions.save_question(question)
        self.persist()

    def delete_question(self, question_id: int) -> bool:
        removed = self.controller.questions.delete_question(question_id)
        if removed:
            self.persist()
        return removed

    def delete_category(self, category: str) -> int:
        removed = self.controller.questions.delete_category(category)
        if removed:
            self.persist()
        return removed

    def tick(self) -> bool:
        """Advance the battle clock; True if a battle was running."""
        advanced = self.controller.tick()
        if advanced:
            self.persist()
        return advanced

    def persist(self) -> None:
        try:
            self.controller.save(storage_key=self.storage_key, state_dir=self.state_dir)
        except OSError as e:
            logger.error(f"Failed to save game: {e}", exc_info=True)

    # =========================================================================
    # VIEWS
    # =========================================================================

    def get_state(self) -> dict:
        """Serialize the game for the presentation layer.

        The correct answer of the current question is not included.

        Returns:
            Dictionary with phase, board, players, battle and history
        """
        controller = self.controller
        settings = controller.settings
        grid = controller.grid
        pending = controller.pending_battle
        winner = controller.winner

        return {
            "phase": controller.phase.value,
            "settings": {
                "gridSize": settings.grid_size,
                "playerCount": settings.player_count,
                "timeLimit": settings.time_limit,
            },
            "players": [
                {
                    "id": p.id,
                    "name": p.name,
                    "color": p.color,
                    "isAlive": p.is_alive,
                    "cellsCount": p.cells_count,
                }
                for p in controller.players
            ],
            "grid": (
                [{"x": c.x, "y": c.y, "ownerId": c.owner_id} for c in grid]
                if grid is not None
                else []
            ),
            "currentPlayerId": controller.current_player_id,
            "pendingBattle": (
                {"attackerId": pending.attacker_id, "defenderId": pending.defender_id}
                if pending is not None
                else None
            ),
            "battle": self._serialize_battle(controller.battle),
            "battleLog": [
                {
                    "attackerName": r.attacker_name,
                    "defenderName": r.defender_name,
                    "winnerName": r.winner_name,
                    "category": r.category,
                    "attackerScore": r.attacker_score,
                    "defenderScore": r.defender_score,
                    "duration": r.duration,
                }
                for r in controller.battle_log
            ],
            "stats": [
                {
                    "name": s.name,
                    "wins": s.wins,
                    "battles": s.battles,
                    "totalScore": s.total_score,
                }
                for s in calculate_player_stats(controller.players, controller.battle_log)
            ],
            "winner": winner.name if winner is not None else None,
            "categories": controller.categories(),
        }

    def custom_questions(self) -> list[dict]:
        """Custom questions for the editor, answers included."""
        return [
            {**self._serialize_question(q), "correctIndex": q.correct_index}
            for q in self.controller.questions.custom
        ]

    def _serialize_battle(self, battle: BattleState | None) -> dict | None:
        """Convert BattleState to dict for API response."""
        if battle is None:
            return None
        return {
            "attackerId": battle.attacker_id,
            "defenderId": battle.defender_id,
            "attackerTime": battle.attacker_time,
            "defenderTime": battle.defender_time,
            "currentTurnId": battle.current_turn_id,
            "category": battle.category,
            "question": self._serialize_question(battle.current_question),
            "penaltyUntil": battle.penalty_until,
            "penaltyActive": self.controller.battle_engine.penalty_active(),
            "attackerScore": battle.attacker_score,
            "defenderScore": battle.defender_score,
        }

    def _serialize_question(self, question: Question | None) -> dict | None:
        if question is None:
            return None
        return {
            "id": question.id,
            "text": question.text,
            "answers": list(question.answers),
            "category": question.category,
        }

    # =========================================================================
    # WEBSOCKETS
    # =========================================================================

    async def broadcast(self, message: dict):
        """Send message to all connected WebSocket clients.

        Args:
            message: Dictionary to send as JSON
        """
        disconnected = []
        for ws in self.connections:
            try:
                await ws.send_json(message)
            except Exception as e:
                logger.warning(f"Failed to send to WebSocket: {e}")
                disconnected.append(ws)

        # Remove disconnected clients
        for ws in disconnected:
            self.connections.remove(ws)

    def add_connection(self, websocket: WebSocket):
        """Add a WebSocket connection to this session."""
        self.connections.append(websocket)
        logger.info(f"WebSocket connected, total: {len(self.connections)}")

    def remove_connection(self, websocket: WebSocket):
        """Remove a WebSocket connection from this session."""
        if websocket in self.connections:
            self.connections.remove(websocket)
            logger.info(f"WebSocket disconnected, remaining: {len(self.connections)}")
