"""Game engine components."""

from .battle import AnswerResult, BattleEngine
from .conquest import ConquestResult, resolve_conquest
from .errors import CapacityError, ConquestError, MapGenerationError
from .game_controller import GameController
from .map_generator import MapResult, generate_map
from .question_pool import BUILTIN_QUESTIONS, QuestionPool
from .victory import check_victory

__all__ = [
    "AnswerResult",
    "BattleEngine",
    "BUILTIN_QUESTIONS",
    "CapacityError",
    "check_victory",
    "ConquestError",
    "ConquestResult",
    "GameController",
    "generate_map",
    "MapGenerationError",
    "MapResult",
    "QuestionPool",
    "resolve_conquest",
]
