"""FastAPI server for Quiz Conquest.

Exposes the single local game to a browser front end: the five game
commands, read-only state, and a WebSocket stream of state updates. A
background task ticks the battle clock once per second.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from ..engine.battle import AnswerResult
from ..engine.errors import ConquestError
from ..models import GameSettings, PlayerConfig, Question
from ..utils import TICK_SECONDS
from .schemas.requests import (
    QuestionRequest,
    SelectCellRequest,
    SelectTopicRequest,
    StartGameRequest,
    SubmitAnswerRequest,
)
from .schemas.responses import (
    CategoriesResponse,
    CommandResponse,
    GameStateResponse,
    QuestionsResponse,
)
from .session import GameSession

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# The one active game
session = GameSession()


async def run_ticker(active: GameSession) -> None:
    """Tick the battle clock every second and push the new state."""
    while True:
        await asyncio.sleep(TICK_SECONDS)
        try:
            if active.tick():
                await active.broadcast({"type": "TICK", "state": active.get_state()})
        except Exception as e:
            logger.error(f"Battle tick failed: {e}", exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown."""
    # Startup
    logger.info("Quiz Conquest server starting...")
    loaded = GameSession.load()
    session.controller = loaded.controller
    ticker = asyncio.create_task(run_ticker(session))
    yield
    # Shutdown
    logger.info("Quiz Conquest server shutting down...")
    ticker.cancel()
    session.persist()


# Create FastAPI app
app = FastAPI(
    title="Quiz Conquest API",
    description="Local API for the quiz territory-conquest game",
    version="1.0.0",
    lifespan=lifespan,
)

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _command_response(accepted: bool, result: str | None = None) -> CommandResponse:
    return CommandResponse(
        accepted=accepted,
        phase=session.controller.phase.value,
        result=result,
        state=session.get_state(),
    )


async def _notify() -> None:
    await session.broadcast({"type": "GAME_STATE", "state": session.get_state()})


# ============================================
# API ENDPOINTS
# ============================================


@app.get("/api")
async def api_root():
    """API root endpoint - server health check."""
    return {
        "service": "Quiz Conquest",
        "status": "operational",
        "phase": session.controller.phase.value,
    }


@app.get("/api/game", response_model=GameStateResponse)
async def get_game_state():
    """Get current game state."""
    return GameStateResponse(phase=session.controller.phase.value, state=session.get_state())


@app.post("/api/game/start", response_model=CommandResponse)
async def start_game(request: StartGameRequest):
    """Start a new game from the menu.

    Example:
        POST /api/game/start
        {
          "gridSize": 5,
          "playerCount": 2,
          "timeLimit": 45,
          "players": [{"name": "Ann", "color": "#FF5733"}]
        }
    """
    settings = GameSettings(
        grid_size=request.gridSize,
        player_count=request.playerCount,
        time_limit=request.timeLimit,
    )
    configs = [PlayerConfig(name=p.name, color=p.color) for p in request.players]

    try:
        accepted = session.start_game(settings, configs, seed=request.seed)
    except ConquestError as e:
        logger.warning(f"Failed to start game: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to start game: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to start game: {str(e)}")

    await _notify()
    return _command_response(accepted)


@app.post("/api/game/cell", response_model=CommandResponse)
async def select_cell(request: SelectCellRequest):
    """Click a board cell to attack it."""
    accepted = session.select_cell(request.x, request.y)
    if accepted:
        await _notify()
    return _command_response(accepted)


@app.post("/api/game/topic", response_model=CommandResponse)
async def select_topic(request: SelectTopicRequest):
    """Choose the topic of the pending battle."""
    accepted = session.select_topic(request.category)
    if accepted:
        await _notify()
    return _command_response(accepted)


@app.post("/api/game/answer", response_model=CommandResponse)
async def submit_answer(request: SubmitAnswerRequest):
    """Answer the current battle question."""
    result = session.submit_answer(request.index)
    accepted = result != AnswerResult.IGNORED
    if accepted:
        await _notify()
    return _command_response(accepted, result=result.value)


@app.post("/api/game/reset", response_model=CommandResponse)
async def reset_game():
    """Abandon the current game and return to the menu."""
    session.reset_game()
    await _notify()
    return _command_response(True)


@app.get("/api/questions/categories", response_model=CategoriesResponse)
async def get_categories():
    """List the topics battles can be fought on."""
    return CategoriesResponse(categories=session.controller.categories())


@app.get("/api/questions", response_model=QuestionsResponse)
async def list_questions():
    """List the custom questions shown in the editor."""
    return QuestionsResponse(questions=session.custom_questions())


@app.post("/api/questions", response_model=QuestionsResponse)
async def save_question(request: QuestionRequest):
    """Add a custom question, or replace the one with the same id."""
    question_id = request.id
    if question_id is None:
        question_id = session.controller.questions.next_id()
    session.save_question(
        Question(
            id=question_id,
            text=request.text,
            answers=list(request.answers),
            correct_index=request.correctIndex,
            category=request.category,
        )
    )
    await _notify()
    return QuestionsResponse(questions=session.custom_questions())


@app.delete("/api/questions/{question_id}", response_model=QuestionsResponse)
async def delete_question(question_id: int):
    """Delete one custom question."""
    if not session.delete_question(question_id):
        raise HTTPException(status_code=404, detail=f"Question {question_id} not found")
    await _notify()
    return QuestionsResponse(questions=session.custom_questions(), removed=1)


@app.delete("/api/questions/category/{category}", response_model=QuestionsResponse)
async def delete_category(category: str):
    """Delete every custom question of a category."""
    removed = session.delete_category(category)
    if removed:
        await _notify()
    return QuestionsResponse(questions=session.custom_questions(), removed=removed)


# ============================================
# WEBSOCKET ENDPOINT
# ============================================


@app.websocket("/ws/game")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket connection for real-time game updates.

    Clients receive:
    - CONNECTED: Initial state
    - GAME_STATE: State after every accepted command
    - TICK: State after every battle clock tick
    """
    await websocket.accept()
    session.add_connection(websocket)

    try:
        await websocket.send_json({"type": "CONNECTED", "state": session.get_state()})

        # Keep connection alive and handle client messages
        while True:
            data = await websocket.receive_json()

            # Handle ping/pong for keepalive
            if data.get("type") == "PING":
                await websocket.send_json({"type": "PONG"})

    except WebSocketDisconnect:
        logger.info("WebSocket disconnected")
    except Exception as e:
        logger.error(f"WebSocket error: {e}", exc_info=True)
    finally:
        session.remove_connection(websocket)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000, log_level="info")
