"""Pydantic request schemas for API endpoints."""

from pydantic import BaseModel, Field

from ...utils.constants import (
    DEFAULT_GRID_SIZE,
    DEFAULT_PLAYER_COUNT,
    DEFAULT_TIME_LIMIT,
    GRID_SIZE_RANGE,
    MIN_PLAYERS,
    TIME_LIMIT_RANGE,
)


class PlayerConfigRequest(BaseModel):
    """Name and colour of one seat."""

    name: str = Field(min_length=1, description="Display name")
    color: str = Field(pattern=r"^#[0-9A-Fa-f]{6}$", description="Colour as #RRGGBB")


class StartGameRequest(BaseModel):
    """Request to start a new game from the menu."""

    gridSize: int = Field(  # noqa: N815
        default=DEFAULT_GRID_SIZE,
        ge=GRID_SIZE_RANGE[0],
        le=GRID_SIZE_RANGE[1],
        description="Side length of the square board",
    )
    playerCount: int = Field(  # noqa: N815
        default=DEFAULT_PLAYER_COUNT, ge=MIN_PLAYERS, description="Number of players"
    )
    timeLimit: int = Field(  # noqa: N815
        default=DEFAULT_TIME_LIMIT,
        ge=TIME_LIMIT_RANGE[0],
        le=TIME_LIMIT_RANGE[1],
        description="Seconds on each side's battle clock",
    )
    players: list[PlayerConfigRequest] = Field(
        default_factory=list, description="Seat names and colours (padded if short)"
    )
    seed: int | None = Field(default=None, description="Optional RNG seed for determinism")


class SelectCellRequest(BaseModel):
    """Click on a board cell."""

    x: int = Field(ge=0)
    y: int = Field(ge=0)


class SelectTopicRequest(BaseModel):
    """Topic chosen for the pending battle."""

    category: str = Field(min_length=1)


class SubmitAnswerRequest(BaseModel):
    """Answer button pressed in a battle."""

    index: int = Field(ge=0, le=3, description="0-based answer index")


class QuestionRequest(BaseModel):
    """Custom question from the editor.

    Without an id a new question is created; with the id of an existing
    custom question that question is replaced.
    """

    id: int | None = Field(default=None, ge=0)
    text: str = Field(min_length=1)
    answers: list[str] = Field(min_length=4, max_length=4)
    correctIndex: int = Field(ge=0, le=3)  # noqa: N815
    category: str = Field(min_length=1)
