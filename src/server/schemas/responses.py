"""Pydantic response schemas for API endpoints."""

from pydantic import BaseModel


class GameStateResponse(BaseModel):
    """Response containing current game state."""

    phase: str
    state: dict


class CommandResponse(BaseModel):
    """Response after a game command."""

    accepted: bool
    phase: str
    result: str | None = None
    state: dict


class CategoriesResponse(BaseModel):
    """Topics available for battles."""

    categories: list[str]


class QuestionsResponse(BaseModel):
    """Custom questions after a read or an edit."""

    questions: list[dict]
    removed: int | None = None  # Set by delete endpoints
