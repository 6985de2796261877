"""Game phase enumeration."""

from enum import Enum


class GamePhase(str, Enum):
    """Top-level phases of a game.

    MENU -> MAP_SELECTION -> TOPIC_SELECTION -> BATTLE -> MAP_SELECTION ...
    until one player is left (GAME_OVER). Only a reset leaves GAME_OVER.
    """

    MENU = "MENU"
    MAP_SELECTION = "MAP_SELECTION"
    TOPIC_SELECTION = "TOPIC_SELECTION"
    BATTLE = "BATTLE"
    GAME_OVER = "GAME_OVER"
