"""Timed question duel between an attacker and a defender.

This module handles:
1. Starting a duel (both clocks full, attacker answers first)
2. Answer evaluation (score and turn flip, or a penalty window)
3. The per-second clock decrement of the side whose turn it is
4. Reporting which side has run out of time

It never resolves a conquest itself; the controller observes the clocks
after every mutation and hands a finished duel to the conquest resolver.
"""

import logging
from collections.abc import Callable
from enum import Enum

from ..models import BattleState, Question
from ..utils import PENALTY_MS, TICK_SECONDS, now_ms

logger = logging.getLogger(__name__)

QuestionSource = Callable[[str | None], Question]


class AnswerResult(str, Enum):
    """Outcome of one submitted answer."""

    IGNORED = "ignored"  # No battle, no question, or penalty window active
    CORRECT = "correct"
    INCORRECT = "incorrect"


class BattleEngine:
    """Runs a single duel at a time.

    The engine owns the live BattleState from ``start_battle`` until
    ``discard``. Time for the penalty window comes from ``clock`` (epoch
    milliseconds) so tests can drive it by hand.
    """

    def __init__(self, clock: Callable[[], int] = now_ms, penalty_ms: int = PENALTY_MS):
        self.clock = clock
        self.penalty_ms = penalty_ms
        self.state: BattleState | None = None
        self.question_source: QuestionSource | None = None

    def start_battle(
        self,
        attacker_id: int,
        defender_id: int,
        category: str,
        time_limit: int,
        question_source: QuestionSource,
    ) -> BattleState:
        """Begin a duel with both clocks at ``time_limit`` seconds.

        Args:
            attacker_id: Player who clicked the enemy cell
            defender_id: Owner of that cell
            category: Topic the questions are drawn from
            time_limit: Starting seconds on each clock
            question_source: Callable drawing a question for a category

        Returns:
            The new BattleState (also kept on ``self.state``)
        """
        if time_limit < 1:
            raise ValueError(f"Invalid time_limit: {time_limit} (must be >= 1)")

        self.question_source = question_source
        self.state = BattleState(
            attacker_id=attacker_id,
            defender_id=defender_id,
            attacker_time=time_limit,
            defender_time=time_limit,
            current_turn_id=attacker_id,
            category=category,
            time_limit=time_limit,
            current_question=question_source(category),
        )

        logger.info(
            f"Battle started: player {attacker_id} attacks player {defender_id} "
            f"on {category!r} ({time_limit}s each)"
        )
        return self.state

    def restore(self, state: BattleState, question_source: QuestionSource) -> None:
        """Resume a duel loaded from a snapshot."""
        self.state = state
        self.question_source = question_source

    def penalty_active(self, now: int | None = None) -> bool:
        if self.state is None or self.state.penalty_until is None:
            return False
        if now is None:
            now = self.clock()
        return now < self.state.penalty_until

    def submit_answer(self, answer_index: int) -> AnswerResult:
        """Evaluate an answer for the side whose turn it is.

        A correct answer scores for the answering side, passes the turn and
        draws a new question. A wrong answer opens the penalty window and
        draws a new question, but the same side keeps the turn. While the
        window is open every answer is ignored.

        The engine does not know who clicked: the caller is expected to only
        offer input to the active side.
        """
        state = self.state
        if state is None or state.current_question is None:
            return AnswerResult.IGNORED

        now = self.clock()
        if self.penalty_active(now):
            logger.debug(f"Answer {answer_index} ignored: penalty until {state.penalty_until}")
            return AnswerResult.IGNORED

        answering_id = state.current_turn_id
        if state.current_question.is_correct(answer_index):
            if answering_id == state.attacker_id:
                state.attacker_score += 1
            else:
                state.defender_score += 1
            state.current_turn_id = state.opponent_of(answering_id)
            state.current_question = self._draw(state.category)
            logger.debug(f"Player {answering_id} answered correctly, turn passes")
            return AnswerResult.CORRECT

        state.penalty_until = now + self.penalty_ms
        state.current_question = self._draw(state.category)
        logger.debug(f"Player {answering_id} answered wrong, penalty until {state.penalty_until}")
        return AnswerResult.INCORRECT

    def tick(self) -> None:
        """Take one second off the active side's clock.

        Only the countdown changes here. Whether the duel is over is decided
        by the caller through ``expired_loser_id`` afterwards.
        """
        state = self.state
        if state is None:
            return
        if state.current_turn_id == state.attacker_id:
            state.attacker_time = max(0, state.attacker_time - TICK_SECONDS)
        else:
            state.defender_time = max(0, state.defender_time - TICK_SECONDS)

    def expired_loser_id(self) -> int | None:
        """Return the player whose clock is at or below zero, if any.

        The active side is checked first since only its clock moves.
        """
        state = self.state
        if state is None:
            return None
        active = state.current_turn_id
        if state.time_of(active) <= 0:
            return active
        other = state.opponent_of(active)
        if state.time_of(other) <= 0:
            return other
        return None

    def discard(self) -> BattleState | None:
        """Drop the live duel and return its final state."""
        state, self.state = self.state, None
        self.question_source = None
        return state

    def _draw(self, category: str) -> Question:
        if self.question_source is None:
            raise RuntimeError("Battle has no question source")
        return self.question_source(category)
