"""Question source: built-in questions plus user-authored ones."""

import logging

from ..models import Question
from ..utils import GameRNG

logger = logging.getLogger(__name__)

BUILTIN_QUESTIONS: tuple[Question, ...] = (
    Question(
        id=1,
        text="25 * 4 = ?",
        answers=["50", "100", "75", "125"],
        correct_index=1,
        category="Arithmetic",
    ),
    Question(
        id=2,
        text="120 / 6 = ?",
        answers=["20", "12", "60", "30"],
        correct_index=0,
        category="Arithmetic",
    ),
    Question(
        id=5,
        text="Simplify: 2x + 3x",
        answers=["5x", "6x", "5x^2", "x"],
        correct_index=0,
        category="Algebra",
    ),
    Question(
        id=8,
        text="sin(30°)",
        answers=["0", "1", "0.5", "√3/2"],
        correct_index=2,
        category="Trigonometry",
    ),
    Question(
        id=11,
        text="50% of 80",
        answers=["40", "20", "60", "30"],
        correct_index=0,
        category="Percentages",
    ),
)


class QuestionPool:
    """All questions available to battles.

    The built-in questions are always present. Custom questions belong to
    the editor; the pool keeps a reference to the caller's list, so edits
    made through ``save_question`` and ``delete_question`` are visible to
    whoever owns that list (the Game, for persistence).
    """

    def __init__(
        self,
        custom: list[Question] | None = None,
        rng: GameRNG | None = None,
        builtins: tuple[Question, ...] = BUILTIN_QUESTIONS,
    ):
        self.custom = custom if custom is not None else []
        self.rng = rng or GameRNG()
        self.builtins = builtins

    def all_questions(self) -> list[Question]:
        return [*self.builtins, *self.custom]

    def categories(self) -> list[str]:
        """Distinct categories in order of first appearance."""
        seen: dict[str, None] = {}
        for question in self.all_questions():
            seen.setdefault(question.category, None)
        return list(seen)

    def draw(self, category: str | None = None) -> Question:
        """Pick a random question.

        Questions tagged with ``category`` are preferred; if there are none
        (or no category is given) the whole pool is used.

        Raises:
            LookupError: If the pool is empty
        """
        source = self.all_questions()
        if category:
            matching = [q for q in source if q.category == category]
            if matching:
                source = matching
            else:
                logger.debug(f"No questions in category {category!r}, drawing from whole pool")
        if not source:
            raise LookupError("Question pool is empty")
        return self.rng.choice(source)

    def next_id(self) -> int:
        """An ID not used by any built-in or custom question."""
        return max((q.id for q in self.all_questions()), default=0) + 1

    def save_question(self, question: Question) -> None:
        """Insert a custom question, or replace the one with the same id."""
        for i, existing in enumerate(self.custom):
            if existing.id == question.id:
                self.custom[i] = question
                return
        self.custom.append(question)

    def delete_question(self, question_id: int) -> bool:
        """Remove a custom question by id. Returns False if it was not found."""
        for i, existing in enumerate(self.custom):
            if existing.id == question_id:
                del self.custom[i]
                return True
        return False

    def delete_category(self, category: str) -> int:
        """Remove every custom question of a category; returns how many."""
        kept = [q for q in self.custom if q.category != category]
        removed = len(self.custom) - len(kept)
        self.custom[:] = kept
        return removed
