"""Quiz question data model."""

from dataclasses import dataclass, field

ANSWERS_PER_QUESTION = 4


@dataclass
class Question:
    """A multiple-choice question with exactly four answers.

    Questions are owned by the question pool; the battle engine only reads
    them.
    """

    id: int
    text: str
    answers: list[str] = field(default_factory=list)
    correct_index: int = 0  # 0-based index into answers
    category: str = ""  # Free-form topic label

    def __post_init__(self):
        """Validate question data after initialization."""
        if len(self.answers) != ANSWERS_PER_QUESTION:
            raise ValueError(
                f"Invalid answers: {len(self.answers)} given (must be {ANSWERS_PER_QUESTION})"
            )
        if not (0 <= self.correct_index < ANSWERS_PER_QUESTION):
            raise ValueError(
                f"Invalid correct_index: {self.correct_index} "
                f"(must be 0-{ANSWERS_PER_QUESTION - 1})"
            )

    def is_correct(self, answer_index: int) -> bool:
        return answer_index == self.correct_index
