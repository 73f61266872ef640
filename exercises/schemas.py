"""Exercise models produced by the generators.

These are plain data: generators build them from source text or vocabulary,
practice controllers keep them next to the learner's answers, and the
persisted practice state stores the question models as JSON.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

# =============================================================================
# Gap Templates (Fill and Write modes)
# =============================================================================


class TextSegment(BaseModel):
    """Literal text of a sentence template, rendered as-is."""

    kind: Literal["text"] = "text"
    content: str


class GapSegment(BaseModel):
    """A blanked-out word.

    Examples:
        - gap_id=3, original_word="Kino", hint="K___"
    """

    kind: Literal["gap"] = "gap"
    gap_id: int
    original_word: str
    hint: str


TemplateSegment = Annotated[TextSegment | GapSegment, Field(discriminator="kind")]


class GapTemplate(BaseModel):
    """A sentence split into literal text and gaps.

    Substituting each gap's original word back in gives the sentence exactly,
    including punctuation and internal spacing.
    """

    sentence: str
    sentence_index: int = 0  # Position of the sentence in its text
    segments: list[TemplateSegment] = Field(default_factory=list)
    word_bank: list[str] = Field(default_factory=list)  # Seeded initial order

    @property
    def gaps(self) -> list[GapSegment]:
        return [s for s in self.segments if isinstance(s, GapSegment)]

    @property
    def gap_ids(self) -> list[int]:
        return [g.gap_id for g in self.gaps]

    def get_gap(self, gap_id: int) -> GapSegment | None:
        for gap in self.gaps:
            if gap.gap_id == gap_id:
                return gap
        return None

    def render(
        self,
        answers: dict[int, str | None] | None = None,
        placeholder: str = "___",
    ) -> str:
        """Render the sentence with answers (or placeholders) in the gaps."""
        answers = answers or {}
        parts = []
        for segment in self.segments:
            if isinstance(segment, TextSegment):
                parts.append(segment.content)
            else:
                parts.append(answers.get(segment.gap_id) or placeholder)
        return "".join(parts)

    def reconstruct(self) -> str:
        """Render the template with every gap filled by its original word."""
        return self.render({g.gap_id: g.original_word for g in self.gaps})


# =============================================================================
# Word Order
# =============================================================================


class OrderExercise(BaseModel):
    """A sentence to rebuild from its shuffled words.

    Examples:
        - correct_order=["Der", "Hund", "läuft", "schnell."]
        - shuffled_pool=["schnell.", "Der", "läuft", "Hund"]
    """

    sentence: str
    correct_order: list[str]
    shuffled_pool: list[str]


# =============================================================================
# Flashcard Quiz
# =============================================================================


class QuizQuestion(BaseModel):
    """A multiple choice question built from one vocabulary entry."""

    subject_id: str  # VocabEntry.id the question was built from
    prompt_text: str
    correct_answer: str
    options: list[str]
    selected_answer: str | None = None
    is_correct: bool | None = None

    @property
    def answered(self) -> bool:
        return self.selected_answer is not None


# =============================================================================
# Speaking
# =============================================================================


class WordResult(BaseModel):
    word: str
    correct: bool


class SpeechComparison(BaseModel):
    """Outcome of comparing a transcript with the expected sentence."""

    expected: str
    actual: str
    is_correct: bool
    word_results: list[WordResult] = Field(default_factory=list)
