from rich import box
from rich.align import Align
from rich.console import Group
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from exercises.base import clean_word
from exercises.schemas import GapSegment, GapTemplate, QuizQuestion, SpeechComparison
from models import COUNTED_PROGRESS_KEYS, TextProgress, Topic, ValidationState, VocabEntry
from ui.styles import (
    ACCENT_GOLD,
    ACCENT_RED,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    SUCCESS_GREEN,
    TEXT_WHITE,
    get_score_style,
    get_validation_style,
    progress_bar,
    themed,
)


def _position_line(number: int, total: int) -> Text:
    percent = number / total * 100 if total else 0
    return Text(
        f"[{progress_bar(percent)}] Sentence {number}/{total}\n",
        Style(color=MUTED_GRAY),
    )


def _border_style(state: ValidationState) -> Style | str:
    if state == ValidationState.IDLE:
        return ACCENT_RED
    return get_validation_style(state)


def _status_subtitle(state: ValidationState) -> Text | None:
    if state == ValidationState.CORRECT:
        return Text("✓ Richtig!", get_validation_style(state))
    if state == ValidationState.INCORRECT:
        return Text("✗ Nicht ganz!", get_validation_style(state))
    return None


class TopicTable:
    """Topics and their texts with practice completion."""

    def __init__(
        self,
        topics: list[Topic],
        progress: dict[tuple[str, str], TextProgress] | None = None,
    ):
        self.topics = topics
        self.progress = progress or {}

    def render(self) -> Panel:
        table = Table(
            show_header=True,
            header_style=Style(color=ACCENT_RED, bold=True),
            border_style=MUTED_GRAY,
            box=box.HEAVY,
        )
        table.add_column("Topic", style=Style(color=ACCENT_GOLD, bold=True))
        table.add_column("Text ID", style=Style(color=INFO_BLUE))
        table.add_column("Title", style=Style(color=TEXT_WHITE))
        table.add_column("Practice", justify="center")

        for topic in self.topics:
            for i, text in enumerate(topic.texts):
                progress = self.progress.get((topic.id, text.id), TextProgress())
                done = progress.completion_count
                if progress.is_complete:
                    style = Style(color=SUCCESS_GREEN, bold=True)
                else:
                    style = Style(color=MUTED_GRAY)
                table.add_row(
                    topic.id if i == 0 else "",
                    text.id,
                    text.title,
                    Text(f"{done}/{len(COUNTED_PROGRESS_KEYS)}", style=style),
                )

        return Panel(
            Align.center(table),
            title="Topics",
            border_style=ACCENT_GOLD,
            box=box.HEAVY,
            padding=(1, 1),
        )

    def __rich__(self) -> Panel:
        return self.render()


class ReaderPanel:
    """A text split into numbered sentences, with saved words highlighted."""

    def __init__(self, title: str, sentences: list[str], saved_terms: list[str] | None = None):
        self.title = title
        self.sentences = sentences
        self.saved_terms = {t.lower() for t in saved_terms or []}

    def render(self) -> Panel:
        content = Text()
        for number, sentence in enumerate(self.sentences, start=1):
            content.append(f"{number:>3}. ", Style(color=MUTED_GRAY))
            for i, token in enumerate(sentence.split(" ")):
                if i:
                    content.append(" ")
                saved = clean_word(token).lower() in self.saved_terms
                content.append(token, themed("saved_word" if saved else "german"))
            content.append("\n")

        return Panel(
            Align.left(content),
            title=self.title,
            subtitle="Saved words are underlined",
            border_style=ACCENT_RED,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class GapSentencePanel:
    """A gap sentence with the learner's answers, for fill and write modes."""

    def __init__(
        self,
        template: GapTemplate,
        answers: dict[int, str | None],
        validation_state: ValidationState = ValidationState.IDLE,
        incorrect_gap_ids: list[int] | None = None,
        word_bank: list[str] | None = None,
        show_hints: bool = False,
        number: int = 0,
        total: int = 0,
    ):
        self.template = template
        self.answers = answers
        self.validation_state = validation_state
        self.incorrect_gap_ids = set(incorrect_gap_ids or [])
        self.word_bank = word_bank
        self.show_hints = show_hints
        self.number = number
        self.total = total

    def render(self) -> Panel:
        content = Text()
        if self.total:
            content.append(_position_line(self.number, self.total))
            content.append("\n")

        gap_number = 0
        for segment in self.template.segments:
            if not isinstance(segment, GapSegment):
                content.append(segment.content, themed("german"))
                continue
            gap_number += 1
            answer = self.answers.get(segment.gap_id)
            style = themed("gap_incorrect" if segment.gap_id in self.incorrect_gap_ids else "gap")
            if answer:
                content.append(f"[{gap_number}:{answer}]", style)
            elif self.show_hints:
                content.append(f"[{gap_number}:{segment.hint}]", style)
            else:
                content.append(f"[{gap_number}:___]", style)

        if self.word_bank is not None:
            content.append("\n\n")
            content.append("Words: ", Style(color=MUTED_GRAY))
            for i, word in enumerate(self.word_bank, start=1):
                content.append(f"{i}. ", themed("option_label"))
                content.append(f"{word}  ", themed("option_text"))

        return Panel(
            Align.left(content),
            title="Fill" if self.word_bank is not None else "Write",
            subtitle=_status_subtitle(self.validation_state),
            border_style=_border_style(self.validation_state),
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class OrderPanel:
    """The placed words of a sentence above the remaining word pool."""

    def __init__(
        self,
        pool: list[str],
        placed: list[str],
        validation_state: ValidationState = ValidationState.IDLE,
        number: int = 0,
        total: int = 0,
    ):
        self.pool = pool
        self.placed = placed
        self.validation_state = validation_state
        self.number = number
        self.total = total

    def render(self) -> Panel:
        content = Text()
        if self.total:
            content.append(_position_line(self.number, self.total))
            content.append("\n")

        content.append("Sentence: ", Style(color=MUTED_GRAY))
        content.append(" ".join(self.placed) or "…", themed("german"))
        content.append("\n\n")

        for i, word in enumerate(self.pool, start=1):
            content.append(f"{i}. ", themed("option_label"))
            content.append(word, themed("option_text"))
            content.append("\n")

        return Panel(
            Align.left(content),
            title="Order",
            subtitle=_status_subtitle(self.validation_state)
            or "Enter numbers in order (e.g., 2 1 3) or 'q' to quit",
            border_style=_border_style(self.validation_state),
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class QuizPanel:
    """A flashcard question with lettered options."""

    def __init__(self, question: QuizQuestion, number: int, total: int, direction_label: str = ""):
        self.question = question
        self.number = number
        self.total = total
        self.direction_label = direction_label

    def render(self) -> Panel:
        content = Text()
        percent = self.number / self.total * 100 if self.total else 0
        content.append(
            f"[{progress_bar(percent)}] Card {self.number}/{self.total}\n\n",
            Style(color=MUTED_GRAY),
        )
        content.append(self.question.prompt_text, Style(color=ACCENT_RED, bold=True))
        content.append("\n\n")

        for i, option in enumerate(self.question.options):
            label = chr(65 + i)
            if self.question.answered and option == self.question.correct_answer:
                style = Style(color=SUCCESS_GREEN, bold=True)
            elif self.question.answered and option == self.question.selected_answer:
                style = Style(color=ERROR_RED, bold=True)
            else:
                style = Style(color=TEXT_WHITE)
            content.append(f"{label}. ", themed("option_label"))
            content.append(option, style)
            content.append("\n")

        letters = ", ".join(chr(65 + i) for i in range(len(self.question.options)))
        return Panel(
            Align.left(content),
            title=f"Cards {self.direction_label}".strip(),
            subtitle=f"Type {letters} (or 'q' to quit)",
            border_style=ACCENT_RED,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class ResultsPanel:
    """Score summary after the last flashcard."""

    def __init__(self, questions: list[QuizQuestion], percentage: int, verdict: str):
        self.questions = questions
        self.percentage = percentage
        self.verdict = verdict

    def render(self) -> Panel:
        correct = sum(1 for q in self.questions if q.is_correct)

        summary = Text()
        summary.append(f"{self.percentage}%\n", get_score_style(self.percentage))
        summary.append(
            f"{correct} of {len(self.questions)} correct\n", Style(color=MUTED_GRAY)
        )
        summary.append(self.verdict, Style(color=ACCENT_GOLD, bold=True))

        table = Table(show_header=False, border_style=MUTED_GRAY, box=box.SIMPLE)
        table.add_column("Prompt", style=Style(color=TEXT_WHITE))
        table.add_column("Answer")
        for question in self.questions:
            if question.is_correct:
                answer = Text(f"✓ {question.correct_answer}", Style(color=SUCCESS_GREEN))
            else:
                answer = Text(f"✗ {question.correct_answer}", Style(color=ERROR_RED))
            table.add_row(question.prompt_text, answer)

        return Panel(
            Group(Align.center(summary), Align.center(table)),
            title="Results",
            border_style=ACCENT_GOLD,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class SpeechResultPanel:
    """Word-by-word comparison of a transcript with the spoken sentence."""

    def __init__(self, comparison: SpeechComparison):
        self.comparison = comparison

    def render(self) -> Panel:
        content = Text()
        content.append("Expected: ", Style(color=MUTED_GRAY))
        for result in self.comparison.word_results:
            color = SUCCESS_GREEN if result.correct else ERROR_RED
            content.append(result.word + " ", Style(color=color, bold=True))
        content.append("\n")
        content.append("You said: ", Style(color=MUTED_GRAY))
        content.append(self.comparison.actual or "…", Style(color=TEXT_WHITE))

        if self.comparison.is_correct:
            title, border = "✓ Richtig!", SUCCESS_GREEN
        else:
            title, border = "✗ Nicht ganz!", ERROR_RED
        return Panel(
            Align.left(content),
            title=title,
            border_style=border,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class ProgressPanel:
    """Per-mode completion of one text."""

    def __init__(self, title: str, progress: TextProgress):
        self.title = title
        self.progress = progress

    def render(self) -> Panel:
        table = Table(show_header=False, border_style=MUTED_GRAY, box=box.SIMPLE)
        table.add_column("Mode", style=Style(color=MUTED_GRAY))
        table.add_column("Done", justify="center")

        for key in COUNTED_PROGRESS_KEYS:
            if self.progress.is_set(key):
                mark = Text("✓", Style(color=SUCCESS_GREEN, bold=True))
            else:
                mark = Text("·", Style(color=MUTED_GRAY))
            table.add_row(key.value.capitalize(), mark)

        percent = self.progress.completion_percentage
        bar = Text(
            f"[{progress_bar(percent)}] {percent}%",
            Style(color=SUCCESS_GREEN if self.progress.is_complete else MUTED_GRAY),
        )

        return Panel(
            Group(table, bar),
            title=self.title,
            border_style=ACCENT_GOLD,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class VocabularyTable:
    """Saved words with their translations."""

    def __init__(self, entries: list[VocabEntry], title: str = "Vocabulary"):
        self.entries = entries
        self.title = title

    def render(self) -> Panel:
        table = Table(
            show_header=True,
            header_style=Style(color=ACCENT_RED, bold=True),
            border_style=MUTED_GRAY,
            row_styles=[Style(), Style(dim=True)],
            box=box.HEAVY,
        )
        table.add_column("German", style=Style(color=ACCENT_RED, bold=True))
        table.add_column("Base form", style=Style(color=MUTED_GRAY))
        table.add_column("Translation", style=Style(color=TEXT_WHITE))
        table.add_column("Text", style=Style(color=INFO_BLUE))

        for entry in self.entries:
            table.add_row(
                entry.source_term,
                entry.base_form or "",
                entry.target_term,
                f"{entry.topic_id}/{entry.text_id}",
            )

        return Panel(
            Align.center(table),
            title=f"{self.title} ({len(self.entries)})",
            border_style=ACCENT_GOLD,
            box=box.HEAVY,
            padding=(1, 1),
        )

    def __rich__(self) -> Panel:
        return self.render()
