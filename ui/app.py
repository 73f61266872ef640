from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from exercises.schemas import GapTemplate, QuizQuestion, SpeechComparison
from models import TextProgress, Topic, ValidationState, VocabEntry
from ui.components import (
    GapSentencePanel,
    OrderPanel,
    ProgressPanel,
    QuizPanel,
    ReaderPanel,
    ResultsPanel,
    SpeechResultPanel,
    TopicTable,
    VocabularyTable,
)
from ui.styles import (
    DEFAULT_THEME,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
    SUCCESS_GREEN,
    create_error_header,
    create_mode_complete_header,
    create_success_header,
)

QUIT = "q"


class ReaderUI:
    """Main UI orchestrator for the German reader."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(theme=DEFAULT_THEME)

    # ------------------------------------------------------------------
    # Screens
    # ------------------------------------------------------------------

    def show_topics(
        self,
        topics: list[Topic],
        progress: dict[tuple[str, str], TextProgress] | None = None,
    ) -> None:
        self.console.print(TopicTable(topics, progress))

    def show_reader(
        self, title: str, sentences: list[str], saved_terms: list[str] | None = None
    ) -> None:
        self.console.print(ReaderPanel(title, sentences, saved_terms))

    def show_gap_sentence(
        self,
        template: GapTemplate,
        answers: dict[int, str | None],
        validation_state: ValidationState = ValidationState.IDLE,
        incorrect_gap_ids: list[int] | None = None,
        word_bank: list[str] | None = None,
        show_hints: bool = False,
        number: int = 0,
        total: int = 0,
    ) -> None:
        self.console.print(
            GapSentencePanel(
                template,
                answers,
                validation_state=validation_state,
                incorrect_gap_ids=incorrect_gap_ids,
                word_bank=word_bank,
                show_hints=show_hints,
                number=number,
                total=total,
            )
        )

    def show_order(
        self,
        pool: list[str],
        placed: list[str],
        validation_state: ValidationState = ValidationState.IDLE,
        number: int = 0,
        total: int = 0,
    ) -> None:
        self.console.print(OrderPanel(pool, placed, validation_state, number, total))

    def show_quiz(
        self, question: QuizQuestion, number: int, total: int, direction_label: str = ""
    ) -> None:
        self.console.print(QuizPanel(question, number, total, direction_label))

    def show_results(
        self, questions: list[QuizQuestion], percentage: int, verdict: str
    ) -> None:
        self.console.print(ResultsPanel(questions, percentage, verdict))

    def show_speech_result(self, comparison: SpeechComparison) -> None:
        self.console.print(SpeechResultPanel(comparison))

    def show_progress(self, title: str, progress: TextProgress) -> None:
        self.console.print(ProgressPanel(title, progress))

    def show_vocabulary(self, entries: list[VocabEntry], title: str = "Vocabulary") -> None:
        self.console.print(VocabularyTable(entries, title))

    def show_feedback(self, is_correct: bool, correct_answer: str = "") -> None:
        """Display a one-line verdict, with the answer after a mistake."""
        if is_correct:
            self.console.print(create_success_header())
        else:
            line = create_error_header()
            if correct_answer:
                line.append(f"  Correct answer: {correct_answer}", style=MUTED_GRAY)
            self.console.print(line)
        self.console.print()

    def show_mode_complete(self, mode: str) -> None:
        self.console.print(create_mode_complete_header(mode))

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def _ask(self, prompt: str) -> str:
        return self.console.input(Text(prompt, style=f"bold {MUTED_GRAY}")).strip()

    def ask_choice(self, num_options: int) -> int | None:
        """Get a lettered choice (A, B, ...). Returns its index, None on quit."""
        letters = [chr(65 + i) for i in range(num_options)]
        while True:
            user_input = self._ask("Your answer: ")

            if user_input.lower() == QUIT:
                return None

            if user_input.upper() in letters:
                return letters.index(user_input.upper())

            self.console.print(
                Text(
                    f"Please enter {', '.join(letters)} (or 'q' to quit)\n",
                    style=ERROR_RED,
                )
            )

    def ask_ordering(self, num_options: int) -> list[int] | None:
        """Get a sequence of 1-based numbers. Returns 0-based positions."""
        while True:
            user_input = self._ask("Your order: ")

            if user_input.lower() == QUIT:
                return None

            try:
                numbers = [int(x) for x in user_input.split()]
            except ValueError:
                numbers = []
            if (
                numbers
                and all(1 <= n <= num_options for n in numbers)
                and len(set(numbers)) == len(numbers)
            ):
                return [n - 1 for n in numbers]

            self.console.print(
                Text(
                    f"Please enter numbers 1-{num_options} separated by spaces (or 'q' to quit)\n",
                    style=ERROR_RED,
                )
            )

    def ask_number(self, prompt: str, maximum: int) -> int | None:
        """Get a single 1-based number. Returns it 0-based, None on quit."""
        while True:
            user_input = self._ask(prompt)

            if user_input.lower() == QUIT:
                return None

            if user_input.isdigit() and 1 <= int(user_input) <= maximum:
                return int(user_input) - 1

            self.console.print(
                Text(f"Please enter a number 1-{maximum} (or 'q' to quit)\n", style=ERROR_RED)
            )

    def ask_text(self, prompt: str) -> str | None:
        """Get free text. Returns None on quit."""
        user_input = self._ask(prompt)
        if user_input.lower() == QUIT:
            return None
        return user_input

    def ask_retry(self) -> str:
        """Ask what to do after a wrong answer: 'r'etry, 'n'ext or 'q'uit."""
        while True:
            user_input = self._ask("[r]etry, [n]ext or [q]uit: ").lower()
            if user_input in ("r", "n", QUIT):
                return user_input
            self.console.print(Text("Please enter r, n or q\n", style=ERROR_RED))

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def show_error(self, message: str) -> None:
        """Display an error message."""
        self.console.print(
            Panel(
                Text(f"Error: {message}", style=ERROR_RED),
                title="Error",
                border_style=ERROR_RED,
            )
        )

    def show_info(self, message: str) -> None:
        """Display an informational message."""
        self.console.print(Text(message, style=INFO_BLUE))

    def show_success(self, message: str) -> None:
        """Display a success message."""
        self.console.print(Text(message, style=SUCCESS_GREEN))

    def show_quit_message(self) -> None:
        """Display the quit message."""
        self.console.print()
        self.console.print(
            Text("👋 Tschüss! Your progress has been saved.", style=MUTED_GRAY)
        )
