import argparse
import logging
import sys
from pathlib import Path

from content import DEFAULT_CONTENT_DIR, ContentRepository
from exercises.segmentation import segment_text
from models import CardsDirection, PracticeMode, ProgressKey, Text, ValidationState
from practice import (
    CardsController,
    GapModeController,
    OrderController,
    PracticeSession,
    SpeakController,
    SpeakPhase,
    WriteController,
)
from storage import (
    DEFAULT_DB_PATH,
    get_practice_state_repo,
    get_progress_store,
    get_vocabulary_store,
    init_schema,
)
from ui import ReaderUI

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(description="German Reader")
    parser.add_argument(
        "--db",
        type=Path,
        default=DEFAULT_DB_PATH,
        help=f"SQLite database path (default: {DEFAULT_DB_PATH})",
    )
    parser.add_argument(
        "--content-dir",
        type=Path,
        default=DEFAULT_CONTENT_DIR,
        help=f"Directory of topic markdown files (default: {DEFAULT_CONTENT_DIR})",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug output",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("topics", help="List topics and texts")

    read_parser = subparsers.add_parser("read", help="Show a text sentence by sentence")
    read_parser.add_argument("topic", help="Topic ID")
    read_parser.add_argument("text", help="Text ID")

    # Vocabulary subcommands
    vocab_parser = subparsers.add_parser("vocab", help="Manage saved words")
    vocab_sub = vocab_parser.add_subparsers(dest="vocab_command", required=True)

    add_parser = vocab_sub.add_parser("add", help="Save a word for a text")
    add_parser.add_argument("topic", help="Topic ID")
    add_parser.add_argument("text", help="Text ID")
    add_parser.add_argument("word", help="German word as it appears in the text")
    add_parser.add_argument("translation", help="Translation of the word")
    add_parser.add_argument("--base-form", "-b", help="Dictionary form of the word")

    remove_parser = vocab_sub.add_parser("remove", help="Remove a saved word")
    remove_parser.add_argument("topic", help="Topic ID")
    remove_parser.add_argument("text", help="Text ID")
    remove_parser.add_argument("word", help="German word to remove")

    list_parser = vocab_sub.add_parser("list", help="List saved words")
    list_parser.add_argument("topic", nargs="?", help="Only words of this topic")
    list_parser.add_argument("text", nargs="?", help="Only words of this text")

    export_parser = vocab_sub.add_parser("export", help="Export saved words as CSV")
    export_parser.add_argument("path", type=Path, help="Output CSV file path")

    # Practice subcommand
    practice_parser = subparsers.add_parser("practice", help="Practice a text")
    practice_parser.add_argument(
        "mode",
        choices=[mode.value for mode in PracticeMode],
        help="Practice mode",
    )
    practice_parser.add_argument("topic", help="Topic ID")
    practice_parser.add_argument("text", help="Text ID")
    practice_parser.add_argument(
        "--direction",
        "-d",
        choices=[direction.value for direction in CardsDirection],
        default=CardsDirection.FORWARD.value,
        help="Cards direction (default: forward)",
    )
    practice_parser.add_argument(
        "--reset",
        action="store_true",
        help="Start the mode over with newly generated exercises",
    )

    progress_parser = subparsers.add_parser("progress", help="Show practice progress")
    progress_parser.add_argument("topic", nargs="?", help="Only texts of this topic")

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def find_text(
    content: ContentRepository, ui: ReaderUI, topic_id: str, text_id: str
) -> Text | None:
    """Look up a text, reporting unknown IDs to the user."""
    topic = content.get_topic(topic_id)
    if topic is None:
        ui.show_error(f"Unknown topic '{topic_id}'. Run 'topics' to list them.")
        return None
    text = topic.get_text(text_id)
    if text is None:
        ui.show_error(f"Topic '{topic_id}' has no text '{text_id}'.")
        return None
    return text


# ============================================================================
# Reading and Vocabulary
# ============================================================================


def run_topics(args, ui: ReaderUI) -> int:
    content = ContentRepository(args.content_dir)
    topics = content.get_topics()
    if not topics:
        ui.show_error(f"No topics found in {args.content_dir}.")
        return 1
    ui.show_topics(topics, get_progress_store(args.db).get_all())
    return 0


def run_read(args, ui: ReaderUI) -> int:
    text = find_text(ContentRepository(args.content_dir), ui, args.topic, args.text)
    if text is None:
        return 1
    saved = get_vocabulary_store(args.db).get_for_text(args.topic, args.text)
    ui.show_reader(
        text.title,
        segment_text(text.paragraphs),
        [entry.source_term for entry in saved],
    )
    return 0


def run_vocab(args, ui: ReaderUI) -> int:
    store = get_vocabulary_store(args.db)

    if args.vocab_command == "list":
        entries = store.get_all()
        if args.topic:
            entries = [e for e in entries if e.topic_id == args.topic]
        if args.text:
            entries = [e for e in entries if e.text_id == args.text]
        ui.show_vocabulary(entries)
        return 0

    if args.vocab_command == "export":
        count = store.export_csv(args.path)
        ui.show_success(f"Exported {count} words to {args.path}")
        return 0

    content = ContentRepository(args.content_dir)
    if find_text(content, ui, args.topic, args.text) is None:
        return 1

    if args.vocab_command == "add":
        try:
            entry = store.add(
                args.topic, args.text, args.word, args.translation, args.base_form
            )
        except ValueError as e:
            ui.show_error(str(e))
            return 1
        if entry is None:
            ui.show_info(f"'{args.word}' is already saved for this text.")
        else:
            ui.show_success(f"Saved '{entry.source_term}' = '{entry.target_term}'")
        return 0

    entry = store.find(args.topic, args.text, args.word)
    if entry is None:
        ui.show_error(f"'{args.word}' is not saved for this text.")
        return 1
    store.remove(entry)
    ui.show_success(f"Removed '{entry.source_term}'")
    return 0


def run_progress(args, ui: ReaderUI) -> int:
    content = ContentRepository(args.content_dir)
    progress_store = get_progress_store(args.db)
    topics = content.get_topics()
    if args.topic:
        topics = [t for t in topics if t.id == args.topic]
        if not topics:
            ui.show_error(f"Unknown topic '{args.topic}'.")
            return 1

    for topic in topics:
        for text in topic.texts:
            ui.show_progress(
                f"{topic.title}: {text.title}",
                progress_store.get_text_progress(topic.id, text.id),
            )
    return 0


# ============================================================================
# Practice Loops
# ============================================================================


def practice_gaps(controller: GapModeController, ui: ReaderUI) -> bool:
    """Run fill or write practice. Returns False if the user quit."""
    is_write = isinstance(controller, WriteController)
    index = controller.state.current_index

    while index < controller.total:
        controller.select(index)
        template = controller.template(index)
        item = controller.item(index)
        if item.validation_state == ValidationState.CORRECT:
            index += 1
            continue

        for gap_number, gap in enumerate(template.gaps, start=1):
            if (item.answers.get(gap.gap_id) or "").strip():
                continue
            ui.show_gap_sentence(
                template,
                item.answers,
                incorrect_gap_ids=item.incorrect_gap_ids,
                word_bank=None if is_write else item.available_words,
                show_hints=is_write,
                number=index + 1,
                total=controller.total,
            )
            if is_write:
                answer = ui.ask_text(f"Gap {gap_number} ({gap.hint}): ")
                if answer is None:
                    return False
                controller.type_answer(index, gap.gap_id, answer)
            else:
                choice = ui.ask_number(
                    f"Word for gap {gap_number}: ", len(item.available_words)
                )
                if choice is None:
                    return False
                controller.place_word(index, gap.gap_id, item.available_words[choice])
            item = controller.item(index)

        if not controller.is_filled(index):
            continue

        ui.show_gap_sentence(
            template,
            item.answers,
            validation_state=item.validation_state,
            incorrect_gap_ids=item.incorrect_gap_ids,
            show_hints=is_write,
            number=index + 1,
            total=controller.total,
        )
        if item.validation_state == ValidationState.CORRECT:
            index += 1
            continue

        choice = ui.ask_retry()
        if choice == "q":
            return False
        if choice == "n":
            index += 1
        elif is_write:
            # Keep the right answers and ask again for the wrong ones
            for gap_id in list(item.incorrect_gap_ids):
                controller.type_answer(index, gap_id, "")
        else:
            controller.reset_item(index)

    return True


def practice_order(controller: OrderController, ui: ReaderUI) -> bool:
    """Run word-order practice. Returns False if the user quit."""
    index = controller.state.current_index

    while index < controller.total:
        controller.select(index)
        item = controller.item(index)
        if item.validation_state == ValidationState.CORRECT:
            index += 1
            continue

        while item.shuffled_pool:
            ui.show_order(
                item.shuffled_pool,
                item.placed_sequence,
                number=index + 1,
                total=controller.total,
            )
            positions = ui.ask_ordering(len(item.shuffled_pool))
            if positions is None:
                return False
            words = [item.shuffled_pool[p] for p in positions]
            for word in words:
                controller.place(index, item.shuffled_pool.index(word))
            item = controller.item(index)

        ui.show_order(
            item.shuffled_pool,
            item.placed_sequence,
            validation_state=item.validation_state,
            number=index + 1,
            total=controller.total,
        )
        if item.validation_state == ValidationState.CORRECT:
            index += 1
            continue

        ui.show_feedback(False, controller.sentences[index])
        choice = ui.ask_retry()
        if choice == "q":
            return False
        if choice == "n":
            index += 1
        else:
            controller.reset_item(index)

    return True


def practice_cards(
    controller: CardsController, ui: ReaderUI, direction: CardsDirection
) -> bool:
    """Run the flashcard quiz in one direction. Returns False if the user quit."""
    controller.set_direction(direction)
    label = "DE → EN" if direction == CardsDirection.FORWARD else "EN → DE"

    while True:
        question = controller.current_question
        if question is None:
            ui.show_results(
                controller.questions, controller.percentage(), controller.verdict()
            )
            return True

        index = controller.current.current_index
        if question.answered:
            controller.advance_past(direction, index)
            continue

        ui.show_quiz(question, index + 1, controller.total, label)
        choice = ui.ask_choice(len(question.options))
        if choice is None:
            return False

        is_correct = controller.select_answer(question.options[choice])
        ui.show_feedback(bool(is_correct), question.correct_answer)
        # The auto-advance timer may already have moved on
        controller.advance_past(direction, index)


def practice_speak(controller: SpeakController, ui: ReaderUI) -> bool:
    """Run speaking practice with typed transcripts. Returns False on quit."""
    if controller.phase in (SpeakPhase.RECORDING, SpeakPhase.PROCESSING):
        controller.reset_current()

    while True:
        index = controller.state.current_index
        if controller.phase == SpeakPhase.RESULT:
            if not controller.next():
                return True
            continue

        ui.show_reader(
            f"Sentence {index + 1}/{controller.total}", [controller.current_sentence]
        )
        if ui.ask_text("Press Enter to record (or 'q' to quit): ") is None:
            return False

        controller.start_recording()
        transcript = ui.ask_text("Type what you said: ")
        controller.stop_recording()
        if transcript is None:
            controller.fail_transcription(index)
            return False

        result = controller.submit_transcript(index, transcript)
        if result is None:
            continue
        ui.show_speech_result(result)

        if not result.is_correct:
            choice = ui.ask_retry()
            if choice == "q":
                return False
            if choice == "r":
                controller.reset_current()
                continue

        if not controller.next():
            return True


UNAVAILABLE_MESSAGES = {
    PracticeMode.FILL: "This text has no sentences long enough for gap practice.",
    PracticeMode.WRITE: "This text has no sentences long enough for gap practice.",
    PracticeMode.ORDER: (
        "No sentences to order yet. Save words from this text with 'vocab add' "
        "to practice the sentences they appear in."
    ),
    PracticeMode.CARDS: (
        "You need at least 4 saved words with different translations to practice."
    ),
    PracticeMode.SPEAK: "This text has no sentences.",
}


def run_practice(args, ui: ReaderUI) -> int:
    text = find_text(ContentRepository(args.content_dir), ui, args.topic, args.text)
    if text is None:
        return 1

    mode = PracticeMode(args.mode)
    direction = CardsDirection(args.direction)
    progress_store = get_progress_store(args.db)

    with PracticeSession(
        args.topic,
        text,
        get_vocabulary_store(args.db),
        progress_store,
        get_practice_state_repo(args.db),
    ) as session:
        controller = session.controller(mode)
        if args.reset:
            if mode == PracticeMode.CARDS:
                session.cards.reset_direction(direction)
            else:
                controller.reset()

        if mode == PracticeMode.CARDS:
            session.cards.set_direction(direction)
        if not controller.is_available:
            ui.show_info(UNAVAILABLE_MESSAGES[mode])
            return 0

        try:
            if mode == PracticeMode.FILL:
                finished = practice_gaps(session.fill, ui)
            elif mode == PracticeMode.WRITE:
                finished = practice_gaps(session.write, ui)
            elif mode == PracticeMode.ORDER:
                finished = practice_order(session.order, ui)
            elif mode == PracticeMode.CARDS:
                finished = practice_cards(session.cards, ui, direction)
            else:
                finished = practice_speak(session.speak, ui)
        except (KeyboardInterrupt, EOFError):
            finished = False

        if not finished:
            ui.show_quit_message()
            return 0

        if mode == PracticeMode.CARDS:
            key = ProgressKey.for_direction(direction)
        else:
            key = ProgressKey(mode.value)
        if progress_store.is_mode_complete(args.topic, args.text, key):
            ui.show_mode_complete(mode.value)
    return 0


COMMANDS = {
    "topics": run_topics,
    "read": run_read,
    "vocab": run_vocab,
    "practice": run_practice,
    "progress": run_progress,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point with CLI routing."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    init_schema(args.db)
    logger.debug("Using database %s and content %s", args.db, args.content_dir)
    ui = ReaderUI()

    command = COMMANDS.get(args.command, run_topics)
    return command(args, ui)


if __name__ == "__main__":
    sys.exit(main())
