"""Tests for speech comparison and the speak practice controller."""

from exercises import compare_texts, normalize_text
from models import ProgressKey
from practice import SpeakController, SpeakModeState
from practice.state import SpeakPhase

KINO = ["Ich gehe heute ins Kino. Das ist schön."]


def record(controller, transcript):
    index = controller.start_recording()
    controller.stop_recording()
    return controller.submit_transcript(index, transcript)


class TestCompareTexts:
    """Tests for transcript comparison."""

    def test_normalize_text(self):
        assert normalize_text("  Ich  gehe, „heute“ ins Kino! ") == "ich gehe heute ins kino"

    def test_matching_transcript(self):
        result = compare_texts("Ich gehe heute ins Kino.", "ich gehe heute ins kino")
        assert result.is_correct
        assert all(w.correct for w in result.word_results)

    def test_positional_word_results(self):
        result = compare_texts("Ich gehe ins Kino.", "ich gehe kino")
        assert not result.is_correct
        assert [(w.word, w.correct) for w in result.word_results] == [
            ("ich", True),
            ("gehe", True),
            ("ins", False),
            ("kino", False),
        ]

    def test_empty_transcript(self):
        result = compare_texts("Hallo Welt.", "")
        assert not result.is_correct
        assert [w.correct for w in result.word_results] == [False, False]


class TestSpeakController:
    """Tests for SpeakController."""

    def test_initial_state(self, progress):
        controller = SpeakController(KINO, SpeakModeState(), progress)
        assert controller.total == 2
        assert controller.phase == SpeakPhase.LISTENING
        assert controller.current_sentence == "Ich gehe heute ins Kino."
        assert controller.current_result is None

    def test_recording_phases(self, progress):
        controller = SpeakController(KINO, SpeakModeState(), progress)
        assert controller.start_recording() == 0
        assert controller.phase == SpeakPhase.RECORDING
        assert controller.start_recording() is None

        assert controller.stop_recording()
        assert controller.phase == SpeakPhase.PROCESSING
        assert not controller.stop_recording()

        result = controller.submit_transcript(0, "Ich gehe heute ins Kino")
        assert result.is_correct
        assert controller.phase == SpeakPhase.RESULT
        assert controller.current_result == result

    def test_transcript_for_other_sentence_is_dropped(self, progress):
        controller = SpeakController(KINO, SpeakModeState(), progress)
        record(controller, "ich gehe heute ins kino")
        controller.next()
        controller.start_recording()
        controller.stop_recording()

        assert controller.submit_transcript(0, "zu spät") is None
        assert controller.phase == SpeakPhase.PROCESSING
        assert controller.state.results[0].actual == "ich gehe heute ins kino"

    def test_failed_transcription_returns_to_listening(self, progress):
        controller = SpeakController(KINO, SpeakModeState(), progress)
        index = controller.start_recording()
        controller.stop_recording()

        assert controller.fail_transcription(index)
        assert controller.phase == SpeakPhase.LISTENING
        assert not controller.fail_transcription(index)
        assert controller.start_recording() == 0

    def test_finishing_last_sentence_completes_mode(self, progress):
        controller = SpeakController(KINO, SpeakModeState(), progress)
        record(controller, "ich gehe heute ins kino")
        assert progress.marked == []

        assert controller.next()
        assert controller.phase == SpeakPhase.LISTENING
        record(controller, "das ist falsch")
        assert controller.is_finished()
        assert progress.marked == [ProgressKey.SPEAK]
        assert controller.correct_count() == 1
        assert not controller.next()

    def test_select_shows_existing_result(self, progress):
        controller = SpeakController(KINO, SpeakModeState(), progress)
        record(controller, "ich gehe heute ins kino")
        controller.next()
        controller.select(0)
        assert controller.phase == SpeakPhase.RESULT
        controller.select(5)
        assert controller.state.current_index == 1
        assert controller.phase == SpeakPhase.LISTENING

    def test_reset_current(self, progress):
        controller = SpeakController(KINO, SpeakModeState(), progress)
        record(controller, "ich gehe heute ins kino")
        controller.reset_current()
        assert controller.current_result is None
        assert controller.phase == SpeakPhase.LISTENING

    def test_changed_text_starts_over(self, progress):
        controller = SpeakController(KINO, SpeakModeState(), progress)
        record(controller, "ich gehe heute ins kino")

        changed = SpeakController(["Neuer Text."], controller.state, progress)
        assert changed.total == 1
        assert changed.state.results == {}
        assert ProgressKey.SPEAK in progress.resets

    def test_empty_text(self, progress):
        controller = SpeakController([], SpeakModeState(), progress)
        assert controller.start_recording() is None
        assert controller.current_sentence == ""
        assert not controller.is_finished()
