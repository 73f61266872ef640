"""Tests for gap selection, word-order preparation and quiz generation."""

import itertools
from collections import Counter

import pytest

from exercises import (
    GapConfig,
    GapGenerator,
    OrderConfig,
    OrderGenerator,
    QuizConfig,
    QuizGenerator,
    build_gap_exercise,
    build_gap_template,
    eligible_order_sentences,
    generate_questions,
    is_correct_order,
    prepare_order_exercise,
)
from exercises.generators import make_hint, max_gaps_for
from exercises.schemas import GapSegment, TextSegment
from models import CardsDirection


class TestMaxGaps:
    """Tests for the gap count formula."""

    @pytest.mark.parametrize(
        "eligible,expected",
        [(0, 0), (1, 0), (2, 1), (3, 1), (4, 2), (6, 2), (7, 3), (10, 3), (20, 3)],
    )
    def test_gap_count(self, eligible, expected):
        assert max_gaps_for(eligible, GapConfig()) == expected

    def test_make_hint(self):
        assert make_hint("Kino") == "K___"
        assert make_hint("ab") == "a_"
        assert make_hint("") == ""


class TestGapTemplate:
    """Tests for build_gap_template()."""

    def test_reconstructs_original_sentence(self):
        sentences = [
            "Ich gehe heute ins Kino.",
            'Sie fragt: "Möchten Sie Käse?"',
            "Der  Hund läuft sehr schnell über die Straße.",
            "Am Abend, nach der Arbeit, trinkt sie Tee!",
        ]
        for sentence in sentences:
            template = build_gap_template(sentence)
            assert template is not None
            assert template.reconstruct() == sentence

    def test_is_deterministic(self):
        sentence = "Der Hund läuft sehr schnell über die Straße."
        first = build_gap_template(sentence)
        second = build_gap_template(sentence)
        assert first.model_dump() == second.model_dump()

    def test_gap_count_within_bounds(self):
        template = build_gap_template("Der Hund läuft sehr schnell über die Straße.")
        assert len(template.gaps) == 3

    def test_two_eligible_words_get_one_gap(self):
        template = build_gap_template("Ich bin.")
        assert len(template.gaps) == 1

    def test_too_short_sentence_has_no_template(self):
        assert build_gap_template("Er lacht.") is None
        assert build_gap_template("Ja, du da.") is None

    def test_gap_words_are_clean_and_long_enough(self):
        template = build_gap_template('Sie fragt: "Möchten Sie Käse?"')
        for gap in template.gaps:
            assert gap.original_word.isalpha()
            assert len(gap.original_word) >= 3
            assert gap.hint == make_hint(gap.original_word)

    def test_repeated_word_gapped_once(self):
        """A word gapped once stays literal at later occurrences."""
        template = build_gap_template("Der Hund sieht den Hund und der Hund bellt.")
        gapped = [g.original_word.lower() for g in template.gaps]
        assert len(gapped) == len(set(gapped))
        assert template.reconstruct() == "Der Hund sieht den Hund und der Hund bellt."

    def test_word_bank_is_permutation_of_gap_words(self):
        template = build_gap_template("Der Hund läuft sehr schnell über die Straße.")
        assert Counter(template.word_bank) == Counter(
            g.original_word for g in template.gaps
        )

    def test_segments_alternate_text_and_gaps(self):
        template = build_gap_template("Ich gehe heute ins Kino.")
        for before, after in zip(template.segments, template.segments[1:]):
            assert not (
                isinstance(before, TextSegment) and isinstance(after, TextSegment)
            )

    def test_uses_shared_counter(self):
        counter = itertools.count(10)
        template = build_gap_template("Ich gehe heute ins Kino.", counter)
        assert template.gap_ids == list(range(10, 10 + len(template.gaps)))

    def test_render_with_placeholder(self):
        template = build_gap_template("Ich gehe heute ins Kino.")
        rendered = template.render()
        assert rendered.count("___") == len(template.gaps)


class TestGapExercise:
    """Tests for build_gap_exercise() and GapGenerator."""

    def test_gap_ids_unique_across_text(self, sample_paragraphs):
        templates = build_gap_exercise(sample_paragraphs)
        ids = [gap_id for t in templates for gap_id in t.gap_ids]
        assert ids == list(range(len(ids)))

    def test_sentence_indexes(self, sample_paragraphs):
        templates = build_gap_exercise(sample_paragraphs)
        assert [t.sentence_index for t in templates] == [0, 1, 2]

    def test_skips_unusable_sentences(self):
        templates = build_gap_exercise(["Er lacht. Ich gehe heute ins Kino."])
        assert len(templates) == 1
        assert templates[0].sentence == "Ich gehe heute ins Kino."
        assert templates[0].sentence_index == 1

    def test_generator(self, sample_paragraphs):
        generator = GapGenerator(sample_paragraphs)
        assert generator.can_generate()
        assert generator.source_item_count == 3
        assert len(generator.generate()) == 3

    def test_generator_on_empty_text(self):
        generator = GapGenerator([])
        assert not generator.can_generate()
        assert generator.generate() == []

    def test_custom_config(self):
        config = GapConfig(max_gaps=1)
        template = build_gap_template(
            "Der Hund läuft sehr schnell über die Straße.", config=config
        )
        assert len(template.gaps) == 1
        assert all(isinstance(s, (TextSegment, GapSegment)) for s in template.segments)


class TestOrderExercise:
    """Tests for word-order preparation."""

    def test_pool_is_permutation_of_tokens(self):
        exercise = prepare_order_exercise("Der Hund läuft schnell.")
        assert exercise.correct_order == ["Der", "Hund", "läuft", "schnell."]
        assert Counter(exercise.shuffled_pool) == Counter(exercise.correct_order)

    def test_short_sentence_rejected(self):
        assert prepare_order_exercise("Ja gut.") is None

    def test_is_correct_order(self):
        correct = ["Der", "Hund", "läuft", "schnell."]
        assert is_correct_order(list(correct), correct)
        assert not is_correct_order(["Hund", "Der", "läuft", "schnell."], correct)

    def test_eligible_sentences_filtered_by_vocabulary(self, sample_paragraphs):
        assert eligible_order_sentences(sample_paragraphs, ["hund"]) == [
            "Der Hund läuft sehr schnell über die Straße."
        ]
        assert eligible_order_sentences(sample_paragraphs, []) == []

    def test_vocabulary_match_ignores_punctuation(self, sample_paragraphs):
        assert eligible_order_sentences(sample_paragraphs, ["Kino"]) == [
            "Ich gehe heute ins Kino."
        ]

    def test_no_filter_without_terms(self, sample_paragraphs):
        assert len(eligible_order_sentences(sample_paragraphs)) == 3

    def test_filter_can_be_disabled(self, sample_paragraphs):
        config = OrderConfig(require_vocabulary=False)
        assert len(eligible_order_sentences(sample_paragraphs, [], config)) == 3

    def test_generator(self, sample_paragraphs):
        generator = OrderGenerator(sample_paragraphs, ["Tee", "Kino"])
        assert generator.source_item_count == 2
        exercises = generator.generate()
        assert [e.sentence for e in exercises] == [
            "Ich gehe heute ins Kino.",
            "Am Abend trinkt meine Mutter einen Tee.",
        ]
        assert generator.generate_for("Ja.") is None


class TestQuiz:
    """Tests for flashcard question generation."""

    def test_one_question_per_entry(self, sample_vocabulary):
        questions = generate_questions(sample_vocabulary, CardsDirection.FORWARD)
        assert len(questions) == 5
        assert {q.subject_id for q in questions} == {e.id for e in sample_vocabulary}

    def test_options_unique_and_contain_answer_once(self, sample_vocabulary):
        for direction in CardsDirection:
            for question in generate_questions(sample_vocabulary, direction):
                assert len(question.options) == 4
                assert len(set(question.options)) == 4
                assert question.options.count(question.correct_answer) == 1
                assert not question.answered

    def test_forward_prompts_german(self, sample_vocabulary):
        questions = generate_questions(sample_vocabulary, CardsDirection.FORWARD)
        by_id = {q.subject_id: q for q in questions}
        assert by_id["e1"].prompt_text == "Hund"
        assert by_id["e1"].correct_answer == "dog"

    def test_reverse_answers_with_base_form(self, sample_vocabulary):
        questions = generate_questions(sample_vocabulary, CardsDirection.REVERSE)
        by_id = {q.subject_id: q for q in questions}
        assert by_id["e3"].prompt_text == "runs"
        assert by_id["e3"].correct_answer == "laufen"
        assert by_id["e1"].correct_answer == "Hund"

    def test_too_few_entries_yields_nothing(self, sample_vocabulary):
        assert generate_questions(sample_vocabulary[:3], CardsDirection.FORWARD) == []

    def test_too_few_distinct_answers_yields_nothing(self, make_entry):
        vocabulary = [
            make_entry("a", "Haus", "house"),
            make_entry("b", "Gebäude", "house"),
            make_entry("c", "Heim", "home"),
            make_entry("d", "Wohnung", "flat"),
            make_entry("e", "Zuhause", "home"),
        ]
        assert generate_questions(vocabulary, CardsDirection.FORWARD) == []
        assert len(generate_questions(vocabulary, CardsDirection.REVERSE)) == 5

    def test_generator_generate_for(self, sample_vocabulary):
        generator = QuizGenerator(sample_vocabulary, CardsDirection.FORWARD)
        questions = generator.generate_for(sample_vocabulary[:1])
        assert len(questions) == 1
        assert questions[0].subject_id == "e1"

    def test_option_count_config(self, sample_vocabulary):
        config = QuizConfig(total_options=3, min_entries=3)
        questions = generate_questions(sample_vocabulary[:3], CardsDirection.FORWARD, config)
        assert len(questions) == 3
        assert all(len(q.options) == 3 for q in questions)
