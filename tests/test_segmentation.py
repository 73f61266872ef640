"""Tests for sentence segmentation and tokenization."""

from exercises.segmentation import (
    segment,
    segment_text,
    split_preserving_whitespace,
    tokenize,
)


class TestSegment:
    """Tests for segment()."""

    def test_splits_on_terminal_punctuation(self):
        paragraph = "Ich gehe heute ins Kino. Kommst du mit? Das wird toll!"
        assert segment(paragraph) == [
            "Ich gehe heute ins Kino.",
            "Kommst du mit?",
            "Das wird toll!",
        ]

    def test_keeps_trailing_text_without_terminator(self):
        assert segment("Hallo Welt. Bis bald") == ["Hallo Welt.", "Bis bald"]

    def test_attaches_closing_quote(self):
        paragraph = 'Er sagt: "Komm!" Dann geht er.'
        assert segment(paragraph) == ['Er sagt: "Komm!"', "Dann geht er."]

    def test_groups_repeated_terminators(self):
        assert segment("Wirklich?! Ja...") == ["Wirklich?!", "Ja..."]

    def test_blank_input_yields_nothing(self):
        assert segment("") == []
        assert segment("   \n ") == []

    def test_strips_whitespace(self):
        assert segment("  Guten Morgen.   Wie geht's?  ") == [
            "Guten Morgen.",
            "Wie geht's?",
        ]

    def test_punctuation_after_quote_joins_previous_sentence(self):
        paragraph = "Sie rief: „Hilfe!“. Dann ging er."
        assert segment(paragraph) == ["Sie rief: „Hilfe!“.", "Dann ging er."]

    def test_leading_punctuation_joins_next_sentence(self):
        assert segment("... und dann? Nichts.") == ["... und dann?", "Nichts."]
        assert segment("?!") == ["?!"]

    def test_sentences_join_back_to_paragraph(self):
        """No characters are lost between sentences."""
        paragraphs = [
            "Sie rief: „Hilfe!“. Dann ging er.",
            "... und dann? Nichts.",
            'Er fragt: "Wann?" . Keine Antwort',
            "Gut.  Oder?!  Ja...",
        ]
        for paragraph in paragraphs:
            assert " ".join(segment(paragraph)) == " ".join(paragraph.split())

    def test_abbreviations_split_early(self):
        """Known limitation: abbreviations end a sentence."""
        assert segment("Das ist z.B. gut.") == ["Das ist z.", "B.", "gut."]


class TestSegmentText:
    """Tests for segment_text()."""

    def test_concatenates_paragraphs_in_order(self, sample_paragraphs):
        assert segment_text(sample_paragraphs) == [
            "Ich gehe heute ins Kino.",
            "Der Hund läuft sehr schnell über die Straße.",
            "Am Abend trinkt meine Mutter einen Tee.",
        ]

    def test_skips_empty_paragraphs(self):
        assert segment_text(["", "Hallo."]) == ["Hallo."]


class TestTokenize:
    """Tests for tokenize() and split_preserving_whitespace()."""

    def test_tokenize_keeps_punctuation_attached(self):
        assert tokenize("Der Hund läuft schnell.") == ["Der", "Hund", "läuft", "schnell."]

    def test_tokenize_collapses_whitespace(self):
        assert tokenize("  Der   Hund ") == ["Der", "Hund"]

    def test_split_preserving_whitespace_round_trips(self):
        sentence = "Der  Hund\tläuft schnell."
        parts = split_preserving_whitespace(sentence)
        assert "".join(parts) == sentence
        assert parts[1] == "  "
