"""Tests for loading persisted practice state."""

import logging

from models import CardsDirection
from practice import PracticeState


class TestPracticeStateFromStored:
    """Tests for PracticeState.from_stored()."""

    def test_nothing_stored(self):
        state = PracticeState.from_stored(None)
        assert state == PracticeState()
        assert not state.fill.initialized

    def test_not_a_dict(self):
        assert PracticeState.from_stored(["fill"]) == PracticeState()

    def test_partial_mode_merges_over_defaults(self):
        state = PracticeState.from_stored({"fill": {"current_index": 2}})
        assert state.fill.current_index == 2
        assert state.fill.sentence_states == {}
        assert state.order == PracticeState().order

    def test_partial_cards_state(self):
        state = PracticeState.from_stored(
            {"cards": {"direction": "reverse", "forward": {"show_results": True}}}
        )
        assert state.cards.direction == CardsDirection.REVERSE
        assert state.cards.forward.show_results
        assert state.cards.reverse.questions == []

    def test_unreadable_mode_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING):
            state = PracticeState.from_stored(
                {"fill": {"current_index": "abc"}, "write": {"current_index": 1}}
            )
        assert state.fill.current_index == 0
        assert state.write.current_index == 1
        assert "fill" in caplog.text

    def test_round_trip_through_json(self):
        state = PracticeState()
        state.order.current_index = 3
        state.cards.direction = CardsDirection.REVERSE
        restored = PracticeState.from_stored(state.model_dump(mode="json"))
        assert restored == state
