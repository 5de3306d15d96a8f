"""
Tests for bulk selection over a ranked result view.
"""
import pytest

from workbridge.errors import NotFound
from workbridge.services.selection import (
    SelectionRegistry,
    SelectionTracker,
    get_selection_registry,
)


@pytest.fixture
def tracker():
    return SelectionTracker("job-1", ["a", "b", "c"])


class TestSelectionTracker:
    """Tests for SelectionTracker set algebra."""

    def test_starts_empty(self, tracker):
        assert tracker.selected == frozenset()
        assert not tracker.all_selected

    def test_toggle_adds_then_removes(self, tracker):
        assert tracker.toggle("a") is True
        assert tracker.selected == {"a"}
        assert tracker.toggle("a") is False
        assert tracker.selected == frozenset()

    def test_toggle_unknown_id(self, tracker):
        with pytest.raises(NotFound):
            tracker.toggle("zzz")

    def test_select_all(self, tracker):
        tracker.toggle("a")
        assert tracker.select_all() == {"a", "b", "c"}
        assert tracker.all_selected

    def test_select_all_twice_clears(self, tracker):
        tracker.toggle("b")
        tracker.select_all()
        tracker.select_all()
        assert tracker.selected == frozenset()

    def test_select_all_on_empty_view(self):
        tracker = SelectionTracker("job-1", [])
        assert tracker.select_all() == frozenset()
        assert not tracker.all_selected

    def test_clear(self, tracker):
        tracker.select_all()
        tracker.clear()
        assert tracker.selected == frozenset()

    def test_selection_always_subset_of_displayed(self, tracker):
        tracker.select_all()
        tracker.focus("job-1", ["a", "b"])
        assert tracker.selected <= tracker.displayed

    def test_focus_same_view_keeps_selection(self, tracker):
        tracker.toggle("a")
        tracker.focus("job-1", ["c", "b", "a"])
        assert tracker.selected == {"a"}

    def test_focus_changed_ids_resets_selection_only(self, tracker):
        tracker.toggle("a")
        tracker.shortlist()
        tracker.toggle("b")

        tracker.focus("job-1", ["a", "b", "d"])

        assert tracker.selected == frozenset()
        assert tracker.shortlisted == {"a"}

    def test_focus_new_job_resets_everything(self, tracker):
        tracker.toggle("a")
        tracker.shortlist()
        tracker.toggle("b")

        tracker.focus("job-2", ["a", "b"])

        assert tracker.job_id == "job-2"
        assert tracker.selected == frozenset()
        assert tracker.shortlisted == frozenset()
        assert tracker.rejected == frozenset()

    def test_shortlist_moves_and_clears(self, tracker):
        tracker.toggle("a")
        tracker.toggle("b")

        moved = tracker.shortlist()

        assert moved == {"a", "b"}
        assert tracker.shortlisted == {"a", "b"}
        assert tracker.selected == frozenset()

    def test_marks_are_disjoint(self, tracker):
        tracker.toggle("a")
        tracker.shortlist()
        tracker.toggle("a")
        tracker.reject()

        assert tracker.rejected == {"a"}
        assert tracker.shortlisted == frozenset()

    def test_shortlist_with_empty_selection(self, tracker):
        assert tracker.shortlist() == frozenset()

    def test_shortlist_given_ids_keeps_rest_of_selection(self, tracker):
        tracker.select_all()

        moved = tracker.shortlist(["a", "zzz"])

        assert moved == {"a"}
        assert tracker.shortlisted == {"a"}
        assert tracker.selected == {"b", "c"}

    def test_reject_given_ids_clears_shortlist_mark(self, tracker):
        tracker.toggle("b")
        tracker.shortlist()

        assert tracker.reject(["b"]) == {"b"}
        assert tracker.rejected == {"b"}
        assert tracker.shortlisted == frozenset()

    def test_to_dict_is_sorted(self, tracker):
        tracker.toggle("c")
        tracker.toggle("a")
        data = tracker.to_dict()

        assert data["job_id"] == "job-1"
        assert data["displayed"] == ["a", "b", "c"]
        assert data["selected"] == ["a", "c"]
        assert data["all_selected"] is False


class TestSelectionRegistry:
    """Tests for per-caller tracker registry."""

    def test_get_returns_same_tracker(self):
        registry = SelectionRegistry()
        assert registry.get("u1") is registry.get("u1")
        assert registry.get("u1") is not registry.get("u2")

    def test_reset(self):
        registry = SelectionRegistry()
        tracker = registry.get("u1")
        registry.reset()
        assert registry.get("u1") is not tracker

    def test_process_wide_registry(self):
        assert get_selection_registry() is get_selection_registry()
