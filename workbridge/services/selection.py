"""
Selection Tracker - Employer-side bulk selection over a ranked result view

Pure in-memory set algebra. A tracker is focused on one job and the ids
currently displayed for it; the selection is always a subset of those ids.

    toggle(id)      flip membership of one displayed id
    select_all()    select every displayed id; if all are already selected,
                    clear instead (so two calls in a row == clear())
    clear()         empty the selection
    focus(job, ids) switch the view; the selection resets when the job or the
                    displayed ids change
    shortlist(ids)  mark the selection shortlisted, then clear it; with ids,
                    mark only those displayed ids and drop them from the selection
    reject(ids)     same, marking rejected

Shortlisted and rejected marks are disjoint: marking an id one way removes
the other mark.
"""

import threading
from typing import Dict, FrozenSet, Iterable, Optional

from workbridge.errors import NotFound


class SelectionTracker:
    """Selection state for one caller's view of one job."""

    def __init__(self, job_id: Optional[str] = None, displayed_ids: Iterable[str] = ()):
        self.job_id = job_id
        self._displayed: FrozenSet[str] = frozenset(displayed_ids)
        self._selected: set = set()
        self._shortlisted: set = set()
        self._rejected: set = set()

    @property
    def displayed(self) -> FrozenSet[str]:
        return self._displayed

    @property
    def selected(self) -> FrozenSet[str]:
        return frozenset(self._selected)

    @property
    def shortlisted(self) -> FrozenSet[str]:
        return frozenset(self._shortlisted)

    @property
    def rejected(self) -> FrozenSet[str]:
        return frozenset(self._rejected)

    @property
    def all_selected(self) -> bool:
        return bool(self._displayed) and self._selected == set(self._displayed)

    def focus(self, job_id: str, displayed_ids: Iterable[str]) -> None:
        """Show a (possibly new) result set. Resets selection if anything changed."""
        displayed = frozenset(displayed_ids)
        if job_id != self.job_id:
            self._shortlisted.clear()
            self._rejected.clear()
            self._selected.clear()
        elif displayed != self._displayed:
            self._selected.clear()
        self.job_id = job_id
        self._displayed = displayed

    def toggle(self, item_id: str) -> bool:
        """
        Flip one id's membership.

        Returns:
            True if the id is now selected

        Raises:
            NotFound: if the id is not among the displayed candidates
        """
        if item_id not in self._displayed:
            raise NotFound(f"{item_id} is not in the displayed result set")
        if item_id in self._selected:
            self._selected.discard(item_id)
            return False
        self._selected.add(item_id)
        return True

    def select_all(self) -> FrozenSet[str]:
        if self.all_selected:
            self._selected.clear()
        else:
            self._selected = set(self._displayed)
        return self.selected

    def clear(self) -> None:
        self._selected.clear()

    def shortlist(self, ids: Optional[Iterable[str]] = None) -> FrozenSet[str]:
        """Mark the selection (or just `ids` among the displayed) shortlisted."""
        moved = self._take(ids)
        self._shortlisted |= moved
        self._rejected -= moved
        return moved

    def reject(self, ids: Optional[Iterable[str]] = None) -> FrozenSet[str]:
        moved = self._take(ids)
        self._rejected |= moved
        self._shortlisted -= moved
        return moved

    def _take(self, ids: Optional[Iterable[str]]) -> FrozenSet[str]:
        if ids is None:
            moved = self.selected
        else:
            moved = frozenset(ids) & self._displayed
        self._selected -= moved
        return moved

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "job_id": self.job_id,
            "displayed": sorted(self._displayed),
            "selected": sorted(self._selected),
            "shortlisted": sorted(self._shortlisted),
            "rejected": sorted(self._rejected),
            "all_selected": self.all_selected,
        }


class SelectionRegistry:
    """
    One SelectionTracker per caller (UI session).

    All tracker mutations go through `with registry.lock:` so concurrent
    requests from the same caller are applied one at a time.
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self._trackers: Dict[str, SelectionTracker] = {}

    def get(self, session_key: str) -> SelectionTracker:
        with self.lock:
            tracker = self._trackers.get(session_key)
            if tracker is None:
                tracker = SelectionTracker()
                self._trackers[session_key] = tracker
            return tracker

    def reset(self) -> None:
        with self.lock:
            self._trackers.clear()


_registry: Optional[SelectionRegistry] = None


def get_selection_registry() -> SelectionRegistry:
    """Process-wide registry (FastAPI dependency)."""
    global _registry
    if _registry is None:
        _registry = SelectionRegistry()
    return _registry
