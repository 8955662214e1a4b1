"""Recent results log tests."""
import pytest

from diamond_hunt.logic.recent_results import RecentResultsLog


class TestRecentResultsLog:
    """Tests for the bounded winner log."""

    def test_most_recent_first(self):
        """Newest tag comes first."""
        log = RecentResultsLog()
        for tag in ("🐰", "🐱", "🦁"):
            log.record(tag)
        assert log.entries() == ["🦁", "🐱", "🐰"]

    def test_bounded_at_limit_evicts_oldest(self):
        """Past the limit the oldest tags fall off."""
        log = RecentResultsLog(limit=8)
        for i in range(11):
            log.record(str(i))
        assert len(log) == 8
        assert log.entries() == [str(i) for i in range(10, 2, -1)]

    def test_entries_is_a_copy(self):
        """Mutating entries() does not touch the log."""
        log = RecentResultsLog()
        log.record("🐶")
        log.entries().append("x")
        assert log.entries() == ["🐶"]

    def test_invalid_limit(self):
        """A limit below 1 is refused."""
        with pytest.raises(ValueError):
            RecentResultsLog(limit=0)
