"""Unit tests for reaction snapshot invariants."""

import pytest
from pydantic import ValidationError

from discuss.domain.model import ReactionSnapshot
from discuss.domain.value import ReactionCategory, UserId
from tests.conftest import make_snapshot


class TestReactionSnapshot:
    """Tests for ReactionSnapshot validation."""

    def test_empty_snapshot_is_consistent(self):
        """An empty snapshot should carry every category at zero."""
        snapshot = ReactionSnapshot.empty()

        assert snapshot.total == 0
        assert snapshot.counts == {category: 0 for category in ReactionCategory}

    def test_total_must_match_counts(self):
        """A total disagreeing with the counts should be rejected."""
        counts = {category: 0 for category in ReactionCategory}
        counts[ReactionCategory.LIKE] = 2

        with pytest.raises(ValidationError, match="sum of counts"):
            ReactionSnapshot(counts=counts, total=1)

    def test_negative_count_rejected(self):
        """Negative counts should be rejected."""
        counts = {category: 0 for category in ReactionCategory}
        counts[ReactionCategory.LIKE] = 1
        counts[ReactionCategory.SAD] = -1

        with pytest.raises(ValidationError, match="non-negative"):
            ReactionSnapshot(counts=counts, total=0)

    def test_missing_category_rejected(self):
        """Every category must be present in counts."""
        with pytest.raises(ValidationError, match="Missing counts"):
            ReactionSnapshot(counts={ReactionCategory.LIKE: 0}, total=0)

    def test_reaction_of_returns_users_reaction(self):
        """reaction_of should find a user's current reaction."""
        snapshot = make_snapshot(
            ("u1", ReactionCategory.WOW), ("u2", ReactionCategory.SAD)
        )

        assert snapshot.reaction_of(UserId("u2")).action == ReactionCategory.SAD
        assert snapshot.reaction_of(UserId("u3")) is None

    def test_snapshot_is_immutable(self):
        """Snapshots are frozen."""
        snapshot = ReactionSnapshot.empty()

        with pytest.raises(ValidationError):
            snapshot.total = 3

    def test_counts_and_reactions_are_read_only(self):
        """Nested collections of a snapshot cannot be changed in place."""
        snapshot = make_snapshot(("u1", ReactionCategory.LIKE))

        with pytest.raises(TypeError):
            snapshot.counts[ReactionCategory.LIKE] = 7
        assert isinstance(snapshot.reactions, tuple)
        assert snapshot.counts[ReactionCategory.LIKE] == 1
        assert snapshot.model_dump()["counts"][ReactionCategory.LIKE] == 1
