"""
Test suite for the pgvector store helpers.

Database-free checks of distance scoring and capability probing.

System role: Verification of vector store adapter behaviour
"""

from unittest.mock import MagicMock

import pytest

from taskdesk.boundary.vdb.pgvector_store import PgVectorStore, distance_to_score
from taskdesk.core.capabilities import CapabilityRegistry


class TestDistanceToScore:
    """Test suite for distance_to_score."""

    @pytest.mark.parametrize(
        "distance,expected",
        [(0.0, 1.0), (1.0, 0.5), (2.0, 0.0), (3.0, 0.0), (-0.5, 1.0), (None, 0.0)],
    )
    def test_distance_to_score_should_map_into_unit_interval(self, distance, expected) -> None:
        """Test cosine distance maps to a clamped similarity."""
        assert distance_to_score(distance) == pytest.approx(expected)


class TestEnsureReady:
    """Test suite for PgVectorStore.ensure_ready."""

    @pytest.mark.asyncio
    async def test_ensure_ready_should_memoize_failed_probe(self) -> None:
        """Test an unreachable backend is probed once and reported unavailable."""
        # Arrange
        session_factory = MagicMock(side_effect=OSError("connection refused"))
        registry = CapabilityRegistry()
        store = PgVectorStore(session_factory=session_factory, capabilities=registry)

        # Act
        first = await store.ensure_ready()
        second = await store.ensure_ready()

        # Assert
        assert first is False
        assert second is False
        assert session_factory.call_count == 1
        assert registry.snapshot.vector is False
