"""
Optional backend capabilities.

Tracks whether the vector extension and the short-term cache are usable.
Each capability is probed lazily on first use and memoized for the process
lifetime, so callers never branch on connection events.

Dependencies: asyncio, dataclasses
System role: Capability checks injected into retrieval and session management
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, fields

logger = logging.getLogger(__name__)

VECTOR = "vector"
CACHE = "cache"


@dataclass
class Capabilities:
    """Probe results; None means not yet checked."""

    vector: bool | None = None
    cache: bool | None = None


class CapabilityRegistry:
    """Lazily probes and memoizes optional capabilities."""

    def __init__(self) -> None:
        self._state = Capabilities()
        self._locks = {f.name: asyncio.Lock() for f in fields(Capabilities)}

    @property
    def snapshot(self) -> Capabilities:
        """Current probe results (copy)."""
        return Capabilities(vector=self._state.vector, cache=self._state.cache)

    async def ensure(self, name: str, probe: Callable[[], Awaitable[bool]]) -> bool:
        """
        Return the capability flag, running the probe once if unknown.

        A probe that raises counts as unavailable.

        Args:
            name: Capability field name ("vector" or "cache")
            probe: Async callable returning True when the backend is usable

        Returns:
            bool: Whether the capability is available
        """
        if name not in self._locks:
            raise ValueError(f"Unknown capability: {name}")

        current = getattr(self._state, name)
        if current is not None:
            return current

        async with self._locks[name]:
            current = getattr(self._state, name)
            if current is not None:
                return current
            try:
                available = bool(await probe())
            except Exception as e:
                logger.warning(
                    f"{__name__}:ensure - {name} probe failed: {type(e).__name__}: {e}"
                )
                available = False
            if not available:
                logger.warning(
                    f"{__name__}:ensure - {name} capability unavailable, continuing without it"
                )
            setattr(self._state, name, available)
            return available

    def reset(self, name: str | None = None) -> None:
        """Forget memoized results so the next use probes again."""
        if name is None:
            self._state = Capabilities()
        else:
            setattr(self._state, name, None)
