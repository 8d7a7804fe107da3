"""Shared warm-up handling for streaming detectors.

Every detector keeps its filter memory in an explicit state record. The
record is created zeroed when the detector is built (or supplied by the
caller), mutated on each ``update`` call and cleared in place by
``reset``. A detector instance must be fed by a single sampling loop.
"""

from dataclasses import MISSING, dataclass, fields
from typing import Optional

DEFAULT_WARMUP = 32
NORM_EPSILON = 1e-9


@dataclass
class DetectorState:
    """Base state record: the warm-up counter."""
    setup: int = 0

    def clear(self) -> None:
        """Return every field to its initial value."""
        for f in fields(self):
            if f.default_factory is not MISSING:
                setattr(self, f.name, f.default_factory())
            else:
                setattr(self, f.name, f.default)


class Detector:
    """Base class for warm-up gated detectors."""

    state_class = DetectorState

    def __init__(self, warmup: int = DEFAULT_WARMUP, state: Optional[DetectorState] = None):
        """Initialize detector.

        Args:
            warmup: Number of calls used only to prime the filters.
            state: Existing state record to continue from. A new zeroed
                record is created if None.

        Raises:
            ValueError: If warmup is less than 1 or state has the wrong type.
        """
        if warmup < 1:
            raise ValueError(f"Warm-up length must be at least 1, got {warmup}")
        if state is not None and not isinstance(state, self.state_class):
            raise ValueError(
                f"{type(self).__name__} needs {self.state_class.__name__}, "
                f"got {type(state).__name__}"
            )

        self.warmup = warmup
        self.state = state if state is not None else self.state_class()

    @property
    def is_warm(self) -> bool:
        """Whether the warm-up window has completed."""
        return self.state.setup >= self.warmup

    def reset(self) -> None:
        """Clear the state record in place."""
        self.state.clear()

    def _accumulating(self) -> bool:
        """Advance the warm-up counter.

        Returns:
            True while still warming up. The counter saturates at the
            warm-up length.
        """
        if self.state.setup < self.warmup:
            self.state.setup += 1
            return True
        return False

    def _restart(self) -> None:
        """Start a new baseline epoch after an event."""
        self.state.setup = 0
