"""Fall detection: weightlessness followed by an impact.

A stationary low-g reading alone is never reported as a fall; the
detector only latches FALL when an impact follows a weightless phase.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from ..core.types import FallStage, as_vector

logger = logging.getLogger(__name__)


@dataclass
class FallState:
    """State of the fall detector."""
    stage: FallStage = FallStage.INIT
    magnitude: float = 0.0

    def clear(self) -> None:
        """Return to the initial stage."""
        self.stage = FallStage.INIT
        self.magnitude = 0.0


class FallDetector:
    """Three-stage state machine over the acceleration magnitude.

    INIT -> WEIGHTLESSNESS when the magnitude drops below ``w_ths``,
    WEIGHTLESSNESS -> FALL when it then exceeds ``i_ths``. FALL is
    latched until ``reset()`` is called.

    For compatibility, calling ``update`` with ``w_ths + i_ths == 0``
    while in FALL also resets the detector.
    """

    def __init__(self, state: Optional[FallState] = None):
        """Initialize detector.

        Args:
            state: Existing state record to continue from. A new one is
                created if None.
        """
        self.state = state if state is not None else FallState()

    @property
    def stage(self) -> FallStage:
        """Current stage."""
        return self.state.stage

    def update(self, acc, w_ths: float, i_ths: float) -> FallStage:
        """Process one accelerometer sample.

        Args:
            acc: Accelerometer vector [x, y, z] in g.
            w_ths: Weightlessness threshold in g.
            i_ths: Impact threshold in g.

        Returns:
            Stage after this sample.
        """
        x, y, z = as_vector(acc)
        m = math.sqrt(x * x + y * y + z * z)
        state = self.state
        state.magnitude = m

        if state.stage is FallStage.INIT:
            if m < w_ths:
                state.stage = FallStage.WEIGHTLESSNESS
                logger.info("Weightlessness: %.3f g", m)
        elif state.stage is FallStage.WEIGHTLESSNESS:
            if m > i_ths:
                state.stage = FallStage.FALL
                logger.warning("Fall detected: impact %.3f g", m)
        elif w_ths + i_ths == 0.0:
            self.reset()

        return state.stage

    def reset(self) -> None:
        """Return to INIT after a fall has been handled."""
        self.state.clear()
        logger.debug("Fall stage reset to INIT")
