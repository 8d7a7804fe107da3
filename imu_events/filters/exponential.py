"""First-order exponential filters.

The same expressions are used for scalars and for 3-axis numpy vectors;
vectors are filtered per axis.
"""

import math


def low_pass(sample, previous, alpha: float):
    """Exponential smoothing step.

    Args:
        sample: New measurement (float or vector).
        previous: Previous filtered value, same shape as ``sample``.
        alpha: Coefficient in (0, 1). Smaller means more smoothing.

    Returns:
        ``alpha * sample + (1 - alpha) * previous``.
    """
    return alpha * sample + (1.0 - alpha) * previous


def high_pass(sample, previous_sample, previous_output, alpha: float):
    """First-order high-pass step.

    Args:
        sample: New measurement (float or vector).
        previous_sample: Measurement passed on the previous call.
        previous_output: Output returned on the previous call.
        alpha: Coefficient in (0, 1).

    Returns:
        ``alpha * (previous_output + sample - previous_sample)``.
    """
    return alpha * (previous_output + sample - previous_sample)


def get_alpha(rate: float, cutoff: float) -> float:
    """Low-pass coefficient for a sampling rate and cutoff frequency.

    Args:
        rate: Sampling frequency in Hz.
        cutoff: Cutoff frequency in Hz.

    Returns:
        Filter coefficient ``dt / (rc + dt)``.

    Raises:
        ValueError: If rate or cutoff is not positive.
    """
    if rate <= 0:
        raise ValueError(f"Sampling rate must be positive, got {rate}")
    if cutoff <= 0:
        raise ValueError(f"Cutoff frequency must be positive, got {cutoff}")

    rc = 1.0 / (2.0 * math.pi * cutoff)
    dt = 1.0 / rate
    return dt / (rc + dt)
