"""Shadow target pace: EMA over daily user speed, clamped to a fair range."""

from typing import Iterable, Optional


def exponential_moving_average(values: Iterable[Optional[float]], alpha: float) -> float:
    """
    EMA over `values`, oldest first.
    
    ema[0] = x0 (0 when missing); ema[i] = alpha * x_i + (1 - alpha) * ema[i-1].
    A missing value repeats the previous EMA.
    """
    ema = None
    for value in values:
        if ema is None:
            ema = float(value or 0)
            continue
        x = ema if value is None else float(value)
        ema = alpha * x + (1 - alpha) * ema
    return ema if ema is not None else 0.0


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def smooth_target(
    values: Iterable[Optional[float]],
    alpha: float,
    min_speed: float,
    max_speed: float,
) -> float:
    """EMA rounded to 2dp, then clamped to [min_speed, max_speed]."""
    ema = exponential_moving_average(values, alpha)
    return clamp(round(ema, 2), min_speed, max_speed)
