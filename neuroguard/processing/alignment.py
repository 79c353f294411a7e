"""
Trial/window alignment

Each Stroop trial is paired with the GSR samples recorded during a fixed
look-back interval ending at the trial timestamp. Windows for different
trials are independent and may overlap.
"""

from typing import Tuple

import numpy as np

from ..core.data_types import SignalSample, SignalStream, TrialRecord
from ..core.config import LOOKBACK_MS


def window_bounds(trial: TrialRecord, lookback_ms: int = LOOKBACK_MS) -> Tuple[float, float]:
    """Inclusive (start, end) of a trial's look-back window in ms"""
    return trial.timestamp_ms - lookback_ms, trial.timestamp_ms


def align(
    trial: TrialRecord,
    stream: SignalStream,
    lookback_ms: int = LOOKBACK_MS
) -> Tuple[SignalSample, ...]:
    """
    Select the GSR samples inside a trial's look-back window

    A sample belongs to the window when
    ``trial.timestamp_ms - lookback_ms <= sample.timestamp <= trial.timestamp_ms``.
    Both bounds are inclusive. The stream is sorted, so the slice is found by
    binary search on its timestamp array.

    Args:
        trial: Trial to align
        stream: GSR recording
        lookback_ms: Look-back duration in milliseconds

    Returns:
        Samples in timestamp order; empty when nothing was recorded in range
    """
    start, end = window_bounds(trial, lookback_ms)
    lo = int(np.searchsorted(stream.timestamps, start, side="left"))
    hi = int(np.searchsorted(stream.timestamps, end, side="right"))
    return stream.samples[lo:hi]
