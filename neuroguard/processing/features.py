"""
GSR window feature extraction

This module computes the descriptive statistics used as classifier evidence:
window mean and population variance, a phasic peak count and a first/last
rate-of-change proxy.
"""

import logging
from typing import Sequence

import numpy as np

from ..core.data_types import FeatureVector, SignalSample
from ..core.config import PEAK_MARGIN_US


def count_peaks(values: np.ndarray, mean: float, margin: float = PEAK_MARGIN_US) -> int:
    """
    Count phasic skin-conductance peaks

    A peak is an interior sample that is strictly greater than both
    neighbours and strictly greater than ``mean + margin``. The first and last
    samples can never be peaks, so windows shorter than three samples have
    none.

    Args:
        values: Window conductance values (µS)
        mean: Window mean (µS)
        margin: Absolute height above the mean a peak must clear (µS)

    Returns:
        int: Number of peaks
    """
    if values.size < 3:
        return 0

    centre = values[1:-1]
    is_peak = (centre > values[:-2]) & (centre > values[2:]) & (centre > mean + margin)
    return int(np.count_nonzero(is_peak))


class FeatureExtractor:
    """
    Extract a FeatureVector from an aligned GSR window

    The slope is ``(last - first) / n_samples``: a sample-count normalised
    difference, not a time derivative or a least-squares fit.
    """

    def __init__(self, peak_margin: float = PEAK_MARGIN_US):
        self.peak_margin = peak_margin

    def extract(self, window: Sequence[SignalSample]) -> FeatureVector:
        """
        Compute all features from one window snapshot

        Args:
            window: Non-empty sequence of samples

        Returns:
            FeatureVector: mean, variance, peak_count and slope

        Raises:
            ValueError: If the window is empty
        """
        if len(window) == 0:
            raise ValueError("Cannot extract features from an empty window")

        values = np.array([sample.value for sample in window], dtype=float)
        n = values.size

        mean = float(np.mean(values))
        # ddof=0: population variance; exactly zero for a flat window
        variance = float(np.var(values)) if np.ptp(values) > 0 else 0.0
        peak_count = count_peaks(values, mean, self.peak_margin)
        slope = float((values[-1] - values[0]) / n)

        logging.debug(f"Window features: n={n}, mean={mean:.3f}, var={variance:.4f}, "
                      f"peaks={peak_count}, slope={slope:.4f}")

        return FeatureVector(mean=mean, variance=variance, peak_count=peak_count, slope=slope)


def extract(window: Sequence[SignalSample]) -> FeatureVector:
    """Extract features with the default peak margin"""
    return FeatureExtractor().extract(window)
