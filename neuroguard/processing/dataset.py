"""
Labelled dataset construction

The builder runs alignment, feature extraction and labelling over every
trial. Trials whose look-back window holds no GSR samples are dropped; the
remaining samples keep the input trial order.
"""

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from joblib import Parallel, delayed, effective_n_jobs

from ..core.data_types import Label, LabeledSample, SignalStream, TrialRecord
from ..core.config import LOOKBACK_MS
from ..detection.labeler import label
from .alignment import align
from .features import FeatureExtractor


class DatasetBuilder:
    """
    Build LabeledSamples from trials and a GSR stream

    Each trial is processed independently. With ``n_jobs != 1`` the trials
    are split into contiguous chunks and processed by joblib workers; chunk
    results are concatenated in order, so the output matches the serial run.
    """

    def __init__(self, lookback_ms: int = LOOKBACK_MS,
                 extractor: Optional[FeatureExtractor] = None, n_jobs: int = 1):
        self.lookback_ms = lookback_ms
        self.extractor = extractor if extractor is not None else FeatureExtractor()
        self.n_jobs = n_jobs

    def process_trial(self, trial: TrialRecord, stream: SignalStream) -> Optional[LabeledSample]:
        """Align, extract and label one trial; None if its window is empty"""
        window = align(trial, stream, self.lookback_ms)
        if not window:
            logging.debug(f"Trial {trial.id}: no GSR samples in window, skipping")
            return None

        return LabeledSample(
            trial=trial,
            window=window,
            features=self.extractor.extract(window),
            label=label(trial),
        )

    def _process_chunk(self, trials: Sequence[TrialRecord], stream: SignalStream) -> List[LabeledSample]:
        samples = []
        for trial in trials:
            sample = self.process_trial(trial, stream)
            if sample is not None:
                samples.append(sample)
        return samples

    def build(self, trials: Sequence[TrialRecord], stream: SignalStream) -> Tuple[LabeledSample, ...]:
        """
        Build the labelled dataset

        Args:
            trials: Trials in input order
            stream: GSR recording

        Returns:
            One LabeledSample per trial with a non-empty window, in trial order
        """
        logging.info(f"Building dataset from {len(trials)} trials "
                     f"({self.lookback_ms} ms look-back, n_jobs={self.n_jobs})")

        if self.n_jobs == 1 or len(trials) < 2:
            samples = self._process_chunk(trials, stream)
        else:
            n_chunks = min(len(trials), effective_n_jobs(self.n_jobs))
            chunks = [list(chunk) for chunk in np.array_split(np.arange(len(trials)), n_chunks)]
            results = Parallel(n_jobs=self.n_jobs)(
                delayed(self._process_chunk)([trials[i] for i in chunk], stream)
                for chunk in chunks
            )
            samples = [sample for chunk_samples in results for sample in chunk_samples]

        n_dropped = len(trials) - len(samples)
        if n_dropped:
            logging.info(f"Dropped {n_dropped} trials with empty GSR windows")

        n_drowsy = sum(1 for sample in samples if sample.label is Label.DROWSY)
        logging.info(f"Dataset built: {len(samples)} samples "
                     f"(ALERT={len(samples) - n_drowsy}, DROWSY={n_drowsy})")
        return tuple(samples)


def build(
    trials: Sequence[TrialRecord],
    stream: SignalStream,
    lookback_ms: int = LOOKBACK_MS
) -> Tuple[LabeledSample, ...]:
    """Build the labelled dataset serially with default settings"""
    return DatasetBuilder(lookback_ms=lookback_ms).build(trials, stream)


def to_frame(samples: Sequence[LabeledSample]) -> pd.DataFrame:
    """
    Flatten LabeledSamples into a DataFrame (one row per trial)

    The window itself is reduced to its sample count and time span.
    """
    columns = [
        "id", "timestamp_ms", "reaction_time_ms", "outcome", "n_window",
        "window_start_ms", "window_end_ms", "mean", "variance", "peak_count",
        "slope", "label",
    ]
    rows = []
    for sample in samples:
        rows.append({
            "id": sample.trial.id,
            "timestamp_ms": sample.trial.timestamp_ms,
            "reaction_time_ms": sample.trial.reaction_time_ms,
            "outcome": sample.trial.outcome.value,
            "n_window": len(sample.window),
            "window_start_ms": sample.window[0].timestamp,
            "window_end_ms": sample.window[-1].timestamp,
            "mean": sample.features.mean,
            "variance": sample.features.variance,
            "peak_count": sample.features.peak_count,
            "slope": sample.features.slope,
            "label": sample.label.value,
        })
    return pd.DataFrame(rows, columns=columns)
