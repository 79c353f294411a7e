"""
Raw table readers for Stroop trials and GSR recordings

Both inputs are comma-separated tables with a header row. Rows are split
without a fixed schema so that short or malformed rows can be dropped instead
of failing the whole load.

Behavioural table columns:
    [id, timestampMs, col2, col3, col4, outcome, reactionTimeMs]
    Only indices 0, 1, 5 and 6 are used.

Signal table columns:
    [timestampSeconds, value]
    Timestamps are converted to milliseconds.
"""

import logging
import os
from typing import List

import numpy as np
import pandas as pd

from ..core.data_types import Outcome, SignalSample, SignalStream, TrialRecord
from ..core.config import TRIAL_MIN_COLUMNS, TRIAL_COLUMNS, SIGNAL_MIN_COLUMNS


def _split_rows(path: str) -> pd.DataFrame:
    """
    Read a CSV file into a ragged frame of string cells

    The header line and blank lines are dropped and quoted cells are
    unquoted. Rows shorter than the longest row are padded with NaN.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"CSV file not found: {path}")

    # Upper bound on cells per row; quoted commas only overcount
    with open(path, "r", encoding="utf-8") as f:
        n_columns = max((line.count(",") + 1 for line in f), default=0)
    if n_columns == 0:
        return pd.DataFrame()

    try:
        frame = pd.read_csv(
            path, header=None, skiprows=1, names=range(n_columns), index_col=False,
            dtype=str, skip_blank_lines=True, skipinitialspace=True, encoding="utf-8"
        )
    except pd.errors.EmptyDataError:
        return pd.DataFrame()

    if frame.empty:
        return frame
    return frame.apply(lambda column: column.str.strip())


def _column(frame: pd.DataFrame, index: int) -> pd.Series:
    if index in frame.columns:
        return frame[index]
    return pd.Series([None] * len(frame), index=frame.index, dtype=object)


def parse_trial_frame(frame: pd.DataFrame) -> List[TrialRecord]:
    """
    Convert split behavioural rows into TrialRecords

    Rows with fewer than seven cells, a non-numeric timestamp or reaction
    time, or negative timing values are skipped. Fractional values are
    truncated toward zero.
    """
    if frame.empty:
        return []

    complete = _column(frame, TRIAL_MIN_COLUMNS - 1).notna()

    timestamps = pd.to_numeric(_column(frame, TRIAL_COLUMNS["timestamp_ms"]), errors="coerce")
    reaction_times = pd.to_numeric(_column(frame, TRIAL_COLUMNS["reaction_time_ms"]), errors="coerce")

    valid = (
        complete
        & np.isfinite(timestamps) & np.isfinite(reaction_times)
        & (timestamps >= 0) & (reaction_times >= 0)
    )

    n_skipped = int((~valid).sum())
    if n_skipped:
        logging.debug(f"Skipped {n_skipped} malformed trial rows")

    trials = []
    for idx in frame.index[valid.to_numpy()]:
        trials.append(TrialRecord(
            id=str(frame.at[idx, TRIAL_COLUMNS["id"]]).strip(),
            timestamp_ms=int(timestamps[idx]),
            reaction_time_ms=int(reaction_times[idx]),
            outcome=Outcome.from_cell(frame.at[idx, TRIAL_COLUMNS["outcome"]]),
        ))

    ids = [trial.id for trial in trials]
    if len(set(ids)) != len(ids):
        logging.warning("Duplicate trial ids found in behavioural table")

    return trials


def parse_signal_frame(frame: pd.DataFrame) -> SignalStream:
    """Convert split signal rows into a SignalStream (seconds -> ms)"""
    if frame.empty:
        return SignalStream()

    complete = _column(frame, SIGNAL_MIN_COLUMNS - 1).notna()
    seconds = pd.to_numeric(_column(frame, 0), errors="coerce")
    values = pd.to_numeric(_column(frame, 1), errors="coerce")

    valid = complete & np.isfinite(seconds) & np.isfinite(values)

    n_skipped = int((~valid).sum())
    if n_skipped:
        logging.debug(f"Skipped {n_skipped} malformed signal rows")

    samples = [
        SignalSample(timestamp=float(t) * 1000.0, value=float(v))
        for t, v in zip(seconds[valid], values[valid])
    ]
    return SignalStream.from_samples(samples)


def load_trials(path: str) -> List[TrialRecord]:
    """
    Load the Stroop behavioural table

    Args:
        path: Path to the trial CSV file

    Returns:
        TrialRecords in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    logging.info(f"Loading trial table from: {path}")
    trials = parse_trial_frame(_split_rows(path))

    n_wrong = sum(1 for trial in trials if trial.outcome is Outcome.WRONG)
    logging.info(f"Loaded {len(trials)} trials ({n_wrong} wrong responses)")
    return trials


def load_signal(path: str) -> SignalStream:
    """
    Load the GSR recording

    Args:
        path: Path to the signal CSV file

    Returns:
        SignalStream sorted by timestamp (ms)

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    logging.info(f"Loading GSR signal from: {path}")
    stream = parse_signal_frame(_split_rows(path))

    if len(stream) > 0:
        span_sec = (stream.timestamps[-1] - stream.timestamps[0]) / 1000.0
        logging.info(f"Loaded {len(stream)} GSR samples spanning {span_sec:.1f}s")
    else:
        logging.warning("GSR table contained no usable samples")
    return stream
