"""
Synthetic Stroop + GSR session generation

This module creates paired behavioural and electrodermal recordings for
exercising the pipeline without a real experiment. The synthetic data mimics
the relationships the labeler and predictor rely on:

1. Alert blocks: fast reaction times, few errors, higher tonic conductance
   and a phasic skin-conductance response after most stimuli
2. Drowsy blocks: slow reaction times, more errors, tonic conductance below
   the drowsy threshold and sparse, weak responses
3. A few trials placed after the recording ends, so their look-back window
   is empty and the dataset builder has to drop them
"""

import logging
import os
from typing import List, Tuple

import numpy as np
import pandas as pd

from ..core.data_types import Outcome, SignalSample, SignalStream, TrialRecord
from ..core.config import LOOKBACK_MS

TRIAL_HEADER = ["S.No", "timestampMs", "word", "color", "key", "response", "rtMs"]
SIGNAL_HEADER = ["time", "gsr"]
STROOP_WORDS = ["RED", "GREEN", "BLUE", "YELLOW"]


def synthesize_session(
    n_trials: int = 120,
    fs: float = 4.0,
    trial_interval_s: float = 4.0,
    block_size: int = 10,
    drowsy_fraction: float = 0.4,
    n_orphan_trials: int = 2,
    seed: int = 42
) -> Tuple[List[TrialRecord], SignalStream]:
    """
    Generate a synthetic Stroop session with a synchronised GSR stream

    Args:
        n_trials: Number of trials inside the recording
        fs: GSR sampling rate in Hz
        trial_interval_s: Spacing between trial onsets in seconds
        block_size: Trials per alertness block
        drowsy_fraction: Probability that a block is drowsy
        n_orphan_trials: Trials appended after the recording ends
        seed: Random seed for reproducibility

    Returns:
        Tuple of (trials, stream) in the same form as the CSV readers produce
    """
    rng = np.random.default_rng(seed)
    logging.info(f"Generating synthetic session: {n_trials} trials, GSR at {fs} Hz")

    lead_in_s = LOOKBACK_MS / 1000.0 + 1.0
    duration_s = lead_in_s + n_trials * trial_interval_s
    n_samples = int(duration_s * fs) + 1
    time_vector = np.arange(n_samples) / fs

    # Alertness state per trial, constant within a block
    n_blocks = int(np.ceil(n_trials / block_size))
    block_drowsy = rng.random(n_blocks) < drowsy_fraction
    trial_drowsy = np.repeat(block_drowsy, block_size)[:n_trials]
    onsets_s = lead_in_s + np.arange(n_trials) * trial_interval_s

    gsr = _tonic_level(time_vector, onsets_s, trial_drowsy, rng)
    for onset, drowsy in zip(onsets_s, trial_drowsy):
        _add_scr(gsr, time_vector, onset, drowsy, rng)
    gsr += rng.normal(0.0, 0.01, n_samples)

    stream = SignalStream.from_samples(
        SignalSample(timestamp=float(t) * 1000.0, value=float(v))
        for t, v in zip(time_vector, gsr)
    )

    trials = []
    for idx, (onset, drowsy) in enumerate(zip(onsets_s, trial_drowsy)):
        trials.append(_make_trial(idx + 1, onset, drowsy, rng))

    # Orphans sit more than one look-back after the last GSR sample
    for k in range(n_orphan_trials):
        onset = duration_s + LOOKBACK_MS / 1000.0 + 1.0 + k * trial_interval_s
        trials.append(_make_trial(n_trials + k + 1, onset, False, rng))

    logging.info(
        f"Generated {len(trials)} trials ({int(trial_drowsy.sum())} in drowsy blocks), "
        f"{len(stream)} GSR samples over {duration_s:.1f}s"
    )
    return trials, stream


def _tonic_level(
    time_vector: np.ndarray,
    onsets_s: np.ndarray,
    trial_drowsy: np.ndarray,
    rng: np.random.Generator
) -> np.ndarray:
    """Slowly varying skin conductance level following the block states"""
    alert_level = 2.2 + rng.normal(0.0, 0.1)
    drowsy_level = 1.2 + rng.normal(0.0, 0.05)

    # Step target per sample, taken from the most recent trial onset
    trial_idx = np.clip(np.searchsorted(onsets_s, time_vector, side="right") - 1, 0, len(onsets_s) - 1)
    target = np.where(trial_drowsy[trial_idx], drowsy_level, alert_level)

    # First-order lag so block transitions take a few seconds
    level = np.empty_like(target)
    level[0] = target[0]
    alpha = 0.05
    for i in range(1, len(target)):
        level[i] = level[i - 1] + alpha * (target[i] - level[i - 1])

    drift = 0.05 * np.sin(2 * np.pi * time_vector / 120.0)
    return level + drift


def _add_scr(
    gsr: np.ndarray,
    time_vector: np.ndarray,
    onset_s: float,
    drowsy: bool,
    rng: np.random.Generator
) -> None:
    """
    Add one skin-conductance response after a stimulus (in place)

    The response is a bi-exponential: fast rise, slow recovery.
    """
    if drowsy and rng.random() > 0.3:
        return

    amplitude = (0.05 if drowsy else 0.3) * (1.0 + 0.2 * rng.normal())
    latency_s = 1.5 + 0.3 * rng.random()

    t = time_vector - (onset_s + latency_s)
    mask = t >= 0
    tau_rise, tau_decay = 0.75, 2.0
    shape = np.exp(-t[mask] / tau_decay) - np.exp(-t[mask] / tau_rise)
    if shape.size and shape.max() > 0:
        gsr[mask] += amplitude * shape / shape.max()


def _make_trial(number: int, onset_s: float, drowsy: bool, rng: np.random.Generator) -> TrialRecord:
    if drowsy:
        rt = rng.normal(1250.0, 180.0)
        wrong = rng.random() < 0.25
    else:
        rt = rng.normal(780.0, 120.0)
        wrong = rng.random() < 0.04

    return TrialRecord(
        id=str(number),
        timestamp_ms=int(round(onset_s * 1000.0)),
        reaction_time_ms=int(max(rt, 250.0)),
        outcome=Outcome.WRONG if wrong else Outcome.CORRECT,
    )


def write_session_csv(
    trials: List[TrialRecord],
    stream: SignalStream,
    trials_path: str,
    gsr_path: str,
    seed: int = 42
) -> None:
    """
    Write a session in the raw table formats the readers consume

    The unused Stroop columns (word, ink colour, key) are filled with
    plausible values so the files look like a real export.
    """
    rng = np.random.default_rng(seed)

    for path in (trials_path, gsr_path):
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    trial_frame = pd.DataFrame(
        [
            [
                trial.id,
                trial.timestamp_ms,
                rng.choice(STROOP_WORDS),
                rng.choice(STROOP_WORDS),
                rng.choice(["d", "f", "j", "k"]),
                trial.outcome.value,
                trial.reaction_time_ms,
            ]
            for trial in trials
        ],
        columns=TRIAL_HEADER,
    )
    trial_frame.to_csv(trials_path, index=False)

    signal_frame = pd.DataFrame(
        {
            SIGNAL_HEADER[0]: stream.timestamps / 1000.0,
            SIGNAL_HEADER[1]: [sample.value for sample in stream.samples],
        }
    )
    signal_frame.to_csv(gsr_path, index=False, float_format="%.6f")

    logging.info(f"Wrote {len(trial_frame)} trials to {trials_path}")
    logging.info(f"Wrote {len(signal_frame)} GSR samples to {gsr_path}")
