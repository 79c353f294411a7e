import pathlib
from typing import Callable, Sequence, Tuple

import matplotlib

matplotlib.use("Agg")

import pytest

from neuroguard.acquisition.synthetic import synthesize_session, write_session_csv
from neuroguard.core.data_types import (
    LabeledSample, Outcome, SignalSample, SignalStream, TrialRecord
)
from neuroguard.detection.labeler import label
from neuroguard.processing.dataset import DatasetBuilder
from neuroguard.processing.features import extract


@pytest.fixture()
def make_stream() -> Callable[..., SignalStream]:
    def _make(pairs: Sequence[Tuple[float, float]]) -> SignalStream:
        return SignalStream.from_samples(SignalSample(timestamp=t, value=v) for t, v in pairs)
    return _make


@pytest.fixture()
def make_trial() -> Callable[..., TrialRecord]:
    def _make(trial_id: str = "1", timestamp_ms: int = 10_000, reaction_time_ms: int = 800,
              outcome: Outcome = Outcome.CORRECT) -> TrialRecord:
        return TrialRecord(id=trial_id, timestamp_ms=timestamp_ms,
                           reaction_time_ms=reaction_time_ms, outcome=outcome)
    return _make


@pytest.fixture()
def make_sample() -> Callable[..., LabeledSample]:
    def _make(trial_id: str, reaction_time_ms: int, values: Sequence[float],
              outcome: Outcome = Outcome.CORRECT) -> LabeledSample:
        trial = TrialRecord(id=trial_id, timestamp_ms=10_000,
                            reaction_time_ms=reaction_time_ms, outcome=outcome)
        n = len(values)
        window = tuple(SignalSample(timestamp=10_000 - 250.0 * (n - 1 - i), value=v)
                       for i, v in enumerate(values))
        return LabeledSample(trial=trial, window=window, features=extract(window), label=label(trial))
    return _make


@pytest.fixture(scope="session")
def synthetic_session() -> Tuple[list, SignalStream]:
    return synthesize_session(n_trials=60, seed=7)


@pytest.fixture(scope="session")
def synthetic_dataset(synthetic_session) -> Tuple[LabeledSample, ...]:
    trials, stream = synthetic_session
    return DatasetBuilder().build(trials, stream)


@pytest.fixture()
def session_csv(tmp_path: pathlib.Path, synthetic_session) -> Tuple[pathlib.Path, pathlib.Path]:
    trials, stream = synthetic_session
    trials_path = tmp_path / "stroop.csv"
    gsr_path = tmp_path / "gsr.csv"
    write_session_csv(trials, stream, str(trials_path), str(gsr_path), seed=7)
    return trials_path, gsr_path
