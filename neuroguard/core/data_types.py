"""
Core data types for NeuroGuard

This module defines the records passed between the readers, the windowing
and feature stages, the labeler, the predictor and the reporters. Records are
frozen so a loaded dataset can be shared without copying.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Tuple

import numpy as np


class Label(Enum):
    """Binary alertness ground truth"""
    ALERT = "Alert"
    DROWSY = "Drowsy"


class Outcome(Enum):
    """Correctness of a Stroop response"""
    CORRECT = "correct"
    WRONG = "wrong"

    @classmethod
    def from_cell(cls, value: str) -> "Outcome":
        # Anything other than "wrong" counts as a correct response
        if str(value).strip().lower() == cls.WRONG.value:
            return cls.WRONG
        return cls.CORRECT


@dataclass(frozen=True)
class SignalSample:
    """Single GSR reading"""
    timestamp: float          # Milliseconds
    value: float              # Conductance (µS)


@dataclass(frozen=True)
class SignalStream:
    """
    Continuous GSR recording ordered by timestamp

    Samples are sorted on construction (stable, so equal timestamps keep
    their input order). The timestamp array backs binary-search window
    lookups and is excluded from equality.
    """
    samples: Tuple[SignalSample, ...] = ()
    timestamps: np.ndarray = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        ordered = tuple(sorted(self.samples, key=lambda s: s.timestamp))
        object.__setattr__(self, "samples", ordered)
        object.__setattr__(
            self, "timestamps", np.array([s.timestamp for s in ordered], dtype=float)
        )

    @classmethod
    def from_samples(cls, samples: Iterable[SignalSample]) -> "SignalStream":
        return cls(samples=tuple(samples))

    def __len__(self) -> int:
        return len(self.samples)


@dataclass(frozen=True)
class TrialRecord:
    """One row of the Stroop behavioural table"""
    id: str
    timestamp_ms: int
    reaction_time_ms: int
    outcome: Outcome


@dataclass(frozen=True)
class FeatureVector:
    """Descriptive statistics of one aligned GSR window"""
    mean: float
    variance: float           # Population variance
    peak_count: int           # Phasic SCR peaks
    slope: float              # (last - first) / n_samples


@dataclass(frozen=True)
class LabeledSample:
    """Trial, the window it was aligned to, its features and its label"""
    trial: TrialRecord
    window: Tuple[SignalSample, ...]
    features: FeatureVector
    label: Label

    @property
    def id(self) -> str:
        return self.trial.id

    @property
    def reaction_time_ms(self) -> int:
        return self.trial.reaction_time_ms

    @property
    def mean(self) -> float:
        return self.features.mean

    @property
    def variance(self) -> float:
        return self.features.variance

    @property
    def peak_count(self) -> int:
        return self.features.peak_count

    @property
    def slope(self) -> float:
        return self.features.slope


@dataclass(frozen=True)
class PredictionResult:
    """Single-sample inference output"""
    label: Label
    confidence: float


@dataclass(frozen=True)
class ModelMetrics:
    accuracy: float
    precision: float
    recall: float
    f1: float


@dataclass(frozen=True)
class FeatureImportance:
    feature: str
    importance: float


@dataclass(frozen=True)
class TrainingReport:
    """
    Reporter output consumed by plots, metadata and commentary

    y_true / y_pred hold the evaluated labels when the reporter ran a real
    classifier; they are empty for synthesized reports.
    """
    metrics: ModelMetrics
    importances: Tuple[FeatureImportance, ...] = ()
    y_true: Tuple[Label, ...] = ()
    y_pred: Tuple[Label, ...] = ()


@dataclass(frozen=True)
class InferenceRecord:
    """Entry of the append-only inference history"""
    label: Label
    timestamp: float          # Unix timestamp
