"""
Session state for the presentation layer

SessionState holds everything a front end needs between user actions: the
current labelled dataset, the latest report and commentary, predictor form
inputs and the inference history. The numeric pipeline never reads or writes
it; callers pass results in.
"""

import threading
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .data_types import InferenceRecord, Label, LabeledSample, PredictionResult, TrainingReport


@dataclass
class PredictorInputs:
    """Values shown in the single-sample predictor form"""
    rt_ms: float = 850.0
    gsr_mean: float = 1.85
    peak_count: int = 2


@dataclass(frozen=True)
class SessionSummary:
    """Label counts over the dataset plus the inference history"""
    total: int
    drowsy: int
    alert: int


class SessionState:
    """
    Mutable session container with atomic dataset swaps

    ``samples`` is always a complete tuple: a reload assigns a new tuple in
    one step, so concurrent readers see either the old or the new dataset.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.samples: Tuple[LabeledSample, ...] = ()
        self.report: Optional[TrainingReport] = None
        self.analysis: str = ""
        self.form_inputs = PredictorInputs()
        self.last_prediction: Optional[PredictionResult] = None
        self._history: List[InferenceRecord] = []

    def load_dataset(self, samples: Sequence[LabeledSample]) -> None:
        """Replace the dataset and reset history, report and analysis"""
        new_samples = tuple(samples)
        with self._lock:
            self.samples = new_samples
            self._history = []
            self.report = None
            self.analysis = ""
            self.last_prediction = None

    def set_report(self, report: TrainingReport) -> None:
        with self._lock:
            self.report = report
            self.analysis = ""

    def set_analysis(self, text: str) -> None:
        with self._lock:
            self.analysis = text

    def record_prediction(self, result: PredictionResult, timestamp: Optional[float] = None) -> InferenceRecord:
        """Append a prediction to the inference history"""
        record = InferenceRecord(label=result.label, timestamp=time.time() if timestamp is None else timestamp)
        with self._lock:
            self._history.append(record)
            self.last_prediction = result
        return record

    @property
    def history(self) -> Tuple[InferenceRecord, ...]:
        with self._lock:
            return tuple(self._history)

    def summary(self) -> SessionSummary:
        with self._lock:
            samples = self.samples
            history = tuple(self._history)

        drowsy = sum(1 for s in samples if s.label is Label.DROWSY)
        drowsy += sum(1 for h in history if h.label is Label.DROWSY)
        total = len(samples) + len(history)
        return SessionSummary(total=total, drowsy=drowsy, alert=total - drowsy)
