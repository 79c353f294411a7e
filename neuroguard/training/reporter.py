"""
Metrics and feature-importance reporting

A reporter turns a labelled dataset into the summary shown to users and fed
to the commentary service: accuracy, precision, recall and F1 (DROWSY is the
positive class) plus feature importances sorted descending.

ClassifierReporter evaluates a real scikit-learn pipeline with
cross-validation. PlaceholderReporter synthesizes numbers in the ranges the
first dashboard displayed and exists for demos only.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

import numpy as np
from sklearn.metrics import accuracy_score, f1_score, precision_score, recall_score

from ..core.config import Config
from ..core.data_types import FeatureImportance, Label, LabeledSample, ModelMetrics, TrainingReport
from .models import FEATURE_NAMES, build_model_pipeline, compute_importances, cross_validate, feature_matrix

PLACEHOLDER_IMPORTANCES = (
    ("Stroop RT", 0.65),
    ("GSR Mean", 0.20),
    ("SCR Peaks", 0.10),
    ("Variance", 0.05),
)


def empty_report() -> TrainingReport:
    """All-zero metrics and no importances (empty dataset)"""
    return TrainingReport(metrics=ModelMetrics(accuracy=0.0, precision=0.0, recall=0.0, f1=0.0))


def score_labels(y_true: Sequence[str], y_pred: Sequence[str]) -> ModelMetrics:
    """Binary metrics with DROWSY as the positive class"""
    kwargs = dict(pos_label=Label.DROWSY.value, average="binary", zero_division=0)
    return ModelMetrics(
        accuracy=float(accuracy_score(y_true, y_pred)),
        precision=float(precision_score(y_true, y_pred, **kwargs)),
        recall=float(recall_score(y_true, y_pred, **kwargs)),
        f1=float(f1_score(y_true, y_pred, **kwargs)),
    )


def _unit(value: float) -> float:
    return float(min(max(value, 0.0), 1.0))


class MetricsReporter(ABC):
    """Strategy that evaluates a labelled dataset"""

    @abstractmethod
    def evaluate(self, samples: Sequence[LabeledSample]) -> TrainingReport:
        """Return metrics and importances for ``samples``"""


class ClassifierReporter(MetricsReporter):
    """
    Evaluate a scikit-learn classifier on the labelled dataset

    Metrics come from out-of-fold predictions. Importances come from the
    pipeline refitted on all samples, which is kept as ``pipeline_`` so the
    caller can save it.
    """

    def __init__(self, config: Optional[Config] = None,
                 feature_names: Sequence[str] = FEATURE_NAMES):
        self.config = config if config is not None else Config()
        self.feature_names = tuple(feature_names)
        self.pipeline_ = None

    def evaluate(self, samples: Sequence[LabeledSample]) -> TrainingReport:
        if len(samples) == 0:
            logging.warning("Empty dataset, returning zero metrics")
            return empty_report()

        X, y = feature_matrix(samples, self.feature_names)

        if len(np.unique(y)) < 2:
            # A single class cannot be discriminated; report the trivial predictor
            logging.warning(f"Dataset contains only '{y[0]}' samples, skipping classifier")
            return TrainingReport(
                metrics=score_labels(y, y),
                y_true=tuple(Label(v) for v in y),
                y_pred=tuple(Label(v) for v in y),
            )

        y_pred = cross_validate(build_model_pipeline(self.config), X, y,
                                cv=self.config.cv_folds, seed=self.config.seed)
        metrics = score_labels(y, y_pred)

        self.pipeline_ = build_model_pipeline(self.config)
        self.pipeline_.fit(X, y)
        importances = compute_importances(self.pipeline_, X, y, self.feature_names, seed=self.config.seed)

        logging.info(f"Metrics: accuracy={metrics.accuracy:.3f}, precision={metrics.precision:.3f}, "
                     f"recall={metrics.recall:.3f}, f1={metrics.f1:.3f}")
        return TrainingReport(
            metrics=metrics,
            importances=tuple(importances),
            y_true=tuple(Label(v) for v in y),
            y_pred=tuple(Label(v) for v in y_pred),
        )


class PlaceholderReporter(MetricsReporter):
    """
    Synthesized metrics for demos

    Accuracy is drawn from [0.94, 0.97), precision and recall around it, and
    F1 is their harmonic mean. Importances are fixed. Nothing is learned
    from the data.
    """

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def evaluate(self, samples: Sequence[LabeledSample]) -> TrainingReport:
        if len(samples) == 0:
            return empty_report()

        accuracy = 0.94 + self.rng.random() * 0.03
        precision = accuracy - 0.01 + self.rng.random() * 0.02
        recall = accuracy - 0.02 + self.rng.random() * 0.03
        f1 = 2 * precision * recall / (precision + recall)

        importances = sorted(
            (FeatureImportance(feature=name, importance=weight) for name, weight in PLACEHOLDER_IMPORTANCES),
            key=lambda item: item.importance,
            reverse=True,
        )

        logging.info("Using placeholder metrics (no classifier was trained)")
        return TrainingReport(
            metrics=ModelMetrics(accuracy=_unit(accuracy), precision=_unit(precision),
                                 recall=_unit(recall), f1=_unit(f1)),
            importances=tuple(importances),
        )
