"""
Single-sample alertness prediction

This module classifies a raw (reaction time, GSR mean, peak count) triple
without a surrounding window. The decision rule differs from the labeler: a
live sample has no Stroop outcome, so a GSR mean threshold takes the place of
the correctness check. Predictions from this rule need not agree
with dataset labels for the same subject.

Confidence is pluggable. The default grows with the distance from the
deciding threshold; a seeded uniform strategy reproduces the placeholder
numbers of earlier versions; a model-backed strategy reports the probability
a fitted classifier assigns to the rule's label.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

import numpy as np

from ..core.data_types import Label, PredictionResult
from ..core.config import (
    RT_DROWSY_MS, GSR_MEAN_DROWSY_US, CONFIDENCE_BAND, CONFIDENCE_SCALE, PREDICTOR_FEATURES
)


def decide(
    rt_ms: float,
    gsr_mean: float,
    rt_threshold_ms: float = RT_DROWSY_MS,
    gsr_threshold_us: float = GSR_MEAN_DROWSY_US
) -> Label:
    """DROWSY if ``rt_ms > rt_threshold_ms`` or ``gsr_mean < gsr_threshold_us``"""
    if rt_ms > rt_threshold_ms or gsr_mean < gsr_threshold_us:
        return Label.DROWSY
    return Label.ALERT


class ConfidenceStrategy(ABC):
    """Scores how sure the predictor is about a decided label"""

    @abstractmethod
    def score(self, rt_ms: float, gsr_mean: float, peak_count: int, label: Label) -> float:
        """Return a confidence for ``label`` given the raw inputs"""


class ThresholdDistanceConfidence(ConfidenceStrategy):
    """
    Confidence from the normalised distance to the deciding threshold

    Distances are relative to each threshold (``|rt - 1100| / 1100`` and
    ``|gsr - 1.5| / 1.5``). For ALERT both conditions must hold, so the
    nearer threshold decides; for DROWSY the furthest exceeded threshold
    decides. The margin is mapped through tanh into the half-open band
    ``[low, high)``: the score is monotonic in the margin, equals ``low`` at a
    threshold and stays below ``high`` however large the margin.
    """

    def __init__(self, band: Tuple[float, float] = CONFIDENCE_BAND,
                 scale: float = CONFIDENCE_SCALE,
                 rt_threshold_ms: float = RT_DROWSY_MS,
                 gsr_threshold_us: float = GSR_MEAN_DROWSY_US):
        self.band = band
        self.scale = scale
        self.rt_threshold_ms = rt_threshold_ms
        self.gsr_threshold_us = gsr_threshold_us

    def margin(self, rt_ms: float, gsr_mean: float, label: Label) -> float:
        # Positive values lie on the drowsy side of a threshold
        rt_excess = (rt_ms - self.rt_threshold_ms) / self.rt_threshold_ms
        gsr_deficit = (self.gsr_threshold_us - gsr_mean) / self.gsr_threshold_us

        if label is Label.DROWSY:
            exceeded = [d for d in (rt_excess, gsr_deficit) if d > 0]
            return max(exceeded) if exceeded else 0.0
        return max(0.0, min(-rt_excess, -gsr_deficit))

    def score(self, rt_ms: float, gsr_mean: float, peak_count: int, label: Label) -> float:
        low, high = self.band
        margin = self.margin(rt_ms, gsr_mean, label)
        score = low + (high - low) * np.tanh(margin / self.scale)
        if high > low:
            # tanh saturates to 1.0 in floating point
            score = min(score, np.nextafter(high, low))
        return float(score)


class RandomConfidence(ConfidenceStrategy):
    """Placeholder: uniform draw in the confidence band, independent of inputs"""

    def __init__(self, band: Tuple[float, float] = CONFIDENCE_BAND, seed: Optional[int] = None):
        self.band = band
        self.rng = np.random.default_rng(seed)

    def score(self, rt_ms: float, gsr_mean: float, peak_count: int, label: Label) -> float:
        low, high = self.band
        return float(self.rng.uniform(low, high))


class ModelConfidence(ConfidenceStrategy):
    """
    Confidence from a fitted classifier's predict_proba

    The model must have been trained on the predictor feature triple with
    Label values as class names (see training.models.build_predictor_model).
    If the model cannot score the sample, the fallback strategy is used.
    """

    def __init__(self, model, feature_names: Sequence[str] = PREDICTOR_FEATURES,
                 fallback: Optional[ConfidenceStrategy] = None):
        self.model = model
        self.feature_names = tuple(feature_names)
        self.fallback = fallback if fallback is not None else ThresholdDistanceConfidence()

    def score(self, rt_ms: float, gsr_mean: float, peak_count: int, label: Label) -> float:
        try:
            X = np.array([[rt_ms, gsr_mean, peak_count]], dtype=float)
            proba = self.model.predict_proba(X)[0]
            classes = list(self.model.classes_)
            if label.value not in classes:
                logging.warning(f"Model has no class '{label.value}', using fallback confidence")
                return self.fallback.score(rt_ms, gsr_mean, peak_count, label)
            return float(proba[classes.index(label.value)])
        except Exception as e:
            logging.error(f"Model confidence failed: {e}")
            return self.fallback.score(rt_ms, gsr_mean, peak_count, label)


class Predictor:
    """
    Classify a single raw feature triple

    The discrete decision always comes from ``decide``; the confidence
    strategy only scores it. Scores are clipped into [0, 1].
    """

    def __init__(self, confidence: Optional[ConfidenceStrategy] = None,
                 rt_threshold_ms: float = RT_DROWSY_MS,
                 gsr_threshold_us: float = GSR_MEAN_DROWSY_US):
        self.confidence = confidence if confidence is not None else ThresholdDistanceConfidence(
            rt_threshold_ms=rt_threshold_ms, gsr_threshold_us=gsr_threshold_us
        )
        self.rt_threshold_ms = rt_threshold_ms
        self.gsr_threshold_us = gsr_threshold_us

    def predict(self, rt_ms: float, gsr_mean: float, peak_count: int) -> PredictionResult:
        """
        Predict alertness from raw inputs

        Args:
            rt_ms: Stroop reaction time in milliseconds
            gsr_mean: Mean skin conductance in µS
            peak_count: Number of phasic SCR peaks

        Returns:
            PredictionResult: label and confidence in [0, 1]
        """
        result_label = decide(rt_ms, gsr_mean, self.rt_threshold_ms, self.gsr_threshold_us)
        confidence = self.confidence.score(rt_ms, gsr_mean, peak_count, result_label)
        confidence = float(np.clip(confidence, 0.0, 1.0))

        logging.debug(f"Prediction: rt={rt_ms}, gsr={gsr_mean}, peaks={peak_count} -> "
                      f"{result_label.value} ({confidence:.3f})")
        return PredictionResult(label=result_label, confidence=confidence)


def predict(rt_ms: float, gsr_mean: float, peak_count: int) -> PredictionResult:
    """Predict with the default distance-based confidence"""
    return Predictor().predict(rt_ms, gsr_mean, peak_count)
