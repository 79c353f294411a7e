"""
Alertness decision rules

The labeler assigns dataset ground truth from Stroop behaviour; the predictor
classifies single raw samples for live inference.
"""

from .labeler import label
from .predictor import (
    Predictor, predict, decide, ConfidenceStrategy, ThresholdDistanceConfidence,
    RandomConfidence, ModelConfidence
)

__all__ = [
    'label', 'Predictor', 'predict', 'decide', 'ConfidenceStrategy',
    'ThresholdDistanceConfidence', 'RandomConfidence', 'ModelConfidence'
]
