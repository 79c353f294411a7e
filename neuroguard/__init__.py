"""
NeuroGuard - Alertness classification from GSR and Stroop performance

A modular Python package that aligns skin-conductance recordings with Stroop
trials, extracts window features, labels trials as Alert or Drowsy, evaluates
classifiers and predicts alertness for single samples.

Python: 3.10+
"""

__version__ = "1.0.0"

# Main package imports for easy access
from .core.data_types import (
    Label, Outcome, SignalSample, SignalStream, TrialRecord, FeatureVector,
    LabeledSample, PredictionResult, ModelMetrics, FeatureImportance, TrainingReport
)
from .processing.alignment import align
from .processing.features import FeatureExtractor, extract
from .processing.dataset import DatasetBuilder, build
from .detection.labeler import label
from .detection.predictor import Predictor, predict
from .training.reporter import MetricsReporter, ClassifierReporter, PlaceholderReporter

__all__ = [
    'Label', 'Outcome', 'SignalSample', 'SignalStream', 'TrialRecord', 'FeatureVector',
    'LabeledSample', 'PredictionResult', 'ModelMetrics', 'FeatureImportance', 'TrainingReport',
    'align', 'FeatureExtractor', 'extract', 'DatasetBuilder', 'build', 'label',
    'Predictor', 'predict', 'MetricsReporter', 'ClassifierReporter', 'PlaceholderReporter'
]
