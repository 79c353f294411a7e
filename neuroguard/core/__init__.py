"""
Core data types, configuration and session state for NeuroGuard
"""

from .data_types import (
    Label, Outcome, SignalSample, SignalStream, TrialRecord, FeatureVector,
    LabeledSample, PredictionResult, ModelMetrics, FeatureImportance,
    TrainingReport, InferenceRecord
)
from .config import Config, load_config, validate_config, ensure_output_dirs
from .session import SessionState, SessionSummary, PredictorInputs

__all__ = [
    'Label', 'Outcome', 'SignalSample', 'SignalStream', 'TrialRecord',
    'FeatureVector', 'LabeledSample', 'PredictionResult', 'ModelMetrics',
    'FeatureImportance', 'TrainingReport', 'InferenceRecord',
    'Config', 'load_config', 'validate_config', 'ensure_output_dirs',
    'SessionState', 'SessionSummary', 'PredictorInputs'
]
