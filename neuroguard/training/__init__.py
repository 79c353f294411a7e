"""
Classifier training and metrics reporting for NeuroGuard
"""

from .models import (
    FEATURE_NAMES, feature_matrix, build_model_pipeline, cross_validate,
    compute_importances, save_model, load_model, build_predictor_model
)
from .reporter import MetricsReporter, ClassifierReporter, PlaceholderReporter, empty_report

__all__ = [
    'FEATURE_NAMES', 'feature_matrix', 'build_model_pipeline', 'cross_validate',
    'compute_importances', 'save_model', 'load_model', 'build_predictor_model',
    'MetricsReporter', 'ClassifierReporter', 'PlaceholderReporter', 'empty_report'
]
