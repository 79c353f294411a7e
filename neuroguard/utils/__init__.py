"""
Utility functions for NeuroGuard

Logging setup, plots, metadata and console summaries.
"""

from .reporting import (
    setup_logging, plot_confusion_matrix, plot_feature_importances, save_metadata,
    class_distribution, report_to_dict, print_training_summary
)

__all__ = [
    'setup_logging', 'plot_confusion_matrix', 'plot_feature_importances', 'save_metadata',
    'class_distribution', 'report_to_dict', 'print_training_summary'
]
