"""
Logging, plotting and metadata helpers

This module provides the helpers shared by the command line and training
code: logging setup, confusion-matrix and feature-importance plots, JSON
metadata and console summaries.
"""

import json
import logging
import os
from typing import Any, Dict, Sequence

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns
from sklearn.metrics import confusion_matrix

from ..core.data_types import FeatureImportance, Label, LabeledSample, TrainingReport

LABEL_ORDER = [Label.ALERT.value, Label.DROWSY.value]


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for the pipeline

    Args:
        debug: If True, enable DEBUG level logging
    """
    log_level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    # Reduce verbosity of some third-party libraries
    logging.getLogger('matplotlib').setLevel(logging.WARNING)
    logging.getLogger('sklearn').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    if debug:
        logging.info("Debug logging enabled")


def plot_confusion_matrix(
    report: TrainingReport,
    out_path: str,
    normalize: bool = True
) -> bool:
    """
    Create and save a confusion matrix plot from a report

    Args:
        report: Report holding evaluated labels
        out_path: Path to save the plot
        normalize: If True, normalize by true class counts

    Returns:
        bool: False if the report has no evaluated labels
    """
    if not report.y_true:
        logging.info("No evaluated labels in report, skipping confusion matrix")
        return False

    logging.info(f"Creating confusion matrix plot: {out_path}")

    y_true = [label.value for label in report.y_true]
    y_pred = [label.value for label in report.y_pred]
    cm = confusion_matrix(y_true, y_pred, labels=LABEL_ORDER)

    if normalize:
        row_sums = cm.sum(axis=1)[:, np.newaxis]
        cm = np.divide(cm.astype('float'), row_sums, out=np.zeros(cm.shape), where=row_sums > 0)
        fmt = '.2f'
        title = 'Normalized Confusion Matrix'
    else:
        fmt = 'd'
        title = 'Confusion Matrix'

    plt.figure(figsize=(8, 6))
    sns.heatmap(
        cm,
        annot=True,
        fmt=fmt,
        cmap='Blues',
        xticklabels=LABEL_ORDER,
        yticklabels=LABEL_ORDER,
        square=True,
        cbar_kws={'label': 'Proportion' if normalize else 'Count'}
    )

    plt.title(title, fontsize=14, fontweight='bold')
    plt.xlabel('Predicted Label', fontsize=12)
    plt.ylabel('True Label', fontsize=12)
    plt.figtext(0.02, 0.02, f'Accuracy: {report.metrics.accuracy:.3f}', fontsize=10,
                bbox=dict(boxstyle="round,pad=0.3", facecolor="lightgray"))

    _ensure_parent(out_path)
    plt.tight_layout()
    plt.savefig(out_path, dpi=150, bbox_inches='tight')
    plt.close()

    logging.info(f"Confusion matrix saved to: {out_path}")
    return True


def plot_feature_importances(importances: Sequence[FeatureImportance], out_path: str) -> bool:
    """Horizontal bar plot of feature importances"""
    if not importances:
        logging.info("No importances to plot")
        return False

    plt.figure(figsize=(10, 6))
    sns.barplot(
        x=[item.importance for item in importances],
        y=[item.feature for item in importances],
        color='steelblue'
    )
    plt.title('Feature Importance', fontsize=14, fontweight='bold')
    plt.xlabel('Relative importance', fontsize=12)
    plt.xlim(0, 1)

    _ensure_parent(out_path)
    plt.tight_layout()
    plt.savefig(out_path, dpi=150, bbox_inches='tight')
    plt.close()

    logging.info(f"Feature importance plot saved to: {out_path}")
    return True


def _ensure_parent(path: str) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)


def save_metadata(meta: Dict[str, Any], out_path: str) -> None:
    """
    Save run metadata to a JSON file

    Numpy scalars and arrays are converted to plain Python values.
    """
    logging.info(f"Saving metadata to: {out_path}")
    _ensure_parent(out_path)

    def convert_numpy_types(obj):
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, dict):
            return {key: convert_numpy_types(value) for key, value in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [convert_numpy_types(item) for item in obj]
        else:
            return obj

    with open(out_path, 'w') as f:
        json.dump(convert_numpy_types(meta), f, indent=2, sort_keys=True)
    logging.info("Metadata saved successfully")


def class_distribution(samples: Sequence[LabeledSample]) -> Dict[str, Any]:
    """
    Label counts and percentages of a labelled dataset

    Returns:
        Dictionary keyed by label value, plus 'total' and, when both
        classes are present, 'imbalance_ratio' (majority / minority)
    """
    total = len(samples)
    distribution: Dict[str, Any] = {}
    counts = []
    for label in Label:
        count = sum(1 for sample in samples if sample.label is label)
        counts.append(count)
        distribution[label.value] = {
            'count': count,
            'percentage': float(count / total * 100) if total else 0.0
        }

    distribution['total'] = total
    if min(counts) > 0:
        distribution['imbalance_ratio'] = float(max(counts) / min(counts))
    return distribution


def report_to_dict(report: TrainingReport) -> Dict[str, Any]:
    """Reporter output in its interface shape (metrics + sorted importances)"""
    metrics = report.metrics
    return {
        'accuracy': metrics.accuracy,
        'precision': metrics.precision,
        'recall': metrics.recall,
        'f1': metrics.f1,
        'importances': [
            {'feature': item.feature, 'importance': item.importance}
            for item in report.importances
        ],
    }


def print_training_summary(config, distribution: Dict[str, Any], report: TrainingReport,
                           placeholder: bool = False) -> None:
    """Print a human-readable summary of a training run"""
    metrics = report.metrics

    print("\n" + "=" * 80)
    print("ALERTNESS CLASSIFIER SUMMARY")
    print("=" * 80)

    print("\nDATA:")
    print(f"   Labelled samples: {distribution.get('total', 0)}")
    for label in Label:
        entry = distribution.get(label.value, {})
        print(f"   {label.value}: {entry.get('count', 0)} ({entry.get('percentage', 0.0):.1f}%)")
    print(f"   Look-back window: {config.lookback_ms} ms")

    print("\nMODEL:")
    if placeholder:
        print("   Placeholder metrics (no classifier trained)")
    else:
        print(f"   Algorithm: {config.classifier.upper()}")
        print(f"   CV folds: {config.cv_folds}")

    print("\nMETRICS:")
    print(f"   Accuracy:  {metrics.accuracy:.3f}")
    print(f"   Precision: {metrics.precision:.3f}")
    print(f"   Recall:    {metrics.recall:.3f}")
    print(f"   F1:        {metrics.f1:.3f}")

    if report.importances:
        print("\nFEATURE IMPORTANCE:")
        for item in report.importances:
            print(f"   {item.feature:<10} {item.importance:.3f}")

    print("\n" + "=" * 80)
