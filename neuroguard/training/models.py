"""
Classifier pipelines for alertness prediction

This module builds scikit-learn pipelines over the GSR/Stroop feature matrix,
runs stratified cross-validation, extracts feature importances, and saves or
loads fitted models with joblib.
"""

import logging
import os
from typing import List, Optional, Sequence, Tuple

import joblib
import numpy as np
from sklearn.discriminant_analysis import LinearDiscriminantAnalysis
from sklearn.ensemble import RandomForestClassifier
from sklearn.inspection import permutation_importance
from sklearn.model_selection import StratifiedKFold, cross_val_predict
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler
from sklearn.svm import SVC

from ..core.config import Config, FEATURE_COLUMNS, PREDICTOR_FEATURES
from ..core.data_types import FeatureImportance, LabeledSample

FEATURE_NAMES = tuple(name for name, _ in FEATURE_COLUMNS)


def feature_matrix(
    samples: Sequence[LabeledSample],
    feature_names: Sequence[str] = FEATURE_NAMES
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build the classifier inputs from labelled samples

    Args:
        samples: Labelled dataset
        feature_names: Display names from FEATURE_COLUMNS, in column order

    Returns:
        Tuple of (X [n_samples x n_features], y [n_samples] of label values)
    """
    attributes = dict(FEATURE_COLUMNS)
    unknown = [name for name in feature_names if name not in attributes]
    if unknown:
        raise ValueError(f"Unknown features: {unknown}. Available: {list(attributes)}")

    X = np.array(
        [[float(getattr(sample, attributes[name])) for name in feature_names] for sample in samples],
        dtype=float,
    ).reshape(len(samples), len(feature_names))
    y = np.array([sample.label.value for sample in samples], dtype=object)
    return X, y


def build_pipeline_rf(n_estimators: int = 100, random_state: int = 42) -> Pipeline:
    """
    Build StandardScaler + RandomForest pipeline

    Random forests give impurity-based feature importances directly, which
    makes them the default for the importance report.
    """
    logging.info(f"Building RandomForest pipeline with {n_estimators} trees")

    return Pipeline([
        ('scaler', StandardScaler()),
        ('rf', RandomForestClassifier(n_estimators=n_estimators, random_state=random_state))
    ])


def build_pipeline_lda() -> Pipeline:
    """Build StandardScaler + LDA pipeline"""
    logging.info("Building LDA pipeline")

    return Pipeline([
        ('scaler', StandardScaler()),
        ('lda', LinearDiscriminantAnalysis())
    ])


def build_pipeline_svm(C: float = 1.0, random_state: int = 42) -> Pipeline:
    """Build StandardScaler + RBF SVM pipeline with probability estimates"""
    logging.info(f"Building SVM pipeline, C={C}")

    return Pipeline([
        ('scaler', StandardScaler()),
        ('svm', SVC(C=C, kernel='rbf', probability=True, random_state=random_state))
    ])


def build_model_pipeline(config: Config) -> Pipeline:
    """
    Build the pipeline selected by ``config.classifier``

    Raises:
        ValueError: If the classifier name is unknown
    """
    if config.classifier == 'rf':
        return build_pipeline_rf(n_estimators=config.n_estimators, random_state=config.seed)
    elif config.classifier == 'lda':
        return build_pipeline_lda()
    elif config.classifier == 'svm':
        return build_pipeline_svm(C=config.svm_c, random_state=config.seed)
    else:
        raise ValueError(f"Unknown classifier: {config.classifier}")


def effective_folds(y: np.ndarray, cv: int) -> int:
    """Largest usable fold count: no more folds than the rarest class has samples"""
    if len(y) == 0:
        return 0
    _, counts = np.unique(y, return_counts=True)
    if len(counts) < 2:
        return 0
    return int(min(cv, counts.min()))


def cross_validate(
    pipeline: Pipeline,
    X: np.ndarray,
    y: np.ndarray,
    cv: int = 5,
    seed: int = 42
) -> np.ndarray:
    """
    Out-of-fold predictions from stratified cross-validation

    The fold count is reduced when the rarest class has fewer samples than
    ``cv``. With fewer than two usable folds the pipeline is fitted and
    evaluated on the full data instead (resubstitution), which overestimates
    performance and is logged as a warning.

    Args:
        pipeline: Sklearn pipeline to evaluate
        X: Feature matrix [n_samples x n_features]
        y: Labels [n_samples]
        cv: Requested number of folds
        seed: Random seed for fold generation

    Returns:
        Predicted labels [n_samples]
    """
    n_splits = effective_folds(y, cv)
    if n_splits < 2:
        logging.warning("Too few samples per class for cross-validation, "
                        "evaluating on training data")
        pipeline.fit(X, y)
        return pipeline.predict(X)

    if n_splits < cv:
        logging.warning(f"Reducing CV folds from {cv} to {n_splits} (rarest class size)")

    logging.info(f"Starting {n_splits}-fold stratified cross-validation")
    cv_splitter = StratifiedKFold(n_splits=n_splits, shuffle=True, random_state=seed)
    y_pred = cross_val_predict(pipeline, X, y, cv=cv_splitter)

    accuracy = float(np.mean(y_pred == y))
    logging.info(f"Cross-validation complete: out-of-fold accuracy {accuracy:.3f}")
    return y_pred


def compute_importances(
    pipeline: Pipeline,
    X: np.ndarray,
    y: np.ndarray,
    feature_names: Sequence[str] = FEATURE_NAMES,
    seed: int = 42
) -> List[FeatureImportance]:
    """
    Relative feature weights of a fitted pipeline, sorted descending

    Tree ensembles report impurity importances. Other estimators use
    permutation importance; negative values are clipped to zero and the
    result is normalised to sum to one.
    """
    estimator = pipeline.steps[-1][1]
    if hasattr(estimator, "feature_importances_"):
        raw = np.asarray(estimator.feature_importances_, dtype=float)
    else:
        result = permutation_importance(pipeline, X, y, n_repeats=10, random_state=seed)
        raw = np.asarray(result.importances_mean, dtype=float)

    raw = np.clip(raw, 0.0, None)
    total = raw.sum()
    weights = raw / total if total > 0 else np.zeros_like(raw)

    importances = [
        FeatureImportance(feature=name, importance=float(np.clip(weight, 0.0, 1.0)))
        for name, weight in zip(feature_names, weights)
    ]
    importances.sort(key=lambda item: item.importance, reverse=True)
    return importances


def save_model(pipeline: Pipeline, model_path: str) -> str:
    """
    Save an already fitted pipeline with joblib

    The pipeline is stored as is; callers fit it first (ClassifierReporter
    keeps its refitted pipeline as ``pipeline_``).

    Returns:
        The path written
    """
    directory = os.path.dirname(model_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    joblib.dump(pipeline, model_path)
    logging.info(f"Model saved to: {model_path}")
    return model_path


def load_model(model_path: str) -> Pipeline:
    """
    Load a fitted pipeline saved by save_model

    Raises:
        FileNotFoundError: If the model file doesn't exist
    """
    if not os.path.exists(model_path):
        raise FileNotFoundError(f"Model file not found: {model_path}")

    model = joblib.load(model_path)
    logging.info(f"Loaded model: {model_path}")
    return model


def build_predictor_model(
    samples: Sequence[LabeledSample],
    config: Optional[Config] = None
) -> Pipeline:
    """
    Fit a classifier on the predictor triple (RT, GSR mean, peak count)

    The fitted model can back ModelConfidence for single-sample inference.

    Raises:
        ValueError: If the dataset does not contain both labels
    """
    config = config if config is not None else Config()
    X, y = feature_matrix(samples, PREDICTOR_FEATURES)
    if len(np.unique(y)) < 2:
        raise ValueError("Predictor model needs samples of both labels")

    pipeline = build_model_pipeline(config)
    pipeline.fit(X, y)
    logging.info(f"Predictor model fitted on {len(y)} samples ({', '.join(PREDICTOR_FEATURES)})")
    return pipeline
