"""
Configuration for NeuroGuard

Module-level constants hold the thresholds and defaults shared by the pipeline.
The Config dataclass bundles the values a single run may override from the
command line or a JSON file.
"""

import json
import logging
import os
from dataclasses import dataclass, fields
from typing import Optional, Tuple

# ============================================================================
# PIPELINE CONSTANTS
# ============================================================================

# Window alignment
LOOKBACK_MS = 5000                # GSR look-back before each trial (ms)

# Ground-truth labelling
RT_DROWSY_MS = 1100               # Reaction time above this is drowsy (ms)
WRONG_OUTCOME = "wrong"           # Stroop response marking an incorrect trial

# Feature extraction
PEAK_MARGIN_US = 0.05             # Phasic peak must exceed window mean by this (µS)

# Single-sample prediction
GSR_MEAN_DROWSY_US = 1.5          # Mean conductance below this is drowsy (µS)
CONFIDENCE_BAND = (0.85, 0.95)    # Reported confidence range
CONFIDENCE_SCALE = 0.25           # Normalised distance giving ~76% of the band

# Raw table layout
TRIAL_MIN_COLUMNS = 7
TRIAL_COLUMNS = {"id": 0, "timestamp_ms": 1, "outcome": 5, "reaction_time_ms": 6}
SIGNAL_MIN_COLUMNS = 2

# Feature matrix used by the classifiers (display name -> LabeledSample field)
FEATURE_COLUMNS = (
    ("Stroop RT", "reaction_time_ms"),
    ("GSR Mean", "mean"),
    ("SCR Peaks", "peak_count"),
    ("Variance", "variance"),
    ("GSR Slope", "slope"),
)
PREDICTOR_FEATURES = ("Stroop RT", "GSR Mean", "SCR Peaks")

# Output paths
OUT_MODEL = "models/alertness_{classifier}.joblib"   # Formatted with Config.classifier
OUT_META = "models/alertness_meta.json"
OUT_CONFMAT = "models/alertness_confusion.png"
OUT_IMPORTANCE = "models/alertness_importance.png"

# Commentary service (read from the environment)
COMMENTARY_URL_ENV = "NEUROGUARD_LLM_URL"
COMMENTARY_MODEL_ENV = "NEUROGUARD_LLM_MODEL"
COMMENTARY_TOKEN_ENV = "NEUROGUARD_LLM_TOKEN"
COMMENTARY_TIMEOUT_SEC = 30.0


@dataclass
class Config:
    """
    Run configuration for dataset building and classifier training

    Defaults mirror the module constants. Fields left as None are filled
    in __post_init__.
    """

    lookback_ms: int = LOOKBACK_MS
    n_jobs: int = 1                          # Parallel workers for dataset building

    # Classification
    classifier: str = "rf"                   # "rf", "lda" or "svm"
    cv_folds: int = 5
    n_estimators: int = 100
    svm_c: float = 1.0
    confidence_band: Optional[Tuple[float, float]] = None

    # Reproducibility
    seed: int = 42

    # Output paths
    out_model: Optional[str] = None
    out_meta: str = OUT_META
    out_confmat: str = OUT_CONFMAT
    out_importance: str = OUT_IMPORTANCE

    def __post_init__(self):
        if self.out_model is None:
            self.out_model = OUT_MODEL.format(classifier=self.classifier)
        if self.confidence_band is None:
            self.confidence_band = CONFIDENCE_BAND
        else:
            self.confidence_band = tuple(self.confidence_band)


def load_config(path: str, **overrides) -> Config:
    """
    Load a Config from a JSON file

    Unknown keys are ignored with a warning. Keyword overrides that are not
    None win over the file values.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    known = {f.name for f in fields(Config)}
    unknown = sorted(set(raw) - known)
    if unknown:
        logging.warning(f"Ignoring unknown config keys: {unknown}")

    values = {key: value for key, value in raw.items() if key in known}
    values.update({key: value for key, value in overrides.items() if value is not None})

    logging.info(f"Loaded config: {path}")
    return Config(**values)


def ensure_output_dirs(config: Config) -> None:
    """Create parent directories for every output path in the config"""
    output_files = [config.out_model, config.out_meta, config.out_confmat, config.out_importance]

    for filepath in output_files:
        directory = os.path.dirname(filepath)
        if directory and not os.path.exists(directory):
            os.makedirs(directory, exist_ok=True)
            logging.info(f"Created output directory: {directory}")


def validate_config(config: Config) -> None:
    """
    Validate configuration parameters for common mistakes

    Args:
        config: Configuration to validate

    Raises:
        ValueError: If configuration parameters are invalid
    """
    if config.lookback_ms < 0:
        raise ValueError(f"Look-back must be non-negative, got {config.lookback_ms}")

    if config.n_jobs == 0:
        raise ValueError("n_jobs must be non-zero (use -1 for all cores)")

    if config.classifier not in ["rf", "lda", "svm"]:
        raise ValueError(f"Classifier must be 'rf', 'lda' or 'svm', got '{config.classifier}'")

    if config.cv_folds < 2:
        raise ValueError(f"CV folds must be >= 2, got {config.cv_folds}")

    if config.n_estimators <= 0:
        raise ValueError(f"n_estimators must be positive, got {config.n_estimators}")

    low, high = config.confidence_band
    if not 0.0 <= low <= high <= 1.0:
        raise ValueError(f"Confidence band must satisfy 0 <= low <= high <= 1, got {config.confidence_band}")

    logging.info("Configuration validation passed")
