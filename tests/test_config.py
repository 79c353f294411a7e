import json
import pathlib

import pytest

from neuroguard.core.config import Config, ensure_output_dirs, load_config, validate_config


def test_defaults() -> None:
    config = Config()

    assert config.lookback_ms == 5000
    assert config.confidence_band == (0.85, 0.95)
    validate_config(config)


@pytest.mark.parametrize(
    "overrides",
    [{"lookback_ms": -1}, {"n_jobs": 0}, {"classifier": "knn"}, {"cv_folds": 1},
     {"n_estimators": 0}, {"confidence_band": (0.9, 0.8)}, {"confidence_band": (0.5, 1.2)}],
)
def test_invalid_config(overrides) -> None:
    with pytest.raises(ValueError):
        validate_config(Config(**overrides))


def test_load_config(tmp_path: pathlib.Path, caplog) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"lookback_ms": 3000, "classifier": "svm", "colour": "blue",
                                "confidence_band": [0.8, 0.9]}))

    config = load_config(str(path), classifier="lda", seed=None)

    assert config.lookback_ms == 3000
    assert config.classifier == "lda"
    assert config.seed == 42
    assert config.confidence_band == (0.8, 0.9)
    assert "colour" in caplog.text


def test_load_config_missing(tmp_path: pathlib.Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.json"))


def test_ensure_output_dirs(tmp_path: pathlib.Path) -> None:
    config = Config(out_model=str(tmp_path / "a" / "model.joblib"),
                    out_meta=str(tmp_path / "b" / "meta.json"))

    ensure_output_dirs(config)

    assert (tmp_path / "a").is_dir()
    assert (tmp_path / "b").is_dir()


def test_model_path_follows_classifier() -> None:
    assert Config().out_model == "models/alertness_rf.joblib"
    assert Config(classifier="svm").out_model == "models/alertness_svm.joblib"
    assert Config(classifier="lda", out_model="m.joblib").out_model == "m.joblib"


def test_loaded_classifier_names_model(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"classifier": "lda"}))

    assert load_config(str(path)).out_model.endswith("alertness_lda.joblib")
