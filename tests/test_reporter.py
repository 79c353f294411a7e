import pytest

from neuroguard.core.config import Config
from neuroguard.core.data_types import Label, Outcome
from neuroguard.training.models import FEATURE_NAMES, effective_folds, feature_matrix
from neuroguard.training.reporter import ClassifierReporter, PlaceholderReporter


def _check_shape(report) -> None:
    metrics = report.metrics
    for value in (metrics.accuracy, metrics.precision, metrics.recall, metrics.f1):
        assert 0.0 <= value <= 1.0
    weights = [item.importance for item in report.importances]
    assert weights == sorted(weights, reverse=True)
    assert all(0.0 <= w <= 1.0 for w in weights)


def test_classifier_report(synthetic_dataset) -> None:
    reporter = ClassifierReporter(Config(n_estimators=25))

    report = reporter.evaluate(synthetic_dataset)

    _check_shape(report)
    assert {item.feature for item in report.importances} == set(FEATURE_NAMES)
    assert sum(item.importance for item in report.importances) == pytest.approx(1.0)
    assert len(report.y_true) == len(report.y_pred) == len(synthetic_dataset)
    assert reporter.pipeline_ is not None
    # Labels follow reaction time, so the synthetic blocks are easy to separate
    assert report.metrics.accuracy > 0.7


def test_linear_classifier_uses_permutation_importance(synthetic_dataset) -> None:
    report = ClassifierReporter(Config(classifier="lda")).evaluate(synthetic_dataset)

    _check_shape(report)
    assert len(report.importances) == len(FEATURE_NAMES)


def test_empty_dataset_reports_zeros() -> None:
    report = ClassifierReporter().evaluate(())

    assert report.metrics.accuracy == 0.0
    assert report.importances == ()


def test_single_class_dataset(make_sample) -> None:
    samples = [make_sample(str(i), 700 + i, [2.0, 2.1, 2.0]) for i in range(6)]
    reporter = ClassifierReporter()

    report = reporter.evaluate(samples)

    assert report.metrics.accuracy == 1.0
    assert report.metrics.precision == 0.0
    assert report.y_true == (Label.ALERT,) * 6
    assert reporter.pipeline_ is None


def test_tiny_dataset_reduces_folds(make_sample) -> None:
    samples = [
        make_sample("a", 700, [2.0, 2.3, 2.1]),
        make_sample("b", 750, [2.2, 2.4, 2.2]),
        make_sample("c", 1300, [1.1, 1.2, 1.1]),
        make_sample("d", 900, [1.0, 1.1, 1.0], outcome=Outcome.WRONG),
    ]
    _, y = feature_matrix(samples)

    assert effective_folds(y, 5) == 2
    _check_shape(ClassifierReporter(Config(n_estimators=10)).evaluate(samples))


def test_feature_matrix_rejects_unknown_names(synthetic_dataset) -> None:
    with pytest.raises(ValueError):
        feature_matrix(synthetic_dataset, ["Heart Rate"])


def test_placeholder_ranges(synthetic_dataset) -> None:
    for seed in range(20):
        report = PlaceholderReporter(seed=seed).evaluate(synthetic_dataset)
        m = report.metrics

        assert 0.94 <= m.accuracy < 0.97
        assert m.accuracy - 0.01 <= m.precision <= m.accuracy + 0.01
        assert m.accuracy - 0.02 <= m.recall <= m.accuracy + 0.01
        assert m.f1 == pytest.approx(2 * m.precision * m.recall / (m.precision + m.recall))


def test_placeholder_importances(synthetic_dataset) -> None:
    report = PlaceholderReporter(seed=1).evaluate(synthetic_dataset)

    assert [(i.feature, i.importance) for i in report.importances] == [
        ("Stroop RT", 0.65), ("GSR Mean", 0.20), ("SCR Peaks", 0.10), ("Variance", 0.05),
    ]
    assert report.y_true == ()
