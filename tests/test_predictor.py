import pytest

from neuroguard.core.data_types import Label, Outcome
from neuroguard.detection.labeler import label
from neuroguard.detection.predictor import (
    ConfidenceStrategy, ModelConfidence, Predictor, RandomConfidence,
    ThresholdDistanceConfidence, decide, predict
)
from neuroguard.training.models import build_predictor_model


def test_decision_rule() -> None:
    assert predict(1101, 2.0, 0).label is Label.DROWSY
    assert predict(1000, 1.6, 0).label is Label.ALERT
    assert predict(1000, 1.4, 0).label is Label.DROWSY
    assert predict(1100, 1.5, 0).label is Label.ALERT


@pytest.mark.parametrize(
    ("rt_ms", "gsr_mean", "peak_count"),
    [(1101, 2.0, 0), (1000, 1.6, 0), (1000, 1.4, 0), (0, 0, 0), (-50, -1.0, -3),
     (5_000, 0.1, 9), (1100, 1.5, 2), (300, 8.0, 1)],
)
def test_confidence_in_band(rt_ms, gsr_mean, peak_count) -> None:
    confidence = predict(rt_ms, gsr_mean, peak_count).confidence

    assert 0.85 <= confidence <= 0.95


def test_confidence_grows_with_distance() -> None:
    drowsy = [predict(rt, 2.0, 0).confidence for rt in (1150, 1300, 2000)]
    alert = [predict(rt, 3.0, 0).confidence for rt in (1050, 900, 500)]

    assert drowsy[0] < drowsy[1] < drowsy[2]
    assert alert[0] < alert[1] < alert[2]


def test_confidence_at_threshold_is_band_floor() -> None:
    assert predict(1100, 1.5, 0).confidence == pytest.approx(0.85)


def test_alert_margin_uses_nearer_threshold() -> None:
    strategy = ThresholdDistanceConfidence()

    near_gsr = strategy.margin(500, 1.6, Label.ALERT)
    far_gsr = strategy.margin(500, 3.0, Label.ALERT)

    assert near_gsr == pytest.approx(0.1 / 1.5)
    assert far_gsr > near_gsr


def test_predictor_rule_differs_from_labeler(make_trial) -> None:
    trial = make_trial(reaction_time_ms=900, outcome=Outcome.WRONG)

    assert label(trial) is Label.DROWSY
    assert decide(900, 2.0) is Label.ALERT


def test_random_confidence_is_seeded() -> None:
    first = Predictor(confidence=RandomConfidence(seed=3))
    second = Predictor(confidence=RandomConfidence(seed=3))

    a = [first.predict(900, 2.0, 1).confidence for _ in range(5)]
    b = [second.predict(900, 2.0, 1).confidence for _ in range(5)]

    assert a == b
    assert all(0.85 <= c <= 0.95 for c in a)


class _FixedConfidence(ConfidenceStrategy):
    def __init__(self, value):
        self.value = value

    def score(self, rt_ms, gsr_mean, peak_count, label):
        return self.value


def test_confidence_is_clipped() -> None:
    assert Predictor(confidence=_FixedConfidence(1.7)).predict(900, 2.0, 0).confidence == 1.0
    assert Predictor(confidence=_FixedConfidence(-0.2)).predict(900, 2.0, 0).confidence == 0.0


def test_model_confidence(synthetic_dataset) -> None:
    model = build_predictor_model(synthetic_dataset)
    predictor = Predictor(confidence=ModelConfidence(model))

    result = predictor.predict(1300, 1.1, 0)
    proba = model.predict_proba([[1300, 1.1, 0]])[0]

    assert result.label is Label.DROWSY
    assert result.confidence == pytest.approx(proba[list(model.classes_).index("Drowsy")])


class _BrokenModel:
    classes_ = ["Alert", "Drowsy"]

    def predict_proba(self, X):
        raise RuntimeError("not fitted")


def test_model_confidence_falls_back() -> None:
    predictor = Predictor(confidence=ModelConfidence(_BrokenModel()))

    assert predictor.predict(1300, 2.0, 0).confidence == pytest.approx(predict(1300, 2.0, 0).confidence)


def test_confidence_stays_below_band_top() -> None:
    assert predict(1e6, 2.0, 0).confidence < 0.95
    assert predict(500, 1e6, 0).confidence < 0.95

    narrow = ThresholdDistanceConfidence(band=(0.5, 0.6))
    assert 0.5 <= narrow.score(1e6, 2.0, 0, Label.DROWSY) < 0.6


def test_degenerate_band() -> None:
    assert ThresholdDistanceConfidence(band=(0.9, 0.9)).score(2000, 2.0, 0, Label.DROWSY) == 0.9
