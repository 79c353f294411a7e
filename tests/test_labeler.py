import pytest

from neuroguard.core.data_types import Label, Outcome
from neuroguard.detection.labeler import label


@pytest.mark.parametrize(
    ("reaction_time_ms", "outcome", "expected"),
    [
        (1100, Outcome.CORRECT, Label.ALERT),
        (1101, Outcome.CORRECT, Label.DROWSY),
        (1100, Outcome.WRONG, Label.DROWSY),
        (1101, Outcome.WRONG, Label.DROWSY),
        (0, Outcome.CORRECT, Label.ALERT),
        (0, Outcome.WRONG, Label.DROWSY),
    ],
)
def test_label_boundaries(make_trial, reaction_time_ms, outcome, expected) -> None:
    trial = make_trial(reaction_time_ms=reaction_time_ms, outcome=outcome)

    assert label(trial) is expected


def test_custom_threshold(make_trial) -> None:
    trial = make_trial(reaction_time_ms=950)

    assert label(trial, rt_threshold_ms=900) is Label.DROWSY
    assert label(trial) is Label.ALERT


@pytest.mark.parametrize(
    ("cell", "expected"),
    [("wrong", Outcome.WRONG), (" Wrong ", Outcome.WRONG), ("correct", Outcome.CORRECT),
     ("timeout", Outcome.CORRECT), ("", Outcome.CORRECT)],
)
def test_outcome_from_cell(cell, expected) -> None:
    assert Outcome.from_cell(cell) is expected
