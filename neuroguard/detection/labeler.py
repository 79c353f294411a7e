"""
Ground-truth alertness labelling

The label comes from the behavioural channel alone: slow or wrong Stroop
responses mark the subject as drowsy. GSR features are never consulted, so
they can be evaluated as predictors of an independently derived label.
"""

from ..core.data_types import Label, Outcome, TrialRecord
from ..core.config import RT_DROWSY_MS


def label(trial: TrialRecord, rt_threshold_ms: int = RT_DROWSY_MS) -> Label:
    """
    Label a trial

    DROWSY if ``reaction_time_ms > rt_threshold_ms`` or the response was
    wrong, otherwise ALERT.
    """
    if trial.reaction_time_ms > rt_threshold_ms or trial.outcome is Outcome.WRONG:
        return Label.DROWSY
    return Label.ALERT
