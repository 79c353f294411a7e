"""
Data acquisition for NeuroGuard

Readers for the Stroop and GSR tables, and a synthetic session generator.
"""

from .readers import load_trials, load_signal, parse_trial_frame, parse_signal_frame
from .synthetic import synthesize_session, write_session_csv

__all__ = [
    'load_trials', 'load_signal', 'parse_trial_frame', 'parse_signal_frame',
    'synthesize_session', 'write_session_csv'
]
