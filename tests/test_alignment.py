from neuroguard.core.data_types import SignalSample, SignalStream
from neuroguard.processing.alignment import align, window_bounds


def test_window_bounds_are_inclusive(make_trial, make_stream) -> None:
    stream = make_stream([(0, 1.0), (4_999, 1.1), (5_000, 1.2), (7_500, 1.3),
                          (10_000, 1.4), (10_001, 1.5)])
    trial = make_trial(timestamp_ms=10_000)

    window = align(trial, stream, lookback_ms=5_000)

    assert [s.timestamp for s in window] == [5_000, 7_500, 10_000]


def test_empty_window_is_not_an_error(make_trial, make_stream) -> None:
    stream = make_stream([(20_000, 1.0), (21_000, 1.1)])

    assert align(make_trial(timestamp_ms=10_000), stream) == ()
    assert align(make_trial(timestamp_ms=10_000), SignalStream()) == ()


def test_overlapping_windows_are_independent(make_trial, make_stream) -> None:
    stream = make_stream([(t, float(t)) for t in range(0, 12_001, 1_000)])

    first = align(make_trial("a", timestamp_ms=6_000), stream)
    second = align(make_trial("b", timestamp_ms=8_000), stream)

    assert [s.timestamp for s in first] == [1_000, 2_000, 3_000, 4_000, 5_000, 6_000]
    assert [s.timestamp for s in second] == [3_000, 4_000, 5_000, 6_000, 7_000, 8_000]


def test_unsorted_stream_is_ordered(make_trial) -> None:
    stream = SignalStream.from_samples([
        SignalSample(9_000, 1.9), SignalSample(6_000, 1.6), SignalSample(8_000, 1.8),
    ])

    window = align(make_trial(timestamp_ms=10_000), stream)

    assert [s.timestamp for s in window] == [6_000, 8_000, 9_000]


def test_equal_timestamps_keep_input_order(make_trial) -> None:
    stream = SignalStream.from_samples([
        SignalSample(9_000, 2.0), SignalSample(8_000, 1.0), SignalSample(9_000, 3.0),
    ])

    window = align(make_trial(timestamp_ms=9_000), stream)

    assert [s.value for s in window] == [1.0, 2.0, 3.0]


def test_window_matches_linear_scan(synthetic_session) -> None:
    trials, stream = synthetic_session

    for trial in trials:
        start, end = window_bounds(trial)
        expected = tuple(s for s in stream.samples if start <= s.timestamp <= end)
        assert align(trial, stream) == expected
