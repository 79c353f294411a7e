import pathlib

import pytest

from neuroguard.acquisition.readers import load_signal, load_trials
from neuroguard.core.data_types import Outcome


def _write(path: pathlib.Path, text: str) -> pathlib.Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_load_trials_skips_malformed_rows(tmp_path: pathlib.Path) -> None:
    path = _write(tmp_path / "stroop.csv", "\n".join([
        "S.No,timestampMs,word,color,key,response,rtMs",
        "1,6000,RED,BLUE,d,correct,812",
        "2,10000,GREEN,GREEN,f,Wrong,1304",
        "3,14000,BLUE",
        "4,18000,RED,RED,j,correct,slow",
        "5,22000,RED,RED,j,correct,-40",
        "",
        "6 , 26000 , YELLOW , RED , k , correct , 950.7",
        "7,30000,RED,BLUE,d,timeout,1000",
    ]))

    trials = load_trials(str(path))

    assert [t.id for t in trials] == ["1", "2", "6", "7"]
    assert [t.timestamp_ms for t in trials] == [6000, 10000, 26000, 30000]
    assert [t.reaction_time_ms for t in trials] == [812, 1304, 950, 1000]
    assert [t.outcome for t in trials] == [Outcome.CORRECT, Outcome.WRONG, Outcome.CORRECT, Outcome.CORRECT]


def test_load_trials_fully_quoted(tmp_path: pathlib.Path) -> None:
    path = _write(tmp_path / "stroop.csv", "\n".join([
        '"S.No","timestampMs","word","color","key","response","rtMs"',
        '"1","6000","RED","BLUE","b","wrong","812"',
        '"2","10000","RED, dark","RED","d","correct","640"',
    ]))

    trials = load_trials(str(path))

    assert [t.id for t in trials] == ["1", "2"]
    assert [t.timestamp_ms for t in trials] == [6000, 10000]
    assert [t.reaction_time_ms for t in trials] == [812, 640]
    assert [t.outcome for t in trials] == [Outcome.WRONG, Outcome.CORRECT]


def test_load_trials_partially_quoted(tmp_path: pathlib.Path) -> None:
    path = _write(tmp_path / "stroop.csv", "\n".join([
        "S.No,timestampMs,word,color,key,response,rtMs",
        '"1",6000,RED,BLUE,b,"wrong",812',
    ]))

    trials = load_trials(str(path))

    assert trials[0].id == "1"
    assert trials[0].outcome is Outcome.WRONG


def test_load_signal_quoted(tmp_path: pathlib.Path) -> None:
    path = _write(tmp_path / "gsr.csv", '"time","gsr"\n"0.25","2.05"\n"0.0","2.00"\n')

    stream = load_signal(str(path))

    assert [s.timestamp for s in stream.samples] == [0.0, 250.0]
    assert [s.value for s in stream.samples] == [2.00, 2.05]


def test_load_trials_header_only(tmp_path: pathlib.Path) -> None:
    path = _write(tmp_path / "stroop.csv", "S.No,timestampMs,word,color,key,response,rtMs\n")

    assert load_trials(str(path)) == []


def test_duplicate_ids_are_kept(tmp_path: pathlib.Path, caplog) -> None:
    path = _write(tmp_path / "stroop.csv", "\n".join([
        "id,ts,a,b,c,outcome,rt",
        "1,6000,x,x,x,correct,800",
        "1,9000,x,x,x,correct,900",
    ]))

    trials = load_trials(str(path))

    assert len(trials) == 2
    assert "Duplicate trial ids" in caplog.text


def test_load_signal_converts_seconds(tmp_path: pathlib.Path) -> None:
    path = _write(tmp_path / "gsr.csv", "\n".join([
        "time,gsr",
        "0.5,2.10",
        "0.0, 2.00",
        "abc,1.0",
        "1.0",
        "0.25,2.05",
    ]))

    stream = load_signal(str(path))

    assert [s.timestamp for s in stream.samples] == [0.0, 250.0, 500.0]
    assert [s.value for s in stream.samples] == [2.00, 2.05, 2.10]
    assert list(stream.timestamps) == [0.0, 250.0, 500.0]


def test_missing_files_raise(tmp_path: pathlib.Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_trials(str(tmp_path / "missing.csv"))
    with pytest.raises(FileNotFoundError):
        load_signal(str(tmp_path / "missing.csv"))


def test_reads_written_session(session_csv, synthetic_session) -> None:
    trials_path, gsr_path = session_csv
    trials, stream = synthetic_session

    assert load_trials(str(trials_path)) == trials
    assert len(load_signal(str(gsr_path))) == len(stream)
