from pathlib import Path

import pytest

from rr_sim.errors import LoadError
from rr_sim.models import ProcessRecord
from rr_sim.workload_io import load_workload, parse_lines


def test_load_text(tmp_path: Path):
    p = tmp_path / "input.txt"
    p.write_text("0 4\n2 3\n\n2  1\n")
    procs = load_workload(p)
    assert isinstance(procs[0], ProcessRecord)
    assert [(r.pid, r.arrival, r.burst) for r in procs] == [(1, 0.0, 4.0), (2, 2.0, 3.0), (4, 2.0, 1.0)]
    assert procs[0].remaining == 4.0


def test_malformed_lines():
    with pytest.raises(LoadError, match=":2:"):
        parse_lines(["0 4", "1 x"])
    with pytest.raises(LoadError):
        parse_lines(["0"])
    with pytest.raises(LoadError):
        parse_lines(["0 1 2"])
    with pytest.raises(LoadError):
        parse_lines(["0 0"])
    with pytest.raises(LoadError):
        parse_lines(["-1 3"])


def test_missing_file(tmp_path: Path):
    with pytest.raises(LoadError):
        load_workload(tmp_path / "nope.txt")


def test_empty_file(tmp_path: Path):
    p = tmp_path / "empty.txt"
    p.write_text("\n")
    with pytest.raises(LoadError):
        load_workload(p)


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"arrival_time":0,"burst_time":3},{"arrival_time":1,"burst_time":2}]')
    procs = load_workload(p)
    assert procs[1].pid == 2
    assert procs[1].arrival == 1.0


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("arrival_time,burst_time\n0,3\n1,\n")
    with pytest.raises(LoadError):
        load_workload(p)
    p.write_text("arrival_time,burst_time\n0,3\n1,2\n")
    assert [r.burst for r in load_workload(p)] == [3.0, 2.0]


def test_id_is_line_number():
    procs = parse_lines(["0 4", "", "1 2"])
    assert [p.pid for p in procs] == [1, 3]


def test_only_plain_integers_accepted():
    with pytest.raises(LoadError):
        parse_lines(["1_0 4"])
    with pytest.raises(LoadError):
        parse_lines(["0 4.5"])
    with pytest.raises(LoadError):
        parse_lines(["0 ٣"])


def test_json_rejects_non_integers(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"arrival_time":0,"burst_time":1.7}]')
    with pytest.raises(LoadError):
        load_workload(p)
    p.write_text('[{"arrival_time":true,"burst_time":2}]')
    with pytest.raises(LoadError):
        load_workload(p)


def test_invalid_utf8(tmp_path: Path):
    p = tmp_path / "input.txt"
    p.write_bytes(b"0 4\n\xff\xfe 3\n")
    with pytest.raises(LoadError):
        load_workload(p)


def test_value_too_large():
    with pytest.raises(LoadError, match="too large"):
        parse_lines(["0 " + "9" * 400])
