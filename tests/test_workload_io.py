from pathlib import Path

import pytest

from schedsim.models import ProcessDef
from schedsim.workload_io import (
    EmptyWorkloadError,
    MalformedWorkloadError,
    WorkloadError,
    WorkloadNotFoundError,
    load_workload,
)


def test_load_text(tmp_path: Path):
    p = tmp_path / "processes.txt"
    p.write_text("2\n1 0 5\n2 1 3\n3 2 1\n")
    wl = load_workload(p)
    assert wl.quantum == 2
    assert wl.processes == [ProcessDef(1, 0, 5), ProcessDef(2, 1, 3), ProcessDef(3, 2, 1)]


def test_load_text_any_whitespace_layout(tmp_path: Path):
    p = tmp_path / "processes"
    p.write_text("  4 1\n0\t5 2 1\n\n3   \n")
    wl = load_workload(p)
    assert wl.quantum == 4
    assert wl.processes == [ProcessDef(1, 0, 5), ProcessDef(2, 1, 3)]


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('{"quantum": 3, "processes": [{"pid": 1, "arrival_time": 0, "burst_time": 3},'
                 '{"pid": "2", "arrival_time": 1, "burst_time": 2}]}')
    wl = load_workload(p)
    assert wl.quantum == 3
    assert isinstance(wl.processes[0], ProcessDef)
    assert wl.processes[1] == ProcessDef(2, 1, 2)


def test_load_json_list_has_no_quantum(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":1,"arrival_time":0,"burst_time":3}]')
    wl = load_workload(p)
    assert wl.quantum is None
    assert len(wl.processes) == 1


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time\n1,0,3\n2,1,2\n")
    wl = load_workload(p)
    assert wl.quantum is None
    assert [proc.pid for proc in wl.processes] == [1, 2]


def test_missing_file(tmp_path: Path):
    with pytest.raises(WorkloadNotFoundError):
        load_workload(tmp_path / "nope.txt")


@pytest.mark.parametrize("content", ["", "2\n", "   \n"])
def test_no_processes(tmp_path: Path, content):
    p = tmp_path / "processes.txt"
    p.write_text(content)
    with pytest.raises(EmptyWorkloadError):
        load_workload(p)


def test_empty_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time\n")
    with pytest.raises(EmptyWorkloadError):
        load_workload(p)


@pytest.mark.parametrize(
    "content",
    [
        "2\n1 0 five\n",  # non-integer token
        "2\n1 0 5\n2 1\n",  # incomplete triple
        "2\n1 0 5\n1 2 3\n",  # duplicate id
        "2\n1 -1 5\n",  # negative arrival
        "2\n1 0 0\n",  # zero burst
        "0\n1 0 5\n",  # zero quantum
        "2.5\n1 0 5\n",
    ],
)
def test_malformed_text(tmp_path: Path, content):
    p = tmp_path / "processes.txt"
    p.write_text(content)
    with pytest.raises(MalformedWorkloadError):
        load_workload(p)


@pytest.mark.parametrize(
    "name, content",
    [
        ("w.json", "{not json"),
        ("w.json", '{"processes": {"pid": 1}}'),
        ("w.json", '[{"pid": 1, "arrival_time": 0}]'),
        ("w.json", '{"quantum": "two", "processes": []}'),
        ("w.json", '[{"pid": 1, "arrival_time": 0, "burst_time": 3.9}]'),
        ("w.json", '[{"pid": 1, "arrival_time": 0.5, "burst_time": 3}]'),
        ("w.json", '{"quantum": 2.7, "processes": [{"pid": 1, "arrival_time": 0, "burst_time": 3}]}'),
        ("w.json", '[{"pid": true, "arrival_time": 0, "burst_time": 3}]'),
        ("w.json", '{"quantum": true, "processes": [{"pid": 1, "arrival_time": 0, "burst_time": 3}]}'),
        ("w.json", '["1 0 3"]'),
        ("w.csv", "pid,arrival_time,burst_time\n1,zero,3\n"),
    ],
)
def test_malformed_structured(tmp_path: Path, name, content):
    p = tmp_path / name
    p.write_text(content)
    with pytest.raises(MalformedWorkloadError):
        load_workload(p)


def test_errors_share_a_base_class():
    for exc in (WorkloadNotFoundError, EmptyWorkloadError, MalformedWorkloadError):
        assert issubclass(exc, WorkloadError)
        assert issubclass(exc, ValueError)


def test_json_accepts_integer_strings(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('{"quantum": "2", "processes": [{"pid": "7", "arrival_time": "0", "burst_time": 4}]}')
    wl = load_workload(p)
    assert wl.quantum == 2
    assert wl.processes == [ProcessDef(7, 0, 4)]
