"""Tests for app.py: subcommand dispatch and exit codes."""

import json

import pytest

import app

UNARY_INCREMENT = "2\n0\n1\n$\n0 1 1 R 0\n0 $ 1 S 1\n"
REJECTING = "2\n0\n1\n$\n0 a b S 0\n"
RUNAWAY = "1\n0\n0\n$\n0 a a R 0\n0 $ $ R 0\n"


@pytest.fixture
def files(tmp_path):
    (tmp_path / "inc.tm").write_text(UNARY_INCREMENT, encoding="utf-8")
    (tmp_path / "reject.tm").write_text(REJECTING, encoding="utf-8")
    (tmp_path / "runaway.tm").write_text(RUNAWAY, encoding="utf-8")
    (tmp_path / "bad.tm").write_text("2\n0\n1\n$\n0 a b X 0\n", encoding="utf-8")
    (tmp_path / "ones.tape").write_text("11\n", encoding="utf-8")
    (tmp_path / "a.tape").write_text("a\n", encoding="utf-8")
    return tmp_path


def run_cli(*argv):
    return app.main([str(a) for a in argv])


def test_run_accepted(files, capsys):
    assert run_cli("run", files / "inc.tm", files / "ones.tape") == app.EXIT_ACCEPTED
    out = capsys.readouterr().out
    assert "Tape: 111" in out
    assert "Accepted" in out


def test_run_non_final(files, capsys):
    assert run_cli("run", files / "reject.tm", files / "a.tape") == app.EXIT_NON_FINAL
    assert "Rejected" in capsys.readouterr().out


def test_run_step_limit(files):
    assert run_cli("run", files / "runaway.tm", files / "a.tape", "--max-steps", 20) == app.EXIT_STEP_LIMIT


def test_run_parse_error(files, capsys):
    assert run_cli("run", files / "bad.tm", files / "a.tape") == app.EXIT_ERROR
    assert "Move not recognized" in capsys.readouterr().out


def test_run_missing_file(files):
    assert run_cli("run", files / "nope.tm", files / "a.tape") == app.EXIT_ERROR


def test_run_trace_prints_each_step(files, capsys):
    assert run_cli("run", files / "inc.tm", files / "ones.tape", "--trace") == app.EXIT_ACCEPTED
    out = capsys.readouterr().out
    assert out.count("State: ") >= 4
    assert "Step: 3" in out


def test_run_with_log_writes_jsonl(files):
    config_path = files / "config.json"
    config_path.write_text(json.dumps({"output_directory": str(files / "logs")}), encoding="utf-8")

    code = run_cli("--config", config_path, "run", files / "inc.tm", files / "ones.tape", "--log")

    assert code == app.EXIT_ACCEPTED
    logs = list((files / "logs").glob("tm_runs_*.jsonl"))
    assert len(logs) == 1
    entry = json.loads(logs[0].read_text(encoding="utf-8").splitlines()[0])
    assert entry["outcome"] == "accepted"
    assert entry["tape"] == "111"


def test_config_max_steps_applies_to_run(files):
    config_path = files / "config.json"
    config_path.write_text(json.dumps({"max_steps": 5}), encoding="utf-8")
    assert run_cli("--config", config_path, "run", files / "runaway.tm", files / "a.tape") == app.EXIT_STEP_LIMIT


def test_invalid_config(files):
    config_path = files / "config.json"
    config_path.write_text(json.dumps({"batch_size": "x"}), encoding="utf-8")
    assert run_cli("--config", config_path, "inspect", files / "inc.tm") == app.EXIT_ERROR


def test_inspect(files, capsys):
    assert run_cli("inspect", files / "inc.tm") == app.EXIT_ACCEPTED
    assert "Transition Table" in capsys.readouterr().out


def test_inspect_bad_definition(files):
    assert run_cli("inspect", files / "bad.tm") == app.EXIT_ERROR


def test_batch(files, capsys):
    (files / "jobs.txt").write_text("inc.tm ones.tape\nreject.tm a.tape\n", encoding="utf-8")
    config_path = files / "config.json"
    config_path.write_text(json.dumps({"results_directory": str(files / "results")}), encoding="utf-8")

    assert run_cli("--config", config_path, "batch", files / "jobs.txt") == app.EXIT_ACCEPTED
    assert (files / "results" / "jobs" / "results.jsonl").exists()
    assert "accepted" in capsys.readouterr().out


def test_run_non_utf8_tape_is_an_error(files, capsys):
    (files / "bad.tape").write_bytes(b"\xff\xfe")
    assert run_cli("run", files / "inc.tm", files / "bad.tape") == app.EXIT_ERROR
    assert "Error:" in capsys.readouterr().out
