"""Tests for the command-line entry point."""

from __future__ import annotations

import json

import pandas as pd
import pytest

from pulltime.main import parse_args, run
from pulltime.pull import ImagePuller
from pulltime.runtime import ProcessOutcome, RuntimeCommands
from tests.fakes import FakeProcessRunner


@pytest.fixture
def factory(fake_runner):
    runtimes: list[str] = []

    def build(runtime: str) -> ImagePuller:
        runtimes.append(runtime)
        return ImagePuller(RuntimeCommands(runtime), process_runner=fake_runner)

    build.runtimes = runtimes
    return build


class TestParseArgs:
    def test_benchmark_defaults(self):
        args = parse_args(["benchmark", "alpine"])
        assert args.concurrent == 2
        assert args.timeout == 120
        assert args.summary is False
        assert args.runtime == "docker"

    def test_env_defaults(self, monkeypatch):
        monkeypatch.setenv("PULLTIME_CONCURRENCY", "5")
        monkeypatch.setenv("PULLTIME_RUNTIME", "podman")
        args = parse_args(["benchmark", "alpine"])
        assert args.concurrent == 5
        assert args.runtime == "podman"

    def test_invalid_env_falls_back(self, monkeypatch, capsys):
        monkeypatch.setenv("PULLTIME_TIMEOUT", "soon")
        args = parse_args(["benchmark", "alpine"])
        assert args.timeout == 120
        assert "PULLTIME_TIMEOUT" in capsys.readouterr().err

    def test_warmup_short_flags(self):
        args = parse_args(["warmup", "alpine", "-n", "5", "-d", "10"])
        assert args.iterations == 5
        assert args.delay == 10

    def test_compare_requires_two_images(self):
        with pytest.raises(SystemExit):
            parse_args(["compare", "only-one"])


class TestImageCommand:
    def test_success(self, factory, capsys):
        assert run(["image", "alpine"], puller_factory=factory) == 0
        out = capsys.readouterr().out
        assert "Pulling image: alpine" in out
        assert "Image pull completed in:" in out
        assert "--- Docker Output ---" in out

    def test_failure_exits_non_zero(self, capsys):
        runner = FakeProcessRunner(default=ProcessOutcome(output="", error="exit status 1"))
        code = run(
            ["image", "alpine"],
            puller_factory=lambda runtime: ImagePuller(process_runner=runner),
        )
        assert code == 1
        assert "Error pulling image: exit status 1" in capsys.readouterr().out


class TestBenchmarkCommand:
    def test_json_output(self, factory, capsys):
        assert run(["benchmark", "alpine", "ghcr.io/org/app", "-c", "1"], puller_factory=factory) == 0
        payload = json.loads(capsys.readouterr().out)
        assert sorted(item["image"] for item in payload) == ["alpine", "ghcr.io/org/app"]

    def test_summary_line(self, factory, capsys):
        assert run(["benchmark", "alpine", "-s"], puller_factory=factory) == 0
        out = capsys.readouterr().out
        summary, _, body = out.strip().partition("\n")
        assert summary.startswith("Summary: 1/1 succeeded")
        assert json.loads(body)[0]["image"] == "alpine"

    def test_csv_export(self, factory, tmp_path, capsys):
        path = tmp_path / "results.csv"
        assert run(["benchmark", "a", "b", "--csv", str(path)], puller_factory=factory) == 0
        frame = pd.read_csv(path)
        assert sorted(frame["image"]) == ["a", "b"]

    def test_nan_timeout_rejected(self, factory, fake_runner, capsys):
        assert run(["benchmark", "alpine", "-t", "nan"], puller_factory=factory) == 1
        assert "timeout" in capsys.readouterr().err
        assert fake_runner.calls == []

    def test_zero_concurrency_rejected(self, factory, fake_runner, capsys):
        assert run(["benchmark", "alpine", "-c", "0"], puller_factory=factory) == 1
        assert "concurrency" in capsys.readouterr().err
        assert fake_runner.calls == []

    def test_failed_pull_does_not_fail_run(self, capsys):
        runner = FakeProcessRunner(default=ProcessOutcome(output="", error="exit status 1"))
        code = run(
            ["benchmark", "alpine"],
            puller_factory=lambda runtime: ImagePuller(process_runner=runner),
        )
        assert code == 0
        assert json.loads(capsys.readouterr().out)[0]["error"] == "exit status 1"


class TestOtherCommands:
    def test_runtime_flag(self, factory, fake_runner, capsys):
        assert run(["--runtime", "podman", "compare", "a", "b"], puller_factory=factory) == 0
        assert factory.runtimes == ["podman"]
        assert fake_runner.calls[0][0] == ["podman", "pull", "a"]
        assert len(json.loads(capsys.readouterr().out)) == 2

    def test_ci_stdout(self, factory, capsys):
        assert run(["ci", "alpine"], puller_factory=factory) == 0
        assert json.loads(capsys.readouterr().out)["image"] == "alpine"

    def test_ci_output_file(self, factory, tmp_path, capsys):
        path = tmp_path / "ci.json"
        assert run(["ci", "alpine", "--output", str(path)], puller_factory=factory) == 0
        assert f"Results written to {path}" in capsys.readouterr().out
        assert json.loads(path.read_text())["registry"] == "docker.io"

    def test_ci_unwritable_output(self, factory, tmp_path, capsys):
        path = tmp_path / "missing" / "ci.json"
        assert run(["ci", "alpine", "--output", str(path)], puller_factory=factory) == 1
        assert "Error writing to file" in capsys.readouterr().out

    def test_warmup(self, factory, capsys):
        assert run(["warmup", "alpine", "-n", "2", "-d", "0"], puller_factory=factory) == 0
        payload = json.loads(capsys.readouterr().out)
        assert [item["cache_state"] for item in payload] == ["cold", "warm"]

    def test_warmup_negative_iterations(self, factory, capsys):
        assert run(["warmup", "alpine", "-n", "-1"], puller_factory=factory) == 1
