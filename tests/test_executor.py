"""
Tests for the subprocess implementation of the Executor protocol.
Covers inline shell execution in isolation from the launcher.
"""

from __future__ import annotations

import inspect
import shutil
import subprocess

import pytest

from nadm_cli.executor import SPAWN_FAILED_EXIT, SubprocessExecutor

pytestmark = pytest.mark.skipif(
    shutil.which("bash") is None, reason="bash not available"
)


@pytest.fixture
def executor() -> SubprocessExecutor:
    return SubprocessExecutor()


# ----------------------------------------------------------------
# Basic execution
# ----------------------------------------------------------------


def test_run_inline_returns_exit_code(executor: SubprocessExecutor):
    result = executor.run_inline("exit 3")

    assert result.exit_code == 3
    assert result.started_at
    assert result.duration_ms >= 0


def test_run_inline_success(executor: SubprocessExecutor):
    assert executor.run_inline("true").exit_code == 0


def test_run_inline_inherits_stdout_and_stderr(
    executor: SubprocessExecutor, capfd: pytest.CaptureFixture[str]
):
    executor.run_inline("echo out; echo err >&2")

    captured = capfd.readouterr()
    assert captured.out == "out\n"
    assert captured.err == "err\n"


def test_run_inline_signal_reports_no_status(executor: SubprocessExecutor):
    result = executor.run_inline("kill -TERM $$")

    assert result.exit_code is None


# ----------------------------------------------------------------
# Environment
# ----------------------------------------------------------------


def test_run_inline_adds_extra_env(
    executor: SubprocessExecutor, capfd: pytest.CaptureFixture[str]
):
    executor.run_inline('printf "%s" "$NADM_ARGS"', extra_env={"NADM_ARGS": "a b c"})

    assert capfd.readouterr().out == "a b c"


def test_run_inline_keeps_ambient_env(
    executor: SubprocessExecutor,
    capfd: pytest.CaptureFixture[str],
    monkeypatch: pytest.MonkeyPatch,
):
    monkeypatch.setenv("NADM_TEST_AMBIENT", "kept")

    executor.run_inline(
        'printf "%s" "$NADM_TEST_AMBIENT"', extra_env={"NADM_ARGS": ""}
    )

    assert capfd.readouterr().out == "kept"


def test_run_inline_passes_script_as_single_argument(
    executor: SubprocessExecutor, monkeypatch: pytest.MonkeyPatch
):
    seen: dict = {}

    def fake_run(argv, **kwargs):
        seen["argv"] = argv
        seen["kwargs"] = kwargs
        return subprocess.CompletedProcess(argv, 0)

    monkeypatch.setattr(subprocess, "run", fake_run)

    executor.run_inline("main() { :; }\nmain", shell="bash")

    assert seen["argv"] == ["bash", "-c", "main() { :; }\nmain"]
    assert seen["kwargs"]["stdin"] is None
    assert seen["kwargs"]["stdout"] is None
    assert seen["kwargs"]["stderr"] is None
    assert "timeout" not in seen["kwargs"]
    assert "cwd" not in seen["kwargs"]


def test_run_inline_signature_has_no_cwd():
    params = list(inspect.signature(SubprocessExecutor.run_inline).parameters)

    assert params == ["self", "script", "shell", "extra_env"]


# ----------------------------------------------------------------
# Spawn failures
# ----------------------------------------------------------------


def test_run_inline_missing_shell(
    executor: SubprocessExecutor, capsys: pytest.CaptureFixture[str]
):
    result = executor.run_inline("true", shell="/nonexistent/shell-12345")

    assert result.exit_code == SPAWN_FAILED_EXIT
    assert "Error executing /nonexistent/shell-12345" in capsys.readouterr().err
