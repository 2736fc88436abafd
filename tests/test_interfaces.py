"""
Tests that verify Protocol definitions exist and implementations comply.
"""

from __future__ import annotations

import inspect

from nadm_cli import interfaces
from nadm_cli.executor import SubprocessExecutor
from nadm_cli.ui import ConsoleUI


def test_executor_protocol_exists():
    """Executor Protocol must define run_inline."""
    assert hasattr(interfaces, "Executor")
    assert hasattr(interfaces.Executor, "run_inline")


def test_console_protocol_exists():
    assert hasattr(interfaces, "Console")
    for method in ["info", "error"]:
        assert hasattr(interfaces.Console, method), f"Console missing {method}"


def test_subprocess_executor_matches_protocol_signature():
    proto = inspect.signature(interfaces.Executor.run_inline)
    impl = inspect.signature(SubprocessExecutor.run_inline)

    assert list(proto.parameters) == list(impl.parameters)


def test_console_ui_implements_console():
    ui = ConsoleUI(plain=True)
    assert callable(ui.info)
    assert callable(ui.error)
