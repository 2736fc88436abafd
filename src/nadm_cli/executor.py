# nadm — Embedded Shell Script Launcher
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Subprocess-backed executor for the nadm launcher.

The script runs as ``<shell> -c <script>`` with the launcher's own
stdin/stdout/stderr. Nothing is captured or buffered; the call blocks until
the shell exits. There is no timeout.
"""

from __future__ import annotations

import os
import subprocess
import sys
import time
from dataclasses import dataclass
from datetime import datetime

# Exit code reported when the shell itself cannot be started
SPAWN_FAILED_EXIT = 127


@dataclass(frozen=True)
class ShellResult:
    """Result from passthrough execution (no output capture).

    ``exit_code`` is ``None`` when the shell did not report a status
    (terminated by a signal).
    """

    exit_code: int | None
    started_at: str
    duration_ms: int


class SubprocessExecutor:
    """Subprocess implementation of the Executor protocol."""

    def _build_env(self, extra_env: dict[str, str] | None) -> dict[str, str]:
        env = os.environ.copy()
        if extra_env:
            env.update(extra_env)
        return env

    def run_inline(
        self,
        script: str,
        shell: str = "bash",
        extra_env: dict[str, str] | None = None,
    ) -> ShellResult:
        """Run ``script`` inline through ``shell -c`` with inherited I/O.

        Args:
            script: full script text, entry point call included
            shell: shell interpreter to invoke
            extra_env: variables layered over the current environment

        Returns:
            ShellResult (exit_code, started_at, duration_ms)
        """
        env = self._build_env(extra_env)
        started_at = datetime.now().isoformat()
        start_ts = time.time()

        try:
            proc = subprocess.run(
                [shell, "-c", script],
                stdin=None,  # inherit from parent
                stdout=None,  # inherit from parent
                stderr=None,  # inherit from parent
                env=env,
            )
        except OSError as e:
            sys.stderr.write(f"Error executing {shell}: {e}\n")
            duration_ms = int((time.time() - start_ts) * 1000)
            return ShellResult(
                exit_code=SPAWN_FAILED_EXIT,
                started_at=started_at,
                duration_ms=duration_ms,
            )

        duration_ms = int((time.time() - start_ts) * 1000)

        # Negative return code: killed by signal -N, no exit status
        exit_code = proc.returncode if proc.returncode >= 0 else None

        return ShellResult(
            exit_code=exit_code,
            started_at=started_at,
            duration_ms=duration_ms,
        )
