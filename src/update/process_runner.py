"""Process execution for external filesystem tools."""

from __future__ import annotations

import subprocess
from typing import Protocol

from core.constants import MISSING_BINARY_EXIT_CODE, TIMEOUT_EXIT_CODE
from core.logging_config import get_logger
from core.types import CommandResult
from update.commands import Command

_LOGGER = get_logger(__name__)


class ProcessRunner(Protocol):
    """Runs one command and reports its exit status and output."""

    def run(self, command: Command) -> CommandResult:
        """Execute ``command`` to completion."""


class SubprocessRunner:
    """Runs commands with subprocess, without a shell."""

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    def run(self, command: Command) -> CommandResult:
        """Execute a command and capture its output.

        A missing executable or a timeout are reported as non-zero exit
        codes so callers handle every failure through one check.

        Args:
            command: Command to execute.

        Returns:
            Exit code with captured stdout and stderr.
        """
        try:
            completed = subprocess.run(
                command.argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                check=False,
                timeout=self._timeout,
            )
        except FileNotFoundError as error:
            _LOGGER.warning("command_not_found", command=command.describe())
            return CommandResult(exit_code=MISSING_BINARY_EXIT_CODE, stderr=str(error))
        except subprocess.TimeoutExpired:
            _LOGGER.warning("command_timed_out", command=command.describe(), timeout=self._timeout)
            return CommandResult(
                exit_code=TIMEOUT_EXIT_CODE,
                stderr=f"timed out after {self._timeout} seconds",
            )
        result = CommandResult(
            exit_code=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
        if not result.succeeded:
            _LOGGER.warning(
                "command_failed",
                command=command.describe(),
                exit_code=result.exit_code,
                stderr=result.stderr.strip(),
            )
        return result
