"""
Synchronous subprocess execution for the package manager.

The executor is deliberately thin: it starts one command, copies its output
into caller-supplied sinks, blocks until the command exits and turns a
non-zero exit status into an ExecutionError. Retry and timeout policies are
left to callers.
"""

import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Dict, List, Optional, Protocol

from npminstall.exceptions import ExecutionError


@dataclass(frozen=True)
class Execution:
    """A single invocation of an executable."""

    args: List[str] = field(default_factory=list)
    dir: Optional[Path] = None
    env: Optional[Dict[str, str]] = None
    stdout: Optional[IO[str]] = None
    stderr: Optional[IO[str]] = None


class Executable(Protocol):
    """Minimal interface for running an external command."""

    def execute(self, execution: Execution) -> None:
        """Run the command, raising ExecutionError on failure."""
        ...


class SubprocessExecutable:
    """Runs a named executable through subprocess."""

    def __init__(self, name: str, logger: Optional[logging.Logger] = None):
        self.name = name
        self.logger = logger or logging.getLogger("npminstall")

    def execute(self, execution: Execution) -> None:
        command = [self.name, *execution.args]
        merged = execution.stdout is not None and execution.stdout is execution.stderr

        self.logger.debug(f"Starting {command} in {execution.dir}")
        try:
            process = subprocess.Popen(
                command,
                cwd=execution.dir,
                env=execution.env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if merged else subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise ExecutionError(None, f"failed to start {self.name}: {e}") from e

        if merged:
            # Single pipe, so output can be copied as it arrives
            for line in process.stdout:
                execution.stdout.write(line)
            process.stdout.close()
            exit_code = process.wait()
        else:
            out, err = process.communicate()
            if execution.stdout is not None:
                execution.stdout.write(out)
            if execution.stderr is not None:
                execution.stderr.write(err)
            exit_code = process.returncode

        self.logger.debug(f"{self.name} exited with code {exit_code}")
        if exit_code != 0:
            raise ExecutionError(exit_code)
