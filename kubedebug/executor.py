"""Command execution seam between the session engine and external processes."""

import subprocess
from dataclasses import dataclass
from typing import Protocol

from kubedebug.ui import print_verbose


@dataclass
class CommandResult:
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandExecutor(Protocol):
    def run(self, command: list[str]) -> CommandResult:
        """Run a command and capture its output."""
        ...

    def run_interactive(self, command: list[str]) -> int:
        """Run a command wired to this process's terminal and return its exit code."""
        ...


class SubprocessExecutor:
    """Runs commands as real child processes."""

    def run(self, command: list[str]) -> CommandResult:
        print_verbose(f"$ {' '.join(command)}")
        try:
            result = subprocess.run(command, capture_output=True, text=True)
        except OSError as e:
            # Missing binary: report it like a failed command so callers keep one path
            return CommandResult(returncode=127, stdout="", stderr=str(e))
        return CommandResult(
            returncode=result.returncode, stdout=result.stdout, stderr=result.stderr
        )

    def run_interactive(self, command: list[str]) -> int:
        print_verbose(f"$ {' '.join(command)}")
        # Raises OSError if the command cannot be started
        return subprocess.run(command).returncode
