"""Exceptions raised by aptwrap."""

from __future__ import annotations


class AptwrapError(Exception):
    """Base class for aptwrap errors."""


class ToolExecutionError(AptwrapError):
    """
    An external tool could not be spawned or exited with a nonzero status.

    Attributes:
        command: The argv that was (or would have been) executed
        returncode: Exit status, or None when the process never started
        stderr: Diagnostic text captured from standard error
        stdout: Text captured from standard output
    """

    def __init__(
        self,
        command: list[str],
        returncode: int | None,
        stderr: str = "",
        stdout: str = "",
    ) -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        self.stdout = stdout
        super().__init__(self._format())

    def _format(self) -> str:
        cmd = " ".join(self.command)
        if self.returncode is None:
            status = "could not be started"
        else:
            status = f"exited with status {self.returncode}"
        message = f"Command '{cmd}' {status}"
        detail = self.stderr.strip()
        if detail:
            message += f": {detail}"
        return message
