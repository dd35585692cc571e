"""Error types raised while launching and supervising cluster processes."""

from typing import Optional


class KubernixError(Exception):
    """Base class for all Kubernix errors."""


class ProcessError(KubernixError):
    """An error tied to a single external program."""

    def __init__(self, command: str, message: str) -> None:
        super().__init__(f"{command}: {message}")
        self.command = command


class InvalidCommand(ProcessError):
    """Raised when no program name was provided."""


class SpawnFailed(ProcessError):
    """Raised when the operating system could not create the process."""


class IoFailure(ProcessError):
    """Raised when a directory, log, script or config file cannot be written."""


class ReadinessTimeout(ProcessError):
    """Raised when a process did not print its readiness marker in time."""

    def __init__(self, command: str, marker: str, timeout: float, log_file: Optional[str] = None) -> None:
        message = f"timed out after {timeout}s waiting for '{marker}'"
        if log_file:
            message += f" (see {log_file})"
        super().__init__(command, message)
        self.marker = marker
        self.timeout = timeout


class SignalFailed(ProcessError):
    """Raised when the termination signal could not be delivered."""


class WatcherJoinFailed(ProcessError):
    """Raised when the exit watcher did not finish cleanly."""


__all__ = [
    "KubernixError",
    "ProcessError",
    "InvalidCommand",
    "SpawnFailed",
    "IoFailure",
    "ReadinessTimeout",
    "SignalFailed",
    "WatcherJoinFailed",
]
