import time
import logging
from typing import TYPE_CHECKING
from kubernix import settings
from kubernix.errors import IoFailure

if TYPE_CHECKING:
    from .process import Process

log = logging.getLogger(__name__)


def wait_for_marker(process: "Process", marker: str, poll_interval: float = settings.READINESS_POLL_INTERVAL) -> bool:
    """
    Polls the log file of a process until a line contains the marker.

    The file is read from its start. An empty read means no new output yet,
    so the poller sleeps for at most `poll_interval` and tries again. Partial
    lines are kept until they are completed, so every line is inspected once.

    :param process: The process whose log is scanned.
    :param marker: The literal substring signalling readiness.
    :param poll_interval: Seconds to sleep when no new output is available.
    :return: True if the marker was found, False if the readiness timeout elapsed.
    """
    log.debug(f"Waiting for process '{process.command}' to become ready with pattern: '{marker}'")
    start_time = time.monotonic()
    deadline = start_time + process.readiness_timeout

    try:
        log_file = open(process.log_file, "r", encoding="utf-8", errors="replace")
    except OSError as e:
        raise IoFailure(process.command, f"Unable to open log file '{process.log_file}': {e}") from e

    with log_file:
        line = ""
        while time.monotonic() < deadline:
            chunk = log_file.readline()
            if not chunk:
                time.sleep(max(0.0, min(poll_interval, deadline - time.monotonic())))
                continue

            line += chunk
            if marker in line:
                log.debug(f"Found pattern '{marker}' in line '{line.strip()}'")
                log.debug(f"Process '{process.command}' ready after {time.monotonic() - start_time:.2f}s")
                return True
            if line.endswith("\n"):
                line = ""

    return False
