import psutil
import logging
from typing import TYPE_CHECKING, Dict
from kubernix.errors import SignalFailed, WatcherJoinFailed

if TYPE_CHECKING:
    from .process import Process

log = logging.getLogger(__name__)

# Slack between the clock of the PID file and the process start times.
PID_REUSE_TOLERANCE = 1.0


def join_watcher(process: "Process", timeout: float) -> None:
    """
    Waits for the watcher thread of a process, escalating to SIGKILL when the
    process ignores SIGTERM for longer than `timeout` seconds.

    :param process: The process being stopped.
    :param timeout: Seconds to wait before forcefully killing the process.
    """
    process.watcher.join(timeout)
    if process.watcher.is_alive():
        log.warning(f"Process '{process.command}' did not terminate within {timeout}s. Killing it.")
        try:
            process.ps_process.kill()
        except psutil.NoSuchProcess:
            log.debug(f"Process '{process.command}' exited before it could be killed.")
        process.watcher.join()

    if process.watch_error is not None:
        raise WatcherJoinFailed(
            process.command, f"Unable to stop process: {process.watch_error}"
        ) from process.watch_error


def stop_process(process: "Process", timeout: float) -> None:
    """
    Runs the shutdown sequence of a single process.

    The intent is recorded before SIGTERM is sent, so the watcher thread
    classifies the resulting exit as intended.

    :param process: The process to stop.
    :param timeout: Seconds to wait for a graceful exit.
    """
    log.debug(f"Stopping process '{process.command}'")
    process.stop_requested.set()

    try:
        process.ps_process.terminate()
    except psutil.NoSuchProcess as e:
        join_watcher(process, timeout)
        raise SignalFailed(
            process.command, f"Unable to send termination signal: process {process.pid} no longer exists"
        ) from e
    except psutil.AccessDenied as e:
        raise SignalFailed(process.command, f"Unable to send termination signal to process {process.pid}: {e}") from e

    join_watcher(process, timeout)
    log.debug(f"Process '{process.command}' stopped")


def identify_recorded_processes(pids: Dict[str, int], recorded_at: float) -> Dict[str, psutil.Process]:
    """
    Looks up the processes recorded in a PID file.

    PIDs which no longer exist, or which now belong to a process created
    after the file was written, are skipped.

    :param pids: Component names mapped to their recorded PIDs.
    :param recorded_at: The modification time of the PID file.
    :return: Component names mapped to their live processes.
    """
    processes: Dict[str, psutil.Process] = {}
    for name, pid in pids.items():
        try:
            proc = psutil.Process(pid)
            if proc.create_time() > recorded_at + PID_REUSE_TOLERANCE:
                log.warning(f"PID {pid} of '{name}' was reused by another process, skipping it.")
                continue
            processes[name] = proc
        except psutil.NoSuchProcess:
            log.debug(f"Recorded process '{name}' (PID {pid}) no longer exists.")
    return processes


def stop_recorded_processes(processes: Dict[str, psutil.Process], timeout: float) -> bool:
    """
    Sends SIGTERM to processes this supervisor does not own, in reverse
    order, and kills the ones still alive after `timeout` seconds.

    :param processes: Component names mapped to their processes.
    :param timeout: Seconds to wait before forcefully killing.
    :return: True if every process exited after SIGTERM.
    """
    for name, proc in reversed(list(processes.items())):
        try:
            log.debug(f"Sending SIGTERM to '{name}' (PID {proc.pid})")
            proc.terminate()
        except psutil.NoSuchProcess:
            log.debug(f"Process '{name}' exited before it could be signalled.")

    _, alive = psutil.wait_procs(list(processes.values()), timeout=timeout)
    if not alive:
        return True

    log.warning(f"{len(alive)} processes did not terminate gracefully. Forcing shutdown...")
    for proc in alive:
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            log.debug(f"Process {proc.pid} exited before it could be killed.")
    psutil.wait_procs(alive, timeout=timeout)
    return False
