import psutil
import logging
import threading
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Sequence, Union
from kubernix import settings
from kubernix.errors import InvalidCommand, ProcessError, ReadinessTimeout
from kubernix.local.supervisor import process_utils, shutdown, startup
from kubernix.local.supervisor.stoppable import Stoppable

if TYPE_CHECKING:
    from kubernix.local.config import Config

log = logging.getLogger(__name__)


class Process(Stoppable):
    """
    A general process abstraction.

    Owns one child process, the log file receiving its combined output and a
    watcher thread which waits for the child to exit. A process is created
    through `Process.start` and released through `stop`.
    """

    def __init__(
        self,
        command: str,
        child: subprocess.Popen,
        log_file: Path,
        readiness_timeout: Optional[float] = None,
        shutdown_timeout: Optional[float] = None,
    ) -> None:
        self.command = command
        self.child = child
        self.pid: int = child.pid
        self.log_file = log_file
        self.readiness_timeout = settings.READINESS_TIMEOUT if readiness_timeout is None else readiness_timeout
        self.shutdown_timeout = settings.GRACEFUL_SHUTDOWN_TIMEOUT if shutdown_timeout is None else shutdown_timeout

        # Set once, before SIGTERM is delivered, to mark the exit as intended.
        self.stop_requested = threading.Event()
        self.ps_process = psutil.Process(self.pid)
        self.watch_error: Optional[BaseException] = None
        self.watcher = threading.Thread(
            target=process_utils.watch_process,
            args=(self,),
            daemon=True,
            name=f"{Path(command).name}-watcher",
        )
        self._stop_lock = threading.Lock()
        self._stopped = False

    @classmethod
    def start(
        cls,
        config: "Config",
        directory: Union[str, Path],
        command: str,
        args: Sequence[str] = (),
        readiness_timeout: Optional[float] = None,
    ) -> "Process":
        """
        Spawns `command` and starts watching it.

        :param config: The configuration providing the runtime root.
        :param directory: The component's working directory, receiving `run.sh`.
        :param command: The program to execute.
        :param args: The program's arguments.
        :param readiness_timeout: Seconds `wait_ready` waits for the marker, defaults to the settings.
        :return: The running process.
        :raises InvalidCommand: If `command` is empty. Nothing is written in that case.
        :raises IoFailure: If the log directory, log file or run script cannot be written.
        :raises SpawnFailed: If the operating system refused to start the program.
        """
        if not command:
            raise InvalidCommand("<empty>", "No valid command provided")

        directory = Path(directory)
        arguments = [str(arg) for arg in args]

        log_file = process_utils.prepare_log_file(config.log_dir, command)
        process_utils.write_run_script(directory, command, arguments)
        child = process_utils.spawn(command, arguments, log_file)

        process = cls(command, child, log_file, readiness_timeout=readiness_timeout)
        process.watcher.start()
        log.debug(f"Started process '{command}' with PID {process.pid}, logging to {log_file}")
        return process

    @property
    def exit_code(self) -> Optional[int]:
        """The exit status once the watcher has reaped the child, otherwise None."""
        return self.child.returncode

    def is_running(self) -> bool:
        return self.child.returncode is None

    def wait_ready(self, marker: str) -> None:
        """
        Waits for the process to become ready by searching for `marker` in
        every line of its output.

        The process is stopped if the marker does not show up within
        `readiness_timeout` seconds.

        :raises ReadinessTimeout: If the marker was not found in time.
        """
        if startup.wait_for_marker(self, marker):
            return

        # Cleanup since process is not ready
        try:
            self.stop()
        except ProcessError as e:
            log.warning(f"Cleanup of process '{self.command}' after readiness timeout failed: {e}")
        raise ReadinessTimeout(self.command, marker, self.readiness_timeout, str(self.log_file))

    def stop(self) -> None:
        """
        Stops the process by sending SIGTERM and joining its watcher.

        Stopping an already stopped process does nothing.

        :raises SignalFailed: If the process could not be signalled, e.g. it already exited.
        :raises WatcherJoinFailed: If the watcher thread failed.
        """
        with self._stop_lock:
            if self._stopped:
                log.debug(f"Process '{self.command}' already stopped")
                return
            self._stopped = True

        shutdown.stop_process(self, self.shutdown_timeout)
