import logging
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, List
from kubernix import settings
from kubernix.errors import IoFailure, SpawnFailed

if TYPE_CHECKING:
    from .process import Process

log = logging.getLogger(__name__)


#* --- Process Creation ---
def prepare_log_file(log_dir: Path, command: str) -> Path:
    """
    Creates the shared log directory if needed and returns the log path of a program.

    :param log_dir: The directory holding one log file per program.
    :param command: The program name the log file is named after.
    :return: The path `<log_dir>/<command>.log`.
    """
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IoFailure(command, f"Unable to create log directory '{log_dir}': {e}") from e
    return log_dir / f"{Path(command).name}.log"


def format_run_script(command: str, args: List[str]) -> str:
    """Renders a command line with one argument per continuation line."""
    return settings.RUN_SCRIPT_SEPARATOR.join([command, *args]) + "\n"


def write_run_script(directory: Path, command: str, args: List[str]) -> Path:
    """
    Writes the executed command into an executable `run.sh` for debugging.

    :param directory: The working directory of the component.
    :param command: The program being launched.
    :param args: The program's arguments.
    :return: The path of the written script.
    """
    run_file = directory / settings.RUN_SCRIPT_NAME
    try:
        directory.mkdir(parents=True, exist_ok=True)
        run_file.write_text(format_run_script(command, args))
        run_file.chmod(settings.RUN_SCRIPT_MODE)
    except OSError as e:
        raise IoFailure(command, f"Unable to create '{run_file}': {e}") from e
    return run_file


def spawn(command: str, args: List[str], log_file: Path) -> subprocess.Popen:
    """
    Spawns a program with stdout and stderr both redirected into its log file.

    The log file is truncated first. Both streams share one file descriptor,
    so their output is interleaved in write order. The child inherits the
    working directory of the caller and runs in its own session.
    """
    try:
        out = open(log_file, "wb")
    except OSError as e:
        raise IoFailure(command, f"Unable to create log file '{log_file}': {e}") from e

    with out:
        try:
            return subprocess.Popen(
                [command, *args],
                stdout=out,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            raise SpawnFailed(command, f"Unable to spawn process: {e}") from e


#* --- Process Monitoring ---
def watch_process(process: "Process") -> None:
    """
    Target function for watcher threads. Blocks until the child exits and
    classifies the exit as intended or unexpected.
    """
    try:
        status = process.child.wait()
    except Exception as e:
        process.watch_error = e
        log.error(f"Watcher for process '{process.command}' failed: {e}")
        return

    if process.stop_requested.is_set():
        log.info(f"Process '{process.command}' exited")
    else:
        # No stop was requested, so the process died on its own
        log.error(f"Process '{process.command}' died unexpectedly")
    log.debug(f"{process.command} exit status: {status}")
