import json
import logging
from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from .supervisor import ClusterManager

log = logging.getLogger(__name__)


def get_pid_info(manager: "ClusterManager") -> Optional[Dict[str, int]]:
    """
    Reads the PID file from disk and returns its contents.

    :param manager: The ClusterManager instance.
    :return: A dictionary of PIDs if the file exists and is valid, else None.
    """
    pid_file = manager.config.pid_file
    if not pid_file.exists():
        return None
    try:
        with pid_file.open("r") as f:
            pids = json.load(f)
        if not isinstance(pids, dict) or not all(isinstance(pid, int) for pid in pids.values()):
            log.error(f"PID file '{pid_file}' is malformed. Deleting.")
            pid_file.unlink()
            return None
        return pids
    except (json.JSONDecodeError, IOError):
        log.warning("Could not read PID file, assuming stale.")
        pid_file.unlink(missing_ok=True)
        return None


def get_pid_file_time(manager: "ClusterManager") -> Optional[float]:
    """Returns the modification time of the PID file, or None if there is none."""
    try:
        return manager.config.pid_file.stat().st_mtime
    except FileNotFoundError:
        return None


def write_pid_file(manager: "ClusterManager") -> None:
    """
    Atomically writes the PIDs of the running components to the PID file.

    :param manager: The ClusterManager instance.
    """
    pid_dict = {name: pid for name, pid in manager.pids().items() if pid is not None}
    pid_file = manager.config.pid_file
    temp_pid_path = pid_file.with_suffix(".tmp")
    try:
        with temp_pid_path.open("w") as f:
            json.dump(pid_dict, f, indent=4)
        temp_pid_path.replace(pid_file)
    except (IOError, OSError) as e:
        log.error(f"Failed to write PID file: {e}", exc_info=True)
    finally:
        temp_pid_path.unlink(missing_ok=True)


def remove_pid_file(manager: "ClusterManager") -> None:
    """Removes the PID file."""
    manager.config.pid_file.unlink(missing_ok=True)
    log.debug("Cleaned up PID file.")
