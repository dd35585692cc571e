import time
import psutil
import logging
import threading
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence, Tuple
from kubernix import settings
from kubernix.errors import KubernixError
from kubernix.local.supervisor import persistence, shutdown
from kubernix.local.supervisor.stoppable import Startable

if TYPE_CHECKING:
    from kubernix.local.config import Config

log = logging.getLogger(__name__)

Launcher = Callable[[], Startable]


class ClusterManager:
    """
    Starts the cluster components in order and stops them as a unit.

    Each component is owned by the manager once its launcher returned. If a
    launcher fails, every component started before it is stopped again.
    """

    def __init__(self, config: "Config") -> None:
        self.config = config
        self.components: List[Tuple[str, Startable]] = []
        self.lock = threading.Lock()

    def pids(self) -> Dict[str, Optional[int]]:
        """Returns the PID of every running component, None if it has none."""
        with self.lock:
            return {name: getattr(component, "pid", None) for name, component in self.components}

    def start_all(self, launchers: Sequence[Tuple[str, Launcher]]) -> None:
        """
        Starts all components in the given order.

        :param launchers: Pairs of component name and zero-argument launcher.
        :raises Exception: The error of the first failing launcher, after rollback.
        """
        log.info("=" * 20 + " Cluster Starting " + "=" * 20)
        start_time = time.time()

        for name, launch in launchers:
            try:
                component = launch()
            except Exception as e:
                log.critical(f"Startup of '{name}' failed: {e}")
                self._rollback()
                raise
            with self.lock:
                self.components.append((name, component))

        persistence.write_pid_file(self)
        log.info(f"All cluster components started successfully in {time.time() - start_time:.2f} seconds.")

    def stop_all(self) -> bool:
        """
        Stops all running components in reverse start order.

        When this manager owns no components, the processes recorded in the
        PID file by an earlier start are stopped instead.

        :return: True if every component stopped cleanly.
        """
        with self.lock:
            components, self.components = self.components, []

        if components:
            all_ok = self._stop_components(components)
        else:
            all_ok = self._stop_recorded()

        persistence.remove_pid_file(self)
        log.info("Cluster stop sequence completed.")
        return all_ok

    def _rollback(self) -> None:
        with self.lock:
            components, self.components = self.components, []
        if components:
            self._stop_components(components)

    def _stop_components(self, components: List[Tuple[str, Startable]]) -> bool:
        log.info(f"Stopping {len(components)} cluster components...")
        all_ok = True
        for name, component in reversed(components):
            try:
                component.stop()
                log.info(f"Stopped '{name}'")
            except KubernixError as e:
                all_ok = False
                log.error(f"Failed to stop '{name}': {e}")
        return all_ok

    def _stop_recorded(self) -> bool:
        pids = persistence.get_pid_info(self)
        recorded_at = persistence.get_pid_file_time(self)
        if not pids or recorded_at is None:
            log.info("No running cluster components found to stop.")
            return True

        processes = shutdown.identify_recorded_processes(pids, recorded_at)
        if not processes:
            log.info("No recorded cluster components are still running.")
            return True

        log.info(f"Stopping {len(processes)} recorded cluster components...")
        try:
            return shutdown.stop_recorded_processes(processes, settings.GRACEFUL_SHUTDOWN_TIMEOUT)
        except psutil.AccessDenied as e:
            log.error(f"Failed to stop recorded components: {e}")
            return False

    def get_pid_info(self) -> Optional[Dict[str, int]]:
        """Retrieves the component PIDs recorded by the last successful start."""
        return persistence.get_pid_info(self)
