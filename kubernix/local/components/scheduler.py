import logging
from typing import TYPE_CHECKING
from kubernix import settings
from kubernix.local.supervisor import Process, Startable
from .base import Component
from .config_utils import prepare_component_dir, write_config_file

if TYPE_CHECKING:
    from kubernix.local.config import Config
    from .resources import KubeConfig

log = logging.getLogger(__name__)

COMMAND = "kube-scheduler"


class Scheduler(Component):

    @classmethod
    def start(cls, config: "Config", kubeconfig: "KubeConfig") -> Startable:
        log.info("Starting Scheduler")

        directory = prepare_component_dir(config, "scheduler", COMMAND)
        config_file = write_config_file(
            directory, COMMAND, settings.SCHEDULER_CONFIG_TEMPLATE,
            kubeconfig=kubeconfig.scheduler,
        )

        process = Process.start(
            config,
            directory,
            COMMAND,
            [
                f"--config={config_file}",
                f"--v={settings.LOG_VERBOSITY}",
            ],
        )

        process.wait_ready(settings.SCHEDULER_READY_MARKER)
        log.info("Scheduler is ready")
        return cls(process)
