import logging
from typing import TYPE_CHECKING
from kubernix import settings
from kubernix.local.supervisor import Process, Startable
from .base import Component
from .config_utils import prepare_component_dir, write_config_file

if TYPE_CHECKING:
    from kubernix.local.config import Config
    from .resources import KubeConfig, Network

log = logging.getLogger(__name__)

COMMAND = "kube-proxy"


class Proxy(Component):
    """The per-node network proxy."""

    @classmethod
    def start(cls, config: "Config", network: "Network", kubeconfig: "KubeConfig") -> Startable:
        log.info("Starting Proxy")

        directory = prepare_component_dir(config, "proxy", COMMAND)
        config_file = write_config_file(
            directory, COMMAND, settings.PROXY_CONFIG_TEMPLATE,
            kubeconfig=kubeconfig.proxy,
            cluster_cidr=network.cluster,
        )

        process = Process.start(config, directory, COMMAND, [f"--config={config_file}"])

        process.wait_ready(settings.PROXY_READY_MARKER)
        log.info("Proxy is ready")
        return cls(process)
