import socket
import logging
from typing import TYPE_CHECKING, Optional
from kubernix import settings
from kubernix.local.supervisor import Process, Startable
from .base import Component
from .config_utils import prepare_component_dir, write_config_file

if TYPE_CHECKING:
    from kubernix.local.config import Config
    from .resources import KubeConfig, Network, Pki

log = logging.getLogger(__name__)

COMMAND = "kubelet"


class Kubelet(Component):
    """The per-node agent registering the host as a cluster node."""

    @classmethod
    def start(
        cls,
        config: "Config",
        network: "Network",
        pki: "Pki",
        kubeconfig: "KubeConfig",
        node_name: Optional[str] = None,
    ) -> Startable:
        log.info("Starting Kubelet")

        directory = prepare_component_dir(config, "kubelet", COMMAND)
        config_file = write_config_file(
            directory, COMMAND, settings.KUBELET_CONFIG_TEMPLATE,
            ca_file=pki.ca.cert,
            cluster_dns=network.dns,
            pod_cidr=network.cluster,
            tls_cert_file=pki.node.cert,
            tls_key_file=pki.node.key,
        )

        process = Process.start(
            config,
            directory,
            COMMAND,
            [
                f"--config={config_file}",
                "--container-runtime=remote",
                f"--container-runtime-endpoint={settings.CONTAINER_RUNTIME_ENDPOINT}",
                f"--hostname-override={node_name or socket.gethostname()}",
                f"--kubeconfig={kubeconfig.kubelet}",
                f"--root-dir={directory / 'root'}",
                "--register-node=true",
                f"--v={settings.LOG_VERBOSITY}",
            ],
        )

        process.wait_ready(settings.KUBELET_READY_MARKER)
        log.info("Kubelet is ready")
        return cls(process)
