import logging
from typing import TYPE_CHECKING
from kubernix import settings
from kubernix.local.supervisor import Process, Startable
from .base import Component
from .config_utils import prepare_component_dir

if TYPE_CHECKING:
    from kubernix.local.config import Config
    from .resources import KubeConfig, Network, Pki

log = logging.getLogger(__name__)

COMMAND = "kube-controller-manager"


class ControllerManager(Component):

    @classmethod
    def start(cls, config: "Config", network: "Network", pki: "Pki", kubeconfig: "KubeConfig") -> Startable:
        log.info("Starting Controller Manager")

        directory = prepare_component_dir(config, "controllermanager", COMMAND)

        process = Process.start(
            config,
            directory,
            COMMAND,
            [
                "--bind-address=0.0.0.0",
                f"--cluster-cidr={network.cluster}",
                f"--cluster-name={settings.CLUSTER_NAME}",
                f"--cluster-signing-cert-file={pki.ca.cert}",
                f"--cluster-signing-key-file={pki.ca.key}",
                f"--kubeconfig={kubeconfig.controller_manager}",
                "--leader-elect=false",
                f"--root-ca-file={pki.ca.cert}",
                f"--service-account-private-key-file={pki.service_account.key}",
                f"--service-cluster-ip-range={network.service}",
                "--use-service-account-credentials=true",
                f"--v={settings.LOG_VERBOSITY}",
            ],
        )

        process.wait_ready(settings.CONTROLLER_MANAGER_READY_MARKER)
        log.info("Controller Manager is ready")
        return cls(process)
