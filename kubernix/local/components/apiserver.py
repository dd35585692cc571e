import logging
from typing import TYPE_CHECKING
from kubernix import settings
from kubernix.local.supervisor import Process, Startable
from .base import Component
from .config_utils import prepare_component_dir

if TYPE_CHECKING:
    from kubernix.local.config import Config
    from .resources import Network, Pki

log = logging.getLogger(__name__)

COMMAND = "kube-apiserver"


class ApiServer(Component):
    """The control-plane API server."""

    @classmethod
    def start(cls, config: "Config", network: "Network", pki: "Pki") -> Startable:
        log.info("Starting API Server")

        directory = prepare_component_dir(config, "apiserver", COMMAND)

        process = Process.start(
            config,
            directory,
            COMMAND,
            [
                f"--advertise-address={settings.LOCALHOST}",
                "--allow-privileged=true",
                "--audit-log-maxage=30",
                "--audit-log-maxbackup=3",
                "--audit-log-maxsize=100",
                f"--audit-log-path={directory / 'audit.log'}",
                "--authorization-mode=Node,RBAC",
                "--bind-address=0.0.0.0",
                f"--client-ca-file={pki.ca.cert}",
                f"--etcd-cafile={pki.ca.cert}",
                f"--etcd-certfile={pki.apiserver.cert}",
                f"--etcd-keyfile={pki.apiserver.key}",
                f"--etcd-servers=https://{settings.LOCALHOST}:2379",
                f"--kubelet-certificate-authority={pki.ca.cert}",
                f"--kubelet-client-certificate={pki.apiserver.cert}",
                f"--kubelet-client-key={pki.apiserver.key}",
                "--runtime-config=api/all=true",
                f"--service-account-key-file={pki.service_account.cert}",
                f"--service-cluster-ip-range={network.service}",
                f"--tls-cert-file={pki.apiserver.cert}",
                f"--tls-private-key-file={pki.apiserver.key}",
                f"--v={settings.LOG_VERBOSITY}",
            ],
        )

        process.wait_ready(settings.APISERVER_READY_MARKER)
        log.info("API Server is ready")
        return cls(process)
