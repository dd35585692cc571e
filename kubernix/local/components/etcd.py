import logging
from typing import TYPE_CHECKING
from kubernix import settings
from kubernix.local.supervisor import Process, Startable
from .base import Component
from .config_utils import prepare_component_dir

if TYPE_CHECKING:
    from kubernix.local.config import Config
    from .resources import Pki

log = logging.getLogger(__name__)

COMMAND = "etcd"


class Etcd(Component):
    """The coordination store backing the API server."""

    @classmethod
    def start(cls, config: "Config", pki: "Pki") -> Startable:
        log.info("Starting etcd")

        directory = prepare_component_dir(config, "etcd", COMMAND)
        client_url = f"https://{settings.LOCALHOST}:2379"
        peer_url = f"https://{settings.LOCALHOST}:2380"

        process = Process.start(
            config,
            directory,
            COMMAND,
            [
                f"--advertise-client-urls={client_url}",
                "--client-cert-auth",
                f"--data-dir={directory / 'data'}",
                f"--initial-advertise-peer-urls={peer_url}",
                "--initial-cluster-state=new",
                "--initial-cluster-token=etcd-cluster",
                f"--initial-cluster=etcd={peer_url}",
                f"--listen-client-urls={client_url}",
                f"--listen-peer-urls={peer_url}",
                "--name=etcd",
                "--peer-client-cert-auth",
                f"--cert-file={pki.apiserver.cert}",
                f"--key-file={pki.apiserver.key}",
                f"--peer-cert-file={pki.apiserver.cert}",
                f"--peer-key-file={pki.apiserver.key}",
                f"--peer-trusted-ca-file={pki.ca.cert}",
                f"--trusted-ca-file={pki.ca.cert}",
            ],
        )

        process.wait_ready(settings.ETCD_READY_MARKER)
        log.info("etcd is ready")
        return cls(process)
