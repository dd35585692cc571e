"""
Values produced outside the launchers and threaded into the component
command lines: certificate pairs, client configurations and address ranges.
All of them are treated as pre-validated paths and strings.
"""

from pathlib import Path
from dataclasses import dataclass


@dataclass(frozen=True)
class CertificatePair:
    cert: Path
    key: Path


@dataclass(frozen=True)
class Pki:
    """The certificates and keys of the cluster."""

    ca: CertificatePair
    apiserver: CertificatePair
    service_account: CertificatePair
    node: CertificatePair


@dataclass(frozen=True)
class KubeConfig:
    """The client configuration file of every component talking to the API server."""

    controller_manager: Path
    scheduler: Path
    proxy: Path
    kubelet: Path
    admin: Path


@dataclass(frozen=True)
class Network:
    """The address ranges of the cluster."""

    cluster: str
    service: str
    dns: str
