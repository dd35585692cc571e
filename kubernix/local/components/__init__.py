"""
Launchers for the cluster components.

Every launcher prepares its working directory, renders a configuration file
where the service needs one, starts the program and waits for its readiness
marker before returning the running component.
"""

from .apiserver import ApiServer
from .controllermanager import ControllerManager
from .etcd import Etcd
from .kubelet import Kubelet
from .proxy import Proxy
from .resources import CertificatePair, KubeConfig, Network, Pki
from .scheduler import Scheduler

__all__ = [
    "ApiServer",
    "ControllerManager",
    "Etcd",
    "Kubelet",
    "Proxy",
    "Scheduler",
    "CertificatePair",
    "KubeConfig",
    "Network",
    "Pki",
]
