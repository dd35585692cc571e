"""
This module contains the default configuration settings for Kubernix.
It defines the runtime paths, supervisor timings, cluster-wide constants and
the templates of the configuration files rendered for the cluster components.
Values read from the environment can be overridden through a `.env` file.
"""

import os
import pathlib
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

#* --- Core Paths ---
ROOT_DIR = pathlib.Path(os.getenv("KUBERNIX_RUN", "kubernix-run"))
LOG_DIR_NAME = "log"
CONFIG_FILE_NAME = "kubernix.json"
PID_FILE_NAME = "kubernix.pid"
RUN_SCRIPT_NAME = "run.sh"

#* --- Logging ---
LOG_LEVEL = os.getenv("KUBERNIX_LOG_LEVEL", "info").lower()
LOG_LEVELS = ("trace", "debug", "info", "warn", "error", "off")

#* --- Network ---
CLUSTER_CIDR = os.getenv("KUBERNIX_CIDR", "10.10.0.0/16")
LOCALHOST = "127.0.0.1"

#* --- Supervisor Settings ---
READINESS_TIMEOUT = 30          # seconds until a process must print its marker
READINESS_POLL_INTERVAL = 0.1   # seconds between reads of an idle log file
GRACEFUL_SHUTDOWN_TIMEOUT = 10  # seconds before SIGTERM is escalated to SIGKILL
RUN_SCRIPT_MODE = 0o755

#* --- Cluster Settings ---
CLUSTER_NAME = "kubernetes"
LOG_VERBOSITY = 2
CONTAINER_RUNTIME_ENDPOINT = "unix:///var/run/crio/crio.sock"

#* --- Readiness Markers ---
# Literal substrings printed by the installed binaries once they serve.
ETCD_READY_MARKER = "ready to serve client requests"
APISERVER_READY_MARKER = "etcd ok"
CONTROLLER_MANAGER_READY_MARKER = "Serving securely"
SCHEDULER_READY_MARKER = "Serving healthz insecurely"
PROXY_READY_MARKER = "Caches are synced"
KUBELET_READY_MARKER = "Successfully registered node"

#* --- Configuration Templates ---
RUN_SCRIPT_SEPARATOR = " \\\n    "

SCHEDULER_CONFIG_TEMPLATE = """\
# This file is auto-generated by Kubernix. Do not edit directly.
apiVersion: kubescheduler.config.k8s.io/v1alpha1
kind: KubeSchedulerConfiguration
clientConnection:
  kubeconfig: "{kubeconfig}"
leaderElection:
  leaderElect: false
"""

PROXY_CONFIG_TEMPLATE = """\
# This file is auto-generated by Kubernix. Do not edit directly.
kind: KubeProxyConfiguration
apiVersion: kubeproxy.config.k8s.io/v1alpha1
clientConnection:
  kubeconfig: "{kubeconfig}"
mode: "iptables"
clusterCIDR: "{cluster_cidr}"
"""

KUBELET_CONFIG_TEMPLATE = """\
# This file is auto-generated by Kubernix. Do not edit directly.
kind: KubeletConfiguration
apiVersion: kubelet.config.k8s.io/v1beta1
authentication:
  anonymous:
    enabled: false
  webhook:
    enabled: true
  x509:
    clientCAFile: "{ca_file}"
authorization:
  mode: Webhook
clusterDomain: "cluster.local"
clusterDNS:
  - "{cluster_dns}"
failSwapOn: false
podCIDR: "{pod_cidr}"
runtimeRequestTimeout: "15m"
tlsCertFile: "{tls_cert_file}"
tlsPrivateKeyFile: "{tls_key_file}"
"""
