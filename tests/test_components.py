import pytest

from kubernix import settings
from kubernix.errors import IoFailure, ReadinessTimeout
from kubernix.local.config import Config
from kubernix.local.components import ApiServer, ControllerManager, Etcd, Kubelet, Proxy, Scheduler
from kubernix.local.supervisor import Process, Stoppable


class FakeProcess:
    def __init__(self, directory, command, args, ready_error=None):
        self.directory = directory
        self.command = command
        self.args = list(args)
        self.pid = 4242
        self.markers = []
        self.stopped = 0
        self.ready_error = ready_error

    def wait_ready(self, marker):
        self.markers.append(marker)
        if self.ready_error is not None:
            raise self.ready_error

    def stop(self):
        self.stopped += 1


@pytest.fixture
def started(monkeypatch):
    """Replaces Process.start and records every fake process it hands out."""
    processes = []

    def fake_start(config, directory, command, args=(), readiness_timeout=None):
        process = FakeProcess(directory, command, args)
        processes.append(process)
        return process

    monkeypatch.setattr(Process, "start", fake_start)
    return processes


def test_etcd(config, pki, started):
    component = Etcd.start(config, pki)

    process = started[0]
    assert component.process is process
    assert process.command == "etcd"
    assert process.directory == config.root / "etcd"
    assert process.directory.is_dir()
    assert process.markers == ["ready to serve client requests"]
    assert "--client-cert-auth" in process.args
    assert f"--cert-file={pki.apiserver.cert}" in process.args
    assert f"--trusted-ca-file={pki.ca.cert}" in process.args
    assert f"--data-dir={config.root / 'etcd' / 'data'}" in process.args


def test_apiserver(config, network, pki, started):
    ApiServer.start(config, network, pki)

    process = started[0]
    assert process.command == "kube-apiserver"
    assert process.directory == config.root / "apiserver"
    assert process.markers == ["etcd ok"]
    assert f"--service-cluster-ip-range={network.service}" in process.args
    assert "--etcd-servers=https://127.0.0.1:2379" in process.args
    assert f"--service-account-key-file={pki.service_account.cert}" in process.args


def test_controllermanager(config, network, pki, kubeconfig, started):
    ControllerManager.start(config, network, pki, kubeconfig)

    process = started[0]
    assert process.command == "kube-controller-manager"
    assert process.directory == config.root / "controllermanager"
    assert process.markers == ["Serving securely"]
    assert f"--cluster-cidr={network.cluster}" in process.args
    assert "--cluster-name=kubernetes" in process.args
    assert f"--cluster-signing-key-file={pki.ca.key}" in process.args
    assert f"--kubeconfig={kubeconfig.controller_manager}" in process.args
    assert "--v=2" in process.args


def test_scheduler(config, kubeconfig, started):
    Scheduler.start(config, kubeconfig)

    process = started[0]
    config_file = config.root / "scheduler" / "config.yml"
    assert process.command == "kube-scheduler"
    assert process.markers == ["Serving healthz insecurely"]
    assert f"--config={config_file}" in process.args
    assert f'kubeconfig: "{kubeconfig.scheduler}"' in config_file.read_text()


def test_proxy(config, network, kubeconfig, started):
    Proxy.start(config, network, kubeconfig)

    process = started[0]
    config_file = config.root / "proxy" / "config.yml"
    assert process.command == "kube-proxy"
    assert process.args == [f"--config={config_file}"]
    assert process.markers == ["Caches are synced"]

    rendered = config_file.read_text()
    assert f'kubeconfig: "{kubeconfig.proxy}"' in rendered
    assert f'clusterCIDR: "{network.cluster}"' in rendered


def test_kubelet(config, network, pki, kubeconfig, started):
    Kubelet.start(config, network, pki, kubeconfig, node_name="node-1")

    process = started[0]
    config_file = config.root / "kubelet" / "config.yml"
    assert process.command == "kubelet"
    assert process.markers == ["Successfully registered node"]
    assert "--hostname-override=node-1" in process.args
    assert f"--kubeconfig={kubeconfig.kubelet}" in process.args

    rendered = config_file.read_text()
    assert f'clientCAFile: "{pki.ca.cert}"' in rendered
    assert f'- "{network.dns}"' in rendered
    assert f'tlsCertFile: "{pki.node.cert}"' in rendered


def test_markers_are_distinct(config, network, pki, kubeconfig, started):
    Etcd.start(config, pki)
    ApiServer.start(config, network, pki)
    ControllerManager.start(config, network, pki, kubeconfig)
    Scheduler.start(config, kubeconfig)
    Proxy.start(config, network, kubeconfig)
    Kubelet.start(config, network, pki, kubeconfig, node_name="node-1")

    markers = [marker for process in started for marker in process.markers]
    assert len(markers) == 6
    assert len(set(markers)) == 6


def test_component_stop_delegates(config, pki, started):
    component = Etcd.start(config, pki)
    assert isinstance(component, Stoppable)
    assert component.pid == 4242

    component.stop()
    assert started[0].stopped == 1


def test_readiness_timeout_propagates(config, pki, monkeypatch):
    def fake_start(config, directory, command, args=(), readiness_timeout=None):
        return FakeProcess(directory, command, args, ready_error=ReadinessTimeout(command, "marker", 1))

    monkeypatch.setattr(Process, "start", fake_start)
    with pytest.raises(ReadinessTimeout):
        Etcd.start(config, pki)


def test_unwritable_root(config_wrong_root, network, kubeconfig, started):
    with pytest.raises(IoFailure):
        Proxy.start(config_wrong_root, network, kubeconfig)
    assert started == []


def test_etcd_with_fake_binary(config, pki, fake_bin):
    fake_bin("etcd", 'echo "etcdserver: ready to serve client requests"\nexec sleep 500')

    component = Etcd.start(config, pki)
    try:
        assert component.process.is_running()
        assert (config.root / "etcd" / "run.sh").read_text().startswith("etcd \\\n    --advertise-client-urls=")
    finally:
        component.stop()
    assert not component.process.is_running()


def test_proxy_with_silent_binary(config, network, kubeconfig, fake_bin, monkeypatch):
    fake_bin("kube-proxy", "exec sleep 500")
    monkeypatch.setattr(settings, "READINESS_TIMEOUT", 1)

    with pytest.raises(ReadinessTimeout) as exc_info:
        Proxy.start(config, network, kubeconfig)
    assert exc_info.value.command == "kube-proxy"


def test_proxy_with_relative_root(tmp_path, network, kubeconfig, fake_bin, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = Config(root="kubernix-run")
    fake_bin(
        "kube-proxy",
        'cfg="${1#--config=}"\n'
        'if [ -f "$cfg" ]; then echo "Caches are synced"; else echo "missing $cfg"; fi\n'
        "exec sleep 500",
    )
    monkeypatch.setattr(settings, "READINESS_TIMEOUT", 5)

    component = Proxy.start(config, network, kubeconfig)
    try:
        assert component.process.is_running()
        assert (tmp_path / "kubernix-run" / "log" / "kube-proxy.log").exists()
    finally:
        component.stop()
