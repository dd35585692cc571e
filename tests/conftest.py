"""Shared fixtures for the Kubernix test suite."""

import os
import stat
from pathlib import Path

import pytest

from kubernix.local.config import Config
from kubernix.local.components import CertificatePair, KubeConfig, Network, Pki


@pytest.fixture
def config(tmp_path: Path) -> Config:
    c = Config(root=tmp_path / "kubernix-run")
    c.canonicalize_root()
    return c


@pytest.fixture
def config_wrong_root(config: Config) -> Config:
    config.root = Path("/") / "proc"
    return config


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    directory = tmp_path / "component"
    directory.mkdir()
    return directory


@pytest.fixture
def pki(tmp_path: Path) -> Pki:
    pki_dir = tmp_path / "pki"

    def pair(name: str) -> CertificatePair:
        return CertificatePair(cert=pki_dir / f"{name}.pem", key=pki_dir / f"{name}-key.pem")

    return Pki(ca=pair("ca"), apiserver=pair("kubernetes"), service_account=pair("service-account"), node=pair("node"))


@pytest.fixture
def kubeconfig(tmp_path: Path) -> KubeConfig:
    kube_dir = tmp_path / "kubeconfig"
    return KubeConfig(
        controller_manager=kube_dir / "kube-controller-manager.kubeconfig",
        scheduler=kube_dir / "kube-scheduler.kubeconfig",
        proxy=kube_dir / "kube-proxy.kubeconfig",
        kubelet=kube_dir / "kubelet.kubeconfig",
        admin=kube_dir / "admin.kubeconfig",
    )


@pytest.fixture
def network() -> Network:
    return Network(cluster="10.10.0.0/24", service="10.10.1.0/24", dns="10.10.1.2")


@pytest.fixture
def fake_bin(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Returns a helper placing executable shell scripts first on the PATH."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")

    def install(name: str, body: str) -> Path:
        script = bin_dir / name
        script.write_text(f"#!/bin/sh\n{body}\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return install
