"""
Unit tests for manifest generation and the text summary.
"""

import os

import pytest
import yaml

from decide_resources import COMPUTE, NETWORK, STORAGE, InputSpec, collect_timed_decisions
from generate_manifest import (
    ManifestWriteError,
    build_deployment_manifest,
    format_text_summary,
    render_deployment_manifest,
    write_deployment_manifest,
)

NO_DELAYS = {COMPUTE: 0.0, NETWORK: 0.0, STORAGE: 0.0}


@pytest.fixture
def high_spec():
    return InputSpec(app_name="shop", expected_load=350, data_size=300, network_traffic=30, importance="high")


@pytest.fixture
def high_results(high_spec):
    return collect_timed_decisions(high_spec, delays=NO_DELAYS)


def test_manifest_structure(high_spec, high_results):
    manifest = build_deployment_manifest(high_spec, high_results)

    assert manifest["apiVersion"] == "apps/v1"
    assert manifest["kind"] == "Deployment"
    assert manifest["metadata"]["name"] == "shop-deployment"
    assert manifest["spec"]["replicas"] == 1
    assert manifest["spec"]["selector"]["matchLabels"]["app"] == "shop"

    container = manifest["spec"]["template"]["spec"]["containers"][0]
    assert container["name"] == "shop-container"
    assert container["resources"]["requests"] == {"cpu": "2.67", "memory": "331Mi"}
    assert container["resources"]["limits"] == {"cpu": "3.33", "memory": "331Mi"}
    assert container["ports"] == [
        {"containerPort": 8080, "protocol": "TCP"},
        {"containerPort": 443, "protocol": "TCP"},
    ]
    assert container["env"] == [
        {"name": "NETWORK_BANDWIDTH", "value": "200Mbps"},
        {"name": "STORAGE_CAPACITY", "value": "20Gi"},
        {"name": "STORAGE_CLASS", "value": "premium"},
    ]


def test_rendered_yaml_keeps_cpu_as_strings(high_spec, high_results):
    loaded = yaml.safe_load(render_deployment_manifest(high_spec, high_results))
    resources = loaded["spec"]["template"]["spec"]["containers"][0]["resources"]
    assert resources["limits"]["cpu"] == "3.33"


def test_write_creates_directory_and_file(tmp_path, high_spec, high_results):
    output_dir = tmp_path / "k8s"
    path = write_deployment_manifest(high_spec, high_results, str(output_dir))

    assert path == os.path.join(str(output_dir), "shop-deployment.yaml")
    with open(path) as f:
        loaded = yaml.safe_load(f)
    ports = loaded["spec"]["template"]["spec"]["containers"][0]["ports"]
    assert len(ports) == len(high_results[NETWORK].decision.ports)


def test_port_count_follows_network_decision(tmp_path):
    spec = InputSpec(app_name="api", expected_load=10, data_size=0, network_traffic=0, importance="low")
    results = collect_timed_decisions(spec, delays=NO_DELAYS)
    path = write_deployment_manifest(spec, results, str(tmp_path))

    with open(path) as f:
        loaded = yaml.safe_load(f)
    assert len(loaded["spec"]["template"]["spec"]["containers"][0]["ports"]) == 1


def test_write_fails_when_output_dir_is_a_file(tmp_path, high_spec, high_results):
    blocker = tmp_path / "k8s"
    blocker.write_text("not a directory")

    with pytest.raises(ManifestWriteError) as excinfo:
        write_deployment_manifest(high_spec, high_results, str(blocker))
    assert "error creating" in str(excinfo.value)


def test_write_fails_when_manifest_path_is_a_directory(tmp_path, high_spec, high_results):
    (tmp_path / "shop-deployment.yaml").mkdir()

    with pytest.raises(ManifestWriteError) as excinfo:
        write_deployment_manifest(high_spec, high_results, str(tmp_path))
    assert "error writing Kubernetes manifest" in str(excinfo.value)


def test_write_fails_when_open_raises(tmp_path, monkeypatch, high_spec, high_results):
    def read_only_disk(*args, **kwargs):
        raise OSError("read-only file system")

    monkeypatch.setattr("generate_manifest.open", read_only_disk, raising=False)

    with pytest.raises(ManifestWriteError, match="error writing Kubernetes manifest.*read-only file system"):
        write_deployment_manifest(high_spec, high_results, str(tmp_path))


@pytest.mark.parametrize("app_name", [None, "bad\0name"])
def test_write_refuses_names_leaving_output_dir(tmp_path, high_results, app_name):
    if app_name is None:
        app_name = str(tmp_path / "outside")
    spec = InputSpec(app_name=app_name, expected_load=350, data_size=300, network_traffic=30, importance="high")
    output_dir = tmp_path / "k8s"

    with pytest.raises(ManifestWriteError, match="invalid application name"):
        write_deployment_manifest(spec, high_results, str(output_dir))
    assert not (tmp_path / "outside-deployment.yaml").exists()
    assert not output_dir.exists()


def test_written_path_stays_under_output_dir(tmp_path, high_spec, high_results):
    output_dir = str(tmp_path / "k8s")
    path = write_deployment_manifest(high_spec, high_results, output_dir)
    assert os.path.dirname(path) == output_dir


def test_summary_lists_decisions_and_path(high_results):
    summary = format_text_summary(high_results, manifest_file="k8s/shop-deployment.yaml")

    assert "Compute: CPU=3.33 cores, Memory=331Mi" in summary
    assert "Network: Bandwidth=200Mbps, Ports=[8080, 443]" in summary
    assert "Storage: Capacity=20Gi, Class=premium" in summary
    assert "took" in summary
    assert "Deployment file generated within k8s/shop-deployment.yaml" in summary
    assert "Warning" not in summary


def test_summary_keeps_decisions_next_to_warning(high_results):
    summary = format_text_summary(high_results, warning="disk full")

    assert "Compute: CPU=3.33 cores" in summary
    assert "Warning: disk full" in summary
    assert "FILE GENERATED" not in summary
