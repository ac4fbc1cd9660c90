#!/usr/bin/env python3
"""
AlloCAT Resource Allocation Tool - Manifest Generation Script
Version: 1.0

Renders the compute, network and storage decisions into a Kubernetes
Deployment manifest and a readable text summary. The manifest is written
to <output dir>/<app name>-deployment.yaml.
"""

import os
from typing import Any, Dict, List, Optional

import yaml

from decide_resources import COMPUTE, NETWORK, STORAGE, DecisionResult, InputSpec

DEFAULT_OUTPUT_DIR: str = "k8s"
MANIFEST_SUFFIX: str = "-deployment.yaml"
PLACEHOLDER_IMAGE: str = "your-app-image:latest"  # Replace with your actual image
REPLICAS: int = 1
CPU_REQUEST_RATIO: float = 0.8  # requests are 80% of the allocated CPU
PORT_PROTOCOL: str = "TCP"


class ManifestWriteError(Exception):
    """Raised when the manifest directory or file cannot be written."""


def format_cpu(cores: float) -> str:
    return f"{cores:.2f}"


def build_deployment_manifest(spec: InputSpec, results: Dict[str, DecisionResult]) -> Dict[str, Any]:
    """
    Build the Deployment manifest for the application.

    Args:
        spec (InputSpec): Application specification
        results (dict): Decision name -> DecisionResult

    Returns:
        dict: Deployment manifest, ready to be dumped as YAML
    """
    compute = results[COMPUTE].decision
    network = results[NETWORK].decision
    storage = results[STORAGE].decision
    app_name = spec.app_name

    container: Dict[str, Any] = {
        "name": f"{app_name}-container",
        "image": PLACEHOLDER_IMAGE,
        "resources": {
            "requests": {
                "cpu": format_cpu(compute.cpu * CPU_REQUEST_RATIO),
                "memory": compute.memory,
            },
            "limits": {
                "cpu": format_cpu(compute.cpu),
                "memory": compute.memory,
            },
        },
        "ports": [{"containerPort": port, "protocol": PORT_PROTOCOL} for port in network.ports],
        "env": [
            {"name": "NETWORK_BANDWIDTH", "value": network.bandwidth},
            {"name": "STORAGE_CAPACITY", "value": storage.capacity},
            {"name": "STORAGE_CLASS", "value": storage.storage_class},
        ],
    }

    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": f"{app_name}-deployment"},
        "spec": {
            "replicas": REPLICAS,
            "selector": {"matchLabels": {"app": app_name}},
            "template": {
                "metadata": {"labels": {"app": app_name}},
                "spec": {"containers": [container]},
            },
        },
    }


def render_deployment_manifest(spec: InputSpec, results: Dict[str, DecisionResult]) -> str:
    manifest = build_deployment_manifest(spec, results)
    return yaml.safe_dump(manifest, default_flow_style=False, sort_keys=False)


def manifest_path(app_name: str, output_dir: str = DEFAULT_OUTPUT_DIR) -> str:
    return os.path.join(output_dir, f"{app_name}{MANIFEST_SUFFIX}")


def write_deployment_manifest(
    spec: InputSpec,
    results: Dict[str, DecisionResult],
    output_dir: str = DEFAULT_OUTPUT_DIR,
) -> str:
    """
    Write the Deployment manifest, creating the output directory if needed.

    Args:
        spec (InputSpec): Application specification
        results (dict): Decision name -> DecisionResult
        output_dir (str): Directory for the manifest (default: k8s)

    Returns:
        str: Path of the written manifest

    Raises:
        ManifestWriteError: If the directory or file could not be written
    """
    if any(ch in spec.app_name for ch in (os.sep, "/", "\0")):
        raise ManifestWriteError(f"invalid application name for a file name: {spec.app_name!r}")

    content = render_deployment_manifest(spec, results)
    output_path = manifest_path(spec.app_name, output_dir)

    try:
        os.makedirs(output_dir, exist_ok=True)
    except OSError as e:
        raise ManifestWriteError(f"error creating {output_dir} directory: {e}") from e

    try:
        with open(output_path, "w") as f:
            f.write(content)
    except OSError as e:
        raise ManifestWriteError(f"error writing Kubernetes manifest {output_path}: {e}") from e

    return output_path


def format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    return f"{seconds:.2f}s"


def format_text_summary(
    results: Dict[str, DecisionResult],
    manifest_file: Optional[str] = None,
    warning: Optional[str] = None,
) -> str:
    """
    Format the decisions as a text report

    Args:
        results (dict): Decision name -> DecisionResult
        manifest_file (str): Path of the written manifest, if any
        warning (str): Manifest write problem to report, if any

    Returns:
        str: Formatted text report
    """
    compute = results[COMPUTE]
    network = results[NETWORK]
    storage = results[STORAGE]
    ports = ", ".join(str(port) for port in network.decision.ports)

    report: List[str] = []
    report.append("=" * 60)
    report.append("RESOURCE ALLOCATION DECISION")
    report.append("=" * 60)

    report.append("\nDECIDED RESOURCES:")
    report.append(f"  Compute: CPU={compute.decision.cpu:.2f} cores, Memory={compute.decision.memory} (took {format_duration(compute.duration)})")
    report.append(f"  Network: Bandwidth={network.decision.bandwidth}, Ports=[{ports}] (took {format_duration(network.duration)})")
    report.append(f"  Storage: Capacity={storage.decision.capacity}, Class={storage.decision.storage_class} (took {format_duration(storage.duration)})")

    if manifest_file:
        report.append("\nFILE GENERATED:")
        report.append(f"  Deployment file generated within {manifest_file}")
    if warning:
        report.append(f"\nWarning: {warning}")

    return "\n".join(report)
