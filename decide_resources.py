#!/usr/bin/env python3
"""
AlloCAT Resource Allocation Tool - Resource Decision Script
Version: 1.0

This module turns an application specification (expected load, data size,
network traffic and importance level) into compute, network and storage
sizing decisions. Each decision is made by a small threshold rule; the three
rules are independent of each other and are run concurrently, timed, and
joined once by the aggregator.

Note: Sizing is rule based. Nothing here measures real resource usage, the
      figures are derived from the values typed into the wizard.
"""

import asyncio
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

# Importance levels offered by the wizard, in display order
IMPORTANCE_LEVELS: Tuple[str, ...] = ("high", "medium", "low")
IMPORTANCE_HIGH: str = "high"

# Compute thresholds
REQUESTS_PER_CORE: int = 150
HIGH_LOAD_THRESHOLD: int = 300  # requests/sec
HIGH_LOAD_EXTRA_CPU: float = 0.75
HIGH_IMPORTANCE_EXTRA_CPU: float = 0.25
DEFAULT_MEMORY: str = "256Mi"
HIGH_LOAD_MEMORY: str = "512Mi"
HIGH_IMPORTANCE_MEMORY: str = "1Gi"
DATA_MEMORY_THRESHOLD_MB: int = 50
DATA_MEMORY_BASE_MI: int = 256
DATA_MB_PER_MEMORY_MI: int = 4

# Network thresholds
DEFAULT_BANDWIDTH: str = "50Mbps"
HIGH_TRAFFIC_BANDWIDTH: str = "200Mbps"
HIGH_TRAFFIC_THRESHOLD: int = 25  # Mbps
BASE_PORT: int = 8080
SECURE_PORT: int = 443

# Storage thresholds
DEFAULT_CAPACITY: str = "5Gi"
HIGH_IMPORTANCE_CAPACITY: str = "20Gi"
LARGE_DATA_THRESHOLD_MB: int = 250
LARGE_DATA_BASE_GI: int = 5
DATA_MB_PER_CAPACITY_GI: int = 100
STORAGE_CLASS_STANDARD: str = "standard"
STORAGE_CLASS_PREMIUM: str = "premium"

# Decision names, also the keys of the aggregated results
COMPUTE: str = "compute"
NETWORK: str = "network"
STORAGE: str = "storage"

# Simulated work per decision, in seconds
SIMULATED_DELAYS: Dict[str, float] = {
    COMPUTE: 0.20,
    NETWORK: 0.15,
    STORAGE: 0.10,
}


@dataclass(frozen=True)
class InputSpec:
    """Application specification collected by the wizard."""

    app_name: str
    expected_load: int  # requests per second
    data_size: int  # MB
    network_traffic: int  # Mbps
    importance: str  # one of IMPORTANCE_LEVELS


@dataclass(frozen=True)
class ComputeDecision:
    cpu: float  # cores
    memory: str  # Mi or Gi


@dataclass(frozen=True)
class NetworkDecision:
    bandwidth: str
    ports: Tuple[int, ...]


@dataclass(frozen=True)
class StorageDecision:
    capacity: str  # Gi
    storage_class: str  # standard or premium


@dataclass(frozen=True)
class DecisionResult:
    """Outcome of one timed decision."""

    name: str
    decision: Any
    duration: float  # seconds
    error: Optional[BaseException] = None


class DecisionError(Exception):
    """Raised when one of the decisions fails; no partial results are kept."""

    def __init__(self, name: str, cause: BaseException):
        super().__init__(f"error in {name} decision: {cause}")
        self.name = name
        self.cause = cause


def decide_compute(spec: InputSpec) -> ComputeDecision:
    """
    Decide CPU and memory for the application.

    Args:
        spec (InputSpec): Application specification

    Returns:
        ComputeDecision: CPU cores and memory allocation
    """
    cpu = spec.expected_load / REQUESTS_PER_CORE
    memory = DEFAULT_MEMORY

    if spec.expected_load > HIGH_LOAD_THRESHOLD:
        cpu += HIGH_LOAD_EXTRA_CPU
        memory = HIGH_LOAD_MEMORY
    if spec.importance == IMPORTANCE_HIGH:
        cpu += HIGH_IMPORTANCE_EXTRA_CPU
        memory = HIGH_IMPORTANCE_MEMORY
    # Data size wins over both memory rules above
    if spec.data_size > DATA_MEMORY_THRESHOLD_MB:
        memory = f"{DATA_MEMORY_BASE_MI + spec.data_size // DATA_MB_PER_MEMORY_MI}Mi"

    return ComputeDecision(cpu=cpu, memory=memory)


def decide_network(spec: InputSpec) -> NetworkDecision:
    """
    Decide bandwidth and exposed ports for the application.

    Args:
        spec (InputSpec): Application specification

    Returns:
        NetworkDecision: Bandwidth and container ports
    """
    bandwidth = DEFAULT_BANDWIDTH
    ports = [BASE_PORT]

    if spec.network_traffic > HIGH_TRAFFIC_THRESHOLD:
        bandwidth = HIGH_TRAFFIC_BANDWIDTH
    if spec.importance == IMPORTANCE_HIGH:
        ports.append(SECURE_PORT)

    return NetworkDecision(bandwidth=bandwidth, ports=tuple(ports))


def decide_storage(spec: InputSpec) -> StorageDecision:
    """
    Decide persistent storage capacity and class for the application.

    Args:
        spec (InputSpec): Application specification

    Returns:
        StorageDecision: Capacity and storage class
    """
    capacity = DEFAULT_CAPACITY
    storage_class = STORAGE_CLASS_STANDARD

    if spec.data_size > LARGE_DATA_THRESHOLD_MB:
        capacity = f"{LARGE_DATA_BASE_GI + spec.data_size // DATA_MB_PER_CAPACITY_GI}Gi"
        storage_class = STORAGE_CLASS_PREMIUM
    # Only the capacity is forced, the class set above is kept
    if spec.importance == IMPORTANCE_HIGH:
        capacity = HIGH_IMPORTANCE_CAPACITY

    return StorageDecision(capacity=capacity, storage_class=storage_class)


DecisionRule = Callable[[InputSpec], Any]

DECISION_RULES: Dict[str, DecisionRule] = {
    COMPUTE: decide_compute,
    NETWORK: decide_network,
    STORAGE: decide_storage,
}


async def run_timed_decision(name: str, rule: DecisionRule, spec: InputSpec, delay: float) -> DecisionResult:
    """
    Run a single decision rule after its simulated delay and time it.

    Exceptions raised by the rule are captured on the result instead of
    propagating, so the other decisions still run to completion.
    """
    start_time = time.perf_counter()
    try:
        if delay > 0:
            await asyncio.sleep(delay)
        decision = rule(spec)
    except Exception as e:
        return DecisionResult(name=name, decision=None, duration=time.perf_counter() - start_time, error=e)
    return DecisionResult(name=name, decision=decision, duration=time.perf_counter() - start_time)


async def gather_timed_decisions(
    spec: InputSpec,
    rules: Optional[Dict[str, DecisionRule]] = None,
    delays: Optional[Dict[str, float]] = None,
) -> Dict[str, DecisionResult]:
    """
    Run all decision rules concurrently and join their results.

    Args:
        spec (InputSpec): Application specification
        rules (dict): Decision name -> rule function (default: DECISION_RULES)
        delays (dict): Decision name -> simulated delay in seconds
                       (default: SIMULATED_DELAYS, missing names use 0)

    Returns:
        dict: Decision name -> DecisionResult

    Raises:
        DecisionError: If any decision failed. All other results are discarded.
    """
    if rules is None:
        rules = DECISION_RULES
    if delays is None:
        delays = SIMULATED_DELAYS

    tasks = []
    for name, rule in rules.items():
        print(f"Starting {name} decision for {spec.app_name}...", file=sys.stderr)
        tasks.append(run_timed_decision(name, rule, spec, delays.get(name, 0.0)))

    results = await asyncio.gather(*tasks, return_exceptions=True)

    timed_results: Dict[str, DecisionResult] = {}
    for name, result in zip(rules, results):
        if isinstance(result, BaseException):
            raise DecisionError(name, result)
        if result.error is not None:
            raise DecisionError(result.name, result.error)
        timed_results[result.name] = result
    return timed_results


def collect_timed_decisions(
    spec: InputSpec,
    rules: Optional[Dict[str, DecisionRule]] = None,
    delays: Optional[Dict[str, float]] = None,
) -> Dict[str, DecisionResult]:
    """Blocking wrapper around gather_timed_decisions()."""
    return asyncio.run(gather_timed_decisions(spec, rules=rules, delays=delays))
