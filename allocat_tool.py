#!/usr/bin/env python3
# =============================================================================
# AlloCAT Resource Allocation Tool (Unified Script)
# =============================================================================
#
# This script asks for an application's specification, decides its compute,
# network and storage resources, writes a Kubernetes Deployment manifest and
# prints a summary of the decisions.
#
# Usage:
#   python allocat_tool.py
#
# Exit codes: 0 on success, 1 when a decision fails, 130 when aborted.
# =============================================================================

import argparse
import asyncio
import sys
from typing import Dict, List, Optional

from collect_specs import red, run_wizard, spin
from decide_resources import DecisionError, DecisionResult, InputSpec, gather_timed_decisions
from generate_manifest import DEFAULT_OUTPUT_DIR, ManifestWriteError, format_text_summary, write_deployment_manifest

EXIT_OK = 0
EXIT_DECISION_ERROR = 1
EXIT_ABORTED = 130


# ===============================
# Processing
# ===============================
async def process_resource_allocation(spec: InputSpec) -> Dict[str, DecisionResult]:
    spinner = asyncio.create_task(spin(f"Processing resource allocation for {spec.app_name}..."))
    try:
        return await gather_timed_decisions(spec)
    finally:
        spinner.cancel()
        try:
            await spinner
        except asyncio.CancelledError:
            pass


def report_allocation(spec: InputSpec, results: Dict[str, DecisionResult], output_dir: str = DEFAULT_OUTPUT_DIR) -> str:
    """
    Write the manifest and build the summary shown to the user.

    A failed write is reported as a warning inside the summary.
    """
    manifest_file = None
    warning = None
    try:
        manifest_file = write_deployment_manifest(spec, results, output_dir)
    except ManifestWriteError as e:
        warning = f"failed to generate/write manifest: {e}"
    return format_text_summary(results, manifest_file=manifest_file, warning=warning)


# ===============================
# Main CLI
# ===============================
def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="AlloCAT Resource Allocation Tool: decide compute, network and storage "
                    "resources for an application and generate a Kubernetes Deployment manifest",
    )
    parser.parse_args(argv)

    try:
        spec = run_wizard()
    except (KeyboardInterrupt, EOFError):
        print("\nExiting...")
        return EXIT_ABORTED

    try:
        results = asyncio.run(process_resource_allocation(spec))
    except DecisionError as e:
        print(red(f"Error: {e}"), file=sys.stderr)
        return EXIT_DECISION_ERROR
    except KeyboardInterrupt:
        print("\nExiting...")
        return EXIT_ABORTED

    print(report_allocation(spec, results))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
