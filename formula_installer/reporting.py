"""
Reporting and export utilities.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Dict

import pandas as pd

from .models import PackageSpec, PipelineResult


logger = logging.getLogger(__name__)


def result_to_dict(result: PipelineResult) -> Dict:
    data = {
        "package": result.package,
        "requested_version": result.requested_version,
        "status": result.status,
        "stage": result.stage,
        "integrity_verified": result.integrity_verified,
        "entry": asdict(result.entry) if result.entry else None,
        "installed_path": str(result.artifact.path) if result.artifact else None,
        "installed_at": result.artifact.installed_at if result.artifact else None,
        "test_result": asdict(result.test_result) if result.test_result else None,
        "error": None,
    }
    if result.error is not None:
        data["error"] = {
            "kind": result.error_kind,
            "message": getattr(result.error, "message", str(result.error)),
        }
    return data


def print_summary(result: PipelineResult) -> None:
    logger.info("=" * 60)
    logger.info("INSTALL RESULT")
    logger.info("=" * 60)
    logger.info("Package: %s", result.package)
    logger.info("Requested: %s", result.requested_version)
    if result.entry is not None:
        logger.info("Source: %s", result.entry.url)
    logger.info("Integrity: %s", "verified" if result.integrity_verified else "UNVERIFIED")
    if result.artifact is not None:
        logger.info("Installed: %s", result.artifact.path)
    if result.test_result is not None:
        logger.info("Smoke test: %s (%s)",
                    "passed" if result.test_result.passed else "failed",
                    result.test_result.details)
    logger.info("-" * 60)
    logger.info("Status: %s (last stage: %s)", result.status, result.stage or "none")
    logger.info("=" * 60)


def save_result_json(result: PipelineResult, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    results_file = output_dir / f"{result.package}_install.json"
    with open(results_file, 'w') as f:
        json.dump(result_to_dict(result), f, indent=2, default=str)
    return results_file


def versions_frame(spec: PackageSpec) -> pd.DataFrame:
    """Tabulate a formula's entries in listing order."""
    rows = []
    latest = spec.versions[-1] if spec.versions else None
    for entry in spec.versions + ((spec.head,) if spec.head else ()):
        rows.append({
            "package": spec.name,
            "version": entry.version,
            "url": entry.url,
            "sha256": entry.sha256,
            "branch": entry.branch,
            "latest": entry is latest,
        })
    columns = ["package", "version", "url", "sha256", "branch", "latest"]
    return pd.DataFrame(rows, columns=columns)


def export_versions_csv(spec: PackageSpec, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    versions_file = output_dir / f"{spec.name}_versions.csv"
    versions_frame(spec).to_csv(versions_file, index=False)
    return versions_file
