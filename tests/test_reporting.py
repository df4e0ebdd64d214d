import json
from datetime import datetime, timezone
from pathlib import Path

import pandas as pd

from formula_installer.errors import IntegrityMismatch
from formula_installer.models import (
    InstalledArtifact,
    PipelineResult,
    PipelineStage,
    PipelineStatus,
    TestResult,
    VersionEntry,
)
from formula_installer.reporting import export_versions_csv, result_to_dict, save_result_json


def test_reporting_exports(tmp_path: Path, brewfile_spec):
    output_dir = tmp_path / "out"
    entry = VersionEntry(version="0.1.1", url="https://example.test/v0.1.1.tar.gz", sha256="a" * 64)
    result = PipelineResult(
        package="generate-brewfile",
        requested_version="0.1.1",
        stage=PipelineStage.TESTED,
        status=PipelineStatus.SUCCESS,
        entry=entry,
        artifact=InstalledArtifact(
            path=tmp_path / "bin" / "generate-brewfile",
            entry=entry,
            installed_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        ),
        test_result=TestResult(passed=True, details="usage ok; version 0.1.1"),
        integrity_verified=True,
    )

    results_file = save_result_json(result, output_dir)
    versions_file = export_versions_csv(brewfile_spec, output_dir)

    assert results_file.exists()
    saved = json.loads(results_file.read_text())
    assert saved["status"] == "success"
    assert saved["entry"]["sha256"] == "a" * 64
    assert saved["test_result"]["passed"] is True

    versions = pd.read_csv(versions_file)
    assert list(versions["version"]) == ["0.1.0", "0.1.1", "head"]
    assert list(versions["latest"]) == [False, True, False]


def test_failed_result_carries_error_kind():
    result = PipelineResult(
        package="generate-brewfile",
        requested_version="0.1.1",
        stage=PipelineStage.FETCHED,
        error=IntegrityMismatch("https://example.test/x", "a" * 64, "b" * 64),
    )

    data = result_to_dict(result)

    assert data["status"] == "failed"
    assert data["error"]["kind"] == "IntegrityMismatch"
    assert "expected" in data["error"]["message"]
