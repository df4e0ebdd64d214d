"""
Load formula manifests into immutable package specs.
"""

from __future__ import annotations

import json
import logging
import re
from importlib import resources
from pathlib import Path
from typing import Dict, List, Union

from packaging import version as pkg_version

from .errors import ManifestError
from .models import HEAD, InstallMapping, PackageSpec, VersionEntry


logger = logging.getLogger(__name__)

_SHA256_RE = re.compile(r"^[0-9a-fA-F]{64}$")
_FORMULA_PACKAGE = "formula_installer.formulas"


def parse_version_entry(package: str, data: Dict) -> VersionEntry:
    """Build a pinned VersionEntry from its manifest record."""
    if not isinstance(data, dict):
        raise ManifestError(f"{package}: version entries must be objects, got {type(data).__name__}")
    try:
        ver = str(data["version"])
        url = str(data["url"])
    except KeyError as e:
        raise ManifestError(f"{package}: version entry is missing {e.args[0]!r}") from e

    if ver.lower() == HEAD:
        raise ManifestError(f"{package}: {HEAD!r} is reserved for the head entry")
    try:
        pkg_version.Version(ver)
    except pkg_version.InvalidVersion as e:
        raise ManifestError(f"{package}: invalid version {ver!r}") from e

    digest = data.get("sha256")
    if not digest:
        raise ManifestError(f"{package} {ver}: pinned versions require a sha256 digest")
    if not isinstance(digest, str) or not _SHA256_RE.match(digest):
        raise ManifestError(f"{package} {ver}: sha256 must be 64 hex digits")

    return VersionEntry(version=ver, url=url, sha256=digest.lower())


def parse_head_entry(package: str, data: Dict) -> VersionEntry:
    if not isinstance(data, dict):
        raise ManifestError(f"{package}: head entry must be an object with a 'url'")
    try:
        url = str(data["url"])
    except KeyError as e:
        raise ManifestError(f"{package}: head entry is missing 'url'") from e
    if data.get("sha256"):
        raise ManifestError(f"{package}: head entries track a branch and carry no sha256")
    return VersionEntry(version=HEAD, url=url, branch=str(data.get("branch") or "main"))


def parse_manifest(data: Dict) -> PackageSpec:
    """Validate a manifest dictionary and build its PackageSpec."""
    if not isinstance(data, dict):
        raise ManifestError("manifest root must be an object")

    name = data.get("name")
    if not name or not isinstance(name, str):
        raise ManifestError("manifest is missing a 'name' string")

    install = data.get("install") or {}
    if not isinstance(install, dict):
        raise ManifestError(f"{name}: 'install' must be an object")
    source = install.get("source")
    if not source or not isinstance(source, str):
        raise ManifestError(f"{name}: install mapping needs a 'source'")
    mapping = InstallMapping(source=source, destination=str(install.get("destination") or name))

    raw_versions = data.get("versions") or []
    if not isinstance(raw_versions, list):
        raise ManifestError(f"{name}: 'versions' must be a list")
    versions = tuple(parse_version_entry(name, entry) for entry in raw_versions)

    head = None
    if data.get("head"):
        head = parse_head_entry(name, data["head"])

    if not versions and head is None:
        raise ManifestError(f"{name}: no versions and no head entry")

    test = data.get("test") or {}
    if not isinstance(test, dict):
        raise ManifestError(f"{name}: 'test' must be an object")
    usage = str(test.get("usage") or f"Usage: {source}")

    return PackageSpec(
        name=name,
        homepage=data.get("homepage", ""),
        license=data.get("license", ""),
        description=data.get("desc", ""),
        install=mapping,
        usage_prefix=usage,
        versions=versions,
        head=head,
    )


def load_manifest(path: Union[str, Path]) -> PackageSpec:
    """Read a manifest file from disk."""
    path = Path(path)
    logger.debug("Loading formula manifest %s", path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ManifestError(f"{path}: invalid JSON ({e})") from e
    return parse_manifest(data)


def bundled_formulas() -> List[str]:
    """Names of the formulas shipped with the package."""
    names = []
    for item in resources.files(_FORMULA_PACKAGE).iterdir():
        if item.name.endswith(".json"):
            names.append(item.name[: -len(".json")])
    return sorted(names)


def load_bundled(name: str) -> PackageSpec:
    resource = resources.files(_FORMULA_PACKAGE) / f"{name}.json"
    if not resource.is_file():
        raise ManifestError(
            f"no bundled formula named {name!r} (available: {', '.join(bundled_formulas())})"
        )
    return parse_manifest(json.loads(resource.read_text(encoding="utf-8")))


def load_formula(ref: str) -> PackageSpec:
    """Resolve a formula reference: a manifest path or a bundled name."""
    candidate = Path(ref)
    if candidate.suffix == ".json" or candidate.exists():
        return load_manifest(candidate)
    return load_bundled(ref)

