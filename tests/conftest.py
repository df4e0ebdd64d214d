"""Shared fixtures for the formula_installer tests."""

import io
import tarfile
import textwrap

import pytest

from formula_installer.manifest import load_bundled, parse_manifest
from formula_installer.verifier import sha256_hex


SCRIPT_TEMPLATE = textwrap.dedent("""\
    #!/bin/sh
    case "$1" in
      --help) echo "Usage: GenerateBrewFile.sh [options]"; exit 0 ;;
      --version) echo "GenerateBrewFile.sh {version}"; exit 0 ;;
    esac
    exit 2
    """)


def make_script(version: str) -> bytes:
    return SCRIPT_TEMPLATE.format(version=version).encode()


def make_tarball(files: dict, top_level: str = "GenerateBrewFile.sh-0.1.1") -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name=f"{top_level}/{name}")
            info.size = len(content)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


class FakeTransport:
    """Serve canned bodies by URL and record requests."""

    def __init__(self, bodies=None, error=None):
        self.bodies = dict(bodies or {})
        self.error = error
        self.calls = []

    def fetch(self, url, timeout, cancel_event=None):
        self.calls.append((url, timeout))
        if self.error is not None:
            raise self.error
        return self.bodies[url]


@pytest.fixture
def brewfile_spec():
    return load_bundled("generate-brewfile")


@pytest.fixture
def release_tarball():
    return make_tarball({
        "GenerateBrewFile.sh": make_script("0.1.1"),
        "README.md": b"# GenerateBrewFile.sh\n",
    })


@pytest.fixture
def local_spec(release_tarball):
    """A formula whose 0.1.1 digest matches ``release_tarball``."""
    return parse_manifest({
        "name": "generate-brewfile",
        "desc": "Generate a comprehensive Brewfile",
        "homepage": "https://example.test/GenerateBrewFile.sh",
        "license": "MIT",
        "install": {"source": "GenerateBrewFile.sh", "destination": "generate-brewfile"},
        "test": {"usage": "Usage: GenerateBrewFile.sh"},
        "versions": [
            {
                "version": "0.1.1",
                "url": "https://example.test/v0.1.1.tar.gz",
                "sha256": sha256_hex(release_tarball),
            }
        ],
        "head": {"url": "https://example.test/GenerateBrewFile.sh.git", "branch": "main"},
    })


@pytest.fixture
def bin_dir(tmp_path):
    path = tmp_path / "bin"
    path.mkdir()
    return path
