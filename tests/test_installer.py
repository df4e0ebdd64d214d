"""Tests for artifact installation."""

import os
import stat

import pytest

from formula_installer.errors import WriteFailed
from formula_installer.installer import Installer
from formula_installer.models import VersionEntry


CONTENT = b"#!/bin/sh\necho installed\n"


def test_install_writes_executable(bin_dir):
    artifact = Installer(bin_dir).install(CONTENT, "generate-brewfile")

    assert artifact.path == bin_dir / "generate-brewfile"
    assert artifact.path.read_bytes() == CONTENT
    assert os.access(artifact.path, os.X_OK)
    assert artifact.installed_at.tzinfo is not None


def test_install_is_idempotent(bin_dir):
    installer = Installer(bin_dir)

    first = installer.install(CONTENT, "generate-brewfile")
    first_mode = stat.S_IMODE(first.path.stat().st_mode)
    second = installer.install(CONTENT, "generate-brewfile")

    assert second.path == first.path
    assert second.path.read_bytes() == CONTENT
    assert stat.S_IMODE(second.path.stat().st_mode) == first_mode
    assert sorted(p.name for p in bin_dir.iterdir()) == ["generate-brewfile"]


def test_reinstall_overwrites_previous_version(bin_dir):
    installer = Installer(bin_dir)
    installer.install(b"old", "tool")
    entry = VersionEntry(version="2.0.0", url="u", sha256="a" * 64)

    artifact = installer.install(b"new", "tool", entry)

    assert artifact.path.read_bytes() == b"new"
    assert artifact.entry is entry


def test_missing_directory_fails(tmp_path):
    installer = Installer(tmp_path / "missing")

    with pytest.raises(WriteFailed, match="does not exist"):
        installer.install(CONTENT, "tool")


@pytest.mark.parametrize("name", ["", "..", "sub/tool"])
def test_invalid_destination_name(bin_dir, name):
    with pytest.raises(WriteFailed, match="invalid destination"):
        Installer(bin_dir).install(CONTENT, name)


@pytest.mark.skipif(os.geteuid() == 0, reason="root ignores directory permissions")
def test_unwritable_directory_keeps_previous_artifact(bin_dir):
    installer = Installer(bin_dir)
    installer.install(b"previous", "tool")
    bin_dir.chmod(0o555)
    try:
        with pytest.raises(WriteFailed):
            installer.install(b"replacement", "tool")
    finally:
        bin_dir.chmod(0o755)

    assert (bin_dir / "tool").read_bytes() == b"previous"


def test_uninstall(bin_dir):
    installer = Installer(bin_dir)
    installer.install(CONTENT, "tool")

    assert installer.uninstall("tool") is True
    assert not (bin_dir / "tool").exists()
    assert installer.uninstall("tool") is False
