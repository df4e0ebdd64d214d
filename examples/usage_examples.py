#!/usr/bin/env python3
"""
Example script showing how to use the formula-installer library.
"""

from pathlib import Path

from formula_installer.config import InstallerConfig
from formula_installer.manifest import load_bundled
from formula_installer.pipeline import InstallPipeline
from formula_installer.resolver import ArtifactResolver


def example_resolve_versions():
    """Example: Inspect the versions a formula records."""
    print("="*60)
    print("Example 1: Resolve Versions")
    print("="*60)

    spec = load_bundled("generate-brewfile")
    resolver = ArtifactResolver()

    for ver in resolver.available_versions(spec):
        entry = resolver.resolve(spec, ver)
        print(f"{entry.version:>6}  {entry.sha256 or '(branch ' + entry.branch + ')'}")

    print(f"\nLatest listed version: {resolver.latest(spec).version}")


def example_pinned_install():
    """Example: Install a pinned release into a private bin directory."""
    print("\n" + "="*60)
    print("Example 2: Pinned Install")
    print("="*60)

    bin_dir = Path("./output/bin")
    bin_dir.mkdir(parents=True, exist_ok=True)

    pipeline = InstallPipeline(InstallerConfig(bin_dir=bin_dir))
    result = pipeline.run(load_bundled("generate-brewfile"), "0.1.1")

    print(f"\nStatus: {result.status} (last stage: {result.stage})")
    if result.artifact is not None:
        print(f"Installed to: {result.artifact.path}")
    if result.error is not None:
        print(f"Error: {result.error}")


def example_head_install():
    """Example: Install from the branch tip, without a digest."""
    print("\n" + "="*60)
    print("Example 3: Head Install")
    print("="*60)

    bin_dir = Path("./output/bin-head")
    bin_dir.mkdir(parents=True, exist_ok=True)

    pipeline = InstallPipeline(InstallerConfig(bin_dir=bin_dir, run_smoke_test=False))
    result = pipeline.run(load_bundled("generate-brewfile"), "head")

    print(f"\nStatus: {result.status}")
    print(f"Integrity verified: {result.integrity_verified}")


if __name__ == "__main__":
    import sys

    print("Formula Installer - Example Usage")
    print("="*60)
    print("\nNOTE: The install examples require network access.")

    try:
        example_resolve_versions()
        example_pinned_install()
        example_head_install()

        print("\n" + "="*60)
        print("Examples completed.")
        print("Check the ./output directory for installed files.")
        print("="*60)

    except Exception as e:
        print(f"\nError running examples: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)
