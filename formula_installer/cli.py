"""
Command-line interface for the formula installer.
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import DEFAULT_BIN_DIR, DEFAULT_TIMEOUT, InstallerConfig
from .errors import InstallerError
from .manifest import bundled_formulas, load_formula
from .models import HEAD
from .pipeline import InstallPipeline
from .reporting import export_versions_csv, print_summary, save_result_json


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="formula-installer",
        description="Install a pinned, checksum-verified script from a formula manifest"
    )

    parser.add_argument(
        "formula",
        nargs="?",
        default="generate-brewfile",
        help="Bundled formula name or path to a manifest JSON file. Default: generate-brewfile"
    )

    selection = parser.add_mutually_exclusive_group()
    selection.add_argument(
        "--version",
        dest="requested_version",
        default=None,
        help="Version to install. Default: latest listed version"
    )
    selection.add_argument(
        "--head",
        action="store_true",
        help="Install the tip of the formula's branch (integrity is not verified)"
    )

    parser.add_argument(
        "--bin-dir",
        type=Path,
        default=DEFAULT_BIN_DIR,
        help=f"Directory to install into. Default: {DEFAULT_BIN_DIR}"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Network timeout in seconds. Default: {DEFAULT_TIMEOUT:g}"
    )

    parser.add_argument(
        "--skip-test",
        action="store_true",
        help="Do not run the post-install smoke test"
    )

    parser.add_argument(
        "--uninstall",
        action="store_true",
        help="Remove the formula's installed file instead of installing"
    )

    parser.add_argument(
        "--list-versions",
        action="store_true",
        help="List the formula's known versions and exit"
    )

    parser.add_argument(
        "--list-formulas",
        action="store_true",
        help="List bundled formulas and exit"
    )

    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the download progress bar"
    )

    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Write a JSON install report (or the version table, with --list-versions) to this directory"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    return parser


def main(argv=None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_formulas:
        for name in bundled_formulas():
            print(name)
        return 0

    try:
        spec = load_formula(args.formula)
        config = InstallerConfig(
            bin_dir=args.bin_dir,
            timeout=args.timeout,
            show_progress=not args.no_progress,
            run_smoke_test=not args.skip_test,
        )
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    pipeline = InstallPipeline(config)

    if args.list_versions:
        latest = pipeline.resolver.latest(spec).version if spec.versions else None
        for ver in pipeline.resolver.available_versions(spec):
            marker = " (latest)" if ver == latest else ""
            print(f"{ver}{marker}")
        if args.output_dir is not None:
            versions_file = export_versions_csv(spec, args.output_dir)
            logger.info("Version table saved to: %s", versions_file)
        return 0

    if args.uninstall:
        try:
            pipeline.uninstall(spec)
        except InstallerError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        return 0

    if args.head:
        requested = HEAD
    elif args.requested_version:
        requested = args.requested_version
    else:
        try:
            requested = pipeline.resolver.latest(spec).version
        except InstallerError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        logger.info("No version requested; using latest listed version %s", requested)

    result = pipeline.run(spec, requested)
    print_summary(result)

    if args.output_dir is not None:
        report = save_result_json(result, args.output_dir)
        logger.info("Result saved to: %s", report)

    if not result.succeeded:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
