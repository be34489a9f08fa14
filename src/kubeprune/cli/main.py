#!/usr/bin/env python3
"""
KUBEPRUNE CLI
-------------
Command-line surface over the CleanEngine:

    kubeprune clean [FILE] [--decode-secrets] [--diff] [--in-place]
    kubeprune resources

The registry is built from a snapshot file, an API URL (e.g. a running
`kubectl proxy`), or the current kubeconfig context, in that order.

Author: KubePrune Team
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.logging import RichHandler

from kubeprune.cli.formatter import KubeFormatter, console
from kubeprune.core.config import KubePruneConfig
from kubeprune.core.engine import CleanEngine, build_registry
from kubeprune.core.errors import KubePruneError

VERSION = "kubeprune v0.1.0"


def configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


class KubePruneCLI:
    """
    CLI wrapper that translates user commands into Engine actions.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="kubeprune",
            description="KubePrune - strip read-only and default fields from Kubernetes manifests",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.formatter = KubeFormatter()
        self._setup_args()

    def _setup_args(self):
        self.parser.add_argument("--version", action="version", version=VERSION)
        self.parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

        source = self.parser.add_mutually_exclusive_group()
        source.add_argument("--api-url", help="URL of the Kubernetes API server (e.g. a running `kubectl proxy`)")
        source.add_argument("--context", help="kubeconfig context to use")
        source.add_argument("--snapshot", help="JSON file of recorded API responses (offline mode)")

        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        clean_parser = subparsers.add_parser(
            "clean", help="Clean manifest, deleting read-only fields and fields with defaults")
        clean_parser.add_argument("filename", nargs="?", default="-",
                                  help="File containing the manifest (default: stdin)")
        clean_parser.add_argument("--decode-secrets", action="store_true",
                                  help="Write printable Secret values decoded under 'decodedData'")
        clean_parser.add_argument("--diff", action="store_true", help="Show what was pruned")
        clean_parser.add_argument("-i", "--in-place", action="store_true",
                                  help="Rewrite the file instead of printing it")

        subparsers.add_parser("resources", help="List API resources and whether a schema is attached")

    def cmd_clean(self, args: argparse.Namespace, config: KubePruneConfig) -> int:
        if args.in_place and args.filename == "-":
            console.print("[bold red]Error:[/bold red] --in-place needs a file name.")
            return 2

        engine = CleanEngine.from_source(config.source(), decode_secrets=config.decode_secrets)
        if args.filename == "-":
            report = engine.clean_text(sys.stdin.read())
        else:
            report = engine.clean_file(Path(args.filename), in_place=args.in_place)

        if args.diff:
            self.formatter.display_diff(report.original, report.content, args.filename)
        if args.in_place:
            self.formatter.print_document_table(args.filename, report.documents)
        else:
            sys.stdout.write(report.content)

        self.formatter.print_errors(report.documents)
        return 0 if report.success else 1

    def cmd_resources(self, args: argparse.Namespace, config: KubePruneConfig) -> int:
        registry = build_registry(config.source())
        self.formatter.print_resources(registry.resources())
        return 0

    def run(self, argv: Optional[List[str]] = None) -> int:
        args = self.parser.parse_args(argv)
        if not args.command:
            self.parser.print_help()
            return 0

        config = KubePruneConfig.from_args(args)
        configure_logging(config.verbose)

        try:
            if args.command == "clean":
                return self.cmd_clean(args, config)
            return self.cmd_resources(args, config)
        except (KubePruneError, OSError) as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            return 1


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(KubePruneCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
