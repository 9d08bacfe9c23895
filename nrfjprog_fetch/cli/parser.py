"""
nrfjprog-fetch CLI argument parser.

This module implements the command-line interface using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from nrfjprog_fetch import __version__
from nrfjprog_fetch.cli.utils import EXIT_FAILURE

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "fetch"


class CLI:
    """nrfjprog-fetch command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="nrfjprog-fetch",
            description="Fetch the nRF5x command line tools libraries when missing",
            epilog='Use "nrfjprog-fetch COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"nrfjprog-fetch {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./nrfjprog-fetch.yaml)",
        )
        parser.add_argument(
            "--platform",
            metavar="ID",
            help="Platform identifier to fetch for (default: detected, e.g. linux)",
        )
        parser.add_argument(
            "--download-dir",
            type=Path,
            metavar="PATH",
            help="Working directory for downloads (default: <install-root>/nrfjprog)",
        )
        parser.add_argument(
            "--install-root",
            type=Path,
            metavar="PATH",
            help="Directory the binding is installed in (default: current directory)",
        )
        parser.add_argument(
            "--binding-module",
            metavar="MODULE",
            help="Python module providing get_library_version()",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )
        subparsers.add_parser(
            "fetch",
            help="Probe the library and fetch it if missing (default)",
            description="Probe the nrfjprog library and download it when missing",
        )
        subparsers.add_parser(
            "probe",
            help="Report whether the library works, without fetching",
            description="Query the nrfjprog library version and classify failures",
        )
        subparsers.add_parser(
            "show-config",
            help="Show the platform configuration that would be used",
            description="Print the resolved download and install locations",
        )

        return parser

    def run(self, argv: Optional[List[str]] = None) -> int:
        """
        Parse arguments and run the selected command.

        Args:
            argv: Argument list (default: sys.argv[1:])

        Returns:
            Exit code
        """
        args = self.parser.parse_args(argv)
        self._configure_logging(args)

        if not args.command:
            args.command = DEFAULT_COMMAND

        try:
            return self._dispatch_command(args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if args.verbose:
                import traceback

                traceback.print_exc()
            return EXIT_FAILURE

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "fetch": "nrfjprog_fetch.cli.commands.fetch",
            "probe": "nrfjprog_fetch.cli.commands.probe",
            "show-config": "nrfjprog_fetch.cli.commands.show_config",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return EXIT_FAILURE

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
