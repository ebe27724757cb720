"""
Main entry point for Unlocker Store.

This module provides the command-line interface: run the fetch-and-store
pipeline, validate the environment, or show the resolved configuration.
"""

import argparse
import asyncio
import json
import sys
from typing import Optional

import structlog
from pydantic import ValidationError

from ..config.config_loader import (
    describe_configuration,
    find_configuration_issues,
    resolve_configuration,
)
from ..config.settings import Settings, reload_settings
from ..exceptions import ConfigurationError
from ..logging_setup import configure_logging
from ..models.pipeline import Configuration, DataFormat
from .pipeline_agent import UnlockerStoreAgent

logger = structlog.get_logger(__name__)


class UnlockerStoreCLI:
    """
    Command-line interface for Unlocker Store.
    """

    def __init__(self):
        """Initialize the CLI."""
        self.settings: Optional[Settings] = None
        self.config: Optional[Configuration] = None

    async def run(self, args: Optional[list] = None) -> int:
        """
        Run the CLI with the given arguments.

        Args:
            args: Command line arguments (uses sys.argv if None)

        Returns:
            int: Exit code
        """
        parser = self._create_parser()
        parsed_args = parser.parse_args(args)
        command = parsed_args.command or "run"

        try:
            self.settings = reload_settings()
        except ValidationError as e:
            print(f"❌ Invalid environment settings: {e}", file=sys.stderr)
            return 1

        configure_logging(
            "DEBUG" if parsed_args.verbose else self.settings.logging.log_level,
            self.settings.logging.log_format,
        )

        try:
            self.config = resolve_configuration(
                self.settings,
                overrides={
                    "target_url": parsed_args.url,
                    "bucket": parsed_args.bucket,
                    "format": parsed_args.format,
                },
            )

            if command == "run":
                return await self._execute_run(parsed_args)
            elif command == "validate":
                return self._execute_validate()
            elif command == "info":
                return self._execute_info(parsed_args)
            else:
                logger.error("Unknown command", command=command)
                return 1

        except ConfigurationError as e:
            logger.error("Configuration error", error=str(e))
            print(f"❌ Configuration error: {e}", file=sys.stderr)
            return 1
        except Exception as e:
            logger.error("CLI execution failed", error=str(e), exc_info=True)
            return 1

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create command line argument parser."""
        parser = argparse.ArgumentParser(
            prog="unlocker-store",
            description="Fetch a page through Bright Data Web Unlocker and store it in S3",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Fetch the configured target and upload it
  unlocker-store run

  # Fetch another page into another bucket
  unlocker-store --url https://example.com --bucket my-bucket run

  # Dry run without S3
  unlocker-store --mock-storage run

  # Check the environment
  unlocker-store validate
            """,
        )

        # Global options
        parser.add_argument("--url", help="Target URL (default: BRIGHT_DATA_TARGET_URL)")
        parser.add_argument("--bucket", help="S3 bucket (default: AWS_S3_BUCKET)")
        parser.add_argument(
            "--format",
            choices=[f.value for f in DataFormat],
            help="Response format requested from the unlocker",
        )
        parser.add_argument(
            "--mock-storage",
            action="store_true",
            help="Keep the payload in memory instead of uploading it",
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose logging"
        )

        # Subcommands
        subparsers = parser.add_subparsers(dest="command", help="Available commands")

        subparsers.add_parser("run", help="Fetch the target and upload it (default)")
        subparsers.add_parser("validate", help="Check the configuration")

        info_parser = subparsers.add_parser("info", help="Show the configuration")
        info_parser.add_argument(
            "--json", action="store_true", help="Print as JSON"
        )

        return parser

    async def _execute_run(self, args: argparse.Namespace) -> int:
        """Execute the pipeline and print the summary."""
        try:
            agent = UnlockerStoreAgent(
                self.config,
                mock_storage=args.mock_storage or self.settings.storage_mock_mode,
            )
        except Exception as e:
            logger.error("Failed to create clients", error=str(e), exc_info=True)
            print(f"❌ Process failed during setup: {type(e).__name__}: {e}")
            return 1

        print(f"🔄 Fetching {self.config.target_url} through Bright Data Unlocker...")
        result = await agent.execute()

        if not result.succeeded:
            print(
                f"❌ Process failed during {result.stage.value}: "
                f"{result.error_type}: {result.error_message}"
            )
            return 1

        print(f"🔗 S3 Location: {result.upload.location_url}")
        print("\n📊 Summary:")
        print(f"   Target URL: {result.target_url}")
        print(f"   S3 Bucket: {result.bucket}")
        print(f"   S3 Key: {result.upload.object_key}")
        print(f"   Data Size: {result.payload_size} characters")
        print("\n🎉 Process completed successfully!")

        return 0

    def _execute_validate(self) -> int:
        """Execute validate command."""
        issues = find_configuration_issues(self.config)

        if not issues:
            print("✅ Configuration is valid")
            print(f"   Target URL: {self.config.target_url}")
            print(f"   Zone: {self.config.zone}")
            print(f"   Bucket: {self.config.bucket} ({self.config.region})")
            return 0

        print("❌ Configuration is invalid")
        for issue in issues:
            print(f"   - {issue}")
        return 1

    def _execute_info(self, args: argparse.Namespace) -> int:
        """Execute info command."""
        info = describe_configuration(self.config)

        if args.json:
            print(json.dumps(info, indent=2))
        else:
            width = max(len(name) for name in info)
            for name, value in info.items():
                print(f"{name:<{width}} : {value}")

        return 0


def main():
    """Main entry point."""
    cli = UnlockerStoreCLI()
    exit_code = asyncio.run(cli.run())
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
