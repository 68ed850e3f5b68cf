#!/usr/bin/env python3
"""
Mediumroast Reports CLI

Generates the markdown reports kept in a Mediumroast repository and the
standalone Word reports for single companies and interactions.

Usage:
    mrreport list companies                     # Tabulate repository objects
    mrreport report actions                     # Regenerate and sync markdown reports
    mrreport --local ./repo report actions      # Same, against a local checkout
    mrreport report company --name "Acme Inc"   # Standalone company report
    mrreport report interaction --name X --package
    mrreport branches prune --max 15            # Remove old timestamp branches
    mrreport config show                        # Show configuration
"""

import argparse
import sys

from tabulate import tabulate

from mrreports.core.exceptions import MediumroastError
from mrreports.maintenance.branches import prune_branches
from mrreports.reports.packaging import (
    build_package,
    company_standalone,
    default_report_path,
    interaction_standalone,
    render_standalone,
)
from mrreports.reports.pipeline import load_inputs, publish_reports
from mrreports.storage.github_store import GitHubStore
from mrreports.storage.local_store import LocalDirectoryStore
from mrreports.storage.s3_downloads import InteractionDownloader, bucket_name
from mrreports.utils.config import get_config
from mrreports.utils.logger import get_logger, setup_logging

logger = get_logger("mrreports.cli")


class MediumroastCLI:
    """CLI for Mediumroast report generation."""

    def __init__(self, local_dir=None):
        """
        Initialize CLI.

        Args:
            local_dir: Read objects from and write reports to this directory
                instead of the GitHub repository.
        """
        self.config = get_config()
        self.settings = self.config.settings
        self.local_dir = local_dir
        self._github = None
        self._local = None

    @property
    def github(self) -> GitHubStore:
        if self._github is None:
            self._github = GitHubStore(self.settings.github, self.config.github_token)
        return self._github

    @property
    def store(self):
        if not self.local_dir:
            return self.github
        if self._local is None:
            self._local = LocalDirectoryStore(self.local_dir)
        return self._local

    def close(self):
        if self._github is not None:
            self._github.close()

    def cmd_list(self, args):
        """Tabulate companies, interactions or studies."""
        inputs = load_inputs(self.store)

        if args.object_type == "companies":
            headers = ["Name", "Role", "Region", "Industry", "Interactions"]
            rows = [
                [c.name, c.role, c.region, c.industry, c.total_interactions]
                for c in inputs.companies
            ]
        elif args.object_type == "interactions":
            headers = ["Name", "Type", "Date", "Reading Time", "Companies"]
            rows = [
                [i.name, i.interaction_type, i.date, i.reading_time, ", ".join(i.linked_companies)]
                for i in inputs.interactions
            ]
        else:
            headers = ["Name", "Project", "Companies", "Caffeinated"]
            rows = [
                [s.name, s.project, s.total_companies, "Yes" if s.is_caffeinated else "No"]
                for s in inputs.studies
            ]

        if args.name:
            rows = [row for row in rows if row[0] == args.name]

        if not rows:
            print(f"\nNo {args.object_type} found.\n")
            return
        print()
        print(tabulate(rows, headers=headers, tablefmt="simple", missingval="Unknown"))
        print(f"\nTotal: {len(rows)}\n")

    def cmd_report(self, args):
        """Report generation."""
        if args.kind == "actions":
            self._report_actions()
        else:
            self._report_standalone(args)

    def _report_actions(self):
        activity = None if self.local_dir else self.github
        inputs = load_inputs(self.store, activity=activity)

        result = publish_reports(inputs, self.store, self.settings.reports, self.settings.sync)
        if result is None:
            print("\nNo companies in the repository, nothing to report.\n")
            return

        print("\n" + "=" * 70)
        print(f"Reports written: {len(result.written)}")
        print(f"Reports deleted: {len(result.deleted)}")
        print(f"Conflicts:       {len(result.conflicts)}")
        print(f"Failed:          {len(result.failed)}")
        print("=" * 70 + "\n")
        result.raise_for_failures()

    def _report_standalone(self, args):
        if not args.name:
            raise MediumroastError(
                f"--name is required for {args.kind} reports", {"operation": "report"}
            )

        inputs = load_inputs(self.store)
        reports = self.settings.reports
        if args.kind == "company":
            report = company_standalone(args.name, inputs, reports, package=args.package)
        else:
            report = interaction_standalone(args.name, inputs, reports, package=args.package)

        if args.package:
            bucket = self.settings.s3.source_bucket or bucket_name(self.settings.github.owner or "")
            downloader = InteractionDownloader(self.settings.s3, bucket, self.config.s3_credentials)
            output_dir = args.output or self.config.output_dir
            path = build_package(report, args.name, downloader, self.config.work_dir, output_dir)
        else:
            path = render_standalone(
                report, default_report_path(args.name, self.config.output_dir, args.output)
            )
        print(f"\nSaved {args.kind} report to {path}\n")

    def cmd_branches(self, args):
        """Branch maintenance."""
        max_branches = args.max if args.max is not None else self.settings.branches.max_branches
        result = prune_branches(self.github, max_branches)

        rows = [[name, "deleted"] for name in result.deleted]
        rows += [[name, f"failed: {error}"] for name, error in result.failed.items()]
        if rows:
            print()
            print(tabulate(rows, headers=["Branch", "Result"], tablefmt="simple"))
        print(f"\nKept {len(result.kept)} timestamp branches, deleted {len(result.deleted)}.\n")

    def cmd_config(self, args):
        """Configuration operations."""
        if args.action == "show":
            print(f"\nEnvironment: {self.config.environment.value}")
            print("\nGitHub Config:")
            for key, value in self.config.get_github_config().items():
                print(f"  {key}: {value}")
            print("\nReport Config:")
            for key, value in self.config.get_report_config().items():
                print(f"  {key}: {value}")
            print()

        elif args.action == "validate":
            errors = self.config.validate()
            if errors:
                print("\nConfiguration errors:")
                for error in errors:
                    print(f"  - {error}")
                print()
                raise MediumroastError("Configuration is invalid", {"errors": len(errors)})
            print("\nConfiguration is valid.\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Mediumroast Reports CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--local", metavar="DIR", help="Use a local repository checkout instead of GitHub")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # List command
    list_parser = subparsers.add_parser("list", help="List repository objects")
    list_parser.add_argument("object_type", choices=["companies", "interactions", "studies"])
    list_parser.add_argument("--name", type=str, help="Only show the object with this name")

    # Report command
    report_parser = subparsers.add_parser("report", help="Generate reports")
    report_parser.add_argument("kind", choices=["actions", "company", "interaction"])
    report_parser.add_argument("--name", type=str, help="Company or interaction name")
    report_parser.add_argument("--package", action="store_true", help="Bundle the report and its documents in a ZIP")
    report_parser.add_argument("--output", type=str, help="Output file (or directory with --package)")

    # Branches command
    branches_parser = subparsers.add_parser("branches", help="Branch maintenance")
    branches_parser.add_argument("action", choices=["prune"])
    branches_parser.add_argument("--max", type=int, help="Timestamp branches to keep (default: branches.max_branches)")

    # Config command
    config_parser = subparsers.add_parser("config", help="Configuration operations")
    config_parser.add_argument("action", choices=["show", "validate"])

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging()

    cli = MediumroastCLI(local_dir=args.local)
    try:
        if args.command == "list":
            cli.cmd_list(args)
        elif args.command == "report":
            cli.cmd_report(args)
        elif args.command == "branches":
            cli.cmd_branches(args)
        elif args.command == "config":
            cli.cmd_config(args)

        return 0

    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user\n")
        return 130
    except MediumroastError as e:
        logger.error(f"Command failed: {e}")
        print(f"\nError: {e}\n")
        return 1
    finally:
        cli.close()


if __name__ == "__main__":
    sys.exit(main())
