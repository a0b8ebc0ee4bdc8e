"""CLI entrypoint for gcp-secret-purge."""
import sys
import time
import argparse
import logging

from .confirmation import ConfirmationGate, DRY_RUN_HINT
from .validators import validate_skip_list

VERSION = "0.1.0"

# Configure logging to stderr
logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


def _set_log_level(args):
    """Raise verbosity for -v / --debug."""
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.verbose:
        logging.getLogger().setLevel(logging.INFO)


def cmd_purge(args):
    """List, partition, confirm and delete secrets."""
    from gcp_secret_purge.secrets.domains.config_loader import load_config
    from gcp_secret_purge.secrets.domains.gcp_client import GCPSecretClient
    from gcp_secret_purge.secrets.workflows.purge_operations import (
        delete_secrets,
        partition,
        render_summary,
    )

    config = load_config(
        config_path=args.config,
        skip_file=args.skip_file,
        dry_run=True if args.dry_run else None,
    )
    validate_skip_list(config.skip_list, config.skip_file)

    client = GCPSecretClient()
    secrets = client.list_secrets(config.project)
    result = partition(secrets, config.skip_list)

    print(render_summary(result, len(secrets), config.skip_file))
    if config.dry_run:
        print("DRY_RUN is enabled: nothing will actually be deleted.\n")

    if not ConfirmationGate().run():
        print(DRY_RUN_HINT)
        sys.exit(1)

    started = time.perf_counter()
    delete_secrets(client, result.to_delete, dry_run=config.dry_run)
    print(f"Done in {time.perf_counter() - started:.3f}s")
    sys.exit(0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="secret-purge",
        description="Bulk-delete secrets from GCP Secret Manager, keeping the ones listed in a skip file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0 - Deletion run completed
  1 - Confirmation declined, or runtime error (missing config, authentication, network, etc.)
  2 - Usage error (invalid arguments)

Environment variables:
  GOOGLE_APPLICATION_CREDENTIALS - Path to service account key JSON (required)
  PROJECT                        - Project to purge, as 'my-project' or 'projects/my-project' (required)
  DRY_RUN                        - Set to 'true' to only print what would be deleted
  SECRET_PURGE_CONFIG            - Optional YAML settings file (skip_file, dry_run)

Skip file:
  One secret short name per line, blank lines ignored. Defaults to ./skip.txt
        """
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"gcp-secret-purge {VERSION}"
    )
    parser.add_argument(
        "--config",
        help="YAML settings file (overrides SECRET_PURGE_CONFIG)"
    )
    parser.add_argument(
        "--skip-file",
        help="Skip list path (default: skip.txt, or 'skip_file' from the settings file)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only print what would be deleted (same as DRY_RUN=true)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show progress information on stderr"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show debug information on stderr"
    )
    return parser


def main(argv=None):
    """Main CLI entrypoint.

    Exit codes:
        0 - Deletion run completed
        1 - Confirmation declined or runtime error
        2 - Usage errors (invalid arguments)
    """
    args = build_parser().parse_args(argv)
    _set_log_level(args)

    try:
        cmd_purge(args)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.debug("Run failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
