# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command-line interface for moveitup.

Uploads one file to the home folder of a MOVEit cloud account.

Example:
    Upload a file:
        ```bash
        $ moveitup -u alice -p "my secret" -f "report (final).pdf"
        ```

    Credentials from the environment (or a .env file):
        ```bash
        $ export MOVEIT_USERNAME=alice MOVEIT_PASSWORD=secret
        $ moveitup -f report.pdf --verbose
        ```

    Against another server, with a settings file:
        ```bash
        $ moveitup -c moveitup.yaml --base-url https://files.example.com -f report.pdf
        ```

Exit Codes:

- 0: Upload succeeded (or help/version printed)
- 1: Missing arguments, invalid settings, or any failed upload step

Note:
    -u/-p fall back to MOVEIT_USERNAME/MOVEIT_PASSWORD. Verbose mode shows
    every request; debug mode also shows decoded JSON responses (never the
    token response).

"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

from moveitup import __version__
from moveitup.config import load_settings
from moveitup.core import upload_file
from moveitup.exceptions import ConfigError
from moveitup.logging import get_logger, set_global_logger

HELP_EPILOG = """\
Mandatory arguments:
  -u    username (or MOVEIT_USERNAME)
  -p    password (or MOVEIT_PASSWORD; use quotes in case of whitespaces)
  -f    file to upload (use quotes in case of whitespaces)
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="moveitup",
        description="Upload a file to your MOVEit cloud home folder.",
        epilog=HELP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"moveitup {__version__}",
    )
    parser.add_argument("-u", "--username", help="Account username")
    parser.add_argument("-p", "--password", help="Account password")
    parser.add_argument("-f", "--file", help="File to upload")
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="YAML settings file (base_url, timeout, user_agent, username, password)",
    )
    parser.add_argument(
        "--base-url",
        default=None,
        help="API root (default: https://mobile-1.moveitcloud.com/)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show every request and its status",
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )
    return parser


def cmd_upload(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """Handler for a moveitup run.

    Args:
        args: Parsed command-line arguments.
        parser: The parser, for printing help on missing arguments.

    Returns:
        Exit code (0 for a successful upload, 1 otherwise).

    """
    logger = get_logger(verbose=args.verbose, debug=args.debug)
    set_global_logger(logger)

    try:
        settings = load_settings(args.config, base_url=args.base_url)
    except ConfigError as err:
        logger.error(str(err))
        if args.debug:
            import traceback

            traceback.print_exc()
        return 1

    username = args.username if args.username is not None else settings.username
    password = args.password if args.password is not None else settings.password
    if username is None or password is None or args.file is None:
        logger.error("Not all mandatory arguments provided")
        parser.print_help(sys.stderr)
        return 1

    logger.debug("CONFIG", repr(settings))

    result = upload_file(username, password, args.file, settings=settings, logger=logger)
    if not result.ok:
        return 1

    print(f"[SUCCESS] Uploaded {result.file_name} to folder {result.folder_id}")
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the moveitup CLI.

    Registered as the 'moveitup' console script in pyproject.toml.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    exit_code = cmd_upload(args, parser)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
