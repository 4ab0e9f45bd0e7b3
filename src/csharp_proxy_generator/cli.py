"""Command-line interface for generating C# client proxies of remote application services.

Notes:
    - The client project must be built, with its assembly metadata exported, before generating.
"""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Sequence

from csharp_proxy_generator import dotnet_types
from csharp_proxy_generator.run import GENERATE_COMMAND, REMOVE_COMMAND, CliUsageError, run

logger = logging.getLogger(__name__)


def setup_parser() -> argparse.ArgumentParser:
    """Setup for the parser.

    Returns:
        argparse.ArgumentParser: The parser after setup.
    """
    parser = argparse.ArgumentParser(description="Generate C# client proxies for the remote services of a server.")

    parser.add_argument(
        "command",
        nargs="?",
        choices=[GENERATE_COMMAND, REMOVE_COMMAND],
        default=GENERATE_COMMAND,
        help="generate the client proxies, or remove previously generated ones.",
    )

    parser.add_argument(
        "-wd",
        "--working-directory",
        dest="working_directory",
        type=str,
        default=os.getcwd(),
        help="directory of the HttpApi.Client project; defaults to the current directory.",
    )

    parser.add_argument(
        "-m",
        "--module",
        type=str,
        default=dotnet_types.DEFAULT_MODULE,
        help="name of the server module to generate proxies for.",
    )

    parser.add_argument(
        "-f",
        "--folder",
        type=str,
        default=dotnet_types.DEFAULT_FOLDER,
        help="output folder for the proxies, relative to the working directory.",
    )

    parser.add_argument(
        "-u",
        "--url",
        type=str,
        default="",
        help="root url of the running server that publishes the API description.",
    )

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the proxy generator.

    Args:
        argv (Sequence[str] | None, optional): Run arguments. Defaults to None.

    Returns:
        int: Error code.
    """
    logging.basicConfig(level=logging.INFO)

    parser = setup_parser()
    args = parser.parse_args(argv)

    logging.info("Working from directory: %s", args.working_directory)

    try:
        run(args)
    except CliUsageError as e:
        logger.error(str(e))
        return 1

    return 0
