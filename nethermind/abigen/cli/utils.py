import json
import logging
from logging import Logger
from typing import Any, TextIO

import click
from rich.console import Console
from rich.logging import RichHandler

from nethermind.abigen.exceptions import AbiParseError

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("abigen").getChild("cli")


def cli_logger_config(instrument_logger: Logger, level: int = logging.INFO) -> Console:
    """Routes log records of ``instrument_logger`` to a rich console on stderr"""
    rich_console = Console(stderr=True)
    instrument_logger.handlers.clear()

    instrument_logger.addHandler(RichHandler(show_path=False, console=rich_console))
    instrument_logger.setLevel(level)
    return rich_console


def group_options(*options):
    """Decorator to group multiple click options together"""

    def wrapper(function):
        for option in reversed(options):
            function = option(function)
        return function

    return wrapper


def load_abi_json(abi_file: TextIO) -> list[dict[str, Any]]:
    """
    Loads an ABI from a JSON file.  Accepts a bare ABI array, or a compiler artifact with an ``abi`` key
    (Foundry, Hardhat & Truffle artifacts)
    """
    try:
        payload = json.load(abi_file)
    except json.JSONDecodeError as e:
        raise AbiParseError(f"{abi_file.name} is not valid JSON: {e}") from e

    if isinstance(payload, dict) and "abi" in payload:
        payload = payload["abi"]

    if not isinstance(payload, list):
        raise AbiParseError(f"{abi_file.name} does not contain an ABI array")
    return payload


# -------------------------------------------------------
#    Generator Options
# -------------------------------------------------------
output_option = click.option(
    "--output",
    "-o",
    "output",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="File to write the generated module to.  If not provided, the module is printed to stdout",
)
log_level_option = click.option(
    "--log-level",
    "log_level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
    help="Verbosity of generator logs",
)
