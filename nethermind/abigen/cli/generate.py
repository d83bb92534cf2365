import logging
from pathlib import Path

import click

from nethermind.abigen.cli.utils import (
    cli_logger_config,
    group_options,
    load_abi_json,
    log_level_option,
    output_option,
)

# pylint: disable=import-outside-toplevel,raise-missing-from

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("abigen").getChild("cli")


@click.command("generate")
@click.argument("abi_json", type=click.File("r"))
@click.argument("contract_name")
@group_options(output_option, log_level_option)
def generate_command(abi_json, contract_name: str, output: str | None, log_level: str):
    """Generates a Python wrapper module for the contract described by ABI_JSON"""
    from nethermind.abigen.codegen import ContractWrapperGenerator, LoggingReporter
    from nethermind.abigen.exceptions import AbiParseError, InvalidTypeGrammar

    console = cli_logger_config(root_logger, getattr(logging, log_level.upper()))

    try:
        contract_abi = load_abi_json(abi_json)
        generator = ContractWrapperGenerator(contract_name, LoggingReporter(logger))
        source = generator.generate_from_json(contract_abi)
    except (AbiParseError, InvalidTypeGrammar) as e:
        logger.error(f"Failed to generate {contract_name}: {e}")
        raise SystemExit(1)

    if output is None:
        click.echo(source)
        return

    Path(output).write_text(source, encoding="utf-8")
    console.print(f"[green]Wrote {contract_name} wrapper to {output}")
