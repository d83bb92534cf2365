import click

from nethermind.abigen.cli.generate import generate_command


@click.group()
def abigen_cli():
    """Command Line Interface for Nethermind ABI Wrapper Generation"""


# Adding Commands
abigen_cli.add_command(generate_command, name="generate")
