"""Click options shared by commands that connect to a host."""

import rich_click as click

from kubeforge.models.target import DISTRIBUTION_FAMILIES, ProviderKind


def connection_options(func):
    """Add host, credential and target profile options to a command."""
    options = [
        click.option("--host", help="Remote host IP address"),
        click.option("--port", type=int, default=None, help="SSH port [default: 22]"),
        click.option("--user", help="SSH username (defaults per provider and distro)"),
        click.option("--key", "key", type=click.Path(dir_okay=False), help="Path to private key file"),
        click.option("--password", help="SSH password (if not using key)"),
        click.option(
            "--provider",
            type=click.Choice([p.value for p in ProviderKind], case_sensitive=False),
            default=None,
            help="Cloud provider [default: aws]",
        ),
        click.option(
            "--distro",
            type=click.Choice(list(DISTRIBUTION_FAMILIES), case_sensitive=False),
            default=None,
            help="Linux distribution (defaults per provider)",
        ),
        click.option(
            "--config",
            "config_file",
            type=click.Path(exists=True, dir_okay=False),
            help="YAML file with any of the options above",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func
