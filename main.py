#!/usr/bin/env python3
"""web2lead - Entry point."""
import json
import logging

import click
import yaml
from colorama import Fore, Style, init

from config import app_config
from web2lead.config import LeadConfig
from web2lead.api.lead_poster import LeadPostHandler
from web2lead.mapper.heuristic import HeuristicMapper
from web2lead.mapper.mapping import available_sources
from web2lead.schema.models import FormDefinition, Operation

# Initialize colorama
init(autoreset=True)


def print_banner():
    """Print application banner."""
    print(f"{Fore.CYAN}{'=' * 44}")
    print(f"{Fore.CYAN}║   {Fore.WHITE}web2lead{Fore.CYAN}                             ║")
    print(f"{Fore.CYAN}║   {Fore.WHITE}Form submissions to Web-to-Lead{Fore.CYAN}      ║")
    print(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    print()


def load_data(path):
    """Load a JSON or YAML document."""
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(config_path):
    if config_path:
        return LeadConfig.from_file(config_path)
    return app_config.lead


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """web2lead - Post form submissions to a Web-to-Lead endpoint."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("submission", type=click.Path(exists=True))
@click.option("--config", "config_path", type=click.Path(exists=True), help="Handler settings (YAML/JSON)")
@click.option(
    "--operation",
    type=click.Choice([op.value for op in Operation]),
    default=Operation.INSERT.value,
    show_default=True,
)
def preview(submission, config_path, operation):
    """Show the payload a submission would produce, without posting."""
    with LeadPostHandler(load_config(config_path)) as handler:
        payload = handler.build_payload(operation, load_data(submission))
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@cli.command()
@click.argument("submission", type=click.Path(exists=True))
@click.option("--config", "config_path", type=click.Path(exists=True), help="Handler settings (YAML/JSON)")
@click.option("--form", "form_path", type=click.Path(exists=True), help="Form definition (YAML/JSON)")
@click.option(
    "--operation",
    type=click.Choice([op.value for op in Operation]),
    default=Operation.INSERT.value,
    show_default=True,
)
@click.option("--debug", is_flag=True, help="Echo request and response")
def post(submission, config_path, form_path, operation, debug):
    """Post a submission to the configured Web-to-Lead URL."""
    print_banner()

    config = load_config(config_path)
    if debug:
        config.debug = True

    form = FormDefinition.from_dict(load_data(form_path)) if form_path else None
    with LeadPostHandler(config) as handler:
        result = handler.post(operation, load_data(submission), form)

    if result is None:
        click.echo(f"{Fore.YELLOW}Nothing posted ({operation} event or no URL configured)")
    elif result.ok:
        click.echo(f"{Fore.GREEN}✅ Lead posted")
    else:
        click.echo(f"{Fore.RED}❌ Post failed: {result.error.message}")
        raise SystemExit(1)


@cli.command()
@click.argument("form_path", type=click.Path(exists=True))
def sources(form_path):
    """List the submission keys of a form that can be mapped."""
    form = FormDefinition.from_dict(load_data(form_path))
    for key, label in available_sources(form).items():
        click.echo(f"{key:30s} {label}")


@cli.command()
@click.argument("form_path", type=click.Path(exists=True))
def suggest_mapping(form_path):
    """Suggest a field mapping for a form."""
    form = FormDefinition.from_dict(load_data(form_path))
    mapping = HeuristicMapper().suggest(list(available_sources(form)))

    if not mapping:
        click.echo(f"{Fore.YELLOW}No suggestions")
        return

    click.echo(yaml.safe_dump({"field_mapping": mapping}, default_flow_style=False))


if __name__ == "__main__":
    cli()
