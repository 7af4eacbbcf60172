import logging
import os
import sys
from collections.abc import Callable, Iterable
from typing import Any

import click

from kube_resources.exceptions import (
    ConstructResourceError,
    InvalidDashboardJsonError,
    ResourceDeserializationError,
)
from kube_resources.grafana.dashboard import (
    build_dashboard,
    load_dashboard_document,
    unmapped_datasource_inputs,
)
from kube_resources.grafana.models import GrafanaDashboard
from kube_resources.status import ExitCodes
from kube_resources.utils import config
from kube_resources.utils.config import ConfigNotFound
from kube_resources.utils.environment import (
    KUBE_RESOURCES_CONFIG,
    KUBE_RESOURCES_LOG_LEVEL,
    init_env,
)
from kube_resources.utils.output import format_table
from kube_resources.utils.serialization import (
    json_deserialize,
    json_serialize,
    to_dict,
    yaml_deserialize,
    yaml_serialize,
)


def config_file(function: Callable) -> Callable:
    help_msg = "Path to configuration file in toml format."
    function = click.option(
        "--config",
        "configfile",
        default=os.environ.get(KUBE_RESOURCES_CONFIG),
        help=help_msg,
    )(function)
    return function


def log_level(function: Callable) -> Callable:
    function = click.option(
        "--log-level",
        help="log-level of the command. Defaults to INFO.",
        default=os.environ.get(KUBE_RESOURCES_LOG_LEVEL),
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    )(function)
    return function


def output(function: Callable) -> Callable:
    function = click.option(
        "--output",
        "-o",
        help="output type",
        default="yaml",
        type=click.Choice(["yaml", "json"]),
    )(function)
    return function


def parse_key_value(
    ctx: click.Context | None, param: Any, value: Iterable[str]
) -> dict[str, str]:
    result: dict[str, str] = {}
    name = param.name if param is not None else "value"
    for v in value or ():
        if v.count("=") != 1 or v.startswith("=") or v.endswith("="):
            logging.error(f'{name} "{v}" should be of the form "<key>=<value>"')
            sys.exit(ExitCodes.ERROR)
        k, v = v.split("=")
        result[k] = v
    return result


@click.group()
@config_file
@log_level
@click.pass_context
def root(ctx: click.Context, configfile: str | None, log_level: str | None) -> None:
    ctx.ensure_object(dict)
    try:
        init_env(log_level=log_level, config_file=configfile)
    except ConfigNotFound as e:
        logging.error(str(e))
        sys.exit(ExitCodes.ERROR)


@root.group()
def grafana() -> None:
    """Work with GrafanaDashboard resources."""


@grafana.command(short_help="Render a GrafanaDashboard manifest from dashboard JSON.")
@click.argument("dashboard_file", type=click.Path(dir_okay=False))
@click.option("--name", required=True, help="name of the GrafanaDashboard resource.")
@click.option(
    "--namespace",
    default=None,
    help="namespace of the resource. Defaults to grafana.namespace from the config.",
)
@click.option(
    "--datasource",
    "datasources",
    multiple=True,
    callback=parse_key_value,
    help="map a dashboard input to a datasource, as <input>=<datasource>.",
)
@click.option(
    "--label",
    "labels",
    multiple=True,
    callback=parse_key_value,
    help="resource label as <key>=<value>, merged over grafana.labels.",
)
@output
def render(
    dashboard_file: str,
    name: str,
    namespace: str | None,
    datasources: dict[str, str],
    labels: dict[str, str],
    output: str,
) -> None:
    try:
        with open(dashboard_file, encoding="utf-8") as f:
            dashboard_json = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logging.error(f"can not read dashboard file {dashboard_file}: {e}")
        sys.exit(ExitCodes.ERROR)

    try:
        resource = build_dashboard(
            name=name,
            dashboard=dashboard_json,
            namespace=namespace or config.get_value("grafana.namespace"),
            datasources=datasources,
            labels={**(config.get_value("grafana.labels") or {}), **labels},
        )
        unmapped = unmapped_datasource_inputs(resource.spec)
    except (ConstructResourceError, InvalidDashboardJsonError) as e:
        logging.error(str(e))
        sys.exit(ExitCodes.ERROR)

    for input_name in unmapped:
        logging.warning(
            f"dashboard input {input_name} is not mapped to a datasource, "
            f"use --datasource {input_name}=<datasource>"
        )

    if output == "json":
        click.echo(json_serialize(resource, indent=2))
    else:
        click.echo(yaml_serialize(resource), nl=False)


@grafana.command(short_help="Show the datasources and dashboard of a manifest.")
@click.argument("manifest_file", type=click.File("r", encoding="utf-8"))
@click.option(
    "--strict/--no-strict",
    default=False,
    help="reject unknown fields and duplicate keys.",
)
def inspect(manifest_file: Any, strict: bool) -> None:
    try:
        content = manifest_file.read()
    except UnicodeDecodeError as e:
        logging.error(f"can not read manifest file {manifest_file.name}: {e}")
        sys.exit(ExitCodes.ERROR)

    try:
        if content.lstrip().startswith("{"):
            resource = json_deserialize(GrafanaDashboard, content, strict=strict)
        else:
            resource = yaml_deserialize(GrafanaDashboard, content, strict=strict)
        document = load_dashboard_document(resource.spec)
    except (ResourceDeserializationError, InvalidDashboardJsonError) as e:
        logging.error(str(e))
        sys.exit(ExitCodes.ERROR)

    click.echo(f"{resource.kind} {resource.namespace or '-'}/{resource.name or '-'}")
    rows = [to_dict(ds) for ds in resource.spec.datasources or []]
    click.echo(format_table(rows, ["inputName", "datasourceName"]))
    if document is None:
        click.echo("no dashboard json")
        return
    click.echo(f"title: {document.get('title', '-')}")
    click.echo(f"uid: {document.get('uid', '-')}")
