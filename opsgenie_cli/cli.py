"""CLI entry point for opsgenie-cli."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Iterator

import click

from .alert_utils import build_alert_query
from .client import OpsgenieClient, OpsgenieError
from .config import ConfigError, load_settings
from .interval_utils import ScheduleInterval
from .render_utils import (
    render_alerts_text,
    render_json,
    render_rotations_text,
    render_schedules_text,
    render_timeline_json,
    render_timeline_text,
)

log = logging.getLogger(__name__)

DATE_FORMATS = ['%Y-%m-%d']

output_option = click.option(
    '--output',
    '-o',
    type=click.Choice(['text', 'json']),
    default='text',
    show_default=True,
    help='Output format.',
)


class IntervalParamType(click.ParamType):
    name = 'interval'

    def convert(self, value, param, ctx) -> ScheduleInterval:
        if isinstance(value, ScheduleInterval):
            return value
        try:
            return ScheduleInterval.parse(value)
        except ValueError as exc:
            self.fail(str(exc), param, ctx)


@contextmanager
def _client(ctx: click.Context) -> Iterator[OpsgenieClient]:
    """Build settings once and yield a client; map failures to click errors."""
    opts = ctx.find_root().obj
    try:
        settings = load_settings(config_file=opts['config'], api_key=opts['api_key'])
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    transport = opts.get('transport')
    try:
        with OpsgenieClient(settings, transport=transport) as client:
            yield client
    except OpsgenieError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option(
    '--config',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Config file (default is $HOME/.opsgenie/config.yaml, then ./config.yaml).',
)
@click.option('--api-key', default=None, help='Your Opsgenie API key (overrides OPS_APIKEY).')
@click.option('--verbose', '-v', is_flag=True, help='Log requests to stderr.')
@click.pass_context
def cli(ctx: click.Context, config: Path | None, api_key: str | None, verbose: bool) -> None:
    """A client for querying data from Opsgenie.

    The API key is read from the --api-key flag, the OPS_APIKEY environment
    variable, or the 'apikey' entry of the config file, in that order.
    """
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    ctx.ensure_object(dict)
    ctx.obj.update(config=config, api_key=api_key)


@cli.command()
@click.option('--acknowledged-by', default=None, help='Lists only the alerts acknowledged by the given user.')
@click.option('--start-date', type=click.DateTime(DATE_FORMATS), default=None,
              help='Lists only the alerts starting from that date.')
@click.option('--end-date', type=click.DateTime(DATE_FORMATS), default=None,
              help='Lists only the alerts ending at that date.')
@output_option
@click.pass_context
def alerts(ctx: click.Context, acknowledged_by, start_date, end_date, output: str) -> None:
    """Lists alerts."""
    query = build_alert_query(
        acknowledged_by=acknowledged_by,
        start_date=start_date.date() if start_date else None,
        end_date=end_date.date() if end_date else None,
    )
    log.info('Listing alerts with query %r', query)
    with _client(ctx) as client:
        result = client.list_alerts(query)
    click.echo(render_json(result) if output == 'json' else render_alerts_text(result))


@cli.group(invoke_without_command=True)
@click.option('--expand-rotations', is_flag=True, help='Also print the rotations of each schedule.')
@output_option
@click.pass_context
def schedules(ctx: click.Context, expand_rotations: bool, output: str) -> None:
    """Get all schedules."""
    if ctx.invoked_subcommand is not None:
        return
    with _client(ctx) as client:
        result = client.list_schedules(expand_rotations=expand_rotations)
    click.echo(render_json(result) if output == 'json' else render_schedules_text(result))


@schedules.command()
@click.argument('schedule_name')
@click.option('--start-date', type=click.DateTime(DATE_FORMATS), default=None,
              help='The start date of the timeline. Defaults to today.')
@click.option('--interval', type=IntervalParamType(), default='14days', show_default=True,
              help='How far the timeline reaches from start-date, e.g. 14days, 2weeks, 1months.')
@output_option
@click.pass_context
def timeline(ctx: click.Context, schedule_name: str, start_date, interval: ScheduleInterval, output: str) -> None:
    """Prints the compacted timeline for a given schedule."""
    start = start_date.date() if start_date else date.today()
    with _client(ctx) as client:
        rotations = client.get_schedule_timeline(schedule_name, start, interval)
    click.echo(render_timeline_json(rotations) if output == 'json' else render_timeline_text(rotations))


@cli.command()
@click.argument('schedule_name')
@output_option
@click.pass_context
def rotations(ctx: click.Context, schedule_name: str, output: str) -> None:
    """Prints the rotations for a given schedule."""
    with _client(ctx) as client:
        result = client.list_rotations(schedule_name)
    click.echo(render_json(result) if output == 'json' else render_rotations_text(result))


def main() -> None:
    cli(obj={})
