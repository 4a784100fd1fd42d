"""Utility functions for rendering API results to the terminal."""

import json
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from .timeline_utils import Identity, Period, to_rotation_timelines

TIME_FORMAT = '%a %b %d, %I:%M %p'


def format_duration(start: datetime, end: datetime) -> str:
    """Format a period length in hours below a day, in days otherwise."""
    hours = (end - start).total_seconds() / 3600
    if hours < 24:
        return f'{hours:.1f} hours'
    return f'{hours / 24:.1f} days'


def format_identity(identity: Identity) -> str:
    return identity.name or identity.id or '<unknown>'


def render_timeline_json(rotations: Mapping[Identity, Sequence[Period]]) -> str:
    output = [timeline.model_dump(mode='json') for timeline in to_rotation_timelines(rotations)]
    return json.dumps(output, indent=2)


def render_timeline_text(rotations: Mapping[Identity, Sequence[Period]]) -> str:
    """
    Render compacted periods grouped by rotation.

    Each rotation gets a header line followed by one line per period:
    ``assignee | start → end (duration)``.
    """
    if not rotations:
        return 'No rotations found.'

    lines = []
    for rotation, periods in rotations.items():
        if rotation.name:
            lines.append(f'{rotation.name} ({rotation.id})')
        else:
            lines.append(format_identity(rotation))
        if not periods:
            lines.append('  (no periods)')
        for period in periods:
            start_str = period.start.strftime(TIME_FORMAT)
            end_str = period.end.strftime(TIME_FORMAT)
            duration_str = format_duration(period.start, period.end)
            lines.append(f'  {format_identity(period.assignee):12} | {start_str} → {end_str} ({duration_str})')
    return '\n'.join(lines)


def render_alerts_text(alerts: Sequence[Mapping[str, Any]]) -> str:
    if not alerts:
        return 'No alerts found.'
    lines = []
    for alert in alerts:
        status = alert.get('status', '')
        if alert.get('acknowledged'):
            status += ', acked'
        lines.append(f"{alert.get('tinyId', ''):>6} | {alert.get('createdAt', '')} | {status} | {alert.get('message', '')}")
    return '\n'.join(lines)


def render_schedules_text(schedules: Sequence[Mapping[str, Any]]) -> str:
    if not schedules:
        return 'No schedules found.'
    lines = []
    for schedule in schedules:
        state = 'enabled' if schedule.get('enabled', True) else 'disabled'
        lines.append(f"{schedule.get('name', '')} ({schedule.get('id', '')}) [{schedule.get('timezone', '')}, {state}]")
        for rotation in schedule.get('rotations') or []:
            lines.append(f'  - {render_rotation_line(rotation)}')
    return '\n'.join(lines)


def render_rotations_text(rotations: Sequence[Mapping[str, Any]]) -> str:
    if not rotations:
        return 'No rotations found.'
    return '\n'.join(render_rotation_line(rotation) for rotation in rotations)


def render_rotation_line(rotation: Mapping[str, Any]) -> str:
    participants = ', '.join(
        p.get('username') or p.get('name') or p.get('id', '')
        for p in rotation.get('participants') or []
    )
    return (
        f"{rotation.get('name', '')} ({rotation.get('id', '')}) "
        f"{rotation.get('type', '')} every {rotation.get('length', '')} "
        f"from {rotation.get('startDate', '')}: {participants}"
    )


def render_json(data: Any) -> str:
    return json.dumps(data, indent=2, default=str)
