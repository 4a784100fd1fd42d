"""Query Opsgenie alerts and schedules and compact on-call timelines."""

from .timeline_utils import (
    Identity,
    Period,
    RotationTimeline,
    compact_periods,
    compact_rotations,
    periods_from_rotation,
    rotations_from_timeline,
    build_timeline
)
from .interval_utils import ScheduleInterval
from .alert_utils import build_alert_query
from .client import OpsgenieClient, OpsgenieError
from .config import ConfigError, Settings, load_settings

__all__ = [
    'Identity',
    'Period',
    'RotationTimeline',
    'compact_periods',
    'compact_rotations',
    'periods_from_rotation',
    'rotations_from_timeline',
    'build_timeline',
    'ScheduleInterval',
    'build_alert_query',
    'OpsgenieClient',
    'OpsgenieError',
    'ConfigError',
    'Settings',
    'load_settings'
]
