"""HTTP client for the Opsgenie REST API."""

import logging
from datetime import date, datetime, time, timezone
from typing import Any
from urllib.parse import quote

import httpx
import pydantic

from .config import Settings
from .interval_utils import ScheduleInterval
from .timeline_utils import Identity, Period, build_timeline

log = logging.getLogger(__name__)


class OpsgenieError(Exception):
    """Raised when a request to Opsgenie fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class OpsgenieClient:
    """
    Thin wrapper around the alert and schedule endpoints.

    The client is built from an explicit ``Settings`` object. Pass
    ``transport`` to route requests somewhere other than the network,
    e.g. an ``httpx.MockTransport`` in tests.
    """

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None):
        self.settings = settings
        self._http = httpx.Client(
            base_url=settings.api_url,
            headers={'Authorization': f'GenieKey {settings.api_key}'},
            timeout=settings.timeout,
            transport=transport,
        )

    def __enter__(self) -> 'OpsgenieClient':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        log.debug('GET %s params=%s', path, params)
        try:
            resp = self._http.get(path, params=params)
        except httpx.HTTPError as exc:
            raise OpsgenieError(f'request to {path} failed: {exc}') from exc

        if resp.is_error:
            raise OpsgenieError(
                f'request to {path} failed with status {resp.status_code}: {_error_message(resp)}',
                status_code=resp.status_code,
            )

        try:
            body = resp.json()
        except ValueError as exc:
            raise OpsgenieError(f'invalid JSON from {path}', status_code=resp.status_code) from exc
        if not isinstance(body, dict):
            raise OpsgenieError(f'unexpected response body from {path}', status_code=resp.status_code)
        log.info('GET %s -> %d', path, resp.status_code)
        return body.get('data')

    def list_alerts(self, query: str = '') -> list[dict[str, Any]]:
        """List alerts sorted by creation time, filtered by ``query``."""
        params = {'sort': 'createdAt'}
        if query:
            params['query'] = query
        return self._get('/v2/alerts', params=params) or []

    def list_schedules(self, expand_rotations: bool = False) -> list[dict[str, Any]]:
        params = {'expand': 'rotation'} if expand_rotations else None
        return self._get('/v2/schedules', params=params) or []

    def list_rotations(self, schedule_name: str) -> list[dict[str, Any]]:
        return self._get(
            f'/v2/schedules/{_segment(schedule_name)}/rotations',
            params={'scheduleIdentifierType': 'name'},
        ) or []

    def get_timeline(
        self,
        schedule_name: str,
        start_date: date,
        interval: ScheduleInterval | None = None,
    ) -> dict[str, Any]:
        """
        Fetch the raw timeline of a schedule.

        Args:
            schedule_name: Name of the schedule
            start_date: Day the timeline starts at (midnight UTC)
            interval: How far the timeline reaches, 14 days by default

        Returns:
            The ``data`` object of the response
        """
        interval = interval or ScheduleInterval()
        start = datetime.combine(start_date, time.min, tzinfo=timezone.utc)
        return self._get(
            f'/v2/schedules/{_segment(schedule_name)}/timeline',
            params={
                'identifierType': 'name',
                'interval': interval.value,
                'intervalUnit': interval.unit,
                'date': start.isoformat(),
            },
        ) or {}

    def get_schedule_timeline(
        self,
        schedule_name: str,
        start_date: date,
        interval: ScheduleInterval | None = None,
    ) -> dict[Identity, list[Period]]:
        """Fetch a schedule timeline and compact each rotation's periods."""
        timeline = self.get_timeline(schedule_name, start_date, interval)
        try:
            return build_timeline(timeline)
        except pydantic.ValidationError as exc:
            raise OpsgenieError(f'unexpected timeline payload for schedule {schedule_name!r}: {exc}') from exc


def _segment(name: str) -> str:
    # Schedule names go into a single path segment
    return quote(name, safe='')


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text
    if isinstance(body, dict) and body.get('message'):
        return str(body['message'])
    return resp.text
