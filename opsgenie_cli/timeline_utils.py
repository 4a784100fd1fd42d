"""Utility functions for compacting schedule timelines."""

import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any

import pydantic

log = logging.getLogger(__name__)


class Identity(pydantic.BaseModel):
    """An on-call assignee or a rotation, identified by name and id."""

    model_config = pydantic.ConfigDict(frozen=True)

    name: str = ''
    id: str = ''


class Period(pydantic.BaseModel):
    """A contiguous interval during which a single identity is on call.

    The same model is used for the raw records reported by the timeline
    endpoint and for the compacted output. ``start <= end`` is assumed
    from the upstream data and not checked here.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    start: datetime
    end: datetime
    assignee: Identity


class RotationTimeline(pydantic.BaseModel):
    rotation: Identity
    periods: list[Period]


def compact_periods(records: Sequence[Period]) -> list[Period]:
    """
    Merge consecutive periods that share the same assignee.

    Records must already be in start-time order; they are neither sorted
    nor validated. When a record has the same assignee as the last output
    period, the last period is replaced by a copy ending at the record's
    end. Otherwise the record is appended as is.

    Args:
        records: Raw period records for one rotation, in upstream order

    Returns:
        New list of periods where no two adjacent entries share an assignee
    """
    compacted: list[Period] = []

    for record in records:
        if compacted and compacted[-1].assignee == record.assignee:
            # Merge
            compacted[-1] = compacted[-1].model_copy(update={'end': record.end})
        else:
            compacted.append(record)

    log.debug('Compacted %d records into %d periods', len(records), len(compacted))
    return compacted


def compact_rotations(
    timelines: Mapping[Identity, Sequence[Period]],
    max_workers: int | None = None,
) -> dict[Identity, list[Period]]:
    """
    Compact the timeline of every rotation independently.

    Periods are never merged across rotations. The input's rotation order
    is kept so that output is stable for display.

    Args:
        timelines: Raw period records keyed by rotation
        max_workers: When set, rotations are compacted in a thread pool

    Returns:
        Compacted periods keyed by rotation
    """
    if not max_workers:
        return {rotation: compact_periods(records) for rotation, records in timelines.items()}

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = executor.map(compact_periods, timelines.values())
        return dict(zip(timelines.keys(), results))


class TimelineRecipient(pydantic.BaseModel):
    id: str | None = None
    name: str | None = None


class TimelinePeriod(pydantic.BaseModel):
    """One ``periods[]`` entry of the timeline endpoint."""

    start: datetime = pydantic.Field(alias='startDate')
    end: datetime = pydantic.Field(alias='endDate')
    recipient: TimelineRecipient | None = None

    def to_period(self) -> Period:
        # Missing recipient fields become empty strings so that such
        # records still compare like any other identity
        recipient = self.recipient or TimelineRecipient()
        return Period(
            start=self.start,
            end=self.end,
            assignee=Identity(name=recipient.name or '', id=recipient.id or ''),
        )


class TimelineRotation(pydantic.BaseModel):
    """One ``finalTimeline.rotations[]`` entry of the timeline endpoint."""

    id: str | None = None
    name: str | None = None
    periods: list[TimelinePeriod] | None = None

    @property
    def identity(self) -> Identity:
        return Identity(name=self.name or '', id=self.id or '')


def periods_from_rotation(rotation: Mapping[str, Any]) -> list[Period]:
    """
    Convert one ``finalTimeline.rotations[]`` payload entry into records.

    Raises:
        pydantic.ValidationError: If a period lacks or garbles its dates
    """
    parsed = TimelineRotation.model_validate(rotation)
    return [period.to_period() for period in parsed.periods or []]


class FinalTimeline(pydantic.BaseModel):
    rotations: list[TimelineRotation] | None = None


class TimelinePayload(pydantic.BaseModel):
    """The ``data`` object of the timeline endpoint."""

    final_timeline: FinalTimeline | None = pydantic.Field(None, alias='finalTimeline')


def rotations_from_timeline(timeline: Mapping[str, Any]) -> dict[Identity, list[Period]]:
    """
    Collect the raw records of every rotation in a timeline payload.

    Raises:
        pydantic.ValidationError: If the payload does not have the expected shape
    """
    payload = TimelinePayload.model_validate(timeline)
    final_timeline = payload.final_timeline or FinalTimeline()
    return {
        rotation.identity: [period.to_period() for period in rotation.periods or []]
        for rotation in final_timeline.rotations or []
    }


def build_timeline(timeline: Mapping[str, Any], max_workers: int | None = None) -> dict[Identity, list[Period]]:
    """
    Turn a timeline payload into compacted periods per rotation.

    Args:
        timeline: The ``data`` object returned by the timeline endpoint
        max_workers: Passed through to ``compact_rotations``

    Returns:
        Compacted periods keyed by rotation
    """
    return compact_rotations(rotations_from_timeline(timeline), max_workers=max_workers)


def to_rotation_timelines(rotations: Mapping[Identity, Sequence[Period]]) -> list[RotationTimeline]:
    return [
        RotationTimeline(rotation=rotation, periods=list(periods))
        for rotation, periods in rotations.items()
    ]
