#!/usr/bin/env python3
"""
Simple example demonstrating timeline compaction without calling the API.
The payload mirrors the ``data`` object of the schedule timeline endpoint.
"""

from opsgenie_cli import build_timeline
from opsgenie_cli.render_utils import render_timeline_json, render_timeline_text


def period(start: str, end: str, name: str, user_id: str) -> dict:
    return {
        'startDate': start,
        'endDate': end,
        'type': 'default',
        'recipient': {'type': 'user', 'name': name, 'id': user_id},
    }


def main():
    # Alice covers the weekend in two daily slices, then Bob takes over.
    # Charlie's team rotation has a single override-free week.
    timeline = {
        'finalTimeline': {
            'rotations': [
                {
                    'id': 'rot-primary',
                    'name': 'primary',
                    'periods': [
                        period('2025-11-07T17:00:00Z', '2025-11-08T17:00:00Z', 'alice@example.com', 'u-alice'),
                        period('2025-11-08T17:00:00Z', '2025-11-09T17:00:00Z', 'alice@example.com', 'u-alice'),
                        period('2025-11-09T17:00:00Z', '2025-11-14T17:00:00Z', 'bob@example.com', 'u-bob'),
                        period('2025-11-14T17:00:00Z', '2025-11-21T17:00:00Z', 'alice@example.com', 'u-alice'),
                    ],
                },
                {
                    'id': 'rot-secondary',
                    'name': 'secondary',
                    'periods': [
                        period('2025-11-07T17:00:00Z', '2025-11-14T17:00:00Z', 'charlie@example.com', 'u-charlie'),
                    ],
                },
            ],
        },
    }

    rotations = build_timeline(timeline)

    print(render_timeline_json(rotations))
    print(render_timeline_text(rotations))


if __name__ == '__main__':
    main()
