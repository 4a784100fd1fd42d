"""Utility functions for building alert search queries."""

from datetime import date

# Opsgenie expects day-month-year in createdAt filters
QUERY_DATE_FORMAT = '%d-%m-%Y'


def build_alert_query(
    acknowledged_by: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> str:
    """
    Build the search query used when listing alerts.

    Args:
        acknowledged_by: Only alerts acknowledged by this user
        start_date: Only alerts created from this date
        end_date: Only alerts created up to this date

    Returns:
        Filters joined with ``AND``, or an empty string when none are set
    """
    elements = []
    if acknowledged_by:
        elements.append(f'acknowledgedBy:{acknowledged_by}')
    if start_date:
        elements.append(f'createdAt:{start_date.strftime(QUERY_DATE_FORMAT)}')
    if end_date:
        elements.append(f'createdAt:{end_date.strftime(QUERY_DATE_FORMAT)}')
    return ' AND '.join(elements)
