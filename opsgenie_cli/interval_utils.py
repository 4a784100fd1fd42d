"""Timeline interval parsing."""

import re
from typing import Literal

import pydantic

INTERVAL_PATTERN = re.compile(r'(\d+)(days|weeks|months)')


class ScheduleInterval(pydantic.BaseModel):
    value: int = 14
    unit: Literal['days', 'weeks', 'months'] = 'days'

    @pydantic.field_validator('value')
    @classmethod
    def validate_value(cls, v: int) -> int:
        if v <= 0:
            raise ValueError('interval value must be greater than 0')
        return v

    @classmethod
    def parse(cls, text: str) -> 'ScheduleInterval':
        """
        Parse an interval such as ``14days`` or ``2weeks``.

        Raises:
            ValueError: If the text does not match ``INTERVAL_PATTERN``
        """
        match = INTERVAL_PATTERN.fullmatch(text.strip())
        if not match:
            raise ValueError(f'value does not comply with regexp {INTERVAL_PATTERN.pattern!r}')
        return cls(value=int(match.group(1)), unit=match.group(2))

    def __str__(self) -> str:
        return f'{self.value}{self.unit}'
