"""
Scalar types shared by the generated validators.

Values keep their wire representation: numbers are not coerced from strings
and date-times stay ISO-8601 strings after validation. Date-times are UTC
with a `Z` suffix and seconds, as Strapi writes them
(`2024-05-01T10:00:00.000Z`); offsets are rejected.
"""

import re
from datetime import datetime
from typing import Annotated, Union

from pydantic import AfterValidator, StrictFloat, StrictInt

ISO_DATETIME_UTC = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z")


def _check_iso_datetime(value: str) -> str:
    if not ISO_DATETIME_UTC.fullmatch(value):
        raise ValueError("expected an ISO-8601 UTC date-time like 2024-05-01T10:00:00.000Z")
    try:
        # Calendar check on the date and time part
        datetime.fromisoformat(value[:19])
    except ValueError as e:
        raise ValueError(f"invalid ISO-8601 date-time: {e}") from e
    return value


Number = Union[StrictInt, StrictFloat]

IsoDateTime = Annotated[str, AfterValidator(_check_iso_datetime)]
