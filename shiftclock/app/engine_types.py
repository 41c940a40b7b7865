from __future__ import annotations

from datetime import date, datetime
from typing import Union

# Anything the engine accepts where a calendar day or a wall-clock instant is expected.
DayInput = Union[str, date, datetime]
InstantInput = Union[str, date, datetime]
