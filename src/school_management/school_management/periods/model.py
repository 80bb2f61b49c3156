from __future__ import annotations

from dataclasses import dataclass
from datetime import time


@dataclass(frozen=True)
class Period:
    period_id: int
    period_number: int
    start_time: time
    end_time: time
