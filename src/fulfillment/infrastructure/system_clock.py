"""Wall-clock implementation of the domain Clock."""

from __future__ import annotations

from datetime import datetime, timezone

from fulfillment.domain.clock import Clock


class SystemClock(Clock):

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(microsecond=0)
