"""
Status classifier: (now, repaired intervals) -> OpenStatus.

Intervals are scanned earliest-first and the first non-closed verdict wins, so a
closed gap between lunch and dinner never hides dinner's opening-soon/open state.
"""
from datetime import datetime, timedelta
from typing import Iterable

from dining.core.constants import CONTINUOUS_SERVICE, STATUS_LOOKAHEAD
from dining.services.schedule.types import ChefStatus, NormalizedInterval, OpenStatus


def interval_status(
    now: datetime,
    interval: NormalizedInterval,
    lookahead: timedelta = STATUS_LOOKAHEAD,
) -> OpenStatus:
    """Verdict for a single interval."""
    if interval.open <= now <= interval.close:
        # 24h service is never "closing soon" near its nominal reset hour
        if interval.close - interval.open == CONTINUOUS_SERVICE:
            return OpenStatus.OPEN
        if interval.close - now < lookahead:
            return OpenStatus.CLOSING_SOON
        return OpenStatus.OPEN
    if interval.open <= now + lookahead and interval.close > now:
        return OpenStatus.OPENING_SOON
    return OpenStatus.CLOSED


def classify(
    now: datetime,
    intervals: Iterable[NormalizedInterval],
    lookahead: timedelta = STATUS_LOOKAHEAD,
) -> OpenStatus:
    """Exactly one status for a location at `now`. No intervals -> closed."""
    for interval in intervals:
        verdict = interval_status(now, interval, lookahead)
        if verdict is not OpenStatus.CLOSED:
            return verdict
    return OpenStatus.CLOSED


_CHEF_STATUS = {
    OpenStatus.OPEN: ChefStatus.HERE_NOW,
    OpenStatus.CLOSING_SOON: ChefStatus.LEAVING_SOON,
    OpenStatus.OPENING_SOON: ChefStatus.ARRIVING_SOON,
}


def chef_status(
    now: datetime,
    window: NormalizedInterval,
    lookahead: timedelta = STATUS_LOOKAHEAD,
) -> ChefStatus:
    """Relabel a chef window's OpenStatus; closed splits into arriving later vs gone."""
    status = classify(now, [window], lookahead)
    if status is OpenStatus.CLOSED:
        return ChefStatus.ARRIVING_LATER if now < window.open else ChefStatus.GONE
    return _CHEF_STATUS[status]
