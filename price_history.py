#!/usr/bin/env python3
"""
Price History — deduplicated, capped record of price multiplier samples
=======================================================================

A slider drag produces a stream of multipliers that differ only below
display precision. PriceHistory keeps one row per distinct 3-decimal value:

  1. round the multiplier to 3 decimals
  2. compare with the last *recorded* rounded value (not the last raw one)
     → equal: suppressed
  3. otherwise compute position, price and IL, classify the IL, assign the
     next id, and prepend; rows beyond capacity (50) are dropped oldest-first

State is explicit and owned by the instance: {last_rounded, next_id, records}.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from amm_cli.central_config import config
from amm_cli.classify import classify_il
from amm_math import compute_il, get_position


@dataclass(frozen=True)
class HistoryRecord:
    id: int
    multiplier: float
    price: float
    x: float
    y: float
    il: float
    classification: str


class PriceHistory:
    """
    Most-recent-first history of price multiplier samples.

    Ids increase monotonically for the lifetime of the recorder and are
    never reused, including after clear().
    """

    def __init__(
        self,
        capacity: int = config.policy.HISTORY_CAPACITY,
        decimals: int = config.policy.HISTORY_DECIMALS,
    ):
        self.capacity = capacity
        self.decimals = decimals
        self._last_rounded: Optional[float] = None
        self._next_id = 1
        self._records: List[HistoryRecord] = []

    @property
    def records(self) -> Tuple[HistoryRecord, ...]:
        return tuple(self._records)

    @property
    def last_rounded(self) -> Optional[float]:
        return self._last_rounded

    def __len__(self) -> int:
        return len(self._records)

    def record(
        self, price_multiplier: float, x0: float, y0: float
    ) -> Optional[HistoryRecord]:
        """
        Offer one multiplier sample.

        Returns the new HistoryRecord, or None when the sample rounds to the
        last recorded value. A sample rounding to 0 is recorded with the
        limit position (inf, 0) and IL −1.
        """
        rounded = round(price_multiplier, self.decimals)
        if rounded == self._last_rounded:
            return None

        pos = get_position(x0, y0, rounded)
        il = compute_il(rounded)
        rec = HistoryRecord(
            id=self._next_id,
            multiplier=rounded,
            price=pos.price,
            x=pos.x,
            y=pos.y,
            il=il,
            classification=classify_il(il),
        )

        self._next_id += 1
        self._last_rounded = rounded
        self._records.insert(0, rec)
        del self._records[self.capacity:]
        return rec

    def record_many(self, multipliers, x0: float, y0: float) -> List[HistoryRecord]:
        """Feed a sequence of samples; returns only the records created."""
        created = []
        for m in multipliers:
            rec = self.record(m, x0, y0)
            if rec is not None:
                created.append(rec)
        return created

    def clear(self) -> None:
        """Drop all records and forget the last recorded value."""
        self._records.clear()
        self._last_rounded = None
