"""
Compliance scoring — pure aggregation over requirement statuses.

  - Counts per status (fulfilled / partially / not fulfilled / N/A)
  - Applicable = total - N/A
  - Score = (fulfilled + 0.5 * partially) / applicable → 0-100, round half up
  - No applicable requirements → 100 (nothing left to fail)

Used by assessment stats, standard stats and the dashboard. No I/O.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from auditready.models.enums import RequirementStatus

logger = logging.getLogger(__name__)

_FULL_SCORE = 100


@dataclass(frozen=True)
class ComplianceSummary:
    fulfilled: int = 0
    partially_fulfilled: int = 0
    not_fulfilled: int = 0
    not_applicable: int = 0
    unrecognized: int = 0
    progress: int = _FULL_SCORE
    compliance_score: int = _FULL_SCORE

    @property
    def total(self) -> int:
        return self.fulfilled + self.partially_fulfilled + self.not_fulfilled + self.not_applicable

    @property
    def applicable(self) -> int:
        return self.total - self.not_applicable

    def status_counts(self) -> dict[str, int]:
        return {
            "fulfilled": self.fulfilled,
            "partially_fulfilled": self.partially_fulfilled,
            "not_fulfilled": self.not_fulfilled,
            "not_applicable": self.not_applicable,
        }


def _status_of(item: Any) -> Any:
    if isinstance(item, (RequirementStatus, str)):
        return item
    if isinstance(item, Mapping):
        return item.get("status")
    return getattr(item, "status", None)


def _coerce(raw: Any) -> RequirementStatus | None:
    if isinstance(raw, RequirementStatus):
        return raw
    try:
        return RequirementStatus(raw)
    except ValueError:
        return None


def weighted_score(fulfilled: int, partially_fulfilled: int, applicable: int) -> int:
    """Percentage of applicable requirements satisfied, partial ones at half credit.

    Computed on exact decimals: (2 * fulfilled + partially) / (2 * applicable),
    so 62.5 really is 62.5 and rounds up to 63.
    """
    if applicable <= 0:
        return _FULL_SCORE
    ratio = Decimal(2 * fulfilled + partially_fulfilled) * 100 / Decimal(2 * applicable)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def summarize(requirements: Iterable[Any]) -> ComplianceSummary:
    """Count statuses and derive progress / compliance score.

    Accepts ORM rows, dicts with a ``status`` key, or bare statuses.
    Statuses outside RequirementStatus count toward neither the numerator nor
    ``applicable`` nor ``total``; they only show up in ``unrecognized``.
    """
    counts = {status: 0 for status in RequirementStatus}
    unrecognized = 0

    for item in requirements:
        status = _coerce(_status_of(item))
        if status is None:
            unrecognized += 1
            logger.debug("Ignoring requirement with unrecognized status %r", _status_of(item))
            continue
        counts[status] += 1

    fulfilled = counts[RequirementStatus.FULFILLED]
    partial = counts[RequirementStatus.PARTIALLY_FULFILLED]
    na = counts[RequirementStatus.NOT_APPLICABLE]
    applicable = sum(counts.values()) - na

    # progress and compliance_score share one formula; kept as two fields for the UI
    score = weighted_score(fulfilled, partial, applicable)

    return ComplianceSummary(
        fulfilled=fulfilled,
        partially_fulfilled=partial,
        not_fulfilled=counts[RequirementStatus.NOT_FULFILLED],
        not_applicable=na,
        unrecognized=unrecognized,
        progress=score,
        compliance_score=score,
    )
