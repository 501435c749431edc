"""Top malicious domain ranking."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence

from maiscam.detections.schema import CanonicalDetection, RiskBucket
from maiscam.reports.models import DomainRank

DEFAULT_TOP_DOMAINS = 10

_SEVERITY = {RiskBucket.LOW: 0, RiskBucket.MEDIUM: 1, RiskBucket.HIGH: 2}


@dataclass
class _DomainTally:
    count: int
    bucket: RiskBucket
    risk_label: str


def rank_domains(
    detections: Sequence[CanonicalDetection],
    limit: int = DEFAULT_TOP_DOMAINS,
) -> List[DomainRank]:
    """Rank domains by detection count, keeping the most severe risk label seen.

    Detections without a domain are ignored. Within a domain, a label is only
    replaced by one from a strictly more severe bucket, so the first label seen
    at the top severity is the one reported. Ties on count keep first-seen order.
    """

    tallies: Dict[str, _DomainTally] = {}
    for detection in detections:
        if not detection.domain:
            continue
        tally = tallies.get(detection.domain)
        if tally is None:
            tallies[detection.domain] = _DomainTally(
                count=1,
                bucket=detection.risk_bucket,
                risk_label=detection.risk_level,
            )
            continue
        tally.count += 1
        if _SEVERITY[detection.risk_bucket] > _SEVERITY[tally.bucket]:
            tally.bucket = detection.risk_bucket
            tally.risk_label = detection.risk_level

    ranked = sorted(tallies.items(), key=lambda item: item[1].count, reverse=True)
    return [
        DomainRank(domain=domain, count=tally.count, risk_level=tally.risk_label)
        for domain, tally in ranked[:limit]
    ]


__all__ = ["rank_domains", "DEFAULT_TOP_DOMAINS"]
