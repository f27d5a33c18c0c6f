"""
Static media-bias and reliability lookup.

The dataset is a JSON list of {name, domain, bias, reliability, country}
records bundled with the package (or supplied through config). It is
loaded once and only read afterwards.
"""

from __future__ import annotations

from functools import lru_cache
import json
import logging
from pathlib import Path

from .core.identity import extract_domain
from .core.types import BIAS_RATINGS, BiasDirection, SourceBiasRecord

logger = logging.getLogger(__name__)

DEFAULT_DATASET = Path(__file__).parent / "data" / "media_bias.json"

_LEFT = {"far-left", "left", "center-left"}
_RIGHT = {"center-right", "right", "far-right"}


class BiasTable:
    """Read-only map from outlet domain to its bias record.

    Lookup order is exact domain, then containment in either direction
    (tolerates subdomains such as edition.cnn.com), then a case-insensitive
    match on the outlet's display name. The first hit wins.
    """

    def __init__(self, records: list[SourceBiasRecord]):
        self._records = list(records)
        self._by_domain: dict[str, SourceBiasRecord] = {}
        for record in self._records:
            self._by_domain.setdefault(record.domain.lower(), record)

    @classmethod
    def from_file(cls, path: Path | str) -> BiasTable:
        """Load a dataset file.

        Raises:
            ValueError: If a record carries a rating outside the 7-point scale
        """
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
        records = []
        for item in raw:
            if item["bias"] not in BIAS_RATINGS:
                raise ValueError(f"Unknown bias rating {item['bias']!r} for {item['domain']}")
            records.append(
                SourceBiasRecord(
                    name=item["name"],
                    domain=item["domain"],
                    bias=item["bias"],
                    reliability=int(item["reliability"]),
                    country=item.get("country", ""),
                )
            )
        logger.debug("Loaded %d bias records from %s", len(records), path)
        return cls(records)

    def lookup(self, domain_or_url: str, name: str | None = None) -> SourceBiasRecord | None:
        """Find the bias record for an outlet.

        Args:
            domain_or_url: A bare domain ("cnn.com", "www.cnn.com") or full URL
            name: Optional declared source name, used as the last resort

        Returns:
            The matching record, or None if the outlet is unknown
        """
        domain = extract_domain(domain_or_url)
        if domain:
            direct = self._by_domain.get(domain)
            if direct is not None:
                return direct
            for key, record in self._by_domain.items():
                if key in domain or domain in key:
                    return record

        if name:
            lowered = name.strip().lower()
            for record in self._records:
                if record.name.lower() == lowered:
                    return record

        return None

    def all_sources(self) -> list[SourceBiasRecord]:
        return list(self._records)

    def sources_by_bias(self, bias: str) -> list[SourceBiasRecord]:
        return [record for record in self._records if record.bias == bias]

    def __len__(self) -> int:
        return len(self._records)


@lru_cache(maxsize=None)
def load_bias_table(path: str | None = None) -> BiasTable:
    """Load and memoize a bias table; None selects the bundled dataset."""
    return BiasTable.from_file(path or DEFAULT_DATASET)


def lookup_bias(
    domain: str,
    name: str | None = None,
    table: BiasTable | None = None,
) -> dict[str, object] | None:
    """Return {"bias", "reliability"} for an outlet; table defaults to the bundled one.

    Returns:
        None when the outlet is unknown
    """
    if table is None:
        table = load_bias_table()
    record = table.lookup(domain, name)
    if record is None:
        return None
    return {"bias": record.bias, "reliability": record.reliability}


def bias_direction(bias: str | None) -> BiasDirection | None:
    """Collapse the 7-point scale to left/center/right."""
    if bias is None:
        return None
    if bias in _LEFT:
        return "left"
    if bias in _RIGHT:
        return "right"
    return "center"


def reliability_label(score: int) -> str:
    if score >= 80:
        return "Very High"
    if score >= 60:
        return "High"
    if score >= 40:
        return "Mixed"
    if score >= 20:
        return "Low"
    return "Very Low"
