# cpu_catalog.py — read-only queries over the CPU catalog
from typing import Any, Dict, List, Optional, Sequence
import logging
import math
import re
import unicodedata

from cpu_data import CPU, get_all_cpus

logger = logging.getLogger("CPU-Catalog")

# public sort key -> CPU field
SORT_KEYS = {
    "name": "name",
    "year": "year",
    "openspeed": "open_speed",
    "open_speed": "open_speed",
    "price": "price",
}


class CatalogQueryError(ValueError):
    """Raised when a catalog query gets arguments it cannot use."""


# --------------------------
# Text helpers
# --------------------------


def slugify(text: str) -> str:
    """Simple safe slugify — replaces spaces and special chars with hyphens."""
    return re.sub(r'[^a-z0-9]+', '-', (text or "").lower().strip()).strip('-')


def _normalize_text_for_match(s: str) -> str:
    """Normalize text for matching: lowercase, ascii-fold, remove non-alnum, collapse spaces."""
    if not s:
        return ""
    s = str(s)
    s = unicodedata.normalize("NFKD", s)
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    s = re.sub(r"[^a-zA-Z0-9\s]", " ", s)  # replace punctuation with space
    s = re.sub(r"\s+", " ", s).strip().lower()
    return s


def _tokens(s: str) -> List[str]:
    return [t for t in _normalize_text_for_match(s).split(" ") if t]


def cpu_to_dict(cpu: CPU) -> Dict[str, Any]:
    return {
        "name": cpu.name,
        "year": cpu.year,
        "openSpeed": cpu.open_speed,
        "price": cpu.price,
    }


def _catalog(cpus: Optional[Sequence[CPU]]) -> Sequence[CPU]:
    return get_all_cpus() if cpus is None else cpus


# --------------------------
# Sorting / filtering
# --------------------------


def sort_cpus(key: str, descending: bool = False, cpus: Optional[Sequence[CPU]] = None) -> List[CPU]:
    """
    Return the records ordered by one field.

    Accepted keys: name, year, openSpeed (or open_speed), price. The sort is
    stable, so records with equal values keep their catalog order.
    """
    field = SORT_KEYS.get((key or "").strip().lower())
    if field is None:
        raise CatalogQueryError(
            f"Unknown sort key {key!r}; expected one of: name, year, openSpeed, price")

    logger.debug("sort_cpus: key=%s descending=%s", field, descending)
    return sorted(_catalog(cpus), key=lambda c: getattr(c, field), reverse=descending)


def filter_cpus(min_speed=None, max_price=None, year: Optional[int] = None,
                cpus: Optional[Sequence[CPU]] = None) -> List[CPU]:
    """
    Return the records matching every given bound, in catalog order.

    min_speed is exclusive (openSpeed > min_speed), max_price is inclusive and
    year must match exactly. Bounds left as None are ignored.
    """
    for label, value in (("min_speed", min_speed), ("max_price", max_price), ("year", year)):
        if value is None:
            continue
        if not math.isfinite(value):
            raise CatalogQueryError(f"{label} must be a finite number")
        if value < 0:
            raise CatalogQueryError(f"{label} must not be negative")
    if year is not None and year != int(year):
        raise CatalogQueryError("year must be a whole number")

    results = []
    for cpu in _catalog(cpus):
        if min_speed is not None and not cpu.open_speed > min_speed:
            continue
        if max_price is not None and cpu.price > max_price:
            continue
        if year is not None and cpu.year != year:
            continue
        results.append(cpu)

    logger.debug("filter_cpus: min_speed=%s max_price=%s year=%s -> %d match(es)",
                 min_speed, max_price, year, len(results))
    return results


# --------------------------
# Search / lookup
# --------------------------


def search_cpus(query: str, cpus: Optional[Sequence[CPU]] = None) -> List[CPU]:
    """Case-insensitive substring search on CPU names ('i5 13600' finds 'Core i5-13600K')."""
    q_norm = _normalize_text_for_match(query)
    if not q_norm:
        raise CatalogQueryError("Search query required")
    return [c for c in _catalog(cpus) if q_norm in _normalize_text_for_match(c.name)]


def find_cpu(raw: str, cpus: Optional[Sequence[CPU]] = None) -> Optional[CPU]:
    """Look a CPU up by exact name, slug ('ryzen-5-5600') or chip id ('cpu:ryzen-5-5600')."""
    if not raw:
        return None
    q = raw.strip()
    if q.lower().startswith("cpu:"):
        q = q[4:]

    catalog = _catalog(cpus)
    for cpu in catalog:
        if cpu.name.lower() == q.lower():
            return cpu

    q_slug = slugify(q)
    for cpu in catalog:
        if slugify(cpu.name) == q_slug:
            return cpu
    return None


def get_cpu_details(raw: str, cpus: Optional[Sequence[CPU]] = None) -> Dict[str, Any]:
    """
    Lookup used by the server. Returns a dict with at least:
      - found: bool
      - id, cpu (when found)
      - suggestions: list (when not found but some name tokens overlap)
    """
    if not raw or not isinstance(raw, str):
        return {"found": False, "error": "No CPU name provided."}

    catalog = _catalog(cpus)
    cpu = find_cpu(raw, cpus=catalog)
    if cpu:
        return {
            "found": True,
            "id": f"cpu:{slugify(cpu.name)}",
            "cpu": cpu_to_dict(cpu),
        }

    # suggestions: token-overlap scoring
    q_tokens = set(_tokens(raw))
    scores = []
    for cpu in catalog:
        overlap = len(q_tokens & set(_tokens(cpu.name)))
        if overlap > 0:
            scores.append((overlap, cpu))

    if scores:
        scores_sorted = sorted(scores, key=lambda x: -x[0])
        suggestions = [
            {"id": f"cpu:{slugify(c.name)}", "name": c.name, "score": sc}
            for sc, c in scores_sorted
        ]
        return {
            "found": False,
            "error": f"No exact match for '{raw}', but here are close matches.",
            "suggestions": suggestions,
        }

    logger.info("get_cpu_details: no match for %r", raw)
    return {"found": False, "error": f"No match found for '{raw}' in the CPU catalog."}
