"""Grouping of product rows into logical products.

Rows sharing a ``name`` form one logical product; each row is one variant of
it. ``variant = None`` is a valid variant of its own (the row of a product
without variants), never a missing value.
"""
from typing import Dict, Iterable, List, Optional, Sequence, Tuple


def normalize_variant(variant: Optional[str]) -> Optional[str]:
    if variant is None:
        return None
    variant = str(variant).strip()
    return variant or None


def clean_variants(values: Optional[Iterable[Optional[str]]]) -> List[str]:
    """Strip, drop blanks and duplicates, keep first-seen order."""
    seen = []
    for value in values or []:
        v = normalize_variant(value)
        if v is not None and v not in seen:
            seen.append(v)
    return seen


def group_by_name(rows: Iterable) -> Dict[str, list]:
    groups: Dict[str, list] = {}
    for row in rows:
        groups.setdefault(row.name, []).append(row)
    return groups


def group_variants(rows: Iterable) -> Dict[Optional[str], list]:
    groups: Dict[Optional[str], list] = {}
    for row in rows:
        groups.setdefault(normalize_variant(row.variant), []).append(row)
    return groups


def flatten_groups(groups: Dict[str, list]) -> list:
    return [row for rows in groups.values() for row in rows]


def variant_names(rows: Iterable) -> List[str]:
    """Non-null variants of a group, as shown in the badges / edit form."""
    return [v for v in group_variants(rows) if v is not None]


def plan_variant_sync(rows: Sequence, variants: Iterable[Optional[str]]) -> Tuple[list, list, List[Optional[str]]]:
    """Work out how to turn ``rows`` (one owner's logical product) into ``variants``.

    Returns ``(keep, delete, insert)``: rows to keep (and rename), rows to
    remove and variant values that need a new row. An empty variant list
    means exactly one row with ``variant = None``.
    """
    wanted: List[Optional[str]] = clean_variants(variants) or [None]

    keep, delete = [], []
    kept_variants = set()
    for row in rows:
        v = normalize_variant(row.variant)
        if v in wanted and v not in kept_variants:
            keep.append(row)
            kept_variants.add(v)
        else:
            delete.append(row)

    insert = [v for v in wanted if v not in kept_variants]
    return keep, delete, insert
