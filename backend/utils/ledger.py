"""Stock ledger: balances and movement history derived from stock events.

Current stock of a (product, variant) is the sum of its stock-in quantities
minus the sum of its stock-out quantities. Nothing prevents it from going
negative; such balances are reported as they are.

All functions accept ORM rows or any objects with the same attributes, and
never raise on missing relations: a missing product, branch or category
becomes a placeholder string.
"""
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from models.branch import SUPPLIER_BRANCH
from utils.grouping import normalize_variant

UNKNOWN_PRODUCT = "-"
UNKNOWN_DESTINATION = "-"
UNKNOWN_CATEGORY = "-"

LedgerKey = Tuple[Optional[int], Optional[str]]


def ledger_key(product_id, variant) -> LedgerKey:
    return product_id, normalize_variant(variant)


def _name_of(related, placeholder: str) -> str:
    name = getattr(related, "name", None) if related is not None else None
    return name or placeholder


def _quantity(event) -> int:
    return getattr(event, "quantity", None) or 0


def aggregate_stock(stock_ins: Iterable, stock_outs: Iterable) -> Dict[LedgerKey, dict]:
    summary: Dict[LedgerKey, dict] = {}

    def _entry(event) -> dict:
        key = ledger_key(getattr(event, "product_id", None), getattr(event, "variant", None))
        entry = summary.get(key)
        if entry is None:
            entry = summary[key] = {
                "product_id": key[0],
                "product_name": _name_of(getattr(event, "product", None), UNKNOWN_PRODUCT),
                "variant": key[1],
                "total_in": 0,
                "total_out": 0,
                "current_stock": 0,
            }
        return entry

    for event in stock_ins:
        entry = _entry(event)
        entry["total_in"] += _quantity(event)
        entry["current_stock"] += _quantity(event)

    for event in stock_outs:
        entry = _entry(event)
        entry["total_out"] += _quantity(event)
        entry["current_stock"] -= _quantity(event)

    return summary


def _sort_key(record: dict) -> Tuple[int, datetime]:
    # (has_date, utc_naive_date); undated records sort after every dated one
    value = record.get("date")
    if not isinstance(value, datetime):
        return 0, datetime.min
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return 1, value


def stock_in_record(event) -> dict:
    return {
        "type": "in",
        "id": getattr(event, "id", None),
        "product_id": getattr(event, "product_id", None),
        "product_name": _name_of(getattr(event, "product", None), UNKNOWN_PRODUCT),
        "variant": normalize_variant(getattr(event, "variant", None)),
        "quantity": _quantity(event),
        "counterparty": _name_of(getattr(event, "source", None), SUPPLIER_BRANCH),
        "category": _name_of(getattr(event, "category", None), UNKNOWN_CATEGORY),
        "date": getattr(event, "date", None),
        "owner_id": getattr(event, "owner_id", None),
    }


def stock_out_record(event) -> dict:
    return {
        "type": "out",
        "id": getattr(event, "id", None),
        "product_id": getattr(event, "product_id", None),
        "product_name": _name_of(getattr(event, "product", None), UNKNOWN_PRODUCT),
        "variant": normalize_variant(getattr(event, "variant", None)),
        "quantity": _quantity(event),
        "counterparty": _name_of(getattr(event, "destination", None), UNKNOWN_DESTINATION),
        "category": _name_of(getattr(event, "category", None), UNKNOWN_CATEGORY),
        "date": getattr(event, "date", None),
        "owner_id": getattr(event, "owner_id", None),
    }


def merge_history(stock_ins: Iterable, stock_outs: Iterable) -> List[dict]:
    """Both event streams as one list, newest first.

    The sort is stable: records with equal dates keep their input order,
    stock-ins ahead of stock-outs.
    """
    records = [stock_in_record(e) for e in stock_ins] + [stock_out_record(e) for e in stock_outs]
    return sorted(records, key=_sort_key, reverse=True)
