"""Fields an incoming stock entry must carry, by inbound category.

Keyed on the category's stable ``code`` so renaming a category does not
change what it requires.
"""
from typing import Dict, List, Optional, Tuple

from utils.errors import ValidationFailed

CODE_SUPPLIER = "SUPPLIER"
CODE_RETUR_CABANG = "RETUR_CABANG"
CODE_RETUR_KONSUMEN = "RETUR_KONSUMEN"

INBOUND_RULES: Dict[str, Tuple[str, ...]] = {
    CODE_SUPPLIER: ("plate_number", "driver", "delivery_note"),
    CODE_RETUR_CABANG: ("return_branch_id",),
    CODE_RETUR_KONSUMEN: ("delivery_note",),
}

FIELD_LABELS = {
    "plate_number": "Nomor polisi",
    "driver": "Nama sopir",
    "delivery_note": "Nomor surat jalan",
    "return_branch_id": "Cabang asal retur",
}


def required_fields(code: Optional[str]) -> Tuple[str, ...]:
    if not code:
        return ()
    return INBOUND_RULES.get(code.strip().upper(), ())


def missing_fields(code: Optional[str], values: dict) -> List[str]:
    missing = []
    for field in required_fields(code):
        value = values.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


def check_inbound_fields(code: Optional[str], values: dict) -> None:
    missing = missing_fields(code, values)
    if missing:
        labels = ", ".join(FIELD_LABELS.get(f, f) for f in missing)
        raise ValidationFailed(f"Field wajib untuk jenis stok masuk ini belum diisi: {labels}")
