import os
import sys

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from config import settings
from database import SessionLocal, init_db
from models.branch import Branch, SUPPLIER_BRANCH
from models.category import InboundCategory
from models.profile import Profile, ROLE_SUPERADMIN
from utils.hashing import get_password_hash
from utils.inbound_rules import CODE_RETUR_CABANG, CODE_RETUR_KONSUMEN, CODE_SUPPLIER

# Inbound categories shipped with every installation
INBOUND_CATEGORIES = [
    (CODE_SUPPLIER, "SUPPLIER"),
    (CODE_RETUR_CABANG, "RETUR CABANG"),
    (CODE_RETUR_KONSUMEN, "RETUR KONSUMEN"),
]


def seed(session) -> dict:
    """Create the initial superadmin, SUPPLIER branch and inbound categories.

    Safe to run repeatedly: existing rows are left untouched.
    """
    created = {"superadmin": 0, "branches": 0, "inbound_categories": 0}

    email = settings.SUPERADMIN_EMAIL.strip().lower()
    if not session.query(Profile).filter(Profile.email == email).first():
        session.add(Profile(
            email=email,
            password_hash=get_password_hash(settings.SUPERADMIN_PASSWORD),
            name=settings.SUPERADMIN_NAME,
            role=ROLE_SUPERADMIN,
        ))
        created["superadmin"] = 1

    if not session.query(Branch).filter(Branch.name == SUPPLIER_BRANCH).first():
        session.add(Branch(name=SUPPLIER_BRANCH))
        created["branches"] = 1

    existing_codes = {c for (c,) in session.query(InboundCategory.code).all()}
    for code, name in INBOUND_CATEGORIES:
        if code not in existing_codes:
            session.add(InboundCategory(code=code, name=name))
            created["inbound_categories"] += 1

    session.commit()
    return created


if __name__ == "__main__":
    init_db()
    session = SessionLocal()
    try:
        result = seed(session)
        print(f"Seed selesai: {result}")
    finally:
        session.close()
