"""Role-scoped data access.

Standard actors only ever read and write their own rows (``owner_id`` equals
their id). Superadmins see every owner's rows, and listings shown to them
carry the owning actor's email, looked up in one batched query.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from fastapi import Depends
from sqlalchemy.orm import Query, Session

from models.profile import Profile, ROLE_SUPERADMIN
from utils.tokenJWT import get_current_user

OWNER_UNKNOWN = "Tidak diketahui"


@dataclass(frozen=True)
class ActorContext:
    actor_id: int
    email: str
    role: str

    @property
    def is_elevated(self) -> bool:
        return self.role == ROLE_SUPERADMIN

    @classmethod
    def from_profile(cls, profile: Profile) -> "ActorContext":
        return cls(actor_id=profile.id, email=profile.email, role=profile.role)


def get_actor(current_user: Profile = Depends(get_current_user)) -> ActorContext:
    return ActorContext.from_profile(current_user)


def scope_query(query: Query, model, actor: ActorContext) -> Query:
    """Restrict ``query`` to the actor's own rows unless the actor is elevated."""
    if actor.is_elevated:
        return query
    return query.filter(model.owner_id == actor.actor_id)


def resolve_owner_emails(db: Session, owner_ids: Iterable[Optional[int]]) -> Dict[int, str]:
    ids = {i for i in owner_ids if i is not None}
    if not ids:
        return {}
    rows = db.query(Profile.id, Profile.email).filter(Profile.id.in_(ids)).all()
    return {row.id: row.email for row in rows}


def attach_owner_emails(db: Session, items: List[dict], actor: ActorContext) -> List[dict]:
    """Add ``owner_email`` to serialized rows for elevated actors."""
    if not actor.is_elevated or not items:
        return items
    emails = resolve_owner_emails(db, (item.get("owner_id") for item in items))
    for item in items:
        item["owner_email"] = emails.get(item.get("owner_id"), OWNER_UNKNOWN)
    return items
