"""
Request actor: who is calling.

The Authorization header carries a JSON identity claim such as {"id": 42}.
Validating that claim is the auth layer's job; here it is only parsed. The
role always comes from the users table, never from the header.
"""
import json
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlmodel import Session

from pitchside.database import get_session
from pitchside.models.user import ROLE_ADMIN, User


@dataclass(frozen=True)
class Actor:
    id: int
    role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def parse_identity_claim(authorization: Optional[str]) -> int:
    """Return the user id in the claim, or raise 401."""
    if not authorization:
        raise HTTPException(status_code=401, detail="User not authenticated")
    try:
        claim = json.loads(authorization)
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid authorization header")

    user_id = claim.get("id") if isinstance(claim, dict) else None
    if user_id is None:
        raise HTTPException(status_code=401, detail="User not authenticated")
    # Exact integers only: no float truncation, no bool, no numeric strings
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise HTTPException(status_code=401, detail="Invalid authorization header")
    return user_id


def get_current_actor(
    authorization: Optional[str] = Header(default=None),
    session: Session = Depends(get_session),
) -> Actor:
    user_id = parse_identity_claim(authorization)
    user = session.get(User, user_id)
    return Actor(id=user_id, role=user.role if user else None)
