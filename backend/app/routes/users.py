from __future__ import annotations

from fastapi import APIRouter, Depends

from app.auth.identity import Identity
from app.dependencies.auth import require_identity
from app.schemas.auth import SessionUserOut

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=SessionUserOut)
def get_me(identity: Identity = Depends(require_identity)) -> SessionUserOut:
    claims = identity.raw_claims
    return SessionUserOut(
        id=identity.user_id,
        role=str(identity.role) if identity.role is not None else None,
        name=identity.name,
        email=identity.email,
        image=claims.get("picture"),
    )
