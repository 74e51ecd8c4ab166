"""Authentication of the acting user forwarded by the gateway."""

import base64
import hashlib
import hmac
import uuid
from dataclasses import dataclass

from fastapi import HTTPException, Request, status

from core.config import settings

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class Actor:
    """User performing the request, as asserted by the gateway."""

    id: uuid.UUID
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def _b64u_encode(data: bytes) -> str:
    """Base64-URL encode without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()


def sign_actor(actor_id: str, role: str) -> str:
    """
    Sign an actor assertion.

    Args:
        actor_id: Acting user ID
        role: Acting user role

    Returns:
        Base64-URL encoded HMAC-SHA256 of "<actor_id>:<role>"
    """
    message = f"{actor_id}:{role}".encode()
    mac = hmac.new(settings.actor_hmac_secret.encode(), message, hashlib.sha256).digest()
    return _b64u_encode(mac)


def verify_actor_signature(actor_id: str, role: str, signature: str) -> bool:
    """Check an actor assertion signature in constant time."""
    return hmac.compare_digest(sign_actor(actor_id, role), signature or "")


async def actor_auth(request: Request) -> Actor:
    """
    Authenticate the acting user from gateway headers.

    Expects headers:
    - X-Actor-Id: UUID of the acting user
    - X-Actor-Role: role of the acting user
    - X-Actor-Signature: HMAC signature over "<id>:<role>"

    Role checks are left to the moderation core, which fails with
    Unauthorized for non-admin actors.

    Args:
        request: FastAPI request object

    Returns:
        Authenticated actor

    Raises:
        HTTPException: If authentication fails
    """
    actor_id = request.headers.get("X-Actor-Id")
    role = request.headers.get("X-Actor-Role")
    signature = request.headers.get("X-Actor-Signature")

    if not actor_id or not role or not signature:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing auth headers (X-Actor-Id, X-Actor-Role, X-Actor-Signature)",
        )

    if not verify_actor_signature(actor_id, role, signature):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid signature")

    try:
        return Actor(id=uuid.UUID(actor_id), role=role)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid X-Actor-Id format") from None
