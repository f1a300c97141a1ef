"""
Authorization policy for posts.

Pure decision functions with no I/O. Handlers resolve the actor and load the
post first, then ask the policy, then call the store; the store itself never
checks permissions.

Reads are public and any authenticated actor may create. Update and delete
each have a named policy; today both use the owner-or-admin rule, so an admin
may edit as well as delete another user's post. Restricting admins to
deletion only means changing can_update, not the call sites.
"""

import logging
from enum import Enum
from typing import Protocol

from scribe.core.errors import Forbidden

logger = logging.getLogger(__name__)

FORBIDDEN_MESSAGE = "Access denied. You can only modify your own blogs."


class Actor(Protocol):
    id: int
    role: str


class Action(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"


def can_read() -> bool:
    return True


def can_create(actor: Actor | None) -> bool:
    return actor is not None


def can_modify(actor: Actor, owner_id: int | None) -> bool:
    """True iff actor is an admin or owns the resource."""
    return actor.role == "admin" or (owner_id is not None and actor.id == owner_id)


def can_update(actor: Actor, owner_id: int | None) -> bool:
    return can_modify(actor, owner_id)


def can_delete(actor: Actor, owner_id: int | None) -> bool:
    return can_modify(actor, owner_id)


def authorize(action: Action, actor: Actor | None, owner_id: int | None = None) -> Decision:
    """Decide whether actor may perform action on a resource owned by owner_id."""
    if action is Action.READ:
        allowed = can_read()
    elif action is Action.CREATE:
        allowed = can_create(actor)
    elif actor is None:
        allowed = False
    elif action is Action.UPDATE:
        allowed = can_update(actor, owner_id)
    else:
        allowed = can_delete(actor, owner_id)
    return Decision.ALLOW if allowed else Decision.DENY


def ensure_can(action: Action, actor: Actor | None, owner_id: int | None = None) -> None:
    """Raise Forbidden unless authorize() allows the action."""
    if authorize(action, actor, owner_id) is Decision.DENY:
        logger.warning(
            "Denied %s for actor=%s on resource owned by %s",
            action.value,
            getattr(actor, "id", None),
            owner_id,
        )
        raise Forbidden(FORBIDDEN_MESSAGE)
