"""
Contact Directory - who the current user may message.

Visibility policy:
    admin   -> student, alumni
    student -> admin
    alumni  -> admin, student
"""
import logging
from typing import Dict, FrozenSet, List

from alumni_connect.core.errors import ContactNotFound
from alumni_connect.db.record_store import RecordStore
from alumni_connect.db.tables import users
from alumni_connect.schemas.schemas import CurrentUser, User, UserRole

logger = logging.getLogger(__name__)

VISIBLE_ROLES: Dict[UserRole, FrozenSet[UserRole]] = {
    UserRole.admin: frozenset({UserRole.student, UserRole.alumni}),
    UserRole.student: frozenset({UserRole.admin}),
    UserRole.alumni: frozenset({UserRole.admin, UserRole.student}),
}


def visible_roles(role: UserRole) -> List[str]:
    """Role names ``role`` may list, sorted for stable queries."""
    return sorted(r.value for r in VISIBLE_ROLES[UserRole(role)])


async def list_contacts(store: RecordStore, current_user: CurrentUser) -> List[User]:
    """
    All users the current user may message, excluding themselves.

    Ordered by full name, then id. Raises FetchFailed if the store is down.
    """
    rows = await store.find(
        users,
        users.c.id != current_user.id,
        users.c.role.in_(visible_roles(current_user.role)),
        order_by=[users.c.full_name, users.c.id],
    )
    logger.debug("User %s sees %d contacts", current_user.id, len(rows))
    return [User.model_validate(row) for row in rows]


async def get_contact(store: RecordStore, current_user: CurrentUser, contact_id: int) -> User:
    """Single contact lookup under the same policy as list_contacts."""
    if contact_id == current_user.id:
        raise ContactNotFound(f"User {contact_id} is not a contact")

    row = await store.find_one(
        users,
        users.c.id == contact_id,
        users.c.role.in_(visible_roles(current_user.role)),
    )
    if row is None:
        raise ContactNotFound(f"User {contact_id} is not a contact")
    return User.model_validate(row)
