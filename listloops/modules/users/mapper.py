"""Projection of stored profiles into the user shape the UI consumes."""

from listloops.modules.auth.schemas import Identity
from listloops.modules.users.schemas import ProfileRecord, UserRole, ViewUser

ADMIN_ROLE = "admin"
DEFAULT_OFFICE_ID = "default"


def profile_to_view_user(record: ProfileRecord) -> ViewUser:
    role = ADMIN_ROLE if record.role == UserRole.INDIVIDUAL else record.role.value
    return ViewUser(
        uid=record.id,
        email=record.email,
        display_name=record.profile.display_name,
        role=role,
        office_id=record.team_id or record.brokerage_id or DEFAULT_OFFICE_ID,
    )


def fallback_view_user(identity: Identity) -> ViewUser:
    """Build a user straight from the identity provider when the profile is unavailable"""
    email = identity.email or ""
    return ViewUser(
        uid=identity.uid,
        email=email,
        display_name=identity.display_name or email.split("@")[0],
        role=ADMIN_ROLE,
        office_id=DEFAULT_OFFICE_ID,
    )


def user_initials(user: ViewUser) -> str:
    if user.display_name:
        letters = "".join(part[0] for part in user.display_name.split() if part)
        if letters:
            return letters.upper()[:2]
    if user.email:
        return user.email[0].upper()
    return "U"
