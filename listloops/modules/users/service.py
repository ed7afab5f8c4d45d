import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from listloops.config.settings import settings
from listloops.database.document_store import DocumentStore
from listloops.modules.users.schemas import ProfileRecord, UserRole

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ProfileStore:
    """Per-user profile documents keyed by the identity provider's uid."""

    def __init__(self, documents: DocumentStore, collection: Optional[str] = None):
        self.documents = documents
        self.collection = collection or settings.users_table

    def create(self, uid: str, email: str, overrides: Optional[Mapping[str, Any]] = None) -> ProfileRecord:
        """Create the profile with default values, shallow-merging overrides on top"""
        now = _now()
        data: Dict[str, Any] = {
            "id": uid,
            "email": email,
            "role": UserRole.INDIVIDUAL.value,
            "profile": {
                "first_name": "",
                "last_name": "",
                "display_name": email.split("@")[0],
                "phone": "",
            },
            "branding": {
                "primary_color": "#3B82F6",
                "secondary_color": "#1E40AF",
            },
            "settings": {
                "timezone": "America/Los_Angeles",
                "email_notifications": True,
                "sms_notifications": False,
                "auto_response_enabled": False,
            },
            "created_at": now,
            "updated_at": now,
            "is_active": True,
        }
        data.update(overrides or {})

        record = ProfileRecord.model_validate(data)
        stored = self.documents.set(self.collection, uid, record.model_dump(mode="json"))
        logger.info(f"Created profile for user {uid}")
        return ProfileRecord.model_validate(stored)

    def get(self, uid: str) -> Optional[ProfileRecord]:
        """Get the profile for uid, or None if it has not been created yet"""
        data = self.documents.get(self.collection, uid)
        if data is None:
            return None
        return ProfileRecord.model_validate(data)

    def update(self, uid: str, fields: Mapping[str, Any]) -> None:
        """Merge fields into the stored profile and refresh updated_at"""
        self.documents.update(self.collection, uid, {**fields, "updated_at": _now()})

    def touch_last_login(self, uid: str) -> None:
        now = _now()
        self.documents.update(self.collection, uid, {"last_login_at": now, "updated_at": now})
