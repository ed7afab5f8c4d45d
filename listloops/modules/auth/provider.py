import logging
from typing import Any, Callable, Optional

from supabase import Client

from listloops.modules.auth.schemas import Identity

logger = logging.getLogger(__name__)

IdentityListener = Callable[[Optional[Identity]], None]

# Token refreshes and profile edits keep the same signed-in user
SIGN_IN_STATE_EVENTS = {"SIGNED_IN", "SIGNED_OUT", "USER_DELETED"}


class ProviderError(Exception):
    """A rejection from the identity provider, carrying its error code"""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


def _provider_error(error: Exception) -> ProviderError:
    code = getattr(error, "code", None)
    message = getattr(error, "message", None) or str(error)
    return ProviderError(str(code) if code else "unknown", message)


def identity_from_user(user: Any) -> Identity:
    metadata = getattr(user, "user_metadata", None) or {}
    return Identity(
        uid=str(user.id),
        email=user.email,
        display_name=metadata.get("display_name") or metadata.get("full_name"),
    )


class SupabaseIdentityProvider:
    """Supabase Auth behind the sign-in/sign-up/sign-out/subscribe interface"""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def sign_in(self, email: str, password: str) -> Identity:
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": email,
                "password": password
            })
        except Exception as e:
            raise _provider_error(e) from e

        if not auth_response.user:
            raise ProviderError("invalid_credentials", "Invalid login credentials")
        return identity_from_user(auth_response.user)

    def sign_up(self, email: str, password: str) -> Identity:
        try:
            auth_response = self.supabase.auth.sign_up({
                "email": email,
                "password": password
            })
        except Exception as e:
            raise _provider_error(e) from e

        if not auth_response.user:
            raise ProviderError("unknown", "Failed to register user")
        return identity_from_user(auth_response.user)

    def sign_out(self) -> None:
        try:
            self.supabase.auth.sign_out()
        except Exception as e:
            raise _provider_error(e) from e

    def current_identity(self) -> Optional[Identity]:
        session = self.supabase.auth.get_session()
        if session is None or session.user is None:
            return None
        return identity_from_user(session.user)

    def subscribe(self, on_change: IdentityListener) -> Callable[[], None]:
        """
        Register on_change for auth state changes and return the unsubscribe function.

        on_change receives the signed-in Identity, or None once signed out. It is
        called once right away with the current session's identity.
        """
        def handle_event(event, session) -> None:
            logger.debug(f"Auth state event {event}")
            if event not in SIGN_IN_STATE_EVENTS:
                return
            user = getattr(session, "user", None) if session is not None else None
            on_change(identity_from_user(user) if user is not None else None)

        subscription = self.supabase.auth.on_auth_state_change(handle_event)
        on_change(self.current_identity())
        return subscription.unsubscribe
