import logging
from typing import Dict, Optional

from listloops.modules.auth.provider import ProviderError, SupabaseIdentityProvider
from listloops.modules.auth.schemas import AuthResult
from listloops.modules.auth.state import AuthStateBridge
from listloops.modules.users.service import ProfileStore

logger = logging.getLogger(__name__)

CONFIGURATION_ERROR_MESSAGE = "Supabase configuration error. Please check your environment configuration."

CONFIGURATION_ERROR_MESSAGES: Dict[str, str] = {
    "configuration_not_found": "Supabase configuration not found. Please set SUPABASE_URL and SUPABASE_KEY.",
    "invalid_api_key": "Invalid Supabase API key. Please check your environment configuration.",
    "project_not_found": "Supabase project not found. Please verify your project configuration.",
}

LOGIN_ERROR_MESSAGES: Dict[str, str] = {
    **CONFIGURATION_ERROR_MESSAGES,
    "user_not_found": "No account found with this email",
    "invalid_credentials": "Incorrect email or password",
    "email_address_invalid": "Invalid email address",
    "over_request_rate_limit": "Too many failed attempts. Please try again later",
    "over_email_send_rate_limit": "Too many failed attempts. Please try again later",
}

REGISTER_ERROR_MESSAGES: Dict[str, str] = {
    **CONFIGURATION_ERROR_MESSAGES,
    "user_already_exists": "An account with this email already exists",
    "email_exists": "An account with this email already exists",
    "email_address_invalid": "Invalid email address",
    "weak_password": "Password should be at least 6 characters",
}


def error_message(error: ProviderError, messages: Dict[str, str], default: str) -> str:
    """Translate a provider error code into the message shown to the user"""
    if error.code in messages:
        return messages[error.code]
    raw = error.message or ""
    if "configuration" in raw or "API key" in raw:
        return CONFIGURATION_ERROR_MESSAGE
    return raw or default


class AuthService:
    def __init__(
        self,
        provider: SupabaseIdentityProvider,
        profiles: ProfileStore,
        bridge: Optional[AuthStateBridge] = None,
    ):
        self.provider = provider
        self.profiles = profiles
        self.bridge = bridge

    def login(self, email: str, password: str) -> AuthResult:
        """Sign in with email and password; provider rejections come back as a failed result"""
        try:
            identity = self.provider.sign_in(email, password)
        except ProviderError as e:
            logger.error(f"Login error [{e.code}]: {e.message}")
            return AuthResult(success=False, error=error_message(e, LOGIN_ERROR_MESSAGES, "Login failed"))

        try:
            self.profiles.touch_last_login(identity.uid)
        except Exception as e:
            logger.warning(f"Could not record last login for {identity.uid}: {e}")

        logger.info(f"User signed in: {identity.uid}")
        return AuthResult(success=True, user=identity)

    def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        phone: str,
        role: str = "individual",
    ) -> AuthResult:
        """
        Create the account, then its profile.

        If signing up already started a session, the bridge has created a default
        profile; it is updated in place so created_at stays the original one.
        A failure while writing the profile is raised to the caller. The account
        already exists at that point and is left in place.
        """
        try:
            identity = self.provider.sign_up(email, password)
        except ProviderError as e:
            logger.error(f"Registration error [{e.code}]: {e.message}")
            return AuthResult(success=False, error=error_message(e, REGISTER_ERROR_MESSAGES, "Registration failed"))

        fields = {
            "role": role,
            "profile": {
                "first_name": first_name,
                "last_name": last_name,
                "phone": phone,
            },
        }
        try:
            if self.profiles.get(identity.uid) is None:
                self.profiles.create(identity.uid, email, fields)
            else:
                # Sign-up that starts a session has already bootstrapped a default profile
                self.profiles.update(identity.uid, fields)
        except Exception:
            logger.error(f"Account {identity.uid} was created but its profile could not be written")
            raise

        if self.bridge is not None:
            self.bridge.refresh(identity.uid)

        logger.info(f"User registered: {identity.uid}")
        return AuthResult(success=True, user=identity)

    def logout(self) -> AuthResult:
        try:
            self.provider.sign_out()
        except ProviderError as e:
            logger.error(f"Logout error: {e.message}")
            return AuthResult(success=False, error=e.message or "Logout failed")
        return AuthResult(success=True)
