"""
Auth-state reconciliation.

AuthStateBridge listens to the identity provider, makes sure every signed-in
user has a profile document, and publishes the resulting AuthViewState to
whoever depends on it.
"""

import logging
import threading
from typing import Callable, List, Optional

from listloops.modules.auth.provider import SupabaseIdentityProvider
from listloops.modules.auth.schemas import AuthViewState, Identity
from listloops.modules.users.mapper import fallback_view_user, profile_to_view_user
from listloops.modules.users.service import ProfileStore

logger = logging.getLogger(__name__)

AUTHENTICATION_ERROR = "Authentication error"

StateListener = Callable[[AuthViewState], None]


class AuthStateBridge:
    def __init__(self, provider: SupabaseIdentityProvider, profiles: ProfileStore):
        self.provider = provider
        self.profiles = profiles
        self._state = AuthViewState()
        self._listeners: List[StateListener] = []
        self._lock = threading.RLock()
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._identity: Optional[Identity] = None
        self._started = False
        self._stopped = False

    @property
    def state(self) -> AuthViewState:
        return self._state.model_copy()

    @property
    def active(self) -> bool:
        return self._started and not self._stopped

    def start(self) -> None:
        """Subscribe to the identity provider; may only be called once"""
        if self._started:
            raise RuntimeError("AuthStateBridge has already been started")
        self._started = True
        self._unsubscribe = self.provider.subscribe(self._on_identity_change)
        logger.info("Auth state subscription started")

    def stop(self) -> None:
        """Cancel the subscription. No state is published after this returns."""
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()
        logger.info("Auth state subscription stopped")

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def refresh(self, uid: str) -> None:
        """Re-read the signed-in user's profile after it was written elsewhere"""
        with self._lock:
            if not self.active or self._identity is None or self._identity.uid != uid:
                return
            self._publish(self._resolve(self._identity))

    def _on_identity_change(self, identity: Optional[Identity]) -> None:
        # Notifications are handled one at a time, in arrival order
        with self._lock:
            if self._stopped:
                return
            self._identity = identity
            if identity is None:
                state = AuthViewState(user=None, is_authenticated=False, is_loading=False, error=None)
            else:
                state = self._resolve(identity)
            self._publish(state)

    def _resolve(self, identity: Identity) -> AuthViewState:
        try:
            profile = self.profiles.get(identity.uid)
            if profile is None:
                profile = self.profiles.create(identity.uid, identity.email or "")
            user = profile_to_view_user(profile)
            return AuthViewState(user=user, is_authenticated=True, is_loading=False, error=None)
        except Exception as e:
            logger.error(f"Auth error resolving profile for {identity.uid}: {e}")
            user = fallback_view_user(identity)
            return AuthViewState(user=user, is_authenticated=True, is_loading=False, error=AUTHENTICATION_ERROR)

    def _publish(self, state: AuthViewState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state.model_copy())
            except Exception:
                logger.exception("Auth state listener failed")
