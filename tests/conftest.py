"""
Shared fixtures: in-memory stand-ins for Supabase Auth and the users table.
"""

from typing import Any, Callable, Dict, List, Mapping, MutableMapping, Optional, Tuple

import pytest

from listloops.database.document_store import serialize_document
from listloops.modules.auth.provider import ProviderError
from listloops.modules.auth.schemas import Identity
from listloops.modules.auth.service import AuthService
from listloops.modules.auth.state import AuthStateBridge
from listloops.modules.users.service import ProfileStore


class InMemoryDocumentStore:
    """Dictionary-backed DocumentStore that records every call."""

    def __init__(self) -> None:
        self.collections: Dict[str, MutableMapping[str, Dict[str, Any]]] = {}
        self.calls: List[Tuple[str, str, str]] = []
        self.failures: Dict[str, Exception] = {}

    def _check(self, operation: str, collection: str, doc_id: str) -> None:
        self.calls.append((operation, collection, doc_id))
        if operation in self.failures:
            raise self.failures[operation]

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        self._check("get", collection, doc_id)
        payload = self.collections.get(collection, {}).get(doc_id)
        return dict(payload) if payload is not None else None

    def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        self._check("set", collection, doc_id)
        payload = serialize_document({**data, "id": doc_id})
        self.collections.setdefault(collection, {})[doc_id] = payload
        return dict(payload)

    def update(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        self._check("update", collection, doc_id)
        storage = self.collections.setdefault(collection, {})
        if doc_id in storage:
            storage[doc_id].update(serialize_document(data))

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)


class FakeIdentityProvider:
    """Email/password accounts kept in memory, emitting auth state changes synchronously."""

    def __init__(self) -> None:
        self.accounts: Dict[str, Tuple[Identity, str]] = {}
        self.current: Optional[Identity] = None
        self.listeners: List[Callable[[Optional[Identity]], None]] = []
        self.failures: Dict[str, ProviderError] = {}

    def add_account(self, email: str, password: str, display_name: Optional[str] = None) -> Identity:
        identity = Identity(uid=f"uid_{len(self.accounts) + 1}", email=email, display_name=display_name)
        self.accounts[email.lower()] = (identity, password)
        return identity

    def sign_in(self, email: str, password: str) -> Identity:
        if "sign_in" in self.failures:
            raise self.failures["sign_in"]
        try:
            identity, stored_password = self.accounts[email.lower()]
        except KeyError:
            raise ProviderError("user_not_found", f"User with email {email} not found")
        if stored_password != password:
            raise ProviderError("invalid_credentials", "Invalid login credentials")
        self.current = identity
        self.emit(identity)
        return identity

    def sign_up(self, email: str, password: str) -> Identity:
        if "sign_up" in self.failures:
            raise self.failures["sign_up"]
        if email.lower() in self.accounts:
            raise ProviderError("user_already_exists", "User already registered")
        if len(password) < 6:
            raise ProviderError("weak_password", "Password should be at least 6 characters.")
        identity = self.add_account(email, password)
        self.current = identity
        self.emit(identity)
        return identity

    def sign_out(self) -> None:
        if "sign_out" in self.failures:
            raise self.failures["sign_out"]
        self.current = None
        self.emit(None)

    def subscribe(self, on_change: Callable[[Optional[Identity]], None]) -> Callable[[], None]:
        self.listeners.append(on_change)
        on_change(self.current)

        def unsubscribe() -> None:
            if on_change in self.listeners:
                self.listeners.remove(on_change)

        return unsubscribe

    def emit(self, identity: Optional[Identity]) -> None:
        for listener in list(self.listeners):
            listener(identity)


@pytest.fixture
def documents() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def profiles(documents: InMemoryDocumentStore) -> ProfileStore:
    return ProfileStore(documents, collection="users")


@pytest.fixture
def auth_service(provider: FakeIdentityProvider, profiles: ProfileStore, bridge: AuthStateBridge) -> AuthService:
    return AuthService(provider, profiles, bridge)


@pytest.fixture
def bridge(provider: FakeIdentityProvider, profiles: ProfileStore):
    bridge = AuthStateBridge(provider, profiles)
    yield bridge
    bridge.stop()
