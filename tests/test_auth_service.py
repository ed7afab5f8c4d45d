from datetime import datetime, timezone

import pytest

from listloops.modules.auth.provider import ProviderError
from listloops.modules.auth.service import CONFIGURATION_ERROR_MESSAGE
from listloops.modules.users import service as users_service
from listloops.modules.users.schemas import UserRole


class TestLogin:
    def test_success_returns_identity(self, auth_service, provider):
        provider.add_account("a@b.com", "secret1")

        result = auth_service.login("a@b.com", "secret1")

        assert result.success is True
        assert result.user.email == "a@b.com"
        assert result.error is None

    def test_success_touches_last_login(self, auth_service, provider, profiles):
        identity = provider.add_account("a@b.com", "secret1")
        profiles.create(identity.uid, "a@b.com")

        auth_service.login("a@b.com", "secret1")

        assert profiles.get(identity.uid).last_login_at is not None

    def test_last_login_failure_does_not_fail_login(self, auth_service, provider, documents):
        provider.add_account("a@b.com", "secret1")
        documents.failures["update"] = ConnectionError("backend unavailable")

        result = auth_service.login("a@b.com", "secret1")

        assert result.success is True

    @pytest.mark.parametrize("code, message", [
        ("user_not_found", "No account found with this email"),
        ("invalid_credentials", "Incorrect email or password"),
        ("email_address_invalid", "Invalid email address"),
        ("over_request_rate_limit", "Too many failed attempts. Please try again later"),
        ("invalid_api_key", "Invalid Supabase API key. Please check your environment configuration."),
        ("project_not_found", "Supabase project not found. Please verify your project configuration."),
    ])
    def test_known_codes_map_to_fixed_messages(self, auth_service, provider, code, message):
        provider.failures["sign_in"] = ProviderError(code, "raw provider text")

        result = auth_service.login("a@b.com", "secret1")

        assert result.success is False
        assert result.error == message

    def test_unknown_code_passes_raw_message_through(self, auth_service, provider):
        provider.failures["sign_in"] = ProviderError("unexpected_failure", "Something odd happened")

        result = auth_service.login("a@b.com", "secret1")

        assert result.error == "Something odd happened"

    @pytest.mark.parametrize("raw", ["Missing configuration for project", "Invalid API key"])
    def test_configuration_text_maps_to_configuration_message(self, auth_service, provider, raw):
        provider.failures["sign_in"] = ProviderError("unknown", raw)

        result = auth_service.login("a@b.com", "secret1")

        assert result.error == CONFIGURATION_ERROR_MESSAGE

    def test_empty_message_falls_back_to_default(self, auth_service, provider):
        provider.failures["sign_in"] = ProviderError("unknown", "")

        assert auth_service.login("a@b.com", "secret1").error == "Login failed"

    def test_wrong_password(self, auth_service, provider):
        provider.add_account("a@b.com", "secret1")

        result = auth_service.login("a@b.com", "nope")

        assert result.error == "Incorrect email or password"


class TestRegister:
    def test_register_creates_profile_from_form_fields(self, auth_service, profiles):
        result = auth_service.register(
            "a@b.com", "secret1", first_name="A", last_name="B", phone="555", role="individual"
        )

        assert result.success is True
        record = profiles.get(result.user.uid)
        assert record.role == UserRole.INDIVIDUAL
        assert record.profile.first_name == "A"
        assert record.profile.last_name == "B"
        assert record.profile.phone == "555"
        assert record.profile.display_name is None

        assert auth_service.login("a@b.com", "secret1").success is True

    def test_register_with_session_keeps_bootstrapped_profile(
        self, auth_service, bridge, profiles, documents, monkeypatch
    ):
        ticks = iter(datetime(2024, 1, 1, 0, 0, second, tzinfo=timezone.utc) for second in range(1, 10))
        monkeypatch.setattr(users_service, "_now", lambda: next(ticks))
        bridge.start()

        result = auth_service.register(
            "a@b.com", "secret1", first_name="A", last_name="B", phone="555", role="team_member"
        )

        record = profiles.get(result.user.uid)
        assert documents.count("set") == 1
        assert record.created_at == datetime(2024, 1, 1, 0, 0, 1, tzinfo=timezone.utc)
        assert record.updated_at > record.created_at
        assert record.role == UserRole.TEAM_MEMBER
        assert record.profile.first_name == "A"
        assert record.profile.display_name is None

        view = bridge.state.user
        assert view.display_name is None
        assert view.role == "team_member"

    def test_register_team_member(self, auth_service, profiles):
        result = auth_service.register(
            "t@b.com", "secret1", first_name="T", last_name="M", phone="1", role="team_member"
        )

        assert profiles.get(result.user.uid).role == UserRole.TEAM_MEMBER

    @pytest.mark.parametrize("code, message", [
        ("user_already_exists", "An account with this email already exists"),
        ("email_exists", "An account with this email already exists"),
        ("email_address_invalid", "Invalid email address"),
        ("weak_password", "Password should be at least 6 characters"),
        ("configuration_not_found", "Supabase configuration not found. Please set SUPABASE_URL and SUPABASE_KEY."),
    ])
    def test_known_codes_map_to_fixed_messages(self, auth_service, provider, documents, code, message):
        provider.failures["sign_up"] = ProviderError(code, "raw provider text")

        result = auth_service.register("a@b.com", "secret1", first_name="A", last_name="B", phone="555")

        assert result.success is False
        assert result.error == message
        assert documents.count("set") == 0

    def test_existing_account(self, auth_service, provider):
        provider.add_account("a@b.com", "secret1")

        result = auth_service.register("a@b.com", "secret1", first_name="A", last_name="B", phone="555")

        assert result.error == "An account with this email already exists"

    def test_empty_message_falls_back_to_default(self, auth_service, provider):
        provider.failures["sign_up"] = ProviderError("unknown", "")

        result = auth_service.register("a@b.com", "secret1", first_name="A", last_name="B", phone="555")

        assert result.error == "Registration failed"

    def test_profile_failure_propagates_and_leaves_account(self, auth_service, provider, documents):
        documents.failures["set"] = ConnectionError("backend unavailable")

        with pytest.raises(ConnectionError):
            auth_service.register("a@b.com", "secret1", first_name="A", last_name="B", phone="555")

        assert "a@b.com" in provider.accounts


class TestLogout:
    def test_logout(self, auth_service, provider):
        provider.add_account("a@b.com", "secret1")
        auth_service.login("a@b.com", "secret1")

        result = auth_service.logout()

        assert result.success is True
        assert provider.current is None

    def test_logout_failure(self, auth_service, provider):
        provider.failures["sign_out"] = ProviderError("unknown", "Network down")

        result = auth_service.logout()

        assert result.success is False
        assert result.error == "Network down"

    def test_logout_failure_without_message(self, auth_service, provider):
        provider.failures["sign_out"] = ProviderError("unknown", "")

        assert auth_service.logout().error == "Logout failed"
