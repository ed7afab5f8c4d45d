# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - Account registration (auth.users table)
# - Sign-in and session management
# - Auth state change events

"""
Supabase Auth calls used through SupabaseIdentityProvider:
- auth.sign_in_with_password() - sign_in
- auth.sign_up() - sign_up
- auth.sign_out() - sign_out
- auth.on_auth_state_change() / auth.get_session() - subscribe

Error codes reported by Supabase Auth (e.g. invalid_credentials,
user_already_exists, weak_password) are translated into user-facing
messages by AuthService. The per-user business data lives in the users
table (see listloops/modules/users/models.py), not in auth.users.
"""
