# Supabase table: users (name configurable via USERS_TABLE)
# This file documents the expected database schema
# Actual operations are handled via DocumentStore in listloops/database
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, equals auth.users.id)
- email: text (not null)
- role: text (individual | team_member | team_lead | brokerage_agent | brokerage_admin)
- profile: jsonb (first_name, last_name, display_name, photo_url, phone,
  license_number, license_state)
- team_id: text (nullable)
- brokerage_id: text (nullable)
- branding: jsonb (primary_color, secondary_color, logo_url, banner_url)
- settings: jsonb (timezone, email_notifications, sms_notifications,
  auto_response_enabled, auto_response_message)
- created_at: timestamptz (written once)
- updated_at: timestamptz (refreshed on every write)
- last_login_at: timestamptz (nullable)
- is_active: boolean (default: true)

One row per user, created lazily on first sign-in or explicitly on
registration. Rows are never deleted by this service.
"""
