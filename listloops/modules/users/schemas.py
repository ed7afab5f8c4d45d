from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class UserRole(str, Enum):
    INDIVIDUAL = "individual"
    TEAM_MEMBER = "team_member"
    TEAM_LEAD = "team_lead"
    BROKERAGE_AGENT = "brokerage_agent"
    BROKERAGE_ADMIN = "brokerage_admin"


class ProfileDetails(BaseModel):
    first_name: str = ""
    last_name: str = ""
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    phone: str = ""
    license_number: Optional[str] = None
    license_state: Optional[str] = None


class Branding(BaseModel):
    primary_color: str = "#3B82F6"
    secondary_color: str = "#1E40AF"
    logo_url: Optional[str] = None
    banner_url: Optional[str] = None


class ProfileSettings(BaseModel):
    timezone: str = "America/Los_Angeles"
    email_notifications: bool = True
    sms_notifications: bool = False
    auto_response_enabled: bool = False
    auto_response_message: Optional[str] = None


class ProfileRecord(BaseModel):
    id: str
    email: str
    role: UserRole = UserRole.INDIVIDUAL
    profile: ProfileDetails = Field(default_factory=ProfileDetails)
    team_id: Optional[str] = None
    brokerage_id: Optional[str] = None
    branding: Branding = Field(default_factory=Branding)
    settings: ProfileSettings = Field(default_factory=ProfileSettings)
    created_at: datetime
    updated_at: datetime
    last_login_at: Optional[datetime] = None
    is_active: bool = True

    class Config:
        from_attributes = True


class ViewUser(BaseModel):
    uid: str
    email: str
    display_name: Optional[str] = None
    role: str  # "admin" for individual accounts, otherwise the stored role
    office_id: str = "default"


class DashboardResponse(BaseModel):
    user: ViewUser
    initials: str
    title: str = "Welcome to your dashboard"
    message: str = "This is where you can manage your application data."
    error: Optional[str] = None
