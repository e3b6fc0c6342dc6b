from unirivo.schemas.application import (
    ApplicationCreate,
    ApplicationOut,
    ApplicationStatusUpdate,
    MemberAddRequest,
    ShortlistRequest,
)
from unirivo.schemas.auth import AuthResponse, LoginRequest, MeResponse, RegisterRequest
from unirivo.schemas.matching import (
    DashboardStatsOut,
    MatchedProfileOut,
    MatchProfilesRequest,
    MatchProfilesResponse,
    RecommendationOut,
    RecommendationsResponse,
    SkillsAnalyticsOut,
)
from unirivo.schemas.notification import NotificationListOut, NotificationOut
from unirivo.schemas.profile import ProfileOut, ProfileUpdate
from unirivo.schemas.project import ProjectCreate, ProjectOut, ProjectUpdate, RoleIn, RoleOut

__all__ = [
    "ApplicationCreate",
    "ApplicationOut",
    "ApplicationStatusUpdate",
    "MemberAddRequest",
    "ShortlistRequest",
    "AuthResponse",
    "LoginRequest",
    "MeResponse",
    "RegisterRequest",
    "DashboardStatsOut",
    "MatchedProfileOut",
    "MatchProfilesRequest",
    "MatchProfilesResponse",
    "NotificationListOut",
    "NotificationOut",
    "RecommendationOut",
    "RecommendationsResponse",
    "SkillsAnalyticsOut",
    "ProfileOut",
    "ProfileUpdate",
    "ProjectCreate",
    "ProjectOut",
    "ProjectUpdate",
    "RoleIn",
    "RoleOut",
]
