from app.schemas.auth import AccessTokenResponse, TokenData
from app.schemas.draft import DraftFile, DraftPayload
from app.schemas.profile import (
	CalendarEvent,
	EducationEntry,
	ExperienceEntry,
	GalleryItem,
	Notification,
	PostItem,
	Profile,
	ProfileView,
	ReachRecord,
	VideoItem,
)
from app.schemas.user import MessageResponse, UserCreate
from app.schemas.view import ViewRequest, ViewStats

__all__ = [
	"AccessTokenResponse",
	"TokenData",
	"DraftFile",
	"DraftPayload",
	"CalendarEvent",
	"EducationEntry",
	"ExperienceEntry",
	"GalleryItem",
	"Notification",
	"PostItem",
	"Profile",
	"ProfileView",
	"ReachRecord",
	"VideoItem",
	"MessageResponse",
	"UserCreate",
	"ViewRequest",
	"ViewStats",
]
