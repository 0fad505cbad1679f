from app.models.draft import DraftRecord
from app.models.profile import ProfileDocument

__all__ = [
	"DraftRecord",
	"ProfileDocument",
]
