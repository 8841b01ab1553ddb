"""Route handlers for the Web API."""

from socialhub.web.routes.auth import router as auth_router
from socialhub.web.routes.chat import router as chat_router
from socialhub.web.routes.dashboard import router as dashboard_router
from socialhub.web.routes.drawings import router as drawings_router
from socialhub.web.routes.feed import router as feed_router
from socialhub.web.routes.health import router as health_router
from socialhub.web.routes.library import router as library_router
from socialhub.web.routes.maps import router as maps_router
from socialhub.web.routes.notes import router as notes_router
from socialhub.web.routes.posts import router as posts_router
from socialhub.web.routes.quizzes import router as quizzes_router
from socialhub.web.routes.storage import router as storage_router
from socialhub.web.routes.videos import router as videos_router

__all__ = [
    "auth_router",
    "chat_router",
    "dashboard_router",
    "drawings_router",
    "feed_router",
    "health_router",
    "library_router",
    "maps_router",
    "notes_router",
    "posts_router",
    "quizzes_router",
    "storage_router",
    "videos_router",
]
