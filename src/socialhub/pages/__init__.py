"""Feature pages: one class per content type plus the dashboard."""

from socialhub.pages.base import Page
from socialhub.pages.chat import ChatPage
from socialhub.pages.dashboard import DashboardPage
from socialhub.pages.drawings import DrawingsPage
from socialhub.pages.feed import FeedPage
from socialhub.pages.library import LibraryPage
from socialhub.pages.maps import MapsPage
from socialhub.pages.notes import NotesPage
from socialhub.pages.quiz import QuizPage, QuizRun
from socialhub.pages.videos import VideosPage

__all__ = [
    "ChatPage",
    "DashboardPage",
    "DrawingsPage",
    "FeedPage",
    "LibraryPage",
    "MapsPage",
    "NotesPage",
    "Page",
    "QuizPage",
    "QuizRun",
    "VideosPage",
]
