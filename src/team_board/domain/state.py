"""Application state owned by the navigation controller."""

from dataclasses import dataclass, field

from team_board.domain.models import Budget, Message, Photo, Session, Team


@dataclass(frozen=True)
class LoggedOut:
    """Login screen."""

    name: str = "logged_out"


@dataclass(frozen=True)
class TeamList:
    """Team list screen."""

    name: str = "team_list"


@dataclass(frozen=True)
class TeamDetail:
    """Detail screen for a single team."""

    team: Team
    name: str = "team_detail"


Screen = LoggedOut | TeamList | TeamDetail


@dataclass
class GalleryState:
    """Photos for the focused team and modal view state."""

    photos: list[Photo] = field(default_factory=list)
    current_index: int = 0
    focused: Photo | None = None
    zoomed: bool = False

    def clear(self) -> None:
        """Drop all cached photos and close the modal."""
        self.photos = []
        self.current_index = 0
        self.focused = None
        self.zoomed = False


@dataclass
class ChatState:
    """Messages for the focused team."""

    messages: list[Message] = field(default_factory=list)
    draft: str = ""
    recording: bool = False

    def clear(self) -> None:
        """Drop all cached messages and the draft."""
        self.messages = []
        self.draft = ""
        self.recording = False


@dataclass
class AppState:
    """Single mutable state object shared by all controllers."""

    session: Session = field(default_factory=Session)
    screen: Screen = field(default_factory=LoggedOut)
    teams: list[Team] = field(default_factory=list)
    gallery: GalleryState = field(default_factory=GalleryState)
    chat: ChatState = field(default_factory=ChatState)
    budget: Budget | None = None

    @property
    def current_team(self) -> Team | None:
        """Return the team in focus, if any."""
        if isinstance(self.screen, TeamDetail):
            return self.screen.team
        return None

    @property
    def user_email(self) -> str | None:
        """Return the logged-in user's email, if any."""
        if self.session.user is None:
            return None
        return self.session.user.email

    def clear_team_scope(self) -> None:
        """Forget everything scoped to the focused team."""
        self.gallery.clear()
        self.chat.clear()
        self.budget = None
