from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from nightmarket.adapters.github_issues import DEFAULT_LABELS, GitHubIssueClient
from nightmarket.exceptions import ConfigurationMissing, NotFound, UpstreamFailure, ValidationFailed
from nightmarket.models.theme import Theme, ThemeStatus
from nightmarket.repositories.event_repo import EventRepository
from nightmarket.repositories.theme_repo import ThemeRepository
from nightmarket.utils.log import get_logger
from nightmarket.utils.transactions import committed

DEFAULT_THEME_BRIEF = "Generate a new storefront theme for the event."

log = get_logger("themes")


class ThemeService:
    """
    Theme lifecycle: requested -> building | failed, building -> ready
    (done by the generation job), and enabled toggled independently.

    The issue client is resolved lazily through `issue_client` so that a
    missing tracker configuration is only discovered after the theme row
    exists, and that row is then marked failed.
    """

    def __init__(self, db: Session, issue_client: Callable[[], GitHubIssueClient]):
        self.db = db
        self.themes = ThemeRepository(db)
        self.events = EventRepository(db)
        self.issue_client = issue_client

    def request_theme(
        self, event_id: Optional[str], title: Optional[str], notes: Optional[str] = None
    ) -> Tuple[Theme, Dict]:
        event_id = (event_id or "").strip()
        # the title is stored and sent as given; blank-only titles are rejected
        if not event_id or not (title or "").strip():
            raise ValidationFailed("Event and title are required to request a theme.")

        event = self.events.get(event_id)
        if event is None:
            raise NotFound("Selected event does not exist.")

        brief = (notes or "").strip() or None
        try:
            with committed(self.db):
                theme = self.themes.insert(event.id, title, brief)
        except SQLAlchemyError:
            log.exception("Failed to create theme row for event %s", event.id)
            raise UpstreamFailure("Failed to create theme entry.")
        log.info("Theme %s requested for event %s", theme.id, event.id)

        body = "\n".join(
            [
                brief or DEFAULT_THEME_BRIEF,
                "",
                f"Event: {event.title}",
                f"Event ID: {event.id}",
                f"Theme ID: {theme.id}",
            ]
        )
        try:
            client = self.issue_client()
            issue = client.create_issue(title, body, DEFAULT_LABELS)
        except ConfigurationMissing:
            log.error("Issue tracker not configured; theme %s marked failed", theme.id)
            self._mark_failed(theme)
            raise
        except Exception:
            log.exception("GitHub issue creation failed for theme %s", theme.id)
            self._mark_failed(theme)
            raise UpstreamFailure("Failed to create GitHub issue for theme.")

        try:
            with committed(self.db):
                self.themes.update(
                    theme,
                    {
                        "status": ThemeStatus.BUILDING.value,
                        "issue_number": issue.get("number"),
                        "issue_url": issue.get("html_url"),
                    },
                )
        except SQLAlchemyError:
            # the issue exists but the row still says requested; reconcile_stale_requests picks it up
            log.exception(
                "Theme %s has issue #%s but could not be moved to building",
                theme.id,
                issue.get("number"),
            )
            raise UpstreamFailure("Failed to record GitHub issue on theme.")
        log.info("Theme %s building via issue #%s", theme.id, theme.issue_number)
        return theme, issue

    def _mark_failed(self, theme: Theme) -> None:
        try:
            with committed(self.db):
                self.themes.update(theme, {"status": ThemeStatus.FAILED.value})
        except SQLAlchemyError:
            log.exception("Could not mark theme %s as failed", theme.id)

    def set_theme_enabled(self, theme_id: str, enabled: bool) -> Theme:
        """Flip the enabled flag only; status is never touched."""
        theme = self.themes.get(theme_id)
        if theme is None:
            raise NotFound("Theme not found.")
        if theme.enabled == enabled:
            return theme
        if enabled and theme.status != ThemeStatus.READY.value:
            log.warning("Enabling theme %s while its status is %s", theme.id, theme.status)
        try:
            with committed(self.db):
                self.themes.update(theme, {"enabled": enabled})
        except SQLAlchemyError:
            log.exception("Failed to toggle theme %s", theme.id)
            raise UpstreamFailure("Failed to update theme.")
        log.info("Theme %s %s", theme.id, "enabled" if enabled else "disabled")
        return theme

    def mark_theme_ready(self, theme_id: str) -> Theme:
        theme = self.themes.get(theme_id)
        if theme is None:
            raise NotFound("Theme not found.")
        if theme.status != ThemeStatus.BUILDING.value:
            raise ValidationFailed(f"Only building themes can become ready (current={theme.status}).")
        try:
            with committed(self.db):
                self.themes.update(theme, {"status": ThemeStatus.READY.value})
        except SQLAlchemyError:
            log.exception("Failed to mark theme %s ready", theme.id)
            raise UpstreamFailure("Failed to update theme.")
        log.info("Theme %s ready", theme.id)
        return theme

    def list_themes(self, event_id: Optional[str] = None) -> List[Theme]:
        return self.themes.list(event_id)

    def create_generic_issue(
        self, title: Optional[str], body: Optional[str] = None, labels: Optional[List[str]] = None
    ) -> Dict:
        client = self.issue_client()
        if not title:
            raise ValidationFailed("Issue title is required.")
        try:
            return client.create_issue(title, body or "", labels or DEFAULT_LABELS)
        except Exception:
            log.exception("GitHub issue creation failed")
            raise UpstreamFailure("Failed to create GitHub issue")

    def reconcile_stale_requests(self, older_than_seconds: int) -> List[str]:
        """
        Mark themes stuck in `requested` for longer than the threshold as
        failed. These are rows whose request crashed between the insert and
        the ticket outcome. Returns the ids that were changed.
        """
        cutoff = datetime.now(timezone.utc) - timedelta(seconds=older_than_seconds)
        stale = self.themes.list_requested_before(cutoff)
        ids = []
        with committed(self.db):
            for theme in stale:
                log.warning("Theme %s stuck in requested since %s; marking failed", theme.id, theme.created_at)
                self.themes.update(theme, {"status": ThemeStatus.FAILED.value})
                ids.append(theme.id)
        return ids
