from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from nightmarket.adapters.github_issues import IssueCreationError
from nightmarket.config import Settings
from nightmarket.main import create_app
from nightmarket.models.event import Event
from nightmarket.models.theme import Theme


class FakeIssueTracker:
    """Stands in for GitHubIssueClient; also acts as its factory."""

    def __init__(self):
        self.calls = []
        self.fail = False
        self.config = None
        self._next_number = 41

    def __call__(self, config):
        self.config = config
        return self

    def create_issue(self, title, body="", labels=None):
        self.calls.append({"title": title, "body": body, "labels": labels})
        if self.fail:
            raise IssueCreationError("GitHub responded 502: bad gateway", status_code=502)
        self._next_number += 1
        return {
            "number": self._next_number,
            "html_url": f"https://github.com/night-market/storefront/issues/{self._next_number}",
            "title": title,
            "labels": [{"name": l} for l in (labels or [])],
        }


def make_settings(tmp_path, **overrides):
    values = dict(
        STORE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        STORE_KEY="test-store-key",
        GITHUB_TOKEN="ghp_test",
        GITHUB_PAT="",
        GITHUB_PERSONAL_ACCESS_TOKEN="",
        GITHUB_REPO_OWNER="night-market",
        GITHUB_REPO_NAME="storefront",
        THEME_RECONCILE_INTERVAL_SECONDS=0,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def tracker():
    return FakeIssueTracker()


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def app(settings, tracker):
    return create_app(settings, issue_client_factory=tracker)


@pytest.fixture
def ctx(app):
    return app.state.context


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(ctx):
    session = ctx.identity.issue("admin-1", email="admin@example.com")
    return {"Authorization": f"Bearer {session.access_token}"}


@pytest.fixture
def db(ctx):
    s = ctx.store.session()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def event(db):
    e = Event(title="Fall Launch", status="published")
    db.add(e)
    db.commit()
    return e


def add_theme(db, event, title, status="ready", enabled=True, updated_at=None):
    t = Theme(event_id=event.id, title=title, status=status, enabled=enabled)
    if updated_at is not None:
        t.updated_at = updated_at
    db.add(t)
    db.commit()
    return t


def at(day, hour=0):
    return datetime(2025, 12, day, hour, tzinfo=timezone.utc)
