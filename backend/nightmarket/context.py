import threading
from typing import Callable, Optional

from nightmarket.adapters.github_issues import GitHubIssueClient
from nightmarket.adapters.identity_provider import IdentityProvider
from nightmarket.config import GitHubConfig, Settings, require_store_config, resolve_github_config
from nightmarket.db import Store

IssueClientFactory = Callable[[GitHubConfig], GitHubIssueClient]


class AppContext:
    """
    Application-scoped collaborators, built once by create_app and handed to
    request handlers through dependencies. The store and identity provider
    are created on first use so a process with missing configuration still
    starts and reports the problem per request.
    """

    def __init__(
        self,
        settings: Settings,
        issue_client_factory: Optional[IssueClientFactory] = None,
    ):
        self.settings = settings
        self.issue_client_factory = issue_client_factory or GitHubIssueClient
        self._store: Optional[Store] = None
        self._identity: Optional[IdentityProvider] = None
        self._lock = threading.Lock()

    @property
    def store(self) -> Store:
        require_store_config(self.settings)
        with self._lock:
            if self._store is None:
                self._store = Store(self.settings.STORE_URL)
                self._store.init_db()
            return self._store

    @property
    def identity(self) -> IdentityProvider:
        require_store_config(self.settings)
        with self._lock:
            if self._identity is None:
                self._identity = IdentityProvider(
                    self.settings.STORE_KEY, ttl_seconds=self.settings.SESSION_TTL_SECONDS
                )
            return self._identity

    def issue_client(self) -> GitHubIssueClient:
        """Raises ConfigurationMissing when the token or owner/repo is absent."""
        return self.issue_client_factory(resolve_github_config(self.settings))

    def close(self) -> None:
        with self._lock:
            if self._store is not None:
                self._store.dispose()
                self._store = None
