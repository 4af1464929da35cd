from dataclasses import dataclass
from typing import List, Optional

from pydantic_settings import BaseSettings

from nightmarket.exceptions import ConfigurationMissing

GITHUB_CONFIG_MISSING = (
    "Missing GitHub configuration. Set GITHUB_TOKEN and provide owner/repo via "
    "GITHUB_REPO_OWNER + GITHUB_REPO_NAME (or a combined slug in either variable)."
)
STORE_CONFIG_MISSING = "Missing store configuration. Set STORE_URL and STORE_KEY."


class Settings(BaseSettings):
    STORE_URL: str = ""
    STORE_KEY: str = ""
    GITHUB_TOKEN: str = ""
    GITHUB_PAT: str = ""
    GITHUB_PERSONAL_ACCESS_TOKEN: str = ""
    GITHUB_REPO_OWNER: str = ""
    GITHUB_REPO_NAME: str = ""
    GITHUB_API_URL: str = "https://api.github.com"
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"
    SESSION_TTL_SECONDS: int = 3600
    THEME_RECONCILE_INTERVAL_SECONDS: int = 0
    THEME_STALE_AFTER_SECONDS: int = 600

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@dataclass(frozen=True)
class GitHubConfig:
    token: str
    owner: str
    repo: str
    api_url: str = "https://api.github.com"


def _split_slug(value: str) -> Optional[List[str]]:
    if value and "/" in value:
        return value.split("/")[:2]
    return None


def resolve_github_config(settings: Settings) -> GitHubConfig:
    """
    Resolve the issue tracker credentials and target repository.

    The token is the first non-empty of GITHUB_TOKEN, GITHUB_PAT and
    GITHUB_PERSONAL_ACCESS_TOKEN. Owner and repo come from
    GITHUB_REPO_OWNER / GITHUB_REPO_NAME, either of which may instead hold a
    combined "owner/repo" slug (a slug in GITHUB_REPO_NAME wins).
    """
    token = (
        settings.GITHUB_TOKEN
        or settings.GITHUB_PAT
        or settings.GITHUB_PERSONAL_ACCESS_TOKEN
    )
    raw_owner = settings.GITHUB_REPO_OWNER.strip()
    raw_name = settings.GITHUB_REPO_NAME.strip()

    slug_from_name = _split_slug(raw_name)
    slug_from_owner = _split_slug(raw_owner)

    if slug_from_name:
        owner, repo = slug_from_name
    elif slug_from_owner:
        owner, repo = slug_from_owner
    else:
        owner, repo = raw_owner, raw_name

    if not token or not owner or not repo:
        raise ConfigurationMissing(GITHUB_CONFIG_MISSING)
    return GitHubConfig(
        token=token,
        owner=owner,
        repo=repo,
        api_url=settings.GITHUB_API_URL.rstrip("/"),
    )


def require_store_config(settings: Settings) -> None:
    if not settings.STORE_URL or not settings.STORE_KEY:
        raise ConfigurationMissing(STORE_CONFIG_MISSING)
