import pytest

from conftest import make_settings
from nightmarket.config import require_store_config, resolve_github_config
from nightmarket.exceptions import ConfigurationMissing


def _github(tmp_path, **kw):
    values = dict(GITHUB_TOKEN="", GITHUB_REPO_OWNER="", GITHUB_REPO_NAME="")
    values.update(kw)
    return resolve_github_config(make_settings(tmp_path, **values))


def test_separate_owner_and_repo(tmp_path):
    cfg = _github(tmp_path, GITHUB_TOKEN="t1", GITHUB_REPO_OWNER="acme", GITHUB_REPO_NAME="shop")
    assert (cfg.token, cfg.owner, cfg.repo) == ("t1", "acme", "shop")
    assert cfg.api_url == "https://api.github.com"


def test_combined_slug_in_either_variable(tmp_path):
    cfg = _github(tmp_path, GITHUB_TOKEN="t", GITHUB_REPO_NAME="acme/shop")
    assert (cfg.owner, cfg.repo) == ("acme", "shop")

    cfg = _github(tmp_path, GITHUB_TOKEN="t", GITHUB_REPO_OWNER="acme/shop")
    assert (cfg.owner, cfg.repo) == ("acme", "shop")

    # a slug in the repo name takes precedence
    cfg = _github(tmp_path, GITHUB_TOKEN="t", GITHUB_REPO_OWNER="other/place", GITHUB_REPO_NAME="acme/shop")
    assert (cfg.owner, cfg.repo) == ("acme", "shop")


def test_token_priority(tmp_path):
    cfg = _github(
        tmp_path,
        GITHUB_TOKEN="",
        GITHUB_PAT="pat",
        GITHUB_PERSONAL_ACCESS_TOKEN="personal",
        GITHUB_REPO_NAME="acme/shop",
    )
    assert cfg.token == "pat"

    cfg = _github(tmp_path, GITHUB_PERSONAL_ACCESS_TOKEN="personal", GITHUB_REPO_NAME="acme/shop")
    assert cfg.token == "personal"


@pytest.mark.parametrize(
    "values",
    [
        {"GITHUB_REPO_NAME": "acme/shop"},
        {"GITHUB_TOKEN": "t", "GITHUB_REPO_OWNER": "acme"},
        {"GITHUB_TOKEN": "t"},
    ],
)
def test_missing_github_config(tmp_path, values):
    with pytest.raises(ConfigurationMissing, match="Missing GitHub configuration"):
        _github(tmp_path, **values)


def test_store_config_required(tmp_path):
    require_store_config(make_settings(tmp_path))
    with pytest.raises(ConfigurationMissing, match="Missing store configuration"):
        require_store_config(make_settings(tmp_path, STORE_KEY=""))
