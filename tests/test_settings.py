import pytest

from animevote.config.settings import DEFAULT_DATABASE_URL, Settings

ENV_KEYS = [
    "DATABASE_URL",
    "TIMEZONE",
    "ENVIRONMENT",
    "ROLLOVER_MAX_ATTEMPTS",
    "ROLLOVER_RETRY_SECONDS",
    "ROLLOVER_MISFIRE_GRACE_SECONDS",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    s = Settings.load()
    assert s.database_url == DEFAULT_DATABASE_URL
    assert s.timezone == "Asia/Seoul"
    assert s.rollover_max_attempts == 3
    assert s.is_dev is False


def test_env_overrides(clean_env):
    clean_env.setenv("DATABASE_URL", "sqlite+aiosqlite:///./other.db")
    clean_env.setenv("TIMEZONE", "UTC")
    clean_env.setenv("ENVIRONMENT", "development")
    clean_env.setenv("ROLLOVER_MAX_ATTEMPTS", "5")

    s = Settings.load()
    assert s.database_url == "sqlite+aiosqlite:///./other.db"
    assert s.timezone == "UTC"
    assert s.is_dev is True
    assert s.rollover_max_attempts == 5


@pytest.mark.parametrize(
    "key, value",
    [
        ("ROLLOVER_MAX_ATTEMPTS", "many"),
        ("ROLLOVER_MAX_ATTEMPTS", "0"),
        ("ROLLOVER_RETRY_SECONDS", "-1"),
        ("TIMEZONE", "Mars/Olympus_Mons"),
    ],
)
def test_bad_values_fail_fast(clean_env, key, value):
    clean_env.setenv(key, value)
    with pytest.raises(RuntimeError):
        Settings.load()
