import pytest

from agility.harvester import config
from agility.harvester.config_validation import validate_runtime_config


def test_cli_requires_root_site(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "ROOT_SITE", "")
    monkeypatch.setattr(config, "USER_EMAIL", "a@example.com")
    monkeypatch.setattr(config, "USER_PASSWORD", "pw")
    with pytest.raises(ValueError, match="ROOT_SITE"):
        validate_runtime_config("cli")


def test_cli_requires_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "USER_EMAIL", "a@example.com")
    monkeypatch.setattr(config, "USER_PASSWORD", "")
    with pytest.raises(ValueError, match="USER_PASSWORD"):
        validate_runtime_config("cli")


def test_replay_does_not_need_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "ROOT_SITE", "")
    validate_runtime_config("replay")


def test_lane_count_clamped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "MAX_PARALLEL_JOBS", 0)

    validate_runtime_config("tests")

    assert config.MAX_PARALLEL_JOBS == 1


@pytest.mark.parametrize(
    "field", ["CHEVRON_EXPANSION_DELAY", "CHEVRON_SETTLE_SECONDS", "NAV_RETRY_INTERVAL_SECONDS"]
)
def test_negative_delay_rejected(monkeypatch: pytest.MonkeyPatch, field: str) -> None:
    monkeypatch.setattr(config, field, -1)
    with pytest.raises(ValueError, match=field):
        validate_runtime_config("tests")


def test_site_url_joins_with_single_slashes(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "ROOT_SITE", "https://agility.example/")

    assert config.site_url(*config.INDEX_PATH) == "https://agility.example/zone/events/past_all"
    assert config.site_url("/user/", "login") == "https://agility.example/user/login"
    assert config.site_url() == "https://agility.example"


def test_chevron_delay_is_configured_in_milliseconds(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "CHEVRON_EXPANSION_DELAY", 250)

    assert config.chevron_expansion_delay_seconds() == 0.25
