import pytest
from pydantic import ValidationError

from websearch.config.schema import Config, SessionConfig


def test_session_config_defaults() -> None:
    config = SessionConfig()

    assert config.browser_kind == "chromium"
    assert config.is_headless is True
    assert config.is_debug is False
    assert config.max_images == 10
    assert config.timeout_budget == 5000
    assert config.install_system_deps is False


def test_unknown_browser_falls_back_to_default() -> None:
    assert SessionConfig(browser="netscape").browser_kind == "chromium"
    assert SessionConfig(browser="").browser_kind == "chromium"
    assert SessionConfig(browser="Firefox").browser_kind == "firefox"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("true", True), ("FALSE", False), ("0", False), ("yes", True), ("maybe", True), (None, True)],
)
def test_headless_flag_parsing(raw, expected) -> None:
    assert SessionConfig(headless=raw).is_headless is expected


def test_malformed_debug_flag_defaults_to_false() -> None:
    assert SessionConfig(debug="sure").is_debug is False
    assert SessionConfig(debug="on").is_debug is True


def test_timeout_budget_long_only_for_visible_debug_browser() -> None:
    assert SessionConfig(debug=True, headless=False).timeout_budget == 300000
    assert SessionConfig(debug=True, headless=True).timeout_budget == 5000
    assert SessionConfig(debug=False, headless=False).timeout_budget == 5000


def test_session_config_is_immutable() -> None:
    config = SessionConfig()
    with pytest.raises(ValidationError):
        config.headless = False  # type: ignore[misc]


def test_chromium_launch_arguments() -> None:
    kwargs = SessionConfig(headless=False).launch_arguments()

    assert kwargs["headless"] is False
    assert "--no-sandbox" in kwargs["args"]
    assert "--disable-gpu" in kwargs["args"]
    assert "--lang=en-GB" in kwargs["args"]
    assert "channel" not in kwargs


def test_branded_chromium_launch_arguments_set_channel() -> None:
    config = SessionConfig()

    assert config.launch_arguments("chrome")["channel"] == "chrome"
    assert config.launch_arguments("msedge")["channel"] == "msedge"


def test_firefox_launch_arguments_force_locale() -> None:
    kwargs = SessionConfig(browser="firefox").launch_arguments()

    assert kwargs == {
        "headless": True,
        "firefox_user_prefs": {"intl.accept_languages": "en,en_US"},
    }


def test_webkit_launch_arguments_only_toggle_headless() -> None:
    assert SessionConfig().launch_arguments("webkit") == {"headless": True}


def test_config_accepts_camel_case_keys() -> None:
    config = Config.model_validate(
        {
            "session": {"maxImages": 3, "autoInstallBrowsers": "false", "installSystemDeps": "yes"},
            "server": {"port": 9000},
        }
    )

    assert config.session.max_images == 3
    assert config.session.auto_install_browsers is False
    assert config.session.install_system_deps is True
    assert config.server.port == 9000
