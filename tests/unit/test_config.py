import pytest

import webtraffic.core.config as config_module  # type: ignore[import]

from tests.helpers.webtraffic_imports import ConfigError, SessionConfig, load_configuration

ENV_KEYS = [
    "VERBOSE",
    "MAX_DEPTH",
    "MIN_DEPTH",
    "MAX_WAIT",
    "MIN_WAIT",
    "ROOT_PAUSE",
    "ROOT_URLS",
    "BLACKLIST",
    "USER_AGENT",
]


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    monkeypatch.setattr(config_module, "load_dotenv", lambda *_args, **_kwargs: False)
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config_module.Path, "home", classmethod(lambda cls: tmp_path / "home"))


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


def test_load_configuration_reads_yaml_file(tmp_path):
    path = _write(
        tmp_path / "custom.yaml",
        "root_urls:\n"
        "  - https://a.example/\n"
        "  - https://b.example/\n"
        "blacklist:\n"
        "  - facebook.com\n"
        "min_depth: 1\n"
        "max_depth: 4\n"
        "user_agent: agent/1.0\n",
    )

    config = load_configuration(str(path))

    assert config.root_urls == ["https://a.example/", "https://b.example/"]
    assert config.blacklist == ["facebook.com"]
    assert config.depth_bounds() == (1, 4)
    assert config.wait_bounds() == (5, 10)
    assert config.user_agent == "agent/1.0"
    assert config.source_path == path


def test_load_configuration_discovers_file_in_working_directory(tmp_path):
    _write(tmp_path / ".webtraffic.yaml", "root_urls: [https://cwd.example/]\n")

    config = load_configuration()

    assert config.root_urls == ["https://cwd.example/"]


def test_load_configuration_falls_back_to_home_directory(tmp_path):
    home = tmp_path / "home"
    home.mkdir()
    _write(home / ".webtraffic.yaml", "root_urls: [https://home.example/]\n")

    config = load_configuration()

    assert config.root_urls == ["https://home.example/"]


def test_precedence_defaults_file_environment_flags(monkeypatch, tmp_path):
    path = _write(
        tmp_path / "custom.yaml",
        "root_urls: [https://a.example/]\nmin_wait: 7\nmax_wait: 20\nmax_depth: 12\n",
    )
    monkeypatch.setenv("MAX_WAIT", "30")
    monkeypatch.setenv("BLACKLIST", "ads.example, tracker.example")
    monkeypatch.setenv("VERBOSE", "true")

    config = load_configuration(str(path), {"max_depth": 15, "min_depth": None})

    assert config.min_wait == 7
    assert config.max_wait == 30
    assert config.max_depth == 15
    assert config.min_depth == 3
    assert config.blacklist == ["ads.example", "tracker.example"]
    assert config.verbose is True


def test_unreadable_file_is_logged_not_fatal(monkeypatch, tmp_path, caplog):
    monkeypatch.setenv("ROOT_URLS", "https://env.example/")

    config = load_configuration(str(tmp_path / "missing.yaml"))

    assert config.root_urls == ["https://env.example/"]
    assert config.source_path is None
    assert "Failed to read config file" in caplog.text


def test_missing_root_urls_is_rejected():
    with pytest.raises(ConfigError):
        load_configuration()


def test_inverted_wait_bounds_are_rejected(monkeypatch):
    monkeypatch.setenv("ROOT_URLS", "https://a.example/")

    with pytest.raises(ConfigError):
        load_configuration(overrides={"min_wait": 11, "max_wait": 10})


def test_inverted_depth_bounds_are_rejected(monkeypatch):
    monkeypatch.setenv("ROOT_URLS", "https://a.example/")

    with pytest.raises(ConfigError):
        load_configuration(overrides={"min_depth": 4, "max_depth": 2})


def test_non_numeric_value_is_rejected(monkeypatch):
    monkeypatch.setenv("ROOT_URLS", "https://a.example/")
    monkeypatch.setenv("MAX_DEPTH", "deep")

    with pytest.raises(ConfigError):
        load_configuration()


def test_session_config_store_round_trip():
    config = SessionConfig(root_urls=["https://a.example/"])

    config.set("min_wait", "8")
    config.set("blacklist", ["x.example"])

    assert config.get("min_wait") == 8
    assert config.get("blacklist") == ["x.example"]
    assert "source_path" not in config.as_dict()
    with pytest.raises(KeyError):
        config.get("unknown")


def test_get_returns_copy_of_lists():
    config = SessionConfig(root_urls=["https://a.example/"])

    config.get("blacklist").append("leak.example")

    assert config.blacklist == []


def test_add_to_blacklist_only_grows_and_skips_duplicates():
    config = SessionConfig(root_urls=["https://a.example/"])

    assert config.add_to_blacklist("https://b.example/") is True
    assert config.add_to_blacklist("https://b.example/") is False
    assert config.blacklist == ["https://b.example/"]


def test_blank_list_items_are_dropped_on_load(tmp_path):
    path = _write(
        tmp_path / "custom.yaml",
        "root_urls: [https://a.example/]\n"
        "blacklist:\n"
        "  - facebook.com\n"
        "  -\n"
        '  - ""\n'
        '  - "   "\n'
        "  - ads.example\n",
    )

    config = load_configuration(str(path))

    assert config.blacklist == ["facebook.com", "ads.example"]
