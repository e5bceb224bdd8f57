"""Unit tests for settings loading."""

from flightlink.config import DEFAULT_PROVIDERS, DEFAULT_STORE_PATH, Settings

TOML = """
[aviationstack]
api_key = "toml-key"

[opensky]
username = "pilot"
password = "secret"

[flightlink]
providers = ["opensky", "FreeFlight"]
timeout = 12
store = "/tmp/flights.json"
"""


class TestSettings:
    """Tests for Settings.load."""

    def test_defaults(self, tmp_path) -> None:
        s = Settings.load(environ={}, config_path=tmp_path / "missing.toml")
        assert s.aviationstack_api_key is None
        assert s.rapidapi_key is None
        assert s.providers == DEFAULT_PROVIDERS
        assert s.timeout == 30
        assert s.store_path == DEFAULT_STORE_PATH

    def test_toml(self, tmp_path) -> None:
        path = tmp_path / "flightlink.toml"
        path.write_text(TOML, encoding="utf-8")
        s = Settings.load(environ={}, config_path=path)
        assert s.aviationstack_api_key == "toml-key"
        assert s.opensky_username == "pilot"
        assert s.opensky_password == "secret"
        assert s.providers == ["opensky", "freeflight"]
        assert s.timeout == 12
        assert s.store_path == "/tmp/flights.json"

    def test_environment_wins(self, tmp_path) -> None:
        """Environment variables override the TOML file."""
        path = tmp_path / "flightlink.toml"
        path.write_text(TOML, encoding="utf-8")
        env = {
            "AVIATIONSTACK_API_KEY": "env-key",
            "RAPIDAPI_KEY": "rk",
            "FLIGHTLINK_PROVIDERS": "aerodatabox, aviationstack",
            "FLIGHTLINK_TIMEOUT": "5",
        }
        s = Settings.load(environ=env, config_path=path)
        assert s.aviationstack_api_key == "env-key"
        assert s.rapidapi_key == "rk"
        assert s.providers == ["aerodatabox", "aviationstack"]
        assert s.timeout == 5
        assert s.opensky_username == "pilot"

    def test_config_path_from_environment(self, tmp_path) -> None:
        path = tmp_path / "other.toml"
        path.write_text('[aerodatabox]\napi_key = "from-file"\n', encoding="utf-8")
        s = Settings.load(environ={"FLIGHTLINK_CONFIG": str(path)})
        assert s.rapidapi_key == "from-file"

    def test_bad_timeout_ignored(self, tmp_path) -> None:
        s = Settings.load(environ={"FLIGHTLINK_TIMEOUT": "soon"}, config_path=tmp_path / "x.toml")
        assert s.timeout == 30
