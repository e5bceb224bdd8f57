"""Runtime settings.

Order of precedence:
1) Environment variables
2) TOML file named by FLIGHTLINK_CONFIG (default config/flightlink.toml)
3) Built-in defaults

TOML layout::

    [aviationstack]
    api_key = "..."

    [aerodatabox]
    api_key = "..."

    [opensky]
    username = "..."
    password = "..."

    [flightlink]
    providers = ["aviationstack", "aerodatabox"]
    timeout = 30
    store = "~/.flightlink/user_flights.json"
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

DEFAULT_CONFIG_PATH = Path("config") / "flightlink.toml"
DEFAULT_PROVIDERS = ["aviationstack", "aerodatabox"]
DEFAULT_TIMEOUT = 30
DEFAULT_STORE_PATH = "~/.flightlink/user_flights.json"


def _read_toml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, "rb") as f:
        return tomllib.load(f)


def _lookup(cfg: Mapping[str, Any], *path: str) -> Any:
    node: Any = cfg
    for key in path:
        if not isinstance(node, Mapping) or key not in node:
            return None
        node = node[key]
    return node


def _split_names(value: Any) -> Optional[List[str]]:
    if isinstance(value, str):
        names = [v.strip().lower() for v in value.split(",")]
    elif isinstance(value, list):
        names = [str(v).strip().lower() for v in value]
    else:
        return None
    return [n for n in names if n]


@dataclass
class Settings:
    """Provider credentials and service options."""

    aviationstack_api_key: Optional[str] = None
    rapidapi_key: Optional[str] = None
    opensky_username: Optional[str] = None
    opensky_password: Optional[str] = None
    providers: List[str] = field(default_factory=lambda: list(DEFAULT_PROVIDERS))
    timeout: int = DEFAULT_TIMEOUT
    store_path: str = DEFAULT_STORE_PATH

    @classmethod
    def load(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        config_path: Optional[Path] = None,
    ) -> "Settings":
        env = os.environ if environ is None else environ
        path = config_path or Path(env.get("FLIGHTLINK_CONFIG") or DEFAULT_CONFIG_PATH)
        cfg = _read_toml(path)

        def env_or(env_name: str, *cfg_path: str) -> Optional[str]:
            if env.get(env_name):
                return env[env_name]
            val = _lookup(cfg, *cfg_path)
            return val if isinstance(val, str) and val else None

        providers = _split_names(env.get("FLIGHTLINK_PROVIDERS") or _lookup(cfg, "flightlink", "providers"))

        timeout = DEFAULT_TIMEOUT
        raw_timeout = env.get("FLIGHTLINK_TIMEOUT")
        if raw_timeout and raw_timeout.isdigit():
            timeout = int(raw_timeout)
        elif isinstance(_lookup(cfg, "flightlink", "timeout"), int):
            timeout = _lookup(cfg, "flightlink", "timeout")

        return cls(
            aviationstack_api_key=env_or("AVIATIONSTACK_API_KEY", "aviationstack", "api_key"),
            rapidapi_key=env_or("RAPIDAPI_KEY", "aerodatabox", "api_key"),
            opensky_username=env_or("OPENSKY_USERNAME", "opensky", "username"),
            opensky_password=env_or("OPENSKY_PASSWORD", "opensky", "password"),
            providers=providers if providers is not None else list(DEFAULT_PROVIDERS),
            timeout=timeout,
            store_path=env_or("FLIGHTLINK_STORE", "flightlink", "store") or DEFAULT_STORE_PATH,
        )
