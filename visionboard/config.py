# Vision board configuration
# Override defaults via visionboard.yaml, environment variables or CLI args.

import os
import yaml
from pathlib import Path
from dataclasses import dataclass
from typing import Optional

CONFIG_PATH = Path(__file__).parent.parent / "visionboard.yaml"

ENV_OVERRIDES = {
    "VISIONBOARD_DATA": "data_file",
    "VISIONBOARD_LOCAL_DB": "local_db",
    "VISIONBOARD_API_URL": "api_base_url",
}


@dataclass
class Config:
    """Runtime configuration for the board server, client and session."""

    # HTTP server
    host: str = "127.0.0.1"
    port: int = 5000
    data_file: str = "data/board.json"

    # Local store
    local_db: str = "~/.local/share/visionboard/local.db"
    local_key: str = "dreamBoard2025"
    image_limit: int = 1_000_000  # chars kept per sticker image

    # API client
    api_base_url: str = "http://localhost:5000/api"
    request_timeout: Optional[float] = None

    # Canvas size used to place new items
    viewport_width: int = 1280
    viewport_height: int = 800

    log_level: str = "INFO"

    def resolve_paths(self):
        """Expand ~ in file paths."""
        self.data_file = str(Path(self.data_file).expanduser())
        self.local_db = str(Path(self.local_db).expanduser())

    def apply_env(self):
        for env_name, attr in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value:
                setattr(self, attr, value)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load config from YAML file, falling back to defaults."""
        cfg_path = Path(path) if path else CONFIG_PATH
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
                cfg = cls(**{k: v for k, v in data.items() if hasattr(cls, k)})
            except Exception:
                cfg = cls()
        else:
            cfg = cls()
        cfg.apply_env()
        cfg.resolve_paths()
        return cfg
