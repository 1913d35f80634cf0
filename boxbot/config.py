# boxbot/config.py
from dataclasses import dataclass, field
from typing import Optional
import logging
import os
import tomllib  # python >=3.11

logger = logging.getLogger(__name__)

# Defaults (score units: one captured box = 100)
EVAL_WEIGHTS = {
    "box_weight": 100,
    "opponent_threat_weight": 25,
    "own_threat_weight": 10,
    "mobility_weight": 1,
}

@dataclass
class SearchConfig:
    depth: int = 4
    fallback_seed: Optional[int] = None  # None seeds the fallback RNG from the OS

@dataclass
class EvalConfig:
    box_weight: int = EVAL_WEIGHTS["box_weight"]
    opponent_threat_weight: int = EVAL_WEIGHTS["opponent_threat_weight"]
    own_threat_weight: int = EVAL_WEIGHTS["own_threat_weight"]
    mobility_weight: int = EVAL_WEIGHTS["mobility_weight"]

@dataclass
class ServerConfig:
    host: str = "localhost"
    port: int = 80
    bot_id: int = 1700
    table: int = 17
    password: int = 1751
    opponent: int = -2  # RANDOM_BOT_SECOND
    board_size: int = 4
    connect_timeout: Optional[float] = None

@dataclass
class UIConfig:
    engine_name: str = "boxbot"

@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        # unknown sections and keys are ignored
        for section in ("search", "eval", "server", "ui"):
            if section in raw:
                target = getattr(cfg, section)
                for k, v in raw[section].items():
                    if hasattr(target, k):
                        setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"])
        return cfg

# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("BOXBOT_CONFIG_TOML", "config.toml"))
# allow env override of depth for quick debugging
override_depth = os.environ.get("BOXBOT_SEARCH_DEPTH")
if override_depth:
    try:
        CONFIG.search.depth = int(override_depth)
    except ValueError:
        logger.warning("Ignoring BOXBOT_SEARCH_DEPTH=%r: not an integer", override_depth)
