# minimaxchess/config.py
from dataclasses import dataclass, field
from typing import Dict, List
import os
import tomllib

EVALUATION_NAMES = ("piece_count", "weighted_piece_count", "weighted_positional")

MIN_AGGRESSION = 0
MAX_AGGRESSION = 200

# Defaults (centipawns). The king value keeps the search away from lines that
# lose the king, which pseudo-legal search can otherwise wander into.
PIECE_VALUES = {
    "PAWN": 100,
    "KNIGHT": 320,
    "BISHOP": 330,
    "ROOK": 500,
    "QUEEN": 900,
    "KING": 20000,
}

# Positional bonuses seen from White's side: row 0 is the far (Black) back rank.
# Black pieces read the same tables mirrored top to bottom.
POSITIONAL_TABLES = {
    "PAWN": [
        [0, 0, 0, 0, 0, 0, 0, 0],
        [50, 50, 50, 50, 50, 50, 50, 50],
        [10, 10, 20, 30, 30, 20, 10, 10],
        [5, 5, 10, 25, 25, 10, 5, 5],
        [0, 0, 0, 20, 20, 0, 0, 0],
        [5, -5, -10, 0, 0, -10, -5, 5],
        [5, 10, 10, -20, -20, 10, 10, 5],
        [0, 0, 0, 0, 0, 0, 0, 0],
    ],
    "KNIGHT": [
        [-50, -40, -30, -30, -30, -30, -40, -50],
        [-40, -20, 0, 0, 0, 0, -20, -40],
        [-30, 0, 10, 15, 15, 10, 0, -30],
        [-30, 5, 15, 20, 20, 15, 5, -30],
        [-30, 0, 15, 20, 20, 15, 0, -30],
        [-30, 5, 10, 15, 15, 10, 5, -30],
        [-40, -20, 0, 5, 5, 0, -20, -40],
        [-50, -40, -30, -30, -30, -30, -40, -50],
    ],
    "BISHOP": [
        [-20, -10, -10, -10, -10, -10, -10, -20],
        [-10, 0, 0, 0, 0, 0, 0, -10],
        [-10, 0, 5, 10, 10, 5, 0, -10],
        [-10, 5, 5, 10, 10, 5, 5, -10],
        [-10, 0, 10, 10, 10, 10, 0, -10],
        [-10, 10, 10, 10, 10, 10, 10, -10],
        [-10, 5, 0, 0, 0, 0, 5, -10],
        [-20, -10, -10, -10, -10, -10, -10, -20],
    ],
    "ROOK": [
        [0, 0, 0, 0, 0, 0, 0, 0],
        [5, 10, 10, 10, 10, 10, 10, 5],
        [-5, 0, 0, 0, 0, 0, 0, -5],
        [-5, 0, 0, 0, 0, 0, 0, -5],
        [-5, 0, 0, 0, 0, 0, 0, -5],
        [-5, 0, 0, 0, 0, 0, 0, -5],
        [-5, 0, 0, 0, 0, 0, 0, -5],
        [0, 0, 0, 5, 5, 0, 0, 0],
    ],
    "QUEEN": [
        [-20, -10, -10, -5, -5, -10, -10, -20],
        [-10, 0, 0, 0, 0, 0, 0, -10],
        [-10, 0, 5, 5, 5, 5, 0, -10],
        [-5, 0, 5, 5, 5, 5, 0, -5],
        [0, 0, 5, 5, 5, 5, 0, -5],
        [-10, 5, 5, 5, 5, 5, 0, -10],
        [-10, 0, 5, 0, 0, 0, 0, -10],
        [-20, -10, -10, -5, -5, -10, -10, -20],
    ],
    "KING": [
        [-30, -40, -40, -50, -50, -40, -40, -30],
        [-30, -40, -40, -50, -50, -40, -40, -30],
        [-30, -40, -40, -50, -50, -40, -40, -30],
        [-30, -40, -40, -50, -50, -40, -40, -30],
        [-20, -30, -30, -40, -40, -30, -30, -20],
        [-10, -20, -20, -20, -20, -20, -20, -10],
        [20, 20, 0, 0, 0, 0, 20, 20],
        [20, 30, 10, 0, 0, 10, 30, 20],
    ],
}


@dataclass
class SearchConfig:
    depth: int = 3
    aggression: int = 100  # percent weight on the opponent's material
    evaluation: str = "weighted_positional"

    def validate(self):
        validate_search_settings(self.depth, self.aggression, self.evaluation)


@dataclass
class EvalConfig:
    piece_values: Dict[str, int] = field(default_factory=lambda: PIECE_VALUES.copy())
    positional_tables: Dict[str, List[List[int]]] = field(
        default_factory=lambda: {k: [row[:] for row in v] for k, v in POSITIONAL_TABLES.items()}
    )


@dataclass
class UIConfig:
    engine_name: str = "MinimaxChess"
    api_port: int = 8000
    human_side: str = "white"


@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "ui"):
            if section in raw:
                target = getattr(cfg, section)
                for k, v in raw[section].items():
                    if not hasattr(target, k):
                        continue
                    current = getattr(target, k)
                    if isinstance(current, dict) and isinstance(v, dict):
                        v = {**current, **v}
                    setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = raw["log_level"]
        return cfg


def validate_search_settings(depth: int, aggression: float, evaluation: str):
    """Raise ValueError for settings the search cannot run with."""
    if depth < 1:
        raise ValueError(f"Search depth must be at least 1, got {depth}")
    if not MIN_AGGRESSION <= aggression <= MAX_AGGRESSION:
        raise ValueError(
            f"Aggression must be between {MIN_AGGRESSION} and {MAX_AGGRESSION}, got {aggression}"
        )
    if evaluation not in EVALUATION_NAMES:
        raise ValueError(f"Unknown evaluation {evaluation!r}, expected one of {EVALUATION_NAMES}")


def apply_env_overrides(cfg: Config, environ=os.environ) -> Config:
    """Apply MINIMAXCHESS_SEARCH_DEPTH when it holds a usable depth."""
    override_depth = environ.get("MINIMAXCHESS_SEARCH_DEPTH", "")
    if override_depth.isdigit() and int(override_depth) >= 1:
        cfg.search.depth = int(override_depth)
    return cfg


# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("MINIMAXCHESS_CONFIG_TOML", "config.toml"))
# allow env override of depth for quick debugging
apply_env_overrides(CONFIG)
