"""
lotocore/utils/config.py
Load env vars and the universe / wheel-template JSON files.
"""
import json
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from lotocore.models.game import UniverseConfig

load_dotenv()

ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = Path(os.getenv("LOTOCORE_CONFIG_DIR", str(ROOT / "config")))

# ── Limits ────────────────────────────────────────────────────────
# Full closings above this many games are refused before enumeration
MAX_CLOSING_GAMES: int = int(os.getenv("LOTOCORE_MAX_CLOSING_GAMES", "40000"))

# ── Universes ─────────────────────────────────────────────────────
DEFAULT_UNIVERSE: str = os.getenv("LOTOCORE_UNIVERSE", "megasena")

UNIVERSE_CONFIG_FILES: dict[str, str] = {
    "megasena":  "universe_megasena.json",
    "lotofacil": "universe_lotofacil.json",
}

UNIVERSE_LABELS: dict[str, str] = {
    "megasena":  "Mega-Sena 6/60",
    "lotofacil": "Lotofácil 15/25",
}

WHEEL_TEMPLATES_FILE = "wheel_templates.json"

_universe_cache: dict[str, UniverseConfig] = {}
_template_table: list[dict[str, Any]] | None = None


def _load_json(filename: str) -> Any:
    path = CONFIG_DIR / filename
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def get_universe_config(name: str | None = None) -> UniverseConfig:
    """Load and cache the universe config for a lottery product."""
    name = name or DEFAULT_UNIVERSE
    if name in _universe_cache:
        return _universe_cache[name]
    filename = UNIVERSE_CONFIG_FILES.get(name)
    if not filename:
        raise ValueError(f"Unknown universe: {name}")
    universe = UniverseConfig.from_dict(name, _load_json(filename))
    _universe_cache[name] = universe
    return universe


def get_template_table() -> list[dict[str, Any]]:
    """Raw wheel-template records, in file order."""
    global _template_table
    if _template_table is None:
        _template_table = _load_json(WHEEL_TEMPLATES_FILE)["templates"]
    return _template_table
