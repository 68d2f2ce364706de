"""Hilfsfunktionen zum Laden der zentralen Konfigurationsdatei.

Das Modul kapselt den Zugriff auf ``config.toml`` und stellt Standardwerte für
Parser, Textextraktion, Export und den Deck-Loader bereit. `load_config` wird
u.a. von `mcqkarten.pipeline`, `mcqkarten.doc_ingest` und dem CLI verwendet.
"""
import copy
from pathlib import Path
from typing import Any, Dict

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback für Python <3.11
    import tomli as tomllib  # type: ignore

DEFAULT_JSON_NAME = "flashcards.json"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "parser": {
        # Ab dieser Zeilenzahl wird auf die quadratische Laufzeit hingewiesen
        "large_document_lines": 5000,
    },
    "extraction": {
        "join_hyphenation": True,
        "drop_line_patterns": [],
    },
    "export": {
        "json_name": DEFAULT_JSON_NAME,
        "json_indent": 2,
        "csv_delimiter": ";",
    },
    "viewer": {
        "deck_url": DEFAULT_JSON_NAME,
        "timeout_sec": 10,
    },
    "logging": {
        "level": "INFO",
    },
}

REQUIRED_SECTIONS = ("parser", "extraction", "export", "viewer")

_TYPES: Dict[str, Dict[str, tuple]] = {
    "parser": {"large_document_lines": (int,)},
    "extraction": {"join_hyphenation": (bool,), "drop_line_patterns": (list,)},
    "export": {"json_name": (str,), "json_indent": (int,), "csv_delimiter": (str,)},
    "viewer": {"deck_url": (str,), "timeout_sec": (int, float)},
}

_CFG_CACHE: Dict[str, Any] | None = None

from .logging_utils import get_logger

logger = get_logger(__name__)


def load_config(path: str | None = None) -> Dict[str, Any]:
    """Load configuration from ``config.toml``.

    The default file (one directory above this package) is cached so repeated
    calls are cheap; an explicit ``path`` is always read fresh. Missing files
    result in an empty dictionary instead of an exception, allowing callers to
    fall back to `DEFAULTS`.
    """

    global _CFG_CACHE
    if path is None and _CFG_CACHE is not None:
        return _CFG_CACHE

    cfg_path = Path(path) if path else Path(__file__).resolve().parent.parent / "config.toml"
    try:
        with cfg_path.open("rb") as f:
            cfg = tomllib.load(f)
    except FileNotFoundError:
        cfg = {}
    except tomllib.TOMLDecodeError as exc:
        logger.warning("Ungültige Konfigurationsdatei %s: %s", cfg_path, exc)
        cfg = {}
    if path is None:
        _CFG_CACHE = cfg
    return cfg


def merged_config(cfg: Dict[str, Any] | None = None) -> Dict[str, Dict[str, Any]]:
    """Return `DEFAULTS` overlaid section by section with ``cfg``."""

    if cfg is None:
        cfg = load_config()
    merged = copy.deepcopy(DEFAULTS)
    for section, values in cfg.items():
        if isinstance(values, dict):
            merged.setdefault(section, {}).update(values)
    return merged


def get_setting(section: str, key: str, cfg: Dict[str, Any] | None = None) -> Any:
    return merged_config(cfg)[section][key]


def validate_config(cfg: Dict[str, Any]) -> None:
    """Prüft eine geladene Konfiguration auf Pflichtabschnitte und Typen.

    Raises:
        ValueError: wenn ein Abschnitt fehlt oder ein Wert den falschen Typ hat.
    """

    for section in REQUIRED_SECTIONS:
        if section not in cfg or not isinstance(cfg[section], dict):
            raise ValueError(f"Konfigurationsabschnitt [{section}] fehlt")

    for section, keys in _TYPES.items():
        for key, types in keys.items():
            if key not in cfg[section]:
                continue
            value = cfg[section][key]
            # bool ist in Python ein int – hier nicht als Zahl akzeptieren
            if isinstance(value, bool) and bool not in types:
                raise ValueError(f"{section}.{key} hat einen ungültigen Typ")
            if not isinstance(value, types):
                raise ValueError(f"{section}.{key} hat einen ungültigen Typ")

    if len(cfg["export"].get("csv_delimiter", ";")) != 1:
        raise ValueError("export.csv_delimiter muss genau ein Zeichen sein")
