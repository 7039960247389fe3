"""Configuration management.

``Settings`` is a **metaclass-based singleton**: the first call to
``Settings.load()`` creates the instance; every later call returns
the same object.  Use ``update()`` to change values at runtime, or
``reload()`` to re-read everything from disk.

All user-editable configuration lives under ``.metadata/``:

* ``settings.yaml``  – bioRxiv API base URL, server, safety cap, GUI host/port
* ``gemini.yaml``    – Gemini API key and model

On first run, missing files are copied from ``.metadata.example/``.
The ``GEMINI_API_KEY`` (or ``API_KEY``) environment variable overrides
the key stored in ``gemini.yaml``.
"""

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.biorxiv.org/details"
DEFAULT_SERVER = "biorxiv"
DEFAULT_MAX_PAPERS = 2000
DEFAULT_TIMEOUT = 30.0
DEFAULT_MODEL = "gemini-2.5-flash"
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")


# ---------------------------------------------------------------------------
# Singleton metaclass
# ---------------------------------------------------------------------------

class _SettingsMeta(type):
    """Metaclass that enforces a process-wide singleton for *Settings*.

    * First ``Settings(...)`` creates and caches the instance.
    * Later ``Settings(...)`` calls return the cached instance (args ignored).
    """

    _instances: dict[type, Any] = {}

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]


# ---------------------------------------------------------------------------
# Settings dataclass (singleton)
# ---------------------------------------------------------------------------

@dataclass
class Settings(metaclass=_SettingsMeta):
    """Application settings: a singleton with runtime-mutable fields.

    Usage::

        settings = Settings.load()          # first call → create
        settings = Settings.load()          # later → same object
        settings.update(server="medrxiv")   # runtime change
        settings = Settings.reload()        # re-read from disk
    """

    metadata_dir: Path = Path(".metadata")

    # bioRxiv API
    api_base: str = DEFAULT_API_BASE
    server: str = DEFAULT_SERVER
    max_papers: int = DEFAULT_MAX_PAPERS
    timeout: float = DEFAULT_TIMEOUT

    # Gemini
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_MODEL

    # GUI
    host: str = "127.0.0.1"
    port: int = 8000

    # ── Computed properties ────────────────────────────────────────────

    @property
    def has_gemini_key(self) -> bool:
        return bool(self.gemini_api_key)

    # ── Runtime helpers ───────────────────────────────────────────────

    def update(self, **kwargs: Any) -> None:
        """Mutate settings fields at runtime.

        >>> Settings.load().update(max_papers=500)
        """
        for key, value in kwargs.items():
            if not hasattr(self, key):
                raise AttributeError(f"Settings has no field '{key}'")
            setattr(self, key, value)

    # ── Factory / lifecycle ───────────────────────────────────────────

    @classmethod
    def load(cls, base_dir: Optional[Path] = None) -> "Settings":
        """Load or return the singleton Settings instance.

        On first call the singleton is created; subsequent calls return
        the cached instance.  Pass *base_dir* to override the project
        root (defaults to the repository root one level above ``rxivcal/``).
        """
        if cls in _SettingsMeta._instances:
            return _SettingsMeta._instances[cls]  # type: ignore[return-value]

        if base_dir is None:
            base_dir = Path(__file__).resolve().parent.parent

        metadata_dir = base_dir / ".metadata"
        cls._ensure_default_files(base_dir, metadata_dir)

        app = _load_yaml_dict(metadata_dir / "settings.yaml")
        gemini = _load_yaml_dict(metadata_dir / "gemini.yaml")

        return cls(
            metadata_dir=metadata_dir,
            api_base=str(app.get("api_base") or DEFAULT_API_BASE).rstrip("/"),
            server=str(app.get("server") or DEFAULT_SERVER),
            max_papers=_as_int(app.get("max_papers"), DEFAULT_MAX_PAPERS),
            timeout=_as_float(app.get("timeout"), DEFAULT_TIMEOUT),
            gemini_api_key=_resolve_api_key(gemini.get("api_key")),
            gemini_model=str(gemini.get("model") or DEFAULT_MODEL),
            host=str(app.get("host") or "127.0.0.1"),
            port=_as_int(app.get("port"), 8000),
        )

    @classmethod
    def reload(cls, base_dir: Optional[Path] = None) -> "Settings":
        """Discard the current singleton and re-load from disk."""
        cls.reset()
        return cls.load(base_dir)

    @classmethod
    def reset(cls) -> None:
        """Discard the singleton so the next ``load()`` re-creates it."""
        _SettingsMeta._instances.pop(cls, None)

    # ── Private ───────────────────────────────────────────────────────

    @staticmethod
    def _ensure_default_files(base_dir: Path, metadata_dir: Path) -> None:
        """Copy ``.metadata.example/`` templates when real files are missing."""
        metadata_dir.mkdir(parents=True, exist_ok=True)

        example_dir = base_dir / ".metadata.example"
        if not example_dir.exists():
            return

        for example_file in example_dir.iterdir():
            if example_file.is_file():
                target = metadata_dir / example_file.name
                if not target.exists():
                    shutil.copy2(example_file, target)
                    logger.info("Created .metadata/%s from template", example_file.name)


# ---------------------------------------------------------------------------
# YAML loaders
# ---------------------------------------------------------------------------

def _load_yaml_dict(path: Path) -> dict[str, Any]:
    """Load a YAML mapping; missing or malformed files yield ``{}``."""
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _resolve_api_key(from_file: Any) -> Optional[str]:
    for var in API_KEY_ENV_VARS:
        value = os.environ.get(var)
        if value:
            return value
    return str(from_file) if from_file else None


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def save_gemini(path: Path, api_key: Optional[str], model: str = DEFAULT_MODEL) -> None:
    """Persist Gemini credentials to ``gemini.yaml``."""
    with open(path, "w", encoding="utf-8") as f:
        f.write("# Gemini API credentials (GEMINI_API_KEY env var takes precedence)\n")
        yaml.dump(
            {"api_key": api_key or "", "model": model},
            f,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
