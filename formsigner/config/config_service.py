"""Typed, layered configuration loader with precedence handling."""
from __future__ import annotations

import os
import configparser
from dataclasses import dataclass, field, fields
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Tuple, get_type_hints

# --------------------------------------------------------------------------- #
#  Paths & default definitions
# --------------------------------------------------------------------------- #

CONFIG_DIR = Path(__file__).resolve().parent
DEFAULTS_INI = CONFIG_DIR / "defaults.ini"
ENV_PREFIX = "FORMSIGNER_"

DEFAULT_DENYLIST = (
    "Complete and print",
    "Print",
    "Reset Form",
    "Signature Required",
)


_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "General": {
        "app_name": "FormSigner",
        "log_level": "INFO",
    },
    "Loader": {
        "form_url": "",
        "timeout_sec": "30",
        "denylist": "\n".join(DEFAULT_DENYLIST),
    },
    "Sanitizer": {
        "first_match_only": "true",
    },
    "Signature": {
        "target_width": "200",
        "target_height": "80",
        "bottom_offset": "80",
        "line_width": "2",
        "color": "#000000",
    },
    "Export": {
        "output_dir": "~/Documents/FormSigner",
        "file_name": "filled-form.pdf",
        "flatten_for_print": "true",
        "print_command": "lp",
    },
}


# --------------------------------------------------------------------------- #
#  Datamodels
# --------------------------------------------------------------------------- #

@dataclass
class GeneralConfig:
    app_name: str = "FormSigner"
    log_level: str = "INFO"


@dataclass
class LoaderConfig:
    form_url: str = ""
    timeout_sec: float = 30.0
    denylist: List[str] = field(default_factory=lambda: list(DEFAULT_DENYLIST))


@dataclass
class SanitizerConfig:
    first_match_only: bool = True


@dataclass
class SignatureConfig:
    """Target rectangle (points) and stroke style for new ink signatures."""
    target_width: float = 200.0
    target_height: float = 80.0
    bottom_offset: float = 80.0
    line_width: float = 2.0
    color: str = "#000000"


@dataclass
class ExportConfig:
    output_dir: Path = Path("~/Documents/FormSigner")
    file_name: str = "filled-form.pdf"
    flatten_for_print: bool = True
    print_command: str = "lp"

    @property
    def output_path(self) -> Path:
        return self.output_dir / self.file_name


@dataclass
class AppConfig:
    general: GeneralConfig
    loader: LoaderConfig
    sanitizer: SanitizerConfig
    signature: SignatureConfig
    export: ExportConfig


# --------------------------------------------------------------------------- #
#  Helpers
# --------------------------------------------------------------------------- #

def _cp_to_dict(cp: configparser.ConfigParser) -> Dict[str, Dict[str, Any]]:
    data: Dict[str, Dict[str, Any]] = {}
    for section in cp.sections():
        data[section] = {k: v for k, v in cp.items(section)}
    return data


def _apply(target: Dict[str, Dict[str, Any]], source: Dict[str, Dict[str, Any]],
           layer: str, origin: str,
           sources: Dict[Tuple[str, str], Dict[str, str]]) -> None:
    for section, items in source.items():
        sec = target.setdefault(section, {})
        for key, value in items.items():
            sec[key] = value
            sources[(section, key)] = {"layer": layer, "source": origin}


def _split_lines(value: Any) -> List[str]:
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [line.strip() for line in str(value).splitlines() if line.strip()]


def _cast(value: Any, typ: Any) -> Any:
    if typ is Path:
        return Path(str(value)).expanduser()
    if typ is bool:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"1", "true", "yes", "on"}
    if typ is int:
        return int(value)
    if typ is float:
        return float(value)
    if typ == List[str]:
        return _split_lines(value)
    return typ(value)


def _build_dataclass(cls: type, data: Dict[str, Any]) -> Any:
    hints = get_type_hints(cls)
    kwargs = {}
    for f in fields(cls):
        if f.name in data:
            kwargs[f.name] = _cast(data[f.name], hints[f.name])
    return cls(**kwargs)


def _env_overlays() -> Dict[str, Dict[str, Any]]:
    result: Dict[str, Dict[str, Any]] = {}
    for env_key, value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        remainder = env_key[len(ENV_PREFIX):]
        parts = remainder.split("__", 1)
        if len(parts) != 2:
            continue
        section, key = parts
        section = section.title()
        key = key.lower()
        result.setdefault(section, {})[key] = value
    return result


def _user_config_path() -> Path:
    if os.name == "nt":
        appdata = os.environ.get("APPDATA") or (Path.home() / "AppData" / "Roaming")
        return Path(appdata) / "FormSigner" / "config.ini"
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "formsigner" / "config.ini"


# --------------------------------------------------------------------------- #
#  ConfigService
# --------------------------------------------------------------------------- #


class ConfigService:
    """Facade merging layered configuration with type safety."""

    def __init__(self, *, user_ini: Path | None = None) -> None:
        self._lock = RLock()
        self._user_ini = user_ini
        self.reload()

    # ------------------------------------------------------------------ #
    def reload(self) -> None:
        with self._lock:
            merged: Dict[str, Dict[str, Any]] = {}
            sources: Dict[Tuple[str, str], Dict[str, str]] = {}

            # Layer 0: embedded defaults
            _apply(merged, _DEFAULTS, "code", "embedded", sources)

            # Layer 1: defaults.ini
            if DEFAULTS_INI.exists():
                cp = configparser.ConfigParser()
                cp.read(DEFAULTS_INI, encoding="utf-8")
                _apply(merged, _cp_to_dict(cp), "defaults.ini", str(DEFAULTS_INI), sources)

            # Layer 2: environment variables
            env = _env_overlays()
            _apply(merged, env, "env", "os.environ", sources)

            # Layer 3: user overrides
            user_ini = self._user_ini or _user_config_path()
            if user_ini.exists():
                cp = configparser.ConfigParser()
                cp.read(user_ini, encoding="utf-8")
                _apply(merged, _cp_to_dict(cp), "user", str(user_ini), sources)

            self._merged = merged
            self._sources = sources

            self.general = _build_dataclass(GeneralConfig, merged.get("General", {}))
            self.loader = _build_dataclass(LoaderConfig, merged.get("Loader", {}))
            self.sanitizer = _build_dataclass(SanitizerConfig, merged.get("Sanitizer", {}))
            self.signature = _build_dataclass(SignatureConfig, merged.get("Signature", {}))
            self.export = _build_dataclass(ExportConfig, merged.get("Export", {}))

    def snapshot(self) -> AppConfig:
        with self._lock:
            return AppConfig(
                general=self.general,
                loader=self.loader,
                sanitizer=self.sanitizer,
                signature=self.signature,
                export=self.export,
            )

    def meta_source(self, section: str, key: str) -> Dict[str, str] | None:
        return self._sources.get((section, key))


# Global singleton
config_service = ConfigService()
