from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
import os
import io
import yaml

from .schema import ALIASES

# Nested sections that are data, not groups of scalar settings.
_KEEP_NESTED = ("cashflows", "compare")

DEFAULT_LLM_MODEL = "gpt-4o-mini"
DEFAULT_LLM_TIMEOUT = 30.0


class ConfigError(ValueError):
    """Scenario file that cannot be read as a YAML mapping."""


def _flatten_grouped(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten shallow groups like {'project': {...}, 'finance': {...}} into one level.
    Prefers top-level keys if collisions occur.
    """
    flat: Dict[str, Any] = {k: v for k, v in cfg.items() if not isinstance(v, dict) or k in _KEEP_NESTED}
    for k, v in cfg.items():
        if isinstance(v, dict) and k not in _KEEP_NESTED:
            for sk, sv in v.items():
                flat.setdefault(sk, sv)
    return flat


def _apply_aliases(d: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in d.items():
        out.setdefault(ALIASES.get(k, k), v)
    return out


def parse_model_config(text: str, *, where: str = "<text>") -> Dict[str, Any]:
    try:
        cfg = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"{where}: invalid YAML: {e}") from e
    if cfg is None:
        cfg = {}
    if not isinstance(cfg, dict):
        raise ConfigError(f"{where}: expected a mapping at top level, got {type(cfg).__name__}")
    return _apply_aliases(_flatten_grouped(cfg))


def load_model_config(source: str | os.PathLike | io.StringIO) -> Dict[str, Any]:
    """
    Load a scenario from a path or text stream and return one flat mapping.
    `cashflows` and `compare` keep their list structure.
    """
    if hasattr(source, "read"):
        return parse_model_config(str(source.read()))
    p = os.fspath(source)
    with open(p, "r", encoding="utf-8") as f:
        return parse_model_config(f.read(), where=p)


@dataclass(frozen=True)
class LLMSettings:
    api_key: Optional[str]
    model: str = DEFAULT_LLM_MODEL
    timeout: float = DEFAULT_LLM_TIMEOUT

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


def load_llm_settings(env: Optional[Dict[str, str]] = None) -> LLMSettings:
    e = os.environ if env is None else env
    raw_timeout = e.get("MINEFINANCE_LLM_TIMEOUT")
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_LLM_TIMEOUT
    except ValueError:
        raise ConfigError(f"MINEFINANCE_LLM_TIMEOUT must be a number, got {raw_timeout!r}") from None
    return LLMSettings(
        api_key=e.get("OPENAI_API_KEY") or None,
        model=e.get("MINEFINANCE_LLM_MODEL") or DEFAULT_LLM_MODEL,
        timeout=timeout,
    )
