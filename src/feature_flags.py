"""Runtime feature flag helpers."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import-untyped]

__all__ = ["get_debug_feature", "is_debug_hook_enabled", "reload"]

_FEATURES_FILENAME = "config/features.toml"


def _features_path() -> Path:
    return Path(__file__).resolve().parents[1] / _FEATURES_FILENAME


@lru_cache(maxsize=1)
def _load_features() -> dict[str, Any]:
    path = _features_path()
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def reload() -> None:
    """Clear the cached feature configuration."""

    _load_features.cache_clear()


def _coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalised = value.strip().lower()
        if normalised in {"1", "true", "yes", "on"}:
            return True
        if normalised in {"0", "false", "no", "off"}:
            return False
    return None


def get_debug_feature(profile: str | None = None) -> dict[str, Any]:
    """Return the merged debug feature block for the given profile."""

    features = _load_features()
    entry = features.get("debug")
    merged: dict[str, Any] = {}
    if isinstance(entry, dict):
        for key, value in entry.items():
            if key == "by_profile":
                continue
            merged[key] = value

        if profile:
            by_profile = entry.get("by_profile")
            if isinstance(by_profile, dict):
                profile_block = by_profile.get(profile.lower())
                if isinstance(profile_block, dict):
                    merged.update(profile_block)
    return merged


def is_debug_hook_enabled(env: Mapping[str, str] | None = None, *, profile: str | None = None) -> bool:
    """Return ``True`` when sessions should be handed to a debug hook."""

    enabled = bool(get_debug_feature(profile).get("expose_session", False))

    if env:
        for key in ("CLI_DEBUG_EXPOSE_SESSION", "PUZZLE_DEBUG_EXPOSE_SESSION"):
            override = _coerce_bool(env.get(key))
            if override is not None:
                enabled = override
                break

    return enabled
