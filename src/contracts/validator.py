"""Schema checks for payloads crossing the engine boundary."""

from __future__ import annotations

from typing import Any, List, Mapping

from . import loader
from .errors import InvalidPuzzlePayload, ValidationIssue, make_error


def _jsonschema_path(exc: Any) -> str:
    path = getattr(exc, "absolute_path", [])
    if not path:
        return "$"
    components: List[str] = ["$"]
    for part in path:
        if isinstance(part, int):
            components.append(f"[{part}]")
        else:
            components.append(f".{part}")
    return "".join(components)


def validate(payload: Any, contract: str) -> List[ValidationIssue]:
    """Return every schema issue found in *payload* for *contract*."""

    validator = loader.get_validator(contract)
    issues: List[ValidationIssue] = []
    for exc in sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.absolute_path]):
        issues.append(make_error(f"schema.{exc.validator}", exc.message, _jsonschema_path(exc)))
    return issues


def assert_puzzle_pair(payload: Any) -> Mapping[str, str]:
    """Return *payload* if it is a puzzle/solution mapping, else raise."""

    issues = validate(payload, "PuzzlePair")
    if issues:
        codes = ", ".join(f"{issue.code}@{issue.path}" for issue in issues[:5])
        raise InvalidPuzzlePayload(f"Puzzle source returned a malformed payload: {codes}")
    return payload


__all__ = ["assert_puzzle_pair", "validate"]
