"""Utility functions for the audit-trail CLI."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from audit_trail.core.errors import ChangeDocumentError
from audit_trail.schemas import ChangeDocument


def _non_string_keys(data: Mapping[Any, Any]) -> list[Any]:
    found = []
    for key, value in data.items():
        if not isinstance(key, str):
            found.append(key)
        elif isinstance(value, Mapping):
            found.extend(_non_string_keys(value))
    return found


def load_mapping(path: Path) -> dict[str, Any]:
    """Load a YAML or JSON file that must contain a mapping.

    Property names at every level must be strings.

    Raises:
        ChangeDocumentError: If the file is missing, unreadable, unparsable
            or not a mapping of names to values
    """
    if not path.exists():
        raise ChangeDocumentError(
            f"File not found: {path}", details={"path": str(path)}
        )

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise ChangeDocumentError(
            f"Could not read {path}: {e}", details={"path": str(path)}
        ) from e
    except yaml.YAMLError as e:
        raise ChangeDocumentError(
            f"Could not parse {path}: {e}", details={"path": str(path)}
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ChangeDocumentError(
            f"{path} must contain a mapping of property names to values",
            details={"path": str(path)},
        )

    bad_keys = _non_string_keys(data)
    if bad_keys:
        raise ChangeDocumentError(
            f"{path} has a non-string property name: {bad_keys[0]!r}",
            details={"path": str(path), "names": [repr(k) for k in bad_keys]},
        )
    return data


def load_change_document(path: Path) -> ChangeDocument:
    """Load and validate a change document.

    Raises:
        ChangeDocumentError: If the file cannot be loaded or fails validation
    """
    data = load_mapping(path)
    try:
        return ChangeDocument.model_validate(data)
    except ValidationError as e:
        raise ChangeDocumentError(
            f"Invalid change document {path}",
            details={"path": str(path), "errors": e.errors(include_url=False)},
        ) from e
