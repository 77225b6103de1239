"""Flatten value sets into delimited audit strings.

Each leaf becomes a ``[dotted.path]=value`` segment and segments are
joined with `` || ``. Composite properties never produce a segment of
their own; only their leaves do, under the extended path.

Example:
    >>> serialize_values(value_set({"Name": "Alice", "Address": {"City": "NYC"}}))
    '[Name]=Alice || [Address.City]=NYC'
"""

import structlog

from audit_trail.core.audit.values import Composite, Leaf
from audit_trail.core.constants import PATH_SEPARATOR, SEGMENT_FORMAT, SEGMENT_SEPARATOR
from audit_trail.core.errors import MismatchedValueShapeError


log = structlog.get_logger()


def _path(prefix: str | None, name: str) -> str:
    return name if not prefix else f"{prefix}{PATH_SEPARATOR}{name}"


def _segment(path: str, leaf: Leaf) -> str:
    return SEGMENT_FORMAT.format(path=path, value=leaf.render())


def _join(segments: list[str]) -> str:
    return SEGMENT_SEPARATOR.join(segments)


def _collect(values: Composite, segments: list[str], prefix: str | None = None) -> None:
    for name, value in values.properties.items():
        path = _path(prefix, name)
        if isinstance(value, Composite):
            _collect(value, segments, path)
        else:
            segments.append(_segment(path, value))


def serialize_values(values: Composite) -> str:
    """Serialize every leaf of a value set.

    Args:
        values: The value set to dump

    Returns:
        The delimited string, or "" for an empty value set
    """
    segments: list[str] = []
    _collect(values, segments)
    return _join(segments)


def _mismatch(path: str, reason: str) -> MismatchedValueShapeError:
    log.warning("audit_shape_mismatch", path=path, reason=reason)
    return MismatchedValueShapeError(
        f"Original and current values differ in shape at '{path}': {reason}",
        path=path,
    )


def _collect_changes(
    original: Composite,
    current: Composite,
    changes: list[tuple[str, Leaf, Leaf]],
    prefix: str | None = None,
) -> None:
    extra = [name for name in current.properties if name not in original.properties]
    if extra:
        raise _mismatch(_path(prefix, extra[0]), "missing from original values")

    for name, original_value in original.properties.items():
        path = _path(prefix, name)
        current_value = current.get(name)
        if current_value is None:
            raise _mismatch(path, "missing from current values")

        if isinstance(original_value, Composite):
            if not isinstance(current_value, Composite):
                raise _mismatch(path, "composite in original values only")
            _collect_changes(original_value, current_value, changes, path)
            continue

        if isinstance(current_value, Composite):
            raise _mismatch(path, "composite in current values only")

        # Equality is on rendered text, so 1 and "1" count as unchanged
        if original_value.render() != current_value.render():
            changes.append((path, original_value, current_value))


def changed_leaves(
    original: Composite, current: Composite
) -> list[tuple[str, Leaf, Leaf]]:
    """List every leaf whose rendered value differs, in traversal order.

    Returns:
        (dotted path, original leaf, current leaf) for each change

    Raises:
        MismatchedValueShapeError: If the two value sets differ in shape
    """
    changes: list[tuple[str, Leaf, Leaf]] = []
    _collect_changes(original, current, changes)
    return changes


def diff_values(original: Composite, current: Composite) -> tuple[str, str]:
    """Serialize only the leaves whose rendered values differ.

    Both value sets must describe the same record, so they must have the
    same property names at every level. The two returned strings are
    aligned: the Nth segment of each refers to the same property.

    Args:
        original: Values before the change
        current: Values after the change

    Returns:
        Tuple of (new value string, original value string)

    Raises:
        MismatchedValueShapeError: If the two value sets differ in shape
    """
    changes = changed_leaves(original, current)
    new_value = _join([_segment(path, new) for path, _old, new in changes])
    original_value = _join([_segment(path, old) for path, old, _new in changes])
    return new_value, original_value
