"""Property value sets.

A value set is an ordered mapping of property name to either a scalar
(``Leaf``) or another value set (``Composite``), which models owned
sub-objects such as an embedded address. The ``kind`` field tags each
node so the formatters dispatch on it instead of inspecting types.
"""

from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from audit_trail.core.constants import NULL_TOKEN, PATH_SEPARATOR
from audit_trail.core.errors import InvalidPropertyNameError


class Leaf(BaseModel):
    """A scalar property value in its string form.

    Attributes:
        text: The rendered value, or None for a null value
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["leaf"] = "leaf"
    text: str | None = None

    @classmethod
    def of(cls, raw: Any) -> "Leaf":
        """Build a leaf from any Python value using its string form."""
        return cls(text=None if raw is None else str(raw))

    def render(self) -> str:
        """Return the text used in audit strings (``NULL`` for null)."""
        return NULL_TOKEN if self.text is None else self.text


class Composite(BaseModel):
    """A named, ordered set of property values."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["composite"] = "composite"
    properties: dict[str, "Value"] = Field(default_factory=dict)

    @field_validator("properties")
    @classmethod
    def validate_names(cls, v: dict[str, Any]) -> dict[str, Any]:
        """Reject names that would render like a nested path.

        Raises:
            InvalidPropertyNameError: If a name contains the path separator
        """
        for name in v:
            if PATH_SEPARATOR in name:
                raise InvalidPropertyNameError(
                    f"Property name '{name}' contains '{PATH_SEPARATOR}'",
                    name=name,
                )
        return v

    def names(self) -> list[str]:
        """Property names in enumeration order."""
        return list(self.properties)

    def get(self, name: str) -> "Value | None":
        return self.properties.get(name)

    def leaf(self, name: str) -> Leaf | None:
        """Return the named top-level leaf, or None if absent or composite."""
        value = self.properties.get(name)
        return value if isinstance(value, Leaf) else None


Value = Annotated[Leaf | Composite, Field(discriminator="kind")]

Composite.model_rebuild()


def value_set(values: Mapping[str, Any] | Composite) -> Composite:
    """Convert a plain nested mapping into a ``Composite``.

    Nested mappings become composites, ``Leaf``/``Composite`` instances are
    kept as they are, and every other value becomes a leaf.

    Example:
        value_set({"Name": "Alice", "Address": {"City": "NYC"}})
    """
    if isinstance(values, Composite):
        return values

    properties: dict[str, Leaf | Composite] = {}
    for name, raw in values.items():
        if isinstance(raw, Leaf | Composite):
            properties[name] = raw
        elif isinstance(raw, Mapping):
            properties[name] = value_set(raw)
        else:
            properties[name] = Leaf.of(raw)
    return Composite(properties=properties)
