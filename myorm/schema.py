"""Table layouts derived from dataclass models."""

from __future__ import annotations

import dataclasses
import datetime
from dataclasses import dataclass, field
from typing import Any

from myorm.dialect import Dialect

TAG_KEY = "myorm"

_NAMED_TYPES: dict[str, type] = {
    "bool": bool,
    "int": int,
    "float": float,
    "str": str,
    "bytes": bytes,
    "bytearray": bytearray,
    "list": list,
    "tuple": tuple,
    "dict": dict,
    "set": set,
    "complex": complex,
    "object": object,
    "datetime": datetime.datetime,
    "datetime.datetime": datetime.datetime,
    "List": list,
    "Tuple": tuple,
    "typing.List": list,
    "typing.Tuple": tuple,
}


@dataclass
class Field:
    """One column: its name, SQL type and extra constraint text."""

    name: str
    type: str
    tag: str = ""


@dataclass
class Schema:
    """One table: the model it came from, its name and its columns."""

    model: Any
    name: str
    fields: list[Field] = field(default_factory=list)
    field_names: list[str] = field(init=False)
    _field_map: dict[str, Field] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.field_names = [f.name for f in self.fields]
        self._field_map = {f.name: f for f in self.fields}

    def get_field(self, name: str) -> Field | None:
        """Return the column called ``name``, or None."""
        return self._field_map.get(name)

    def record_values(self, dest) -> list:
        """Return the values of ``dest`` in column order."""
        return [getattr(dest, name) for name in self.field_names]


def _resolve(annotation):
    """Turn a field annotation, possibly written as text, into a type."""
    if not isinstance(annotation, str):
        return annotation
    text = annotation.strip()
    base = text.split("[", 1)[0].strip()
    try:
        return _NAMED_TYPES[base]
    except KeyError:
        raise TypeError(f"invalid sql type {text}") from None


def parse(dest, dialect: Dialect) -> Schema:
    """Build the schema for a dataclass model, given as a class or an instance.

    Fields whose names start with an underscore are left out. A column's
    constraint text is read from the field metadata key ``"myorm"``.
    """
    model_type = dest if isinstance(dest, type) else type(dest)
    if not dataclasses.is_dataclass(model_type):
        raise TypeError(f"{model_type.__name__} is not a dataclass model")
    columns = [
        Field(
            name=f.name,
            type=dialect.data_type_of(_resolve(f.type)),
            tag=f.metadata.get(TAG_KEY, ""),
        )
        for f in dataclasses.fields(model_type)
        if not f.name.startswith("_")
    ]
    return Schema(model=dest, name=model_type.__name__, fields=columns)