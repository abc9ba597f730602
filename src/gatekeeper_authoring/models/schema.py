"""Parameters schema document: the JSON-Schema subset a constraint template declares."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

JSON_SCHEMA_DRAFT_07 = "http://json-schema.org/draft-07/schema"


class SchemaDocument(BaseModel):
    """A node of a parameters schema.

    Only ``type``, ``properties`` and ``items`` carry meaning here; any other
    JSON-Schema keyword (``description``, ``enum``, ...) is kept as an extra
    field so that documents survive a load/dump cycle.

    ``properties is None`` means the document declares no parameters at all,
    which is not the same thing as declaring an empty set (``{}``).
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    schema_uri: str | None = Field(default=None, alias="$schema")
    type: str | list[str] | None = None
    # Subschemas may also be booleans (draft-06+), null, or a tuple of `items`.
    properties: dict[str, SchemaDocument | bool | None] | None = None
    items: SchemaDocument | list[SchemaDocument | bool] | bool | None = None

    @classmethod
    def string(cls) -> SchemaDocument:
        return cls(type="string")

    @classmethod
    def array_of(cls, items: SchemaDocument) -> SchemaDocument:
        return cls(type="array", items=items)

    @property
    def property_names(self) -> list[str]:
        return list(self.properties) if self.properties is not None else []

    def declares(self, name: str) -> bool:
        """True if *name* is a key of ``properties`` (case-sensitive)."""
        return self.properties is not None and name in self.properties

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_json_dict(), indent=indent)
