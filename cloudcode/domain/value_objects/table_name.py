"""Physical name of a tenant's dynamic content table."""

import re
from dataclasses import dataclass

from cloudcode.core.constants import CONTENT_TABLE_PREFIX, CONTENT_TABLE_SEP

# Parse class names: letters, digits and underscores, starting with a letter.
_PART_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class TableName:
    """Value object for (site nameId, model name) -> ``ct____{site}____{model}``.

    Both parts must be non-empty, contain only letters, digits and
    underscores, and must not contain the ``____`` separator.
    """

    site_name_id: str
    model_name: str

    def __post_init__(self) -> None:
        for label, value in (("Site nameId", self.site_name_id), ("Model name", self.model_name)):
            if not value:
                raise ValueError(f"{label} must be a non-empty string")
            if CONTENT_TABLE_SEP in value or not _PART_RE.match(value):
                raise ValueError(
                    f"{label} must be letters, digits and underscores without '____', got {value!r}"
                )

    @property
    def physical(self) -> str:
        return CONTENT_TABLE_SEP.join(
            (CONTENT_TABLE_PREFIX, self.site_name_id, self.model_name)
        )

    @classmethod
    def parse(cls, physical: str) -> "TableName":
        """Reverse ``physical``; raise ValueError outside the content namespace."""
        parts = physical.split(CONTENT_TABLE_SEP)
        if len(parts) != 3 or parts[0] != CONTENT_TABLE_PREFIX:
            raise ValueError(f"Not a content table name: {physical!r}")
        return cls(site_name_id=parts[1], model_name=parts[2])

    def __str__(self) -> str:
        return self.physical
