from __future__ import annotations

import dataclasses


@dataclasses.dataclass
class QuerySettings:
    """ Settings for TypedQueryBuilder

    This object defines the initial behavior of a builder.
    Subqueries inherit the current behavior of their parent builder when they are created.
    """
    # Sort selected fields alphabetically in the query text
    sort_fields: bool = True

    # Check field-level read access for every selected field
    enforce_field_level_security: bool = False
