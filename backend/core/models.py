"""
Core Pydantic models for the listing chat.

The planner's JSON is untrusted: every validator here coerces bad values to a
safe default instead of rejecting the whole plan.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

_OP_ALIASES = {
    "=": "eq",
    "==": "eq",
    "equals": "eq",
    "is": "eq",
    "!=": "ne",
    "<>": "ne",
    "not_equals": "ne",
    "neq": "ne",
    "includes": "contains",
    "like": "contains",
    "not_includes": "not_contains",
    "not_like": "not_contains",
    ">": "gt",
    ">=": "ge",
    "gte": "ge",
    "<": "lt",
    "<=": "le",
    "lte": "le",
    "not_empty": "exists",
    "is_empty": "not_exists",
    "missing": "not_exists",
}


class FilterPredicate(BaseModel):
    """One (column, op, value) test; column is a friendly field."""

    column: str = Field(validation_alias=AliasChoices("column", "field", "col"))
    op: str = Field(default="eq", validation_alias=AliasChoices("op", "operator"))
    value: Optional[Union[int, float, str]] = None

    @field_validator("column", mode="before")
    @classmethod
    def _column_text(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("column must be a non-empty string")
        return v.strip()

    @field_validator("op", mode="before")
    @classmethod
    def _normalize_op(cls, v: Any) -> str:
        if v is None:
            return "eq"
        key = re.sub(r"[\s\-]+", "_", str(v).strip().lower())
        return _OP_ALIASES.get(key, key)

    @field_validator("value", mode="before")
    @classmethod
    def _scalar_value(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return str(v).lower()
        if isinstance(v, (list, dict)):
            return None
        return v


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------

class PlanIntent(str, Enum):
    list_listings = "list_listings"
    count_listings = "count_listings"
    average_price = "average_price"
    listing_details = "listing_details"
    full_profile = "full_profile"
    small_talk = "small_talk"
    unknown = "unknown"


class TargetMode(str, Enum):
    index = "index"
    address = "address"
    last = "last"


def _to_int(v: Any) -> Optional[int]:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, float):
        return int(v) if v.is_integer() else None
    m = re.search(r"-?\d+", str(v))
    return int(m.group(0)) if m else None


class Plan(BaseModel):
    """Structured request produced by the planner."""

    intent: PlanIntent = PlanIntent.unknown
    filters: List[FilterPredicate] = Field(default_factory=list)
    fields: List[str] = Field(default_factory=list)
    target: Optional[TargetMode] = None
    index: Optional[int] = None
    indices: List[int] = Field(default_factory=list)
    address: Optional[str] = None
    limit: Optional[int] = None
    count_only: bool = Field(default=False, validation_alias=AliasChoices("count_only", "countOnly"))

    model_config = {"populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def _fold_legacy_keys(cls, data: Any) -> Any:
        """Map the older flat planner keys (city/maxPrice/minBeds/...) onto filters and target."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        filters = data.get("filters")
        filters = list(filters) if isinstance(filters, list) else []
        legacy = (
            ("city", "City", "contains"),
            ("maxPrice", "price", "le"),
            ("minPrice", "price", "ge"),
            ("minBeds", "beds", "ge"),
            ("minBaths", "baths", "ge"),
            ("loanTermsIncludes", "ListingTerms", "contains"),
        )
        for key, column, op in legacy:
            value = data.pop(key, None)
            if value not in (None, ""):
                filters.append({"column": column, "op": op, "value": value})
        data["filters"] = filters
        if data.pop("useLastListing", None) is True and not data.get("target"):
            data["target"] = "last"
        return data

    @field_validator("intent", mode="before")
    @classmethod
    def _known_intent(cls, v: Any) -> Any:
        try:
            return PlanIntent(str(v).strip().lower())
        except ValueError:
            return PlanIntent.unknown

    @field_validator("filters", mode="before")
    @classmethod
    def _valid_filters(cls, v: Any) -> List[FilterPredicate]:
        if not isinstance(v, list):
            return []
        kept = []
        for item in v:
            if not isinstance(item, dict):
                continue
            try:
                kept.append(FilterPredicate.model_validate(item))
            except ValueError:
                continue
        return kept

    @field_validator("fields", mode="before")
    @classmethod
    def _field_list(cls, v: Any) -> List[str]:
        if isinstance(v, str):
            v = [v]
        if not isinstance(v, list):
            return []
        return [str(f).strip() for f in v if isinstance(f, (str, int, float)) and str(f).strip()]

    @field_validator("target", mode="before")
    @classmethod
    def _known_target(cls, v: Any) -> Any:
        if v is None:
            return None
        try:
            return TargetMode(str(v).strip().lower())
        except ValueError:
            return None

    @field_validator("index", mode="before")
    @classmethod
    def _index_int(cls, v: Any) -> Optional[int]:
        return _to_int(v)

    @field_validator("indices", mode="before")
    @classmethod
    def _indices_ints(cls, v: Any) -> List[int]:
        if not isinstance(v, list):
            return []
        out = [_to_int(x) for x in v]
        return [x for x in out if x is not None]

    @field_validator("address", mode="before")
    @classmethod
    def _address_text(cls, v: Any) -> Optional[str]:
        if not isinstance(v, str) or not v.strip():
            return None
        return v.strip()

    @field_validator("limit", mode="before")
    @classmethod
    def _positive_limit(cls, v: Any) -> Optional[int]:
        n = _to_int(v)
        return n if n is not None and n > 0 else None

    @field_validator("count_only", mode="before")
    @classmethod
    def _flag(cls, v: Any) -> bool:
        if isinstance(v, str):
            return v.strip().lower() in {"true", "yes", "1"}
        return bool(v)

    def target_positions(self) -> List[int]:
        """Positions asked for (indices win over index), as given by the user."""
        if self.indices:
            return list(self.indices)
        if self.index is not None:
            return [self.index]
        return []
