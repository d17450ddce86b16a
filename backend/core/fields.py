"""
Friendly field -> column resolution.

The planner (and users) say "beds" or "zip code"; the CSV says BedroomsTotal
and PostalCode. Resolution runs an ordered list of strategies and the first
hit wins:

    exact -> synonym -> case-insensitive -> substring

Exact and synonym matches must never be shadowed by a loose substring hit.
"""

from __future__ import annotations

from typing import Callable, Dict, Mapping, Optional, Sequence, Tuple

from core.utils import normalize_key

# Pseudo-field for the synthesized street address (not a real CSV column).
VIRTUAL_ADDRESS = "<address>"

# friendly key -> candidate columns in priority order; None means "address".
FIELD_SYNONYMS: Dict[str, Optional[Tuple[str, ...]]] = {
    "address": None,
    "full address": None,
    "street address": None,
    "beds": ("BedroomsTotal", "Bedrooms"),
    "bedrooms": ("BedroomsTotal", "Bedrooms"),
    "bedroom count": ("BedroomsTotal", "Bedrooms"),
    "baths": ("BathroomsTotalInteger", "BathroomsFull", "Bathrooms"),
    "bathrooms": ("BathroomsTotalInteger", "BathroomsFull", "Bathrooms"),
    "price": ("ListPrice", "CurrentPrice"),
    "list price": ("ListPrice",),
    "asking price": ("ListPrice", "CurrentPrice"),
    "current price": ("CurrentPrice", "ListPrice"),
    "close price": ("ClosePrice",),
    "sold price": ("ClosePrice",),
    "original price": ("OriginalListPrice",),
    "sqft": ("LivingArea", "BuildingAreaTotal", "ResidentialSquareFootage", "TotalBuildingNRA"),
    "square feet": ("LivingArea", "BuildingAreaTotal", "ResidentialSquareFootage", "TotalBuildingNRA"),
    "square footage": ("LivingArea", "BuildingAreaTotal", "ResidentialSquareFootage", "TotalBuildingNRA"),
    "living area": ("LivingArea",),
    "size": ("LivingArea", "BuildingAreaTotal", "ResidentialSquareFootage"),
    "lot size": ("LotSizeSquareFeet", "LotSizeArea", "LotSizeAcres"),
    "zip": ("PostalCode",),
    "zip code": ("PostalCode",),
    "zipcode": ("PostalCode",),
    "postal code": ("PostalCode",),
    "city": ("City",),
    "state": ("StateOrProvince",),
    "county": ("CountyOrParish",),
    "loan terms": ("ListingTerms",),
    "terms": ("ListingTerms",),
    "financing": ("ListingTerms",),
    "remarks": ("PublicRemarks",),
    "public remarks": ("PublicRemarks",),
    "private remarks": ("PrivateRemarks",),
    "dom": ("DaysOnMarket", "CumulativeDaysOnMarket"),
    "days on market": ("DaysOnMarket", "CumulativeDaysOnMarket"),
    "year built": ("YearBuilt",),
    "built": ("YearBuilt",),
    "school district": ("HighSchoolDistrict", "ElementarySchoolDistrict", "MiddleOrJuniorSchoolDistrict"),
    "high school": ("HighSchool", "HighSchoolDistrict"),
    "property type": ("PropertyType",),
    "type": ("PropertyType",),
    "property subtype": ("PropertySubType",),
    "status": ("StandardStatus", "MlsStatus"),
    "mls": ("ListingId", "ListingKey"),
    "mls number": ("ListingId", "ListingKey"),
    "listing id": ("ListingId", "ListingKey"),
    "garage": ("GarageSpaces", "ParkingTotal"),
    "parking": ("ParkingTotal", "GarageSpaces"),
    "pool": ("PoolPrivateYN", "PoolFeatures"),
    "hoa": ("AssociationFee",),
    "hoa fee": ("AssociationFee",),
    "stories": ("Stories", "StoriesTotal"),
    "agent email": ("ListAgentEmail",),
    "agent phone": ("ListAgentMobilePhone", "ListAgentDirectPhone"),
    "office": ("ListOfficeName",),
}

Strategy = Callable[[str, Sequence[str]], Optional[str]]


def resolve_exact(field: str, columns: Sequence[str]) -> Optional[str]:
    return field if field in columns else None


def resolve_synonym(field: str, columns: Sequence[str]) -> Optional[str]:
    key = normalize_key(field)
    if key not in FIELD_SYNONYMS:
        return None
    candidates = FIELD_SYNONYMS[key]
    if candidates is None:
        return VIRTUAL_ADDRESS
    for col in candidates:
        if col in columns:
            return col
    return None


def resolve_case_insensitive(field: str, columns: Sequence[str]) -> Optional[str]:
    target = field.lower()
    for col in columns:
        if col.lower() == target:
            return col
    return None


def resolve_substring(field: str, columns: Sequence[str]) -> Optional[str]:
    target = field.lower()
    for col in columns:
        if target in col.lower():
            return col
    return None


RESOLUTION_STRATEGIES: Tuple[Strategy, ...] = (
    resolve_exact,
    resolve_synonym,
    resolve_case_insensitive,
    resolve_substring,
)


def resolve_field(field: Optional[str], columns: Sequence[str]) -> Optional[str]:
    """Return the column for `field`, VIRTUAL_ADDRESS, or None."""
    if field is None:
        return None
    field = str(field).strip()
    if not field:
        return None
    for strategy in RESOLUTION_STRATEGIES:
        hit = strategy(field, columns)
        if hit is not None:
            return hit
    return None


def resolved_value(row: Mapping[str, str], field: Optional[str], resolved: str) -> str:
    """
    Cell text for an already-resolved field.

    When the resolved column is blank on this row, the field's other synonym
    candidates are tried in order (ListPrice empty -> CurrentPrice).
    """
    # local import: formatting depends on this module
    from core.formatting import format_address

    if resolved == VIRTUAL_ADDRESS:
        return format_address(row)
    value = str(row.get(resolved, "") or "")
    if value.strip():
        return value
    for col in FIELD_SYNONYMS.get(normalize_key(field)) or ():
        alt = str(row.get(col, "") or "")
        if alt.strip():
            return alt
    return value


def field_value(row: Mapping[str, str], field: Optional[str], columns: Sequence[str]) -> str:
    """Raw text for a friendly field on one row; '' when it can't be found."""
    from core.formatting import format_address

    resolved = resolve_field(field, columns)
    if resolved is not None:
        return resolved_value(row, field, resolved)
    text = str(field or "").strip()
    if text.lower() == "address":
        return format_address(row)
    if text and text in row:
        return str(row.get(text) or "")
    return ""
