"""
Field catalog for voter exports.

The catalog is a static, read-only table of the fields a user can pick in the
export dialog, grouped by category. Labels are resolved through an index built
once at import time.
"""

from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from ballotbase.model import FieldDescriptor

EXPORT_FIELDS: Mapping[str, Mapping] = MappingProxyType({
    "personal": MappingProxyType({
        "label": "Personal Information",
        "fields": MappingProxyType({
            "first_name": "First Name",
            "middle": "Middle Name",
            "last_name": "Last Name",
            "suffix": "Suffix",
            "date_of_birth": "Date of Birth",
            "gender": "Gender",
            "enrolled_party": "Party",
        }),
    }),
    "address": MappingProxyType({
        "label": "Address",
        "fields": MappingProxyType({
            "house": "House Number",
            "street_name": "Street Name",
            "residence_city": "City",
            "zip_code": "ZIP Code",
        }),
    }),
    "districts": MappingProxyType({
        "label": "Districts",
        "fields": MappingProxyType({
            "election_district": "Election District",
            "congressional_district": "Congressional District",
            "assembly_district": "Assembly District",
            "state_senate_district": "Senate District",
        }),
    }),
    "voting": MappingProxyType({
        "label": "Voting History",
        "fields": MappingProxyType({
            "last_date_voted": "Last Vote Date",
            "last_year_voted": "Last Vote Year",
            "voter_history": "Voting History",
        }),
    }),
})

FIELD_DESCRIPTORS: Tuple[FieldDescriptor, ...] = tuple(
    FieldDescriptor(key, label, category)
    for category, group in EXPORT_FIELDS.items()
    for key, label in group["fields"].items()
)

_DESCRIPTORS_BY_KEY: Dict[str, FieldDescriptor] = {d.key: d for d in FIELD_DESCRIPTORS}


def get_label(key: str) -> Optional[str]:
    """
    Return the display label for a field key, or None if the key is not cataloged.
    """
    descriptor = _DESCRIPTORS_BY_KEY.get(key)
    return descriptor.label if descriptor else None


def get_descriptor(key: str) -> Optional[FieldDescriptor]:
    return _DESCRIPTORS_BY_KEY.get(key)


def get_categories() -> List[Tuple[str, str]]:
    """
    Return (category, label) pairs in display order.
    """
    return [(category, group["label"]) for category, group in EXPORT_FIELDS.items()]


def fields_in_category(category: str) -> List[FieldDescriptor]:
    """
    Return the descriptors of one category.

    Raises:
        KeyError: If the category does not exist
    """
    if category not in EXPORT_FIELDS:
        raise KeyError(f"Unknown field category: {category}")
    return [d for d in FIELD_DESCRIPTORS if d.category == category]


def all_field_keys() -> List[str]:
    return [d.key for d in FIELD_DESCRIPTORS]
