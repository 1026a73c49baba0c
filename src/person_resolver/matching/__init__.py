"""
Target-identity matching rules and domain utilities.
"""

from person_resolver.matching.domains import domain_from_url, domain_matches
from person_resolver.matching.identity import (
    contains_target_name,
    is_email_relevant,
    is_name_relevant,
    names_similar,
    strings_similar,
)

__all__ = [
    "domain_from_url",
    "domain_matches",
    "contains_target_name",
    "is_email_relevant",
    "is_name_relevant",
    "names_similar",
    "strings_similar",
]
