"""
Target-identity rules.

All comparisons are case-insensitive. A name "matches" the target when it
contains both the target's first and last names; an email "matches" when it
equals the target email or contains either name part.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from person_resolver.models import TargetIdentity


def normalize_text(value: Optional[str]) -> str:
    """Lower-case and collapse whitespace."""
    if not value:
        return ""
    return " ".join(str(value).lower().split())


def normalize_phone(value: Optional[str]) -> str:
    """Digits only, so that formatting differences do not split phones."""
    if not value:
        return ""
    return re.sub(r"\D+", "", str(value))


def contains_target_name(text: Optional[str], target: "TargetIdentity") -> bool:
    if not text or not target.first or not target.last:
        return False
    lowered = text.lower()
    return target.first in lowered and target.last in lowered


def contains_full_name(text: Optional[str], target: "TargetIdentity") -> bool:
    """Verbatim "first last" occurrence."""
    if not text or not target.full_name or not target.first or not target.last:
        return False
    return target.full_name in normalize_text(text)


def contains_target_email(text: Optional[str], target: "TargetIdentity") -> bool:
    if not text or not target.email_lc:
        return False
    return target.email_lc in text.lower()


def is_email_relevant(email: Optional[str], target: "TargetIdentity") -> bool:
    if not email:
        return False
    e = email.strip().lower()
    if target.email_lc and e == target.email_lc:
        return True
    if target.first and target.first in e:
        return True
    if target.last and target.last in e:
        return True
    return False


def is_name_relevant(name: Optional[str], target: "TargetIdentity") -> bool:
    return contains_target_name(name, target)


def names_similar(a: Optional[str], b: Optional[str], target: "TargetIdentity") -> bool:
    """
    Two names are similar when equal, when one contains the other, or when
    both carry the target's first and last names.
    """
    n1 = normalize_text(a)
    n2 = normalize_text(b)
    if not n1 or not n2:
        return False
    if n1 == n2 or n1 in n2 or n2 in n1:
        return True
    return contains_target_name(n1, target) and contains_target_name(n2, target)


def strings_similar(a: Optional[str], b: Optional[str]) -> bool:
    """Equality or substring, ignoring case and spacing."""
    s1 = normalize_text(a)
    s2 = normalize_text(b)
    if not s1 or not s2:
        return False
    return s1 == s2 or s1 in s2 or s2 in s1
