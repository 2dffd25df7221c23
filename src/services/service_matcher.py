"""
Free-text service matching against the rate sheet.

Requested-service text comes straight from the homeowner form while
categories are curated by an administrator, so matching falls through
three strategies, first hit wins:

1. case-insensitive exact name
2. substring in either direction (category names cut at the first '&')
3. keyword table below, in table order
"""

from typing import Iterable, Optional, Sequence, TypeVar

T = TypeVar("T")

# keyword found in the request -> substrings of candidate category names
SERVICE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "flooring": ("flooring & hardwood", "epoxy flooring"),
    "electrical": ("electrical",),
    "plumbing": ("plumbing",),
    "roofing": ("roofing",),
    "painting": ("painting interior & exterior",),
    "hvac": ("heating & cooling", "hvac"),
    "kitchen": ("kitchen remodeling",),
    "bathroom": ("reglazing (bath & countertop)", "walk-in tubs"),
    "concrete": ("concrete patio/drive walk", "concrete polishing"),
    "pool": ("swimming pools", "pool service"),
    "handyman": ("handyman", "handy man service"),
    "windows": ("windows & doors", "window and door install"),
    "siding": ("siding",),
    "fence": ("fencing", "block wall/ fence"),
    "landscaping": ("landscaping", "landscape design"),
    "solar": ("solar",),
    "foundation": ("foundation repair",),
}


def _name(category) -> str:
    return category.name.lower()


def _match_exact(requested: str, categories: Sequence[T]) -> Optional[T]:
    for category in categories:
        if _name(category) == requested:
            return category
    return None


def _match_substring(requested: str, categories: Sequence[T]) -> Optional[T]:
    for category in categories:
        name = _name(category)
        # "Heating & Cooling" -> "heating"
        head = name.split("&", 1)[0].strip()
        if requested in name or (head and head in requested):
            return category
    return None


def _match_keyword(requested: str, categories: Sequence[T]) -> Optional[T]:
    for keyword, candidates in SERVICE_KEYWORDS.items():
        if keyword not in requested:
            continue
        for category in categories:
            name = _name(category)
            if any(candidate in name for candidate in candidates):
                return category
    return None


def match_service_category(
    requested_service: Optional[str],
    categories: Iterable[T],
) -> Optional[T]:
    """
    Resolve requested service text to one rate sheet category.

    Args:
        requested_service: Free text from the bid request
        categories: Objects with a ``name`` attribute (active categories)

    Returns:
        The matched category, or None when no strategy matches
    """
    requested = (requested_service or "").strip().lower()
    if not requested:
        return None

    candidates = list(categories)
    for strategy in (_match_exact, _match_substring, _match_keyword):
        match = strategy(requested, candidates)
        if match is not None:
            return match
    return None
