"""Ordering of icon search results by preferred collections."""

from typing import Iterable, Literal, Sequence

from better_icons.icons import collection_prefix

IconStyle = Literal["solid", "outline", "any"]

# Curated collections per style, used after learned preferences
STYLE_COLLECTIONS: dict[str, list[str]] = {
    "solid": ["mdi", "fa-solid"],
    "outline": ["lucide", "tabler", "ph"],
    "any": ["lucide", "mdi", "heroicons"],
}


def _dedupe(prefixes: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for prefix in prefixes:
        if prefix not in seen:
            seen.add(prefix)
            result.append(prefix)
    return result


def _rank(icons: Sequence[str], priority: list[str]) -> list[str]:
    """Stable sort of icons by the position of their prefix in ``priority``.

    Icons from collections not in ``priority`` go last in input order.
    """
    index = {prefix: i for i, prefix in enumerate(priority)}
    unranked = len(priority)
    return sorted(icons, key=lambda icon: index.get(collection_prefix(icon), unranked))


def rank_by_style(
    icons: Sequence[str],
    style: IconStyle,
    learned_prefixes: Sequence[str] = (),
) -> list[str]:
    """Order icons by learned collections, then the style's curated collections.

    Args:
        icons: Icon IDs to order (not modified)
        style: "solid", "outline" or "any"
        learned_prefixes: Collection prefixes, most used first

    Returns:
        New list of icon IDs
    """
    if style not in STYLE_COLLECTIONS:
        raise ValueError(f"Unknown icon style: {style}")
    priority = _dedupe([*learned_prefixes, *STYLE_COLLECTIONS[style]])
    return _rank(icons, priority)


def rank_by_learned(icons: Sequence[str], learned_prefixes: Sequence[str]) -> list[str]:
    """Order icons by learned collections only."""
    if not learned_prefixes:
        return list(icons)
    return _rank(icons, _dedupe(learned_prefixes))
