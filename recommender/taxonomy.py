"""
Static interest taxonomy: tag -> category lookup and category adjacency.

Loaded once at import into an immutable CategoryTaxonomy; the scoring engine
only reads it. A different table can be supplied via CategoryTaxonomy.from_mappings.
"""

from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Sequence

TAG_TO_CATEGORIES = {
    # Coffee & Food
    "coffee": ["coffee"],
    "tea": ["coffee"],
    "food": ["food"],
    "foodie": ["food"],
    "cooking": ["food"],
    "baking": ["food"],
    "brunch": ["food"],
    "drinks": ["food"],
    "wine": ["food"],
    "beer": ["food"],
    "vegan": ["food"],
    "vegetarian": ["food"],
    "cocktails": ["food", "social"],
    # Fitness
    "fitness": ["fitness"],
    "gym": ["fitness"],
    "running": ["fitness", "outdoors"],
    "cycling": ["fitness", "outdoors"],
    "swimming": ["fitness"],
    "crossfit": ["fitness"],
    "climbing": ["fitness", "outdoors"],
    "hiit": ["fitness"],
    "dance": ["fitness", "entertainment"],
    "dancing": ["fitness", "entertainment"],
    "martialarts": ["fitness", "sports"],
    "boxing": ["fitness", "sports"],
    # Sports
    "sports": ["sports"],
    "tennis": ["sports"],
    "padel": ["sports"],
    "badminton": ["sports"],
    "basketball": ["sports"],
    "football": ["sports"],
    "volleyball": ["sports"],
    "golf": ["sports"],
    "bowling": ["sports", "social"],
    "cricket": ["sports"],
    "squash": ["sports"],
    "rugby": ["sports"],
    "tabletennis": ["sports"],
    "skateboarding": ["sports", "outdoors"],
    "skating": ["sports", "outdoors"],
    "sailing": ["sports", "outdoors"],
    "surfing": ["sports", "outdoors"],
    "kayaking": ["sports", "outdoors"],
    # Outdoors
    "outdoors": ["outdoors"],
    "hiking": ["outdoors", "fitness"],
    "walking": ["outdoors"],
    "nature": ["outdoors"],
    "camping": ["outdoors"],
    "beach": ["outdoors"],
    "picnic": ["outdoors", "social"],
    "gardening": ["outdoors"],
    "fishing": ["outdoors"],
    # Wellness
    "wellness": ["wellness"],
    "yoga": ["wellness", "fitness"],
    "meditation": ["wellness"],
    "pilates": ["wellness", "fitness"],
    "spa": ["wellness"],
    "mindfulness": ["wellness"],
    "breathwork": ["wellness"],
    "selfcare": ["wellness"],
    "skincare": ["wellness"],
    "beauty": ["wellness"],
    # Entertainment
    "entertainment": ["entertainment"],
    "movies": ["entertainment"],
    "film": ["entertainment"],
    "music": ["entertainment", "creative"],
    "concerts": ["entertainment"],
    "comedy": ["entertainment"],
    "theatre": ["entertainment"],
    "karaoke": ["entertainment", "social"],
    "standup": ["entertainment"],
    "improv": ["entertainment"],
    "podcast": ["entertainment"],
    "listening": ["entertainment"],
    # Gaming
    "gaming": ["gaming"],
    "videogames": ["gaming"],
    "boardgames": ["gaming", "social"],
    "cardgames": ["gaming", "social"],
    "esports": ["gaming"],
    "arcade": ["gaming", "entertainment"],
    "chess": ["gaming"],
    "trivia": ["gaming", "social"],
    "quiz": ["gaming", "social"],
    # Creative
    "creative": ["creative"],
    "art": ["creative"],
    "photography": ["creative"],
    "pottery": ["creative"],
    "crafts": ["creative"],
    "diy": ["creative"],
    "writing": ["creative", "learning"],
    "musicmaking": ["creative", "entertainment"],
    "drawing": ["creative"],
    "painting": ["creative"],
    # Learning
    "learning": ["learning"],
    "languages": ["learning"],
    "language": ["learning"],
    "reading": ["learning"],
    "bookclub": ["learning", "social"],
    "study": ["learning"],
    "workshop": ["learning"],
    "coworking": ["learning"],
    "tech": ["learning"],
    "coding": ["learning"],
    "hackathon": ["learning", "social"],
    # Social
    "social": ["social"],
    "networking": ["social"],
    "party": ["social", "entertainment"],
    "meetup": ["social"],
    "travel": ["social", "outdoors"],
    "sightseeing": ["social", "outdoors"],
    "volunteering": ["social"],
    "charity": ["social"],
    "market": ["social"],
    "shopping": ["social"],
    # Pets
    "pets": ["pets"],
    "dogs": ["pets"],
    "cats": ["pets"],
    "animals": ["pets"],
}

# Symmetric: if A lists B, B lists A.
RELATED_CATEGORIES = {
    "coffee": ["food", "social"],
    "food": ["coffee", "social"],
    "fitness": ["sports", "wellness", "outdoors"],
    "sports": ["fitness", "outdoors", "social"],
    "outdoors": ["fitness", "sports", "wellness", "pets"],
    "wellness": ["fitness", "outdoors", "social", "pets"],
    "entertainment": ["social", "gaming", "creative"],
    "gaming": ["social", "entertainment"],
    "creative": ["learning", "social", "entertainment"],
    "learning": ["creative", "social"],
    "social": ["food", "coffee", "entertainment", "gaming", "sports", "wellness", "learning", "creative", "pets"],
    "pets": ["outdoors", "social", "wellness"],
}


class CategoryTaxonomy:
    """Read-only lookup over the tag and adjacency tables."""

    def __init__(
        self,
        tag_to_categories: Mapping[str, FrozenSet[str]],
        related: Mapping[str, FrozenSet[str]],
    ):
        self._tag_to_categories = MappingProxyType(dict(tag_to_categories))
        self._related = MappingProxyType(dict(related))

    @classmethod
    def from_mappings(
        cls,
        tag_to_categories: Mapping[str, Sequence[str]],
        related: Mapping[str, Sequence[str]],
    ) -> "CategoryTaxonomy":
        return cls(
            {tag.strip().lower(): frozenset(cats) for tag, cats in tag_to_categories.items()},
            {cat: frozenset(rel) for cat, rel in related.items()},
        )

    def categories_for_tag(self, tag: str) -> FrozenSet[str]:
        return self._tag_to_categories.get(tag.strip().lower(), frozenset())

    def categories_for_tags(self, tags: Iterable[str]) -> FrozenSet[str]:
        out = set()
        for tag in tags:
            out |= self.categories_for_tag(tag)
        return frozenset(out)

    def is_related(self, category: str, other: str) -> bool:
        return other in self._related.get(category, frozenset())

    @property
    def categories(self) -> FrozenSet[str]:
        return frozenset(self._related)


DEFAULT_TAXONOMY = CategoryTaxonomy.from_mappings(TAG_TO_CATEGORIES, RELATED_CATEGORIES)
