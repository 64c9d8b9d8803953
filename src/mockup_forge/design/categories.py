from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from mockup_forge.errors import UnknownCategoryError

GENERAL_CATEGORY = "general"


@dataclass(frozen=True)
class CategoryProfile:
    id: str
    name: str
    design_style: str
    key_features: str
    keywords: tuple[str, ...] = ()

    def matches(self, lowered_text: str) -> bool:
        return any(stem in lowered_text for stem in self.keywords)

    def matched_stems(self, lowered_text: str) -> tuple[str, ...]:
        return tuple(stem for stem in self.keywords if stem in lowered_text)


def _build_profiles() -> Mapping[str, CategoryProfile]:
    # Insertion order is classification priority; general must stay last.
    profiles = [
        CategoryProfile(
            id="fintech",
            name="Fintech",
            design_style="Trustworthy, Dark Mode capable, Sharp contrasts. Primary: Deep Blue or Emerald.",
            key_features="Spending graphs (CSS bars), transaction lists, 'Send Money' flow, card management.",
            keywords=("finance", "bank", "crypto", "wallet", "expense"),
        ),
        CategoryProfile(
            id="social",
            name="Social",
            design_style="Vibrant, Friendly, Rounded. Primary: Indigo or Pink.",
            key_features="Stories carousel, Feed with cards, Chat interface, User profiles with stats.",
            keywords=("social", "chat", "connect"),
        ),
        CategoryProfile(
            id="ecommerce",
            name="E-Commerce",
            design_style="Product-first, clean whites/grays. Primary: Black or Brand Color.",
            key_features="Product grids, sticky 'Add to Cart', Checkout flow with credit card form.",
            keywords=("shop", "commerce", "store"),
        ),
        CategoryProfile(
            id="health",
            name="Health",
            design_style="Calm, Soft gradients, rounded cards. Primary: Sage Green or Ocean Blue.",
            key_features="Progress rings, activity charts, daily checklists, mindfulness player.",
            keywords=("health", "fit", "meditat"),
        ),
        CategoryProfile(
            id=GENERAL_CATEGORY,
            name="General Utility",
            design_style="Clean, Neutral, Minimalist",
            key_features="Standard dashboard and list views.",
        ),
    ]
    return MappingProxyType({profile.id: profile for profile in profiles})


CATEGORY_PROFILES: Mapping[str, CategoryProfile] = _build_profiles()


def classify(idea_text: str) -> CategoryProfile:
    """Return the first category (in priority order) whose keyword stems occur in the idea.

    Priority is Fintech > Social > E-Commerce > Health; an idea matching
    none of them falls back to the general profile.
    """
    lowered = idea_text.lower()
    for profile in CATEGORY_PROFILES.values():
        if profile.matches(lowered):
            return profile
    return CATEGORY_PROFILES[GENERAL_CATEGORY]


def get_profile(category_id: str) -> CategoryProfile:
    normalized = category_id.strip().lower()
    profile = CATEGORY_PROFILES.get(normalized)
    if profile is None:
        raise UnknownCategoryError(category_id)
    return profile


def keyword_hits(idea_text: str) -> dict[str, tuple[str, ...]]:
    """Every category whose stems occur in the idea, in priority order, with the stems found."""
    lowered = idea_text.lower()
    hits: dict[str, tuple[str, ...]] = {}
    for profile in CATEGORY_PROFILES.values():
        stems = profile.matched_stems(lowered)
        if stems:
            hits[profile.id] = stems
    return hits
