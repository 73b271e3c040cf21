"""Spot catalog, name resolution and beach recommendations (Oahu)."""

from dataclasses import dataclass

from backend.app.models.common import BeachType
from backend.app.models.snapshots import Spot, SpotResolution


class SpotNotFoundError(LookupError):
    """No catalog spot matches the requested name."""

    pass


SPOTS: tuple[Spot, ...] = (
    Spot(name="Waikiki Beach", lat=21.2766, lon=-157.8269, island="Oahu", type=BeachType.family,
         description="Iconic beach, perfect for beginners and families"),
    Spot(name="Kailua Beach", lat=21.4010, lon=-157.7394, island="Oahu", type=BeachType.family,
         description="Calm waters, great for kids and kayaking"),
    Spot(name="Lanikai Beach", lat=21.3927, lon=-157.7160, island="Oahu", type=BeachType.scenic,
         description="Crystal clear water, stunning sunrise views"),
    Spot(name="North Shore (Ehukai)", lat=21.6649, lon=-158.0532, island="Oahu",
         type=BeachType.surf, description="World-famous surf spot, powerful winter waves"),
    Spot(name="Sandy Beach", lat=21.2847, lon=-157.6722, island="Oahu", type=BeachType.surf,
         description="Powerful shorebreak, experienced surfers only"),
    Spot(name="Makapu'u Beach", lat=21.3106, lon=-157.6589, island="Oahu", type=BeachType.mixed,
         description="Bodyboarding spot with scenic lighthouse views"),
    Spot(name="Hanauma Bay", lat=21.2706, lon=-157.6939, island="Oahu", type=BeachType.snorkel,
         description="Protected marine sanctuary, excellent snorkeling"),
    Spot(name="Sunset Beach", lat=21.6589, lon=-158.0539, island="Oahu", type=BeachType.surf,
         description="Long right-handers, winter surf destination"),
    Spot(name="Pipeline", lat=21.6649, lon=-158.0532, island="Oahu", type=BeachType.surf,
         description="Most famous surf break in the world"),
    Spot(name="Ala Moana Beach", lat=21.2906, lon=-157.8422, island="Oahu", type=BeachType.family,
         description="Protected lagoon, great for families and beginners"),
    Spot(name="Waimanalo Beach", lat=21.3347, lon=-157.7000, island="Oahu", type=BeachType.family,
         description="Long sandy beach, less crowded than Waikiki"),
    Spot(name="Bellows Beach", lat=21.3500, lon=-157.7200, island="Oahu", type=BeachType.family,
         description="Military-only access, calm waters perfect for families "
         "(requires military ID)"),
    Spot(name="Honolulu", lat=21.3069, lon=-157.8583, island="Oahu", type=BeachType.mixed,
         description="City center, multiple beach options nearby"),
)  # fmt: skip

# Access-restricted spots left out of recommendations by default
RESTRICTED_MARKERS = ("Bellows", "Hanauma")


@dataclass(frozen=True)
class KnownSpot:
    """A spot the agent recognizes by alias inside free text."""

    spot: str
    display: str
    lat: float
    lon: float
    aliases: tuple[str, ...]


KNOWN_SPOTS: tuple[KnownSpot, ...] = (
    KnownSpot("Waikiki", "Waikiki", 21.2766, -157.8269, ("waikiki", "waikiki beach")),
    KnownSpot(
        "North Shore", "the North Shore", 21.6649, -158.0532, ("north shore", "northshore", "haleiwa")
    ),
    KnownSpot("Honolulu", "Honolulu", 21.3069, -157.8583, ("honolulu", "town")),
    KnownSpot("Kailua Beach", "Kailua", 21.401, -157.7394, ("kailua", "kailua beach")),
    KnownSpot("Lanikai", "Lanikai", 21.3927, -157.716, ("lanikai",)),
    KnownSpot("Hanauma Bay", "Hanauma Bay", 21.2706, -157.6939, ("hanauma", "hanauma bay")),
    KnownSpot(
        "Ala Moana", "Ala Moana", 21.2906, -157.8422, ("ala moana", "ala moana beach", "magic island")
    ),
)


def find_spot(query: str) -> Spot | None:
    """Find a catalog spot by name, island, type, then word/description match.

    Args:
        query: Free-form spot name (case-insensitive)

    Returns:
        First matching Spot, or None
    """
    q = query.lower().strip()
    if not q:
        return None

    for matches in (
        lambda s: q in s.name.lower(),
        lambda s: q in s.island.lower(),
        lambda s: q in s.type.value,
        lambda s: any(q in word for word in s.name.lower().split(" "))
        or q in (s.description or "").lower(),
    ):
        for spot in SPOTS:
            if matches(spot):
                return spot
    return None


def resolve_spot(name: str) -> SpotResolution:
    """Resolve a spot name to coordinates.

    Raises:
        SpotNotFoundError: If no catalog spot matches
    """
    spot = find_spot(name)
    if spot is None:
        raise SpotNotFoundError(f"spot not found: {name!r}")
    return SpotResolution(name=spot.name, lat=spot.lat, lon=spot.lon)


def match_known_spot(text: str) -> KnownSpot | None:
    """Return the first known spot whose alias or name appears in ``text``."""
    lower = text.lower()
    for known in KNOWN_SPOTS:
        if any(alias in lower for alias in known.aliases) or known.spot.lower() in lower:
            return known
    return None


def display_location(raw: str | None) -> str | None:
    """Human-friendly location label ("North Shore" -> "the North Shore")."""
    if not raw or raw.lower() == "the area":
        return None
    known = match_known_spot(raw)
    return known.display if known else raw


def recommend_beaches(
    *,
    family: bool = False,
    surf: bool = False,
    snorkel: bool = False,
    scenic: bool = False,
    island: str | None = None,
    exclude_restricted: bool = True,
) -> list[Spot]:
    """Filter the catalog by activity and island.

    Each activity filter keeps spots of that type plus "mixed" spots. Filters
    combine with AND. Restricted spots are dropped unless ``exclude_restricted``
    is False.
    """
    filtered = list(SPOTS)

    if exclude_restricted:
        filtered = [
            s for s in filtered if not any(marker in s.name for marker in RESTRICTED_MARKERS)
        ]

    for wanted, beach_type in (
        (family, BeachType.family),
        (surf, BeachType.surf),
        (snorkel, BeachType.snorkel),
        (scenic, BeachType.scenic),
    ):
        if wanted:
            filtered = [s for s in filtered if s.type in (beach_type, BeachType.mixed)]

    if island:
        filtered = [s for s in filtered if island.lower() in s.island.lower()]

    return filtered


def spot_name_near(lat: float, lon: float, tolerance: float = 0.01) -> str | None:
    """Name of a known or catalog spot within ``tolerance`` degrees, if any."""
    for known in KNOWN_SPOTS:
        if abs(known.lat - lat) < tolerance and abs(known.lon - lon) < tolerance:
            return known.spot
    for spot in SPOTS:
        if abs(spot.lat - lat) < tolerance and abs(spot.lon - lon) < tolerance:
            return spot.name
    return None
