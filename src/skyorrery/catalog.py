"""Fixed catalog of tracked bodies."""

from skyorrery.models import BodyKind, CelestialBody

SUN = CelestialBody(id="Sun", name="Sun", kind=BodyKind.STAR)
MOON = CelestialBody(id="Moon", name="Moon", kind=BodyKind.SATELLITE)
EARTH = CelestialBody(id="Earth", name="Earth", kind=BodyKind.OBSERVER)

# Canonical order: inner to outer. Alignment scanning follows this order.
PLANETS: tuple[CelestialBody, ...] = (
    CelestialBody(id="Mercury", name="Mercury", kind=BodyKind.PLANET),
    CelestialBody(id="Venus", name="Venus", kind=BodyKind.PLANET),
    EARTH,
    CelestialBody(id="Mars", name="Mars", kind=BodyKind.PLANET),
    CelestialBody(id="Jupiter", name="Jupiter", kind=BodyKind.PLANET),
    CelestialBody(id="Saturn", name="Saturn", kind=BodyKind.PLANET),
    CelestialBody(id="Uranus", name="Uranus", kind=BodyKind.PLANET),
    CelestialBody(id="Neptune", name="Neptune", kind=BodyKind.PLANET),
)

CATALOG: dict[str, CelestialBody] = {b.id: b for b in (SUN, MOON, *PLANETS)}

PLANET_IDS: tuple[str, ...] = tuple(b.id for b in PLANETS)
OUTER_BODY_IDS: tuple[str, ...] = ("Mars", "Jupiter", "Saturn", "Uranus", "Neptune")
ALIGNMENT_EXCLUDED_IDS: tuple[str, ...] = ("Uranus", "Neptune")


def lookup(body_id: str) -> CelestialBody:
    """Return the catalog entry for body_id.

    Ids outside the catalog are treated as planets so synthetic body sets
    can be passed through the pipeline.
    """
    return CATALOG.get(body_id) or CelestialBody(
        id=body_id, name=body_id, kind=BodyKind.PLANET
    )
