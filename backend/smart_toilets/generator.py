"""
Facility generator — builds simulated smart-toilet records.

Every reading is scaled from a uniform draw of the injected random source,
so passing a seeded ``random.Random`` (or any object with ``random()``)
makes the output reproducible.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from datetime import datetime, timedelta, timezone
from typing import Callable, Protocol

from smart_toilets.schemas.facility import Coordinates, Facility, SensorBlock


class RandomSource(Protocol):
    def random(self) -> float: ...


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ──────────────────────────────────────────────
# Fixed highway segments and constants
# ──────────────────────────────────────────────

LOCATIONS = [
    "Delhi-Mumbai Highway KM 145",
    "Bangalore-Chennai Highway KM 89",
    "Mumbai-Pune Highway KM 67",
    "Delhi-Jaipur Highway KM 123",
    "Hyderabad-Bangalore Highway KM 234",
]

BASE_LAT = 28.6139
BASE_LNG = 77.2090
COORDINATE_SPREAD = 10

ACTIVE_THRESHOLD = 0.2       # ~80% active
ALERT_THRESHOLD = 0.7        # ~30% carry alerts
DEFAULT_ALERTS = ["Low soap level", "Maintenance required"]

ID_PREFIX = "NH"


# ──────────────────────────────────────────────
# Reading generators
# ──────────────────────────────────────────────

def random_int(rng: RandomSource, span: int, offset: int = 0) -> int:
    """Integer in [offset, offset + span)."""
    return math.floor(rng.random() * span) + offset


def cleanliness_score(rng: RandomSource) -> int:
    """1-10 score."""
    return random_int(rng, 10, 1)


def usage_count(rng: RandomSource) -> int:
    """0-499 uses since last reset."""
    return random_int(rng, 500)


def one_decimal(value: float) -> str:
    """Format with one decimal, rounding exact ties up (``toFixed(1)`` style)."""
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def facility_id(index: int) -> str:
    return f"{ID_PREFIX}{index}"


def generate_facility(
    index: int,
    rng: RandomSource,
    clock: Clock = utc_now,
) -> Facility:
    """Build one facility for the 1-based ``index``."""
    now = clock()

    # Draw order matters for seeded reproducibility
    coordinates = Coordinates(
        lat=BASE_LAT + (rng.random() - 0.5) * COORDINATE_SPREAD,
        lng=BASE_LNG + (rng.random() - 0.5) * COORDINATE_SPREAD,
    )
    status = "active" if rng.random() > ACTIVE_THRESHOLD else "maintenance"

    sensors = SensorBlock(
        air_quality=random_int(rng, 100),
        usage=usage_count(rng),
        water_level=random_int(rng, 100),
        cleanliness_score=cleanliness_score(rng),
        temperature=random_int(rng, 15, 25),
        last_cleaned=now - timedelta(milliseconds=rng.random() * 86_400_000),
    )

    alerts = list(DEFAULT_ALERTS) if rng.random() > ALERT_THRESHOLD else []

    return Facility(
        id=facility_id(index),
        name=f"Facility {index}",
        location=LOCATIONS[index % len(LOCATIONS)],
        coordinates=coordinates,
        status=status,
        sensors=sensors,
        alerts=alerts,
        user_rating=one_decimal(rng.random() * 5 + 3),
        daily_users=random_int(rng, 1000, 100),
        last_updated=now,
    )
