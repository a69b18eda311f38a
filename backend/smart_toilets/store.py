"""In-memory facility store shared by the request handlers."""

import asyncio
import logging
import random
from typing import List, Optional

from smart_toilets.errors import FacilityNotFoundError
from smart_toilets.generator import (
    Clock,
    RandomSource,
    cleanliness_score,
    generate_facility,
    usage_count,
    utc_now,
)
from smart_toilets.schemas.facility import Facility

logger = logging.getLogger(__name__)


class FacilityStore:
    """Ordered facility records, generated once and refreshed on read."""

    def __init__(self, rng: Optional[RandomSource] = None, clock: Clock = utc_now):
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock
        self._facilities: List[Facility] = []
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._facilities)

    def populate(self, count: int) -> None:
        """Generate ``count`` facilities with ids NH1..NH<count>, replacing any existing ones."""
        self._facilities = [
            generate_facility(index, self._rng, self._clock)
            for index in range(1, count + 1)
        ]
        logger.info("Generated %d facilities", len(self._facilities))

    def all(self) -> List[Facility]:
        return self._facilities

    def find(self, facility_id: str) -> Optional[Facility]:
        return next((f for f in self._facilities if f.id == facility_id), None)

    async def refresh_readings(self, facility_id: str) -> Facility:
        """
        Overwrite the live readings of one facility and return it.

        The cleanliness score, usage count and ``last_updated`` stamp are
        redrawn in place, so later reads see the new values.
        The store lock serializes these read-modify-write cycles; the body
        has no await today, but the whole cycle stays atomic if one is added.

        Raises:
            FacilityNotFoundError: no facility has ``facility_id``.
        """
        async with self._lock:
            facility = self.find(facility_id)
            if facility is None:
                raise FacilityNotFoundError(facility_id)

            facility.sensors.cleanliness_score = cleanliness_score(self._rng)
            facility.sensors.usage = usage_count(self._rng)
            facility.last_updated = self._clock()
            return facility
