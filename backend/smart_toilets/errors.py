"""Domain errors raised by the facility store."""


class FacilityNotFoundError(LookupError):
    """No facility in the store carries the requested id."""

    message = "Facility not found"

    def __init__(self, facility_id: str):
        super().__init__(facility_id)
        self.facility_id = facility_id
