"""Service-level errors that routers translate into HTTP responses."""


class NotFoundError(LookupError):
    """A referenced record (appointment, patient, check-in...) does not exist."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")
