class ValidationError(Exception):
    """A search filter field could not be parsed or is outside its domain."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message

    def to_detail(self) -> dict:
        return {"field": self.field, "message": self.message}


class QueryExecutionError(Exception):
    """The database failed while running a compiled query.

    ``statement`` holds the SQL text with placeholders only, never bound values.
    The driver exception is chained as ``__cause__``.
    """

    def __init__(self, message: str, statement: str | None = None):
        super().__init__(message)
        self.statement = statement


class PropertyNotFoundError(Exception):
    def __init__(self, property_id: int):
        super().__init__(f"Property {property_id} not found")
        self.property_id = property_id
