class LifetrackError(Exception):
    """Base class for errors raised by lifetrack."""


class CurrencyMismatchError(LifetrackError):
    def __init__(self, left: str, right: str):
        super().__init__(f"Cannot combine {left} and {right} amounts without conversion")
        self.left = left
        self.right = right


class UnknownReferenceError(LifetrackError):
    def __init__(self, error: dict):
        super().__init__(error.get("message", "Unknown reference"))
        self.error = error


class RecordNotFoundError(LifetrackError):
    def __init__(self, collection: str, record_id: str):
        super().__init__(f"No record {record_id!r} in {collection}")
        self.collection = collection
        self.record_id = record_id
