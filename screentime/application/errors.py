"""
Error kinds shared by the record store, the services and the HTTP facade
"""


class ScreenTimeError(Exception):
    """Base class for all screen time errors"""
    pass


class ValidationError(ScreenTimeError, ValueError):
    """Malformed or out-of-range input"""
    pass


class NotFoundError(ScreenTimeError, LookupError):
    """Referenced record does not exist"""

    def __init__(self, entity: str, record_id: int):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} with ID {record_id} not found")


class ConflictError(ScreenTimeError):
    """Operation blocked by a referencing record"""
    pass


class StorageError(ScreenTimeError):
    """Underlying persistence failure"""
    pass
