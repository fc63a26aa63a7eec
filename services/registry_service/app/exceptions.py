from typing import List, Optional

from fastapi import status


class RegistryError(Exception):
    """Base class for errors surfaced to API callers as ``{"error": message}``."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingField(RegistryError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field: str):
        super().__init__(f"Missing required field: {field}")
        self.field = field


class MissingRequiredConditionalField(RegistryError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field: str, condition: str):
        super().__init__(f"Field {field} is required when {condition}")
        self.field = field
        self.condition = condition


class InvalidDateFormat(RegistryError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidFieldValue(RegistryError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(RegistryError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, member_id: int):
        super().__init__(f"Record {member_id} not found")
        self.member_id = member_id


class DuplicateKey(RegistryError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, national_id: str):
        super().__init__(f"National id {national_id} already exists")
        self.national_id = national_id


class EmptyReport(RegistryError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, title: str = "report"):
        super().__init__(f"No records to include in {title}")


class StorageFailure(RegistryError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class BulkDeleteError(RegistryError):
    """A sequential delete stopped at ``failed_id``; ``deleted`` stay deleted."""

    def __init__(self, failed_id: int, cause: RegistryError, deleted: Optional[List[int]] = None):
        super().__init__(f"Deleting record {failed_id} failed: {cause.message}")
        self.failed_id = failed_id
        self.cause = cause
        self.deleted = list(deleted or [])
        self.status_code = cause.status_code
