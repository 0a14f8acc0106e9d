"""Domain-specific exceptions, framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class DuplicateEntityError(Exception):
    """Raised when attempting to create a duplicate entity."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class ProtectedResourceError(Exception):
    """Raised when a caller touches a protected collection file."""

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__("Access denied: system file")


class AccessDeniedError(Exception):
    """Raised when a caller-supplied key fails an access check.

    The message deliberately carries only the scope, never the expected key.
    """

    def __init__(self, scope: str):
        self.scope = scope
        super().__init__(f"Unauthorized {scope} key")


class InvalidCredentialsError(Exception):
    """Raised on a failed login, without saying which part was wrong."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class InvalidArchiveError(Exception):
    """Raised when an uploaded archive is unreadable or unsafe to extract."""


class MaintenanceError(Exception):
    """Raised when a filesystem step of a maintenance operation fails.

    ``operation`` is safe to show to callers; the underlying exception
    (which may contain filesystem paths) is chained and only logged.
    """

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"{operation} failed")


class InvalidRecordError(Exception):
    """Raised when a record uses a field name the store reserves for itself."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Field name '{field}' is reserved")
