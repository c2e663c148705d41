"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class BusinessRuleViolationError(DomainError):
    """Business rule violation error."""

    pass


class NotAuthorizedError(DomainError):
    """Raised when a user attempts to change content they don't own."""

    def __init__(self, resource: str, resource_id: str, user_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(
            f"User {user_id} is not authorized to modify {resource} {resource_id}"
        )


class ContentDeletedException(DomainError):
    """Raised when acting on soft-deleted content."""

    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} {resource_id} has been deleted")


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class TargetNotFound(NotFoundError):
    """Raised when a vote or reply references a post/comment that doesn't exist."""

    pass


class InvalidVoteValue(ValidationError):
    """Raised when a vote value is anything other than +1 or -1."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Vote value must be 1 or -1, got {value!r}")


class DuplicateVote(DomainError):
    """Raised when the ledger holds more than one row for a (voter, target) pair.

    The storage key makes this impossible; seeing it means the ledger is
    corrupt and needs repair.
    """

    def __init__(self, voter_id: str, target_type: str, target_id: str):
        super().__init__(
            f"Multiple votes by {voter_id} on {target_type} {target_id}"
        )


class MaxDepthExceeded(BusinessRuleViolationError):
    """Raised when a reply would nest deeper than the maximum depth."""

    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        super().__init__(f"Maximum comment nesting depth ({max_depth}) reached")


class ParentPostMismatch(BusinessRuleViolationError):
    """Raised when a reply's parent belongs to another post."""

    def __init__(self, parent_id: str, post_id: str):
        super().__init__(f"Parent comment {parent_id} does not belong to post {post_id}")


class PostLockedError(BusinessRuleViolationError):
    """Raised when commenting on a locked post."""

    def __init__(self, post_id: str):
        super().__init__(f"Post {post_id} is locked")


class ConcurrentUpdateConflict(DomainError):
    """Raised when a write keeps losing to concurrent writers.

    Persistence raises it for serialization failures and deadlocks; vote
    operations retry a bounded number of times before letting it escape.
    """

    pass


class AlreadyExistsError(DomainError):
    """Raised when a unique attribute is already taken."""

    def __init__(self, resource: str, field: str, value: str):
        self.resource = resource
        self.field = field
        super().__init__(f"{resource} with {field} '{value}' already exists")
