"""Domain exceptions for IAM bounded context.

These exceptions represent the failure outcomes of authorization,
authentication and grant/membership mutations. They are raised by the
application layer and mapped to protocol-specific responses by whatever
adapter sits in front of it.

The taxonomy has four roots that adapters must keep distinct:

- NotFoundError: an id does not resolve. Never reported as a denial.
- UnauthenticatedError: the credential is missing, invalid, expired or
  bound to a session that is no longer current.
- ForbiddenError: the caller is authenticated but not allowed.
- ConflictError: the request contradicts the current state.
"""


class NotFoundError(Exception):
    """Raised when a referenced entity does not exist."""

    pass


class SubjectNotFoundError(NotFoundError):
    """Raised when a subject id or identity does not resolve."""

    pass


class ResourceNotFoundError(NotFoundError):
    """Raised when a resource id does not resolve."""

    pass


class WorkspaceNotFoundError(NotFoundError):
    """Raised when a workspace id does not resolve."""

    pass


class ResourceGrantNotFoundError(NotFoundError):
    """Raised when a resource grant id does not resolve."""

    pass


class MembershipNotFoundError(NotFoundError):
    """Raised when a subject has no membership row in a workspace."""

    pass


class UnauthenticatedError(Exception):
    """Raised when a credential cannot be used to identify a subject.

    Covers a missing or malformed token, a bad signature, an expired token,
    and a token whose session id is no longer the subject's current one.
    """

    pass


class ForbiddenError(Exception):
    """Raised when an authenticated subject lacks permission for an operation.

    This exception indicates that authorization checks have failed.
    The adapter layer should handle this without exposing internal details.
    """

    pass


class ConflictError(Exception):
    """Raised when a mutation contradicts the current state."""

    pass


class MemberAlreadyActiveError(ConflictError):
    """Raised when inviting a subject that is already an active member."""

    pass


class MembershipInactiveError(ConflictError):
    """Raised when mutating a membership that has been deactivated."""

    pass


class GrantAlreadyResolvedError(ConflictError):
    """Raised when accepting or rejecting a grant that is no longer PENDING."""

    pass


class GrantAlreadyExistsError(ConflictError):
    """Raised when inviting a subject who already holds a live grant.

    A live grant is one that is PENDING or ACCEPTED for the same
    (subject, resource) pair.
    """

    pass


class SelfModificationError(ConflictError):
    """Raised when a subject targets themselves with a membership mutation.

    Changing one's own role or removing oneself from a workspace is not
    allowed.
    """

    pass


class OwnerRoleAssignmentError(ConflictError):
    """Raised when OWNER is assigned through invite or role change.

    Ownership transfer is a separate operation and is not modelled.
    """

    pass


class InvalidHierarchyMoveError(ConflictError):
    """Raised when re-parenting a resource would create a cycle."""

    pass


class ResourceHierarchyCorruptedError(RuntimeError):
    """Raised when stored resource data breaks the forest invariant.

    Either a parent id does not resolve or the parent chain loops back on
    itself. This is a data integrity fault, not an access decision.
    """

    pass
