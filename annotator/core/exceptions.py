"""Errors raised by the label hierarchy.

Each error carries the HTTP status the API maps it to, so route handlers can
let them propagate to the handler registered in ``annotator.main``.
"""


class HierarchyError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LabelValidationError(HierarchyError):
    """Self-parenting, second parent, cycle, or bad input."""

    status_code = 400


class InvalidRelationType(LabelValidationError):
    pass


class LabelNotFound(HierarchyError):
    # Also raised for labels owned by someone else.
    status_code = 404


class RelationNotFound(HierarchyError):
    status_code = 404


class HierarchyStoreError(HierarchyError):
    """A database fault, wrapped with what was being attempted."""

    status_code = 500


class HierarchyIntegrityError(HierarchyError):
    """The stored relations contain a cycle."""

    status_code = 500
