"""Domain errors raised at service boundaries."""


class PlannerError(Exception):
    """Base class for recipe planner errors."""


class ValidationError(PlannerError):
    """Raised when a caller-supplied value is out of range or malformed."""


class NotFoundError(PlannerError):
    """Raised when a referenced recipe, plan or plan entry does not exist."""
