"""Stack catalog and compatibility validation.

Usage::

    from stackwright.stack import Backend, Database, Auth, validate

    for violation in validate(Backend.FLASK, Database.MONGODB, Auth.JWT):
        print(violation.message)
"""

from stackwright.stack.models import (
    Auth,
    Backend,
    Database,
    Dimension,
    Frontend,
    ProjectSecrets,
    StackSelection,
    Violation,
)
from stackwright.stack.validator import (
    RULES,
    ValidationRule,
    validate,
    validate_selection,
    violations_for,
)

__all__ = [
    "Auth",
    "Backend",
    "Database",
    "Dimension",
    "Frontend",
    "ProjectSecrets",
    "RULES",
    "StackSelection",
    "ValidationRule",
    "Violation",
    "validate",
    "validate_selection",
    "violations_for",
]
