"""Stack compatibility rules.

Each rule is a predicate over ``(backend, database, auth)`` plus a message
builder and the set of dimensions it concerns.  :func:`validate` evaluates
every rule independently and returns all violations, never just the first.

When ``auth`` has not been chosen yet (``None``) the rules that concern the
auth dimension are not evaluated, so callers can validate incrementally as
each dimension is picked.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .models import Auth, Backend, Database, Dimension, StackSelection, Violation

Predicate = Callable[[Backend, Database, Auth], bool]
MessageBuilder = Callable[[Backend, Database, Auth], str]


@dataclass(frozen=True)
class ValidationRule:
    """A single compatibility constraint."""

    name: str
    dimensions: frozenset[Dimension]
    predicate: Predicate
    message: MessageBuilder

    def check(self, backend: Backend, database: Database, auth: Auth) -> Optional[Violation]:
        if not self.predicate(backend, database, auth):
            return None
        return Violation(
            message=self.message(backend, database, auth),
            dimensions=self.dimensions,
        )


_BACKEND_DATABASE = frozenset({Dimension.BACKEND, Dimension.DATABASE})
_BACKEND_AUTH = frozenset({Dimension.BACKEND, Dimension.AUTH})
_DATABASE_AUTH = frozenset({Dimension.DATABASE, Dimension.AUTH})


RULES: tuple[ValidationRule, ...] = (
    ValidationRule(
        name="relational-backend-with-mongodb",
        dimensions=_BACKEND_DATABASE,
        predicate=lambda b, d, a: b.is_relational_only and d is Database.MONGODB,
        message=lambda b, d, a: (
            f"{b.value} + {d.value} is invalid. {b.value} only supports SQL databases "
            "(PostgreSQL/MySQL) in this tool."
        ),
    ),
    ValidationRule(
        name="relational-backend-with-firestore",
        dimensions=_BACKEND_DATABASE,
        predicate=lambda b, d, a: b.is_relational_only and d is Database.FIRESTORE,
        message=lambda b, d, a: (
            f"{b.value} + {d.value} is invalid. {b.value} only supports SQL databases "
            "(PostgreSQL/MySQL) in this tool."
        ),
    ),
    ValidationRule(
        name="relational-backend-with-firebase-auth",
        dimensions=_BACKEND_AUTH,
        predicate=lambda b, d, a: b.is_relational_only and a is Auth.FIREBASE,
        message=lambda b, d, a: f"{b.value} + {a.value} is invalid. Use {Auth.JWT.value}.",
    ),
    ValidationRule(
        name="firestore-requires-firebase-auth",
        dimensions=_DATABASE_AUTH,
        predicate=lambda b, d, a: d is Database.FIRESTORE and a is not Auth.FIREBASE,
        message=lambda b, d, a: f"{d.value} requires {Auth.FIREBASE.value} (got {a.value}).",
    ),
    ValidationRule(
        name="jwt-incompatible-with-firestore",
        dimensions=_DATABASE_AUTH,
        predicate=lambda b, d, a: a is Auth.JWT and d is Database.FIRESTORE,
        message=lambda b, d, a: (
            f"{a.value} + {d.value} is invalid. Use {Auth.FIREBASE.value}."
        ),
    ),
)


def validate(
    backend: Backend,
    database: Database,
    auth: Optional[Auth] = None,
    rules: tuple[ValidationRule, ...] = RULES,
) -> list[Violation]:
    """Return every violated rule for the given stack values.

    Args:
        backend: Selected backend.
        database: Selected database.
        auth: Selected auth method, or ``None`` if not chosen yet.  Rules
            concerning the auth dimension are skipped in that case.
        rules: Rule set to evaluate.

    Returns:
        Violations in rule order; empty when the combination is valid.
    """
    violations: list[Violation] = []
    for rule in rules:
        if auth is None:
            if Dimension.AUTH in rule.dimensions:
                continue
            # Auth-free rules ignore the third argument.
            violation = rule.check(backend, database, Auth.JWT)
        else:
            violation = rule.check(backend, database, auth)
        if violation is not None:
            violations.append(violation)
    return violations


def validate_selection(selection: StackSelection) -> list[Violation]:
    """Validate a complete selection."""
    return validate(selection.backend, selection.database, selection.auth)


def violations_for(violations: list[Violation], dimension: Dimension) -> list[Violation]:
    """Keep only the violations that concern *dimension*."""
    return [v for v in violations if v.concerns(dimension)]
