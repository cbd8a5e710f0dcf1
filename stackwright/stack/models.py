"""Pydantic v2 models for stack selections.

Defines the closed catalog of stack options, the immutable selection that
flows into the generator, structured compatibility violations and the
user-supplied secrets that end up in the generated ``.env`` file.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, model_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Frontend(str, Enum):
    """Frontend frameworks."""
    REACT = "React"
    NEXT = "Next.js"
    VUE = "Vue"
    ANGULAR = "Angular"
    SVELTE = "Svelte"


class Backend(str, Enum):
    """Backend frameworks."""
    EXPRESS = "Node + Express"
    FASTIFY = "Node + Fastify"
    FLASK = "Flask"
    DJANGO = "Django"

    @property
    def is_node(self) -> bool:
        return self in (Backend.EXPRESS, Backend.FASTIFY)

    @property
    def is_relational_only(self) -> bool:
        """Python backends are generated with SQL data access only."""
        return self in (Backend.FLASK, Backend.DJANGO)


class Database(str, Enum):
    """Databases."""
    MONGODB = "MongoDB"
    POSTGRESQL = "PostgreSQL"
    MYSQL = "MySQL"
    FIRESTORE = "Firebase Firestore"

    @property
    def is_document(self) -> bool:
        return self in (Database.MONGODB, Database.FIRESTORE)


class Auth(str, Enum):
    """Authentication methods."""
    JWT = "JWT"
    FIREBASE = "Firebase Auth"


class Dimension(str, Enum):
    """The four independent stack choices."""
    FRONTEND = "frontend"
    BACKEND = "backend"
    DATABASE = "database"
    AUTH = "auth"


# ---------------------------------------------------------------------------
# Selection & violations
# ---------------------------------------------------------------------------

class StackSelection(BaseModel):
    """One value per stack dimension.  Immutable once built."""

    model_config = ConfigDict(frozen=True)

    frontend: Frontend
    backend: Backend
    database: Database
    auth: Auth

    def describe(self) -> str:
        """Return ``"React + Node + Express + MongoDB + JWT"``."""
        return " + ".join(
            v.value for v in (self.frontend, self.backend, self.database, self.auth)
        )


class Violation(BaseModel):
    """A compatibility problem between two or more dimension values."""

    model_config = ConfigDict(frozen=True)

    message: str
    dimensions: frozenset[Dimension] = Field(default_factory=frozenset)

    def concerns(self, dimension: Dimension) -> bool:
        """Return ``True`` if this violation involves *dimension*."""
        return dimension in self.dimensions

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# User-supplied values
# ---------------------------------------------------------------------------

CONNECTION_PREFIXES: dict[Database, tuple[str, ...]] = {
    Database.MONGODB: ("mongodb://", "mongodb+srv://"),
    Database.POSTGRESQL: ("postgresql://", "postgres://"),
    Database.MYSQL: ("mysql://",),
}


def connection_string_error(database: Database, value: str) -> Optional[str]:
    """Return a problem description for *value*, or ``None`` if it is usable."""
    if not value.strip():
        return "Required"
    prefixes = CONNECTION_PREFIXES.get(database)
    if prefixes and not value.startswith(prefixes):
        return f"Must start with {' or '.join(prefixes)}"
    return None


def needs_connection_string(database: Database) -> bool:
    return database is not Database.FIRESTORE


def needs_firebase_project(selection: StackSelection) -> bool:
    return selection.database is Database.FIRESTORE or selection.auth is Auth.FIREBASE


def needs_jwt_secret(selection: StackSelection) -> bool:
    return selection.auth is Auth.JWT


class ProjectSecrets(BaseModel):
    """Values collected after the stack is chosen.

    Use :meth:`for_selection` to get the cross-field checks; a bare
    instance only enforces types.
    """

    model_config = ConfigDict(frozen=True)

    db_connection: Optional[str] = None
    firebase_project: Optional[str] = None
    jwt_secret: Optional[str] = None

    @classmethod
    def for_selection(cls, selection: StackSelection, **values: Optional[str]) -> "ProjectSecrets":
        """Build secrets and check them against *selection*.

        Raises:
            pydantic.ValidationError: If a value required by the selection is
                missing or a connection string has the wrong scheme.
        """
        return cls.model_validate(values, context={"selection": selection})

    @model_validator(mode="after")
    def _check_against_selection(self, info: ValidationInfo) -> "ProjectSecrets":
        selection = (info.context or {}).get("selection")
        if selection is None:
            return self
        if needs_connection_string(selection.database):
            problem = connection_string_error(selection.database, self.db_connection or "")
            if problem:
                raise ValueError(f"db_connection: {problem}")
        if needs_firebase_project(selection) and not (self.firebase_project or "").strip():
            raise ValueError("firebase_project: Required")
        if needs_jwt_secret(selection) and not (self.jwt_secret or "").strip():
            raise ValueError("jwt_secret: Required")
        return self
