"""Generation strategies keyed by stack enumeration.

Each frontend maps to the scaffolding command that creates it, each
database to its Node driver and connection-module template (plus the
Python packages each Python backend needs for it), and each backend to the
family of generator that builds it and the databases it has templates for.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from stackwright.config import Config
from stackwright.stack.models import Auth, Backend, Database, Frontend
from stackwright.utils import sanitize_name


class TemplateResolutionError(Exception):
    """Raised when no generation strategy exists for a backend/database pair."""

    def __init__(self, backend: Backend, database: Database) -> None:
        self.backend = backend
        self.database = database
        super().__init__(
            f"Required template not found for {backend.value} + {database.value}."
        )


# ---------------------------------------------------------------------------
# Frontend
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FrontendStrategy:
    """Command that scaffolds a frontend into the current directory."""

    build_command: Callable[[Config], list[str]]


FRONTEND_STRATEGIES: dict[Frontend, FrontendStrategy] = {
    Frontend.REACT: FrontendStrategy(
        lambda c: [c.npx, "-y", "create-react-app", "."],
    ),
    Frontend.NEXT: FrontendStrategy(
        lambda c: [c.npx, "-y", "create-next-app@latest", ".", "--yes"],
    ),
    Frontend.VUE: FrontendStrategy(
        lambda c: [c.npm, "create", "vue@latest", ".", "--", "--yes"],
    ),
    Frontend.ANGULAR: FrontendStrategy(
        lambda c: [
            c.npx, "-p", "@angular/cli", "ng", "new",
            f"{sanitize_name(c.project_name)}-client",
            "--directory", ".", "--skip-install", "--defaults",
        ],
    ),
    Frontend.SVELTE: FrontendStrategy(
        lambda c: [c.npm, "create", "svelte@latest", "."],
    ),
}


def frontend_command(frontend: Frontend, config: Config) -> list[str]:
    """Return the fully resolved scaffolding command for *frontend*."""
    return FRONTEND_STRATEGIES[frontend].build_command(config)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DatabaseStrategy:
    node_package: str
    node_template: str
    python_packages: dict[Backend, tuple[str, ...]] = field(default_factory=dict)


DATABASE_STRATEGIES: dict[Database, DatabaseStrategy] = {
    Database.MONGODB: DatabaseStrategy(
        node_package="mongoose",
        node_template="node/db/mongodb.js.j2",
    ),
    Database.POSTGRESQL: DatabaseStrategy(
        node_package="pg",
        node_template="node/db/postgresql.js.j2",
        python_packages={
            Backend.FLASK: ("flask-sqlalchemy", "psycopg2-binary"),
            Backend.DJANGO: ("psycopg2-binary",),
        },
    ),
    Database.MYSQL: DatabaseStrategy(
        node_package="mysql2",
        node_template="node/db/mysql.js.j2",
        python_packages={
            Backend.FLASK: ("flask-sqlalchemy", "mysql-connector-python"),
            Backend.DJANGO: ("mysqlclient",),
        },
    ),
    Database.FIRESTORE: DatabaseStrategy(
        node_package="firebase-admin",
        node_template="node/db/firestore.js.j2",
    ),
}


# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------

class BackendFamily(str, Enum):
    """Backends sharing one generation sub-sequence."""
    NODE = "node"
    FLASK = "flask"
    DJANGO = "django"


@dataclass(frozen=True)
class BackendStrategy:
    family: BackendFamily
    databases: frozenset[Database]
    base_packages: tuple[str, ...]
    auth_packages: dict[Auth, tuple[str, ...]] = field(default_factory=dict)


_ALL_DATABASES = frozenset(Database)
_SQL_DATABASES = frozenset({Database.POSTGRESQL, Database.MYSQL})
_NODE_AUTH_PACKAGES = {
    Auth.JWT: ("jsonwebtoken", "bcryptjs"),
    Auth.FIREBASE: ("firebase-admin",),
}

BACKEND_STRATEGIES: dict[Backend, BackendStrategy] = {
    Backend.EXPRESS: BackendStrategy(
        family=BackendFamily.NODE,
        databases=_ALL_DATABASES,
        base_packages=("dotenv", "cors", "express"),
        auth_packages=_NODE_AUTH_PACKAGES,
    ),
    Backend.FASTIFY: BackendStrategy(
        family=BackendFamily.NODE,
        databases=_ALL_DATABASES,
        base_packages=("dotenv", "cors", "fastify", "@fastify/cors"),
        auth_packages=_NODE_AUTH_PACKAGES,
    ),
    Backend.FLASK: BackendStrategy(
        family=BackendFamily.FLASK,
        databases=_SQL_DATABASES,
        base_packages=("flask", "flask-cors", "python-dotenv"),
        auth_packages={Auth.JWT: ("pyjwt",)},
    ),
    Backend.DJANGO: BackendStrategy(
        family=BackendFamily.DJANGO,
        databases=_SQL_DATABASES,
        base_packages=(
            "django", "djangorestframework", "python-dotenv", "django-cors-headers",
        ),
        auth_packages={Auth.JWT: ("djangorestframework-simplejwt",)},
    ),
}


def dependencies(backend: Backend, database: Database, auth: Auth) -> list[str]:
    """Return the packages to install for a backend, without duplicates."""
    strategy = BACKEND_STRATEGIES[backend]
    db_strategy = DATABASE_STRATEGIES[database]

    packages = list(strategy.base_packages)
    if strategy.family is BackendFamily.NODE:
        packages.append(db_strategy.node_package)
    else:
        packages.extend(db_strategy.python_packages.get(backend, ()))
    packages.extend(strategy.auth_packages.get(auth, ()))

    return list(dict.fromkeys(packages))


# ---------------------------------------------------------------------------
# Template resolution
# ---------------------------------------------------------------------------

def has_template(backend: Backend, database: Database) -> bool:
    """Return ``True`` if a generation strategy is registered for the pair."""
    strategy = BACKEND_STRATEGIES.get(backend)
    if strategy is None or database not in strategy.databases:
        return False
    db_strategy = DATABASE_STRATEGIES.get(database)
    if db_strategy is None:
        return False
    if strategy.family is not BackendFamily.NODE:
        return backend in db_strategy.python_packages
    return True


def require_template(backend: Backend, database: Database) -> None:
    """Raise :class:`TemplateResolutionError` unless :func:`has_template`."""
    if not has_template(backend, database):
        raise TemplateResolutionError(backend, database)
