"""
Environment variable resolution for linked services.

Given a service name, an optional environment and an optional database
environment, compute the ordered list of variable names that belong in the
service's generated ``.env`` file. Raw names carry a ``<SERVICE>_<MODE>_``
prefix (``BE_CS_SERVER_PORT``); the prefix is stripped for the output name
(``SERVER_PORT``).

Backend services share their repository with the database, so a backend
resolution appends the database variables after its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Sequence, Tuple


class ServiceName(str, Enum):
    FRONTEND = "frontend"
    BACKEND = "backend"
    DATABASE = "database"


SERVICE_ORDER: Tuple[str, ...] = tuple(member.value for member in ServiceName)

SERVICE_CODES = ("FE", "BE", "DB")
MODE_CODES = ("SS", "CS", "RS", "TS")

LOCAL_ENVIRONMENT = "testing"
REMOTE_ENVIRONMENT = "remote"

# ``single`` is the older name for the local slot.
ENVIRONMENT_ALIASES: Mapping[str, str] = MappingProxyType({"single": LOCAL_ENVIRONMENT})

EnvironmentTable = Mapping[str, Mapping[str, Sequence[str]]]


def _freeze(table: Mapping[str, Mapping[str, Sequence[str]]]) -> EnvironmentTable:
    return MappingProxyType(
        {
            service: MappingProxyType({env: tuple(names) for env, names in environments.items()})
            for service, environments in table.items()
        }
    )


SERVICE_ENV_VARS: EnvironmentTable = _freeze(
    {
        "frontend": {"default": ()},
        "backend": {
            "testing": ("BE_TS_SERVER_HOSTNAME", "BE_TS_SERVER_PORT", "BE_TS_SERVER_TOKEN_KEY"),
            "connected": ("BE_CS_SERVER_HOSTNAME", "BE_CS_SERVER_PORT", "BE_CS_SERVER_TOKEN_KEY"),
        },
        "database": {
            "testing": (
                "DB_TS_MONGODB_INITDB_ROOT_USERNAME",
                "DB_TS_MONGODB_INITDB_ROOT_PASSWORD",
                "DB_TS_MONGODB_INITDB_PORT",
                "DB_TS_MONGODB_CONNECTION_STRING",
            ),
            "connected": (
                "DB_CS_MONGODB_INITDB_ROOT_USERNAME",
                "DB_CS_MONGODB_INITDB_ROOT_PASSWORD",
                "DB_CS_MONGODB_INITDB_PORT",
                "DB_CS_MONGODB_CONNECTION_STRING",
            ),
            "remote": (
                "DB_RS_MONGODB_INITDB_ROOT_USERNAME",
                "DB_RS_MONGODB_INITDB_ROOT_PASSWORD",
                "DB_RS_MONGODB_INITDB_PORT",
                "DB_RS_MONGODB_CONNECTION_STRING",
            ),
        },
    }
)

DEFAULT_ENVIRONMENTS: Mapping[str, str] = MappingProxyType(
    {
        "frontend": "default",
        "backend": LOCAL_ENVIRONMENT,
        "database": LOCAL_ENVIRONMENT,
    }
)


class EnvironmentResolutionError(ValueError):
    """Base class for all resolution failures."""


class InvalidServiceError(EnvironmentResolutionError):
    def __init__(self, service: str) -> None:
        super().__init__(
            f"Unknown service '{service}'. Expected one of: {', '.join(SERVICE_ORDER)}."
        )
        self.service = service


class InvalidEnvironmentError(EnvironmentResolutionError):
    def __init__(self, service: str, environment: str, available: Sequence[str] = ()) -> None:
        message = f"Service '{service}' has no environment '{environment}'."
        if available:
            message = f"{message} Available: {', '.join(available)}."
        super().__init__(message)
        self.service = service
        self.environment = environment


class InconsistentDatabaseEnvironmentError(EnvironmentResolutionError):
    def __init__(self, service_environment: str, database_environment: str) -> None:
        super().__init__(
            f"Database environment '{database_environment}' does not match backend environment "
            f"'{service_environment}'. A local database must use the backend's environment; "
            f"use '{REMOTE_ENVIRONMENT}' for a hosted database."
        )
        self.service_environment = service_environment
        self.database_environment = database_environment


class InvalidVariableNameError(EnvironmentResolutionError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"Malformed variable name '{name}'. Expected <{'|'.join(SERVICE_CODES)}>_"
            f"<{'|'.join(MODE_CODES)}>_<NAME>."
        )
        self.name = name


def strip_prefix(raw_name: str) -> str:
    """Return ``raw_name`` without its ``<SERVICE>_<MODE>_`` prefix."""

    service_code, sep, rest = raw_name.partition("_")
    if not sep or service_code not in SERVICE_CODES:
        raise InvalidVariableNameError(raw_name)
    mode_code, sep, name = rest.partition("_")
    if not sep or mode_code not in MODE_CODES or not name:
        raise InvalidVariableNameError(raw_name)
    return name


def canonical_environment(environment: Optional[str]) -> Optional[str]:
    if environment is None:
        return None
    return ENVIRONMENT_ALIASES.get(environment, environment)


@dataclass(frozen=True)
class Resolution:
    """Outcome of a successful resolution."""

    service: str
    variable_names: Tuple[str, ...]
    raw_variable_names: Tuple[str, ...]
    service_environment: str
    database_label: Optional[str] = None

    def pairs(self) -> Iterator[Tuple[str, str]]:
        """Yield ``(raw_name, output_name)`` in output order."""
        return zip(self.raw_variable_names, self.variable_names)


class EnvironmentResolver:
    def __init__(
        self,
        tables: EnvironmentTable = SERVICE_ENV_VARS,
        defaults: Mapping[str, str] = DEFAULT_ENVIRONMENTS,
    ) -> None:
        self.tables = tables
        self.defaults = defaults

    def available_environments(self, service: str) -> Tuple[str, ...]:
        return tuple(self.tables.get(service, {}))

    def resolve(
        self,
        service: str,
        environment: Optional[str] = None,
        database_environment: Optional[str] = None,
    ) -> Resolution:
        if service not in SERVICE_ORDER or service not in self.tables:
            raise InvalidServiceError(service)

        resolved = canonical_environment(environment)
        if resolved is None:
            resolved = self.defaults.get(service, "")
        service_table = self.tables[service]
        if resolved not in service_table:
            raise InvalidEnvironmentError(service, resolved, self.available_environments(service))

        raw_names = list(service_table[resolved])
        database_label: Optional[str] = None

        if service == ServiceName.BACKEND.value:
            database_environment = canonical_environment(database_environment)
            is_remote = database_environment == REMOTE_ENVIRONMENT
            if database_environment is not None and not is_remote and database_environment != resolved:
                raise InconsistentDatabaseEnvironmentError(resolved, database_environment)

            database_key = REMOTE_ENVIRONMENT if is_remote else resolved
            database_table = self.tables.get(ServiceName.DATABASE.value, {})
            if database_key not in database_table:
                raise InvalidEnvironmentError(
                    ServiceName.DATABASE.value,
                    database_key,
                    self.available_environments(ServiceName.DATABASE.value),
                )
            raw_names.extend(database_table[database_key])
            database_label = "remote" if is_remote else "local"

        output_names = tuple(strip_prefix(name) for name in raw_names)
        return Resolution(
            service=service,
            variable_names=output_names,
            raw_variable_names=tuple(raw_names),
            service_environment=resolved,
            database_label=database_label,
        )


_default_resolver = EnvironmentResolver()


def resolve(
    service: str,
    environment: Optional[str] = None,
    database_environment: Optional[str] = None,
) -> Resolution:
    """Resolve against the built-in tables."""
    return _default_resolver.resolve(service, environment, database_environment)
