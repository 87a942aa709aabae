"""Persistence-level signals surfaced by repository implementations."""


class RepositoryError(Exception):
    """Base class for repository failures the application layer must translate."""

    pass


class RepositoryConflictError(RepositoryError):
    """Write rejected by a uniqueness constraint or a stale version."""

    pass


class RepositoryNotFoundError(RepositoryError):
    """Row to update no longer exists."""

    pass
