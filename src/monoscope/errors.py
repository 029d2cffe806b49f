"""monoscope exception hierarchy."""

from __future__ import annotations


class MonoscopeError(Exception):
    """Base class for all monoscope errors.

    Attributes:
        message: Human readable error message.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(MonoscopeError):
    """Invalid or unreadable monoscope.yaml."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class WorkspaceNotFoundError(MonoscopeError):
    """No monoscope.yaml found in the directory or any of its parents."""

    def __init__(self, start: str) -> None:
        self.start = start
        super().__init__(f"No monoscope.yaml found in {start} or any parent directory")


class PackageNotFoundError(MonoscopeError):
    """A package name was not found in the workspace."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = available or []
        message = f"Package '{name}' not found in workspace"
        if self.available:
            message += f" (available: {', '.join(sorted(self.available))})"
        super().__init__(message)


class CyclicDependencyError(MonoscopeError):
    """Workspace dependency graph contains a cycle."""

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__(f"Cyclic dependency detected: {' -> '.join(cycle)}")


class InvalidGlobError(MonoscopeError):
    """An --ignore or --global-deps glob could not be compiled.

    Attributes:
        option: Name of the option the pattern came from.
        pattern: The offending pattern.
    """

    def __init__(self, option: str, pattern: str, reason: str) -> None:
        self.option = option
        self.pattern = pattern
        super().__init__(f"invalid {option} glob {pattern!r}: {reason}")


class GitError(MonoscopeError):
    """A git command failed."""

    def __init__(self, message: str, *, command: str | None = None) -> None:
        self.command = command
        if command:
            message = f"{message} (command: {command})"
        super().__init__(message)


class InferenceResolutionError(MonoscopeError):
    """The package inference root could not be related to package directories."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"cannot infer packages from {path}: {reason}")


class PatternEvaluationError(MonoscopeError):
    """A filter pattern is malformed or selects an unknown package."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        super().__init__(f"invalid filter {pattern!r}: {reason}")


class ValidationError(MonoscopeError):
    """Command options failed validation."""
