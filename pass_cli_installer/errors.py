from __future__ import annotations

from typing import Optional


class InstallerError(RuntimeError):
    """Base class for installer failures.

    ``step`` is filled in by the pipeline with the id of the step that raised.
    """

    step: Optional[str] = None

    def describe(self) -> str:
        return describe_failure(self)


def describe_failure(exc: BaseException) -> str:
    """One-line report naming the failing step when the pipeline tagged one."""

    step = getattr(exc, "step", None)
    reason = str(exc) or type(exc).__name__
    if step:
        return f"step {step} failed: {reason}"
    return reason


class UnsupportedPlatformError(InstallerError):
    def __init__(self, operating_system: str, architecture: str, supported: list[tuple[str, str]]):
        self.operating_system = operating_system
        self.architecture = architecture
        self.supported = supported
        pairs = ", ".join(f"{o}/{a}" for o, a in supported)
        super().__init__(f"unsupported platform {operating_system}/{architecture} (supported: {pairs})")


class IntegrityError(InstallerError):
    def __init__(self, message: str, *, expected: Optional[str] = None, actual: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class FilesystemError(InstallerError):
    pass


class SubprocessError(InstallerError):
    """The child process could not be launched or its output captured."""

    def __init__(self, message: str, *, argv: Optional[list[str]] = None):
        self.argv = argv or []
        super().__init__(message)


class CommandFailedError(SubprocessError):
    """The child process launched but exited non-zero."""

    def __init__(self, message: str, *, argv: list[str], returncode: int, stderr: str = ""):
        super().__init__(message, argv=argv)
        self.returncode = returncode
        self.stderr = stderr


class CatalogError(ValueError):
    pass
