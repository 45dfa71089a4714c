from __future__ import annotations


class InstallerError(RuntimeError):
    """Base class for failures that abort the run."""


class CommandError(InstallerError):
    def __init__(self, argv: list[str], returncode: int, stderr: str = "") -> None:
        self.argv = argv
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Command failed ({returncode}): {' '.join(argv)}\n{stderr}".rstrip())


class PreconditionError(InstallerError):
    pass


class ConfigError(InstallerError, ValueError):
    pass


class ArchiveError(InstallerError):
    pass
