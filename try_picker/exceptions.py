class TryError(Exception):
    """Base class for errors surfaced to the command line."""


class ConfigError(TryError):
    pass


class ShellLaunchError(TryError):
    pass


class CloneError(TryError):
    """Clone failed; the target directory has been cleaned up."""


class CloneToolMissingError(CloneError):
    def __init__(self, tool: str = "git") -> None:
        self.tool = tool
        super().__init__(f"{tool} is not installed")


class DirectoryCreateError(CloneError):
    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to create directory {path}: {reason}")


class CloneTimeoutError(CloneError):
    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"Clone operation timed out after {timeout:g} seconds")


class CloneFailedError(CloneError):
    def __init__(self, message: str, returncode: int | None = None) -> None:
        self.returncode = returncode
        super().__init__(f"Failed to clone repository: {message}")


class InvalidRepositoryURLError(CloneError):
    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Not a valid repository URL: {url}")
