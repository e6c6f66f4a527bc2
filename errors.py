# errors.py


class SiteHookError(Exception):
    """Base exception for all sitehook errors."""
    pass


class ConfigError(SiteHookError):
    """Raised when the configuration file cannot be used. Fatal at startup."""
    pass


class ConfigIOError(ConfigError):
    pass


class ConfigParseError(ConfigError):
    pass


class ConfigValidationError(ConfigError):
    def __init__(self, problems):
        self.problems = list(problems)
        super().__init__(", ".join(self.problems))


class RateLimitRejection(SiteHookError):
    """Raised when a refresh is attempted before the rate-limit interval elapsed."""
    pass


class RequestFormatError(SiteHookError):
    """Raised when a webhook request cannot be turned into a branch name."""
    def __init__(self, message: str, status_code: int):
        self.status_code = status_code
        super().__init__(message)


class RefreshError(SiteHookError):
    """Raised when a site refresh fails."""
    pass


class WorkspaceError(RefreshError):
    """Raised when no temporary checkout directory can be created."""
    pass


class CommandError(RefreshError):
    def __init__(self, message: str, returncode: int = None, stdout: str = "", stderr: str = ""):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)


class CloneError(CommandError):
    pass


class SyncError(CommandError):
    pass
