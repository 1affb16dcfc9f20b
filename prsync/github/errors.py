# prsync GitHub Errors
# Exceptions raised by repository host implementations


class GitHubError(Exception):
    """Exception raised for failed repository host calls."""

    def __init__(self, message: str, status: int = 0, method: str = "", url: str = ""):
        self.message = message
        self.status = status
        self.method = method
        self.url = url
        super().__init__(message)


class NotFoundError(GitHubError):
    """The requested file, ref or repository does not exist."""

    def __init__(self, message: str, method: str = "", url: str = ""):
        super().__init__(message, status=404, method=method, url=url)


class UnexpectedPayloadError(GitHubError):
    """The response does not have the shape the operation expects."""
