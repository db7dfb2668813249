"""
Docker API Exceptions
"""

from typing import Optional


class DockerException(Exception):
    """Base Docker exception"""
    pass


class ResolutionError(DockerException):
    """Tenant identifier does not map to a known daemon"""

    def __init__(self, tenant: str, message: Optional[str] = None):
        super().__init__(message or f"Unknown docker daemon: {tenant}")
        self.tenant = tenant


class RequestBuildError(DockerException):
    """Request could not be built (bad URL, encoding or options)"""
    pass


class TransportError(DockerException):
    """Daemon could not be reached or did not answer in time"""

    def __init__(self, message: str, url: Optional[str] = None, timeout: bool = False):
        super().__init__(message)
        self.url = url
        self.timeout = timeout


class UpstreamError(DockerException):
    """Daemon answered with a non-2xx status"""

    def __init__(self, message: str, status_code: int, response=None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response
