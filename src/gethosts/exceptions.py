"""Custom exceptions for gethosts."""


class GetHostsError(Exception):
    """Base exception for gethosts errors."""

    pass


class ConfigError(GetHostsError):
    """Configuration is missing, unreadable or invalid."""

    pass


class FetchError(GetHostsError):
    """Host list could not be downloaded."""

    pass


class RequestBuildError(FetchError):
    """Request could not be built (malformed URL)."""

    pass


class TransportError(FetchError):
    """Connection failed (unreachable host, TLS failure, timeout)."""

    pass


class BodyReadError(FetchError):
    """Response body could not be read."""

    pass


class ParseError(GetHostsError):
    """Downloaded payload is not a valid host list."""

    pass


class HostCacheError(GetHostsError):
    """Cache persistence failed."""

    pass


class CacheDirCreateError(HostCacheError):
    """Cache directory could not be created."""

    pass


class CacheWriteError(HostCacheError):
    """Cache file could not be written."""

    pass
