"""gethosts - cached host list fetcher

Philosophy:
- Ruthless simplicity
- Cache first, fetch only when stale
- Security by design (no credentials in logs)
- Fail fast with helpful guidance

The gethosts CLI downloads a host list from a JSON endpoint, keeps a local
copy for a configurable duration, and prints the hosts matching a pattern.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
