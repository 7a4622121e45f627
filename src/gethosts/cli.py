"""Command-line interface for gethosts.

This module wires configuration, the host list cache and the pattern
filter together and maps failures to exit codes:

    0  hosts printed
    1  host list could not be obtained (download or parse failure)
    2  invalid configuration
"""

import logging
import sys

import click

from gethosts import __version__
from gethosts.cache import HostListCache
from gethosts.config_manager import ConfigManager
from gethosts.exceptions import ConfigError, FetchError, ParseError
from gethosts.host_filter import HostPattern
from gethosts.log_sanitizer import LogSanitizer

logger = logging.getLogger(__name__)


@click.command(context_settings={"help_option_names": ["--help", "-h"]})
@click.argument("pattern", required=False)
@click.option("--url", help="Host list URL", type=str)
@click.option("--cache-dir", help="Cache directory (default: ~/.gethosts)", type=click.Path())
@click.option("--cache-file", help="Cache file name (default: hostslist.txt)", type=str)
@click.option("--user", help="User name for authentication", type=str)
@click.option("--password", help="Password for authentication", type=str)
@click.option(
    "--cache-duration",
    help="Cache duration before trying to refresh, e.g. 1h, 30m, 90s (default: 1h)",
    type=str,
)
@click.option(
    "--verify-tls/--no-verify-tls",
    default=None,
    help="Validate the server TLS certificate (default: off)",
)
@click.option("--timeout", help="Request timeout, e.g. 30s (default: none)", type=str)
@click.option("--refresh", is_flag=True, help="Ignore the cache and download the host list")
@click.option("--config", help="Config file path", type=click.Path())
@click.option("--verbose", "-v", is_flag=True, help="Show cache and download progress")
@click.version_option(version=__version__)
def main(
    pattern: str | None,
    url: str | None,
    cache_dir: str | None,
    cache_file: str | None,
    user: str | None,
    password: str | None,
    cache_duration: str | None,
    verify_tls: bool | None,
    timeout: str | None,
    refresh: bool,
    config: str | None,
    verbose: bool,
) -> None:
    """Print the host list, from cache when fresh.

    PATTERN selects hosts starting with it. Text before the first '@' is
    printed in front of every selected host.

    \b
    Examples:
        gethosts --url https://inventory/hosts --user bob
        gethosts web
        gethosts root@web
        gethosts --refresh --cache-duration 30m db

    \b
    CONFIGURATION:
        Config file: ~/.gethosts/config.toml
        Environment: GETHOSTS_URL, GETHOSTS_USER, GETHOSTS_PASSWORD, ...
    """
    # Set up logging
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        stream=sys.stderr,
    )

    host_pattern = HostPattern.parse(pattern) if pattern is not None else None
    if host_pattern is not None:
        logger.info(
            f"requesting pattern {host_pattern.pattern}, for prefix {host_pattern.display_prefix}"
        )

    try:
        settings = ConfigManager.load_config(
            config,
            cli_values={
                "url": url,
                "user": user,
                "password": password,
                "cache_dir": cache_dir,
                "cache_file": cache_file,
                "cache_duration": cache_duration,
                "verify_tls": verify_tls,
                "timeout": timeout,
            },
        )
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    try:
        hosts = HostListCache(settings).get_hosts(force_refresh=refresh)
    except (FetchError, ParseError) as e:
        click.echo(f"Error: failed to download hosts: {LogSanitizer.sanitize(str(e))}", err=True)
        sys.exit(1)

    if host_pattern is None:
        click.echo(hosts, nl=False)
        return

    for line in host_pattern.apply(hosts):
        click.echo(line)


if __name__ == "__main__":
    main()
