"""Host pattern filtering for CLI output.

A pattern argument has the form ``[prefix@]pattern``. Lines of the host
list starting with ``pattern`` are selected, and each selected line is
printed with ``prefix`` in front of it.

Example:
    >>> hp = HostPattern.parse("P@alpha")
    >>> hp.apply("alpha\\nbeta\\nalphabet\\n")
    ['Palpha', 'Palphabet']
"""

from dataclasses import dataclass

PREFIX_SEPARATOR = "@"


@dataclass(frozen=True)
class HostPattern:
    """Prefix match applied to output lines.

    Attributes:
        pattern: Lines must start with this string
        display_prefix: Prepended to every selected line
    """

    pattern: str
    display_prefix: str = ""

    @classmethod
    def parse(cls, argument: str) -> "HostPattern":
        """Split a ``[prefix@]pattern`` argument at the first ``@``.

        Examples:
            >>> HostPattern.parse("web")
            HostPattern(pattern='web', display_prefix='')
            >>> HostPattern.parse("root@web@dc1")
            HostPattern(pattern='web@dc1', display_prefix='root')
        """
        prefix, sep, pattern = argument.partition(PREFIX_SEPARATOR)
        if not sep:
            return cls(pattern=argument)
        return cls(pattern=pattern, display_prefix=prefix)

    def matches(self, line: str) -> bool:
        """Check if a host line starts with the pattern."""
        return line.startswith(self.pattern)

    def apply(self, hosts: str) -> list[str]:
        """Select matching lines in original order and add the display prefix.

        Args:
            hosts: Host list text, one host per line

        Returns:
            Output lines without line terminators
        """
        return [self.display_prefix + line for line in split_hosts(hosts) if self.matches(line)]


def split_hosts(hosts: str) -> list[str]:
    """Split host list text on newlines, dropping the final empty element.

    Examples:
        >>> split_hosts("alpha\\nbeta\\n")
        ['alpha', 'beta']
        >>> split_hosts("")
        []
    """
    lines = hosts.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines
