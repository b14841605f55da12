#!/usr/bin/env python3
"""
Print the IP addresses of a host with socket.getaddrinfo().
Python port of showip.c from Beej's Guide to Network Programming.

Usage: showip.py <hostname>
       Set SHOWIP_FAMILY=ipv4 or ipv6 to only ask for one address family.

Exit codes: 0 ok, 1 usage, 2 networking unavailable,
            3 protocol version unsupported, 4 resolution failed.
"""

import contextlib
import enum
import os
import socket
import sys
from collections.abc import Iterator, Sequence
from typing import NamedTuple

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_SUBSYSTEM = 2
EXIT_VERSION = 3
EXIT_RESOLUTION = 4


class FamilyHint(enum.Enum):
    ANY = socket.AF_UNSPEC
    IPV4 = socket.AF_INET
    IPV6 = socket.AF_INET6


class AddressFamily(enum.Enum):
    IPV4 = "IPv4"
    IPV6 = "IPv6"


class ResolutionRequest(NamedTuple):
    hostname: str
    family_hint: FamilyHint = FamilyHint.ANY


class ResolvedAddress(NamedTuple):
    family: AddressFamily
    text: str


class UsageError(Exception):
    pass


class ResolutionError(Exception):
    """Lookup failure; code and message are for display only."""

    exit_code = EXIT_RESOLUTION

    def __init__(self, operation: str, code: int, message: str) -> None:
        super().__init__(f"{operation} failed with code {code}: {message}")
        self.operation = operation
        self.code = code
        self.message = message


class SubsystemUnavailable(ResolutionError):
    exit_code = EXIT_SUBSYSTEM


class UnsupportedVersion(ResolutionError):
    exit_code = EXIT_VERSION


class NotFound(ResolutionError):
    exit_code = EXIT_RESOLUTION


_FAMILIES = {
    socket.AF_INET: AddressFamily.IPV4,
    socket.AF_INET6: AddressFamily.IPV6,
}


def make_address(af: int, host: str) -> ResolvedAddress | None:
    """Build a ResolvedAddress from a raw family and host, or None for non-IP families."""
    family = _FAMILIES.get(af)
    if family is None:
        return None
    # Link-local IPv6 hosts come back as "fe80::1%eth0".
    packed = socket.inet_pton(af, host.partition("%")[0])
    return ResolvedAddress(family, socket.inet_ntop(af, packed))


@contextlib.contextmanager
def network_subsystem(family_hint: FamilyHint = FamilyHint.ANY) -> Iterator[None]:
    """Check the platform resolver is usable for the requested family."""
    # Stands in for WSAStartup() failing; real CPython builds always have getaddrinfo.
    if not hasattr(socket, "getaddrinfo"):
        raise SubsystemUnavailable(
            "socket initialisation", 0, "socket.getaddrinfo is not available"
        )
    if family_hint is FamilyHint.IPV6 and not socket.has_ipv6:
        raise UnsupportedVersion(
            "IPv6 support check", socket.EAI_FAMILY, "this Python was built without IPv6"
        )
    yield


def resolve(
    hostname: str,
    family_hint: FamilyHint = FamilyHint.ANY,
) -> list[ResolvedAddress]:
    """Return the addresses of hostname in the order getaddrinfo() gave them."""
    if not hostname:
        raise ValueError("hostname must be a non-empty string")

    with network_subsystem(family_hint):
        try:
            infos = socket.getaddrinfo(
                hostname, None, family=family_hint.value, type=socket.SOCK_STREAM
            )
        except socket.gaierror as e:
            raise NotFound("getaddrinfo", e.errno, e.strerror or str(e)) from e
        except UnicodeError as e:
            # IDNA encoding of the name failed before any lookup happened.
            raise NotFound("getaddrinfo", socket.EAI_NONAME, str(e)) from e

    addresses = []
    for af, _, _, _, sockaddr in infos:
        address = make_address(af, sockaddr[0])
        if address is not None:
            addresses.append(address)

    if not addresses:
        raise NotFound("getaddrinfo", socket.EAI_NONAME, f"no addresses for {hostname}")
    return addresses


FAMILY_HINTS = {
    "": FamilyHint.ANY,
    "any": FamilyHint.ANY,
    "ipv4": FamilyHint.IPV4,
    "ipv6": FamilyHint.IPV6,
}


def family_hint_from_env() -> FamilyHint:
    """Read SHOWIP_FAMILY; raises UsageError for unknown values."""
    value = os.environ.get("SHOWIP_FAMILY", "").strip().lower()
    hint = FAMILY_HINTS.get(value)
    if hint is None:
        raise UsageError(f"SHOWIP_FAMILY must be any, ipv4 or ipv6, not {value!r}")
    return hint


def parse_args(argv: Sequence[str]) -> ResolutionRequest:
    """Turn argv into a request; raises UsageError."""
    if len(argv) != 2 or not argv[1]:
        raise UsageError("expected exactly one hostname")
    return ResolutionRequest(argv[1], family_hint_from_env())


def format_addresses(hostname: str, addresses: Sequence[ResolvedAddress]) -> str:
    lines = [f"IP addresses for {hostname}:", ""]
    lines.extend(f"  {a.family.value}: {a.text}" for a in addresses)
    return "\n".join(lines) + "\n"


def usage(argv: Sequence[str]) -> str:
    prog = argv[0] if argv else "showip"
    return f"Usage: {prog} <hostname>"


def report(e: ResolutionError) -> int:
    """Print e to stderr and return its exit code."""
    print(f"{e.operation} failed with code {e.code}.", file=sys.stderr)
    print(e.message, file=sys.stderr)
    return e.exit_code


def main(argv: Sequence[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv
    try:
        request = parse_args(argv)
    except UsageError:
        print(usage(argv), file=sys.stderr)
        return EXIT_USAGE

    try:
        addresses = resolve(request.hostname, request.family_hint)
    except ResolutionError as e:
        return report(e)

    sys.stdout.write(format_addresses(request.hostname, addresses))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
