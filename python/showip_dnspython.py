#!/usr/bin/env python3
"""
Print the IP addresses of a host by querying A/AAAA records with dnspython.
Same CLI, output and exit codes as showip.py.

Usage: showip_dnspython.py <hostname>

Set SHOWIP_NAMESERVER (e.g. 8.8.8.8) to bypass the system nameservers
and SHOWIP_FAMILY=ipv4 or ipv6 to query only A or AAAA records.
Unlike getaddrinfo(), dnspython never reads the hosts file.
"""

import contextlib
import os
import socket
import sys
from collections.abc import Iterator, Sequence

import dns.exception
import dns.rcode
import dns.resolver
import dns.version

from showip import (
    EXIT_OK,
    EXIT_USAGE,
    FamilyHint,
    NotFound,
    ResolutionError,
    ResolvedAddress,
    SubsystemUnavailable,
    UnsupportedVersion,
    UsageError,
    format_addresses,
    make_address,
    parse_args,
    report,
    usage,
)

QUERIES = {
    FamilyHint.ANY: (("A", socket.AF_INET), ("AAAA", socket.AF_INET6)),
    FamilyHint.IPV4: (("A", socket.AF_INET),),
    FamilyHint.IPV6: (("AAAA", socket.AF_INET6),),
}


@contextlib.contextmanager
def dns_subsystem(server: str | None = None) -> Iterator[dns.resolver.Resolver]:
    """Yield a resolver configured from the system, or pointed at server."""
    if dns.version.MAJOR < 2:
        raise UnsupportedVersion(
            "dnspython version check",
            dns.version.MAJOR,
            f"dnspython 2.0 or later is required, found {dns.version.version}",
        )
    try:
        resolver = dns.resolver.Resolver(configure=(server is None))
    except dns.resolver.NoResolverConfiguration as e:
        raise SubsystemUnavailable(
            "resolver configuration", int(dns.rcode.SERVFAIL), str(e)
        ) from e
    if server is not None:
        resolver.nameservers = [server]
    yield resolver


def _query(
    resolver: dns.resolver.Resolver,
    hostname: str,
    rdtype: str,
) -> list[str] | None:
    """Return the addresses in one RRset, or None if the name has no such records."""
    try:
        answer = resolver.resolve(hostname, rdtype)
    except dns.resolver.NXDOMAIN as e:
        raise NotFound(f"{rdtype} query", int(dns.rcode.NXDOMAIN), str(e)) from e
    except dns.resolver.NoAnswer:
        return None
    except dns.exception.DNSException as e:
        raise NotFound(f"{rdtype} query", int(dns.rcode.SERVFAIL), str(e)) from e
    return [rdata.address for rdata in answer]


def resolve(
    hostname: str,
    family_hint: FamilyHint = FamilyHint.ANY,
    resolver: dns.resolver.Resolver | None = None,
) -> list[ResolvedAddress]:
    """Return the A and/or AAAA addresses of hostname in answer order."""
    if not hostname:
        raise ValueError("hostname must be a non-empty string")

    with contextlib.ExitStack() as stack:
        if resolver is None:
            server = os.environ.get("SHOWIP_NAMESERVER") or None
            resolver = stack.enter_context(dns_subsystem(server))

        addresses = []
        for rdtype, af in QUERIES[family_hint]:
            hosts = _query(resolver, hostname, rdtype)
            for host in hosts or ():
                addresses.append(make_address(af, host))

    if not addresses:
        raise NotFound(
            "A/AAAA query",
            int(dns.rcode.NOERROR),
            f"{hostname} has no address records",
        )
    return addresses


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
