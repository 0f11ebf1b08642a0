"""Request and result records passed between the stages of an enumeration."""

from __future__ import annotations

import dataclasses
import ipaddress
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

# Request tag types.
NONE = "none"
ALT = "alt"
GUESS = "guess"
ARCHIVE = "archive"
API = "api"
AXFR = "axfr"
BRUTE = "brute"
CERT = "cert"
CRAWL = "crawl"
DNS = "dns"
RIR = "rir"
EXTERNAL = "ext"
SCRAPE = "scrape"

# Pub/Sub topics.
NEW_NAME_TOPIC = "amass:newname"
NEW_ADDR_TOPIC = "amass:newaddr"
SUB_DISCOVERED_TOPIC = "amass:newsub"
ASN_REQUEST_TOPIC = "amass:asnreq"
NEW_ASN_TOPIC = "amass:newasn"
WHOIS_REQUEST_TOPIC = "amass:whoisreq"
NEW_WHOIS_TOPIC = "amass:whoisinfo"
LOG_TOPIC = "amass:log"
OUTPUT_TOPIC = "amass:output"

_TRUSTED_TAGS = frozenset({ARCHIVE, AXFR, CERT, CRAWL, DNS})

_MAX_WIRE_LENGTH = 256
_MAX_LABEL_LENGTH = 63
_DDD = re.compile(r"[0-9]{3}")


def _is_fqdn(name: str) -> bool:
    if not name.endswith("."):
        return False
    body = name[:-1]
    backslashes = len(body) - len(body.rstrip("\\"))
    return backslashes % 2 == 0


def _fqdn(name: str) -> str:
    return name if _is_fqdn(name) else name + "."


def _labels(name: str) -> List[str]:
    """Split a domain name into its labels, honouring escaped dots."""
    text = _fqdn(name)
    if text == ".":
        return []
    labels: List[str] = []
    current: List[str] = []
    escaped = False
    for ch in text:
        if escaped:
            current.append(ch)
            escaped = False
        elif ch == "\\":
            current.append(ch)
            escaped = True
        elif ch == ".":
            labels.append("".join(current))
            current = []
        else:
            current.append(ch)
    return labels


def is_domain_name(name: str) -> bool:
    """Report whether name can be packed as a DNS domain name."""
    if not name:
        return False
    text = _fqdn(name)
    offset = 0
    begin = 0
    was_dot = False
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            if offset + 1 > _MAX_WIRE_LENGTH:
                return False
            if _DDD.match(text, i + 1):
                i += 3
                begin += 3
            else:
                i += 1
                begin += 1
            was_dot = False
        elif ch == ".":
            if i == 0 and len(text) > 1:
                return False
            if was_dot:
                return False
            was_dot = True
            label_length = i - begin
            if label_length > _MAX_LABEL_LENGTH:
                return False
            offset += 1 + label_length
            if offset > _MAX_WIRE_LENGTH:
                return False
            begin = i + 1
        else:
            was_dot = False
        i += 1
    return True


def is_subdomain(parent: str, child: str) -> bool:
    """Report whether child equals parent or lies beneath it."""
    parent_labels = _labels(parent)
    child_labels = _labels(child)
    if len(parent_labels) > len(child_labels):
        return False
    return all(
        p.lower() == c.lower()
        for p, c in zip(reversed(parent_labels), reversed(child_labels))
    )


def _parse_ip(text: str) -> Optional[IPAddress]:
    """Parse a textual IP address; IPv4-mapped IPv6 becomes IPv4."""
    if not isinstance(text, str) or "%" in text:
        return None
    try:
        ip = ipaddress.ip_address(text)
    except ValueError:
        return None
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped
    return ip


def _parse_cidr(text: str) -> Optional[IPNetwork]:
    """Parse address/prefix-length notation into the containing network."""
    if not isinstance(text, str):
        return None
    address, sep, bits = text.partition("/")
    if not sep or not bits or not (bits.isascii() and bits.isdigit()):
        return None
    if "%" in address:
        return None
    try:
        ip = ipaddress.ip_address(address)
    except ValueError:
        return None
    length = int(bits)
    if length > ip.max_prefixlen:
        return None
    return ipaddress.ip_network(f"{ip}/{length}", strict=False)


def _names_valid(name: str, domain: str) -> bool:
    return is_domain_name(name) and is_domain_name(domain) and is_subdomain(domain, name)


@dataclass
class DNSAnswer:
    """A single DNS resource record."""

    name: str = ""
    type: int = 0
    ttl: int = 0
    data: str = ""


@dataclass
class DNSRequest:
    """A DNS name moving through the enumeration."""

    name: str = ""
    domain: str = ""
    records: List[DNSAnswer] = field(default_factory=list)
    tag: str = ""
    source: str = ""

    def clone(self) -> "DNSRequest":
        return dataclasses.replace(self, records=list(self.records))

    def valid(self) -> bool:
        return _names_valid(self.name, self.domain)


@dataclass
class ResolvedRequest:
    """A DNS name that has been resolved."""

    name: str = ""
    domain: str = ""
    records: List[DNSAnswer] = field(default_factory=list)
    tag: str = ""
    source: str = ""

    def clone(self) -> "ResolvedRequest":
        return dataclasses.replace(self, records=list(self.records))

    def valid(self) -> bool:
        return _names_valid(self.name, self.domain)


@dataclass
class SubdomainRequest:
    """A subdomain discovered during enumeration."""

    name: str = ""
    domain: str = ""
    records: List[DNSAnswer] = field(default_factory=list)
    tag: str = ""
    source: str = ""
    times: int = 0

    def clone(self) -> "SubdomainRequest":
        """Copy the request; the occurrence count is not carried over."""
        return dataclasses.replace(self, records=list(self.records), times=0)

    def valid(self) -> bool:
        return _names_valid(self.name, self.domain) and self.times != 0


@dataclass
class ZoneXFRRequest:
    """A zone transfer request."""

    name: str = ""
    domain: str = ""
    server: str = ""
    tag: str = ""
    source: str = ""

    def clone(self) -> "ZoneXFRRequest":
        return dataclasses.replace(self)


@dataclass
class AddrRequest:
    """A network address moving through the enumeration."""

    address: str = ""
    in_scope: bool = False
    domain: str = ""
    tag: str = ""
    source: str = ""

    def clone(self) -> "AddrRequest":
        return dataclasses.replace(self)

    def valid(self) -> bool:
        if _parse_ip(self.address) is None:
            return False
        if self.domain and not is_domain_name(self.domain):
            return False
        return True


@dataclass
class ASNRequest:
    """Autonomous system and netblock information."""

    address: str = ""
    asn: int = 0
    prefix: str = ""
    cc: str = ""
    registry: str = ""
    allocation_date: Optional[datetime] = None
    description: str = ""
    netblocks: List[str] = field(default_factory=list)
    tag: str = ""
    source: str = ""

    def clone(self) -> "ASNRequest":
        return dataclasses.replace(self, netblocks=list(self.netblocks))

    def valid(self) -> bool:
        if _parse_ip(self.address) is None:
            return False
        if _parse_cidr(self.prefix) is None:
            return False
        return all(_parse_cidr(netblock) is not None for netblock in self.netblocks)


@dataclass
class WhoisRequest:
    """Data needed for reverse whois processing."""

    domain: str = ""
    company: str = ""
    email: str = ""
    new_domains: List[str] = field(default_factory=list)
    tag: str = ""
    source: str = ""


@dataclass
class AddressInfo:
    """Network addressing information for an output entry."""

    address: Optional[IPAddress] = None
    netblock: Optional[IPNetwork] = None
    cidr_str: str = ""
    asn: int = 0
    description: str = ""


@dataclass
class Output:
    """All output data for an enumerated DNS name."""

    name: str = ""
    domain: str = ""
    addresses: List[AddressInfo] = field(default_factory=list)
    tag: str = ""
    sources: List[str] = field(default_factory=list)

    def clone(self) -> "Output":
        return dataclasses.replace(
            self, addresses=list(self.addresses), sources=list(self.sources)
        )

    def complete(self, passive: bool) -> bool:
        """Check that all the required fields have been populated."""
        if not (self.name and self.domain and self.tag and self.sources):
            return False
        if not all(self.sources):
            return False
        if not passive:
            for info in self.addresses:
                if (
                    info.address is None
                    or info.netblock is None
                    or not info.cidr_str
                    or not info.description
                ):
                    return False
        return True


def trusted_tag(tag: str) -> bool:
    """Report whether names with this tag are trusted despite DNS wildcards."""
    return tag in _TRUSTED_TAGS


def _remove_asterisk_label(name: str) -> str:
    index = name.rfind("*.")
    if index == -1:
        return name
    return name[index + 2:]


def sanitize_dns_request(req: DNSRequest) -> None:
    """Normalise the name and domain of req in place."""
    name = req.name.lower().strip()
    name = _remove_asterisk_label(name)
    req.name = name.strip(".")
    req.domain = req.domain.lower().strip().strip(".")