import ipaddress
from datetime import datetime

import pytest

from reconmap.requests import (
    ALT,
    API,
    ARCHIVE,
    AXFR,
    BRUTE,
    CERT,
    DNS,
    EXTERNAL,
    GUESS,
    NONE,
    SCRAPE,
    AddressInfo,
    AddrRequest,
    ASNRequest,
    DNSAnswer,
    DNSRequest,
    Output,
    ResolvedRequest,
    SubdomainRequest,
    ZoneXFRRequest,
    is_domain_name,
    is_subdomain,
    sanitize_dns_request,
    trusted_tag,
)


@pytest.mark.parametrize(
    "tag, expected",
    [
        (NONE, False),
        (ALT, False),
        (GUESS, False),
        (ARCHIVE, True),
        (API, False),
        (AXFR, True),
        (BRUTE, False),
        (CERT, True),
        (DNS, True),
        (EXTERNAL, False),
        (SCRAPE, False),
    ],
)
def test_trusted_tag(tag, expected):
    assert trusted_tag(tag) is expected


@pytest.mark.parametrize("cls", [DNSRequest, ResolvedRequest, SubdomainRequest])
def test_name_request_clone(cls):
    req = cls(name="test", domain="www.example.com", records=[], tag="test", source="test")
    clone = req.clone()
    assert clone.name == req.name
    assert clone.domain == req.domain
    assert clone.records == req.records
    assert clone.tag == req.tag
    assert clone.source == req.source


@pytest.mark.parametrize("cls", [DNSRequest, ResolvedRequest, SubdomainRequest])
def test_clone_copies_records(cls):
    req = cls(name="a.example.com", domain="example.com", records=[DNSAnswer(name="a", type=1)])
    clone = req.clone()
    clone.records.append(DNSAnswer(name="b"))
    assert len(req.records) == 1
    assert len(clone.records) == 2


def test_subdomain_clone_drops_times():
    req = SubdomainRequest(name="a.example.com", domain="example.com", times=3)
    assert req.clone().times == 0


@pytest.mark.parametrize(
    "cls, name, domain, expected",
    [
        (DNSRequest, "test", "www.example.com", False),
        (DNSRequest, "example.com", "example.com", True),
        (ResolvedRequest, "test", "www.example.com", False),
        (ResolvedRequest, "example.com", "example.com", True),
    ],
)
def test_name_request_valid(cls, name, domain, expected):
    req = cls(name=name, domain=domain, records=[], tag="test", source="test")
    assert req.valid() is expected


def test_subdomain_request_valid():
    invalid = SubdomainRequest(name="test", domain="www.example.com", tag="test", source="test", times=0)
    valid = SubdomainRequest(name="example.com", domain="example.com", tag="test", source="test", times=3)
    assert invalid.valid() is False
    assert valid.valid() is True


def test_subdomain_request_zero_times_invalid():
    req = SubdomainRequest(name="www.example.com", domain="example.com", times=0)
    assert req.valid() is False


def test_zone_xfr_clone():
    req = ZoneXFRRequest(name="test", domain="www.example.com", server="test", tag="test", source="test")
    clone = req.clone()
    assert clone == req
    assert clone is not req


def test_addr_request_clone():
    req = AddrRequest(address="8.8.8.8", domain="www.example.com", in_scope=True, tag="test", source="test")
    clone = req.clone()
    assert clone.address == "8.8.8.8"
    assert clone.domain == "www.example.com"
    assert clone.in_scope is True
    assert clone.tag == "test"
    assert clone.source == "test"


@pytest.mark.parametrize(
    "address, domain, expected",
    [
        ("NotAnIP", "www.example.com", False),
        ("8.8.8.8", "example.com", True),
        ("8.8.8.8", "", True),
        ("2001:db8::1", "", True),
        ("8.8.8.8", "a..b", False),
    ],
)
def test_addr_request_valid(address, domain, expected):
    assert AddrRequest(address=address, domain=domain).valid() is expected


@pytest.mark.parametrize(
    "name, domain",
    [("   Example.com   ", "                    Example.com"), ("*.Example.com", "Example.com")],
)
def test_sanitize_dns_request(name, domain):
    req = DNSRequest(name=name, domain=domain, tag="test", source="test")
    sanitize_dns_request(req)
    assert req.name == "example.com"
    assert req.domain == "example.com"


def test_sanitize_trims_dots():
    req = DNSRequest(name=".www.Example.com.", domain="example.com.")
    sanitize_dns_request(req)
    assert req.name == "www.example.com"
    assert req.domain == "example.com"


def test_asn_request_clone():
    now = datetime.now()
    req = ASNRequest(address="8.8.8.8", asn=11111, allocation_date=now, netblocks=[], tag="test", source="test")
    clone = req.clone()
    assert clone == req
    assert clone.allocation_date == now
    clone.netblocks.append("8.8.8.0/24")
    assert req.netblocks == []


@pytest.mark.parametrize(
    "address, prefix, netblocks, expected",
    [
        ("8.8.8.8", "8.8.8.8/8", [], True),
        ("8.8.8.8", "", [], False),
        ("300.300.300.300", "8.8.8.8/8", [], False),
        ("8.8.8.8", "8.8.8.0/24", ["8.8.0.0/16", "bad"], False),
        ("8.8.8.8", "8.8.8.0/33", [], False),
    ],
)
def test_asn_request_valid(address, prefix, netblocks, expected):
    req = ASNRequest(address=address, asn=11111, prefix=prefix, netblocks=netblocks)
    assert req.valid() is expected


@pytest.mark.parametrize(
    "parent, child, expected",
    [
        ("example.com", "www.Example.COM.", True),
        ("example.com", "example.com", True),
        ("www.example.com", "test", False),
        ("example.com", "example.org", False),
        (".", "anything.example", True),
    ],
)
def test_is_subdomain(parent, child, expected):
    assert is_subdomain(parent, child) is expected


def _full_address():
    return AddressInfo(
        address=ipaddress.ip_address("8.8.8.8"),
        netblock=ipaddress.ip_network("8.8.8.0/24"),
        cidr_str="8.8.8.0/24",
        asn=15169,
        description="GOOGLE",
    )


def test_output_complete():
    out = Output(name="www.example.com", domain="example.com", tag=DNS, sources=["DNS"], addresses=[_full_address()])
    assert out.complete(False) is True


def test_output_incomplete_address_only_matters_when_active():
    out = Output(name="www.example.com", domain="example.com", tag=DNS, sources=["DNS"], addresses=[AddressInfo()])
    assert out.complete(True) is True
    assert out.complete(False) is False


def test_output_missing_fields():
    assert Output(name="www.example.com", domain="example.com", tag=DNS).complete(True) is False
    assert Output(name="www.example.com", domain="example.com", tag=DNS, sources=[""]).complete(True) is False


def test_output_clone_independent():
    out = Output(name="a.example.com", domain="example.com", tag=DNS, sources=["DNS"])
    clone = out.clone()
    clone.sources.append("other")
    assert out.sources == ["DNS"]
    assert clone.sources == ["DNS", "other"]