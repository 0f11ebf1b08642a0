import io

import pytest

from reconmap.graph import Edge, Node
from reconmap.maltego import cidr_to_maltego_netblock, write_maltego_data

HEADER = (
    "maltego.Domain,maltego.DNSName,maltego.NSRecord,maltego.MXRecord,"
    "maltego.IPv4Address,maltego.Netblock,maltego.AS,maltego.Company,maltego.DNSName\n"
)


def _nodes():
    return [
        Node(0, "domain", "owasp.org", "domain: owasp.org", "DNS", "fqdn"),
        Node(1, "address", "205.251.199.98", "address: 205.251.199.98", "DNS", "ipaddr"),
    ]


def _edges():
    return [Edge(0, 1, label="", title="a_record")]


def test_write_maltego_data_without_as_nodes():
    buf = io.StringIO()
    write_maltego_data(buf, _nodes(), _edges())
    assert buf.getvalue() == HEADER


def test_write_maltego_data_traverses_from_as():
    nodes = [
        Node(0, "as", "26808", "as: 26808, Desc: UTICA-COLLEGE", "RIR"),
        Node(1, "netblock", "72.237.4.0/24", "netblock: 72.237.4.0/24", "RIR"),
        Node(2, "address", "72.237.4.113", "address: 72.237.4.113", "DNS"),
        Node(3, "subdomain", "www.example.com", "subdomain: www.example.com", "DNS"),
    ]
    edges = [
        Edge(0, 1, title="prefix"),
        Edge(1, 2, title="contains"),
        Edge(3, 2, title="a_record"),
    ]
    buf = io.StringIO()
    write_maltego_data(buf, nodes, edges)
    assert buf.getvalue().splitlines()[1:] == [
        ",,,,,,26808,UTICA-COLLEGE,",
        ",,,,,72.237.4.0-72.237.4.255,26808,,",
        ",,,,72.237.4.113,72.237.4.0-72.237.4.255,,,",
        ",,,,72.237.4.113,72.237.4.0-72.237.4.255,,,",
        ",www.example.com,,,72.237.4.113,,,,",
        ",www.example.com,,,72.237.4.113,,,,",
    ]


def test_write_maltego_data_malformed_as_title():
    with pytest.raises(ValueError):
        write_maltego_data(io.StringIO(), [Node(0, "as", "1", "as 1", "RIR")], [])


@pytest.mark.parametrize(
    "cidr, expected",
    [
        ("", ""),
        ("193.0.2.1/16", "193.0.0.0-193.0.255.255"),
        ("193.0.2.1/66", ""),
        ("\t192.0.2.1/24", ""),
        ("192.0.2.1/24,", ""),
    ],
)
def test_cidr_to_maltego_netblock(cidr, expected):
    assert cidr_to_maltego_netblock(cidr) == expected