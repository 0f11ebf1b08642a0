"""Writer for Maltego table (CSV) imports."""

from __future__ import annotations

from typing import List, Sequence, Set, TextIO

from reconmap.graph import Edge, Node
from reconmap.requests import _parse_cidr

COLUMN_TYPES = (
    "maltego.Domain",
    "maltego.DNSName",
    "maltego.NSRecord",
    "maltego.MXRecord",
    "maltego.IPv4Address",
    "maltego.Netblock",
    "maltego.AS",
    "maltego.Company",
    "maltego.DNSName",
)

_TYPE_INDEX = {
    "domain": 0,
    "subdomain": 1,
    "ptr": 8,
    "cname": 8,
    "address": 4,
    "ns": 2,
    "mx": 3,
    "netblock": 5,
    "as": 6,
    "company": 7,
}


def cidr_to_maltego_netblock(cidr: str) -> str:
    """Render a CIDR as 'first-last' address range, or '' when it does not parse."""
    network = _parse_cidr(cidr)
    if network is None:
        return ""
    return f"{network.network_address}-{network.broadcast_address}"


def _write_line(output: TextIO, data1: str, type1: str, data2: str, type2: str) -> None:
    row: List[str] = [""] * len(COLUMN_TYPES)
    for data, kind in ((data1, type1), (data2, type2)):
        row[_TYPE_INDEX.get(kind, 0)] = (
            cidr_to_maltego_netblock(data) if kind == "netblock" else data
        )
    output.write(",".join(row) + "\n")


def _next_node(ident: int, outgoing: bool, edge: Edge):
    if outgoing:
        return edge.to_idx if edge.from_idx == ident else None
    return edge.from_idx if edge.to_idx == ident else None


def _company(title: str) -> str:
    parts = title.split(":")
    if len(parts) < 3:
        raise ValueError(f"AS node title has no description: {title!r}")
    return parts[2].strip().replace(",", "")


def _traverse(
    output: TextIO,
    ident: int,
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    seen: Set[int],
) -> None:
    node = nodes[ident]
    d1, t1 = node.label, node.type
    outgoing = t1 in ("netblock", "as")

    if ident in seen:
        return
    seen.add(ident)

    if t1 == "as":
        _write_line(output, d1, t1, _company(node.title), "company")

    for edge in edges:
        sub_outgoing = outgoing
        n = _next_node(ident, outgoing, edge)
        if n is None and t1 in ("subdomain", "domain"):
            sub_outgoing = True
            n = _next_node(ident, sub_outgoing, edge)
        if n is None:
            continue

        d2, t2 = nodes[n].label, nodes[n].type
        if "cname" in edge.title:
            if sub_outgoing:
                _write_line(output, d1, "cname", d2, t2)
            else:
                _write_line(output, d1, t1, d2, "cname")
        else:
            _write_line(output, d1, t1, d2, t2)
        _traverse(output, n, nodes, edges, seen)


def write_maltego_data(output: TextIO, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
    """Write the graph as a Maltego table, walking outward from each autonomous system."""
    output.write(",".join(COLUMN_TYPES) + "\n")
    seen: Set[int] = set()
    for idx, node in enumerate(nodes):
        if node.type == "as":
            _traverse(output, idx, nodes, edges, seen)