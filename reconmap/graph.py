"""Nodes and edges of an enumeration graph, prepared for visualisation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

_SKIPPED_TYPES = frozenset({"", "source", "event", "response"})

_EDGE_PREDICATES = frozenset(
    {
        "root",
        "cname_record",
        "a_record",
        "aaaa_record",
        "ptr_record",
        "service",
        "srv_record",
        "ns_record",
        "mx_record",
        "contains",
        "prefix",
    }
)

_IN_EDGE_TYPES = {"root": "domain", "ns_record": "ns", "mx_record": "mx"}


@dataclass
class Edge:
    """A directed edge between two nodes, referenced by their indices."""

    from_idx: int
    to_idx: int
    label: str = ""
    title: str = ""


@dataclass
class Node:
    """A graph node as shown by the visualisation writers."""

    id: int = 0
    type: str = ""
    label: str = ""
    title: str = ""
    source: str = ""
    actual_type: str = ""


@dataclass(frozen=True)
class Quad:
    """A subject-predicate-object statement read from the graph store."""

    subject: str
    predicate: str
    object: str
    label: str = ""


def _val_to_str(value: str) -> str:
    if value.startswith("<"):
        return value.lstrip("<").rstrip(">")
    return value.strip('"')


_Index = Dict[str, List[Quad]]


def _first_object(quads: Iterable[Quad], predicate: str) -> str:
    for q in quads:
        if _val_to_str(q.predicate) == predicate:
            return _val_to_str(q.object)
    return ""


def _is_tld(ident: str, index: _Index) -> bool:
    return any(
        _val_to_str(q.object) == ident and _val_to_str(q.predicate) == "tld"
        for qs in index.values()
        for q in qs
    )


def _get_source(ident: str, events: Sequence[str], index: _Index) -> str:
    for event in events:
        for q in index.get(event, []):
            if _val_to_str(q.object) == ident:
                pred = _val_to_str(q.predicate)
                if pred and pred != "domain":
                    return pred
    return ""


def _out_edges(quads: Iterable[Quad], preds: Iterable[str]) -> List[Quad]:
    wanted = frozenset(preds)
    return [q for q in quads if (p := _val_to_str(q.predicate)) and p in wanted]


def _in_edge(ident: str, index: _Index, preds: Iterable[str]) -> str:
    """Return the matching predicate of the last subject pointing at ident."""
    wanted = frozenset(preds)
    result = ""
    for qs in index.values():
        for q in qs:
            if _val_to_str(q.object) == ident:
                pred = _val_to_str(q.predicate)
                if pred and pred in wanted:
                    result = pred
                    break
    return result


def _convert_node_type(ident: str, ntype: str, index: _Index) -> str:
    if ntype == "fqdn":
        incoming = _in_edge(ident, index, _IN_EDGE_TYPES)
        if incoming:
            return _IN_EDGE_TYPES[incoming]
        if _out_edges(index.get(ident, []), ["ptr_record"]):
            return "ptr"
        return "subdomain"
    if ntype == "ipaddr":
        return "address"
    return ntype


def _viz_edges(nodes: Sequence[Node], node_to_idx: Dict[str, int], index: _Index) -> List[Edge]:
    edges: List[Edge] = []
    for node in nodes:
        for q in _out_edges(index.get(node.label, []), _EDGE_PREDICATES):
            pred = _val_to_str(q.predicate)
            target = node_to_idx.get(_val_to_str(q.object))
            if target is not None and pred:
                edges.append(Edge(from_idx=node.id, to_idx=target, title=pred))
    return edges


def viz_data(quads: Iterable[Quad], uuids: Sequence[str]) -> Tuple[List[Node], List[Edge]]:
    """Build visualisation nodes and edges from the quads of the given events."""
    index: _Index = {}
    for q in quads:
        subject = _val_to_str(q.subject)
        if subject:
            index.setdefault(subject, []).append(q)

    nodes: List[Node] = []
    node_to_idx: Dict[str, int] = {}
    for subject, qs in index.items():
        ntype = _first_object(qs, "type")
        if ntype in _SKIPPED_TYPES:
            continue
        if ntype == "fqdn" and _is_tld(subject, index):
            continue

        source = _get_source(subject, uuids, index)
        if not source:
            continue

        newtype = _convert_node_type(subject, ntype, index)
        if not newtype:
            continue

        title = f"{newtype}: {subject}"
        if newtype == "as":
            title += ", Desc: " + _first_object(qs, "description")

        idx = len(nodes)
        node_to_idx[subject] = idx
        nodes.append(
            Node(
                id=idx,
                type=newtype,
                label=subject,
                title=title,
                source=source,
                actual_type=ntype,
            )
        )

    return nodes, _viz_edges(nodes, node_to_idx, index)