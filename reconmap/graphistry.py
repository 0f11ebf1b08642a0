"""Writer for Graphistry edge-list JSON documents."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Sequence, TextIO

from reconmap.graph import Edge, Node

COLORS = {
    "subdomain": 3,
    "domain": 5,
    "address": 7,
    "ptr": 10,
    "ns": 0,
    "mx": 9,
    "netblock": 4,
    "as": 1,
}

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _graph_name(now: datetime) -> str:
    return (
        f"OWASP_Amass_{_MONTHS[now.month - 1]}_{now.day}_{now.year}"
        f"_{now:%H_%M_%S}"
    )


def write_graphistry_data(output: TextIO, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
    """Write the graph to output as Graphistry JSON."""
    graph_edges = [
        {"src": str(e.from_idx), "dst": str(e.to_idx), "edgeTitle": e.title} for e in edges
    ]
    labels = [
        {
            "node": str(idx),
            "pointLabel": node.label,
            "pointTitle": node.title,
            "pointColor": COLORS.get(node.type, 0),
            "type": node.type,
            "source": node.source,
        }
        for idx, node in enumerate(nodes)
    ]
    document = {
        "name": _graph_name(datetime.now()),
        "type": "edgelist",
        "bindings": {
            "sourceField": "src",
            "destinationField": "dst",
            "idField": "node",
        },
        "graph": graph_edges or None,
        "labels": labels or None,
    }
    text = json.dumps(document, indent=2, ensure_ascii=False)
    for char, escaped in _HTML_ESCAPES.items():
        text = text.replace(char, escaped)
    output.write(text + "\n")