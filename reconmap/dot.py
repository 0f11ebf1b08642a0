"""Writer for DOT graph descriptions."""

from __future__ import annotations

from typing import Iterable, Sequence, TextIO, Tuple

from reconmap.graph import Edge, Node

GRAPH_NAME = "OWASP Amass Network Mapping"

COLORS = {
    "subdomain": "green",
    "domain": "red",
    "address": "orange",
    "ptr": "yellow",
    "ns": "cyan",
    "mx": "purple",
    "netblock": "pink",
    "as": "blue",
}

_GRAPH_SETTINGS = ('size = "7.5,10"', 'ranksep="2.5 equally"', "ratio=auto")
_INDENT = " " * 8


def _attributes(pairs: Iterable[Tuple[str, str]]) -> str:
    return ",".join(f'{key}="{value}"' for key, value in pairs)


def _block(lines: Iterable[str]) -> str:
    return "".join(f"\n{_INDENT}{line}\n" for line in lines)


def write_dot_data(output: TextIO, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
    """Write the graph to output in DOT format."""
    header = f'digraph "{GRAPH_NAME}" {{'
    settings = "\t" + "; ".join(_GRAPH_SETTINGS) + ";"

    node_lines = (
        "node ["
        + _attributes(
            (
                ("label", node.label),
                ("color", COLORS.get(node.type, "")),
                ("type", node.type),
                ("source", node.source),
            )
        )
        + f"]; n{number};"
        for number, node in enumerate(nodes, start=1)
    )
    edge_lines = (
        f"n{edge.from_idx + 1} -> n{edge.to_idx + 1} [{_attributes([('label', edge.title)])}];"
        for edge in edges
    )

    text = (
        f"\n{header}\n{settings}\n\n"
        + _block(node_lines)
        + "\n\n"
        + _block(edge_lines)
        + "\n}\n"
    )
    output.write(text)