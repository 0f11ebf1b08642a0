"""Writer for GEXF documents readable by Gephi."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Sequence, TextIO, Tuple

from reconmap.graph import Edge, Node

XML_NS = "http://www.gephi.org/gexf"
XML_NS_VIZ = "http://www.gephi.org/gexf/viz"

CREATOR = "OWASP Amass"
DESCRIPTION = "OWASP Amass Network Mapping"

COLORS: Dict[str, Tuple[int, int, int]] = {
    "subdomain": (34, 153, 84),
    "domain": (242, 44, 13),
    "address": (243, 156, 18),
    "ptr": (237, 243, 26),
    "ns": (26, 243, 240),
    "mx": (142, 68, 173),
    "netblock": (243, 26, 188),
    "as": (26, 69, 243),
}

_NODE_ATTRIBUTES = (("0", "Title"), ("1", "Source"), ("2", "Type"))

_ESCAPES = {
    '"': "&#34;",
    "'": "&#39;",
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "\t": "&#x9;",
    "\n": "&#xA;",
    "\r": "&#xD;",
}


def _allowed(ch: str) -> bool:
    code = ord(ch)
    return (
        code in (0x09, 0x0A, 0x0D)
        or 0x20 <= code <= 0xD7FF
        or 0xE000 <= code <= 0xFFFD
        or 0x10000 <= code <= 0x10FFFF
    )


def _escape(text: str) -> str:
    return "".join(
        _ESCAPES.get(ch, ch) if _allowed(ch) else "\ufffd" for ch in text
    )


def _start(name: str, attrs: Sequence[Tuple[str, str]] = ()) -> str:
    rendered = "".join(f' {key}="{_escape(value)}"' for key, value in attrs)
    return f"<{name}{rendered}>"


class _Lines:
    """Collects indented lines of an XML document."""

    def __init__(self) -> None:
        self.lines: List[str] = []

    def add(self, depth: int, text: str) -> None:
        self.lines.append("  " + "    " * depth + text)

    def leaf(
        self,
        depth: int,
        name: str,
        attrs: Sequence[Tuple[str, str]] = (),
        text: str = "",
    ) -> None:
        self.add(depth, f"{_start(name, attrs)}{_escape(text)}</{name}>")


def write_gexf_data(output: TextIO, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
    """Write the graph to output as a GEXF document."""
    stamp = datetime.now(timezone.utc)
    doc = _Lines()

    doc.add(0, _start("gexf", [("xmlns", XML_NS), ("version", "1.3"), ("xmlns:viz", XML_NS_VIZ)]))
    doc.add(1, _start("meta", [("lastmodifieddate", stamp.strftime("%Y-%m-%d"))]))
    doc.leaf(2, "creator", text=CREATOR)
    doc.leaf(2, "description", text=DESCRIPTION)
    doc.add(1, "</meta>")

    doc.add(1, _start("graph", [("mode", "static"), ("defaultedgetype", "directed")]))
    doc.add(2, _start("attributes", [("class", "node")]))
    for ident, title in _NODE_ATTRIBUTES:
        doc.leaf(3, "attribute", [("id", ident), ("title", title), ("type", "string")])
    doc.add(2, "</attributes>")

    if nodes:
        doc.add(2, "<nodes>")
        for idx, node in enumerate(nodes):
            attrs = [("id", str(idx))]
            if node.label:
                attrs.append(("label", node.label))
            doc.add(3, _start("node", attrs))
            doc.add(4, "<attvalues>")
            for key, value in (("0", node.title), ("1", node.source), ("2", node.type)):
                doc.leaf(5, "attvalue", [("for", key), ("value", value)])
            doc.add(4, "</attvalues>")
            doc.leaf(4, "parents")
            color = COLORS.get(node.type)
            if color is not None:
                r, g, b = color
                doc.leaf(4, "viz:color", [("r", str(r)), ("g", str(g)), ("b", str(b))])
            doc.add(3, "</node>")
        doc.add(2, "</nodes>")
    else:
        doc.leaf(2, "nodes")

    if edges:
        doc.add(2, "<edges>")
        for idx, edge in enumerate(edges):
            attrs = [("id", str(idx))]
            if edge.label:
                attrs.append(("label", edge.label))
            attrs += [("source", str(edge.from_idx)), ("target", str(edge.to_idx))]
            doc.add(3, _start("edge", attrs))
            doc.leaf(4, "attvalues")
            doc.add(3, "</edge>")
        doc.add(2, "</edges>")
    else:
        doc.leaf(2, "edges")

    doc.add(1, "</graph>")
    doc.add(0, "</gexf>")

    output.write('<?xml version="1.0" encoding="UTF-8"?>\n' + "\n".join(doc.lines))