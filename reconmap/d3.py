"""Writer for self-contained HTML pages that draw the graph with D3."""

from __future__ import annotations

from string import Template
from typing import List, Sequence, TextIO

from reconmap.graph import Edge, Node

GRAPH_NAME = "OWASP Amass - Attack Surface Mapping"

D3_SCRIPT_SRC = "d3.v4.min.js"

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

_PAGE = Template(
    """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>OWASP Amass Network Mapping</title>
<script src="${script_src}"></script>
<style>
#tooltip {
    position: absolute;
    display: inline-block;
    padding: 10px;
    font-family: sans-serif;
    color: #000;
    background: #fff;
    border: 1px solid #999;
    border-radius: 2px;
    pointer-events: none;
    opacity: 0;
    z-index: 1;
}
</style>
</head>
<body>
<div id="graphDiv"></div>
<div id="tooltip"></div>
<script>
var graph = {
    nodes: [
    ${nodes}
    ],
    edges: [
    ${edges}
    ]
};
var maxNum = ${max_num};

(function () {
    var width = window.innerWidth,
        height = window.innerHeight,
        baseRadius = 5,
        view = d3.zoomIdentity,
        hovered = null;

    var canvas = d3.select("#graphDiv").append("canvas")
        .attr("width", width)
        .attr("height", height)
        .node();
    var context = canvas.getContext("2d");

    function share(n) { return maxNum > 0 ? n.num / maxNum : 0; }
    function radius(n) { return baseRadius * (1.5 + 3 * share(n)); }
    function pairShare(e) { return (share(e.source) + share(e.target)) / 2; }

    var simulation = d3.forceSimulation(graph.nodes)
        .force("link", d3.forceLink(graph.edges)
            .id(function (d) { return d.id; })
            .distance(function (e) { return 60 * pairShare(e); })
            .strength(function (e) { return 1 - pairShare(e); }))
        .force("charge", d3.forceManyBody()
            .strength(function (n) { return -100 - 300 * share(n); })
            .distanceMax(width * 2))
        .force("collide", d3.forceCollide(function (n) { return radius(n) + 1; }))
        .force("center", d3.forceCenter(width / 2, height / 2))
        .on("tick", draw);

    function nodeAt(x, y) {
        var px = view.invertX(x), py = view.invertY(y);
        for (var i = graph.nodes.length - 1; i >= 0; i--) {
            var n = graph.nodes[i], dx = px - n.x, dy = py - n.y, r = radius(n);
            if (dx * dx + dy * dy < r * r) { return n; }
        }
        return null;
    }

    function drawEdge(e) {
        var dx = e.target.x - e.source.x, dy = e.target.y - e.source.y;
        context.beginPath();
        context.moveTo(e.source.x, e.source.y);
        context.lineTo(e.target.x, e.target.y);
        context.strokeStyle = "#aaa";
        context.stroke();
        context.save();
        context.translate(e.source.x + dx / 2, e.source.y + dy / 2);
        context.rotate(Math.atan2(dy, dx) - (dx < 0 ? Math.PI : 0));
        context.textAlign = "center";
        context.fillStyle = "#aaa";
        context.fillText(e.label, 0, 0);
        context.restore();
    }

    function drawNode(n) {
        var r = radius(n);
        context.beginPath();
        context.moveTo(n.x + r, n.y);
        context.arc(n.x, n.y, r, 0, 2 * Math.PI);
        context.fillStyle = n.color;
        context.strokeStyle = "#333";
        context.stroke();
        context.fill();
    }

    function draw() {
        context.save();
        context.clearRect(0, 0, width, height);
        context.translate(view.x, view.y);
        context.scale(view.k, view.k);
        graph.edges.forEach(drawEdge);
        graph.nodes.forEach(drawNode);
        context.restore();

        var tip = d3.select("#tooltip");
        if (hovered) {
            tip.style("opacity", 0.8)
                .style("left", view.applyX(hovered.x) + 5 + "px")
                .style("top", view.applyY(hovered.y) + 5 + "px")
                .html(hovered.label);
        } else {
            tip.style("opacity", 0);
        }
    }

    d3.select(canvas)
        .call(d3.drag()
            .container(canvas)
            .subject(function () {
                var n = nodeAt(d3.event.x, d3.event.y);
                if (n) {
                    n.x = view.applyX(n.x);
                    n.y = view.applyY(n.y);
                }
                return n;
            })
            .on("start", function () {
                if (!d3.event.active) { simulation.alphaTarget(0.3).restart(); }
                d3.event.subject.fx = view.invertX(d3.event.subject.x);
                d3.event.subject.fy = view.invertY(d3.event.subject.y);
            })
            .on("drag", function () {
                d3.event.subject.fx = view.invertX(d3.event.x);
                d3.event.subject.fy = view.invertY(d3.event.y);
            })
            .on("end", function () {
                if (!d3.event.active) { simulation.alphaTarget(0); }
                d3.event.subject.fx = null;
                d3.event.subject.fy = null;
            }))
        .call(d3.zoom().scaleExtent([0.1, 8]).on("zoom", function () {
            view = d3.event.transform;
            draw();
        }))
        .on("mousemove", function () {
            var p = d3.mouse(this);
            hovered = nodeAt(p[0], p[1]);
            draw();
        });

    draw();
})();
</script>
</body>
</html>
"""
)


def _check_index(idx: int, count: int) -> int:
    if not 0 <= idx < count:
        raise IndexError(f"edge refers to node {idx}, but there are {count} nodes")
    return idx


def _node_entry(idx: int, num: int, node: Node) -> str:
    label = node.title
    if node.source:
        label += ", Source: " + node.source
    color = COLORS.get(node.type, "")
    return f'\n        {{id: {idx}, num: {num}, label: "{label}", color: "{color}" }},\n    '


def _edge_entry(edge: Edge) -> str:
    return (
        f"\n        {{source: {edge.from_idx}, target: {edge.to_idx},"
        f' label: "{edge.title}" }},\n    '
    )


def write_d3_data(output: TextIO, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
    """Write an HTML page to output that draws the graph with D3."""
    counts: List[int] = [0] * len(nodes)
    for edge in edges:
        counts[_check_index(edge.from_idx, len(nodes))] += 1
        counts[_check_index(edge.to_idx, len(nodes))] += 1

    output.write(
        _PAGE.substitute(
            script_src=D3_SCRIPT_SRC,
            nodes="".join(
                _node_entry(idx, num, node)
                for idx, (num, node) in enumerate(zip(counts, nodes))
            ),
            edges="".join(_edge_entry(edge) for edge in edges),
            max_num=max(counts, default=0),
        )
    )