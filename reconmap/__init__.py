"""Request records, an ASN cache, data-source systems and graph writers for reconnaissance results."""

__version__ = "0.1.0"

__all__ = [
    "requests",
    "asncache",
    "systems",
    "graph",
    "dot",
    "graphistry",
    "maltego",
    "d3",
    "gexf",
]