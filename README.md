# reconmap

A pure-Python library for handling the results of DNS and network
reconnaissance: request records, an ASN/netblock cache, a small system
abstraction for data sources, and writers that render a discovered graph
for several visualisation tools. It has no dependencies outside the
standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `reconmap.requests`

Dataclasses for the records passed between enumeration stages:
`DNSAnswer`, `DNSRequest`, `ResolvedRequest`, `SubdomainRequest`,
`ZoneXFRRequest`, `AddrRequest`, `ASNRequest`, `WhoisRequest`,
`AddressInfo` and `Output`.

- `clone()` returns a copy with its own lists. `SubdomainRequest.clone()`
  does not carry over `times`.
- `valid()` checks names with `is_domain_name` and `is_subdomain`
  (`SubdomainRequest` also needs a non-zero `times`), addresses as IP
  addresses and prefixes/netblocks as CIDR notation.
- `Output.complete(passive)` checks that name, domain, tag and sources are
  set and, when `passive` is false, that every address entry is filled in.
- `trusted_tag(tag)` is true for the `ARCHIVE`, `AXFR`, `CERT`, `CRAWL`
  and `DNS` tags.
- `sanitize_dns_request(req)` lower-cases and trims the name and domain in
  place, and drops everything up to the last `*.` label of the name.

### `reconmap.asncache`

`ASNCache` is a thread-safe store of `ASNRequest` entries keyed by ASN.

- `update(req)` stores a new entry, or fills in missing country code,
  registry and allocation date, takes a longer description and appends
  new netblocks to an existing one.
- `asn_search(asn)` returns the entry or `None`.
- `addr_search(addr)` returns a new `ASNRequest` for the most specific
  cached netblock holding `addr`, or `None`. Reserved and private addresses
  get ASN 0 and the description "Reserved Network Address Blocks".
- `description_search(s)` returns the entries whose description contains `s`.

`is_reserved_address(addr)` returns the reserved block `addr` falls in, or
`None`.

### `reconmap.systems`

- `Service` – a data source with `input` and `output` queues and
  `start()` / `stop()`.
- `System` – the abstract interface for whatever owns the data sources.
- `SimpleSystem` – a `System` with one data source and one graph;
  `shutdown()` stops the service, closes the graph, stops the pool and
  drops the cache.
- `populate_cache(asn, system, stop=None)` sends an `ASNRequest` to each
  data source, waits up to `RESPONSE_WAIT` seconds for an answer and
  merges `ASNRequest` answers into the system's cache.
- `check_addresses(addrs)` keeps the entries whose host is an IP address
  and writes them as `host:port`, using port 53 where none is given.

### `reconmap.graph`

`Quad`, `Node` and `Edge` (`from_idx`, `to_idx`, `label`, `title`), and
`viz_data(quads, uuids)`, which turns subject–predicate–object quads
belonging to the given event IDs into nodes (typed `domain`, `subdomain`,
`ptr`, `ns`, `mx`, `address`, `netblock`, `as`, …) and the edges between them.

### Writers

Each writer takes a text stream, a list of nodes and a list of edges.

- `reconmap.dot.write_dot_data` – Graphviz DOT.
- `reconmap.graphistry.write_graphistry_data` – Graphistry edge-list JSON,
  named with the current time.
- `reconmap.maltego.write_maltego_data` – a Maltego CSV table, walked out
  from each `as` node; `cidr_to_maltego_netblock` renders a CIDR as a
  `first-last` range. An `as` node's title must carry a description
  (`as: 13335, Desc: ...`) or `ValueError` is raised.
- `reconmap.d3.write_d3_data` – an HTML page drawing the graph with D3.
  The page loads `d3.v4.min.js` from beside itself. An edge pointing at a
  missing node raises `IndexError`.
- `reconmap.gexf.write_gexf_data` – a GEXF document for Gephi, dated today
  in UTC.

## Example

```python
import io

from reconmap.asncache import ASNCache
from reconmap.requests import ASNRequest
from reconmap.graph import Node, Edge
from reconmap.dot import write_dot_data

cache = ASNCache()
cache.update(ASNRequest(address="72.237.4.113", asn=26808, prefix="72.237.4.0/24"))
print(cache.addr_search("72.237.4.20").asn)   # 26808

nodes = [
    Node(id=0, type="domain", label="owasp.org", title="domain: owasp.org", source="DNS"),
    Node(id=1, type="address", label="205.251.199.98",
         title="address: 205.251.199.98", source="DNS"),
]
edges = [Edge(from_idx=0, to_idx=1, title="a_record")]

out = io.StringIO()
write_dot_data(out, nodes, edges)
print(out.getvalue())
```

## What this package does not do

It is a library only: there is no command-line program. It performs no DNS
queries and builds no resolver pools, ships no IP-to-ASN data to preload the
cache, and has no graph database; `viz_data` works on quads you supply, and
`SimpleSystem` holds whatever pool and graph objects you give it.