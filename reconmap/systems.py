"""Systems that own the data sources, resolvers, graphs and ASN cache of an enumeration."""

from __future__ import annotations

import abc
import queue
import threading
import tracemalloc
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from reconmap.asncache import ASNCache
from reconmap.requests import ASNRequest, _parse_ip

DEFAULT_DNS_PORT = "53"

# How long a data source is given to answer an ASN request.
RESPONSE_WAIT = 1.0


class Service:
    """A data source that accepts requests on its input queue and answers on its output queue."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.input: "queue.Queue[Any]" = queue.Queue()
        self.output: "queue.Queue[Any]" = queue.Queue()
        self.running = False

    def start(self) -> None:
        """Start the service; raise an exception if it cannot run."""
        self.running = True

    def stop(self) -> None:
        """Stop the service."""
        self.running = False

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class System(abc.ABC):
    """Manages the services that perform reconnaissance activities."""

    config: Any
    pool: Any
    trusted: Any
    cache: Optional[ASNCache]

    @abc.abstractmethod
    def add_source(self, src: Service) -> None:
        """Add src to the data sources managed by the system."""

    @abc.abstractmethod
    def add_and_start(self, srv: Service) -> None:
        """Start srv and add it to the data sources."""

    @abc.abstractmethod
    def data_sources(self) -> List[Service]:
        """Return the data sources managed by the system."""

    @abc.abstractmethod
    def set_data_sources(self, sources: Sequence[Service]) -> None:
        """Assign the data sources used by the system."""

    @abc.abstractmethod
    def graph_databases(self) -> List[Any]:
        """Return the graphs used by the system."""

    @abc.abstractmethod
    def memory_usage(self) -> int:
        """Return the number of bytes currently allocated by the process."""

    @abc.abstractmethod
    def shutdown(self) -> None:
        """Release everything the system holds."""


def _allocated_bytes() -> int:
    if tracemalloc.is_tracing():
        current, _peak = tracemalloc.get_traced_memory()
        return current
    try:
        import resource
    except ImportError:
        return 0
    import sys

    usage = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # Linux reports kilobytes, macOS reports bytes.
    return usage if sys.platform == "darwin" else usage * 1024


@dataclass
class SimpleSystem(System):
    """A system with a single data source and a single graph."""

    config: Any = None
    pool: Any = None
    trusted: Any = None
    graph: Any = None
    cache: Optional[ASNCache] = field(default_factory=ASNCache)
    service: Optional[Service] = None

    def add_source(self, src: Service) -> None:
        self.service = src

    def add_and_start(self, srv: Service) -> None:
        srv.start()
        self.add_source(srv)

    def data_sources(self) -> List[Service]:
        return [self.service] if self.service is not None else []

    def set_data_sources(self, sources: Sequence[Service]) -> None:
        self.service = sources[0]

    def graph_databases(self) -> List[Any]:
        return [self.graph] if self.graph is not None else []

    def memory_usage(self) -> int:
        return _allocated_bytes()

    def shutdown(self) -> None:
        if self.service is not None:
            self.service.stop()
        if self.graph is not None:
            self.graph.close()
        if self.pool is not None:
            self.pool.stop()
        self.cache = None


def populate_cache(asn: int, system: System, stop: Optional[threading.Event] = None) -> None:
    """Ask every data source of system about asn and merge the answers into its cache."""
    for src in system.data_sources():
        src.input.put(ASNRequest(asn=asn))
        if stop is not None and stop.is_set():
            continue
        try:
            reply = src.output.get(timeout=RESPONSE_WAIT)
        except queue.Empty:
            continue
        if isinstance(reply, ASNRequest) and system.cache is not None:
            system.cache.update(reply)


def _split_host_port(addr: str) -> Optional[tuple]:
    """Split host:port as network addresses are written; None when malformed."""
    if addr.startswith("["):
        end = addr.find("]")
        if end == -1 or addr[end + 1:end + 2] != ":":
            return None
        host, port = addr[1:end], addr[end + 2:]
        if "[" in port or "]" in port:
            return None
        return host, port
    host, sep, port = addr.rpartition(":")
    if not sep or ":" in host or "[" in addr or "]" in addr:
        return None
    return host, port


def _join_host_port(host: str, port: str) -> str:
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def check_addresses(addrs: Sequence[str]) -> List[str]:
    """Keep the valid resolver addresses, giving a default DNS port to those without one."""
    checked: List[str] = []
    for addr in addrs:
        parts = _split_host_port(addr)
        host, port = parts if parts is not None else (addr, DEFAULT_DNS_PORT)
        if _parse_ip(host) is None:
            continue
        checked.append(_join_host_port(host, port))
    return checked