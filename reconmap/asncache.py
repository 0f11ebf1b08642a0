"""A cache of autonomous system and netblock information."""

from __future__ import annotations

import ipaddress
import threading
from typing import Dict, List, Optional

from reconmap.requests import RIR, ASNRequest, IPAddress, IPNetwork, _parse_cidr, _parse_ip

RESERVED_CIDRS = (
    "192.168.0.0/16",
    "172.16.0.0/12",
    "10.0.0.0/8",
    "127.0.0.0/8",
    "224.0.0.0/4",
    "240.0.0.0/4",
    "100.64.0.0/10",
    "198.18.0.0/15",
    "169.254.0.0/16",
    "192.88.99.0/24",
    "192.0.0.0/24",
    "192.0.2.0/24",
    "192.94.77.0/24",
    "192.94.78.0/24",
    "192.52.193.0/24",
    "192.12.109.0/24",
    "192.31.196.0/24",
    "192.0.0.0/29",
)

_RESERVED_NETWORKS = tuple(ipaddress.ip_network(cidr) for cidr in RESERVED_CIDRS)

RESERVED_DESCRIPTION = "Reserved Network Address Blocks"


def _reserved_block(ip: IPAddress) -> Optional[str]:
    for block in _RESERVED_NETWORKS:
        if ip in block:
            return str(block)
    return None


def is_reserved_address(addr: str) -> Optional[str]:
    """Return the reserved block that addr falls in, or None."""
    ip = _parse_ip(addr)
    if ip is None:
        return None
    return _reserved_block(ip)


class ASNCache:
    """Thread-safe store of ASN records searchable by number, address or description."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cache: Dict[int, ASNRequest] = {}
        self._ranger: Dict[IPNetwork, ASNRequest] = {}

    def update(self, req: ASNRequest) -> None:
        """Save req, or merge its details into the existing entry for its ASN."""
        with self._lock:
            known = self._cache.get(req.asn)
            if known is None:
                self._cache[req.asn] = req
                if not req.netblocks:
                    req.netblocks = [req.prefix]
                return

            if not known.cc and req.cc:
                known.cc = req.cc
            if not known.registry and req.registry:
                known.registry = req.registry
            if known.allocation_date is None and req.allocation_date is not None:
                known.allocation_date = req.allocation_date
            if len(known.description) < len(req.description):
                known.description = req.description

            for cidr in [req.prefix, *req.netblocks]:
                if cidr not in known.netblocks:
                    known.netblocks.append(cidr)

    def description_search(self, s: str) -> List[ASNRequest]:
        """Return the entries whose description contains s."""
        with self._lock:
            return [entry for entry in self._cache.values() if s in entry.description]

    def asn_search(self, asn: int) -> Optional[ASNRequest]:
        """Return the entry for asn, or None."""
        with self._lock:
            return self._cache.get(asn)

    def addr_search(self, addr: str) -> Optional[ASNRequest]:
        """Return ASN and netblock information for the network addr belongs to."""
        ip = _parse_ip(addr)
        if ip is None:
            return None

        block = _reserved_block(ip)
        if block is not None:
            return ASNRequest(
                address=addr,
                asn=0,
                prefix=block,
                description=RESERVED_DESCRIPTION,
                tag=RIR,
                source="RIR",
            )

        with self._lock:
            found = self._search_ranger(ip)
            if found is None:
                self._load_into_ranger(ip)
                found = self._search_ranger(ip)
                if found is None:
                    return None

            network, data = found
            prefix = str(network)
            netblocks = list(dict.fromkeys([prefix, *data.netblocks]))
            return ASNRequest(
                address=addr,
                asn=data.asn,
                cc=data.cc,
                prefix=prefix,
                netblocks=netblocks,
                description=data.description,
                tag=RIR,
                source="RIR",
            )

    def _search_ranger(self, ip: IPAddress):
        matches = [(net, data) for net, data in self._ranger.items() if ip in net]
        if not matches:
            return None
        return min(matches, key=lambda item: item[0].prefixlen)

    def _load_into_ranger(self, ip: IPAddress) -> None:
        best: Optional[IPNetwork] = None
        best_data: Optional[ASNRequest] = None

        for record in self._cache.values():
            for netblock in record.netblocks:
                network = _parse_cidr(netblock)
                if network is None or network.prefixlen == 0:
                    continue
                if ip in network:
                    # Keep the most specific network.
                    if best is not None and best.prefixlen > network.prefixlen:
                        continue
                    best, best_data = network, record

        if best is not None and best_data is not None:
            self._ranger[best] = best_data