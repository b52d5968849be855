from typing import Dict, Optional, Type

from playback import generators
from playback.domain import Domain

from .dp import DPDomain
from .graph import GraphDomain
from .recursion import RecursionDomain
from .searching import SearchingDomain
from .sorting import SortingDomain
from .tree import TreeDomain


DOMAINS: Dict[str, Type[Domain]] = {
    "sorting": SortingDomain,
    "searching": SearchingDomain,
    "graph": GraphDomain,
    "tree": TreeDomain,
    "dp": DPDomain,
    "recursion": RecursionDomain,
}


def build_domain(name: str, size: Optional[int] = None, seed: Optional[int] = None) -> Domain:
    """Create a domain populated the way a fresh page would show it."""
    if name not in DOMAINS:
        raise KeyError(f"unknown domain '{name}' (choose from: {', '.join(DOMAINS)})")

    if name == "sorting":
        return SortingDomain(generators.random_array(size or 20, seed))
    if name == "searching":
        return SearchingDomain(generators.sorted_array(size or 15))
    if name == "graph":
        positions, edges = generators.random_graph(size or 8, seed)
        return GraphDomain(positions, edges)
    if name == "tree":
        return TreeDomain(generators.DEFAULT_TREE_VALUES)
    return DOMAINS[name]()
