from typing import Any, Dict, List, Tuple


ORDERED_SEARCHES = {"binary", "jump"}
VALUE_TREE_OPS = {"insert", "search"}


def _check_searching(domain, algorithm: str, params: Dict[str, Any], issues: List[str]) -> None:
    values = list(getattr(domain, "values", []))
    if not values:
        issues.append("array is empty")
    if algorithm in ORDERED_SEARCHES and any(a > b for a, b in zip(values, values[1:])):
        issues.append(f"{algorithm} search requires a sorted array")


def _check_graph(domain, algorithm: str, params: Dict[str, Any], issues: List[str]) -> None:
    node_ids = set(domain.node_ids())
    if not node_ids:
        issues.append("graph has no nodes")
        return
    start = params.get("start", 0)
    if start not in node_ids:
        issues.append(f"start node {start} does not exist")
    target = params.get("target")
    if target is not None:
        if algorithm != "dijkstra":
            issues.append("target is only used by dijkstra")
        elif target not in node_ids:
            issues.append(f"target node {target} does not exist")


def _check_tree(domain, algorithm: str, params: Dict[str, Any], issues: List[str]) -> None:
    if algorithm in VALUE_TREE_OPS and params.get("value") is None:
        issues.append(f"{algorithm} needs a numeric value")


def _check_dp(domain, algorithm: str, params: Dict[str, Any], issues: List[str]) -> None:
    if algorithm == "knapsack":
        weights = params.get("weights", [])
        values = params.get("values", [])
        if len(weights) != len(values):
            issues.append("weights and values must have the same length")


CHECKS = {
    "searching": _check_searching,
    "graph": _check_graph,
    "tree": _check_tree,
    "dp": _check_dp,
}


def semantic_check_params(domain, algorithm: str, params: Dict[str, Any]) -> Tuple[bool, str]:
    issues: List[str] = []

    check = CHECKS.get(domain.name)
    if check is not None:
        check(domain, algorithm, params, issues)

    return (len(issues) == 0, "; ".join(issues))
