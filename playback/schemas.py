import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import jsonschema
from jsonschema import Draft7Validator
from jsonschema.validators import extend


SCHEMA_DIR = Path(__file__).parent


def _is_strict_integer(checker, instance) -> bool:
    return isinstance(instance, int) and not isinstance(instance, bool)


# "integer" means a real int: 5.0 is refused
StrictValidator = extend(
    Draft7Validator,
    type_checker=Draft7Validator.TYPE_CHECKER.redefine("integer", _is_strict_integer),
)


@lru_cache(maxsize=None)
def load_schema(name: str) -> dict:
    """Load one of the JSON schemas shipped next to this module."""
    schema_path = SCHEMA_DIR / f"{name}_schema.json"
    with open(schema_path, "r", encoding="utf-8") as f:
        return json.load(f)


def params_schema(domain: str, algorithm: Optional[str] = None) -> dict:
    """
    Schema for one domain's run parameters.

    A domain entry either is the schema itself or holds an ``algorithms`` map
    with one schema per algorithm, in which case ``algorithm`` is required.
    """
    full = load_schema("params")
    domains = full.get("domains", {})
    if domain not in domains:
        raise KeyError(f"no parameter schema for domain '{domain}'")
    entry = domains[domain]
    if "algorithms" in entry:
        if algorithm not in entry["algorithms"]:
            raise KeyError(f"no parameter schema for {domain}/{algorithm}")
        entry = entry["algorithms"][algorithm]
    schema = dict(entry)
    schema["$schema"] = full.get("$schema")
    schema["definitions"] = full.get("definitions", {})
    return schema


def validate_params(domain: str, algorithm: Optional[str], params: Dict[str, Any]) -> Tuple[bool, str]:
    """
    Check run parameters against the domain (or algorithm) schema.

    Returns:
        (is_valid, error_message)
    """
    try:
        StrictValidator(params_schema(domain, algorithm)).validate(params)
        return True, ""
    except jsonschema.ValidationError as e:
        path = ".".join(str(p) for p in e.absolute_path)
        return False, f"{path}: {e.message}" if path else e.message


def validate_frame(frame: Dict[str, Any]) -> Tuple[bool, str]:
    try:
        StrictValidator(load_schema("frame")).validate(frame)
        return True, ""
    except jsonschema.ValidationError as e:
        return False, str(e.message)
