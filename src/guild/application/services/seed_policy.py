from __future__ import annotations

import hashlib
import json
import math
import random
from typing import Any, Mapping

SESSION_NAMESPACE = "guild.session"
_SEED_MODULUS = 2**32


def _canonical(value: Any) -> Any:
    """Order-independent, JSON-ready form of a seed context value."""
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("Seed context values must be finite")
    if isinstance(value, Mapping):
        return {str(key): _canonical(value[key]) for key in sorted(value, key=str)}
    if isinstance(value, set):
        return sorted((_canonical(item) for item in value), key=_dump)
    if isinstance(value, (list, tuple)):
        return [_canonical(item) for item in value]
    return value


def _dump(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


def derive_seed(namespace: str, context: Mapping[str, Any]) -> int:
    payload = _dump({"namespace": namespace, "context": _canonical(context)})
    return int(hashlib.sha256(payload.encode("utf-8")).hexdigest(), 16) % _SEED_MODULUS


def derive_rng(namespace: str, context: Mapping[str, Any]) -> random.Random:
    return random.Random(derive_seed(namespace, context))


def build_rng(seed: int | None = None) -> random.Random:
    """Return a seeded generator, or one drawn from OS entropy when seed is None."""
    if seed is None:
        return random.Random()
    return derive_rng(SESSION_NAMESPACE, {"seed": int(seed)})
