# src/lattice_engine/utils.py
from __future__ import annotations

import json
import os
import time
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .basis import DEFAULT_DIMENSION, DEFAULT_SUM_LIMIT, EngineParams, LatticeConfig
from .points import LatticePointSet

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    tomllib = None  # type: ignore


def now_str() -> str:
    return time.strftime("%Y%m%d-%H%M%S")


def save_point_set(
    path: str | os.PathLike[str],
    point_set: LatticePointSet,
    *,
    basis: Optional[np.ndarray] = None,
    dual: Optional[np.ndarray] = None,
    parallelepiped: Optional[np.ndarray] = None,
    overwrite: bool = True,
) -> None:
    """Serialize generated points and their counts to a compressed .npz."""
    if not overwrite and Path(path).exists():
        raise FileExistsError(f"{path} already exists")
    Path(path).parent.mkdir(parents=True, exist_ok=True)

    out: Dict[str, Any] = {"points": np.asarray(point_set.points, dtype=np.float64)}
    for key, value in (("basis", basis), ("dual", dual), ("parallelepiped", parallelepiped)):
        if value is not None:
            out[key] = np.asarray(value, dtype=np.float64)

    meta = dict(point_set.meta)
    # counts can exceed int64, keep them as decimal strings
    meta["count_before_cap"] = str(point_set.count_before_cap)
    meta["point_budget"] = int(point_set.point_budget)
    meta["timed_out"] = bool(point_set.timed_out)
    meta["elapsed"] = float(point_set.elapsed)
    out["meta"] = json.dumps(meta)
    np.savez_compressed(path, **out)


def load_point_set(path: str | os.PathLike[str]) -> Tuple[LatticePointSet, Dict[str, np.ndarray]]:
    """
    Load a .npz written by ``save_point_set``.

    Returns the point set and a dict of any stored matrices
    (``basis``, ``dual``, ``parallelepiped``).
    """
    with np.load(path, allow_pickle=False) as data:
        meta = json.loads(str(data["meta"])) if "meta" in data else {}
        points = data["points"].astype(np.float64)
        extras = {
            key: data[key].astype(np.float64)
            for key in ("basis", "dual", "parallelepiped")
            if key in data
        }

    point_set = LatticePointSet(
        points=points,
        count_before_cap=int(meta.pop("count_before_cap", points.shape[0])),
        point_budget=int(meta.pop("point_budget", points.shape[0])),
        timed_out=bool(meta.pop("timed_out", False)),
        elapsed=float(meta.pop("elapsed", 0.0)),
        meta=meta,
    )
    return point_set, extras


def load_params(path: str | os.PathLike[str]) -> Dict[str, Any]:
    """
    Load session parameters from JSON or TOML.
    """
    path = str(path)
    with open(path, "rb") as fh:
        data = fh.read()
    suffix = Path(path).suffix.lower()
    if suffix in {".json", ""}:
        return json.loads(data.decode("utf-8"))
    if suffix in {".toml", ".tml"}:
        if tomllib is None:
            raise RuntimeError("tomllib is unavailable; cannot parse TOML files")
        return tomllib.loads(data.decode("utf-8"))
    raise ValueError(f"Unsupported parameter file format: {suffix}")


_ENGINE_KEYS = (
    "point_budget",
    "tolerance",
    "time_limit",
    "max_corner_dimension",
    "chunk_size",
    "seed",
    "verbose",
)


def config_from_params(params: Dict[str, Any]) -> Tuple[LatticeConfig, EngineParams]:
    """
    Build the session config and engine params from a loaded parameter dict.

    Recognized keys: ``dimension``, ``basis``, ``sum_limit`` plus any
    ``EngineParams`` field, either at top level or under an ``engine`` table.
    """
    basis = params.get("basis")
    dimension = params.get("dimension")
    if dimension is None:
        dimension = len(basis) if basis is not None else DEFAULT_DIMENSION
    config = LatticeConfig(
        dimension=dimension,
        basis=basis,
        sum_limit=params.get("sum_limit", DEFAULT_SUM_LIMIT),
    )

    engine_raw = dict(params.get("engine", {}))
    for key in _ENGINE_KEYS:
        if key in params and key not in engine_raw:
            engine_raw[key] = params[key]
    unknown = set(engine_raw) - set(_ENGINE_KEYS)
    if unknown:
        raise ValueError(f"Unknown engine parameters: {sorted(unknown)}")
    return config, EngineParams(**engine_raw)


__all__ = [
    "now_str",
    "save_point_set",
    "load_point_set",
    "load_params",
    "config_from_params",
]
