# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Updated: 2026-02-09
# Description: settings.py
# -----------------------------------------------------------------------------
import os


def _env(name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be an int, got {v!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    v = _env(name, "")
    if v == "":
        return default
    v = v.lower()
    if v in ("1", "true", "t", "yes", "y", "on"):
        return True
    if v in ("0", "false", "f", "no", "n", "off"):
        return False
    raise RuntimeError(f"Env var {name} must be a boolean, got {v!r}")


# -----------------------------------------------------------------------------
# Embeddings
# -----------------------------------------------------------------------------
# BGE micro v2 sized vectors; Azure text-embedding-3 models are asked for
# this many dimensions explicitly.
VECTOR_DIMENSIONS = _env_int("ETW_VECTOR_DIMENSIONS", 384)


# -----------------------------------------------------------------------------
# Import / search defaults
# -----------------------------------------------------------------------------
IMPORT_BATCH_SIZE = _env_int("ETW_IMPORT_BATCH_SIZE", 64)

SEARCH_TOP = _env_int("ETW_SEARCH_TOP", 1)

# Non-numeric event ids are always dropped from integer lists; this only
# controls whether each drop is logged as a warning.
WARN_DROPPED_INTS = _env_bool("ETW_WARN_DROPPED_INTS", False)


# -----------------------------------------------------------------------------
# Save / restore
# -----------------------------------------------------------------------------
SNAPSHOT_DIR = _env("ETW_SNAPSHOT_DIR", "./snapshots")


# -----------------------------------------------------------------------------
# Sanity checks (tunable)
# -----------------------------------------------------------------------------
if VECTOR_DIMENSIONS <= 0:
    raise RuntimeError("VECTOR_DIMENSIONS must be positive")

if IMPORT_BATCH_SIZE <= 0:
    raise RuntimeError("IMPORT_BATCH_SIZE must be positive")

if SEARCH_TOP <= 0:
    raise RuntimeError("SEARCH_TOP must be positive")
