# gray_scott.py — Gray–Scott reaction–diffusion core: seeding, stencil, step, run loop
import logging
import math
from dataclasses import dataclass, asdict

import numpy as np

logger = logging.getLogger(__name__)

# Nine-point Laplacian (cardinal 0.2, diagonal 0.05, centre -1); weights sum to zero
LAPLACIAN_KERNEL = np.array([[0.05, 0.2, 0.05],
                             [0.2, -1.0, 0.2],
                             [0.05, 0.2, 0.05]])
FIVE_POINT_KERNEL = np.array([[0.0, 1.0, 0.0],
                              [1.0, -4.0, 1.0],
                              [0.0, 1.0, 0.0]])

BOUNDARY_MODES = {"wrap": "wrap", "fill": "constant", "edge": "edge"}
SEED_SHAPES = ("square", "disk")
MIN_SIZE = 3


# ---------------- Parameters ----------------
@dataclass
class GrayScottParams:
    D_A: float = 1.0
    D_B: float = 0.5
    f: float = 0.055
    k: float = 0.062
    dt: float = 1.0
    size: int = 200
    total_steps: int = 10000
    snapshot_interval: int = 2000
    seed_fraction: float = 0.1

    # short keys used by the preset dicts
    _ALIASES = {"Du": "D_A", "Dv": "D_B", "F": "f", "steps": "total_steps", "every": "snapshot_interval"}

    @classmethod
    def from_dict(cls, params):
        kwargs = {}
        for key, value in params.items():
            name = cls._ALIASES.get(key, key)
            if name not in cls.__dataclass_fields__:
                raise ValueError(f"Unknown parameter: {key}")
            kind = int if name in _INT_FIELDS else float
            kwargs[name] = _coerce(name, value, kind)
        p = cls(**kwargs)
        p.validate()
        return p

    def as_dict(self):
        return asdict(self)

    def validate(self, schedule=True):
        """Raise ValueError on a bad field; schedule=False skips total_steps/snapshot_interval."""
        if not isinstance(self.size, (int, np.integer)) or self.size <= 0:
            raise ValueError(f"size must be a positive integer, got {self.size!r}")
        if self.size < MIN_SIZE:
            raise ValueError(f"size must be at least {MIN_SIZE} for a 3x3 stencil, got {self.size}")
        for name in ("D_A", "D_B", "f", "k"):
            value = _coerce(name, getattr(self, name), float)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a finite non-negative number, got {value!r}")
        dt = _coerce("dt", self.dt, float)
        if not math.isfinite(dt) or dt <= 0:
            raise ValueError(f"dt must be a finite positive number, got {dt!r}")
        seed_fraction = _coerce("seed_fraction", self.seed_fraction, float)
        if not 0 < seed_fraction <= 1:
            raise ValueError(f"seed_fraction must be in (0, 1], got {seed_fraction!r}")
        if schedule:
            _check_schedule(self.total_steps, self.snapshot_interval)


_INT_FIELDS = ("size", "total_steps", "snapshot_interval")


def _coerce(name, value, kind):
    try:
        return kind(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"{name} must be {'an integer' if kind is int else 'a number'}, got {value!r}") from None


def _check_schedule(total_steps, snapshot_interval):
    if not isinstance(total_steps, (int, np.integer)) or total_steps < 0:
        raise ValueError(f"total_steps must be a non-negative integer, got {total_steps!r}")
    if not isinstance(snapshot_interval, (int, np.integer)) or snapshot_interval <= 0:
        raise ValueError(f"snapshot_interval must be a positive integer, got {snapshot_interval!r}")


def gs_preset(goal="coral", size=200, dt=1.0):
    presets = {
        "coral": (0.0545, 0.062),
        "mitosis": (0.0367, 0.0649),
        "stripes": (0.035, 0.060),
        "spots": (0.022, 0.051),
    }
    if goal not in presets:
        raise ValueError(f"Unknown preset: {goal}")
    F, k = presets[goal]
    return {"Du": 1.0, "Dv": 0.5, "F": F, "k": k, "dt": dt, "size": size}


# ---------------- Snapshots ----------------
@dataclass(frozen=True, eq=False)
class Snapshot:
    """Read-only copy of both grids at one iteration."""
    iteration: int
    grid_A: np.ndarray
    grid_B: np.ndarray

    @classmethod
    def capture(cls, iteration, A, B):
        grid_A = np.array(A, copy=True); grid_A.flags.writeable = False
        grid_B = np.array(B, copy=True); grid_B.flags.writeable = False
        return cls(int(iteration), grid_A, grid_B)

    @property
    def finite(self):
        return bool(np.isfinite(self.grid_A).all() and np.isfinite(self.grid_B).all())


def first_nonfinite_iteration(snapshots):
    for snap in snapshots:
        if not snap.finite:
            return snap.iteration
    return None


# ---------------- Seeding ----------------
def initialize(size, seed_fraction=0.1, shape="square", noise=0.0, rng_seed=0):
    """
    A = 1 everywhere, B = 0 everywhere except a centred seed region set to 1.
    The seed is a square of side max(1, round(size * seed_fraction)), or the
    inscribed disk of that square when shape="disk".
    """
    if size < MIN_SIZE:
        raise ValueError(f"size must be at least {MIN_SIZE} for a 3x3 stencil, got {size}")
    if not 0 < seed_fraction <= 1:
        raise ValueError(f"seed_fraction must be in (0, 1], got {seed_fraction!r}")
    if shape not in SEED_SHAPES:
        raise ValueError(f"Unknown seed shape: {shape}")

    A = np.ones((size, size), dtype=np.float64)
    B = np.zeros((size, size), dtype=np.float64)
    side = max(1, round(size * seed_fraction))
    lo = (size - side) // 2
    if shape == "square":
        B[lo:lo + side, lo:lo + side] = 1.0
    else:
        r = side / 2.0
        c = lo + (side - 1) / 2.0
        y, x = np.ogrid[:size, :size]
        B[(x - c) ** 2 + (y - c) ** 2 <= r * r] = 1.0

    if noise > 0:
        rng = np.random.default_rng(rng_seed)
        A += noise * (rng.random((size, size)) - 0.5)
        B += noise * (rng.random((size, size)) - 0.5)
    return A, B


# ---------------- Stencil ----------------
def laplacian(Z, kernel=LAPLACIAN_KERNEL, boundary="wrap"):
    """
    Discrete 3x3 convolution of Z with kernel. boundary picks how cells past
    the edge are read: "wrap" (periodic), "fill" (zeros) or "edge" (clamped).
    """
    kernel = np.asarray(kernel, dtype=np.float64)
    if kernel.shape != (3, 3):
        raise ValueError(f"kernel must be 3x3, got shape {kernel.shape}")
    if boundary not in BOUNDARY_MODES:
        raise ValueError(f"Unknown boundary policy: {boundary}")
    Z = np.asarray(Z, dtype=np.float64)
    if Z.ndim != 2:
        raise ValueError(f"grid must be 2-D, got {Z.ndim}-D array of shape {Z.shape}")
    n, m = Z.shape
    P = np.pad(Z, 1, mode=BOUNDARY_MODES[boundary])
    out = np.zeros_like(Z)
    for a in range(3):
        for b in range(3):
            w = kernel[a, b]
            if w:
                # convolution, not correlation: kernel[a, b] weighs Z[i+1-a, j+1-b]
                out += w * P[2 - a:2 - a + n, 2 - b:2 - b + m]
    return out


# ---------------- Update ----------------
def step(A, B, params, kernel=LAPLACIAN_KERNEL, boundary="wrap"):
    # both updates read the old A and B
    La = laplacian(A, kernel, boundary); Lb = laplacian(B, kernel, boundary)
    abb = A * B * B
    A_next = A + (params.D_A * La - abb + params.f * (1.0 - A)) * params.dt
    B_next = B + (params.D_B * Lb + abb - (params.k + params.f) * B) * params.dt
    return A_next, B_next


def run(A0, B0, params, kernel=LAPLACIAN_KERNEL, total_steps=None, snapshot_interval=None,
        boundary="wrap", snapshots=None, progress=None, render_every=0):
    """
    Advance (A0, B0) total_steps times and capture a Snapshot at iteration 0
    and every snapshot_interval steps after it. Snapshots are appended to the
    caller's list when one is given, and that list is returned.
    """
    total_steps = params.total_steps if total_steps is None else total_steps
    snapshot_interval = params.snapshot_interval if snapshot_interval is None else snapshot_interval
    params.validate(schedule=False)
    _check_schedule(total_steps, snapshot_interval)
    A = np.array(A0, dtype=np.float64)
    B = np.array(B0, dtype=np.float64)
    if A.ndim != 2 or A.shape != B.shape:
        raise ValueError(f"A and B must be 2-D grids of equal shape, got {A.shape} and {B.shape}")
    if A.shape[0] != A.shape[1]:
        raise ValueError(f"grids must be square (size x size), got {A.shape}")
    if min(A.shape) < MIN_SIZE:
        raise ValueError(f"grids must be at least {MIN_SIZE}x{MIN_SIZE}, got {A.shape}")
    kernel = np.asarray(kernel, dtype=np.float64)
    if kernel.shape != (3, 3):
        raise ValueError(f"kernel must be 3x3, got shape {kernel.shape}")
    if boundary not in BOUNDARY_MODES:
        raise ValueError(f"Unknown boundary policy: {boundary}")

    if snapshots is None:
        snapshots = []
    logger.info("Gray-Scott run: grid=%s steps=%d every=%d f=%g k=%g D_A=%g D_B=%g dt=%g boundary=%s",
                A.shape, total_steps, snapshot_interval, params.f, params.k,
                params.D_A, params.D_B, params.dt, boundary)

    nonfinite_at = None
    if not (np.isfinite(A).all() and np.isfinite(B).all()):
        nonfinite_at = 0
        logger.warning("Non-finite concentration in the initial grids")
    snapshots.append(Snapshot.capture(0, A, B))

    for i in range(1, total_steps + 1):
        A, B = step(A, B, params, kernel, boundary)
        if nonfinite_at is None and not (np.isfinite(A).all() and np.isfinite(B).all()):
            nonfinite_at = i
            logger.warning("Non-finite concentration first seen at step %d; check f=%g, k=%g, dt=%g",
                           i, params.f, params.k, params.dt)
        if i % snapshot_interval == 0:
            snapshots.append(Snapshot.capture(i, A, B))
            logger.debug("Captured snapshot at step %d", i)
        if progress and (render_every and (i % render_every == 0 or i == total_steps)):
            progress(i, total_steps, B)

    logger.info("Gray-Scott run finished: %d snapshots", len(snapshots))
    return snapshots


def run_from_params(params, kernel=LAPLACIAN_KERNEL, boundary="wrap", progress=None, render_every=0):
    params.validate()
    A, B = initialize(params.size, seed_fraction=params.seed_fraction)
    return run(A, B, params, kernel, boundary=boundary, progress=progress, render_every=render_every)
