#!/usr/bin/env python3
"""
Standalone timing script for the k-space Stokeslet and stresslet sums.

Times each pipeline stage (spreading, transform + filter, gathering) on a
random problem, after a first call that pays for numba compilation.
"""

import sys
import time
from pathlib import Path

import numpy as np

# Ensure project root is importable when invoked as a script.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from stokes_ewald import StokesEwaldAPI


def main() -> None:
    M = 256
    L = 1.0
    n_src = 100_000
    n_tar = 100_000
    rng = np.random.default_rng(42)

    api = StokesEwaldAPI(Mx=M, My=M, Lx=L, Ly=L, xi=40.0, eta=0.8, P=16, warm_cache=True)
    api.set_threads(8)

    sources = rng.uniform(-L / 2, L / 2, size=(2, n_src))
    targets = rng.uniform(-L / 2, L / 2, size=(2, n_tar))
    forces = rng.normal(size=(2, n_src))
    normals = rng.normal(size=(2, n_src))
    normals /= np.hypot(normals[0], normals[1])

    # compile the kernels
    api.velocity(sources[:, :10], targets[:, :10], forces[:, :10])

    start = time.perf_counter()
    res = api.velocity_result(sources, targets, forces)
    elapsed = time.perf_counter() - start
    print(f"Stokeslet k-space sum in {elapsed:.3f} s")
    for stage, t in res.timings.items():
        print(f"  {stage}: {t:.3f} s")

    start = time.perf_counter()
    res = api.stress_result(sources, targets, forces, normals)
    elapsed = time.perf_counter() - start
    print(f"Stresslet k-space sum in {elapsed:.3f} s")
    for stage, t in res.timings.items():
        print(f"  {stage}: {t:.3f} s")


if __name__ == "__main__":
    main()
