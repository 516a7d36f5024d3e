# app.py — Streamlit front end for the Gray–Scott simulator (parameters → run → faceted snapshots)
import json
import logging

import streamlit as st
import matplotlib.pyplot as plt

from gray_scott import (
    GrayScottParams,
    gs_preset,
    initialize,
    run,
    first_nonfinite_iteration,
)
from pattern_plots import render_field, render_snapshots

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

PRESETS = ["coral", "mitosis", "stripes", "spots", "custom"]


# ───────────────────────────────────────────────────────────────────────────────
# 1) Parameters
# ───────────────────────────────────────────────────────────────────────────────
def choose_params(preset, size, steps, every, dt, f=None, k=None) -> GrayScottParams:
    """Merge a named preset (or custom f, k) with the run controls."""
    base = gs_preset("coral" if preset == "custom" else preset, size=size, dt=dt)
    if preset == "custom":
        base.update({"F": f, "k": k})
    base.update({"steps": steps, "every": every})
    return GrayScottParams.from_dict(base)


# ───────────────────────────────────────────────────────────────────────────────
# 2) Streamlit UI
# ───────────────────────────────────────────────────────────────────────────────
st.set_page_config(page_title="Gray–Scott Lab", page_icon="🧪", layout="wide")
st.title("🧪 Gray–Scott Reaction–Diffusion Lab")
st.caption("Two reactants, one 3×3 stencil, simultaneous updates. Snapshots every N steps.")

left, right = st.columns([1, 2])

with left:
    st.subheader("Preset")
    preset = st.selectbox("Feed / kill preset", PRESETS, index=0, key="preset")
    with st.expander("Custom f, k", expanded=preset == "custom"):
        f = st.slider("Feed f", 0.0, 0.1, 0.055, step=0.0005, format="%.4f", key="f")
        k = st.slider("Kill k", 0.0, 0.1, 0.062, step=0.0005, format="%.4f", key="k")

    st.subheader("Controls")
    size = st.slider("Grid size (N×N)", 128, 384, 128, step=64, key="size")
    steps = st.slider("Total steps", 100, 10000, 2000, step=100, key="steps")
    every = st.slider("Snapshot every", 50, 5000, 500, step=50, key="every")
    dt = st.slider("dt", 0.1, 1.5, 1.0, step=0.1, key="dt")
    boundary = st.selectbox("Boundary", ["wrap", "fill", "edge"], index=0, key="boundary",
                            help="How the stencil reads cells past the grid edge")

    go = st.button("Run", type="primary", key="run")

with right:
    st.subheader("Snapshots")
    canvas = st.empty()
    prog = st.progress(0, text="Idle")

if go:
    try:
        params = choose_params(preset, size, steps, every, dt, f=f, k=k)
    except ValueError as exc:
        st.error(f"Invalid parameters: {exc}")
        st.stop()

    def on_progress(done, total, field):
        prog.progress(done / total, text=f"Simulating… {done}/{total}")

    A, B = initialize(params.size, seed_fraction=params.seed_fraction)
    fig0 = render_field(B, title="B at t = 0")
    canvas.pyplot(fig0, clear_figure=True); plt.close(fig0)
    snapshots = run(A, B, params, boundary=boundary,
                    progress=on_progress, render_every=max(1, params.total_steps // 50))
    prog.progress(1.0, text="Done ✓")

    fig = render_snapshots(snapshots)
    canvas.pyplot(fig, clear_figure=True); plt.close(fig)
    st.success(f"Captured {len(snapshots)} snapshots at steps {[s.iteration for s in snapshots]}")

    bad = first_nonfinite_iteration(snapshots)
    if bad is not None:
        st.warning(f"Concentrations became non-finite by step {bad}; try a smaller dt or other f, k.")

    st.download_button(
        "Download parameters (JSON)", data=json.dumps(params.as_dict(), indent=2),
        file_name="gray_scott_params.json", mime="application/json"
    )
else:
    st.info("Pick a preset, set the controls and press **Run**.")

st.markdown("---")
st.markdown(
    "A′ = A + dt·(D_A·∇²A − AB² + f(1−A)),  B′ = B + dt·(D_B·∇²B + AB² − (k+f)B). "
    "Both updates read the same old A and B."
)
