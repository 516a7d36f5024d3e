# pattern_plots.py — heatmaps of Gray–Scott snapshots (one field, or component × iteration facets)
import matplotlib.pyplot as plt

COMPONENTS = {"A": "grid_A", "B": "grid_B"}


def render_field(field, title=None, cmap="viridis"):
    fig, ax = plt.subplots(figsize=(5, 5))
    ax.imshow(field, cmap=cmap); ax.axis("off")
    if title:
        ax.set_title(title)
    return fig


def render_snapshots(snapshots, cmap="viridis", components=("A", "B")):
    """Faceted heatmaps: one row per component, one column per captured iteration."""
    snapshots = list(snapshots)
    if not snapshots:
        raise ValueError("No snapshots to render")
    for name in components:
        if name not in COMPONENTS:
            raise ValueError(f"Unknown component: {name}")

    rows, cols = len(components), len(snapshots)
    fig, axes = plt.subplots(rows, cols, figsize=(2.2 * cols, 2.2 * rows), squeeze=False)
    for r, name in enumerate(components):
        for c, snap in enumerate(snapshots):
            ax = axes[r][c]
            # fixed colour range so columns are comparable
            ax.imshow(getattr(snap, COMPONENTS[name]), cmap=cmap, vmin=0.0, vmax=1.0)
            ax.set_xticks([]); ax.set_yticks([])
            if r == 0:
                ax.set_title(f"t = {snap.iteration}")
            if c == 0:
                ax.set_ylabel(name)
    fig.tight_layout()
    return fig
