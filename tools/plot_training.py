# tools/plot_training.py
import argparse
import csv
import math
from collections import defaultdict, deque
from pathlib import Path

# Use a non-interactive backend that writes to files
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402


def to_float(v):
    try:
        return float(v)
    except (TypeError, ValueError):
        return math.nan


def rolling_mean(xs, window):
    out, q, s = [], deque(), 0.0
    for x in xs:
        x = float(x)
        q.append(x); s += x
        if len(q) > window:
            s -= q.popleft()
        out.append(s / len(q))
    return out


def read_costs(log_path):
    """{fold: ([iteration...], [cost...])} from a cost CSV written during training."""
    log_path = Path(log_path)
    if not log_path.exists():
        raise FileNotFoundError(f"Could not find cost log at {log_path}. "
                                f"Run training with --cost-log first.")
    curves = defaultdict(lambda: ([], []))
    with log_path.open(newline="") as f:
        for row in csv.DictReader(f):
            fold = int(to_float(row.get("fold")) if row.get("fold") not in (None, "") else 1)
            steps, costs = curves[fold]
            steps.append(int(row["step"]))
            costs.append(to_float(row.get("train/cost")))
    if not curves:
        raise RuntimeError(f"{log_path} has a header but no rows. Run training first.")
    return dict(curves)


def plot_costs(log_path, out_dir=None, smooth=20):
    """Write cost_by_iteration.png next to the log (or into out_dir); returns the path."""
    log_path = Path(log_path)
    out_dir = Path(out_dir) if out_dir else log_path.parent / "plots"
    out_dir.mkdir(parents=True, exist_ok=True)
    curves = read_costs(log_path)

    fig = plt.figure(figsize=(10, 6))
    for fold, (steps, costs) in sorted(curves.items()):
        plt.plot(steps, costs, linewidth=1, alpha=0.5, label=f"fold {fold}")
        if smooth and len(costs) > smooth:
            clean = [0.0 if math.isnan(c) else c for c in costs]
            plt.plot(steps, rolling_mean(clean, smooth), linewidth=2, label=f"fold {fold} mean@{smooth}")
    plt.title("Training Cost"); plt.xlabel("iteration"); plt.ylabel("cost"); plt.legend()
    path = out_dir / "cost_by_iteration.png"
    fig.savefig(path, dpi=200, bbox_inches="tight")
    plt.close(fig)
    print(f"saved: {path}")
    return path


def main(argv=None):
    p = argparse.ArgumentParser(prog="classifier plot", description="Plot a training cost log")
    p.add_argument("log", help="cost CSV written with --cost-log")
    p.add_argument("--out", default=None, help="output directory (default: <log dir>/plots)")
    p.add_argument("--smooth", type=int, default=20, help="rolling mean window (0 = off)")
    args = p.parse_args(argv)
    return plot_costs(args.log, args.out, args.smooth)


if __name__ == "__main__":
    main()
