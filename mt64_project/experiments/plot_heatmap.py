# experiments/plot_heatmap.py
"""
Heatmap of attack results: x = samples (consecutive oracle outputs collected),
y = output_bits (bits revealed per output), cell = mean of the chosen metric.

CSV columns (as written by run_experiments.py): samples, output_bits, trial, success, time_s

Usage:
    python -m mt64_project.experiments.plot_heatmap --csv results/experiments_XXXX.csv --out heatmap.png
"""

import argparse
import os

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

REQUIRED_COLUMNS = {'samples', 'output_bits', 'trial', 'success'}
METRIC_LABELS = {
    'success': 'Mean success rate (0-1)',
    'time_s': 'Mean attack time (s)',
}


def prepare_pivot(df, metric='success'):
    agg = df.groupby(['output_bits', 'samples'], as_index=False)[metric].mean()
    pivot = agg.pivot(index='output_bits', columns='samples', values=metric)
    # widest outputs on top
    return pivot.sort_index(ascending=False)


def plot_heatmap(pivot, metric='success', title='MT19937-64 State Recovery', out_file=None, show=True):
    rows = pivot.index.tolist()
    cols = pivot.columns.tolist()
    data = pivot.values.astype(float)

    fig, ax = plt.subplots(figsize=(0.8 * len(cols) + 3, 0.6 * len(rows) + 2))
    if metric == 'success':
        im = ax.imshow(data, aspect='auto', interpolation='nearest', vmin=0.0, vmax=1.0)
        threshold = 0.5
    else:
        im = ax.imshow(data, aspect='auto', interpolation='nearest')
        threshold = np.nanmean(data) if np.isfinite(data).any() else 0.0

    ax.set_xticks(np.arange(len(cols)))
    ax.set_yticks(np.arange(len(rows)))
    ax.set_xticklabels(cols)
    ax.set_yticklabels(rows)
    ax.set_xlabel('Consecutive outputs collected')
    ax.set_ylabel('Output bits revealed by oracle')
    ax.set_title(title)
    plt.setp(ax.get_xticklabels(), rotation=45, ha='right')

    for i in range(len(rows)):
        for j in range(len(cols)):
            val = data[i, j]
            if np.isnan(val):
                ax.text(j, i, 'N/A', ha='center', va='center', color='gray', fontsize=9)
            else:
                ax.text(j, i, f"{val:.2f}", ha='center', va='center',
                        color='white' if val > threshold else 'black', fontsize=9)

    cbar = fig.colorbar(im, ax=ax, fraction=0.046, pad=0.04)
    cbar.set_label(METRIC_LABELS.get(metric, metric))

    plt.tight_layout()
    if out_file:
        os.makedirs(os.path.dirname(out_file) or '.', exist_ok=True)
        plt.savefig(out_file, dpi=300)
        print(f"Heatmap saved to {out_file}")
    if show:
        plt.show()
    return fig


def load_results(path):
    df = pd.read_csv(path)
    if not REQUIRED_COLUMNS.issubset(df.columns):
        raise SystemExit(f"CSV must contain columns: {sorted(REQUIRED_COLUMNS)}. Found: {df.columns.tolist()}")
    df['samples'] = df['samples'].astype(int)
    df['output_bits'] = df['output_bits'].astype(int)
    df['success'] = df['success'].astype(float)
    return df


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument('--csv', required=True, help='Path to experiments CSV')
    parser.add_argument('--out', default='results/heatmap_success_rate.png', help='Output PNG path')
    parser.add_argument('--metric', default='success', choices=sorted(METRIC_LABELS))
    parser.add_argument('--title', default='MT19937-64 State Recovery', help='Plot title')
    args = parser.parse_args()

    df = load_results(args.csv)
    if args.metric not in df.columns:
        raise SystemExit(f"CSV has no '{args.metric}' column")
    pivot = prepare_pivot(df, args.metric)
    plot_heatmap(pivot, metric=args.metric, title=args.title, out_file=args.out)


if __name__ == '__main__':
    main()
