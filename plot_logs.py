import argparse
import os
import glob
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from wordle_helper import SessionStatus


def load_all_logs(log_dir="logs"):
    pattern = os.path.join(log_dir, "session_*.csv")
    files = sorted(glob.glob(pattern))
    if not files:
        raise FileNotFoundError(f"No log files found matching {pattern}")
    dfs = []
    for fp in files:
        df = pd.read_csv(fp, dtype={"guess": str, "response": str, "top": str, "status": str})
        df["session"] = os.path.splitext(os.path.basename(fp))[0]
        dfs.append(df)
    return pd.concat(dfs, ignore_index=True)


def coerce_numeric(df):
    for col in ["attempt", "remaining"]:
        df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


def compute_stats(df):
    per_attempt = df.groupby("attempt")["remaining"].agg(["mean", "min", "max", "count"])

    last = df.sort_values("attempt").groupby("session").tail(1)
    solved = last[last["status"] == SessionStatus.SOLVED.value]
    exhausted = last[last["status"] == SessionStatus.EXHAUSTED.value]

    return {
        "per_attempt": per_attempt,
        "sessions": int(df["session"].nunique()),
        "solved": int(len(solved)),
        "exhausted": int(len(exhausted)),
        "mean_attempts_solved": float(np.mean(solved["attempt"])) if len(solved) else np.nan,
    }


def plot_shrinkage(df, out_path):
    fig, ax = plt.subplots(figsize=(8, 5))

    for name, g in df.groupby("session"):
        g = g.sort_values("attempt")
        ax.plot(g["attempt"], g["remaining"], marker="o", alpha=0.4, label=name)

    mean = df.groupby("attempt")["remaining"].mean()
    ax.plot(mean.index, mean.values, color="black", linewidth=2, label="Mean")

    # zero remaining (exhausted) must stay visible
    ax.set_yscale("symlog", linthresh=1)
    ax.set_xticks(np.arange(1, int(np.nanmax(df["attempt"])) + 1))
    ax.set_xlabel("Attempt")
    ax.set_ylabel("Remaining candidates")
    ax.set_title("Candidate list shrinkage")
    if df["session"].nunique() <= 10:
        ax.legend()

    plt.tight_layout()
    plt.savefig(out_path, dpi=150)
    plt.close(fig)


def print_summary(stats):
    print(f"Sessions: {stats['sessions']}")
    print(f"Solved: {stats['solved']}")
    print(f"Exhausted: {stats['exhausted']}")
    if not np.isnan(stats["mean_attempts_solved"]):
        print(f"Average attempts (solved only): {stats['mean_attempts_solved']:.3f}")
    print("Remaining candidates per attempt:")
    for attempt, row in stats["per_attempt"].iterrows():
        print(f"  {attempt}: mean {row['mean']:.1f}, min {int(row['min'])}, max {int(row['max'])}")


def main(argv=None):
    parser = argparse.ArgumentParser()
    parser.add_argument("--log-dir", default="logs")
    parser.add_argument("--out", default=None)
    args = parser.parse_args(argv)

    df = load_all_logs(args.log_dir)
    df = coerce_numeric(df)
    stats = compute_stats(df)
    print_summary(stats)

    out_path = args.out or os.path.join(args.log_dir, "shrinkage.png")
    plot_shrinkage(df, out_path)

    print(f"Shrinkage plot saved: {out_path}")


if __name__ == "__main__":
    main()
