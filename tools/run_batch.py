# tools/run_batch.py

import argparse
import json
import os
from pathlib import Path
import numpy as np
from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn, TimeElapsedColumn

from logger.logger import outcome_fields
from simulator.errors import TuringMachineError
from simulator.evaluator import run_bounded
from simulator.loader import load_machine

# === Pool Loading ===
def parse_pool_line(line):
    """
    Return (machine_path, tape_path) or None for blank/comment lines.

    Pool format: one `machine_path tape_path` pair per line, separated by
    whitespace, with `#` starting a comment. Paths therefore cannot contain
    spaces or `#`.
    """
    line = line.split("#", 1)[0].strip()
    if not line:
        return None
    parts = line.split()
    if len(parts) != 2:
        raise ValueError(f"Pool entry must be 'machine_path tape_path', got: {line!r}")
    return parts[0], parts[1]

def load_job_pool(pool_file):
    """Load (machine, tape) jobs; relative paths resolve against the pool file's folder."""
    base = Path(pool_file).parent
    jobs = []
    with open(pool_file, "r", encoding="utf-8") as f:
        for line in f:
            entry = parse_pool_line(line)
            if entry is None:
                continue
            machine_path, tape_path = (str(base / p) for p in entry)
            jobs.append((machine_path, tape_path))
    return jobs

def job_key(machine_path, tape_path):
    return f"{machine_path}::{tape_path}"

# === Checkpointing ===
def load_checkpoint(checkpoint_path):
    if checkpoint_path.exists():
        with open(checkpoint_path, "r", encoding="utf-8") as f:
            checkpoint = json.load(f)
        return checkpoint.get("completed", [])
    return []

def save_checkpoint(completed, checkpoint_path):
    with open(checkpoint_path, "w", encoding="utf-8") as f:
        json.dump({"completed": completed}, f, indent=4)

def console_message(msg):
    print(f"[{Path(os.getcwd()).name}] {msg}")

def step_statistics(steps):
    """Summary of step counts for the jobs that halted in this run."""
    if not steps:
        return {"count": 0, "mean": None, "median": None, "max": None}
    arr = np.asarray(steps, dtype=np.int64)
    return {
        "count": int(arr.size),
        "mean": float(arr.mean()),
        "median": float(np.median(arr)),
        "max": int(arr.max()),
    }

# === Single Job ===
def run_job(machine_path, tape_path, max_steps=None):
    entry = {"machine": machine_path, "tape": tape_path}
    try:
        machine = load_machine(machine_path, tape_path)
    except (TuringMachineError, OSError) as e:
        entry.update({"outcome": "error", "error": f"{type(e).__name__}: {e}"})
        return entry

    entry.update(outcome_fields(run_bounded(machine, max_steps=max_steps)))
    return entry

# === Main Batch Runner ===
def run_pool(pool_file, output_name="results", results_dir="results", max_steps=None, batch_size=256, show_progress=True):
    pool_name = Path(pool_file).stem
    results_folder = Path(results_dir) / pool_name
    results_folder.mkdir(parents=True, exist_ok=True)
    results_file = results_folder / f"{output_name}.jsonl"
    checkpoint_file = results_folder / f"{output_name}_checkpoint.json"

    all_jobs = load_job_pool(pool_file)
    completed = load_checkpoint(checkpoint_file)
    done = set(completed)

    pending_jobs = [job for job in all_jobs if job_key(*job) not in done]
    console_message(f"Loaded {len(all_jobs):,} total jobs. {len(pending_jobs):,} pending.")

    outcomes = {"accepted": 0, "halted_non_final": 0, "step_limit": 0, "error": 0}
    halted_steps = []

    with open(results_file, "a", encoding="utf-8") as results_fh:
        for batch_start in range(0, len(pending_jobs), batch_size):
            batch = pending_jobs[batch_start:batch_start + batch_size]
            console_message(f"Processing batch {batch_start // batch_size + 1} with {len(batch):,} jobs...")

            with Progress(
                    SpinnerColumn(),
                    BarColumn(),
                    "[progress.percentage]{task.percentage:>3.0f}%",
                    TextColumn("{task.completed}/{task.total} Jobs"),
                    TimeElapsedColumn(),
                    disable=not show_progress
            ) as progress:

                task = progress.add_task("[cyan]Running...", total=len(batch))

                batch_results = []

                for machine_path, tape_path in batch:
                    entry = run_job(machine_path, tape_path, max_steps=max_steps)
                    if entry["outcome"] == "error":
                        console_message(f"[WARNING] Failed to run {machine_path} on {tape_path}: {entry['error']}")
                    outcomes[entry["outcome"]] += 1
                    if entry.get("halted"):
                        halted_steps.append(entry["steps"])
                    batch_results.append(entry)
                    completed.append(job_key(machine_path, tape_path))
                    progress.update(task, advance=1)

                # === BULK WRITE once per batch ===
                for entry in batch_results:
                    results_fh.write(json.dumps(entry) + "\n")
                results_fh.flush()

                save_checkpoint(completed, checkpoint_file)
                console_message("[INFO] Batch completed. Checkpoint saved.")

    console_message(f"[SUCCESS] All jobs run. Results saved to {results_file}")
    return {"outcomes": outcomes, "steps": step_statistics(halted_steps)}


# === CLI ===
def main():
    parser = argparse.ArgumentParser(description="Run a pool of Turing machine jobs with checkpointing.")
    parser.add_argument("--pool", required=True, help="Path to pool file (one 'machine_path tape_path' per line)")
    parser.add_argument("--output", default="results", help="Output result file name (default: results)")
    parser.add_argument("--results_dir", default="results", help="Folder that receives per-pool results")
    parser.add_argument("--batch_size", type=int, default=256, help="Batch size per save/checkpoint")
    parser.add_argument("--max_steps", type=int, default=None, help="Maximum steps per job before giving up")
    args = parser.parse_args()

    run_pool(
        args.pool,
        args.output,
        results_dir=args.results_dir,
        max_steps=args.max_steps,
        batch_size=args.batch_size
    )

if __name__ == "__main__":
    main()
