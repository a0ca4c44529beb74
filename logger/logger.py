import json
import os
from datetime import datetime, timezone

class JSONLogger:
    def __init__(self, output_directory="logs/", log_file_prefix="tm_runs_"):
        self.output_directory = output_directory
        self.log_file_prefix = log_file_prefix
        os.makedirs(self.output_directory, exist_ok=True)
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.current_log = self._get_log_filename()

    def _get_log_filename(self):
        filename = f"{self.log_file_prefix}{self.today}.jsonl"  # JSON lines format
        return os.path.join(self.output_directory, filename)

    def _log_to_file(self, filename, entries):
        path = os.path.join(self.output_directory, filename)
        with open(path, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry) + "\n")

    def log(self, entry: dict):
        """Log a single entry to the main run log."""
        self.log_batch([entry])

    def log_batch(self, entries: list):
        """Log a batch of entries to the main run log."""
        with open(self.current_log, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry) + "\n")

    def rotate(self):
        """Start a new main log file if the UTC date changed."""
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.current_log = self._get_log_filename()

    def log_run(self, name, evaluation):
        """Log one finished (or bounded) run and route it by outcome."""
        entry = run_entry(name, evaluation)
        self.log(entry)
        if entry["outcome"] == "accepted":
            self.log_accepted([entry])
        elif entry["outcome"] == "halted_non_final":
            self.log_rejected([entry])
        else:
            self.log_unbounded([entry])
        return entry

    def log_accepted(self, entries: list):
        """Log runs that halted in a final state."""
        self._log_to_file(f"accepted_{self.today}.jsonl", entries)

    def log_rejected(self, entries: list):
        """Log runs that halted in a non-final state."""
        self._log_to_file(f"rejected_{self.today}.jsonl", entries)

    def log_unbounded(self, entries: list):
        """Log runs stopped by the step bound before halting."""
        self._log_to_file(f"unbounded_{self.today}.jsonl", entries)


def outcome_fields(evaluation):
    """Outcome fields shared by run log records and batch results."""
    result = getattr(evaluation, "result", evaluation)
    if result is None:
        return {"outcome": "step_limit", "halted": False, "steps": evaluation.steps}
    return {
        "outcome": result.outcome.value,
        "halted": True,
        "steps": result.steps,
        "state": result.state.id,
        "tape": result.tape,
    }


def run_entry(name, evaluation):
    """
    Build a log record from either a RunResult or an Evaluation.
    """
    entry = {
        "name": name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    entry.update(outcome_fields(evaluation))
    return entry
