# app.py

import argparse
import sys

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt, IntPrompt, Confirm
from rich.table import Table

from config.config_loader import load_config
from logger.logger import JSONLogger
from simulator.errors import TuringMachineError
from simulator.evaluator import run_bounded
from simulator.loader import load_machine
from tools.machine_inspect import inspect_machine
from tools.run_batch import run_pool

console = Console()

EXIT_ACCEPTED = 0
EXIT_NON_FINAL = 1
EXIT_ERROR = 2
EXIT_STEP_LIMIT = 3

# === Handlers ===
def handle_run(config, machine_path, tape_path, max_steps=None, show_trace=False, log_runs=None):
    if max_steps is None:
        max_steps = config["max_steps"]
    if log_runs is None:
        log_runs = config["log_runs"]

    try:
        machine = load_machine(machine_path, tape_path)
    except (TuringMachineError, OSError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return EXIT_ERROR

    for rule in machine.table.duplicates():
        console.print(f"[yellow]Warning: rule '{escape(str(rule))}' is shadowed by an earlier rule.[/yellow]")

    on_step = None
    if show_trace:
        def on_step(m):
            console.print(escape(m.tape.window(config["trace_window"])))
            console.print(f"State: {m.current_state}, Step: {m.steps}")
        on_step(machine)

    evaluation = run_bounded(machine, max_steps=max_steps, on_step=on_step)

    if log_runs:
        logger = JSONLogger(config["output_directory"], config["log_file_prefix"])
        logger.log_run(f"{machine_path}::{tape_path}", evaluation)

    if evaluation.result is None:
        console.print(f"[yellow]Stopped after {evaluation.steps:,} steps without halting.[/yellow]")
        console.print(f"Tape: {escape(machine.tape.render())}")
        return EXIT_STEP_LIMIT

    result = evaluation.result
    console.print(f"Tape: {escape(result.tape)}")
    console.print(f"State: {result.state}  Steps: {result.steps:,}")
    if result.accepted:
        console.print("[bold green]Accepted[/bold green] (halted in a final state)")
        return EXIT_ACCEPTED
    console.print("[bold red]Rejected[/bold red] (halted in a non-final state)")
    return EXIT_NON_FINAL

def handle_inspect(machine_path):
    try:
        inspect_machine(machine_path, console=console)
    except (TuringMachineError, OSError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return EXIT_ERROR
    return EXIT_ACCEPTED

def handle_batch(config, pool_path, output_name="results", max_steps=None):
    if max_steps is None:
        max_steps = config["max_steps"]
    try:
        summary = run_pool(
            pool_path,
            output_name,
            results_dir=config["results_directory"],
            max_steps=max_steps,
            batch_size=config["batch_size"]
        )
    except (ValueError, OSError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return EXIT_ERROR

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Outcome", justify="center")
    table.add_column("Jobs", justify="center")
    for outcome, count in summary["outcomes"].items():
        table.add_row(outcome, f"{count:,}")
    console.print(table)

    steps = summary["steps"]
    if steps["count"]:
        console.print(f"Steps to halt: mean {steps['mean']:,.1f}, median {steps['median']:,.1f}, max {steps['max']:,}")
    return EXIT_ACCEPTED

# === Interactive Mode ===
def show_main_menu():
    console.print("\n[bold cyan]Turing Machine Simulator[/bold cyan]")
    console.print("[1] Run a Machine")
    console.print("[2] Inspect a Machine")
    console.print("[3] Run a Job Pool")
    console.print("[4] Exit")

def interactive_main(config):
    while True:
        show_main_menu()
        choice = Prompt.ask("\nChoose an option", choices=["1", "2", "3", "4"], default="4")

        if choice == "1":
            machine_path = Prompt.ask("Machine definition file")
            tape_path = Prompt.ask("Tape file")
            bounded = Confirm.ask("Limit the number of steps?", default=config["max_steps"] is not None)
            max_steps = IntPrompt.ask("Max Steps", default=config["max_steps"] or 1000000) if bounded else None
            show_trace = Confirm.ask("Show every step?", default=False)
            handle_run(config, machine_path, tape_path, max_steps=max_steps, show_trace=show_trace)
        elif choice == "2":
            handle_inspect(Prompt.ask("Machine definition file"))
        elif choice == "3":
            handle_batch(config, Prompt.ask("Pool file"))
        elif choice == "4":
            console.print("[bold green]Goodbye![/bold green]")
            break

# === CLI ===
def build_parser():
    parser = argparse.ArgumentParser(description="Single-tape Turing Machine Simulator")
    parser.add_argument("--config", default=None, help="Path to a JSON runtime config")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Run a machine on a tape")
    run_parser.add_argument("machine", help="Machine definition file")
    run_parser.add_argument("tape", help="Tape file")
    run_parser.add_argument("--max-steps", type=int, default=None, help="Stop after this many steps")
    run_parser.add_argument("--trace", action="store_true", help="Print the tape after every step")
    run_parser.add_argument("--log", action="store_true", default=None, help="Append the run to the JSON log")

    inspect_parser = subparsers.add_parser("inspect", help="Print a machine's transition table")
    inspect_parser.add_argument("machine", help="Machine definition file")

    batch_parser = subparsers.add_parser("batch", help="Run a pool of machine/tape jobs")
    batch_parser.add_argument("pool", help="Pool file, one 'machine_path tape_path' per line")
    batch_parser.add_argument("--output", default="results", help="Result file name")
    batch_parser.add_argument("--max-steps", type=int, default=None, help="Step bound per job")
    return parser

def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except (ValueError, TypeError, OSError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return EXIT_ERROR

    if args.command == "run":
        return handle_run(config, args.machine, args.tape, max_steps=args.max_steps, show_trace=args.trace, log_runs=args.log)
    if args.command == "inspect":
        return handle_inspect(args.machine)
    if args.command == "batch":
        return handle_batch(config, args.pool, args.output, max_steps=args.max_steps)

    interactive_main(config)
    return EXIT_ACCEPTED

if __name__ == "__main__":
    sys.exit(main())
