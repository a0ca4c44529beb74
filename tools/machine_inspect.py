import argparse

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from simulator.loader import load_definition

def transition_grid(definition):
    """
    State x symbol grid of compact `write move next` cells.
    Pairs with no rule are shown as HALT.
    """
    symbols = definition.alphabet
    grid = []
    for state in definition.states:
        row = []
        for symbol in symbols:
            rule = definition.rules.lookup(state, symbol)
            if rule is None:
                row.append("HALT")
            else:
                row.append(f"{rule.write_symbol}{rule.move}{rule.next_state}")
        grid.append(row)
    return symbols, grid

def render_table(definition):
    symbols, grid = transition_grid(definition)

    table = Table(title="Transition Table", show_header=True, header_style="bold magenta")
    table.add_column("State", justify="center")
    for symbol in symbols:
        table.add_column(repr(symbol), justify="center")

    for state, row in zip(definition.states, grid):
        label = str(state)
        if state == definition.initial_state:
            label = f"-> {label}"
        if state in definition.final_states:
            label = f"[green]{label} *[/green]"
        cells = ["[red]HALT[/red]" if cell == "HALT" else escape(cell) for cell in row]
        table.add_row(label, *cells)
    return table

def inspect_machine(path, console=None):
    console = console or Console()
    definition = load_definition(path)

    console.print(f"[INFO] Machine {path}")
    console.print(f"  States: {len(definition.states)}")
    console.print(f"  Initial State: {definition.initial_state}")
    console.print(f"  Final States: {sorted(s.id for s in definition.final_states)}")
    console.print(f"  Blank: {definition.blank!r}")
    console.print(f"  Rules: {len(definition.rules)}")
    console.print(render_table(definition))

    for rule in definition.rules.duplicates():
        console.print(f"[yellow][WARNING] Rule '{escape(str(rule))}' is shadowed by an earlier rule and never applies.[/yellow]")
    return definition

def main():
    parser = argparse.ArgumentParser(description="Turing Machine Definition Inspector")
    parser.add_argument("--machine", required=True, help="Path to a machine definition file")
    args = parser.parse_args()

    inspect_machine(args.machine)

if __name__ == "__main__":
    main()
