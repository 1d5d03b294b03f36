import csv
import time
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console

if TYPE_CHECKING:
    from routesearch.solver import RandomRestartTSP


class Reporter:
    """Reporter class for logging search progress to CSV and rich console."""

    def __init__(self, output_dir: str = "output", filename: str = None, console: Console = None, quiet: bool = False):
        self.console = console if console is not None else Console()
        self.quiet = quiet
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        if filename is None:
            timestamp = time.strftime("%Y%m%d_%H%M%S")
            filename = f"run_{timestamp}.csv"

        self.csv_path = self.output_dir / filename
        self.start_time = None
        self.csv_file = None
        self.csv_writer = None

    def start(self, search: "RandomRestartTSP" = None):
        """Start the reporter and print the log file location.

        Args:
            search: Optional RandomRestartTSP instance to extract config metadata from.
        """
        self.start_time = time.time()
        self.csv_file = open(self.csv_path, "w", newline="")
        self.csv_writer = csv.writer(self.csv_file)

        # Write config metadata as comments
        if search is not None:
            config = search.config
            self.csv_file.write(f"# num_cities,{search.num_cities}\n")
            self.csv_file.write(f"# source,{config.source}\n")
            self.csv_file.write(f"# record,{config.record}\n")
            self.csv_file.write(f"# missing,{config.missing}\n")
            self.csv_file.write(f"# seed,{config.seed}\n")

        self.csv_writer.writerow([
            "iteration",
            "time_elapsed",
            "distance",
            "best_distance",
        ])

        self.console.print(f"[bold green]Logging to:[/bold green] {self.csv_path.absolute()}")

    def stop(self):
        """Close the CSV file."""
        if self.csv_file:
            self.csv_file.close()
            self.csv_file = None
            self.csv_writer = None

    def log(self, search: "RandomRestartTSP"):
        """Log the current state of the search."""
        elapsed = time.time() - self.start_time
        state = search.state
        distance = state.history[-1].distance

        self.csv_writer.writerow([
            state.iteration_count,
            f"{elapsed:.2f}",
            f"{distance:.4f}",
            f"{state.incumbent_length:.4f}",
        ])
        self.csv_file.flush()

        if not self.quiet:
            self.console.print(
                f"[cyan]Iter {state.iteration_count:>6}[/cyan] | "
                f"[yellow]Time: {elapsed:>7.2f}s[/yellow] | "
                f"[blue]Distance: {distance:>10.2f}[/blue] | "
                f"[green]Best: {state.incumbent_length:>10.2f}[/green]"
            )

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
