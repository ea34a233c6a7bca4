"""
Fractal Journal Shell
=====================

Line-oriented front end over DualTimelineEngine.

Every processed line, command or dialogue input, advances the timeline
parity: even lines go to timeline 1, odd lines to timeline 2.

Commands:
    :observers              list personas
    :save_power_law         write the power-law report for the current timeline
    :save_knowledge_graph   write the relationship graph for the current timeline
    :quit / :exit           end the session

Usage:
    python -m fractal_journal.shell                      # interactive
    python -m fractal_journal.shell --batch inputs.txt   # batch, then interactive
    python -m fractal_journal.shell --seed 7 --backend memory
"""

from __future__ import annotations
from typing import Callable, Iterable, List, Optional
import argparse
import sys

from .contracts.base import FractalJournalError
from .contracts.events import TurnOutcome
from .engine import DualTimelineEngine, EngineConfig
from .storage import StorageConfig


QUIT_COMMANDS = (":quit", ":exit")
BANNER = (
    "Fractal NLP Shell (type :quit or :exit to exit, :observers to list observers, "
    ":save_power_law to save power-law analysis, :save_knowledge_graph to save knowledge graph)"
)


def format_outcome(outcome: TurnOutcome) -> List[str]:
    return [
        f"[Timeline {outcome.timeline_id}] [{outcome.observer_name} ({outcome.observer_symbol})]: "
        f"{outcome.response}",
        f"Message: {outcome.message}",
        f"Sigil: {outcome.sigil}",
        "Tags: " + " ".join(outcome.tags),
    ]


class ShellSession:
    """Dispatches shell lines to the engine and prints the results."""

    def __init__(self, engine: DualTimelineEngine, out: Callable[[str], None] = print):
        self._engine = engine
        self._out = out

    @property
    def engine(self) -> DualTimelineEngine:
        return self._engine

    def handle_line(self, line: str) -> bool:
        """
        Process one line. Returns False when the session should end.

        Engine failures are reported and the session continues.
        """
        line = line.rstrip("\r\n")
        if line in QUIT_COMMANDS:
            return False

        timeline_id = self._engine.next_timeline()
        try:
            if line == ":observers":
                for obs in self._engine.list_observers():
                    self._out(f"{obs.name} ({obs.symbol})")
            elif line == ":save_power_law":
                path, report = self._engine.save_power_law(timeline_id)
                self._out(f"[*] Power-law analysis saved to {path}. Estimated alpha: {report.alpha:g}")
            elif line == ":save_knowledge_graph":
                path, export = self._engine.save_relationship_graph(timeline_id)
                self._out(
                    f"[*] Knowledge graph saved to {path} "
                    f"({len(export.nodes)} nodes, {len(export.edges)} edges)"
                )
            else:
                for text in format_outcome(self._engine.submit(line, timeline_id)):
                    self._out(text)
        except FractalJournalError as e:
            self._out(f"[!] {e.code.name}: {e.message}")
        return True

    def run_batch(self, lines: Iterable[str]) -> bool:
        """
        Process non-empty lines, echoing each.

        Returns False if a quit command cut the batch short.
        """
        for raw in lines:
            line = raw.rstrip("\r\n")
            if not line:
                continue
            if line in QUIT_COMMANDS:
                return False
            self._out(f"> {line}")
            self.handle_line(line)
        return True

    def run_interactive(self, read: Callable[[str], str] = input) -> None:
        while True:
            try:
                line = read("> ")
            except EOFError:
                break
            if not line.strip():
                continue
            if not self.handle_line(line):
                break


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fractal dialogue journal shell")
    parser.add_argument('--batch', '-b', help='File with one input line per line')
    parser.add_argument('--seed', type=int, default=None, help='Seed for the shared random source')
    parser.add_argument('--storage-dir', '-d', default=None, help='Directory for journals and exports')
    parser.add_argument(
        '--backend', choices=['file', 'memory'], default=None,
        help='Journal backend (default: file)'
    )
    return parser


def main(argv: Optional[List[str]] = None, read: Callable[[str], str] = input) -> int:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    config = EngineConfig.from_env(**overrides)
    if args.storage_dir or args.backend:
        config.storage = StorageConfig(
            backend_type=args.backend or config.storage.backend_type,
            storage_dir=args.storage_dir or config.storage.storage_dir,
        )

    session = ShellSession(DualTimelineEngine(config))
    print(BANNER)

    if args.batch:
        try:
            with open(args.batch, 'r', encoding='utf-8') as f:
                batch_lines = f.readlines()
        except OSError as e:
            print(f"[!] Could not open batch file {args.batch}: {e}", file=sys.stderr)
            return 1
        # A quit command only ends the batch
        session.run_batch(batch_lines)

    session.run_interactive(read)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
