"""Command-line interface for FreightFlow."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from time import perf_counter
from typing import Any, List, Optional

from freightflow.flow.engine import simulate
from freightflow.logging import env_log_level, get_logger, set_global_log_level
from freightflow.dsl.loader import load_network
from freightflow.model.network import EdgeKey, LoadError, NetworkModel
from freightflow.results.snapshot import NetworkSnapshot

logger = get_logger(__name__)


def _format_table(
    headers: List[str],
    rows: List[List[str]],
    min_width: int = 8,
    max_col_width: Optional[int] = None,
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers
        rows: Data rows
        min_width: Minimum column width
        max_col_width: Optional maximum column width; longer cells are clipped.

    Returns:
        Formatted table string
    """
    if not rows:
        return ""

    def clip(val: Any) -> str:
        s = str(val)
        if max_col_width is not None and len(s) > max_col_width:
            return s[: max_col_width - 3] + "..."
        return s

    clipped_headers = [clip(h) for h in headers]
    clipped_rows = [[clip(item) for item in row] for row in rows]

    all_data = [clipped_headers] + clipped_rows
    col_widths = []
    for col_idx in range(len(clipped_headers)):
        max_width = max(len(str(row[col_idx])) for row in all_data)
        col_widths.append(max(max_width, min_width))

    def format_row(row_data: List[str]) -> str:
        return "   " + " | ".join(
            f"{str(item):<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(clipped_headers)]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    for row in clipped_rows:
        lines.append(format_row(row))
    return "\n".join(lines)


def _format_duration(seconds: float) -> str:
    """Return a concise human-readable duration string.

    Examples:
        0.123 -> "123.0 ms"; 1.234 -> "1.23 s"; 75.2 -> "1m 15.2s".
    """
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f} ms"
    if seconds < 60.0:
        return f"{seconds:.2f} s"
    minutes = int(seconds // 60)
    rem = seconds - minutes * 60
    return f"{minutes}m {rem:.1f}s"


def _parse_keys(values: Optional[List[str]]) -> List[EdgeKey]:
    keys: List[EdgeKey] = []
    for value in values or []:
        try:
            keys.append(EdgeKey.parse(value))
        except ValueError as exc:
            raise SystemExit(f"Invalid --block value: {exc}") from None
    return keys


def _load_or_exit(path: Path) -> NetworkModel:
    try:
        return load_network(path)
    except LoadError as exc:
        logger.error("Failed to load network: %s", exc)
        print(f"❌ ERROR: {exc}")
        sys.exit(1)


def _print_snapshot(snapshot: NetworkSnapshot, detail: bool) -> None:
    stats = snapshot.summary()
    print(f"   Flow scale: {stats.flow_scale:.0%}")
    print(f"   Total volume: ~{stats.total_flow:,.0f} units / cycle")
    print(
        f"   Visible edges: {stats.visible_edges:,}"
        f" (blocked: {stats.blocked_edges:,})"
    )
    print(f"   Overloaded main edges: {stats.overloaded_main_edges:,}")
    print(
        f"   Alternative mode: {'on' if snapshot.alternative_mode_active else 'off'}"
        f" · alternative volume: {stats.alternative_volume:,.0f}"
        f" ({'used' if stats.alternative_used else 'unused'})"
    )
    print(f"   Dynamic edges: {len(snapshot.dynamic_edges):,}")

    reports = [r for r in snapshot.edges if detail or r.visible]
    rows = []
    for r in reports:
        rows.append(
            [
                r.key,
                r.label,
                f"{r.flow:,.1f}",
                f"{r.capacity:,.1f}" if r.capacity is not None else "-",
                "yes" if r.overloaded else "no",
                "yes" if r.blocked else "no",
            ]
        )
    table = _format_table(
        ["Edge", "Label", "Flow", "Capacity", "Overloaded", "Blocked"], rows
    )
    if table:
        print("\n   Edges:")
        print(table)


def _run_network(
    path: Path,
    blocks: List[EdgeKey],
    scale: float,
    results_path: Optional[Path],
    stdout: bool,
    detail: bool,
) -> None:
    """Load a network, apply blocks and scale, recalculate and report."""
    logger.info("Running freight flow for: %s", path)
    network = _load_or_exit(path)

    start = perf_counter()
    engine = simulate(network, blocked=blocks, flow_scale=scale)
    duration = perf_counter() - start
    logger.info("Recalculation finished in %s", _format_duration(duration))

    snapshot = engine.snapshot()
    print(f"\n✅ Flow computed for {path.name}")
    _print_snapshot(snapshot, detail)

    payload = snapshot.to_dict()
    if results_path is not None:
        results_path.parent.mkdir(parents=True, exist_ok=True)
        results_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info("Results written to: %s", results_path)
    if stdout:
        print(json.dumps(payload, indent=2))


def _inspect_network(path: Path, detail: bool) -> None:
    """Print a structural summary of a network file."""
    network = _load_or_exit(path)
    roles: dict = {}
    for edge in network.original_edges:
        roles[edge.role.value] = roles.get(edge.role.value, 0) + 1
    sources = sum(1 for n in network.nodes.values() if n.outbound > 0)
    sinks = sum(1 for n in network.nodes.values() if n.inbound > 0)

    print(f"\n🔍 Network: {path.name}")
    print(
        f"   Total Nodes: {len(network.nodes):,}"
        f" (sources: {sources}, sinks: {sinks})"
    )
    print(f"   Total Edges: {len(network.original_edges):,}")
    for role, count in sorted(roles.items()):
        print(f"     {role}: {count:,}")

    if detail and network.nodes:
        rows = [
            [
                str(n.id),
                n.label,
                n.region or "-",
                f"{n.outbound:,.1f}",
                f"{n.inbound:,.1f}",
            ]
            for n in network.nodes.values()
        ]
        print("\n   Nodes:")
        headers = ["Id", "Name", "Region", "Out", "In"]
        print(_format_table(headers, rows, max_col_width=32))


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``freightflow`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="freightflow",
        description="Compute freight flow redistribution on transport networks.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Suppress info logs (warnings only)"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{run,inspect}",
        help="Available commands",
    )

    run_parser = subparsers.add_parser("run", help="Recalculate flow for a network")
    run_parser.add_argument("network", type=Path, help="Path to network YAML/JSON")
    run_parser.add_argument(
        "--block",
        "-b",
        action="append",
        default=None,
        metavar="KEY",
        help="Block an original main edge, e.g. '1-2' (repeatable)",
    )
    run_parser.add_argument(
        "--scale", "-s", type=float, default=1.0, help="Flow multiplier (0.3-2.5)"
    )
    run_parser.add_argument(
        "--results", "-r", type=Path, default=None, help="Write snapshot JSON here"
    )
    run_parser.add_argument(
        "--stdout", action="store_true", help="Print snapshot JSON to stdout"
    )
    run_parser.add_argument(
        "--detail", "-d", action="store_true", help="List hidden edges as well"
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Inspect and validate a network file"
    )
    inspect_parser.add_argument("network", type=Path, help="Path to network YAML/JSON")
    inspect_parser.add_argument(
        "--detail", "-d", action="store_true", help="Show the complete node table"
    )

    effective_args = sys.argv[1:] if argv is None else argv
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if args.verbose:
        set_global_log_level(logging.DEBUG)
        logger.debug("Debug logging enabled")
    elif args.quiet:
        set_global_log_level(logging.WARNING)
    else:
        set_global_log_level(env_log_level(logging.INFO))

    if args.command == "run":
        _run_network(
            path=args.network,
            blocks=_parse_keys(args.block),
            scale=args.scale,
            results_path=args.results,
            stdout=args.stdout,
            detail=args.detail,
        )
    elif args.command == "inspect":
        _inspect_network(args.network, args.detail)


if __name__ == "__main__":
    main()
