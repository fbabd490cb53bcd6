#!/usr/bin/env python3
"""
Studio Metrics CLI — print monthly aggregates or start the API server.

USAGE:
  python -m studio_metrics.cli revenue                              # Monthly revenue, all locations
  python -m studio_metrics.cli revenue --location losGatosData      # One location
  python -m studio_metrics.cli amounts --start 2023-01 --end 2023-06
  python -m studio_metrics.cli members --file membersalpha.csv
  python -m studio_metrics.cli programs --json

  python -m studio_metrics.cli serve                                # Start API server
  python -m studio_metrics.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import json
import os
import sys

from studio_metrics.config import LOCATIONS, MEMBER_FILES, DEFAULT_MEMBER_FILE
from studio_metrics.data.resolver import FileResolver
from studio_metrics.data.source import DataSource
from studio_metrics.data.schemas import (
    MonthlyRevenue, MonthlyAmountBreakdown, MonthlyMembership, MonthlyProgramBreakdown,
)
from studio_metrics.errors import StudioMetricsError
from studio_metrics.analytics.common import fill_month_range, sanitize_for_json
from studio_metrics.analytics.legend import amount_legend_keys, program_legend_keys
from studio_metrics.analytics.locations import filter_by_location
from studio_metrics.analytics.revenue import aggregate_monthly, aggregate_amount_breakdown
from studio_metrics.analytics.membership import (
    aggregate_monthly_memberships, aggregate_program_breakdown,
)

_LOCATION_CHOICES = ["allData", *LOCATIONS.keys()]


def _source(args) -> DataSource:
    dirs = args.data_dir or None
    return DataSource(FileResolver(dirs))


def _subset(records, attr: str, location: str):
    if location == "allData":
        return records
    return filter_by_location(records, attr, LOCATIONS[location])


def _apply_range(rows, args, empty):
    """Clip/gap-fill to --start/--end; either bound defaults to the data's own."""
    if not (args.start or args.end) or not rows:
        return rows
    start = args.start or rows[0].month
    end = args.end or rows[-1].month
    return fill_month_range(rows, start, end, empty)


def _emit(rows, args, render, extra: dict | None = None) -> None:
    if args.json:
        payload = {"rows": [r.to_dict() for r in rows], **(extra or {})}
        print(json.dumps(sanitize_for_json(payload), indent=2))
        return
    for r in rows:
        print(render(r))
    if extra:
        for k, v in extra.items():
            print(f"\n{k}: {', '.join(v)}")


def cmd_revenue(args):
    records = _subset(_source(args).payments(), "payer_home_location", args.location)
    rows = _apply_range(aggregate_monthly(records), args, MonthlyRevenue)
    _emit(rows, args, lambda r: f"{r.month}  ${r.revenue:>12,.2f}  {r.count:>6,} payments")


def cmd_amounts(args):
    records = _subset(_source(args).payments(), "payer_home_location", args.location)
    rows = _apply_range(aggregate_amount_breakdown(records), args, MonthlyAmountBreakdown)
    legend = amount_legend_keys(rows, args.top)

    def render(r):
        parts = ", ".join(f"${k}: {v:,.2f}" for k, v in sorted(r.amounts.items(), key=lambda kv: -kv[1])[:args.top])
        return f"{r.month}  ${r.total:>12,.2f}  [{parts}]"

    _emit(rows, args, render, {"legend": legend})


def cmd_members(args):
    records = _subset(_source(args).members(args.file), "client_home_location", args.location)
    rows = _apply_range(aggregate_monthly_memberships(records), args, MonthlyMembership)
    _emit(rows, args, lambda r: (
        f"{r.month}  active {r.membership_count:>6,}  +{r.new_memberships:<5} -{r.canceled_memberships:<5}"
    ))


def cmd_programs(args):
    records = _subset(_source(args).members(args.file), "client_home_location", args.location)
    rows = _apply_range(aggregate_program_breakdown(records), args, MonthlyProgramBreakdown)
    legend = program_legend_keys(rows, args.top)

    def render(r):
        parts = ", ".join(f"{k}: {v}" for k, v in sorted(r.programs.items(), key=lambda kv: -kv[1]))
        return f"{r.month}  total {r.total:>6,}  [{parts}]"

    _emit(rows, args, render, {"legend": legend})


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    print(f"\nStarting Studio Metrics API on port {args.port}...")
    uvicorn.run("studio_metrics.main:app", host="0.0.0.0", port=args.port, reload=args.reload,
                timeout_keep_alive=65)


def _add_common(p: argparse.ArgumentParser, members: bool = False, legend: bool = False) -> None:
    p.add_argument("--data-dir", action="append", help="Candidate data directory (repeatable, searched in order)")
    p.add_argument("--location", choices=_LOCATION_CHOICES, default="allData", help="Location subset")
    p.add_argument("--start", help="First month (YYYY-MM); fills gaps with zeros")
    p.add_argument("--end", help="Last month (YYYY-MM); fills gaps with zeros")
    p.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    if members:
        p.add_argument("--file", choices=MEMBER_FILES, default=DEFAULT_MEMBER_FILE, help="Members export")
    if legend:
        p.add_argument("--top", type=int, default=6, help="Legend size (default 6)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Studio Metrics — monthly revenue and membership aggregates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    revenue_parser = subparsers.add_parser("revenue", help="Monthly revenue totals")
    _add_common(revenue_parser)
    revenue_parser.set_defaults(func=cmd_revenue)

    amounts_parser = subparsers.add_parser("amounts", help="Monthly revenue by payment amount")
    _add_common(amounts_parser, legend=True)
    amounts_parser.set_defaults(func=cmd_amounts)

    members_parser = subparsers.add_parser("members", help="Monthly active memberships")
    _add_common(members_parser, members=True)
    members_parser.set_defaults(func=cmd_members)

    programs_parser = subparsers.add_parser("programs", help="Monthly active members per program")
    _add_common(programs_parser, members=True, legend=True)
    programs_parser.set_defaults(func=cmd_programs)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    try:
        args.func(args)
    except StudioMetricsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
