"""Probe the HarakaPay backend: table access, RLS on parents, signup trigger.

Usage:
    python scripts/probe_backend.py                 # tables + RLS
    python scripts/probe_backend.py --signup        # also run a test signup
    python scripts/probe_backend.py --table schools --table students
"""

from __future__ import annotations

import argparse
import sys

from harakapay.clients.supabase import SupabaseClient
from harakapay.core.logging import configure_logging
from harakapay.core.settings import get_settings
from harakapay.services.diagnostics import (
    ProbeResult,
    probe_rls,
    probe_signup_trigger,
    probe_table,
    probe_table_columns,
)

DEFAULT_TABLES = ["parents", "academic_years", "student_fee_assignments"]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Probe the HarakaPay backend")
    ap.add_argument("--table", action="append", dest="tables", help="Table to probe (repeatable)")
    ap.add_argument("--columns", action="store_true", help="Also read each table's column metadata")
    ap.add_argument("--no-rls", action="store_true", help="Skip the anonymous-insert RLS check")
    ap.add_argument("--signup", action="store_true", help="Sign up a throwaway user to test the trigger")
    ap.add_argument("--wait", type=float, default=2.0, help="Seconds to wait for the signup trigger")
    return ap.parse_args(argv)


def run_probes(client: SupabaseClient, args: argparse.Namespace) -> list[ProbeResult]:
    results = []
    for table in args.tables or DEFAULT_TABLES:
        results.append(probe_table(client, table))
        if args.columns:
            results.append(probe_table_columns(client, table))
    if not args.no_rls:
        results.append(probe_rls(client))
    if args.signup:
        results.append(probe_signup_trigger(client, wait_seconds=args.wait))
    return results


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)
    missing = settings.missing_required()
    if missing:
        print(f"Missing Supabase environment variables: {', '.join(missing)}")
        return 1

    client = SupabaseClient(settings.supabase_url, settings.supabase_anon_key, timeout=settings.http_timeout_seconds)
    results = run_probes(client, args)
    for r in results:
        print(f"[{'OK' if r.passed else 'FAIL'}] {r.name}: {r.message}")
        for warning in r.warnings:
            print(f"    warning: {warning}")
    return 0 if all(r.passed for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
