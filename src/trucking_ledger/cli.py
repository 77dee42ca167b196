from __future__ import annotations

import argparse
import json
import logging
import os
from dataclasses import asdict, replace
from datetime import date
from typing import Any

from trucking_ledger.analysis.monthly import build_monthly_report, monthly_report_frame
from trucking_ledger.analysis.snapshot import run_engine
from trucking_ledger.analysis.trips import trip_breakdown
from trucking_ledger.config import EngineConfig, load_config
from trucking_ledger.costs.fuel import RegionalFuelModel
from trucking_ledger.debts.schedule import apply_payment, schedule_payoff
from trucking_ledger.ledger.manifest import import_manifest
from trucking_ledger.ledger.records import debt_service_amount, parse_date
from trucking_ledger.store.json_store import JsonLedgerStore, jsonable

logger = logging.getLogger(__name__)


def _mkdirp(path: str) -> None:
    d = os.path.dirname(path)
    if d:
        os.makedirs(d, exist_ok=True)


def _print_json(out: dict[str, Any]) -> None:
    print(json.dumps(jsonable(out), indent=2, sort_keys=True))


def _config(args: argparse.Namespace) -> EngineConfig:
    if not args.config:
        return EngineConfig()
    try:
        return load_config(args.config)
    except (OSError, ValueError) as e:
        raise SystemExit(f"--config: {e}") from e


def _as_of(args: argparse.Namespace) -> date:
    if not args.as_of:
        return date.today()
    try:
        return parse_date(args.as_of)
    except ValueError as e:
        raise SystemExit(f"--as-of: {e}") from e


def cmd_analyze(args: argparse.Namespace) -> int:
    config = _config(args)
    as_of = _as_of(args)
    logger.debug("analyzing %s as of %s", args.ledger, as_of)
    snap = JsonLedgerStore(args.ledger).load()
    report = run_engine(
        snap.trips,
        snap.expenses,
        snap.personal,
        snap.debts,
        as_of=as_of,
        config=config,
        debt_budget=args.debt_budget,
    )
    out = asdict(report)
    out["snapshot"]["break_even"]["unbounded"] = report.snapshot.break_even.unbounded
    if args.trips:
        out["trips"] = [asdict(trip_breakdown(t, snap.expenses, config=config)) for t in snap.trips]
    _print_json(out)
    return 0


def cmd_monthly(args: argparse.Namespace) -> int:
    config = _config(args)
    snap = JsonLedgerStore(args.ledger).load()
    rows = build_monthly_report(snap.trips, snap.expenses, as_of=_as_of(args), config=config)
    if args.out_csv:
        _mkdirp(args.out_csv)
        monthly_report_frame(rows).to_csv(args.out_csv, index=False)
        _print_json({"out_csv": args.out_csv, "n_rows": len(rows)})
        return 0
    _print_json({"months": [asdict(r) for r in rows]})
    return 0


def cmd_payoff(args: argparse.Namespace) -> int:
    config = _config(args)
    snap = JsonLedgerStore(args.ledger).load()
    budget = args.budget if args.budget is not None else debt_service_amount(list(snap.personal))
    if budget <= 0:
        raise SystemExit("provide --budget > 0 or a 'Debt' personal expense")
    plan = schedule_payoff(
        snap.debts,
        monthly_budget=budget,
        as_of=_as_of(args),
        days_per_month=config.days_per_month,
    )
    _print_json(asdict(plan))
    return 0


def cmd_fuel_cost(args: argparse.Namespace) -> int:
    model = RegionalFuelModel(_config(args))
    try:
        cost = model.fuel_cost(args.miles, args.origin, args.dest)
    except ValueError as e:
        raise SystemExit(str(e)) from e
    _print_json(
        {
            "miles": args.miles,
            "origin": args.origin,
            "dest": args.dest,
            "price_per_gallon": model.route_price(args.origin, args.dest),
            "fuel_cost": cost,
        }
    )
    return 0


def cmd_import_manifest(args: argparse.Namespace) -> int:
    config = _config(args)
    store = JsonLedgerStore(args.ledger)
    with open(args.manifest, encoding="utf-8") as f:
        text = f.read()
    result = import_manifest(text, fuel_model=RegionalFuelModel(config), today=_as_of(args))
    if result.trips:
        snap = store.load()
        store.save(
            replace(
                snap,
                trips=snap.trips + result.trips,
                expenses=snap.expenses + result.expenses,
            )
        )
    _print_json({"imported": len(result.trips), "skipped": result.skipped, "ledger": args.ledger})
    return 0


def cmd_pay_debt(args: argparse.Namespace) -> int:
    store = JsonLedgerStore(args.ledger)
    snap = store.load()
    try:
        debts = apply_payment(snap.debts, args.debt_id, args.amount)
    except (KeyError, ValueError) as e:
        raise SystemExit(str(e)) from e
    store.save(replace(snap, debts=tuple(debts)))
    remaining = next((d.amount for d in debts if d.id == args.debt_id), 0.0)
    _print_json({"debt_id": args.debt_id, "paid": args.amount, "remaining": remaining, "cleared": remaining == 0.0})
    return 0


def _add_common(p: argparse.ArgumentParser, *, ledger: bool = True) -> None:
    if ledger:
        p.add_argument("--ledger", required=True, help="Ledger JSON file.")
    p.add_argument("--config", default=None, help="JSON file with EngineConfig overrides.")
    p.add_argument("--as-of", default=None, help="Evaluation date (YYYY-MM-DD); defaults to today.")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="trucking-ledger")
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = p.add_subparsers(dest="cmd", required=True)

    a = sub.add_parser("analyze", help="Profitability, tax, break-even, monthly P&L and debt payoff plan.")
    _add_common(a)
    a.add_argument("--debt-budget", type=float, default=None, help="Monthly debt budget (default: 'Debt' line).")
    a.add_argument("--trips", action="store_true", default=False, help="Include per-trip breakdowns.")
    a.set_defaults(func=cmd_analyze)

    m = sub.add_parser("monthly", help="Monthly profit & loss rows.")
    _add_common(m)
    m.add_argument("--out-csv", default=None)
    m.set_defaults(func=cmd_monthly)

    po = sub.add_parser("payoff", help="Avalanche debt payoff schedule.")
    _add_common(po)
    po.add_argument("--budget", type=float, default=None, help="Monthly payment budget.")
    po.set_defaults(func=cmd_payoff)

    fc = sub.add_parser("fuel-cost", help="Fuel cost for a distance between pricing regions.")
    _add_common(fc, ledger=False)
    fc.add_argument("--miles", type=float, required=True)
    fc.add_argument("--origin", default=None)
    fc.add_argument("--dest", default=None)
    fc.set_defaults(func=cmd_fuel_cost)

    im = sub.add_parser("import-manifest", help="Append trips from a date,origin,dest,miles,pay,broker CSV.")
    _add_common(im)
    im.add_argument("--manifest", required=True)
    im.set_defaults(func=cmd_import_manifest)

    pd_ = sub.add_parser("pay-debt", help="Record a payment against a debt.")
    _add_common(pd_)
    pd_.add_argument("--debt-id", required=True)
    pd_.add_argument("--amount", type=float, required=True)
    pd_.set_defaults(func=cmd_pay_debt)

    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
