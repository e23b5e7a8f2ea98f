from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from drugstats.config import load_config, resolve_config
from drugstats.context import AnalysisContext, build_context
from drugstats.models import DrugDefinition, ReportEntry
from drugstats.pipeline.builtin import host_drug_stats
from drugstats.pipeline.loader import load_snapshot
from drugstats.pipeline.policy import AutoPolicyMaker, load_policy_store, save_policy_store
from drugstats.pipeline.report import entry_to_dict, sort_entries, special_display_stats
from drugstats.pipeline.validation import SnapshotError, validate_snapshot
from drugstats.utils.io import read_structured, write_jsonl

console = Console()


def main() -> None:
    parser = argparse.ArgumentParser(prog="drugstats")
    subparsers = parser.add_subparsers(dest="command", required=True)

    report_parser = subparsers.add_parser("report")
    report_parser.add_argument("--data", required=True, type=Path)
    report_parser.add_argument("--config", type=Path)
    report_parser.add_argument("--drug", action="append", default=[])
    report_parser.add_argument("--out", type=Path)

    policy_parser = subparsers.add_parser("policy")
    policy_parser.add_argument("--data", required=True, type=Path)
    policy_parser.add_argument("--config", type=Path)
    policy_parser.add_argument("--store", type=Path)
    policy_parser.add_argument("--out", required=True, type=Path)

    validate_parser = subparsers.add_parser("validate")
    validate_parser.add_argument("--data", required=True, type=Path)
    validate_parser.add_argument("--config", type=Path)
    validate_parser.add_argument("--out", required=True, type=Path)

    all_parser = subparsers.add_parser("all")
    all_parser.add_argument("--data", required=True, type=Path)
    all_parser.add_argument("--config", type=Path)
    all_parser.add_argument("--out", required=True, type=Path)

    args = parser.parse_args()
    config = _config_data(args.config)

    try:
        if args.command == "report":
            run_report(args.data, config, drug_ids=args.drug, out_dir=args.out)
        elif args.command == "policy":
            run_policy(args.data, config, args.out, store_path=args.store)
        elif args.command == "validate":
            run_validate(args.data, config, args.out)
        elif args.command == "all":
            run_validate(args.data, config, args.out)
            run_report(args.data, config, out_dir=args.out, show=False)
            run_policy(args.data, config, args.out / "policy.yaml")
    except (SnapshotError, FileNotFoundError) as exc:
        console.print(f"[red]{exc}[/red]")
        if isinstance(exc, SnapshotError):
            for error in exc.errors:
                console.print(f"[red]  {error}[/red]")
        sys.exit(1)


def _config_data(config_path: Path | None) -> dict[str, Any]:
    if config_path is None:
        return resolve_config()
    return load_config(config_path).data


def _context(data_path: Path, config: dict[str, Any]) -> AnalysisContext:
    overdose_id = config.get("engine", {}).get("overdose_affliction", "DrugOverdose")
    database = load_snapshot(data_path, overdose_affliction=overdose_id)
    return build_context(database, config)


def drug_report(drug: DrugDefinition, ctx: AnalysisContext) -> list[ReportEntry]:
    entries = special_display_stats(host_drug_stats(drug, ctx), drug, ctx)
    return sort_entries(entries, ctx.settings.get("report", {}).get("category_order"))


def run_report(
    data_path: Path,
    config: dict[str, Any],
    *,
    drug_ids: list[str] | None = None,
    out_dir: Path | None = None,
    show: bool = True,
) -> dict[str, list[ReportEntry]]:
    ctx = _context(data_path, config)
    if drug_ids:
        unknown = [drug_id for drug_id in drug_ids if ctx.database.drug(drug_id) is None]
        if unknown:
            raise FileNotFoundError(f"Unknown drug id(s): {', '.join(unknown)}")
        drugs = [ctx.database.drugs[drug_id] for drug_id in drug_ids]
    else:
        drugs = list(ctx.database.drugs.values())

    progress = config.get("runtime", {}).get("progress", True) and not show
    reports: dict[str, list[ReportEntry]] = {}
    for drug in tqdm(drugs, desc="Building drug reports", disable=not progress):
        reports[drug.id] = drug_report(drug, ctx)
        if show:
            console.print(_report_table(drug, reports[drug.id], ctx))

    if out_dir is not None:
        rows = [entry_to_dict(entry, drug_id) for drug_id, entries in reports.items() for entry in entries]
        write_jsonl(out_dir / "reports" / "drugs.jsonl", rows)
        console.print(f"[green]Wrote {len(rows)} report entries for {len(reports)} drug(s) to {out_dir}[/green]")
    return reports


def run_policy(
    data_path: Path,
    config: dict[str, Any],
    out_path: Path,
    *,
    store_path: Path | None = None,
) -> AutoPolicyMaker:
    ctx = _context(data_path, config)
    label = ctx.policy.get("label", "Responsible (Auto)")
    store = load_policy_store(store_path, label) if store_path else None
    maker = AutoPolicyMaker(ctx, store)
    maker.finalize_init()
    save_policy_store(maker.store, out_path)
    console.print(f"[green]Saved policy to {out_path}[/green]")
    return maker


def run_validate(data_path: Path, config: dict[str, Any], out_dir: Path) -> dict[str, Any]:
    if not data_path.exists():
        raise FileNotFoundError(f"Snapshot not found at {data_path}.")
    overdose_id = config.get("engine", {}).get("overdose_affliction", "DrugOverdose")
    report = validate_snapshot(read_structured(data_path) or {}, out_dir, overdose_id)
    for warning in report["warnings"]:
        console.print(f"[yellow]{warning}[/yellow]")
    console.print(f"[green]Snapshot is valid ({report['warning_count']} warning(s)).[/green]")
    return report


def _report_table(drug: DrugDefinition, entries: list[ReportEntry], ctx: AnalysisContext) -> Table:
    table = Table(title=drug.label.capitalize(), show_lines=False)
    table.add_column("Category", style="cyan")
    table.add_column("Stat")
    table.add_column("Value", style="bold")
    for entry in entries:
        table.add_row(ctx.translate(f"StatCategory_{entry.category}"), entry.label, entry.value)
    if not entries:
        table.add_row("-", "-", ctx.translate("None"))
    return table


if __name__ == "__main__":
    main()
