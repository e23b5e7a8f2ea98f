from __future__ import annotations

from pathlib import Path
from typing import Any

from drugstats.cli import run_policy, run_report, run_validate
from drugstats.config import load_config, resolve_config
from drugstats.models import ReportEntry
from drugstats.pipeline.policy import PolicyStore


def find_repo_root(start: Path | None = None) -> Path | None:
    """Search upward for a repo root containing both src/ and examples/."""
    start_path = (start or Path.cwd()).resolve()
    for parent in [start_path, *start_path.parents]:
        if (parent / "src").is_dir() and (parent / "examples").is_dir():
            return parent
    return None


def get_example_snapshot(name: str = "vanilla") -> Path:
    """Return an example host snapshot path if available."""
    repo_root = find_repo_root() or find_repo_root(Path(__file__).parent)
    if repo_root:
        candidate = repo_root / "examples" / "data" / f"{name}.yaml"
        if candidate.exists():
            return candidate
    raise FileNotFoundError(f"Could not locate example snapshot '{name}'.")


def report_drugs(
    data_path: Path | str,
    drug_ids: list[str] | None = None,
    *,
    config_path: Path | str | None = None,
    show: bool = True,
) -> dict[str, list[ReportEntry]]:
    """Build (and optionally print) sorted reports for the given drugs, or all of them."""
    return run_report(_resolve_path(data_path), _config(config_path), drug_ids=drug_ids, show=show)


def generate_policy(
    data_path: Path | str,
    out_path: Path | str,
    *,
    config_path: Path | str | None = None,
    store_path: Path | str | None = None,
) -> PolicyStore:
    """Derive the automatic dose policy and save it as YAML."""
    maker = run_policy(
        _resolve_path(data_path),
        _config(config_path),
        _resolve_path(out_path),
        store_path=_resolve_path(store_path) if store_path else None,
    )
    return maker.store


def run_pipeline(
    data_path: Path | str,
    out_dir: Path | str,
    *,
    config_path: Path | str | None = None,
    policy: bool = True,
) -> None:
    """Validate a snapshot, write every drug report, and optionally the policy.

    Args:
        data_path: Host snapshot (YAML or JSON).
        out_dir: Directory receiving validation/, reports/ and policy.yaml.
        config_path: Optional YAML config merged over the defaults.
        policy: When True, also derives the automatic dose policy.
    """
    data_path = _resolve_path(data_path)
    out_dir = _resolve_path(out_dir)
    config = _config(config_path)
    print(f"Analyzing {data_path} -> {out_dir}")
    run_validate(data_path, config, out_dir)
    run_report(data_path, config, out_dir=out_dir, show=False)
    if policy:
        run_policy(data_path, config, out_dir / "policy.yaml")


def _config(config_path: Path | str | None) -> dict[str, Any]:
    if config_path is None:
        return resolve_config()
    return load_config(_resolve_path(config_path)).data


def _resolve_path(path: Path | str) -> Path:
    return Path(path).expanduser().resolve()
