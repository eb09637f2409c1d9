"""
Single entrypoint to verify both charts end-to-end on the bundled sample
data, with run_name='smoke'. Does not run on import.
"""

from __future__ import annotations

from pathlib import Path

from bandlabel.core.config import (
    DEFAULT_DISTRICTS_PATH,
    DEFAULT_POPULATION_PATH,
    DEFAULT_PORTFOLIO_PATH,
    DEFAULT_STATES_PATH,
)
from bandlabel.core.pipeline import layout_streamgraph, run_density, write_streamgraph
from bandlabel.core.portfolio import load_portfolio
from bandlabel.core.reporting import ensure_report_dir, write_run_metadata_json


def run_smoke(repo_root: Path, output_dir: str | None = None) -> Path:
    """Render both charts into <output_dir>/smoke/ and return that directory."""
    report_dir = ensure_report_dir(repo_root, "smoke", output_dir=output_dir)

    table = load_portfolio(DEFAULT_PORTFOLIO_PATH, repo_root=repo_root)
    layout = layout_streamgraph(table)
    inputs = {"portfolio": DEFAULT_PORTFOLIO_PATH}
    write_streamgraph(layout, report_dir, inputs, debug=True)
    write_run_metadata_json(report_dir, "smoke", "streamgraph", inputs)

    run_density(
        DEFAULT_POPULATION_PATH,
        DEFAULT_DISTRICTS_PATH,
        DEFAULT_STATES_PATH,
        report_dir,
        repo_root=repo_root,
    )
    return report_dir


def main() -> None:
    print(run_smoke(Path.cwd().resolve()))


if __name__ == "__main__":
    main()
