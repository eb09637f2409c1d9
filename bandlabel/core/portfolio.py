"""
Load monthly portfolio snapshots and pivot them into a ticker x month table
for the holdings stream graph.

Input is a JSON list of {"date": "Jan-2017", "values": [[name, ticker, _, _, amount], ...]}.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path

import numpy as np

from bandlabel.core.config import (
    PORTFOLIO_AMOUNT_INDEX,
    PORTFOLIO_DATE_FORMAT,
    PORTFOLIO_NAME_INDEX,
    PORTFOLIO_TICKER_INDEX,
)
from bandlabel.core.io import read_json
from bandlabel.core.types import PortfolioTable

logger = logging.getLogger(__name__)

_NAME_NOISE = re.compile(r"ltd|corpn?|inc|[*.]|\(.*$", re.IGNORECASE)


class PortfolioFormatError(ValueError):
    """Portfolio JSON does not have the expected shape."""


def clean_label(name: str) -> str:
    """Company name without legal suffixes, dots, asterisks or parenthesised tails."""
    return _NAME_NOISE.sub("", name).strip()


def parse_amount(raw: str | float | int) -> float:
    """'1,23,456.50' or '12 345' -> float. Numbers pass through."""
    if isinstance(raw, (int, float)):
        return float(raw)
    return float(str(raw).replace(" ", "").replace(",", ""))


def parse_snapshots(records: object) -> list[tuple[datetime, list[list]]]:
    """Validate raw JSON and return (date, rows) pairs sorted by date."""
    if not isinstance(records, list):
        raise PortfolioFormatError("Portfolio data must be a JSON list of monthly snapshots")
    out: list[tuple[datetime, list[list]]] = []
    for i, rec in enumerate(records):
        if not isinstance(rec, dict) or "date" not in rec or "values" not in rec:
            raise PortfolioFormatError(f"Snapshot {i}: expected object with 'date' and 'values'")
        try:
            date = datetime.strptime(str(rec["date"]).strip(), PORTFOLIO_DATE_FORMAT)
        except ValueError as e:
            raise PortfolioFormatError(f"Snapshot {i}: bad date {rec['date']!r}") from e
        rows = rec["values"]
        if not isinstance(rows, list):
            raise PortfolioFormatError(f"Snapshot {i}: 'values' must be a list")
        for j, row in enumerate(rows):
            if not isinstance(row, (list, tuple)) or len(row) <= PORTFOLIO_AMOUNT_INDEX:
                raise PortfolioFormatError(f"Snapshot {i}, row {j}: expected at least {PORTFOLIO_AMOUNT_INDEX + 1} columns")
        out.append((date, [list(r) for r in rows]))
    out.sort(key=lambda t: t[0])
    return out


def build_table(snapshots: list[tuple[datetime, list[list]]]) -> PortfolioTable:
    """
    Pivot snapshots: tickers in first-seen order, 0 where a month lacks a ticker.
    Labels come from the last snapshot naming the ticker; volume is the integer
    part of the total amount held across months.
    """
    tickers: list[str] = []
    seen: set[str] = set()
    for _, rows in snapshots:
        for row in rows:
            t = str(row[PORTFOLIO_TICKER_INDEX])
            if t not in seen:
                seen.add(t)
                tickers.append(t)

    index = {t: i for i, t in enumerate(tickers)}
    values = np.zeros((len(tickers), len(snapshots)), dtype=float)
    labels: dict[str, str] = {}
    for j, (_, rows) in enumerate(snapshots):
        for row in rows:
            t = str(row[PORTFOLIO_TICKER_INDEX])
            try:
                amount = parse_amount(row[PORTFOLIO_AMOUNT_INDEX])
            except ValueError:
                logger.warning("Unparseable amount %r for %s; using 0", row[PORTFOLIO_AMOUNT_INDEX], t)
                amount = 0.0
            values[index[t], j] = amount
            labels[t] = clean_label(str(row[PORTFOLIO_NAME_INDEX]))

    volumes = {t: int(values[index[t]].sum()) for t in tickers}
    return PortfolioTable(
        dates=[d for d, _ in snapshots],
        tickers=tickers,
        values=values,
        labels=labels,
        volumes=volumes,
    )


def volume_ranks(table: PortfolioTable) -> dict[str, int]:
    """Rank of each ticker's volume among all volumes, largest first (ties share a rank)."""
    ordered = sorted(table.volumes.values(), reverse=True)
    return {t: ordered.index(v) for t, v in table.volumes.items()}


def sorted_view(table: PortfolioTable) -> tuple[list[str], np.ndarray]:
    """Tickers sorted alphabetically with matching value rows (stack order)."""
    keys = sorted(table.tickers)
    rows = np.vstack([table.series(k) for k in keys]) if keys else np.zeros((0, len(table.dates)))
    return keys, rows


def load_portfolio(path: str | Path, repo_root: Path | None = None) -> PortfolioTable:
    """
    Read portfolio JSON and return the pivoted table.
    Raises FileNotFoundError if path is missing, PortfolioFormatError if malformed.
    """
    records = read_json(path, repo_root, kind="Portfolio")
    table = build_table(parse_snapshots(records))
    logger.info("Loaded %d months x %d tickers from %s", len(table.dates), len(table.tickers), path)
    return table
