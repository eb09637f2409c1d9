#!/usr/bin/env python3
"""
Generate synthetic datasets for exercising the charts at larger scale.

Outputs (under data/generated/):
  portfolio.json      monthly holdings, tickers entering and leaving
  population.json     census rows for a grid of districts
  districts.geojson   grid of rectangular districts (lon/lat)
  states.geojson      districts merged per state
"""

from __future__ import annotations

import argparse
import json
import random
from datetime import date
from pathlib import Path

from shapely.geometry import box, mapping
from shapely.ops import unary_union

OUTPUT_DIR = Path(__file__).parent.parent / "data" / "generated"

COMPANIES = [
    ("HDFC Bank Ltd.", "HDFCBANK"),
    ("Infosys Ltd.", "INFY"),
    ("Reliance Industries Ltd.", "RELIANCE"),
    ("ITC Ltd.", "ITC"),
    ("Larsen & Toubro Ltd.", "LT"),
    ("Tata Consultancy Services Ltd.", "TCS"),
    ("Axis Bank Ltd.", "AXISBANK"),
    ("Maruti Suzuki India Ltd.", "MARUTI"),
    ("Power Grid Corpn. of India Ltd.", "POWERGRID"),
    ("Bharti Airtel Ltd. (Partly Paid)", "BHARTIARTL"),
    ("Sun Pharmaceutical Inds. Ltd.*", "SUNPHARMA"),
    ("Cipla Ltd.", "CIPLA"),
]


def _format_amount(v: float) -> str:
    return f"{v:,.2f}"


def generate_portfolio(n_months: int, seed: int) -> list[dict]:
    """Random walk per holding; each company is held over one contiguous window."""
    rng = random.Random(seed)
    windows = {}
    for _, ticker in COMPANIES:
        start = rng.randrange(0, max(1, n_months // 2))
        end = rng.randrange(start + 1, n_months + 1)
        windows[ticker] = (start, end)
    level = {t: rng.uniform(500, 5000) for _, t in COMPANIES}

    out = []
    for m in range(n_months):
        d = date(2016 + m // 12, m % 12 + 1, 1)
        rows = []
        for name, ticker in COMPANIES:
            start, end = windows[ticker]
            if not (start <= m < end):
                continue
            level[ticker] = max(50.0, level[ticker] * rng.uniform(0.85, 1.2))
            pct = rng.uniform(0.5, 9.0)
            rows.append([name, ticker, "Equity", f"{pct:.2f}", _format_amount(level[ticker])])
        out.append({"date": d.strftime("%b-%Y"), "values": rows})
    return out


def generate_districts(nx: int, ny: int, seed: int) -> tuple[dict, dict, list[dict]]:
    """Grid of districts over roughly the Indian subcontinent; 4 states as quadrants."""
    rng = random.Random(seed)
    lon0, lat0, lon1, lat1 = 70.0, 10.0, 88.0, 30.0
    dx = (lon1 - lon0) / nx
    dy = (lat1 - lat0) / ny
    features = []
    population = []
    by_state: dict[str, list] = {}
    code = 1
    for i in range(nx):
        for j in range(ny):
            cell = box(lon0 + i * dx, lat0 + j * dy, lon0 + (i + 1) * dx, lat0 + (j + 1) * dy)
            state = f"State {1 + (i * 2) // nx + 2 * ((j * 2) // ny)}"
            name = f"District {code}"
            features.append({
                "type": "Feature",
                "properties": {"censuscode": code, "DISTRICT": name, "ST_NM": state},
                "geometry": mapping(cell),
            })
            by_state.setdefault(state, []).append(cell)
            if rng.random() > 0.05:
                area = rng.randint(500, 12000)
                population.append({
                    "District": f"{code:03d}",
                    "Total Population Person": str(int(area * 10 ** rng.uniform(1.5, 4.5))),
                    "Area": str(area),
                })
            code += 1
    states = [
        {"type": "Feature", "properties": {"ST_NM": s}, "geometry": mapping(unary_union(cells))}
        for s, cells in sorted(by_state.items())
    ]
    return (
        {"type": "FeatureCollection", "features": features},
        {"type": "FeatureCollection", "features": states},
        population,
    )


def _save(name: str, data: object) -> None:
    path = OUTPUT_DIR / name
    path.write_text(json.dumps(data, indent=1), encoding="utf-8")
    print(f"Created: {path}")


def main() -> None:
    p = argparse.ArgumentParser(description="Generate synthetic chart datasets.")
    p.add_argument("--months", type=int, default=24)
    p.add_argument("--grid", type=int, default=8, help="Districts per side")
    p.add_argument("--seed", type=int, default=42)
    args = p.parse_args()

    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    _save("portfolio.json", generate_portfolio(args.months, args.seed))
    districts, states, population = generate_districts(args.grid, args.grid, args.seed)
    _save("districts.geojson", districts)
    _save("states.geojson", states)
    _save("population.json", population)


if __name__ == "__main__":
    main()
