from pathlib import Path
from typing import Any

import pandas as pd

from propmatch.domain.property import Property, PropertyConfiguration


def read_df(path: str) -> pd.DataFrame:
    if path.endswith(".parquet"):
        return pd.read_parquet(path)
    if path.endswith(".json"):
        return pd.read_json(path)
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def write_df(df: pd.DataFrame, path: str):
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    if path.endswith(".parquet"):
        df.to_parquet(path, index=False)
    else:
        df.to_csv(path, index=False)


def _records(df: pd.DataFrame) -> list[dict[str, Any]]:
    # NaN/empty cells become None so optional fields take their defaults
    clean = df.astype(object).where(pd.notna(df), None)
    out = []
    for rec in clean.to_dict(orient="records"):
        out.append({k: (None if v == "" else v) for k, v in rec.items()})
    return out


def _opt_int(v: Any) -> int | None:
    if v is None:
        return None
    return int(float(v))


def load_properties(path: str) -> list[Property]:
    """
    Catalog export -> Property list. Tags may be a comma separated column.
    Accepts camelCase or snake_case headers.
    """
    out: list[Property] = []
    for rec in _records(read_df(path)):
        rec = {k: v for k, v in rec.items() if v is not None}
        out.append(Property.model_validate(rec))
    return out


def load_configurations(path: str) -> list[PropertyConfiguration]:
    out: list[PropertyConfiguration] = []
    for rec in _records(read_df(path)):
        rec = {k: v for k, v in rec.items() if v is not None}
        for key in ("builtUpArea", "built_up_area", "plotSize", "plot_size"):
            if key in rec:
                rec[key] = _opt_int(rec[key])
        out.append(PropertyConfiguration.model_validate(rec))
    return out


def scored_to_df(scored: list) -> pd.DataFrame:
    rows = []
    for s in scored:
        rows.append(
            {
                "id": s.property.id,
                "name": s.property.name,
                "type": s.property.type,
                "zone": s.property.zone,
                "area": s.property.area,
                "match_score": s.match_score,
                "price": s.price_display,
                "configurations": ", ".join(c.configuration for c in s.configurations),
                **{f"pts_{k}": v for k, v in s.breakdown.items()},
            }
        )
    return pd.DataFrame(rows)
