# src/propmatch/pipelines/core.py

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd
from loguru import logger

from propmatch.adapters.config import config
from propmatch.adapters.preference_store import (
    FileKeyValueStore,
    PreferenceStore,
    default_preference_store,
)
from propmatch.adapters.sql_repo import SqlCatalogRepository
from propmatch.adapters.storage import (
    load_configurations,
    load_properties,
    scored_to_df,
    write_df,
)
from propmatch.services.matching import search


def _store(prefs_path: str | None = None) -> PreferenceStore:
    if prefs_path is None:
        return default_preference_store()
    return PreferenceStore(FileKeyValueStore(prefs_path), config.PREFERENCES_KEY)


# ---------------------------
# 1. CATALOG IMPORT
# ---------------------------

def import_catalog(
    properties_path: str,
    configurations_path: str | None = None,
    db_uri: str | None = None,
) -> dict[str, int]:
    """
    Load catalog exports (CSV / Parquet / JSON) into the SQL catalog.
    """
    repo = SqlCatalogRepository(db_uri or config.DB_URI)

    props = load_properties(properties_path)
    n_props = repo.upsert_properties(props)
    logger.info("Imported properties", path=properties_path, count=n_props)

    n_cfgs = 0
    if configurations_path:
        cfgs = load_configurations(configurations_path)
        n_cfgs = repo.upsert_configurations(cfgs)
        logger.info("Imported configurations", path=configurations_path, count=n_cfgs)

    return {"properties": n_props, "configurations": n_cfgs}


# ---------------------------
# 2. SEARCH
# ---------------------------

def run_search(
    *,
    sort_by: str | None = None,
    limit: int | None = None,
    preferences: dict[str, Any] | None = None,
    prefs_path: str | None = None,
    db_uri: str | None = None,
    output: Path | None = None,
) -> pd.DataFrame:
    """
    Score and rank the stored catalog against the saved (or given)
    preferences. Writes a CSV/Parquet when `output` is set.
    """
    repo = SqlCatalogRepository(db_uri or config.DB_URI)
    prefs = _store(prefs_path).load(navigation_state=preferences)

    ranked = search(
        repo.list_properties(),
        repo.list_configurations(),
        prefs,
        sort_by=sort_by or config.DEFAULT_SORT,
        limit=limit,
    )
    df = scored_to_df(ranked)
    logger.info("Search complete", results=len(df), sort_by=sort_by or config.DEFAULT_SORT)

    if output is not None:
        write_df(df, str(output))
        logger.info("Wrote results", path=str(output))
    return df


# ---------------------------
# 3. PREFERENCES
# ---------------------------

def show_preferences(prefs_path: str | None = None) -> dict[str, Any]:
    return _store(prefs_path).load().to_storage()


def save_preferences(values: dict[str, Any], prefs_path: str | None = None) -> dict[str, Any]:
    """
    Merge `values` over the stored preferences and persist the result.
    """
    store = _store(prefs_path)
    merged = store.load().to_storage() | values
    saved = store.update(merged).to_storage()
    logger.info("Saved preferences", preferences=json.dumps(saved))
    return saved


def clear_preferences(prefs_path: str | None = None) -> dict[str, Any]:
    return _store(prefs_path).clear().to_storage()
