# core/data_loader.py
from pathlib import Path
from typing import Union

import pandas as pd
from loguru import logger

from modules.claims.aggregator import EmptyInputError

CSV_SUFFIXES = {'.csv'}
EXCEL_SUFFIXES = {'.xlsx'}

def load_claims_file(path: Union[str, Path]) -> pd.DataFrame:
    """Read the first sheet of a claims export with every cell kept as text."""
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix in CSV_SUFFIXES:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    elif suffix in EXCEL_SUFFIXES:
        df = pd.read_excel(path, sheet_name=0, dtype=str).fillna('')
    else:
        raise ValueError(f"Unsupported claims file type: {path.suffix or path.name}")

    if df.empty:
        raise EmptyInputError("No data found in the file")

    # Exports often pad header cells
    df.columns = [str(c).strip() for c in df.columns]
    logger.info(f"Loaded claims file {path.name}: {len(df):,} rows, {len(df.columns)} columns")
    return df
