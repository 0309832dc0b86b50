# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Data processing module for pseudonymizing data files.

This module provides functionality for:
    - Loading data from CSV files
    - Restoring keys and mappings from an earlier session
    - Pseudonymizing columns with hashing, encryption or randomized IDs
    - Writing processed data and encrypted mappings to output files
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from gdpr_pseudo.exceptions import InvalidInputError
from gdpr_pseudo.pseudonymizer import METHODS, Pseudonymizer
from gdpr_pseudo.utils.file_handling import load_data_file, save_datafile
from gdpr_pseudo.utils.logger import get_logger

if TYPE_CHECKING:
    import logging

    import polars as pl


@dataclass
class ProcessResult:
    """Outcome of processing one data file."""

    output_file: Path | None
    mapping_file: Path | None
    row_count: int
    preview: pl.DataFrame


def parse_column_methods(columns: str) -> dict[str, str]:
    """Convert a 'column=method, column=method' string into a dictionary."""
    column_methods = {}

    for item in columns.split(','):
        if not item.strip():
            continue

        if '=' not in item:
            msg = f'Column directive "{item.strip()}" must have the form column=method'
            raise InvalidInputError(msg)

        column, method = (part.strip() for part in item.split('=', 1))
        column_methods[column] = method

    if not column_methods:
        msg = f'No column directives given. Use column=method with methods: {", ".join(METHODS)}'
        raise InvalidInputError(msg)

    return column_methods


def _performance_metrics(start_time: float, df_rowcount: int, logger: logging.Logger) -> None:
    """Log performance metrics for the processing operation."""
    total_time = time.time() - start_time
    time_per_row = total_time / df_rowcount if df_rowcount > 0 else 0

    logger.info('Time passed with a total of %d rows', df_rowcount)
    logger.info('Total time: %.2f seconds (%.6f seconds per row)', total_time, time_per_row)


def process_data(  # noqa: PLR0913
    input_file: str | Path,
    columns: str | dict[str, str],
    output_folder: str | Path,
    mapping_file: str | Path | None = None,
    password: str | None = None,
    seed: int | None = None,
    store_mappings: bool = False,  # noqa: FBT001, FBT002
    logger: logging.Logger | None = None,
) -> ProcessResult:
    """Pseudonymize the columns of a CSV file and write the result.

    When a mapping file and password are given, keys and mappings of an earlier
    session are restored from it first, and the updated mappings are saved back to it.
    """
    logger = get_logger(logger)
    column_methods = parse_column_methods(columns) if isinstance(columns, str) else dict(columns)

    params_str = '\n'.join(f' |-- {column}={method}' for column, method in column_methods.items())
    logger.debug('\nColumn directives:\n%s\n', params_str)

    # ----------------------------- STEP 1: LOADING DATA ------------------------------ #

    df = load_data_file(input_file, logger)
    if df is None:
        msg = f'Cannot load input file: {input_file}'
        raise InvalidInputError(msg)

    # ---------------------------- STEP 2: RESTORING KEYS ----------------------------- #

    persist = mapping_file is not None and password is not None
    pseudonymizer = Pseudonymizer(seed=seed, store_mappings=store_mappings or persist, logger=logger)

    # Restore before any output is written, a failed restore raises
    if persist and Path(mapping_file).is_file():
        pseudonymizer.load_mappings(mapping_file, password)

    # -------------------------- STEP 3: DATA TRANSFORMATION -------------------------- #

    start_time = time.time()
    df = pseudonymizer.transform_table(df, column_methods)
    _performance_metrics(start_time, df.height, logger)

    # ----------------------------- STEP 4: WRITE OUTPUT ------------------------------ #

    output_file = save_datafile(df, Path(input_file).name, output_folder, logger)

    saved_mapping = None
    if persist:
        pseudonymizer.save_mappings(mapping_file, password)
        saved_mapping = Path(mapping_file)

    return ProcessResult(
        output_file=output_file,
        mapping_file=saved_mapping,
        row_count=df.height,
        preview=df.head(10),
    )
