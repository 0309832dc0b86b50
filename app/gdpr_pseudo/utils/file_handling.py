# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""File utilities for loading and saving tabular data."""

from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING

import polars as pl
from charset_normalizer import from_bytes

from .logger import get_logger

if TYPE_CHECKING:
    import logging

SEPARATORS = [',', ';', '\t', '|']


def strip_bom(text: str) -> str:
    """Remove a leading byte order mark."""
    return text.removeprefix('\ufeff')


def _detect_encoding(data_sample: bytes, logger: logging.Logger | None = None) -> str:
    """Detect the encoding of a byte sample, defaulting to UTF-8."""
    logger = get_logger(logger)

    if not data_sample:
        return 'utf-8'

    try:
        best = from_bytes(data_sample).best()
        encoding = best.encoding if best and getattr(best, 'encoding', None) else 'utf-8'
    except (LookupError, ValueError, TypeError):
        logger.debug('Encoding detection failed, using UTF-8')
        encoding = 'utf-8'

    # ASCII is a subset of UTF-8
    if encoding in ('ascii', 'utf_8', 'utf_8_sig'):
        encoding = 'utf-8'

    return encoding


def _detect_separator(header: str) -> str:
    """Pick the most frequent separator candidate in a header line, defaulting to a comma."""
    scores = {separator: header.count(separator) for separator in SEPARATORS}
    separator = max(scores, key=scores.get)

    if scores[separator] == 0:
        return ','

    return separator


def check_file(input_file: str | Path, logger: logging.Logger | None = None) -> tuple[str, str]:
    """Determine the encoding and separator of a CSV file."""
    logger = get_logger(logger)
    file_path = Path(input_file)

    with file_path.open('rb') as rawdata:
        data_sample = rawdata.read(10240)

    encoding = _detect_encoding(data_sample, logger)

    try:
        header = strip_bom(data_sample.decode(encoding, errors='ignore').splitlines()[0]) if data_sample else ''
    except LookupError:
        logger.warning('File cannot be decoded with encoding "%s"', encoding)
        header = ''

    if not header:
        logger.error('File is empty or has no header.')

    separator = _detect_separator(header)

    logger.info('Checked %s: Encoding=%s, separator=%r', file_path.name, encoding, separator)
    return encoding, separator


def load_data_file(input_file_path: str | Path, logger: logging.Logger | None = None) -> pl.DataFrame | None:
    """Check data file, log and return as a Polars DataFrame with all columns as strings."""
    logger = get_logger(logger)
    file_path = Path(input_file_path)

    if not file_path.is_file():
        logger.error('Input file not found: %s', file_path)
        return None

    input_extension = file_path.suffix
    file_size = file_path.stat().st_size
    logger.info('%s file of size: %s', input_extension, file_size)

    if input_extension != '.csv':
        logger.error('Unsupported input extension: %s', input_extension)
        return None

    encoding, separator = check_file(file_path, logger)

    # Re-encode to UTF-8 since Polars only reads UTF-8
    text = strip_bom(file_path.read_bytes().decode(encoding, errors='replace'))
    df = pl.read_csv(io.BytesIO(text.encode('utf-8')), separator=separator, infer_schema=False)

    # Log columns schema
    schema_str = 'root\n' + '\n'.join([f' |-- {name}: {dtype}' for name, dtype in df.schema.items()])
    logger.debug('%s \n', schema_str)
    logger.info('Row count: %s rows', df.height)

    return df


def save_datafile(
    df: pl.DataFrame,
    filename: str,
    output_folder: str | Path,
    logger: logging.Logger | None = None,
) -> Path | None:
    """Save processed DataFrame to file in the specified output folder."""
    logger = get_logger(logger)
    target_dir = Path(output_folder)
    file_path = target_dir / f'{Path(filename).stem}_pseudonymized.csv'

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        df.write_csv(file_path)
    except OSError:
        logger.warning('Cannot write %s to "%s".', filename, target_dir)
        return None

    logger.info('Saved output to "%s"', file_path)
    return file_path
