# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Finnish personal identity code (PID) utilities.

A PID is an 11-character string ``DDMMYY`` + century separator + ``III`` + control character.
The control character is the remainder of the 9-digit numeral ``DDMMYYIII`` divided by 31,
used as an index into a fixed alphabet. This module provides:

    - compute_control_char: Calculate the control character for a birth date and individual number
    - parse_pid: Split a PID into its parts and check shape and calendar date
    - validate_pid: Check a PID, including its control character
    - generate_pid: Build a valid PID from a birth date and individual number
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import NamedTuple

from gdpr_pseudo.exceptions import InvalidInputError

CONTROL_CHARS = '0123456789ABCDEFHJKLMNPRSTUVWXY'
DEFAULT_SEPARATOR = '-'

CENTURY_PREFIXES = {
    '-': 19,
    '+': 18,
    'A': 20,
    'B': 20,
    'C': 20,
    'D': 20,
    'E': 20,
    'F': 20,
    'Y': 19,
    'X': 19,
    'W': 19,
    'V': 19,
    'U': 19,
}

PID_PATTERN = re.compile(r'[0-9]{6}[-+ABCDEFYXWVU][0-9]{3}[0-9A-Z]')


class PidRecord(NamedTuple):
    """Parts of a personal identity code."""

    birth_date: date
    individual_number: str
    century_separator: str
    control_char: str


def _parse_birth_date(birth_date: date | str) -> date:
    """Return a date from a date object or a 'YYYY-MM-DD' string."""
    if isinstance(birth_date, datetime):
        return birth_date.date()
    if isinstance(birth_date, date):
        return birth_date

    if isinstance(birth_date, str):
        try:
            return datetime.strptime(birth_date.strip(), '%Y-%m-%d').date()  # noqa: DTZ007
        except ValueError as error:
            msg = f'Invalid birth date format "{birth_date}". Expected "YYYY-MM-DD"'
            raise InvalidInputError(msg) from error

    msg = 'Birth date must be a date or a string in format "YYYY-MM-DD"'
    raise InvalidInputError(msg)


def _clean_individual_number(individual_number: str | int) -> str:
    """Strip non-digits and check that exactly three digits remain."""
    if individual_number is None:
        msg = 'Individual number must not be None'
        raise InvalidInputError(msg)

    digits = re.sub(r'[^0-9]', '', str(individual_number))

    if len(digits) != 3:  # noqa: PLR2004
        msg = 'Individual number must contain exactly 3 digits'
        raise InvalidInputError(msg)

    return digits


def compute_control_char(birth_date: date | str, individual_number: str | int) -> str:
    """Calculate the control character for a birth date and individual number."""
    parsed_date = _parse_birth_date(birth_date)
    digits = _clean_individual_number(individual_number)

    numeral = int(parsed_date.strftime('%d%m%y') + digits)
    return CONTROL_CHARS[numeral % 31]


def parse_pid(pin: str) -> PidRecord:
    """Split a PID into its parts.

    Checks the shape and that the birth date exists in the calendar. The control
    character is returned as given and is not verified here.

    Raises:
        InvalidInputError: If the shape or the date is invalid.
    """
    if not isinstance(pin, str) or not PID_PATTERN.fullmatch(pin):
        msg = f'Malformed personal identity code: {pin!r}'
        raise InvalidInputError(msg)

    separator = pin[6]
    century = CENTURY_PREFIXES.get(separator, 19)

    try:
        birth_date = date(century * 100 + int(pin[4:6]), int(pin[2:4]), int(pin[0:2]))
    except ValueError as error:
        msg = f'Personal identity code has an invalid birth date: {pin[0:6]}'
        raise InvalidInputError(msg) from error

    return PidRecord(
        birth_date=birth_date,
        individual_number=pin[7:10],
        century_separator=separator,
        control_char=pin[10],
    )


def validate_pid(pin: str) -> bool:
    """Return True when the PID is well formed and its control character matches."""
    try:
        record = parse_pid(pin)
    except InvalidInputError:
        return False

    return compute_control_char(record.birth_date, record.individual_number) == record.control_char


def generate_pid(
    birth_date: date | str,
    individual_number: str | int,
    century_separator: str = DEFAULT_SEPARATOR,
) -> str:
    """Build a PID from a birth date and individual number.

    With the default separator the century is chosen from the birth year:
    '+' before 1900, 'A' from 2000 onwards and '-' in between. An explicit
    separator is used as given.
    """
    parsed_date = _parse_birth_date(birth_date)
    digits = _clean_individual_number(individual_number)

    if century_separator not in CENTURY_PREFIXES:
        valid = ', '.join(CENTURY_PREFIXES)
        msg = f'Invalid century separator "{century_separator}". Must be one of: {valid}'
        raise InvalidInputError(msg)

    if century_separator == DEFAULT_SEPARATOR:
        if parsed_date.year < 1900:  # noqa: PLR2004
            century_separator = '+'
        elif parsed_date.year >= 2000:  # noqa: PLR2004
            century_separator = 'A'

    control_char = compute_control_char(parsed_date, digits)
    return f'{parsed_date.strftime("%d%m%y")}{century_separator}{digits}{control_char}'
