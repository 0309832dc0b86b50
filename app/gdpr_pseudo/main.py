# ------------------------------------------------------------------------------------------------ #
# Copyright (c) 2026 Carmenda. All rights reserved.                                                #
# This program is distributed under the terms of the GNU General Public License: GPL-3.0-or-later  #
# ------------------------------------------------------------------------------------------------ #

"""Pseudonymize tabular data and work with Finnish personal identity codes.

Description:
    The `table` command pseudonymizes columns of a CSV file. Each column is hashed,
    encrypted or replaced by randomized IDs. Keys and original to pseudonym mappings
    can be saved to a password-protected mapping file and restored in a later run,
    so the same input values get the same pseudonyms across datasets.
    The `pid-generate` and `pid-validate` commands build and check personal identity codes.
Disclaimer:
    Pseudonymized data is still personal data under the GDPR. Mapping files and
    their passwords must be stored separately from the pseudonymized output.
"""

from __future__ import annotations

import argparse
import os

from rich.console import Console

from gdpr_pseudo.data_processor import process_data
from gdpr_pseudo.exceptions import PseudonymizationError
from gdpr_pseudo.pid import generate_pid, parse_pid, validate_pid
from gdpr_pseudo.utils.logger import LogConfig, setup_logging
from gdpr_pseudo.utils.terminal import log_block, print_preview


def parse_cli_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for CLI usage.

    Returns:
        Parsed arguments

    """
    parser = argparse.ArgumentParser(
        description='Pseudonymize tabular data and handle personal identity codes.',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        '--log_level',
        default=None,
        help='Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL or INFO.',
    )
    parser.add_argument(
        '--log_dir',
        default=None,
        help='Directory for log files. Defaults to LOG_DIR, console only when unset.',
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    table = subparsers.add_parser(
        'table',
        help='Pseudonymize columns of a CSV file.',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    table.add_argument('--input_file', required=True, help='Path of the input CSV file.')
    table.add_argument(
        '--columns',
        required=True,
        help="""
             Column methods as a single string with comma separated column=method format,
             e.g. "name=hash, email=encrypt, client_id=randomize".
             """,
    )
    table.add_argument('--output_folder', default='data/output', help='Folder for the pseudonymized file.')
    table.add_argument(
        '--mapping_file',
        default=None,
        help="""
             Password-protected mapping file. Restored before processing when it exists and
             saved after processing, together with its .keys file.
             """,
    )
    table.add_argument(
        '--password',
        default=os.environ.get('MAPPING_PASSWORD'),
        help='Password of the mapping file. Defaults to the MAPPING_PASSWORD environment variable.',
    )
    table.add_argument('--seed', type=int, default=None, help='Seed for reproducible keys (testing only).')
    table.add_argument('--store_mappings', action='store_true', help='Record mappings without saving them.')

    generate = subparsers.add_parser('pid-generate', help='Generate a personal identity code.')
    generate.add_argument('--birth_date', required=True, help='Birth date as YYYY-MM-DD.')
    generate.add_argument('--individual_number', required=True, help='Three digit individual number.')
    generate.add_argument('--century', default='-', help='Century separator, chosen from the year when "-".')

    validate = subparsers.add_parser('pid-validate', help='Validate a personal identity code.')
    validate.add_argument('pin', help='Personal identity code to validate.')

    return parser.parse_args(argv)


def _run_table(args: argparse.Namespace, console: Console) -> int:
    logger = setup_logging(LogConfig.from_env(level=args.log_level, log_dir=args.log_dir))

    result = process_data(
        input_file=args.input_file,
        columns=args.columns,
        output_folder=args.output_folder,
        mapping_file=args.mapping_file,
        password=args.password,
        seed=args.seed,
        store_mappings=args.store_mappings,
        logger=logger,
    )

    print_preview(result.preview, title='Pseudonymized preview', console=console)
    log_block(
        'Pseudonymization',
        {
            'Rows': result.row_count,
            'Output file': result.output_file or 'not written',
            'Mapping file': result.mapping_file or 'not saved',
        },
        console=console,
    )
    return 0 if result.output_file else 1


def _run_pid_generate(args: argparse.Namespace, console: Console) -> int:
    pin = generate_pid(args.birth_date, args.individual_number, args.century)
    log_block('Personal identity code', {'Code': pin}, console=console, style='green')
    return 0


def _run_pid_validate(args: argparse.Namespace, console: Console) -> int:
    if not validate_pid(args.pin):
        log_block('Personal identity code', {'Code': args.pin, 'Valid': 'no'}, console=console, style='red')
        return 1

    record = parse_pid(args.pin)
    log_block(
        'Personal identity code',
        {
            'Code': args.pin,
            'Valid': 'yes',
            'Birth date': record.birth_date.isoformat(),
            'Individual number': record.individual_number,
        },
        console=console,
        style='green',
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Parse command-line arguments and run the selected command.

    Commands:
      table: Pseudonymize columns of a CSV file
      pid-generate: Generate a personal identity code
      pid-validate: Validate a personal identity code (exit status 1 when invalid)
    """
    args = parse_cli_arguments(argv)
    console = Console()

    commands = {
        'table': _run_table,
        'pid-generate': _run_pid_generate,
        'pid-validate': _run_pid_validate,
    }

    try:
        return commands[args.command](args, console)
    except PseudonymizationError as error:
        console.print(f'[bold red]Error:[/bold red] {error}')
        return 2


if __name__ == '__main__':
    raise SystemExit(main())
