"""
Command-line interface for the CSV + ZIP bulk product import.
"""
import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from product_admin.clients.admin_api_client import AdminApiClient
from product_admin.clients.product_client import ProductClient
from product_admin.models.files import UploadedFile
from product_admin.services.import_session import ImportSession
from product_admin.services.notifier import Notifier
from product_admin.utils.correlation_id import operation_scope

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ROW_ERRORS = 2


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args (Optional[List[str]]): Command-line arguments (uses sys.argv if None)

    Returns:
        argparse.Namespace: Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Import products from a CSV file and ZIP archives of product images"
    )
    parser.add_argument("csv", type=Path, help="CSV file with one row per product color and size")
    parser.add_argument(
        "--zip",
        dest="zips",
        type=Path,
        action="append",
        required=True,
        help="ZIP archive with the product images (repeat for several archives)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview and report row errors without saving",
    )
    parser.add_argument("--api-url", type=str, help="Admin API base URL (default: API_BASE_URL)")
    parser.add_argument("--token", type=str, help="Admin access token (default: ADMIN_ACCESS_TOKEN)")
    return parser.parse_args(args)


def read_upload(path: Path, content_type: str) -> UploadedFile:
    return UploadedFile(filename=path.name, content_type=content_type, content=path.read_bytes())


def print_notices(notifier: Notifier) -> None:
    for notice in notifier.notices:
        line = notice.title if not notice.message else f"{notice.title}: {notice.message}"
        stream = sys.stderr if notice.level == "error" else sys.stdout
        print(line, file=stream)


async def run_import(
    csv_path: Path,
    zip_paths: List[Path],
    dry_run: bool = False,
    api: Optional[AdminApiClient] = None,
    notifier: Optional[Notifier] = None,
) -> int:
    """
    Preview an import and save it when every row is valid.

    Returns:
        int: Exit code
    """
    with operation_scope():
        return await _preview_and_save(csv_path, zip_paths, dry_run, api, notifier or Notifier())


async def _preview_and_save(csv_path, zip_paths, dry_run, api, notifier):
    session = ImportSession(product_client=ProductClient(api), notifier=notifier)

    if not session.select_file(read_upload(csv_path, "text/csv")).ok:
        return EXIT_FAILED
    for zip_path in zip_paths:
        if not session.add_zip(read_upload(zip_path, "application/zip")).ok:
            return EXIT_FAILED

    if not (await session.preview()).ok:
        return EXIT_FAILED

    print(f"Previewed {session.row_count} rows in {len(session.groups)} products")
    error_rows = [(index, group, row) for index, group, row in session.rows() if row.is_error]
    for index, group, row in error_rows:
        title = row.product_title or group.product_title
        print(f"  row {index}: {title} / {row.color} / {row.size}: {row.error_message}", file=sys.stderr)
    if error_rows:
        return EXIT_ROW_ERRORS
    if dry_run:
        return EXIT_OK

    return EXIT_OK if (await session.save()).ok else EXIT_FAILED


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        args (Optional[List[str]]): Command-line arguments (uses sys.argv if None)

    Returns:
        int: Exit code (0 for success, non-zero for errors)
    """
    parsed_args = parse_args(args)

    missing = [path for path in [parsed_args.csv, *parsed_args.zips] if not path.is_file()]
    if missing:
        print(f"Error: file not found: {', '.join(str(path) for path in missing)}", file=sys.stderr)
        return EXIT_FAILED

    api = AdminApiClient(base_url=parsed_args.api_url, access_token=parsed_args.token)
    notifier = Notifier()
    exit_code = asyncio.run(
        run_import(parsed_args.csv, parsed_args.zips, parsed_args.dry_run, api=api, notifier=notifier)
    )
    print_notices(notifier)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
