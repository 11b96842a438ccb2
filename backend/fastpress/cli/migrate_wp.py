"""WordPress XML export to FastPress migration tool.

Usage:
    fastpress-migrate-wp export.xml --dry-run                # Parse and show counts
    fastpress-migrate-wp export.xml --output bundle.json     # Also save parsed JSON
    fastpress-migrate-wp export.xml --token SESSION_ID       # Upload to the API
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx

from fastpress.schemas.wp_import import ImportBundle
from fastpress.wxr import WXRParseError, parse_wxr

DEFAULT_ENDPOINT = "http://localhost:8000/api/v1/migrate/wp"
UPLOAD_TIMEOUT = 300.0

log = logging.getLogger("fastpress.migrate_wp")


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


class UploadError(Exception):
    """Raised when the migration endpoint rejects the bundle."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Upload failed ({status_code}): {body}")
        self.status_code = status_code
        self.body = body


def read_export(path: Path) -> ImportBundle:
    log.info(f"Reading WordPress XML export: {path}")
    bundle = parse_wxr(path.read_bytes())
    counts = bundle.counts()
    log.info(
        f"Parsed: {counts['posts']} posts, {counts['pages']} pages, "
        f"{counts['comments']} comments, {counts['media']} media"
    )
    return bundle


def upload(
    bundle: ImportBundle,
    endpoint: str,
    token: str | None = None,
    client: httpx.Client | None = None,
) -> dict[str, Any]:
    """POST the bundle to the migration endpoint and return the JSON reply."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    payload = {"data": bundle.model_dump(mode="json")}

    owns_client = client is None
    http = client or httpx.Client(timeout=UPLOAD_TIMEOUT)
    try:
        response = http.post(endpoint, json=payload, headers=headers)
    finally:
        if owns_client:
            http.close()

    if response.status_code >= 400:
        raise UploadError(response.status_code, response.text)
    try:
        result = response.json()
    except ValueError as e:
        raise UploadError(response.status_code, f"Invalid JSON reply: {response.text}") from e
    if not isinstance(result, dict):
        raise UploadError(response.status_code, f"Unexpected reply: {response.text}")
    return result


def print_counts(counts: dict[str, Any]) -> None:
    if not counts:
        return
    width = max(len(name) for name in counts)
    for name, value in counts.items():
        if isinstance(value, dict):
            value = ", ".join(f"{k}={v}" for k, v in value.items())
        print(f"  {name.ljust(width)}  {value}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fastpress-migrate-wp",
        description="WordPress XML export to FastPress migration tool",
    )
    parser.add_argument("xml_file", type=Path, help="Path to WordPress XML export file")
    parser.add_argument(
        "--endpoint", default=DEFAULT_ENDPOINT, help="FastPress migration endpoint"
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Parse XML but don't upload to FastPress"
    )
    parser.add_argument("--output", type=Path, help="Save parsed JSON to file")
    parser.add_argument("--token", help="Administrator session token")
    parser.add_argument("--verbose", action="store_true", help="Debug-level logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        bundle = read_export(args.xml_file)

        if args.output:
            args.output.write_text(
                json.dumps(bundle.model_dump(mode="json"), indent=2), encoding="utf-8"
            )
            log.info(f"Saved parsed data to {args.output}")

        if args.dry_run:
            print("Dry run completed - no data uploaded")
            print_counts(bundle.counts())
            return 0

        result = upload(bundle, args.endpoint, args.token)
    except (OSError, WXRParseError, UploadError, httpx.HTTPError) as e:
        log.error(f"Migration failed: {e}")
        return 1

    print("Import completed")
    print_counts(result.get("summary", {}))
    return 0


if __name__ == "__main__":
    sys.exit(main())
