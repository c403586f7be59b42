#!/usr/bin/env python3
"""
Command line access to the storage bucket.

Usage:
    python scripts/storage_cli.py upload reports/2024 "./Q1 Summary.pdf"
    python scripts/storage_cli.py sign https://bucket.s3.us-east-1.amazonaws.com/reports/2024/q1_summary.pdf
    python scripts/storage_cli.py list reports/
    python scripts/storage_cli.py delete https://bucket.s3.us-east-1.amazonaws.com/reports/2024/q1_summary.pdf

Configuration is read from the environment (and .env), see config/storage_config.py.
"""

import argparse
import shutil
import sys
from datetime import timedelta
from pathlib import Path
from typing import List, Optional

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from config.logging_config import setup_console_logging
from models.storage_models import SignedUrlOptions
from services.storage_service import StorageService, create_storage_service
from storage.errors import StorageError


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage files in the storage bucket.")
    sub = parser.add_subparsers(dest="command", required=True)

    upload = sub.add_parser("upload", help="Upload a local file")
    upload.add_argument("path", help="Key prefix to upload under, e.g. reports/2024")
    upload.add_argument("file", help="Local file to upload")
    upload.add_argument("--name", default=None, help="File name to store (default: local name)")

    sign = sub.add_parser("sign", help="Print a presigned download URL")
    sign.add_argument("url", help="Hosted URL of the object")
    sign.add_argument("--expires", type=int, default=20, help="Expiry in minutes (default: 20)")
    sign.add_argument("--content-type", default=None, help="Response Content-Type override")
    sign.add_argument(
        "--content-disposition", default=None, help="Response Content-Disposition override"
    )

    meta = sub.add_parser("meta", help="Show object metadata")
    meta.add_argument("url", help="Hosted URL of the object")

    listing = sub.add_parser("list", help="List hosted URLs under a prefix")
    listing.add_argument("prefix", nargs="?", default="", help="Key prefix (default: whole bucket)")

    download = sub.add_parser("download", help="Download an object to a local file")
    download.add_argument("url", help="Hosted URL of the object")
    download.add_argument("dest", help="Local destination path")

    delete = sub.add_parser("delete", help="Delete an object and wait for confirmation")
    delete.add_argument("url", help="Hosted URL of the object")

    return parser.parse_args(argv)


def run_command(service: StorageService, args: argparse.Namespace) -> int:
    if args.command == "upload":
        local_path = Path(args.file)
        if not local_path.is_file():
            print(f"File not found: {local_path}", file=sys.stderr)
            return 1
        name = args.name or local_path.name
        print(service.upload(args.path, name, local_path.read_bytes()))

    elif args.command == "sign":
        options = SignedUrlOptions(
            content_type=args.content_type,
            content_disposition=args.content_disposition,
            expires_in=timedelta(minutes=args.expires),
        )
        print(service.get_signed_url(args.url, options))

    elif args.command == "meta":
        metadata = service.get_metadata(args.url)
        print(metadata.model_dump_json(indent=2))

    elif args.command == "list":
        for url in service.list_objects(args.prefix):
            print(url)

    elif args.command == "download":
        dest = Path(args.dest)
        dest.parent.mkdir(parents=True, exist_ok=True)
        stream = service.get_file_stream(args.url)
        try:
            with dest.open("wb") as fh:
                shutil.copyfileobj(stream, fh)
        finally:
            stream.close()
        print(dest)

    elif args.command == "delete":
        service.delete_object(args.url)
        print(f"Deleted {args.url}")

    return 0


def main(argv: Optional[List[str]] = None, service: Optional[StorageService] = None) -> int:
    args = parse_args(argv)
    load_dotenv()
    setup_console_logging()

    try:
        if service is None:
            service = create_storage_service()
        return run_command(service, args)
    except (StorageError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
