"""Upload a document to the ingestion API and wait for the result."""

import argparse
import sys
from pathlib import Path

from catalog_ingest.client.client import IngestionClient, StatusSnapshot
from catalog_ingest.client.exceptions import ClientTimeout, PollingError
from catalog_ingest.client.poller import SessionPoller
from catalog_ingest.config.settings import Settings
from catalog_ingest.sessions.models import SessionStatus


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog-ingest-submit",
        description="Upload a menu document and wait until its products are created.",
    )
    parser.add_argument("file", type=Path, help="PDF, image, XLSX or CSV document")
    parser.add_argument("--store-id", required=True)
    parser.add_argument(
        "--api-url", default=f"http://localhost:{settings.api_port}", help="ingestion API base URL"
    )
    parser.add_argument(
        "--no-components",
        action="store_true",
        help="do not link options to inventory components",
    )
    parser.add_argument("--interval", type=float, default=settings.poll_interval_seconds)
    parser.add_argument("--max-attempts", type=int, default=settings.poll_max_attempts)
    return parser


def _print_progress(snapshot: StatusSnapshot) -> None:
    print(f"[{snapshot.progress:3d}%] {snapshot.current_phase}", flush=True)


def main(argv: list[str] | None = None) -> int:
    settings = Settings()
    args = build_parser(settings).parse_args(argv)
    if not args.file.is_file():
        print(f"error: {args.file} is not a file", file=sys.stderr)
        return 2

    with IngestionClient(args.api_url) as client:
        try:
            session_id = client.submit(
                args.file, args.store_id, extract_components=not args.no_components
            )
            print(f"Session {session_id} created")
            poller = SessionPoller(
                client, interval_seconds=args.interval, max_attempts=args.max_attempts
            )
            snapshot = poller.wait(session_id, on_status=_print_progress)
        except ClientTimeout as exc:
            print(f"{exc}. It is still running; check it again later.", file=sys.stderr)
            return 3
        except PollingError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1

    if snapshot.status == SessionStatus.COMPLETED:
        print(
            f"Done: {snapshot.products_created} products, "
            f"{snapshot.components_created} new components, "
            f"{snapshot.categories_created} new categories"
        )
        return 0
    reason = snapshot.failure_reason
    print(
        f"Failed: {reason.message if reason else 'unknown error'}",
        file=sys.stderr,
    )
    return 1


if __name__ == "__main__":
    sys.exit(main())
