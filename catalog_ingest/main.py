from catalog_ingest.config.settings import Settings
from catalog_ingest.database.connection import close_pool, init_pool
from catalog_ingest.database.repositories.session_repository import SessionRepository
from catalog_ingest.logging.logger import Log
from catalog_ingest.processor.processor import build_processor
from catalog_ingest.worker.session_runner import SessionRunner
from catalog_ingest.worker.worker import Worker


def main() -> None:
    """Entry point: initialize pool -> build dependencies -> start worker loop."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        session_repo = SessionRepository()
        processor = build_processor(settings, session_repo)
        session_runner = SessionRunner(processor, session_repo)
        worker = Worker(session_repo, session_runner, settings)
        worker.run()
    finally:
        close_pool()


if __name__ == "__main__":
    main()
