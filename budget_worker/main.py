import argparse
from collections.abc import Sequence

from budget_worker.config.settings import Settings
from budget_worker.database.connection import close_pool, init_pool
from budget_worker.database.repositories.document_repository import DocumentRepository
from budget_worker.database.schema import apply_schema
from budget_worker.logging.logger import Log
from budget_worker.pipeline.orchestrator import build_orchestrator
from budget_worker.worker.worker import Worker


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="budget-worker",
        description="Financial statement processing worker",
    )
    commands = parser.add_subparsers(dest="command")
    commands.add_parser("worker", help="poll for pending documents and process them (default)")
    run = commands.add_parser("run", help="process a single pending document and exit")
    run.add_argument("document_id", type=int)
    commands.add_parser("init-db", help="create database tables if missing")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: initialize pool -> build dependencies -> dispatch command."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        if args.command == "init-db":
            apply_schema()
            return 0

        doc_repo = DocumentRepository()
        orchestrator = build_orchestrator(settings, doc_repo=doc_repo)
        if args.command == "run":
            outcome = orchestrator.run(args.document_id)
            Log.info(f"Document {outcome.document_id}: {outcome.status}")
            return 0 if outcome.succeeded else 1

        Worker(doc_repo, orchestrator, settings).run()
        return 0
    finally:
        close_pool()


if __name__ == "__main__":
    raise SystemExit(main())
