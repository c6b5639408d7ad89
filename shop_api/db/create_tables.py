"""Create (or with --reset, rebuild) the categories/users schema."""
from __future__ import annotations

import argparse
import logging

from sqlalchemy.exc import SQLAlchemyError

from .session import Base, get_engine
from . import models  # noqa: F401  # ensure models are imported for metadata

logger = logging.getLogger(__name__)


def create_all(reset: bool = False) -> None:
    engine = get_engine()
    if reset:
        logger.warning("Dropping tables: %s", ", ".join(Base.metadata.tables))
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--reset", action="store_true", help="drop existing tables first")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)
    try:
        create_all(reset=args.reset)
    except SQLAlchemyError as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
    logger.info("Database tables created successfully.")


if __name__ == "__main__":
    main()
