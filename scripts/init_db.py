"""
Database Initialization Script

    python scripts/init_db.py          create tables and the full-text search function
    python scripts/init_db.py drop     drop all tables
    python scripts/init_db.py seed     insert the sample answered questions
"""

import sys
from pathlib import Path
from sqlalchemy import create_engine

from lawlens.config.database import Base, SessionLocal
from lawlens.config.settings import settings
from lawlens.models import Question
from lawlens.services.demo_data import mock_questions
from lawlens.core.logging import logger

FULLTEXT_SQL = Path(__file__).resolve().parent / "sql" / "search_questions_fulltext.sql"


def init_database():
    """Create all tables; on PostgreSQL also install the full-text search function"""
    try:
        engine = create_engine(settings.DATABASE_URL)
        Base.metadata.create_all(bind=engine)

        if engine.dialect.name == "postgresql":
            with engine.begin() as conn:
                conn.exec_driver_sql(FULLTEXT_SQL.read_text(encoding="utf-8"))
            logger.info("Full-text search function installed")

        logger.info("Database initialized")
        return True
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        return False


def drop_database():
    """Drop all tables"""
    try:
        engine = create_engine(settings.DATABASE_URL)
        Base.metadata.drop_all(bind=engine)
        logger.info("Database dropped")
        return True
    except Exception as e:
        logger.error(f"Dropping the database failed: {e}")
        return False


def seed_data():
    """Insert the sample answered questions"""
    db = SessionLocal()
    try:
        for sample in mock_questions():
            db.add(Question(
                question_text=sample.question_text,
                answer_text=sample.answer_text,
                source_url=sample.source_url,
                is_public=True,
                status="answered",
            ))
        db.commit()
        logger.info("Sample questions inserted")
        return True
    except Exception as e:
        db.rollback()
        logger.error(f"Seeding failed: {e}")
        return False
    finally:
        db.close()


if __name__ == "__main__":
    command = sys.argv[1] if len(sys.argv) > 1 else "init"
    if command == "drop":
        ok = drop_database()
    elif command == "seed":
        ok = seed_data()
    else:
        ok = init_database()
    sys.exit(0 if ok else 1)
