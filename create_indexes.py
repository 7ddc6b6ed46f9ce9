#!/usr/bin/env python3
"""
Script to rebuild the Whoosh knowledge index for the Bookly support backend.
"""

import sys

from bookly.app.config import Config
from bookly.data.database import SessionLocal, create_tables
from bookly.data.knowledge_index import KnowledgeIndex
from bookly.data.models import KnowledgeArticle


def main():
    """Index every knowledge article in the database."""
    index_dir = Config.WHOOSH_INDEX_PATH
    create_tables()
    db = SessionLocal()

    print(f"Creating Whoosh index in {index_dir}...")
    try:
        count = KnowledgeIndex(index_dir).rebuild(db.query(KnowledgeArticle).all())
        print(f"Whoosh index created successfully ({count} articles)")
    except Exception as e:
        print(f"Error creating Whoosh index: {e}")
        return False
    finally:
        db.close()

    return True


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
