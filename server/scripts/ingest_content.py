"""
Ingest apologetics content into the ChromaDB vector store.

Markdown articles are split on ``### `` headings; verse JSON files are
loaded one verse per chunk.

Usage:
    python scripts/ingest_content.py data/apologetics-content.md data/bible-verses.json
    python scripts/ingest_content.py --input data/
"""

import argparse
import sys
from pathlib import Path

from apologist.core.config import settings
from apologist.services.ingest import ingest_paths
from apologist.services.vector_store import get_vector_store


def collect_paths(inputs, directory):
    paths = [Path(p) for p in inputs]
    if directory:
        root = Path(directory)
        paths.extend(sorted(root.glob("**/*.md")))
        paths.extend(sorted(root.glob("**/*.json")))
    return paths


def main():
    parser = argparse.ArgumentParser(description="Ingest apologetics content")
    parser.add_argument("files", nargs="*", help="Markdown or verse JSON files")
    parser.add_argument("--input", help="Directory to scan for .md and .json files")
    args = parser.parse_args()

    paths = collect_paths(args.files, args.input)
    if not paths:
        parser.print_usage()
        sys.exit(1)

    missing = [p for p in paths if not p.exists()]
    if missing:
        for p in missing:
            print(f"Error: File not found: {p}")
        sys.exit(1)

    print(f"Ingesting {len(paths)} file(s) into collection '{settings.COLLECTION_NAME}'")
    vector_store = get_vector_store()
    total = ingest_paths(paths, vector_store)
    print(f"Ingestion complete! {total} chunks stored.")


if __name__ == "__main__":
    main()
