import json
from argparse import ArgumentParser
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

from directory_api.db_connection import SQLiteDocumentStore, StoreError
from directory_api.logging_config import init_logging

# -----------------------------
#  export parsing
# -----------------------------

def documents_from_export(export: Mapping[str, Any]) -> Dict[str, List[Tuple[str, Dict[str, Any]]]]:
    """
    Accepts either shape produced by collection exports:

        {"colleges": [{"id": "abc", ...}, ...]}
        {"colleges": {"abc": {...}, ...}}
    """
    collections: Dict[str, List[Tuple[str, Dict[str, Any]]]] = {}

    for collection, documents in export.items():
        rows: List[Tuple[str, Dict[str, Any]]] = []

        if isinstance(documents, Mapping):
            rows = [(str(doc_id), dict(data)) for doc_id, data in documents.items()]
        elif isinstance(documents, list):
            for position, data in enumerate(documents):
                data = dict(data)
                doc_id = data.pop("id", None)
                if doc_id is None:
                    raise ValueError(f"{collection}[{position}] has no id")
                rows.append((str(doc_id), data))
        else:
            raise ValueError(f"{collection} must be a list or an object of documents")

        collections[collection] = rows

    return collections

# -----------------------------
#  entry point
# -----------------------------

def main() -> None:
    parser = ArgumentParser(
        description="Load exported document collections into the SQLite store"
    )

    parser.add_argument(
        "export_file",
        type=Path,
        help="JSON export keyed by collection name"
    )

    parser.add_argument(
        "db_file",
        type=Path,
        nargs="?",
        default=None,
        help="Path to the SQLite database (defaults to .db extension)"
    )

    parser.add_argument(
        "--recreate",
        action="store_true",
        help="Remove every stored document before loading"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Verbose logging"
    )

    args = parser.parse_args()
    init_logging(debug=args.debug)

    if not args.export_file.exists():
        print(f"Error, export file not found: {args.export_file}")
        raise SystemExit(1)

    db_file = args.db_file or args.export_file.with_suffix(".db")
    store = SQLiteDocumentStore(db_file)
    store.create_schema()

    with args.export_file.open(encoding="utf-8") as f:
        collections = documents_from_export(json.load(f))

    try:
        if args.recreate:
            store.clear()
        for collection, rows in collections.items():
            store.put_documents(collection, rows)
            print(f"{collection}: {len(rows)} documents")
    except StoreError as e:
        print(f"Error, could not write to {db_file}: {e}")
        raise SystemExit(1)

    print("Done!")

if __name__ == "__main__":
    main()
