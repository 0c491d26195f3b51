"""Load a CSV export of the People sheet into the ``person`` table."""

from __future__ import annotations

import argparse
import csv
import json
import os
from pathlib import Path
from typing import Any, Iterable

import psycopg
from psycopg.types.json import Jsonb

from famtree.people import Person


def _iter_csv(path: Path) -> Iterable[dict[str, Any]]:
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        for row in csv.DictReader(f):
            if not any((v or "").strip() for v in row.values()):
                continue
            yield row


def _apply_schema(conn: psycopg.Connection, schema_sql_path: Path) -> None:
    sql = schema_sql_path.read_text(encoding="utf-8")
    with conn.cursor() as cur:
        cur.execute(sql)


def load_people(csv_path: Path, schema_sql_path: Path, database_url: str, truncate: bool) -> dict[str, int]:
    csv_path = csv_path.resolve()
    if not csv_path.exists():
        raise SystemExit(f"CSV not found: {csv_path}")

    people: list[Person] = []
    skipped = 0
    for rec in _iter_csv(csv_path):
        try:
            people.append(Person.from_record(rec))
        except ValueError:
            skipped += 1

    with psycopg.connect(database_url) as conn:
        _apply_schema(conn, schema_sql_path)
        if truncate:
            conn.execute("TRUNCATE TABLE person")

        with conn.cursor() as cur:
            cur.executemany(
                """
                INSERT INTO person (id, parent_id, spouse_id, full_name, nick_name, gender,
                                    birth_date, bio, photo_url, status, history)
                VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON CONFLICT (id) DO UPDATE SET
                  parent_id = EXCLUDED.parent_id,
                  spouse_id = EXCLUDED.spouse_id,
                  full_name = EXCLUDED.full_name,
                  nick_name = EXCLUDED.nick_name,
                  gender = EXCLUDED.gender,
                  birth_date = EXCLUDED.birth_date,
                  bio = EXCLUDED.bio,
                  photo_url = EXCLUDED.photo_url,
                  status = EXCLUDED.status,
                  history = EXCLUDED.history;
                """.strip(),
                [
                    (
                        p.id,
                        p.parent_id,
                        p.spouse_id,
                        p.full_name,
                        p.nick_name,
                        p.gender,
                        p.birth_date,
                        p.bio,
                        p.photo_url,
                        p.status,
                        Jsonb([h.to_record() for h in p.history]),
                    )
                    for p in people
                ],
            )
        conn.commit()

    return {"person": len(people), "skipped": skipped}


def main() -> int:
    parser = argparse.ArgumentParser(description="Load a People sheet CSV export into Postgres")
    parser.add_argument("--csv", required=True, help="CSV with a header row (id, parentId, spouseId, fullName, ...)")
    parser.add_argument(
        "--database-url",
        default=os.environ.get("DATABASE_URL") or "",
        help="Postgres URL (or set DATABASE_URL env var)",
    )
    parser.add_argument(
        "--schema-sql",
        default=str(Path(__file__).resolve().parents[1] / "sql" / "schema.sql"),
        help="Path to schema.sql",
    )
    parser.add_argument("--truncate", action="store_true", help="Empty the person table before load")

    args = parser.parse_args()
    if not args.database_url:
        raise SystemExit("Missing --database-url (or set DATABASE_URL)")

    counts = load_people(
        csv_path=Path(args.csv),
        schema_sql_path=Path(args.schema_sql),
        database_url=args.database_url,
        truncate=args.truncate,
    )

    print(json.dumps({"loaded": counts}, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
