from __future__ import annotations

import os
from contextlib import contextmanager

import psycopg


def get_database_url() -> str:
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")
    return url


@contextmanager
def db_conn() -> psycopg.Connection:
    """Yield a connection to the record store.

    The ``person`` table is the whole store: one row per record, the same
    columns the People sheet carried (see ``sql/schema.sql``).
    """
    with psycopg.connect(get_database_url()) as conn:
        yield conn
