"""
Shared fixtures: an in-memory SQLite music store and a query set bound to it.
"""

from typing import Any, Dict, List

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from reporting import ReportingQuerySet


SCHEMA = [
    """CREATE TABLE employee (
        employee_id INTEGER PRIMARY KEY,
        last_name TEXT NOT NULL,
        first_name TEXT NOT NULL,
        title TEXT,
        reports_to INTEGER REFERENCES employee (employee_id),
        levels TEXT
    )""",
    """CREATE TABLE customer (
        customer_id INTEGER PRIMARY KEY,
        first_name TEXT NOT NULL,
        last_name TEXT NOT NULL,
        email TEXT NOT NULL,
        country TEXT,
        support_rep_id INTEGER REFERENCES employee (employee_id)
    )""",
    """CREATE TABLE invoice (
        invoice_id INTEGER PRIMARY KEY,
        customer_id INTEGER NOT NULL REFERENCES customer (customer_id),
        billing_city TEXT,
        billing_country TEXT,
        total REAL NOT NULL
    )""",
    """CREATE TABLE artist (
        artist_id INTEGER PRIMARY KEY,
        name TEXT
    )""",
    """CREATE TABLE album (
        album_id INTEGER PRIMARY KEY,
        title TEXT NOT NULL,
        artist_id INTEGER NOT NULL REFERENCES artist (artist_id)
    )""",
    """CREATE TABLE genre (
        genre_id INTEGER PRIMARY KEY,
        name TEXT
    )""",
    """CREATE TABLE track (
        track_id INTEGER PRIMARY KEY,
        name TEXT NOT NULL,
        album_id INTEGER REFERENCES album (album_id),
        genre_id INTEGER REFERENCES genre (genre_id),
        milliseconds INTEGER NOT NULL
    )""",
    """CREATE TABLE invoice_line (
        invoice_line_id INTEGER PRIMARY KEY,
        invoice_id INTEGER NOT NULL REFERENCES invoice (invoice_id),
        track_id INTEGER NOT NULL REFERENCES track (track_id),
        unit_price REAL NOT NULL,
        quantity INTEGER NOT NULL
    )""",
]


def insert_rows(engine, table: str, rows: List[Dict[str, Any]]) -> None:
    if not rows:
        return
    columns = list(rows[0])
    statement = text(
        f"INSERT INTO {table} ({', '.join(columns)}) "
        f"VALUES ({', '.join(':' + c for c in columns)})"
    )
    with engine.begin() as conn:
        conn.execute(statement, rows)


def seed(engine, data: Dict[str, List[Dict[str, Any]]]) -> None:
    # Parents before children
    for table in ("employee", "customer", "invoice", "artist", "album", "genre", "track", "invoice_line"):
        insert_rows(engine, table, data.get(table, []))


def customer(customer_id, first_name, last_name, country):
    return {
        "customer_id": customer_id,
        "first_name": first_name,
        "last_name": last_name,
        "email": f"{first_name.lower()}@example.com",
        "country": country,
    }


def invoice(invoice_id, customer_id, city, country, total):
    return {
        "invoice_id": invoice_id,
        "customer_id": customer_id,
        "billing_city": city,
        "billing_country": country,
        "total": total,
    }


def line(invoice_line_id, invoice_id, track_id, unit_price, quantity=1):
    return {
        "invoice_line_id": invoice_line_id,
        "invoice_id": invoice_id,
        "track_id": track_id,
        "unit_price": unit_price,
        "quantity": quantity,
    }


def track(track_id, name, album_id, genre_id, milliseconds):
    return {
        "track_id": track_id,
        "name": name,
        "album_id": album_id,
        "genre_id": genre_id,
        "milliseconds": milliseconds,
    }


# Genre 4 is a lowercase 'rock' so exact, case-sensitive matching is exercised.
# Ties: Brazil has two top genres, Germany has two top spenders.
MUSIC_STORE = {
    "employee": [
        {"employee_id": 1, "last_name": "Adams", "first_name": "Andrew", "title": "General Manager", "reports_to": None, "levels": "L6"},
        {"employee_id": 2, "last_name": "Edwards", "first_name": "Nancy", "title": "Sales Manager", "reports_to": 1, "levels": "L4"},
        {"employee_id": 3, "last_name": "Madan", "first_name": "Mohan", "title": "Senior General Manager", "reports_to": None, "levels": "L7"},
        {"employee_id": 4, "last_name": "Peacock", "first_name": "Jane", "title": "Sales Support Agent", "reports_to": 2, "levels": "L1"},
    ],
    "customer": [
        customer(1, "Luis", "Goncalves", "Brazil"),
        customer(2, "Leonie", "Kohler", "Germany"),
        customer(3, "Hannah", "Schneider", "Germany"),
        customer(4, "Frank", "Harris", "USA"),
        customer(5, "Jack", "Smith", "USA"),
    ],
    "invoice": [
        invoice(1, 1, "Sao Paulo", "Brazil", 3.0),
        invoice(2, 2, "Berlin", "Germany", 4.0),
        invoice(3, 3, "Stuttgart", "Germany", 4.0),
        invoice(4, 4, "Chicago", "USA", 3.0),
        invoice(5, 5, "Boston", "USA", 6.0),
        invoice(6, 4, "Chicago", "USA", 1.0),
    ],
    "artist": [
        {"artist_id": 1, "name": "AC/DC"},
        {"artist_id": 2, "name": "Miles Davis"},
        {"artist_id": 3, "name": "Metallica"},
        {"artist_id": 4, "name": "Led Zeppelin"},
    ],
    "album": [
        {"album_id": 1, "title": "Back in Black", "artist_id": 1},
        {"album_id": 2, "title": "Kind of Blue", "artist_id": 2},
        {"album_id": 3, "title": "Master of Puppets", "artist_id": 3},
        {"album_id": 4, "title": "IV", "artist_id": 4},
    ],
    "genre": [
        {"genre_id": 1, "name": "Rock"},
        {"genre_id": 2, "name": "Jazz"},
        {"genre_id": 3, "name": "Metal"},
        {"genre_id": 4, "name": "rock"},
    ],
    "track": [
        track(1, "Hells Bells", 1, 1, 300000),
        track(2, "Shoot to Thrill", 1, 1, 320000),
        track(3, "Back in Black", 1, 1, 250000),
        track(4, "So What", 2, 2, 540000),
        track(5, "Blue in Green", 2, 2, 330000),
        track(6, "Battery", 3, 3, 310000),
        track(7, "Black Dog", 4, 1, 290000),
        track(8, "Four Sticks", 4, 4, 200000),
    ],
    "invoice_line": [
        line(1, 1, 1, 1.0),
        line(2, 1, 4, 2.0),
        line(3, 2, 2, 1.0),
        line(4, 2, 3, 1.0),
        line(5, 2, 6, 2.0),
        line(6, 3, 5, 2.0),
        line(7, 3, 8, 2.0),
        line(8, 4, 1, 1.0),
        line(9, 4, 7, 2.0),
        line(10, 5, 4, 2.0),
        line(11, 5, 5, 2.0),
        line(12, 5, 6, 2.0),
        line(13, 6, 2, 1.0),
    ],
}


@pytest.fixture
def bare_engine():
    """In-memory SQLite engine with no tables"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def empty_store(bare_engine):
    """Music store schema with no rows"""
    with bare_engine.begin() as conn:
        for statement in SCHEMA:
            conn.execute(text(statement))
    return bare_engine


@pytest.fixture
def music_store(empty_store):
    """Music store seeded with the MUSIC_STORE dataset"""
    seed(empty_store, MUSIC_STORE)
    return empty_store


@pytest.fixture
def query_set(music_store):
    return ReportingQuerySet(music_store)
