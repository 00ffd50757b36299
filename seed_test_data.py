"""
Seed common adjustment types into an empty database.
Run:  python seed_test_data.py
"""
from screentime.infrastructure.db.session import create_db_engine, create_session_factory
from screentime.infrastructure.records.repository import RecordRepository

ADJUSTMENT_TYPES = [
    ("Cleaned room", 30),
    ("Homework done without reminders", 20),
    ("Helped with dinner", 15),
    ("Read a book for an hour", 30),
    ("Screen time past bedtime", -30),
    ("Rude behaviour", -15),
]

engine = create_db_engine()
db = create_session_factory(engine)()
repo = RecordRepository(db)

try:
    existing = {t.description for t in repo.all_adjustment_types()}
    created = 0
    for description, minutes in ADJUSTMENT_TYPES:
        if description in existing:
            continue
        repo.create_adjustment_type(description, minutes)
        created += 1
    print(f"Created {created} adjustment type(s), {len(existing)} already present")
finally:
    db.close()
    engine.dispose()
