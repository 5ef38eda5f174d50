"""
Database initialization script: creates tables and seeds the city catalog.
"""
from app.db.session import SessionLocal, init_db
from app.db.seed import seed_catalog

if __name__ == "__main__":
    print("Initializing database...")
    init_db()
    db = SessionLocal()
    try:
        added = seed_catalog(db)
    finally:
        db.close()
    print(f"Database initialized successfully! ({added} cities added)")
