"""
Seed the well guide catalog.

Creates the tables if needed (local setups without Alembic) and inserts or
refreshes one well_guides row per entry of WELL_GUIDE_SEED_DATA. Every seeded
guide must have a recurrence period in WELL_GUIDE_RECURRENCE_MONTHS.
"""
import sys
import os

# Add the parent directory to sys.path to allow imports from src
sys.path.append(os.path.join(os.path.dirname(__file__), '../src'))

from core.constants import WELL_GUIDE_SEED_DATA
from core.database import SessionLocal, create_tables
from models import WellGuide
from services.recurrence_catalog import get_recurrence_catalog


def main():
    print("Seeding well guide catalog...")
    catalog = get_recurrence_catalog()
    missing = [entry["id"] for entry in WELL_GUIDE_SEED_DATA if entry["id"] not in catalog]
    if missing:
        print(f"Guides without a recurrence period: {missing}")
        sys.exit(1)

    create_tables()
    db = SessionLocal()
    try:
        for entry in WELL_GUIDE_SEED_DATA:
            guide = db.query(WellGuide).filter(WellGuide.id == entry["id"]).first()
            if guide is None:
                db.add(WellGuide(**entry))
                print(f"Added guide {entry['id']}: {entry['name']}")
            else:
                for field, value in entry.items():
                    setattr(guide, field, value)
                print(f"Updated guide {entry['id']}: {entry['name']}")
        db.commit()
        print("Well guide catalog seeded.")
    except Exception as e:
        db.rollback()
        print(f"Error seeding well guides: {e}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
