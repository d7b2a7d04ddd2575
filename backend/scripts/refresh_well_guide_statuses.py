"""
Manual well guide status refresh.

NOTE: The daily refresh is handled by WellGuideStatusRefresher in
services/well_guide_status_refresher.py. This script runs the same
recomputation once, e.g. after changing recurrence periods.
"""
import sys
import os

# Add the parent directory to sys.path to allow imports from src
sys.path.append(os.path.join(os.path.dirname(__file__), '../src'))

from core.database import SessionLocal
from services.well_guide_service import WellGuideService


def main():
    print("Refreshing well guide statuses...")
    db = SessionLocal()
    try:
        changed = WellGuideService().refresh_statuses(db)
        print(f"Updated {changed} well guide record(s).")
    except Exception as e:
        db.rollback()
        print(f"Error during refresh: {e}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
