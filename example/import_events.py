import csv
from datetime import datetime

from sqlalchemy.orm import sessionmaker

from shared.database import SessionLocal, engine, init_db
from shared.models import Event


def import_csv(csv_path: str, session_factory: sessionmaker = SessionLocal) -> int:
    """Load a ``user_id,event,timestamp`` CSV into the events table."""
    init_db(session_factory.kw.get("bind") or engine)

    session = session_factory()
    count = 0
    try:
        with open(csv_path, encoding="utf-8", newline="") as fh:
            reader = csv.DictReader(fh)
            for row in reader:
                session.add(Event(
                    user_id=row["user_id"],
                    event=row["event"],
                    timestamp=datetime.fromisoformat(row["timestamp"].replace("Z", "+00:00")),
                ))
                count += 1
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
    return count


if __name__ == "__main__":
    import sys
    print(f"Imported {import_csv(sys.argv[1])} events")
