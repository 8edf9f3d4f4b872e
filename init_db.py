# init_db.py

from annotator.db.session import Base, engine
import annotator.db.models  # noqa: F401  registers the tables on Base.metadata


def init():
    print("Connecting to database...")

    print("Creating tables (if not exist)...")
    Base.metadata.create_all(bind=engine)

    print("Done.")


if __name__ == "__main__":
    init()
