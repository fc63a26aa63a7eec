import os
import time
from sqlalchemy.exc import OperationalError

from services.registry_service.app.models.database import Base, engine
from services.registry_service.app.models import member  # noqa: F401  registers the members table

# Give the database time to start up when launched next to it
time.sleep(float(os.environ.get("INIT_DB_DELAY", "0")))


def connect_to_db():
    retries = 5
    while retries > 0:
        try:
            with engine.connect():
                print("Database connection successful")
                return
        except OperationalError:
            print("Database not ready, retrying...")
            retries -= 1
            time.sleep(5)
    raise Exception("Could not connect to the database")


if __name__ == "__main__":
    connect_to_db()
    Base.metadata.create_all(bind=engine)
    print("Database initialized.")
