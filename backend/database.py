from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from backend.core import config

_connect_args = {"check_same_thread": False} if config.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(config.DATABASE_URL, echo=config.SQL_ECHO, connect_args=_connect_args)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_calendar_schema_checked = False

CALENDAR_INDEXES = {
    'availability': [
        'CREATE INDEX IF NOT EXISTS idx_availability_clinician_day ON availability(clinician_id, day_of_week)',
    ],
    'availability_exceptions': [
        'CREATE INDEX IF NOT EXISTS idx_availability_exceptions_clinician_date '
        'ON availability_exceptions(clinician_id, specific_date)',
        'CREATE INDEX IF NOT EXISTS idx_availability_exceptions_original '
        'ON availability_exceptions(original_availability_id)',
    ],
    'availability_single_date': [
        'CREATE INDEX IF NOT EXISTS idx_availability_single_date_clinician_date '
        'ON availability_single_date(clinician_id, date)',
    ],
    'appointments': [
        'CREATE INDEX IF NOT EXISTS idx_appointments_clinician_date ON appointments(clinician_id, date)',
    ],
    'time_off_blocks': [
        'CREATE INDEX IF NOT EXISTS idx_time_off_blocks_clinician_dates '
        'ON time_off_blocks(clinician_id, start_date, end_date)',
    ],
}


def ensure_calendar_schema() -> None:
    global _calendar_schema_checked

    if _calendar_schema_checked:
        return

    with _schema_lock:
        if _calendar_schema_checked:
            return

        inspector = inspect(engine)
        existing_tables = set(inspector.get_table_names())

        with engine.begin() as connection:
            for table_name, statements in CALENDAR_INDEXES.items():
                if table_name not in existing_tables:
                    continue
                for statement in statements:
                    connection.execute(text(statement))

        _calendar_schema_checked = True
