import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from resume_builder.database import ensure_tables_exist
from resume_builder.logging_config import setup_logging


def main():
    setup_logging()
    ensure_tables_exist()
    print("Resume tables checked: users, resumes and sections exist.")


if __name__ == "__main__":
    main()
