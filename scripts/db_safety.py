"""
Database safety checks for scripts.

Scripts that write match groups only run against local databases or hosts
listed in ALLOWED_DATABASE_HOSTS, and never when ENVIRONMENT=production.
"""

import os
import sys

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

# Hosts that indicate a local database (any dev machine)
LOCAL_HOSTS = {
    "localhost",
    "127.0.0.1",
    "host.docker.internal",
    "0.0.0.0",
    "::1",
}


def _allowed_remote_hosts() -> set[str]:
    raw = os.environ.get("ALLOWED_DATABASE_HOSTS", "")
    return {host.strip() for host in raw.split(",") if host.strip()}


def check_database_safety() -> str:
    """
    Check that DATABASE_URL points at a database scripts may write to.

    Returns "local" or the allowed remote host name.
    Exits with error if production, unparseable or not allowlisted.
    """
    db_url = os.environ.get("DATABASE_URL", "")

    if not db_url:
        print("ERROR: DATABASE_URL not set")
        sys.exit(1)

    if os.environ.get("ENVIRONMENT", "").lower() == "production":
        print("ERROR: This script cannot run with ENVIRONMENT=production!")
        sys.exit(1)

    try:
        host = make_url(db_url).host or ""
    except ArgumentError:
        print("ERROR: DATABASE_URL could not be parsed")
        sys.exit(1)

    if host in LOCAL_HOSTS:
        print("Database: local")
        return "local"

    if host in _allowed_remote_hosts():
        print(f"Database: {host}")
        return host

    print(f"ERROR: Unknown database host {host!r}")
    print("Add it to ALLOWED_DATABASE_HOSTS if this is intentional.")
    sys.exit(1)
