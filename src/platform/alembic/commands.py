"""Alembic shortcuts exposed as console scripts (see pyproject.toml)."""

from pathlib import Path
import subprocess
import sys


ALEMBIC_INI = Path(__file__).resolve().parents[3] / 'alembic.ini'


def run_alembic(args: list[str]) -> int:
    return subprocess.call(['alembic', '-c', str(ALEMBIC_INI), *args])


def upgrade() -> int:
    """Upgrade database to latest migration."""
    print('Running migrations...')
    return run_alembic(['upgrade', 'head'])


def downgrade() -> int:
    print('Rolling back one migration...')
    return run_alembic(['downgrade', '-1'])


def make_migration() -> int:
    if len(sys.argv) < 2:
        print("Usage: make-migration 'migration message'")
        return 1
    message = ' '.join(sys.argv[1:])
    print(f'Creating migration: {message}')
    return run_alembic(['revision', '--autogenerate', '-m', message])
