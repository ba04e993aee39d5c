import os
import sys
import logging
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import engine_from_config, pool

# Projektwurzel ins Python-Pfad einfügen, damit lokale Importe funktionieren
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from config import normalize_db_url  # noqa: E402
from models import db  # noqa: E402

# Alembic-Konfiguration laden
config = context.config
if config.config_file_name:
    fileConfig(config.config_file_name)

logger = logging.getLogger('alembic.env')

# Datenbank-URL normalisieren, sonst auf SQLite zurückfallen
raw_db_url = os.getenv('DATABASE_URL', '')
db_url = normalize_db_url(raw_db_url) if raw_db_url else 'sqlite:///tango_berlin.db'
config.set_main_option('sqlalchemy.url', db_url)
logger.info('Using DB URL for migrations: %s', db_url.split('@')[-1])

# Metadata aus den Modellen (für --autogenerate)
target_metadata = db.metadata


def run_migrations_offline():
    url = config.get_main_option('sqlalchemy.url')
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={'paramstyle': 'named'},
        render_as_batch=url.startswith('sqlite'),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix='sqlalchemy.',
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            # SQLite kennt kein ALTER COLUMN -> batch mode
            render_as_batch=connection.dialect.name == 'sqlite',
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
