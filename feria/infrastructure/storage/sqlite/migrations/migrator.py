"""
Versioned schema migrations for the fair store.

Migrations are ``vNNN_name.sql`` files applied in version order and recorded
in ``schema_migrations`` with a checksum. An existing database is copied
aside first; if any migration fails the copy is put back, so a terminal never
starts against a half-migrated store.
"""

import hashlib
import re
import shutil
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import aiosqlite

from feria.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
FILENAME_PATTERN = re.compile(r"^v(\d{3,})_(\w+)\.sql$")

REQUIRED_TABLES = (
    "schema_migrations",
    "settings",
    "active_sales",
    "feria_history",
)

# (table, column) pairs that must be backed by a UNIQUE index: replayed sales
# are deduplicated on client_ref, archives overwrite history by name.
UNIQUE_COLUMNS = (
    ("active_sales", "client_ref"),
    ("feria_history", "name"),
)


@dataclass(frozen=True)
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = FILENAME_PATTERN.match(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()[:16]
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=digest)


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


@dataclass
class MigrationStatus:
    exists: bool
    applied: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)

    @property
    def up_to_date(self) -> bool:
        return self.exists and not self.pending


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration files in ``directory`` sorted by version; bad names are skipped."""
    found = []
    for path in directory.glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError:
            logger.warning("migration_file_ignored", path=str(path))
    return sorted(found, key=lambda m: int(m.version))


async def _applied_checksums(conn: aiosqlite.Connection) -> dict[str, str]:
    cursor = await conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_migrations'"
    )
    if await cursor.fetchone() is None:
        return {}
    cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def _apply(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    started = time.perf_counter()

    def elapsed() -> int:
        return int((time.perf_counter() - started) * 1000)

    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            "INSERT OR REPLACE INTO schema_migrations (version, name, checksum, execution_time_ms)"
            " VALUES (?, ?, ?, ?)",
            (migration.version, migration.name, migration.checksum, elapsed()),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        return MigrationResult(migration.version, migration.name, False, elapsed(), str(e))

    logger.info("migration_applied", version=migration.version, name=migration.name)
    return MigrationResult(migration.version, migration.name, True, elapsed())


def create_backup(db_path: Path) -> Path:
    """Copy the database file aside, next to the original."""
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    backup_path = db_path.with_name(f"{db_path.stem}.{stamp}.bak")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def _restore(backup_path: Path, db_path: Path) -> None:
    # WAL side files belong to the failed attempt
    for suffix in ("-wal", "-shm"):
        db_path.with_name(db_path.name + suffix).unlink(missing_ok=True)
    shutil.copy2(backup_path, db_path)
    logger.warning("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
    migrations_dir: Path = MIGRATIONS_DIR,
) -> list[MigrationResult]:
    """
    Apply every pending migration, stopping at the first failure.

    Args:
        db_path: Database file (default from settings)
        create_backup_before: Copy an existing database aside first
        migrations_dir: Where to look for ``vNNN_name.sql`` files

    Returns:
        Results for the migrations that were attempted; empty when up to date
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    backup_path = None
    if create_backup_before and db_path.exists():
        backup_path = create_backup(db_path)

    results: list[MigrationResult] = []
    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            applied = await _applied_checksums(conn)

            for migration in discover_migrations(migrations_dir):
                if migration.version in applied:
                    if applied[migration.version] != migration.checksum:
                        logger.warning("migration_checksum_changed", version=migration.version)
                    continue
                result = await _apply(conn, migration)
                results.append(result)
                if not result.success:
                    break
    except (aiosqlite.Error, OSError):
        if backup_path:
            _restore(backup_path, db_path)
        raise

    failed = any(not r.success for r in results)
    if backup_path:
        if failed:
            _restore(backup_path, db_path)
        else:
            backup_path.unlink()

    logger.info(
        "database_migrated",
        db_path=str(db_path),
        applied=[r.version for r in results if r.success],
        failed=failed,
    )
    return results


# Name used by the app lifespan and the CLI
run_migrations = initialize_database


async def get_migration_status(
    db_path: Path | None = None,
    migrations_dir: Path = MIGRATIONS_DIR,
) -> MigrationStatus:
    db_path = db_path or get_settings().storage.db_path
    versions = [m.version for m in discover_migrations(migrations_dir)]
    if not db_path.exists():
        return MigrationStatus(exists=False, pending=versions)

    async with aiosqlite.connect(db_path) as conn:
        applied = await _applied_checksums(conn)

    return MigrationStatus(
        exists=True,
        applied=sorted(applied, key=int),
        pending=[v for v in versions if v not in applied],
    )


async def _has_unique_index(conn: aiosqlite.Connection, table: str, column: str) -> bool:
    cursor = await conn.execute(f"PRAGMA index_list({table})")
    for index in await cursor.fetchall():
        # index_list rows: seq, name, unique, origin, partial
        if not index[2]:
            continue
        info = await conn.execute(f"PRAGMA index_info({index[1]})")
        if [row[2] for row in await info.fetchall()] == [column]:
            return True
    return False


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """
    Check the store is usable by the ledger and the lifecycle manager.

    Runs SQLite's ``integrity_check``, confirms the required tables exist and
    that the idempotency and overwrite-by-name columns are uniquely indexed.
    """
    db_path = db_path or get_settings().storage.db_path
    checks: list[dict] = []

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        (verdict,) = await cursor.fetchone()
        checks.append({"check": "integrity", "status": "PASS" if verdict == "ok" else "FAIL"})

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        tables = {row[0] for row in await cursor.fetchall()}
        missing = [t for t in REQUIRED_TABLES if t not in tables]
        checks.append({
            "check": "required_tables",
            "status": "FAIL" if missing else "PASS",
            "missing": missing,
        })

        for table, column in UNIQUE_COLUMNS:
            unique = table in tables and await _has_unique_index(conn, table, column)
            checks.append({
                "check": f"unique_{table}_{column}",
                "status": "PASS" if unique else "FAIL",
            })

    return checks
