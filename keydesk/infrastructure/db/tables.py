from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    UniqueConstraint,
)

metadata = MetaData()

keys = Table(
    "keys",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(100), nullable=False),
    Column("description", String(500), nullable=False, default=""),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("version", Integer, nullable=False, default=1),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("name", name="uq_keys_name"),
)

users = Table(
    "users",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(100), nullable=False),
    Column("email", String(255), nullable=False),
    Column("password_hash", String(255), nullable=False),
    Column("role", String(16), nullable=False),
    Column("is_blocked", Boolean, nullable=False, default=False),
    Column("version", Integer, nullable=False, default=1),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("email", name="uq_users_email"),
)

# Sin FKs: las reservaciones sobreviven como historial aunque la llave se elimine.
reservations = Table(
    "reservations",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("key_id", String(36), nullable=False),
    Column("user_id", String(36), nullable=False),
    Column("reserved_at", DateTime(timezone=True), nullable=False),
    Column("due_at", DateTime(timezone=True), nullable=False),
    Column("returned_at", DateTime(timezone=True)),
    Column("status", String(16), nullable=False),
    Column("version", Integer, nullable=False, default=1),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    Index("ix_reservations_user_id", "user_id"),
    Index("ix_reservations_status_due_at", "status", "due_at"),
)

# A lo sumo una reservación activa por llave y por usuario.
Index(
    "uq_reservations_active_key",
    reservations.c.key_id,
    unique=True,
    sqlite_where=reservations.c.status == "active",
    postgresql_where=reservations.c.status == "active",
)
Index(
    "uq_reservations_active_user",
    reservations.c.user_id,
    unique=True,
    sqlite_where=reservations.c.status == "active",
    postgresql_where=reservations.c.status == "active",
)
