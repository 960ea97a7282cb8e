"""Store schema contract.

The DDL below is consumed as a fixed contract. Triggers populate ``ctime``
once at insert and refresh ``mtime`` on every update, so client code never
assigns either. The ``repositories`` and ``audit`` tables have no behavior
in this package yet.
"""

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine


logger = structlog.get_logger()

STMT_SEPARATOR = "-- STMT"

APP_CREATE_SCHEMA_SQLITE = """
create table if not exists users (
       api_secret text unique not null,
       api_secret_digest text unique not null,
       id text unique not null,
       display_name text not null,
       display_name_digest text not null,
       email text not null,
       email_digest text not null,
       org text not null,
       password text not null,
       schema_version integer not null default 0,
       status integer not null,
       ctime integer,
       mtime integer,
       primary key (id));
-- STMT
create unique index if not exists users_email_org on users (email_digest, org);
-- STMT
create trigger if not exists users_ctime_trigger after insert on users
begin
        update users set
        ctime = strftime('%s','now'),
        mtime = strftime('%s','now')
        where id = new.id;
end;
-- STMT
create trigger if not exists users_mtime_trigger after update on users
begin
        update users set mtime = strftime('%s','now')
        where id = new.id;
end;
-- STMT
create table if not exists orgs (
       id text unique not null,
       name text unique not null,
       owner text not null,
       schema_version integer not null default 0,
       status integer not null,
       ctime integer,
       mtime integer,
       primary key (id));
-- STMT
create trigger if not exists orgs_ctime_trigger after insert on orgs
begin
        update orgs set
        ctime = strftime('%s','now'),
        mtime = strftime('%s','now')
        where id = new.id;
end;
-- STMT
create trigger if not exists orgs_mtime_trigger after update on orgs
begin
        update orgs set mtime = strftime('%s','now')
        where id = new.id;
end;
-- STMT
create table if not exists repositories (
       id text unique not null,
       name text not null,
       org text not null,
       path text not null,
       upstream text not null,
       schema_version integer not null default 0,
       status integer not null,
       ctime integer,
       mtime integer,
       primary key (id));
-- STMT
create unique index if not exists repositories_name_org on repositories (name, org);
-- STMT
create trigger if not exists repositories_ctime_trigger after insert on repositories
begin
        update repositories set
        ctime = strftime('%s','now'),
        mtime = strftime('%s','now')
        where id = new.id;
end;
-- STMT
create trigger if not exists repositories_mtime_trigger after update on repositories
begin
        update repositories set mtime = strftime('%s','now')
        where id = new.id;
end;
-- STMT
create table if not exists audit (
      id text unique not null,
      code integer not null,
      source text not null,
      source_id text not null,
      schema_version integer not null default 0,
      ctime integer,
      mtime integer,
      primary key (id));
-- STMT
create trigger if not exists audit_ctime_trigger after insert on audit
      begin
      update audit set
      ctime = strftime('%s','now'),
      mtime = strftime('%s','now')
      where id = new.id;
end;
-- STMT
create trigger if not exists audit_mtime_trigger after update on audit
      begin
      update audit set mtime = strftime('%s','now')
      where id = new.id;
end;
"""


def schema_statements(schema: str = APP_CREATE_SCHEMA_SQLITE) -> list[str]:
    """Split a schema script into individual statements."""
    return [stmt.strip() for stmt in schema.split(STMT_SEPARATOR) if stmt.strip()]


async def create_schema(engine: AsyncEngine, schema: str = APP_CREATE_SCHEMA_SQLITE) -> None:
    """Apply the schema contract in a single transaction.

    Args:
        engine: The engine to apply the schema to
        schema: Schema script with statements separated by ``-- STMT``
    """
    statements = schema_statements(schema)
    async with engine.begin() as conn:
        for stmt in statements:
            await conn.execute(text(stmt))
    logger.debug("schema_created", statement_count=len(statements))
