"""Administrative CLI for tenant API keys.

    stashgate-keys add --name nextjs-app
    stashgate-keys list
    stashgate-keys disable --id 1
    stashgate-keys delete --id 2

A key can be disabled or deleted but never re-enabled.
"""

import argparse
import asyncio
import sys

from stashgate import models  # noqa: F401
from stashgate.core.database import Base, SessionLocal, engine
from stashgate.models.api_key import APIKey
from stashgate.repositories.api_keys import APIKeyRepository
from stashgate.utils.keys import generate_api_key

RULE = "-" * 78


async def _ensure_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def add_key(name: str) -> int:
    async with SessionLocal() as session:
        repo = APIKeyRepository(session)
        key = generate_api_key()
        record = await repo.add(APIKey(key=key, name=name, is_active=True))

    print(RULE)
    print(f"Key:      {key}")
    print(f"Name:     {record.name}")
    print(f"ID:       {record.id}")
    print("Status:   active")
    print(f"Created:  {record.created_at.isoformat()}")
    print(RULE)
    print("Save this key securely. It cannot be retrieved later.")
    return 0


async def list_keys() -> int:
    async with SessionLocal() as session:
        keys = await APIKeyRepository(session).list_all()

    if not keys:
        print("No API keys found.")
        return 0

    print(f"{'ID':<6}{'Name':<24}{'Key (last 8)':<16}{'Status':<10}Created")
    print(RULE)
    for k in keys:
        status = "active" if k.is_active else "disabled"
        created = k.created_at.date().isoformat() if k.created_at else "-"
        print(f"{k.id:<6}{k.name[:22]:<24}{'...' + k.key[-8:]:<16}{status:<10}{created}")
    print(RULE)
    print(f"Total: {len(keys)} key(s)")
    return 0


async def disable_key(key_id: int) -> int:
    async with SessionLocal() as session:
        repo = APIKeyRepository(session)
        record = await repo.get(key_id)
        if record is None:
            print(f"API key with ID {key_id} not found.", file=sys.stderr)
            return 1
        if not record.is_active:
            print(f'API key "{record.name}" (ID: {key_id}) is already disabled.')
            return 0
        record.is_active = False
        await repo.save(record)
    print(f'API key "{record.name}" (ID: {key_id}) has been disabled.')
    return 0


async def delete_key(key_id: int) -> int:
    async with SessionLocal() as session:
        repo = APIKeyRepository(session)
        record = await repo.get(key_id)
        if record is None:
            print(f"API key with ID {key_id} not found.", file=sys.stderr)
            return 1
        name = record.name
        await repo.delete(record)
    print(f'API key "{name}" (ID: {key_id}) has been permanently deleted.')
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stashgate-keys", description="Manage tenant API keys")
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Create a new API key")
    add.add_argument("--name", required=True, help="Consumer name")

    sub.add_parser("list", help="List all API keys")

    for command, text in (("disable", "Disable an API key"), ("delete", "Delete an API key")):
        p = sub.add_parser(command, help=text)
        p.add_argument("--id", type=int, required=True, dest="key_id")

    return parser


async def _run(args: argparse.Namespace) -> int:
    await _ensure_tables()
    try:
        if args.command == "add":
            return await add_key(args.name)
        if args.command == "list":
            return await list_keys()
        if args.command == "disable":
            return await disable_key(args.key_id)
        return await delete_key(args.key_id)
    finally:
        await engine.dispose()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
