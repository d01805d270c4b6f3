#!/usr/bin/env python3
# Example usage of sqlite_doc_engine: declare a schema, register a model,
# create a user if missing, then mutate and save it.

from datetime import datetime, timezone

from rich.console import Console

from sqlite_doc_engine import Database, Schema, configure_logging

_console = Console()

user_schema = Schema({
    "name": {"type": str, "required": True},
    "email": {"type": str, "required": True, "unique": True},
    "age": int,
    "createdAt": {"type": datetime, "default": lambda: datetime.now(timezone.utc)},
})


def progress_printer(evt):
    _console.print(f"[progress] {evt['phase']} {evt['pct']}% {evt.get('msg', '')}", markup=False, highlight=False)


def main() -> None:
    configure_logging("INFO", console=_console)
    with Database("data/quick_start.sqlite", on_progress=progress_printer) as db:
        User = db.model("User", user_schema)

        if User.find_one({"name": "John"}) is None:
            User.create({"name": "John", "email": "john@example.com", "age": 30})

        john = User.find_one({"name": "John"})
        _console.print("Loaded:", john)

        if john is not None:
            john["age"] = 31
            john.save()
        _console.print("After save:", User.find_one({"name": "John"}))

        adults = User.find_all({"age": lambda v: v is not None and v > 18})
        _console.print("Adults:", [u["name"] for u in adults])

        updated = User.update({"name": "John"}, {"age": 32})
        _console.print("Updated records:", updated)

        deleted = User.delete({"name": "John"})
        _console.print("Deleted records:", deleted)


if __name__ == "__main__":
    main()
