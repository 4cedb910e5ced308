"""
Script CRUD.

Scripts are keyed by name; the execution daemon reads the same table.
"""

import logging
from typing import Dict, List, Optional

from peewee import Database

from ...models import SCRIPT_MODELS, Script

logger = logging.getLogger("sensorboard.server")


class ScriptStore:
    """Query surface of the script database."""

    def __init__(self, database: Database) -> None:
        self.database = database
        database.bind(SCRIPT_MODELS, bind_refs=False, bind_backrefs=False)

    def list_scripts(self) -> List[Dict[str, Optional[str]]]:
        """All scripts in store order."""
        return [{"name": s.name, "content": s.content} for s in Script.select()]

    def get(self, name: str) -> Optional[str]:
        script = Script.get_or_none(Script.name == name)
        return script.content if script else None

    def upsert(self, name: str, content: str) -> None:
        """Insert the script, or replace the content of an existing one, in one statement."""
        (Script
         .insert(name=name, content=content)
         .on_conflict(conflict_target=[Script.name], update={Script.content: content})
         .execute())
        logger.info(f"script saved: {name}")

    def delete(self, name: str) -> bool:
        """Remove a script; a missing name is a no-op. Returns whether a row was removed."""
        deleted = Script.delete().where(Script.name == name).execute()
        if deleted:
            logger.info(f"script deleted: {name}")
        return bool(deleted)
