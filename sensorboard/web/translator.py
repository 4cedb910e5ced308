"""
UI string translation.

A plain lookup table per language, chosen once at startup. Unknown keys
are returned unchanged.
"""

import logging
from typing import Dict, Mapping, Optional

logger = logging.getLogger("sensorboard.web")

CZECH: Dict[str, str] = {
    "for": "pro",
    "from": "od",
    "to": "do",
    "Graph": "Graf",
    "Websocket status": "Stav připojení",
    "Log": "Záznamy",
    "Exe": "Skripty",
    "No": "Žádné",
    "values": "hodnoty",
    "value": "hodnota",
    "graph": "graf",
    "Reload Scripts": "Aplikovat skripty",
    "Remove": "Smazat",
    "Script name": "Název skriptu",
    "This field is required.": "Povinné pole.",
    "Script content": "Obsah skriptu",
    "Add Script": "Přidat skript",
    "Progress in Time": "Vývoj v čase",
    "Average": "Průměr",
    "Maximal": "Největší",
    "difference": "rozdíl",
    "Measurement from": "Měřeno od",
    "Measurement to": "Měřeno do",
    "Sensors": "Senzory",
    "Update Graph": "Aktualizovat Graf",
    "Connected": "Připojeno",
    "Connection lost": "Spojení ztraceno",
    "(Re)Connecting": "Navazuji spojení",
    "Browser": "Logy",
    "Log from": "Logy od",
    "Log to": "Logy do",
    "Level": "Úroveň",
    "Update Log": "Aktualizovat logy",
    "No data": "Žádná data",
    "Current values": "Aktuální hodnoty",
    "Scripts": "Skripty",
    "Sign in": "Přihlásit",
    "Sign out": "Odhlásit",
    "Username": "Uživatelské jméno",
    "Password": "Heslo",
    "Invalid username or password.": "Nesprávné přihlašovací jméno nebo heslo.",
}

TRANSLATIONS: Dict[str, Mapping[str, str]] = {
    "en": {},
    "cs": CZECH,
}


class Translator:
    def __init__(self, table: Optional[Mapping[str, str]] = None):
        self.table = dict(table or {})

    @classmethod
    def for_language(cls, language: str) -> "Translator":
        if language not in TRANSLATIONS:
            logger.warning(f"no translation table for {language!r}, using untranslated strings")
        return cls(TRANSLATIONS.get(language, {}))

    def translate(self, message: str) -> str:
        return self.table.get(message, message)

    __call__ = translate
