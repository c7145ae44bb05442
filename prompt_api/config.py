# prompt_api/config.py
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import load_dotenv, find_dotenv

# .env locale se presente; l'ambiente reale ha sempre la precedenza
load_dotenv(find_dotenv(usecwd=True), override=False)

STORE_SUPABASE = "supabase"
STORE_SQL = "sql"

DEFAULT_PREFIXES = ("/api", "/.netlify/functions/prompts")


def _split_prefixes(raw: Optional[str]) -> Tuple[str, ...]:
    if raw is None:
        return DEFAULT_PREFIXES
    out = []
    for part in raw.split(","):
        p = part.strip().rstrip("/")
        if not p:
            continue
        if not p.startswith("/"):
            p = "/" + p
        out.append(p)
    return tuple(out)


def _clean(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


@dataclass(frozen=True)
class Settings:
    store: str = STORE_SUPABASE
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    database_url: Optional[str] = None
    table: str = "prompts"
    prefixes: Tuple[str, ...] = field(default=DEFAULT_PREFIXES)
    http_timeout: float = 8.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            store=(os.getenv("PROMPTS_STORE") or STORE_SUPABASE).strip().lower(),
            supabase_url=_clean(os.getenv("SUPABASE_URL")),
            supabase_key=_clean(os.getenv("SUPABASE_ANON_KEY")),
            database_url=_clean(os.getenv("DATABASE_URL")),
            table=(os.getenv("PROMPTS_TABLE") or "prompts").strip(),
            prefixes=_split_prefixes(os.getenv("API_PREFIXES")),
            http_timeout=float(os.getenv("HTTP_TIMEOUT", "8")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def env_report(self) -> dict:
        """Quali parametri di connessione sono presenti; mai i valori."""
        return {
            "PROMPTS_STORE": self.store,
            "PROMPTS_TABLE": self.table,
            "SUPABASE_URL_SET": bool(self.supabase_url),
            "SUPABASE_ANON_KEY_SET": bool(self.supabase_key),
            "DATABASE_URL_SET": bool(self.database_url),
        }
