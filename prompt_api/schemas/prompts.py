from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class PromptIn(BaseModel):
    # chiavi sconosciute -> 400 prima di arrivare al servizio
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, examples=["Escalation"])
    prompt: Optional[str] = Field(None, examples=["Ping the agent"])
    location_id: Optional[str] = None
    business_name: Optional[str] = None
    knowledgebase: Optional[str] = None
    inventory: Optional[Any] = None

    def missing_required(self) -> bool:
        return not (self.name or "").strip() or not (self.prompt or "").strip()

    def wants_backfill(self) -> bool:
        return not self.location_id

    def fields(self) -> dict:
        """Tutte le colonne scrivibili; gli opzionali omessi diventano None."""
        data = self.model_dump()
        if not data.get("location_id"):
            data["location_id"] = None
        return data
