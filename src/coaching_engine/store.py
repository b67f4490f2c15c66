"""
Persistent-store collaborator interface plus two reference implementations:
an in-memory store for tests and a JSON-file store for the demo CLI.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import (
    ActiveChallenge,
    ChallengeDefinition,
    ChallengeStep,
    DailyNote,
    DailyNotePlan,
    ParkedItem,
    UsageLogEntry,
    ValuesData,
)


class ContextStore(ABC):
    """
    Everything the engine reads from or writes to persistent storage.
    """

    @abstractmethod
    def get_daily_note(self, user_id: str, note_date: str) -> Optional[DailyNote]:
        ...

    @abstractmethod
    def list_parked_items(self, user_id: str) -> List[ParkedItem]:
        ...

    @abstractmethod
    def list_active_projects(self, user_id: str) -> List[str]:
        ...

    @abstractmethod
    def get_active_challenge(self, user_id: str) -> Optional[ActiveChallenge]:
        ...

    @abstractmethod
    def get_completed_values(self, user_id: str) -> Optional[ValuesData]:
        ...

    @abstractmethod
    def upsert_plan(self, user_id: str, note_date: str, plan: DailyNotePlan, raw_dump: Optional[str] = None) -> None:
        ...

    @abstractmethod
    def append_message(
        self,
        user_id: str,
        role: str,
        content: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        ...

    @abstractmethod
    def log_usage(self, entry: UsageLogEntry) -> None:
        ...

    @abstractmethod
    def get_daily_cost(self, user_id: str, day: str) -> float:
        ...


class InMemoryContextStore(ContextStore):
    def __init__(self) -> None:
        self.notes: Dict[tuple, DailyNote] = {}
        self.parked: Dict[str, List[ParkedItem]] = {}
        self.projects: Dict[str, List[str]] = {}
        self.challenges: Dict[str, ActiveChallenge] = {}
        self.values: Dict[str, ValuesData] = {}
        self.messages: List[Dict[str, Any]] = []
        self.usage: List[UsageLogEntry] = []

    def get_daily_note(self, user_id: str, note_date: str) -> Optional[DailyNote]:
        return self.notes.get((user_id, note_date))

    def list_parked_items(self, user_id: str) -> List[ParkedItem]:
        return list(self.parked.get(user_id, []))

    def list_active_projects(self, user_id: str) -> List[str]:
        return list(self.projects.get(user_id, []))

    def get_active_challenge(self, user_id: str) -> Optional[ActiveChallenge]:
        return self.challenges.get(user_id)

    def get_completed_values(self, user_id: str) -> Optional[ValuesData]:
        return self.values.get(user_id)

    def upsert_plan(self, user_id: str, note_date: str, plan: DailyNotePlan, raw_dump: Optional[str] = None) -> None:
        note = self.notes.get((user_id, note_date))
        if note is None:
            note = DailyNote(user_id=user_id, date=note_date)
            self.notes[(user_id, note_date)] = note
        note.plan = plan
        if raw_dump is not None:
            note.raw_dump = raw_dump

    def append_message(
        self,
        user_id: str,
        role: str,
        content: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.messages.append({"user_id": user_id, "role": role, "content": content, "metadata": metadata or {}})

    def log_usage(self, entry: UsageLogEntry) -> None:
        self.usage.append(entry)

    def get_daily_cost(self, user_id: str, day: str) -> float:
        return sum(
            entry.cost_usd
            for entry in self.usage
            if entry.user_id == user_id and entry.created_at.date().isoformat() == day
        )


class JsonFileContextStore(ContextStore):
    """
    One directory per user holding small JSON files. Meant for local demos.
    """

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # File helpers
    # ------------------------------------------------------------------

    def _user_dir(self, user_id: str) -> Path:
        path = self.data_dir / user_id
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _load_json(self, file_path: Path, default: Any) -> Any:
        if not file_path.exists():
            return default
        try:
            with open(file_path, "r") as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError):
            return default

    def _save_json(self, file_path: Path, data: Any) -> None:
        with open(file_path, "w") as f:
            json.dump(data, f, indent=2, default=str)

    def _profile(self, user_id: str) -> Dict[str, Any]:
        return self._load_json(self._user_dir(user_id) / "profile.json", {})

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_daily_note(self, user_id: str, note_date: str) -> Optional[DailyNote]:
        notes = self._load_json(self._user_dir(user_id) / "daily_notes.json", {})
        payload = notes.get(note_date)
        if not payload:
            return None
        plan = payload.get("plan")
        return DailyNote(
            user_id=user_id,
            date=note_date,
            plan=DailyNotePlan.from_dict(plan) if plan else None,
            raw_dump=payload.get("raw_dump"),
        )

    def list_parked_items(self, user_id: str) -> List[ParkedItem]:
        rows = self._load_json(self._user_dir(user_id) / "parked_items.json", [])
        return [
            ParkedItem(
                id=row["id"],
                text=row["text"],
                reason=row.get("reason"),
                status=row.get("status", "parked"),
                parked_at=datetime.fromisoformat(row["parked_at"]),
                last_reviewed_at=(
                    datetime.fromisoformat(row["last_reviewed_at"]) if row.get("last_reviewed_at") else None
                ),
            )
            for row in rows
        ]

    def list_active_projects(self, user_id: str) -> List[str]:
        return list(self._profile(user_id).get("active_projects", []))

    def get_active_challenge(self, user_id: str) -> Optional[ActiveChallenge]:
        payload = self._profile(user_id).get("active_challenge")
        if not payload:
            return None
        started_on = date.fromisoformat(payload["started_on"])
        challenge = ChallengeDefinition(
            id=payload["id"],
            title=payload["title"],
            description=payload.get("description", ""),
            part_title=payload.get("part_title", ""),
            what_you_get=payload.get("what_you_get", ""),
            steps=tuple(ChallengeStep(content=step) for step in payload.get("steps", [])),
        )
        return ActiveChallenge(challenge=challenge, days_since_started=(date.today() - started_on).days)

    def get_completed_values(self, user_id: str) -> Optional[ValuesData]:
        values = self._profile(user_id).get("completed_values")
        if not values:
            return None
        return ValuesData(values=tuple(values))

    def get_daily_cost(self, user_id: str, day: str) -> float:
        rows = self._load_json(self._user_dir(user_id) / "usage.json", [])
        return sum(row["cost_usd"] for row in rows if str(row["created_at"]).startswith(day))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def upsert_plan(self, user_id: str, note_date: str, plan: DailyNotePlan, raw_dump: Optional[str] = None) -> None:
        path = self._user_dir(user_id) / "daily_notes.json"
        notes = self._load_json(path, {})
        note = notes.get(note_date, {})
        note["plan"] = plan.to_dict()
        if raw_dump is not None:
            note["raw_dump"] = raw_dump
        notes[note_date] = note
        self._save_json(path, notes)

    def append_message(
        self,
        user_id: str,
        role: str,
        content: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        path = self._user_dir(user_id) / "messages.json"
        rows = self._load_json(path, [])
        rows.append(
            {
                "role": role,
                "content": content,
                "metadata": metadata or {},
                "created_at": datetime.now().isoformat(),
            }
        )
        self._save_json(path, rows)

    def log_usage(self, entry: UsageLogEntry) -> None:
        path = self._user_dir(entry.user_id) / "usage.json"
        rows = self._load_json(path, [])
        rows.append(
            {
                "session_id": entry.session_id,
                "model": entry.model,
                "tokens_in": entry.tokens_in,
                "tokens_out": entry.tokens_out,
                "cost_usd": entry.cost_usd,
                "latency_ms": entry.latency_ms,
                "created_at": entry.created_at.isoformat(),
            }
        )
        self._save_json(path, rows)
