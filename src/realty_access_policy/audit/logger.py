"""Append-only JSONL log of access decisions.

Each record carries a UTC ISO-8601 timestamp, a session identifier, and
the decision fields, including the condition that failed.  The log is for
operators only; nothing in it is ever returned to the requester.

Writes are serialised with a threading.Lock, so one logger can be shared
by every request thread in a process.

Example
-------
>>> from pathlib import Path
>>> log = DecisionLogger(Path("/tmp/decisions.jsonl"))
>>> log.log_decision(decision)
>>> log.denials()[0]["failed_condition"]
'has_resource_access_existing'
"""
from __future__ import annotations

import json
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from realty_access_policy.policies.engine import Decision

DECISION_EVENT: str = "access_decision"


class DecisionLogger:
    """Append-only JSONL decision log.

    Parameters
    ----------
    log_path:
        Path to the ``.jsonl`` file.  Parent directories are created on
        first write.
    session_id:
        Identifier stamped on every record.  A random UUID is generated if
        not supplied.
    """

    def __init__(self, log_path: Path, session_id: str | None = None) -> None:
        self._path = Path(log_path)
        self._session = session_id or uuid.uuid4().hex
        self._lock = threading.Lock()

    @property
    def log_path(self) -> Path:
        """Location of the JSONL file."""
        return self._path

    @property
    def session_id(self) -> str:
        """Identifier shared by every record this logger writes."""
        return self._session

    # ------------------------------------------------------------------
    # Write API
    # ------------------------------------------------------------------

    def log(self, entry: dict[str, object]) -> None:
        """Append an arbitrary record.

        ``timestamp`` and ``session_id`` are added automatically and take
        precedence over caller-supplied keys of the same name.

        Parameters
        ----------
        entry:
            JSON-serialisable mapping.  Values that are not serialisable
            are written with ``str()``.
        """
        stamped = dict(entry)
        stamped["timestamp"] = datetime.now(tz=timezone.utc).isoformat()
        stamped["session_id"] = self._session
        line = json.dumps(stamped, default=str)
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")

    def log_decision(self, decision: Decision) -> None:
        """Append one access decision under the ``access_decision`` event."""
        self.log({"event": DECISION_EVENT, **decision.to_dict()})

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    def read_all(self) -> list[dict[str, object]]:
        """Return every record in write order.

        Returns
        -------
        list[dict[str, object]]
            Parsed records; empty when nothing has been written yet.  Lines
            that are not valid JSON (a torn write from a crashed process)
            are skipped.
        """
        if not self._path.exists():
            return []
        with self._lock:
            raw = self._path.read_text(encoding="utf-8")
        records: list[dict[str, object]] = []
        for line in raw.splitlines():
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError:
                continue
        return records

    def query(self, filters: dict[str, object]) -> list[dict[str, object]]:
        """Return records whose top-level fields equal every filter value.

        Example
        -------
        >>> log.query({"collection": "offers", "denial": "forbidden"})
        [...]
        """
        return [
            record
            for record in self.read_all()
            if all(record.get(key) == value for key, value in filters.items())
        ]

    def denials(self) -> list[dict[str, object]]:
        """Return every denied decision, oldest first."""
        return self.query({"event": DECISION_EVENT, "allowed": False})

    def for_principal(self, principal_id: str | None) -> list[dict[str, object]]:
        """Return the decisions made for *principal_id*.

        ``None`` selects unauthenticated requests.
        """
        return self.query({"event": DECISION_EVENT, "principal_id": principal_id})

    def count(self) -> int:
        """Return the number of readable records in the log."""
        return len(self.read_all())

    def last_n(self, n: int) -> list[dict[str, object]]:
        """Return at most the *n* most recent records; none for ``n <= 0``."""
        return self.read_all()[-n:] if n > 0 else []
