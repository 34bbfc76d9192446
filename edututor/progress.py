# progress.py
"""
Per-user, per-topic progress ledger.

Two paths write here: a chat turn adds 5 to the current value, a finished quiz
replaces it with the quiz score. Both go through ``upsert_progress``, which
always SETs. Concurrent chat turns on the same (user, topic) are
last-write-wins.
"""
from datetime import datetime

from sqlalchemy.orm import Session

from edututor.models import UserProgress

MAX_PROGRESS = 100
CHAT_INCREMENT = 5


def clamp_progress(value: int) -> int:
    return max(0, min(MAX_PROGRESS, int(value)))


def next_chat_progress(current: int) -> int:
    return min(MAX_PROGRESS, current + CHAT_INCREMENT)


def upsert_progress(db: Session, user_id: int, topic: str, value: int) -> UserProgress:
    row = (
        db.query(UserProgress)
        .filter(UserProgress.user_id == user_id, UserProgress.topic == topic)
        .first()
    )
    now = datetime.utcnow()
    if row:
        row.progress = clamp_progress(value)
        row.last_studied = now
    else:
        row = UserProgress(
            user_id=user_id,
            topic=topic,
            progress=clamp_progress(value),
            last_studied=now,
            created_at=now,
        )
        db.add(row)
    db.commit()
    db.refresh(row)
    return row
