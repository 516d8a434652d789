"""Per-category switch that controls whether results are visible."""
import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from sqlalchemy.orm import Session

from app.core.errors import ValidationError
from app.models.release import ReleaseGate

logger = logging.getLogger(__name__)


def release(db: Session, category: str, released_by: Optional[int] = None) -> ReleaseGate:
    category = (category or "").strip()
    if not category:
        raise ValidationError("Category is required")

    gate = db.query(ReleaseGate).filter(ReleaseGate.category == category).first()
    if not gate:
        gate = ReleaseGate(category=category)
        db.add(gate)
    gate.is_open = True
    gate.released_at = datetime.now(timezone.utc)
    gate.released_by = released_by
    db.commit()
    db.refresh(gate)
    logger.info("Results released for category '%s' by user %s", category, released_by)
    return gate

def is_open(db: Session, category: str) -> bool:
    # Unknown categories stay closed until an admin releases them
    gate = db.query(ReleaseGate).filter(ReleaseGate.category == category).first()
    return bool(gate and gate.is_open)

def reset_all(db: Session) -> int:
    """Close every gate. Evaluation records are left untouched."""
    closed = (
        db.query(ReleaseGate)
        .filter(ReleaseGate.is_open.is_(True))
        .update({ReleaseGate.is_open: False}, synchronize_session=False)
    )
    db.commit()
    logger.info("Closed %s result gate(s)", closed)
    return closed

def gate_states(db: Session) -> Dict[str, bool]:
    return {
        gate.category: gate.is_open
        for gate in db.query(ReleaseGate).order_by(ReleaseGate.category).all()
    }
