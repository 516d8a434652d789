"""Poster and video launches shown on the event screens."""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.errors import NotFound, ValidationError
from app.models.launch import Launch, LaunchKind
from app.models.team import Team
from app.utils.helpers import get_utc_now

logger = logging.getLogger(__name__)

MEDIA_FIELD = {
    LaunchKind.POSTER: "poster_url",
    LaunchKind.VIDEO: "video_url",
}


def teams_with_media(db: Session, kind: LaunchKind) -> List[Team]:
    column = getattr(Team, MEDIA_FIELD[kind])
    return (
        db.query(Team)
        .filter(column.isnot(None), column != "")
        .order_by(Team.id)
        .all()
    )

def launch(
    db: Session,
    kind: LaunchKind,
    team_id: int,
    title: Optional[str] = None,
    duration_minutes: Optional[int] = None,
    launched_by: Optional[int] = None
) -> Launch:
    team = db.query(Team).filter(Team.id == team_id).first()
    if not team:
        raise NotFound(f"Team {team_id} not found")
    media_url = getattr(team, MEDIA_FIELD[kind])
    if not media_url:
        raise ValidationError(f"Team {team.name} has no {kind.value} to launch")

    new_launch = Launch(
        kind=kind,
        team_id=team.id,
        title=title or team.project_title or team.name,
        media_url=media_url,
        duration_minutes=duration_minutes,
        launched_by=launched_by
    )
    db.add(new_launch)
    db.commit()
    db.refresh(new_launch)
    logger.info("Launched %s %s for team %s", kind.value, new_launch.id, team.id)
    return new_launch

def active_launches(db: Session, kind: LaunchKind) -> List[Launch]:
    return (
        db.query(Launch)
        .filter(Launch.kind == kind, Launch.is_active.is_(True))
        .order_by(Launch.launched_at.desc(), Launch.id.desc())
        .all()
    )

def _get_launch(db: Session, kind: LaunchKind, launch_id: int) -> Launch:
    found = db.query(Launch).filter(Launch.id == launch_id, Launch.kind == kind).first()
    if not found:
        raise NotFound(f"{kind.value.capitalize()} launch {launch_id} not found")
    return found

def update_launch(db: Session, kind: LaunchKind, launch_id: int, changes: Dict[str, Any]) -> Launch:
    found = _get_launch(db, kind, launch_id)
    for key, value in changes.items():
        setattr(found, key, value)
    db.commit()
    db.refresh(found)
    return found

def stop_launch(db: Session, kind: LaunchKind, launch_id: int) -> Launch:
    found = _get_launch(db, kind, launch_id)
    if found.is_active:
        found.is_active = False
        found.stopped_at = get_utc_now()
        db.commit()
        db.refresh(found)
        logger.info("Stopped %s launch %s", kind.value, launch_id)
    return found

def reset_all(db: Session, kind: Optional[LaunchKind] = None) -> int:
    query = db.query(Launch).filter(Launch.is_active.is_(True))
    if kind is not None:
        query = query.filter(Launch.kind == kind)
    stopped = query.update(
        {Launch.is_active: False, Launch.stopped_at: get_utc_now()},
        synchronize_session=False
    )
    db.commit()
    logger.info("Stopped %s active %s launch(es)", stopped, kind.value if kind else "poster/video")
    return stopped
