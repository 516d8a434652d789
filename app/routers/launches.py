from fastapi import APIRouter, Depends
from typing import List
from sqlalchemy.orm import Session

from app.core.security.principals import AdminPrincipal, current_admin
from app.db.session import get_db
from app.models.launch import LaunchKind
from app.schemas.launch import LaunchDisplay, LaunchRequest, LaunchUpdateRequest
from app.schemas.team import TeamDisplay
from app.services import launches


def build_launch_router(kind: LaunchKind, media_path: str) -> APIRouter:
    """
    Routes for one launch kind, mounted under ``/{kind}-launch``.

    Posters and videos share the same life cycle; only the team field the
    media is read from differs.
    """
    router = APIRouter(prefix=f"/{kind.value}-launch", tags=[f"{kind.value} launch"])

    @router.get(f"/{media_path}", response_model=List[TeamDisplay])
    def get_media(db: Session = Depends(get_db)):
        return launches.teams_with_media(db, kind)

    @router.post("/launch", response_model=LaunchDisplay, status_code=201)
    def launch_media(
        request: LaunchRequest,
        principal: AdminPrincipal = Depends(current_admin),
        db: Session = Depends(get_db)
    ):
        return launches.launch(
            db,
            kind,
            team_id=request.team_id,
            title=request.title,
            duration_minutes=request.duration_minutes,
            launched_by=principal.user_id
        )

    @router.get("/launched", response_model=List[LaunchDisplay])
    def get_launched(db: Session = Depends(get_db)):
        return launches.active_launches(db, kind)

    @router.delete("/reset-all")
    def reset_all(db: Session = Depends(get_db)):
        stopped = launches.reset_all(db, kind)
        return {"message": f"All {kind.value} launches stopped", "stopped": stopped}

    @router.delete("/launched/{launch_id}", response_model=LaunchDisplay)
    def stop_launch(launch_id: int, db: Session = Depends(get_db)):
        return launches.stop_launch(db, kind, launch_id)

    @router.put("/launched/{launch_id}", response_model=LaunchDisplay)
    def update_launch(launch_id: int, request: LaunchUpdateRequest, db: Session = Depends(get_db)):
        return launches.update_launch(db, kind, launch_id, request.model_dump(exclude_unset=True))

    return router
