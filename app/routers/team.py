# app/routers/team.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from app.database import get_db
from app.schemas import Envelope, Identity, TeamCreate, TeamDetail, TeamMembers, TeamOut, TeamUpdate
from app.services.team_service import TeamService
from app.utils.auth import require_manager_or_admin

# Every team route is for managers and admins
router = APIRouter(dependencies=[Depends(require_manager_or_admin)])


@router.get("/", response_model=Envelope[List[TeamOut]])
def get_all_teams(db: Session = Depends(get_db)):
    return Envelope(data=TeamService(db).list_teams())


@router.get("/{team_id}", response_model=Envelope[TeamDetail])
def get_team(team_id: int, db: Session = Depends(get_db)):
    return Envelope(data=TeamService(db).get_team(team_id))


@router.post("/", response_model=Envelope[TeamOut], status_code=status.HTTP_201_CREATED)
def create_team(
    team_data: TeamCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_manager_or_admin),
):
    team = TeamService(db).create_team(
        team_data.name, team_data.lead_id, team_data.member_ids, acting_user_id=identity.id
    )
    return Envelope(data=team, message="Team created successfully")


@router.put("/{team_id}", response_model=Envelope[TeamOut])
def update_team(
    team_id: int,
    team_update: TeamUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_manager_or_admin),
):
    team = TeamService(db).update_team(
        team_id, team_update.model_dump(exclude_unset=True), acting_user_id=identity.id
    )
    return Envelope(data=team)


@router.delete("/{team_id}", response_model=Envelope)
def delete_team(
    team_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_manager_or_admin),
):
    TeamService(db).delete_team(team_id, acting_user_id=identity.id)
    return Envelope(message="Team deleted successfully")


@router.post("/{team_id}/members", response_model=Envelope[TeamOut])
def add_team_members(
    team_id: int,
    payload: TeamMembers,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_manager_or_admin),
):
    team = TeamService(db).add_members(team_id, payload.user_ids, acting_user_id=identity.id)
    return Envelope(data=team, message=f"{len(set(payload.user_ids))} member(s) added to team")


@router.delete("/{team_id}/members", response_model=Envelope[TeamOut])
def remove_team_members(
    team_id: int,
    payload: TeamMembers,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_manager_or_admin),
):
    team = TeamService(db).remove_members(team_id, payload.user_ids, acting_user_id=identity.id)
    return Envelope(data=team, message="Member(s) removed from team")
