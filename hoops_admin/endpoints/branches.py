import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from hoops_admin.auth.permissions import require_permission
from hoops_admin.auth.policy import ActingContext, Permission
from hoops_admin.crud import branch as crud_branch
from hoops_admin.dependencies import get_db
from hoops_admin.schemas.branch import BranchCreate, BranchResponse, BranchUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/branches", tags=["Branches"])


@router.get("/", response_model=List[BranchResponse])
def get_branches(
    search: Optional[str] = Query(None),
    current_user: ActingContext = Depends(require_permission(Permission.VIEW_RECORDS)),
    db: Session = Depends(get_db),
):
    return crud_branch.get_branches(db, search=search)


@router.post("/", response_model=BranchResponse, status_code=201)
def create_branch(
    branch_data: BranchCreate,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_CATALOG)),
    db: Session = Depends(get_db),
):
    branch = crud_branch.create_branch(db, branch_data)
    logger.info(f"Branch {branch.id} created")
    return branch


@router.get("/{branch_id}", response_model=BranchResponse)
def get_branch(
    branch_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.VIEW_RECORDS)),
    db: Session = Depends(get_db),
):
    branch = crud_branch.get_branch(db, branch_id)
    if not branch:
        raise HTTPException(status_code=404, detail="Branch not found")
    return branch


@router.patch("/{branch_id}", response_model=BranchResponse)
def update_branch(
    branch_id: int,
    branch_data: BranchUpdate,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_CATALOG)),
    db: Session = Depends(get_db),
):
    branch = crud_branch.update_branch(db, branch_id, branch_data)
    if not branch:
        raise HTTPException(status_code=404, detail="Branch not found")
    return branch


@router.delete("/{branch_id}", status_code=204)
def delete_branch(
    branch_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_CATALOG)),
    db: Session = Depends(get_db),
):
    branch = crud_branch.get_branch(db, branch_id)
    if not branch:
        raise HTTPException(status_code=404, detail="Branch not found")
    if branch.players or branch.training_sessions:
        raise HTTPException(status_code=409, detail="Branch has players or sessions and cannot be deleted")
    crud_branch.delete_branch(db, branch)
    logger.info(f"Branch {branch_id} deleted")
