from typing import List, Optional

from sqlalchemy.orm import Session

from hoops_admin.models import Branch
from hoops_admin.schemas.branch import BranchCreate, BranchUpdate


def get_branch(db: Session, branch_id: int) -> Optional[Branch]:
    return db.query(Branch).filter(Branch.id == branch_id).first()


def get_branches(db: Session, search: Optional[str] = None) -> List[Branch]:
    query = db.query(Branch)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(Branch.name.ilike(pattern) | Branch.city.ilike(pattern))
    return query.order_by(Branch.name).all()


def create_branch(db: Session, branch_data: BranchCreate) -> Branch:
    branch = Branch(**branch_data.model_dump())
    db.add(branch)
    db.commit()
    db.refresh(branch)
    return branch


def update_branch(db: Session, branch_id: int, branch_data: BranchUpdate) -> Optional[Branch]:
    branch = get_branch(db, branch_id)
    if not branch:
        return None

    update_data = branch_data.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(branch, key, value)

    db.commit()
    db.refresh(branch)
    return branch


def delete_branch(db: Session, branch: Branch) -> None:
    db.delete(branch)
    db.commit()
