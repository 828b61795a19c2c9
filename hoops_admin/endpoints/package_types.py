import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from hoops_admin.auth.permissions import require_permission
from hoops_admin.auth.policy import ActingContext, Permission
from hoops_admin.crud import package as crud_package
from hoops_admin.dependencies import get_db
from hoops_admin.schemas.package import PackageTypeCreate, PackageTypeResponse, PackageTypeUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/package-types", tags=["Package Types"])


@router.get("/", response_model=List[PackageTypeResponse])
def get_package_types(
    only_active: bool = False,
    current_user: ActingContext = Depends(require_permission(Permission.VIEW_RECORDS)),
    db: Session = Depends(get_db),
):
    return crud_package.get_packages(db, only_active=only_active)


@router.post("/", response_model=PackageTypeResponse, status_code=201)
def create_package_type(
    package_data: PackageTypeCreate,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_CATALOG)),
    db: Session = Depends(get_db),
):
    if crud_package.get_package_by_name(db, package_data.name):
        raise HTTPException(status_code=400, detail=f"Package type '{package_data.name}' already exists")
    return crud_package.create_package(db, package_data)


@router.patch("/{package_id}", response_model=PackageTypeResponse)
def update_package_type(
    package_id: int,
    package_data: PackageTypeUpdate,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_CATALOG)),
    db: Session = Depends(get_db),
):
    package = crud_package.update_package(db, package_id, package_data)
    if not package:
        raise HTTPException(status_code=404, detail="Package type not found")
    return package


@router.delete("/{package_id}", status_code=204)
def delete_package_type(
    package_id: int,
    current_user: ActingContext = Depends(require_permission(Permission.MANAGE_CATALOG)),
    db: Session = Depends(get_db),
):
    package = crud_package.get_package(db, package_id)
    if not package:
        raise HTTPException(status_code=404, detail="Package type not found")
    crud_package.delete_package(db, package)
