from typing import List, Optional

from sqlalchemy.orm import Session

from hoops_admin.models import Package
from hoops_admin.schemas.package import PackageTypeCreate, PackageTypeUpdate


def get_package(db: Session, package_id: int) -> Optional[Package]:
    return db.query(Package).filter(Package.id == package_id).first()


def get_package_by_name(db: Session, name: str) -> Optional[Package]:
    return db.query(Package).filter(Package.name == name).first()


def get_packages(db: Session, only_active: bool = False) -> List[Package]:
    query = db.query(Package)
    if only_active:
        query = query.filter(Package.is_active.is_(True))
    return query.order_by(Package.name).all()


def create_package(db: Session, package_data: PackageTypeCreate) -> Package:
    package = Package(**package_data.model_dump())
    db.add(package)
    db.commit()
    db.refresh(package)
    return package


def update_package(db: Session, package_id: int, package_data: PackageTypeUpdate) -> Optional[Package]:
    package = get_package(db, package_id)
    if not package:
        return None

    for key, value in package_data.model_dump(exclude_unset=True).items():
        setattr(package, key, value)

    db.commit()
    db.refresh(package)
    return package


def delete_package(db: Session, package: Package) -> None:
    db.delete(package)
    db.commit()
