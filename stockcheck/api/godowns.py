"""
Godown API endpoints: warehouses and the barcoded items stored in them.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from stockcheck.core.database import get_db
from stockcheck.models import Godown, GodownItem
from stockcheck.reports import get_godown
from stockcheck.schemas.godown import (
    GodownCreate,
    GodownResponse,
    GodownItemsCreate,
    GodownItemsCreateResponse
)

router = APIRouter(prefix="/godowns", tags=["Godowns"])


@router.get("", response_model=list[GodownResponse])
def list_godowns(db: Session = Depends(get_db)):
    """List all godowns by name."""
    return db.scalars(select(Godown).order_by(Godown.name)).all()


@router.post("", response_model=GodownResponse, status_code=status.HTTP_201_CREATED)
def create_godown(godown_data: GodownCreate, db: Session = Depends(get_db)):
    """
    Create a godown.

    - **name**: unique godown name
    """
    godown = Godown(**godown_data.model_dump())
    db.add(godown)
    db.commit()
    db.refresh(godown)
    return godown


@router.post(
    "/{godown_id}/items",
    response_model=GodownItemsCreateResponse,
    status_code=status.HTTP_201_CREATED
)
def add_godown_items(godown_id: int, payload: GodownItemsCreate, db: Session = Depends(get_db)):
    """Place barcoded items in a godown."""
    godown = get_godown(db, godown_id)
    for item in payload.items:
        db.add(GodownItem(godown_id=godown.id, **item.model_dump()))
    db.commit()
    return GodownItemsCreateResponse(godown_id=godown.id, added=len(payload.items))
