# app/feedback/routes.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.feedback import services as feedback_service
from app.feedback.schemas import (
    FeedbackBulkIds,
    FeedbackCreate,
    FeedbackFilters,
    FeedbackOut,
    FeedbackUpdate,
)
from app.ticket.schemas import BulkResult

router = APIRouter(prefix="/feedback", tags=["Feedback"])


@router.post("/", response_model=FeedbackOut, status_code=201)
def create(feedback: FeedbackCreate, db: Session = Depends(get_db)):
    return feedback_service.create_feedback(db, feedback)


@router.get("/", response_model=list[FeedbackOut])
def list_all(db: Session = Depends(get_db)):
    return feedback_service.get_all_feedback(db)


@router.post("/search", response_model=list[FeedbackOut])
def search(filters: FeedbackFilters, db: Session = Depends(get_db)):
    return feedback_service.search_feedback(db, filters)


@router.get("/products", response_model=list[str])
def products(db: Session = Depends(get_db)):
    return feedback_service.get_unique_products(db)


@router.post("/bulk-delete", response_model=BulkResult)
def bulk_delete(body: FeedbackBulkIds, db: Session = Depends(get_db)):
    return BulkResult(affected=feedback_service.bulk_delete_feedback(db, body.ids))


@router.get("/{feedback_id}", response_model=FeedbackOut)
def get(feedback_id: str, db: Session = Depends(get_db)):
    feedback = feedback_service.get_feedback(db, feedback_id)
    if not feedback:
        raise HTTPException(status_code=404, detail="Feedback not found")
    return feedback


@router.put("/{feedback_id}", response_model=FeedbackOut)
def update(feedback_id: str, feedback: FeedbackUpdate, db: Session = Depends(get_db)):
    try:
        updated = feedback_service.update_feedback(db, feedback_id, feedback)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    if not updated:
        raise HTTPException(status_code=404, detail="Feedback not found")
    return updated


@router.delete("/{feedback_id}", response_model=FeedbackOut)
def delete(feedback_id: str, db: Session = Depends(get_db)):
    deleted = feedback_service.delete_feedback(db, feedback_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Feedback not found")
    return deleted
