"""Contact form API endpoint."""
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.config import get_settings
from app.schemas.contact import ContactRequest, ContactResponse
from app.services.contact import (
    THANK_YOU_MESSAGE,
    ContactNotice,
    save_contact_message,
    send_contact_notification,
)

router = APIRouter(prefix="/contact", tags=["contact"])


@router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
def submit_contact_message(
    contact_data: ContactRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """Store a contact form submission and email the site owner."""
    contact = save_contact_message(
        db,
        name=contact_data.name,
        email=contact_data.email,
        subject=contact_data.subject,
        message=contact_data.message,
    )
    db.commit()
    db.refresh(contact)

    background_tasks.add_task(send_contact_notification, ContactNotice.from_model(contact), get_settings())

    return ContactResponse(id=contact.id, sent_at=contact.sent_at, message=THANK_YOU_MESSAGE)
