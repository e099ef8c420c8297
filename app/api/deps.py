from contextlib import contextmanager

from fastapi import HTTPException
from sqlmodel import Session

from app.services.storage import NotFoundError


def get_or_404(session: Session, model, obj_id: int, label: str):
    obj = session.get(model, obj_id)
    if not obj:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return obj


@contextmanager
def service_errors():
    """Traduce los errores de app.services.storage a respuestas HTTP."""
    try:
        yield
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
