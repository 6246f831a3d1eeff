from app.db.models.user import User
from app.db.models.document import Document, DocumentEditor

__all__ = [
    "User",
    "Document",
    "DocumentEditor"
]
