"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from taskdesk.boundary.db.CRUD import chat_session_crud, chat_message_crud

    # Use singleton instances
    chat_session = await chat_session_crud.get_by_id(db, session_id)

    # Or instantiate classes directly for custom behavior
    from taskdesk.boundary.db.CRUD import ChatSessionCRUD
    custom_crud = ChatSessionCRUD()
"""

from taskdesk.boundary.db.CRUD.base_crud import BaseCRUD
from taskdesk.boundary.db.CRUD.chat_message_crud import ChatMessageCRUD, chat_message_crud
from taskdesk.boundary.db.CRUD.chat_session_crud import (
    ChatSessionCRUD,
    chat_session_crud,
    derive_title,
)
from taskdesk.boundary.db.CRUD.content_crud import (
    CategoryCRUD,
    DataTableCRUD,
    FavoriteCRUD,
    GuideCRUD,
    NoteCRUD,
    TaskCRUD,
    TemplateCRUD,
    category_crud,
    data_table_crud,
    favorite_crud,
    guide_crud,
    note_crud,
    task_crud,
    template_crud,
)

__all__ = [
    "BaseCRUD",
    "ChatSessionCRUD",
    "ChatMessageCRUD",
    "NoteCRUD",
    "GuideCRUD",
    "TaskCRUD",
    "CategoryCRUD",
    "TemplateCRUD",
    "FavoriteCRUD",
    "DataTableCRUD",
    "chat_session_crud",
    "chat_message_crud",
    "note_crud",
    "guide_crud",
    "task_crud",
    "category_crud",
    "template_crud",
    "favorite_crud",
    "data_table_crud",
    "derive_title",
]
