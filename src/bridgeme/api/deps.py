"""Centralized FastAPI dependency type aliases.

Import these ``*Dep`` aliases in route modules instead of writing
``Annotated[T, Depends(get_xxx)]`` everywhere.  Each alias maps to a
single ``get_*`` factory and can be overridden in tests via
``app.dependency_overrides[get_xxx] = ...``.
"""

from typing import Annotated

from fastapi import Depends

from bridgeme.core.service.chat import MoodChatService
from bridgeme.core.service.deps import get_chat_service

ChatServiceDep = Annotated[MoodChatService, Depends(get_chat_service)]
