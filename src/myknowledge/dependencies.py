# src/myknowledge/dependencies.py
from typing import Optional

from fastapi import Depends

from myknowledge.db import MongoManager
from myknowledge.auth.utils import AuthHelper
from myknowledge.repository import EntityRepository
from myknowledge.users.service import UserService

# --- Global Instances ---
# Created once and shared by every request. Route modules reach them through
# the dependency functions below rather than importing them directly.
mongo_manager = MongoManager()
auth_helper = AuthHelper()
_user_service: Optional[UserService] = None


async def get_repository(user_id: str = Depends(auth_helper.get_current_user_id)) -> EntityRepository:
    return EntityRepository(mongo_manager, user_id)


def get_user_service() -> UserService:
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service


async def close_user_service():
    global _user_service
    if _user_service is not None:
        await _user_service.close()
        _user_service = None
