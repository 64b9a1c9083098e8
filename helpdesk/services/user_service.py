# helpdesk/services/user_service.py
import logging
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from helpdesk.models import User, UserType
from helpdesk.utils.errors import Conflict, InternalError, NotFound, Unauthenticated, ValidationError
from helpdesk.utils.hierarchy import HierarchyManager
from helpdesk.utils.security import hash_password, verify_password, token_for_user

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.hierarchy = HierarchyManager(db)

    def _commit(self, context: str):
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"{context} failed")
            raise InternalError()

    def _find_existing(self, username: str, email: str) -> Optional[User]:
        return self.db.query(User).filter(
            or_(User.username == username, User.email == email)
        ).first()

    def register(
        self,
        username: str,
        email: str,
        password: str,
        name: Optional[str] = None,
    ) -> Tuple[str, User]:
        if self._find_existing(username, email):
            logger.warning(f"Registration failed, '{username}' or '{email}' already exists")
            raise Conflict("User with this username or email already exists", code="USER_ALREADY_EXISTS")

        user = User(
            username=username,
            email=email,
            name=name or username,
            hashed_password=hash_password(password),
            user_type=UserType.EMPLOYEE,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration
            self.db.rollback()
            logger.warning(f"Registration failed, '{username}' or '{email}' was taken concurrently")
            raise Conflict("User with this username or email already exists", code="USER_ALREADY_EXISTS")
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Register '{username}' failed")
            raise InternalError()
        self.db.refresh(user)

        logger.info(f"User {user.id} ({username}) registered")
        return token_for_user(user), user

    def login(self, username: str, password: str) -> Tuple[str, User]:
        user = self.db.query(User).filter(User.username == username).first()
        if user is None:
            logger.warning(f"Login failed: user '{username}' not found")
            raise NotFound("Invalid username or password", code="INVALID_CREDENTIALS")
        if not verify_password(password, user.hashed_password):
            logger.warning(f"Login failed: incorrect password for user {user.id}")
            raise Unauthenticated("Invalid username or password", code="INVALID_CREDENTIALS")

        logger.info(f"User {user.id} logged in")
        return token_for_user(user), user

    def get_users(self) -> List[User]:
        return (
            self.db.query(User)
            .options(joinedload(User.manager))
            .order_by(User.id)
            .all()
        )

    def get_user(self, user_id: int) -> User:
        user = (
            self.db.query(User)
            .options(joinedload(User.manager))
            .filter(User.id == user_id)
            .first()
        )
        if user is None:
            raise NotFound("User not found", code="USER_NOT_FOUND")
        return user

    def get_by_username(self, username: str) -> User:
        user = self.db.query(User).filter(User.username == username).first()
        if user is None:
            raise NotFound(f"User '{username}' not found", code="USER_NOT_FOUND")
        return user

    def set_manager(self, username: str, manager_username: str) -> User:
        """Point ``username`` at a new manager, keeping the tree acyclic"""
        user = self.get_by_username(username)
        manager = self.get_by_username(manager_username)

        if user.id == manager.id:
            raise ValidationError("User cannot be their own manager")
        if self.hierarchy.would_create_cycle(user.id, manager.id):
            logger.warning(f"Refused manager {manager.id} for user {user.id}: cycle")
            raise ValidationError(
                f"'{manager_username}' already reports to '{username}'; assignment would create a cycle"
            )

        user.manager_id = manager.id
        self._commit(f"Set manager of user {user.id}")
        self.db.refresh(user)

        logger.info(f"User {user.id} now reports to user {manager.id}")
        return user
