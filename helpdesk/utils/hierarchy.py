# helpdesk/utils/hierarchy.py
from typing import List
from sqlalchemy.orm import Session
from helpdesk.models.user import User


class HierarchyManager:
    """Utility class for manager/report tree lookups.

    Manager-hood is never stored: a user is a manager exactly when at least
    one other user names them as manager. Every method queries the session.
    """

    def __init__(self, db: Session):
        self.db = db

    def count_direct_reports(self, user_id: int) -> int:
        return self.db.query(User).filter(User.manager_id == user_id).count()

    def is_manager(self, user_id: int) -> bool:
        """True if anyone reports to this user"""
        return self.count_direct_reports(user_id) > 0

    def get_direct_reports(self, user_id: int) -> List[User]:
        """Get only direct reports for a given user"""
        return self.db.query(User).filter(
            User.manager_id == user_id
        ).order_by(User.id).all()

    def get_report_ids(self, user_id: int) -> List[int]:
        return [user.id for user in self.get_direct_reports(user_id)]

    def get_management_chain(self, user_id: int) -> List[User]:
        """Get the chain of managers from the user up to the root"""
        chain = []
        visited = {user_id}
        current_user = self.db.query(User).filter(User.id == user_id).first()

        while current_user and current_user.manager_id:
            # Stop on corrupted data instead of looping forever
            if current_user.manager_id in visited:
                break
            manager = self.db.query(User).filter(
                User.id == current_user.manager_id
            ).first()
            if not manager:
                break
            chain.append(manager)
            visited.add(manager.id)
            current_user = manager

        return chain

    def is_report_of(self, user_id: int, potential_manager_id: int) -> bool:
        """Check if user_id sits (directly or indirectly) under potential_manager_id"""
        return any(manager.id == potential_manager_id for manager in self.get_management_chain(user_id))

    def would_create_cycle(self, user_id: int, manager_id: int) -> bool:
        """Assigning manager_id to user_id closes a loop if the manager already reports to the user"""
        if user_id == manager_id:
            return True
        return self.is_report_of(manager_id, user_id)
