import logging
from typing import List, Tuple

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from episupport.models.models import User, UserSupportRelation

logger = logging.getLogger(__name__)


class SupportRelationGraph:
    """
    Many-to-many links between monitored users and their support users.

    Pair uniqueness is enforced by the `uq_monitored_support` constraint;
    an insert rejected by it is reported as "already linked", not an error.
    """

    def __init__(self, db: Session):
        self.db = db

    # ---------------- LOOKUPS ----------------
    def _relation(self, monitored_id: int, support_id: int):
        return (
            self.db.query(UserSupportRelation)
            .filter(
                UserSupportRelation.monitored_user_id == monitored_id,
                UserSupportRelation.support_user_id == support_id,
            )
            .first()
        )

    def _require_user(self, user_id: int, label: str) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise HTTPException(status_code=404, detail=f"{label} user {user_id} not found")
        return user

    def exists(self, monitored_id: int, support_id: int) -> bool:
        return self._relation(monitored_id, support_id) is not None

    # ---------------- MUTATIONS ----------------
    def add(self, monitored_id: int, support_id: int) -> bool:
        """Link the pair. Returns True if a row was created, False if it was already there."""
        self._require_user(monitored_id, "Monitored")
        self._require_user(support_id, "Support")

        relation = UserSupportRelation(monitored_user_id=monitored_id, support_user_id=support_id)
        self.db.add(relation)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info("Support relation %s -> %s already exists", monitored_id, support_id)
            return False

        logger.info("Support relation %s -> %s created (id=%s)", monitored_id, support_id, relation.id)
        return True

    def remove(self, monitored_id: int, support_id: int) -> bool:
        deleted = (
            self.db.query(UserSupportRelation)
            .filter(
                UserSupportRelation.monitored_user_id == monitored_id,
                UserSupportRelation.support_user_id == support_id,
            )
            .delete(synchronize_session=False)
        )
        self.db.commit()
        if deleted:
            logger.info("Support relation %s -> %s removed", monitored_id, support_id)
        return bool(deleted)

    def toggle(self, monitored_id: int, support_id: int) -> bool:
        """Remove the link if present, add it otherwise. Returns the new link state."""
        if self.exists(monitored_id, support_id):
            self.remove(monitored_id, support_id)
            return False
        self.add(monitored_id, support_id)
        return True

    # ---------------- QUERIES ----------------
    def list_supporters_of(self, monitored_id: int) -> List[User]:
        return (
            self.db.query(User)
            .join(UserSupportRelation, UserSupportRelation.support_user_id == User.id)
            .filter(UserSupportRelation.monitored_user_id == monitored_id)
            .all()
        )

    def list_monitored_of(self, support_id: int) -> List[Tuple[User, int]]:
        """Monitored users linked to `support_id`, each with the size of their whole support team."""
        team = aliased(UserSupportRelation)
        team_sizes = (
            self.db.query(team.monitored_user_id.label("monitored_user_id"), func.count(team.id).label("team_size"))
            .group_by(team.monitored_user_id)
            .subquery()
        )
        rows = (
            self.db.query(User, team_sizes.c.team_size)
            .select_from(User)
            .join(UserSupportRelation, UserSupportRelation.monitored_user_id == User.id)
            .join(team_sizes, team_sizes.c.monitored_user_id == User.id)
            .filter(UserSupportRelation.support_user_id == support_id)
            .all()
        )
        return [(user, int(size)) for user, size in rows]
