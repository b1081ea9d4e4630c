from beanie.operators import Eq

from app.db.docs import UserDocument
from app.db.repositories.notification_repository import translate_persistence_errors
from app.domain.user import DomainRecipient


class UserRepository:
    @translate_persistence_errors
    async def get_recipient(self, user_id: str) -> DomainRecipient | None:
        doc = await UserDocument.find_one(Eq(UserDocument.user_id, user_id))
        if not doc:
            return None
        return DomainRecipient(
            user_id=doc.user_id,
            email=doc.email,
            first_name=doc.first_name,
            last_name=doc.last_name,
        )
