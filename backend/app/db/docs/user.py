from beanie import Document
from pydantic import ConfigDict


class UserDocument(Document):
    """Read-only view over the users collection owned by the accounts service.

    Only the fields needed to address an email are mapped; everything else is ignored.
    """

    user_id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    is_active: bool = True

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    class Settings:
        name = "users"
