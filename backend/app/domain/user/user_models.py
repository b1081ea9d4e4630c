from pydantic.dataclasses import dataclass


@dataclass
class DomainRecipient:
    """The slice of a user profile needed to address an email."""

    user_id: str
    email: str
    first_name: str = ""
    last_name: str = ""

    @property
    def display_name(self) -> str:
        return self.first_name or self.email.split("@", 1)[0]
