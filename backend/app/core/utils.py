from enum import StrEnum


class StringEnum(StrEnum):
    """StrEnum whose repr, str and format are all the bare value.

    Lets enum members go straight into log ``extra`` fields, Mongo filters,
    Redis channel names and template file names without ``.value``.
    """

    def __repr__(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value

    def __format__(self, format_spec: str) -> str:
        return self.value.__format__(format_spec)
