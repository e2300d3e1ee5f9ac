"""
Base class for Value Objects.

Value Objects are immutable objects that are defined by their attributes
rather than by identity. Two value objects are equal if all their
attributes are equal.

Example:
    @dataclass(frozen=True)
    class SessionStats(ValueObject):
        deck_id: DeckId
        viewed: int

        def __post_init__(self) -> None:
            if self.viewed < 0:
                raise ValidationError("Viewed count cannot be negative")
"""


class ValueObject:
    """
    Base class for Value Objects in the domain model.

    Subclasses should be decorated with @dataclass(frozen=True)
    and implement validation in __post_init__.
    """

    def to_primitive(self) -> object:
        """
        Convert to primitive Python type for serialization.

        Default returns the first attribute value for single-value VOs.
        """
        values = list(self.__dict__.values())
        if len(values) == 1:
            return values[0]
        return dict(self.__dict__)
