"""Record-level validation shared by every model.

Invalid input never raises: ``save`` refuses the write and leaves the
field-keyed violations on ``record.errors`` for the caller to inspect.
"""

from sqlalchemy.orm import Session

BLANK_MESSAGE = "can't be blank"


class RecordInvalid(Exception):
    """Raised by callers that must abort a multi-record write."""

    def __init__(self, record, errors: dict[str, list[str]]):
        self.record = record
        self.errors = errors
        super().__init__(f'{type(record).__name__} is invalid: {errors}')


def is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def add_error(errors: dict[str, list[str]], field: str, message: str) -> None:
    errors.setdefault(field, []).append(message)


def validate_presence(errors: dict[str, list[str]], record, *fields: str) -> None:
    for field in fields:
        if is_blank(getattr(record, field, None)):
            add_error(errors, field, BLANK_MESSAGE)


def validate_boolean(errors: dict[str, list[str]], record, *fields: str) -> None:
    for field in fields:
        if not isinstance(getattr(record, field, None), bool):
            add_error(errors, field, 'must be true or false')


class ValidatedModel:
    def before_validation(self) -> None:
        pass

    def validate(self, db: Session) -> dict[str, list[str]]:
        raise NotImplementedError

    @property
    def errors(self) -> dict[str, list[str]]:
        return self.__dict__.get('_validation_errors', {})

    def is_valid(self, db: Session) -> bool:
        self.before_validation()
        self._validation_errors = self.validate(db)
        return not self._validation_errors

    def save(self, db: Session, commit: bool = True) -> bool:
        if not self.is_valid(db):
            return False

        db.add(self)
        if commit:
            db.commit()
            db.refresh(self)
        else:
            db.flush()
        return True

    def save_or_raise(self, db: Session, commit: bool = True) -> None:
        if not self.save(db, commit=commit):
            raise RecordInvalid(self, self.errors)
