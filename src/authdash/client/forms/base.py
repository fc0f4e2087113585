"""Shared form machinery: fields, validation and the submit protocol."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
import inspect
from typing import Any, ClassVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from authdash.client.auth_client import AuthResult
from authdash.core.exceptions import AppException
from authdash.core.logging import get_logger

logger = get_logger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"

Callback = Callable[[], Awaitable[None] | None]


async def invoke_callback(callback: Callback | None) -> None:
    """Call an optional callback that may be sync or async."""
    if callback is None:
        return
    result = callback()
    if inspect.isawaitable(result):
        await result


@dataclass
class FormField:
    name: str
    value: str = ""
    touched: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def show_errors(self) -> bool:
        """Errors are only displayed once the user has interacted."""
        return self.touched and not self.is_valid


class FormController(ABC):
    """Base class for the auth forms.

    Subclasses set `schema` and `fallback_error` and implement `_call`
    (the single auth request) and optionally `_handle_success`.

    Validation runs eagerly on every change; whether an error is shown is
    decided by `FormField.show_errors`.
    """

    schema: ClassVar[type[BaseModel]]
    fallback_error: ClassVar[str] = UNEXPECTED_ERROR_MESSAGE

    def __init__(
        self,
        auth_client: Any,
        *,
        schema: type[BaseModel] | None = None,
        on_success: Callback | None = None,
    ):
        self.auth_client = auth_client
        self.form_schema = schema or self.schema
        self.on_success = on_success
        self.fields = {
            name: FormField(name=name) for name in self.form_schema.model_fields
        }
        self.is_submitting = False
        self.error: str | None = None
        self._validate()

    @property
    def values(self) -> dict[str, str]:
        return {name: f.value for name, f in self.fields.items()}

    @property
    def can_submit(self) -> bool:
        return all(f.is_valid for f in self.fields.values())

    def set_value(self, name: str, value: str) -> None:
        self.fields[name].value = value
        self._validate()

    def blur(self, name: str) -> None:
        self.fields[name].touched = True

    def errors_for(self, name: str) -> list[str]:
        form_field = self.fields[name]
        return list(form_field.errors) if form_field.show_errors else []

    def _validate(self) -> BaseModel | None:
        """Re-run the schema and store each field's violated rule.

        Returns the validated model, or None if any field is invalid.
        """
        errors: dict[str, list[str]] = {}
        try:
            values = self.values
            validated = self.form_schema.model_validate(
                values, context={"values": values}
            )
        except SchemaValidationError as e:
            for error in e.errors():
                if error["loc"]:
                    errors.setdefault(str(error["loc"][0]), []).append(error["msg"])
            validated = None
        for name, form_field in self.fields.items():
            form_field.errors = errors.get(name, [])
        return validated

    async def submit(self) -> bool:
        """Validate and send the form.

        Returns True when the auth call succeeded. A submit while another is
        in flight does nothing.
        """
        if self.is_submitting:
            return False

        self.error = None
        self._reset_outcome()
        for form_field in self.fields.values():
            form_field.touched = True
        data = self._validate()
        if data is None:
            return False

        self.is_submitting = True
        try:
            result = await self._call(data)
        except AppException as e:
            logger.warning("form_submit_failed", form=type(self).__name__, error=e.message)
            self.error = e.message or UNEXPECTED_ERROR_MESSAGE
            return False
        except Exception as e:
            logger.exception("form_submit_unexpected_error", form=type(self).__name__)
            self.error = str(e) or UNEXPECTED_ERROR_MESSAGE
            return False
        finally:
            self.is_submitting = False

        if result.error is not None:
            self.error = result.error.message or self.fallback_error
            return False

        await self._handle_success()
        return True

    @abstractmethod
    async def _call(self, data: Any) -> AuthResult:
        """Send the single auth request for validated `data`."""

    def _reset_outcome(self) -> None:
        """Clear per-form outcome state at the start of a submit."""

    async def _handle_success(self) -> None:
        await invoke_callback(self.on_success)

    def close(self) -> None:
        """Release anything the form scheduled; called when it is replaced."""
