"""
Holds one customer draft, validates it and saves it to the Directory Service.

Field errors stay inside the editor as ``state.errors``; transport failures
become ``state.error`` and leave the draft untouched so the user can retry.
"""

from functools import partial
from typing import Awaitable, Callable, Dict, Optional, Union
import asyncio
import inspect
import logging

from crm.api_client import APIClientError, DirectoryAPIClient
from crm.draft import (
    CustomerDraft,
    DraftField,
    EditorMode,
    EditorState,
    apply_field,
    begin_submit,
    closed,
    end_submit,
    open_create,
    open_edit,
    submit_failed,
    with_errors,
)
from crm.log import build_default_logger
from crm.models import CustomerRecord
from crm.validation import validate_draft

OnSaved = Callable[[], Union[None, Awaitable[None]]]
PasswordFactory = Callable[[CustomerDraft], Optional[str]]


class DraftNotLoadedError(RuntimeError):
    """Raised when the editor is used before ``load``."""


def no_password(draft: CustomerDraft) -> Optional[str]:
    return None


class CustomerEditor:
    def __init__(
        self,
        client: DirectoryAPIClient,
        on_saved: Optional[OnSaved] = None,
        password_factory: PasswordFactory = no_password,
        logger: Optional[logging.Logger] = None,
    ):
        self.client = client
        self.on_saved = on_saved
        self.password_factory = password_factory
        self.logger = logger or build_default_logger(self.__class__.__name__)
        self._state = closed()

    @property
    def state(self) -> EditorState:
        return self._state

    def load(self, record: Optional[CustomerRecord] = None) -> EditorState:
        """Open ``record`` for editing, or a blank draft when None."""
        self._state = open_edit(record) if record is not None else open_create()
        return self._state

    async def load_by_id(self, user_id: str) -> EditorState:
        try:
            record = await asyncio.to_thread(self.client.get_user, user_id)
        except APIClientError as exc:
            self.logger.warning("Loading customer %s failed: %s", user_id, exc)
            self._state = self._state.model_copy(update={"error": exc.message})
            return self._state
        return self.load(record)

    def cancel(self) -> None:
        self._state = closed()

    def set_field(self, field: Union[DraftField, str], value: str) -> EditorState:
        self._require_draft()
        self._state = apply_field(self._state, DraftField.from_path(field), value)
        return self._state

    def validate(self) -> Dict[str, str]:
        self._require_draft()
        return validate_draft(self._state.draft, self._state.mode)

    async def submit(self) -> bool:
        """
        Validate and save the draft.
        Returns True when the Directory Service accepted it; the draft is then
        cleared and ``on_saved`` is invoked once.
        """
        self._require_draft()
        if self._state.submitting:
            return False

        errors = self.validate()
        self._state = with_errors(self._state, errors)
        if errors:
            self.logger.debug("Draft has invalid fields: %s", sorted(errors))
            return False

        draft = self._state.draft
        if self._state.mode is EditorMode.EDIT:
            save = partial(
                self.client.update_user, self._state.original_id, draft.to_update_request()
            )
        else:
            password = self.password_factory(draft)
            save = partial(self.client.create_user, draft.to_create_request(password=password))

        self._state = begin_submit(self._state)
        try:
            await asyncio.to_thread(save)
        except APIClientError as exc:
            self.logger.warning("Saving customer failed: %s", exc)
            self._state = submit_failed(self._state, exc.message)
            return False
        finally:
            if self._state.submitting:
                self._state = end_submit(self._state)

        self._state = closed()
        await self._notify_saved()
        return True

    async def _notify_saved(self) -> None:
        if self.on_saved is None:
            return
        result = self.on_saved()
        if inspect.isawaitable(result):
            await result

    def _require_draft(self) -> None:
        if not self._state.is_open:
            raise DraftNotLoadedError("No customer draft is loaded")
