"""
State of one rendered form: answers, field errors, draft autosave and
submission.
"""
import logging
from typing import Dict, List, Optional, Sequence

from dynaform.client.api_client import FormApiClient
from dynaform.client.defaults import initial_answers
from dynaform.client.draft_cache import DraftCache, storage_key
from dynaform.client.errors import ApiError
from dynaform.client.messages import MessageService
from dynaform.client.renderers import Widget, build_widgets
from dynaform.client.schemas import Answer, AnswerSet, FieldDefinition
from dynaform.client.validation import validate_all_fields

logger = logging.getLogger(__name__)

DRAFT_SAVED = "Form data saved locally!"
DRAFT_RESTORED = "Form data restored from local storage!"
DRAFT_CLEARED = "Form cleared and local storage removed!"
FIX_ERRORS = "Please fix the errors below"
SUBMIT_SUCCESS = "Form submitted successfully!"
SUBMIT_FAILED = "Failed to submit form"


class DynamicFormSession:
    def __init__(
        self,
        fields: Sequence[FieldDefinition],
        api: FormApiClient,
        drafts: DraftCache,
        messages: Optional[MessageService] = None,
    ):
        self.fields: List[FieldDefinition] = list(fields)
        self.api = api
        self.drafts = drafts
        self.messages = messages or MessageService()
        self.key = storage_key(self.fields)
        self.answers: AnswerSet = initial_answers(self.fields)
        self.errors: Dict[str, str] = {}
        self.submitting = False

    async def start(self) -> None:
        """Begin autosaving and pick up a stored draft, if there is one."""
        self.drafts.start()
        stored = self.drafts.load(self.key, self.fields)
        if stored:
            self.answers = stored
            logger.info("Restored draft %s", self.key)

    async def aclose(self) -> None:
        await self.drafts.aclose()

    async def __aenter__(self) -> "DynamicFormSession":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def widgets(self) -> List[Widget]:
        return build_widgets(self.fields, self.answers, self.errors, self.change)

    def change(self, name: str, value: Answer) -> None:
        self.answers[name] = value
        self.errors.pop(name, None)
        self.drafts.schedule_save(self.key, self.answers)

    # Manual draft actions

    def save_draft(self) -> None:
        self.drafts.save(self.key, self.answers)
        self.messages.show_info(DRAFT_SAVED)

    def restore_draft(self) -> None:
        stored = self.drafts.load(self.key, self.fields)
        if stored:
            self.answers = stored
            self.errors = {}
            self.messages.show_info(DRAFT_RESTORED)

    def clear_draft(self) -> None:
        self.drafts.cancel_pending()
        self.drafts.clear(self.key)
        self.answers = initial_answers(self.fields)
        self.errors = {}
        self.messages.show_info(DRAFT_CLEARED)

    async def submit(self) -> bool:
        """Validate and submit. Returns True when the backend accepted the answers."""
        self.errors = validate_all_fields(self.answers, self.fields)
        if self.errors:
            self.messages.show_error(FIX_ERRORS)
            return False

        self.submitting = True
        try:
            await self.api.submit_form_data(self.answers)
        except ApiError as exc:
            logger.warning("Form submission failed: %s", exc.message)
            self.messages.show_error(exc.message or SUBMIT_FAILED)
            return False
        finally:
            self.submitting = False

        self.drafts.cancel_pending()
        self.drafts.clear(self.key)
        self.answers = initial_answers(self.fields)
        self.messages.show_success(SUBMIT_SUCCESS)
        return True
