"""Form client: rendering, validation, drafts and submission."""
from dynaform.client.api_client import FormApiClient
from dynaform.client.draft_cache import DraftCache, JsonFileDraftStorage, MemoryDraftStorage, storage_key
from dynaform.client.errors import (
    ApiError,
    ConflictError,
    FormClientError,
    NotFoundError,
    StorageAccessError,
    TransportError,
)
from dynaform.client.form_session import DynamicFormSession
from dynaform.client.messages import MessageService, MessageType
from dynaform.client.renderers import RendererKind, build_widgets, select_renderer
from dynaform.client.schemas import FieldDefinition
from dynaform.client.transformer import transform_answers
from dynaform.client.validation import validate_all_fields, validate_field

__all__ = [
    "ApiError",
    "ConflictError",
    "DraftCache",
    "DynamicFormSession",
    "FieldDefinition",
    "FormApiClient",
    "FormClientError",
    "JsonFileDraftStorage",
    "MemoryDraftStorage",
    "MessageService",
    "MessageType",
    "NotFoundError",
    "RendererKind",
    "StorageAccessError",
    "TransportError",
    "build_widgets",
    "select_renderer",
    "storage_key",
    "transform_answers",
    "validate_all_fields",
    "validate_field",
]
