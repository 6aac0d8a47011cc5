"""Product advisor chat with a fake Gemini model."""

import pytest
from google.api_core import exceptions as google_exceptions

from logic.safety import system_instruction
from tools.product_advisor import AdvisorError, AdvisorTimeoutError, ProductAdvisor

PRODUCTS = [{"id": "cap-01", "name": "Snapback", "category": "Caps", "categoryGroup": "Headwear"}]
HISTORY = [
    {"role": "user", "parts": [{"text": "Hi"}]},
    {"role": "model", "parts": [{"text": "Hello! How can I help?"}]},
    {"role": "user", "parts": [{"text": "Which caps "}, {"text": "can be embroidered?"}]},
]


class _FakeResponse:
    def __init__(self, text: str) -> None:
        self.text = text


class _FakeChat:
    def __init__(self, model: "_FakeModel", history) -> None:
        self.model = model
        self.history = history

    def send_message(self, text, request_options=None):
        self.model.sent.append((text, request_options))
        if self.model.error:
            raise self.model.error
        return _FakeResponse("The Snapback takes 3D embroidery.")


class _FakeModel:
    def __init__(self, instruction: str, error: Exception | None = None) -> None:
        self.instruction = instruction
        self.error = error
        self.sent = []
        self.chats = []

    def start_chat(self, history):
        chat = _FakeChat(self, history)
        self.chats.append(chat)
        return chat


def _advisor(error: Exception | None = None):
    created = []

    def factory(instruction: str) -> _FakeModel:
        model = _FakeModel(instruction, error)
        created.append(model)
        return model

    return ProductAdvisor(model_name="models/test", brand_name="LEVEL CUSTOMS", model_factory=factory), created


def test_reply_sends_last_message_with_prior_history() -> None:
    advisor, created = _advisor()

    reply = advisor.reply(HISTORY, PRODUCTS)

    assert reply == "The Snapback takes 3D embroidery."
    model = created[0]
    assert "LEVEL CUSTOMS" in model.instruction
    assert "cap-01" in model.instruction
    assert model.chats[0].history == [
        {"role": "user", "parts": [{"text": "Hi"}]},
        {"role": "model", "parts": [{"text": "Hello! How can I help?"}]},
    ]
    assert model.sent == [("Which caps can be embroidered?", {"timeout": 14.0})]


def test_empty_history_is_rejected() -> None:
    advisor, _ = _advisor()
    with pytest.raises(ValueError):
        advisor.reply([], PRODUCTS)


def test_deadline_exceeded_becomes_timeout_error() -> None:
    advisor, _ = _advisor(google_exceptions.DeadlineExceeded("too slow"))
    with pytest.raises(AdvisorTimeoutError):
        advisor.reply(HISTORY, PRODUCTS)


def test_api_errors_become_advisor_errors() -> None:
    advisor, _ = _advisor(google_exceptions.ServiceUnavailable("overloaded"))
    with pytest.raises(AdvisorError) as excinfo:
        advisor.reply(HISTORY, PRODUCTS)
    assert not isinstance(excinfo.value, AdvisorTimeoutError)


def test_system_instruction_embeds_catalogue() -> None:
    instruction = system_instruction("LEVEL CUSTOMS", PRODUCTS)
    assert instruction.count("LEVEL CUSTOMS") >= 1
    assert '"categoryGroup": "Headwear"' in instruction
