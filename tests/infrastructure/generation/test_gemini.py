from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from flashify.domain.errors import GenerationError
from flashify.infrastructure.adapters.generation import GeminiFlashcardGenerator


@pytest.fixture
def mock_genai():
    with patch("flashify.infrastructure.adapters.generation.gemini.genai") as genai:
        model = MagicMock()
        model.generate_content_async = AsyncMock(return_value=MagicMock(text='[{"question": "Q", "answer": "A"}]'))
        genai.GenerativeModel.return_value = model
        yield genai, model


@pytest.mark.asyncio
async def test_generate_configures_once_and_returns_text(mock_genai):
    genai, model = mock_genai
    gen = GeminiFlashcardGenerator(api_key="test-key", default_model="gemini-default")

    first = await gen.generate("prompt one")
    await gen.generate("prompt two", model="gemini-other")

    assert first == '[{"question": "Q", "answer": "A"}]'
    genai.configure.assert_called_once_with(api_key="test-key")
    assert [c.args[0] for c in genai.GenerativeModel.call_args_list] == ["gemini-default", "gemini-other"]
    model.generate_content_async.assert_awaited_with("prompt two")


@pytest.mark.asyncio
async def test_missing_api_key(mock_genai):
    genai, _ = mock_genai
    with pytest.raises(GenerationError):
        await GeminiFlashcardGenerator(api_key=None).generate("prompt")
    genai.GenerativeModel.assert_not_called()


@pytest.mark.asyncio
async def test_empty_response(mock_genai):
    _, model = mock_genai
    model.generate_content_async.return_value = MagicMock(text="")
    with pytest.raises(GenerationError):
        await GeminiFlashcardGenerator(api_key="k").generate("prompt")
