"""
Tests for the OpenAI-compatible Reasoner and Embedder clients
"""
from types import SimpleNamespace
from unittest.mock import MagicMock

import numpy as np
import pytest

from causal_sage.config import Config
from causal_sage.llm import (
    Message,
    OpenAIEmbedder,
    OpenAIReasoner,
    ReasonerOptions,
    embed_texts,
)

from conftest import FakeEmbedder, vec


def _chat_response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def test_reasoner_sends_messages_and_sampling_options():
    client = MagicMock()
    client.chat.completions.create.return_value = _chat_response('{"1": {}}')
    config = Config(llm_model="llama3.1")
    reasoner = OpenAIReasoner(config, client=client)

    reply = reasoner.complete(
        [Message(role="system", content="sys"), Message(role="user", content="text")],
        config.reasoner_options(),
    )

    assert reply == '{"1": {}}'
    client.chat.completions.create.assert_called_once_with(
        model="llama3.1",
        messages=[{"role": "system", "content": "sys"}, {"role": "user", "content": "text"}],
        temperature=0.0,
        top_p=1.0,
        seed=42,
    )


def test_reasoner_omits_unset_options():
    client = MagicMock()
    client.chat.completions.create.return_value = _chat_response(None)
    reasoner = OpenAIReasoner(Config(llm_model="fallback"), client=client)

    assert reasoner.complete([Message(role="user", content="hi")], ReasonerOptions()) == ""
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "fallback"
    assert "seed" not in kwargs and "temperature" not in kwargs


def test_embedder_flattens_newlines_and_uses_configured_model():
    client = MagicMock()
    client.embeddings.create.return_value = SimpleNamespace(data=[SimpleNamespace(embedding=[0.1, 0.2])])
    embedder = OpenAIEmbedder(Config(embedding_model="bge-m3:latest"), client=client)

    assert embedder.embed("line one\nline two") == [0.1, 0.2]
    client.embeddings.create.assert_called_once_with(model="bge-m3:latest", input="line one line two")


def test_embed_texts_preserves_input_order():
    texts = [f"text {i}" for i in range(10)]
    embedder = FakeEmbedder({t: vec(float(i + 1)) for i, t in enumerate(texts)})

    matrix = embed_texts(embedder, texts, max_workers=4)

    assert matrix.shape == (10, 64)
    assert list(matrix[:, 0]) == [float(i + 1) for i in range(10)]


def test_embed_texts_empty_input():
    embedder = FakeEmbedder()
    assert embed_texts(embedder, []).shape == (0, 0)
    assert embedder.requests == []


def test_embed_texts_rejects_ragged_vectors():
    embedder = FakeEmbedder({"a": [1.0, 0.0], "b": [1.0, 0.0, 0.0]})
    with pytest.raises(ValueError):
        embed_texts(embedder, ["a", "b"])


def test_embed_texts_returns_float_matrix():
    embedder = FakeEmbedder({"a": [1, 2], "b": [3, 4]})
    matrix = embed_texts(embedder, ["a", "b"], max_workers=1)
    assert matrix.dtype == np.float64
    assert matrix.tolist() == [[1.0, 2.0], [3.0, 4.0]]
