"""
Test suite for provider and index factories.

Provider classes are patched so no credentials are needed.

System role: Verification of client selection from settings
"""

from unittest.mock import patch

import pytest

from agent_rag.boundary.vdb import QdrantVectorIndex, get_vector_index
from agent_rag.configs.embedding import EmbeddingSettings
from agent_rag.configs.vector_store import VectorStoreSettings
from agent_rag.core.document_processing.embedding_factory import get_embeddings

FACTORY = "agent_rag.core.document_processing.embedding_factory"


class TestGetEmbeddings:
    """Test suite for get_embeddings()."""

    def test_google_provider_pins_dimension(self) -> None:
        settings = EmbeddingSettings(provider="google", model="models/gemini-embedding-001", dimension=768)

        with patch(f"{FACTORY}.FixedDimensionEmbeddings") as mock_google:
            embeddings = get_embeddings(settings)

        assert embeddings is mock_google.return_value
        mock_google.assert_called_once_with(
            model="models/gemini-embedding-001",
            output_dimensionality=768,
        )

    def test_bedrock_provider_uses_region(self) -> None:
        settings = EmbeddingSettings(
            provider="Bedrock",
            model="amazon.titan-embed-text-v2:0",
            region="eu-west-1",
        )

        with patch(f"{FACTORY}.BedrockEmbeddings") as mock_bedrock:
            embeddings = get_embeddings(settings)

        assert embeddings is mock_bedrock.return_value
        mock_bedrock.assert_called_once_with(
            model_id="amazon.titan-embed-text-v2:0",
            region_name="eu-west-1",
        )

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValueError):
            get_embeddings(EmbeddingSettings(provider="openai"))


class TestGetVectorIndex:
    """Test suite for get_vector_index()."""

    def test_qdrant_index_is_bound_to_configured_collection(self) -> None:
        index = get_vector_index(VectorStoreSettings(collection_name="agent_chunks"))

        assert isinstance(index, QdrantVectorIndex)
        assert index.collection_name == "agent_chunks"

    def test_unknown_store_type_raises(self) -> None:
        with pytest.raises(ValueError):
            get_vector_index(VectorStoreSettings(store_type="faiss"))
