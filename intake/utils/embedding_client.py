"""
Sentence Embedding Client - Optional transformer encoder for intent similarity

Responsibilities:
- Load a sentence-embedding model and tokenizer from HuggingFace
- Encode a batch of texts into mean-pooled, L2-normalised vectors

Design principles:
- Dependency injection (no singleton); the caller decides whether to load it
- Fail fast on load errors so the caller can stay on the TF-IDF backend
- Never logs the texts being encoded
"""

import logging
from typing import List, Sequence

import torch
from transformers import AutoModel, AutoTokenizer

from intake.config import DEFAULT_EMBEDDING_MODEL

logger = logging.getLogger(__name__)

DEVICE_CUDA = "cuda"
DEVICE_CPU = "cpu"
MAX_LENGTH = 128


class SentenceEmbeddingClient:
    """Wrapper around a HuggingFace encoder producing sentence vectors"""

    def __init__(self, model_name: str = DEFAULT_EMBEDDING_MODEL, device: str = DEVICE_CPU) -> None:
        """
        Initialize model and tokenizer

        Args:
            model_name: HuggingFace model identifier
            device: Device to use ("cuda" or "cpu")

        Raises:
            RuntimeError: If CUDA requested but not available
            Exception: If model loading fails
        """
        self.model_name = model_name
        self.device = device

        if device == DEVICE_CUDA and not torch.cuda.is_available():
            raise RuntimeError("CUDA requested but not available. Check nvidia-smi.")

        logger.info(f"Loading embedding model: {model_name}")
        logger.info(f"Device: {device}")

        try:
            self.tokenizer = AutoTokenizer.from_pretrained(model_name)
            self.model = AutoModel.from_pretrained(model_name)
        except Exception as e:
            logger.error(f"Failed to load embedding model: {type(e).__name__}")
            raise

        self.model.to(device)
        self.model.eval()
        logger.info("Embedding client initialized successfully")

    def encode(self, texts: Sequence[str]) -> List[List[float]]:
        """
        Encode texts into sentence vectors

        Args:
            texts: Batch of texts

        Returns:
            One L2-normalised vector per text
        """
        if not texts:
            return []

        batch = self.tokenizer(
            list(texts),
            padding=True,
            truncation=True,
            max_length=MAX_LENGTH,
            return_tensors="pt",
        ).to(self.device)

        with torch.no_grad():
            output = self.model(**batch)

        # Mean pooling over real tokens only
        mask = batch["attention_mask"].unsqueeze(-1).float()
        summed = (output.last_hidden_state * mask).sum(dim=1)
        counts = mask.sum(dim=1).clamp(min=1e-9)
        embeddings = torch.nn.functional.normalize(summed / counts, p=2, dim=1)
        return embeddings.cpu().tolist()
