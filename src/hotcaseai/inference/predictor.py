# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
from __future__ import annotations

import json
import logging
from collections.abc import Sequence

import numpy as np
import torch

from ..features import build_vocabulary, encode_tokens, extract_tokens, normalize_training_samples
from ..schemas import (
    DEFAULT_EMBEDDING_DIM,
    DEFAULT_MAX_SEQUENCE_LENGTH,
    ClassifierConfig,
    ClassifierState,
    TrainingHistory,
    TrainingOptions,
)
from ..storage import KeyValueStore, StoredValue, default_store
from ..training.dataset import build_training_frame
from ..training.trainer import default_options, dump_weights, fit_network, load_weights
from .cache import ModelCache

logger = logging.getLogger(__name__)

STORAGE_WEIGHTS = "classifier"
STORAGE_CONFIG = "classifier_config"
STORAGE_TOKENIZER = "classifier_tokenizer"


def storage_keys(model_id: str) -> dict[str, str]:
    return {
        "weights": f"{STORAGE_WEIGHTS}_{model_id}",
        "config": f"{STORAGE_CONFIG}_{model_id}",
        "tokenizer": f"{STORAGE_TOKENIZER}_{model_id}",
    }


def score_text(state: ClassifierState | None, text: str) -> float:
    """Sigmoid confidence that ``text`` belongs to the class ``state`` was trained on.

    Returns 0.0 instead of raising when the state is unusable, when none of the
    text's tokens are known, or when the forward pass fails.
    """
    if state is None or not state.usable:
        logger.warning("Model not loaded or not trained")
        return 0.0

    tokens = extract_tokens(text)
    sequence = encode_tokens(tokens, state.vocabulary, state.config.max_sequence_length)
    known = sum(1 for value in sequence if value > 0)
    logger.debug("Non-zero token count: %d", known)

    if known == 0:
        logger.warning("Input text contains no known tokens: text=%r", text)
        matching = [token for token in tokens if token in state.vocabulary]
        if not matching:
            logger.warning("No matching tokens found")
            return 0.0
        logger.debug("Matching tokens found: %s", ", ".join(matching[:5]))

    try:
        network = state.network
        network.eval()
        with torch.no_grad():
            output = network(torch.tensor([sequence], dtype=torch.long))
        confidence = float(output.reshape(-1)[0].item())
    except Exception:
        logger.exception("Prediction error for text=%r", text)
        return 0.0
    logger.debug("Raw prediction confidence: %s", confidence)
    return confidence


class ShapeClassifier:
    """Single-class text classifier trained from positive examples only."""

    def __init__(
        self,
        model_id: str,
        *,
        store: KeyValueStore | None = None,
        cache: ModelCache | None = None,
        max_sequence_length: int = DEFAULT_MAX_SEQUENCE_LENGTH,
        embedding_dim: int = DEFAULT_EMBEDDING_DIM,
    ) -> None:
        self.model_id = model_id
        self.store = store if store is not None else default_store()
        self.cache = cache if cache is not None else default_cache()
        self.max_sequence_length = max_sequence_length
        self.embedding_dim = embedding_dim
        self.state: ClassifierState | None = None

    @property
    def trained(self) -> bool:
        return self.state is not None and self.state.usable

    @property
    def vocabulary_size(self) -> int:
        return len(self.state.vocabulary) if self.state is not None else 0

    def train(self, positive_data: str | Sequence[str], options: TrainingOptions | None = None) -> TrainingHistory:
        samples = normalize_training_samples(positive_data)
        opts = options or default_options()
        try:
            vocabulary = build_vocabulary(samples)
            config = ClassifierConfig(
                max_sequence_length=self.max_sequence_length,
                embedding_dim=self.embedding_dim,
                tokenizer_size=len(vocabulary),
            )
            frame = build_training_frame(
                samples,
                vocabulary,
                config.max_sequence_length,
                rng=np.random.default_rng(opts.seed),
            )
            logger.debug("Training model %s on %d samples", self.model_id, len(frame))
            network, history = fit_network(frame, len(vocabulary), config, opts)
            config.model_trained = True
            state = ClassifierState(network=network, vocabulary=vocabulary, config=config)
            self._persist(state)
        except Exception:
            logger.exception("Training failed for model %s", self.model_id)
            self.debug_info()
            raise
        self.state = state
        logger.info("Model %s trained: vocabulary=%d", self.model_id, len(vocabulary))
        return history

    def predict(self, text: str) -> float:
        confidence = score_text(self.state, text)
        if self.trained:
            self.cache.touch(self.model_id)
        return confidence

    def save_model(self) -> None:
        if self.state is None or self.state.network is None:
            logger.warning("No model to save: %s", self.model_id)
            return
        self._persist(self.state)

    def _persist(self, state: ClassifierState) -> None:
        keys = storage_keys(self.model_id)
        state.config.tokenizer_size = len(state.vocabulary)
        values = {
            "weights": dump_weights(state.network),
            "tokenizer": json.dumps([[token, index] for token, index in state.vocabulary.items()]),
            "config": json.dumps(state.config.to_dict()),
        }
        previous = {name: self.store.get(key) for name, key in keys.items()}
        try:
            for name, value in values.items():
                self.store.set(keys[name], value)
        except Exception:
            logger.error("Persisting model %s failed, restoring previous artifacts", self.model_id)
            self._restore(keys, previous)
            raise
        self.cache.put(self.model_id, state)
        logger.debug("Model saved and cached: %s, tokenizer size: %d", self.model_id, len(state.vocabulary))

    def _restore(self, keys: dict[str, str], previous: dict[str, StoredValue | None]) -> None:
        for name, key in keys.items():
            try:
                if previous[name] is None:
                    self.store.remove(key)
                else:
                    self.store.set(key, previous[name])
            except Exception:
                logger.exception("Could not restore %s for model %s", key, self.model_id)

    def load_model(self) -> bool:
        cached = self.cache.get(self.model_id)
        if cached is not None and cached.state.network is not None:
            logger.debug("Loading model from cache: %s", self.model_id)
            self.state = cached.state
            self.cache.touch(self.model_id)
            return True

        keys = storage_keys(self.model_id)
        try:
            tokenizer_data = self.store.get(keys["tokenizer"])
            config_data = self.store.get(keys["config"])
            if not tokenizer_data or not config_data:
                logger.debug("No saved model data found for %s", self.model_id)
                return False

            blob = self.store.get(keys["weights"])
            if not isinstance(blob, bytes):
                raise ValueError(f"Missing or invalid weights for model {self.model_id}")
            network = load_weights(blob)
            vocabulary = {str(token): int(index) for token, index in json.loads(tokenizer_data)}
            config = ClassifierConfig.from_dict(json.loads(config_data))
            if network.embedding.num_embeddings != len(vocabulary) + 1:
                raise ValueError(
                    f"Weights of model {self.model_id} expect {network.embedding.num_embeddings - 1} tokens, "
                    f"vocabulary has {len(vocabulary)}"
                )
            if config.tokenizer_size and config.tokenizer_size != len(vocabulary):
                logger.warning(
                    "Tokenizer size mismatch: expected=%d, actual=%d", config.tokenizer_size, len(vocabulary)
                )
            state = ClassifierState(network=network, vocabulary=vocabulary, config=config)
        except Exception:
            logger.exception("Failed to load model %s", self.model_id)
            self.state = None
            return False

        self.cache.put(self.model_id, state)
        self.state = state
        logger.debug("Model loaded and cached: %s", self.model_id)
        return True

    def clear_saved_model(self) -> None:
        clear_saved_model(self.model_id, store=self.store, cache=self.cache)
        self.state = None

    def debug_info(self) -> None:
        logger.debug("=== Classifier debug info ===")
        logger.debug("Model id: %s", self.model_id)
        logger.debug("Tokenizer size: %d", self.vocabulary_size)
        logger.debug("Max sequence length: %d", self.max_sequence_length)
        logger.debug("Embedding dim: %d", self.embedding_dim)
        logger.debug("Model exists: %s", self.state is not None and self.state.network is not None)
        logger.debug("Trained: %s", self.trained)
        if self.state is not None and self.state.vocabulary:
            sample = list(self.state.vocabulary.items())[:10]
            logger.debug("Sample tokens: %s", ", ".join(f"{token}:{index}" for token, index in sample))


def clear_saved_model(model_id: str, *, store: KeyValueStore, cache: ModelCache) -> None:
    cache.remove(model_id)
    for key in storage_keys(model_id).values():
        store.remove(key)
    logger.debug("Cleared saved model data: %s", model_id)


def model_info(model_id: str, *, store: KeyValueStore) -> dict[str, float]:
    keys = storage_keys(model_id)
    vocabulary = 0
    config_data = store.get(keys["config"])
    if config_data:
        vocabulary = int(json.loads(config_data).get("tokenizerSize") or 0)
    blob = store.get(keys["weights"])
    size = len(blob) if blob else 0
    return {"size_kb": round(size / 1024.0, 2), "vocabulary": float(vocabulary)}


def predict(
    model_id: str,
    text: str,
    *,
    store: KeyValueStore | None = None,
    cache: ModelCache | None = None,
) -> float | None:
    """Score ``text`` with the model ``model_id``, loading it into the cache on first use.

    Returns ``None`` when the model cannot be loaded or was never trained.
    """
    model_cache = cache if cache is not None else default_cache()
    try:
        entry = model_cache.get(model_id)
        if entry is None or entry.state.network is None:
            logger.debug("Model not in cache, attempting to load: %s", model_id)
            classifier = ShapeClassifier(model_id, store=store, cache=model_cache)
            if not classifier.load_model():
                logger.warning("Unable to load model: %s", model_id)
                return None
            entry = model_cache.get(model_id)
            if entry is None:
                logger.error("Model not found in cache after loading: %s", model_id)
                return None

        model_cache.touch(model_id)
        if not entry.state.config.model_trained:
            logger.warning("Model not trained yet: %s", model_id)
            return None
        return score_text(entry.state, text)
    except Exception:
        logger.exception("Prediction failed for model %s", model_id)
        return None


_CACHE: ModelCache | None = None


def default_cache() -> ModelCache:
    global _CACHE
    if _CACHE is not None:
        return _CACHE
    _CACHE = ModelCache()
    return _CACHE
