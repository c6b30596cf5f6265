# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
from __future__ import annotations

import io
import logging
from typing import Any

import joblib
import numpy as np
import pandas as pd
import torch
from sklearn.metrics import accuracy_score
from sklearn.model_selection import train_test_split
from torch import nn
from torch.utils.data import DataLoader, TensorDataset

from ..env import get_int_env
from ..schemas import ClassifierConfig, EpochLog, TrainingHistory, TrainingOptions
from .dataset import frame_to_arrays

logger = logging.getLogger(__name__)


class ShapeNet(nn.Module):
    """Embedding, mean over positions, one hidden layer and a sigmoid output."""

    def __init__(self, vocab_size: int, embedding_dim: int, hidden_units: int = 16, dropout: float = 0.3) -> None:
        super().__init__()
        self.embedding = nn.Embedding(vocab_size + 1, embedding_dim)
        self.hidden = nn.Linear(embedding_dim, hidden_units)
        self.dropout = nn.Dropout(dropout)
        self.output = nn.Linear(hidden_units, 1)

    def forward(self, inputs: torch.Tensor) -> torch.Tensor:
        pooled = self.embedding(inputs).mean(dim=1)
        hidden = self.dropout(torch.relu(self.hidden(pooled)))
        return torch.sigmoid(self.output(hidden)).squeeze(-1)


def default_options() -> TrainingOptions:
    options = TrainingOptions()
    options.epochs = max(get_int_env("HOTCASE_EPOCHS", options.epochs), 1)
    seed = get_int_env("HOTCASE_SEED", -1)
    if seed >= 0:
        options.seed = seed
    return options


def build_network(vocab_size: int, config: ClassifierConfig, options: TrainingOptions | None = None) -> ShapeNet:
    opts = options or TrainingOptions()
    return ShapeNet(vocab_size, config.embedding_dim, hidden_units=opts.hidden_units, dropout=opts.dropout)


def _split(inputs: np.ndarray, labels: np.ndarray, options: TrainingOptions) -> tuple[Any, Any, Any, Any]:
    if options.validation_split <= 0 or len(labels) < 2:
        return inputs, None, labels, None
    x_train, x_val, y_train, y_val = train_test_split(
        inputs,
        labels,
        test_size=options.validation_split,
        shuffle=True,
        random_state=options.seed,
    )
    return x_train, x_val, y_train, y_val


def _evaluate(network: ShapeNet, loss_fn: nn.Module, inputs: np.ndarray, labels: np.ndarray) -> tuple[float, float]:
    network.eval()
    with torch.no_grad():
        probs = network(torch.from_numpy(inputs))
        loss = float(loss_fn(probs, torch.from_numpy(labels)).item())
    predicted = (probs.numpy() >= 0.5).astype(int)
    return loss, float(accuracy_score(labels.astype(int), predicted))


def fit_network(
    frame: pd.DataFrame,
    vocab_size: int,
    config: ClassifierConfig,
    options: TrainingOptions | None = None,
) -> tuple[ShapeNet, TrainingHistory]:
    opts = options or TrainingOptions()
    if opts.seed is not None:
        torch.manual_seed(opts.seed)

    inputs, labels = frame_to_arrays(frame)
    logger.debug("Input shape: %s, labels shape: %s", inputs.shape, labels.shape)
    x_train, x_val, y_train, y_val = _split(inputs, labels, opts)

    network = build_network(vocab_size, config, opts)
    optimizer = torch.optim.Adam(network.parameters(), lr=opts.learning_rate)
    loss_fn = nn.BCELoss()

    generator = torch.Generator()
    if opts.seed is not None:
        generator.manual_seed(opts.seed)
    loader = DataLoader(
        TensorDataset(torch.from_numpy(x_train), torch.from_numpy(y_train)),
        batch_size=opts.batch_size,
        shuffle=True,
        generator=generator,
    )

    history = TrainingHistory(
        positives=int((labels == 1).sum()),
        negatives=int((labels == 0).sum()),
        vocabulary_size=int(vocab_size),
    )
    for epoch in range(opts.epochs):
        network.train()
        for batch_inputs, batch_labels in loader:
            optimizer.zero_grad()
            loss = loss_fn(network(batch_inputs), batch_labels)
            loss.backward()
            optimizer.step()

        train_loss, train_acc = _evaluate(network, loss_fn, x_train, y_train)
        log = EpochLog(epoch=epoch + 1, loss=train_loss, acc=train_acc)
        if x_val is not None and len(y_val):
            log.val_loss, log.val_acc = _evaluate(network, loss_fn, x_val, y_val)
        history.epochs.append(log)
        logger.debug("Epoch %d: loss=%.4f, acc=%.4f", log.epoch, log.loss, log.acc)
        if log.val_loss is not None:
            logger.debug("  val_loss=%.4f, val_acc=%.4f", log.val_loss, log.val_acc)

    network.eval()
    return network, history


def dump_weights(network: ShapeNet) -> bytes:
    arrays = {name: tensor.detach().cpu().numpy() for name, tensor in network.state_dict().items()}
    buffer = io.BytesIO()
    joblib.dump(arrays, buffer)
    return buffer.getvalue()


def load_weights(blob: bytes) -> ShapeNet:
    arrays = joblib.load(io.BytesIO(blob))
    rows, embedding_dim = arrays["embedding.weight"].shape
    hidden_units = int(arrays["hidden.weight"].shape[0])
    network = ShapeNet(int(rows) - 1, int(embedding_dim), hidden_units=hidden_units)
    network.load_state_dict({name: torch.from_numpy(np.array(value)) for name, value in arrays.items()})
    network.eval()
    return network
