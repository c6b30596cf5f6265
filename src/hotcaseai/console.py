# -*- coding: utf-8 -*-
# SPDX-License-Identifier: MPL-2.0
# Copyright (c) 2026 muffydu37
from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .env import get_env
from .schemas import TrainingHistory

ASCII_BANNER = r"""
 _   _  ___ _____ ____    _    ____  _____
| | | |/ _ \_   _/ ___|  / \  / ___|| ____|
| |_| | | | || || |     / _ \ \___ \|  _|
|  _  | |_| || || |___ / ___ \ ___) | |___
|_| |_|\___/ |_| \____/_/   \_\____/|_____|
"""

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(level: str | None = None) -> None:
    name = (level or get_env("HOTCASE_LOG_LEVEL", "INFO") or "INFO").upper()
    if name not in VALID_LOG_LEVELS:
        name = "INFO"
    logging.basicConfig(
        level=getattr(logging, name),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


@dataclass
class MLConsole:
    enabled: bool = True

    def __post_init__(self) -> None:
        self._console = Console(color_system="auto", soft_wrap=True, quiet=not self.enabled)

    def banner(self) -> None:
        self._console.print(Panel.fit(ASCII_BANNER.strip("\n"), title="Hotcase ML", border_style="cyan"))

    def info(self, text: str) -> None:
        self._console.print(f"[bold cyan]INFO[/bold cyan] {text}")

    def warn(self, text: str) -> None:
        self._console.print(f"[bold yellow]WARN[/bold yellow] {text}")

    def success(self, text: str) -> None:
        self._console.print(f"[bold green]OK[/bold green] {text}")

    def metrics_table(self, metrics: dict[str, float], *, title: str) -> None:
        table = Table(title=title, show_lines=True)
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right")
        for key in sorted(metrics.keys()):
            table.add_row(key, f"{float(metrics[key]):.4f}")
        self._console.print(table)

    def history_table(self, history: TrainingHistory, *, every: int = 10) -> None:
        table = Table(title="Training history", show_lines=False)
        for column in ("Epoch", "loss", "acc", "val_loss", "val_acc"):
            table.add_column(column, justify="right")
        for log in history.epochs:
            if log.epoch % every and log.epoch != len(history.epochs):
                continue
            table.add_row(
                str(log.epoch),
                f"{log.loss:.4f}",
                f"{log.acc:.4f}",
                "-" if log.val_loss is None else f"{log.val_loss:.4f}",
                "-" if log.val_acc is None else f"{log.val_acc:.4f}",
            )
        self._console.print(table)

    def threshold_table(self, rows: list[dict[str, float]]) -> None:
        table = Table(title="Threshold sweep", show_lines=False)
        for column in ("threshold", "precision", "recall", "f1"):
            table.add_column(column, justify="right")
        best = max(rows, key=lambda row: row["f1"], default=None)
        for row in rows:
            style = "bold green" if row is best else None
            table.add_row(*(f"{row[column]:.3f}" for column in ("threshold", "precision", "recall", "f1")), style=style)
        self._console.print(table)
