from __future__ import annotations

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    @abstractmethod
    async def generate(self, prompt: str, temperature: float = 0.7, json_mode: bool = False) -> str:
        ...

    async def prepare(self) -> None:
        """Resolve anything needed before the first call. Default: nothing."""

    @abstractmethod
    def name(self) -> str:
        ...
