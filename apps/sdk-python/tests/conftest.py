from __future__ import annotations

from typing import Callable, List

import httpx
import pytest

from meli_sdk.client import PlatformClient
from meli_sdk.config import MERCADOLIBRE, ClientConfig
from meli_sdk.transport import Transport


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture()
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture()
def make_client(sleeper: SleepRecorder) -> Callable[..., PlatformClient]:
    def factory(handler, *, profile=MERCADOLIBRE, sleep=None, metrics=None, **config) -> PlatformClient:
        config.setdefault("base_url", "https://api.example.com")
        transport = Transport(transport=httpx.MockTransport(handler))
        return PlatformClient(
            profile, ClientConfig(**config), transport=transport, sleep=sleep or sleeper, metrics=metrics
        )

    return factory
