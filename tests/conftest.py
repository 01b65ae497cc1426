"""Pytest configuration and fixtures for concerto-copilot tests."""

import sys
from collections.abc import Generator
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from concerto_copilot import config
from concerto_copilot.corpus import Corpus
from concerto_copilot.corpus.models import ModelEmbeddings, TemplateEmbeddings
from concerto_copilot.providers import ProviderRegistry


@pytest.fixture(autouse=True)
def isolate_config(monkeypatch, tmp_path) -> None:
    """Automatically point the config file at a test-specific location."""
    config_dir = tmp_path / "config"
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_dir / "config.toml")
    monkeypatch.setattr(config, "_cached_config", None)
    for name in (
        "CONCERTO_COPILOT_API_KEY",
        "CONCERTO_COPILOT_PROVIDER",
        "CONCERTO_COPILOT_MODEL",
        "CONCERTO_COPILOT_API_URL",
        "CONCERTO_COPILOT_EMBEDDING_MODEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_provider_registry() -> Generator[None, None, None]:
    """Keep registry changes made by a test from leaking into the next."""
    providers = dict(ProviderRegistry._providers)
    ProviderRegistry._instances.clear()

    yield

    ProviderRegistry._providers.clear()
    ProviderRegistry._providers.update(providers)
    ProviderRegistry._instances.clear()


@pytest.fixture
def sample_corpus() -> Corpus:
    """Small corpus with 2-d embeddings for predictable similarities."""
    return Corpus(
        models={
            "vehicle.cto": ModelEmbeddings(
                file_name="vehicle.cto",
                file_content="namespace org.accordproject.vehicle\n"
                "asset Vehicle identified by vin {}\nparticipant Driver identified by id {}",
                embeddings={"openai": [1.0, 0.0]},
            ),
            "money.cto": ModelEmbeddings(
                file_name="money.cto",
                file_content="namespace org.accordproject.money\nenum CurrencyCode { o USD }",
                embeddings={"openai": [0.0, 1.0], "gemini": [1.0, 1.0]},
            ),
            "party.cto": ModelEmbeddings(
                file_name="party.cto",
                file_content="namespace org.accordproject.party\nconcept Party {}",
                embeddings={"gemini": [0.0, 1.0]},
            ),
        },
        templates={
            "late-delivery": TemplateEmbeddings(
                name="late-delivery",
                grammar="Late Delivery. {{penalty}} per day.",
                sample="Late Delivery. 10% per day.",
                model="import org.accordproject.time@0.3.0.{Duration} from https://x\n"
                "@template concept LateDelivery { o Double penalty }",
                grammar_embeddings={"openai": [0.9, 0.1]},
            ),
            "helloworld": TemplateEmbeddings(
                name="helloworld",
                grammar="Name of the person to greet: {{name}}.",
                sample="Name of the person to greet: Fred.",
                grammar_embeddings={"openai": [0.1, 0.9]},
            ),
            "unembedded": TemplateEmbeddings(
                name="unembedded",
                grammar="No embeddings here.",
                sample="Nothing.",
            ),
        },
    )
