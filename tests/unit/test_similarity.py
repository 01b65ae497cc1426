"""Unit tests for cosine similarity ranking and rendering."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from concerto_copilot.corpus.models import ModelEmbeddings, TemplateEmbeddings
from concerto_copilot.corpus.similarity import (
    cosine_similarity,
    fetch_relevant_grammar,
    fetch_relevant_namespaces,
    fetch_relevant_templates,
    rank,
    strip_imports,
)


def _model(name: str, vector: list[float] | None, provider: str = "openai") -> ModelEmbeddings:
    embeddings = {provider: vector} if vector is not None else {}
    return ModelEmbeddings(file_name=name, file_content="", embeddings=embeddings)


class TestCosineSimilarity:
    """Test cosine similarity properties."""

    def test_identical_vector_scores_one(self) -> None:
        """Test similarity(v, v) is 1.0 for a non-zero vector."""
        v = [0.3, -1.2, 4.5, 0.01]
        assert cosine_similarity(v, v) == pytest.approx(1.0)

    def test_positive_scaling_scores_one(self) -> None:
        """Test similarity(v, k*v) is 1.0 for positive k."""
        v = np.array([0.3, -1.2, 4.5, 0.01])
        for k in (0.001, 2.0, 1e6):
            assert cosine_similarity(v, k * v) == pytest.approx(1.0)

    def test_symmetric(self) -> None:
        """Test similarity(a, b) equals similarity(b, a)."""
        a, b = [1.0, 2.0, 3.0], [-2.0, 0.5, 1.0]
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))

    def test_orthogonal_and_opposite(self) -> None:
        """Test orthogonal vectors score 0.0 and opposite vectors -1.0."""
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
        assert cosine_similarity([1.0, 0.0], [-3.0, 0.0]) == pytest.approx(-1.0)

    def test_zero_vector_scores_zero(self) -> None:
        """Test a zero-norm vector scores 0.0 instead of dividing by zero."""
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0

    def test_dimension_mismatch_raises(self) -> None:
        """Test vectors of different lengths are rejected."""
        with pytest.raises(ValueError, match="Vector shapes differ"):
            cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])


class TestRank:
    """Test ranking, bounding and provider filtering."""

    def test_sorted_descending_and_bounded(self) -> None:
        """Test rank returns at most N entries, best first."""
        rng = np.random.default_rng(7)
        items = {f"m{i}": _model(f"m{i}", rng.normal(size=8).tolist()) for i in range(20)}
        query = rng.normal(size=8).tolist()

        matches = rank(query, items, "openai", 5)

        assert len(matches) == 5
        scores = [m.similarity for m in matches]
        assert scores == sorted(scores, reverse=True)

        returned = {m.key for m in matches}
        others = [
            cosine_similarity(query, item.embedding_for("openai"))
            for key, item in items.items()
            if key not in returned
        ]
        assert min(scores) >= max(others)

    def test_fewer_items_than_top_n(self) -> None:
        """Test rank returns every scored item when fewer than N exist."""
        items = {"a": _model("a", [1.0, 0.0]), "b": _model("b", [0.0, 1.0])}
        assert len(rank([1.0, 0.0], items, "openai", 4)) == 2

    def test_items_without_provider_embedding_are_skipped(self) -> None:
        """Test an item lacking the provider's embedding never appears."""
        items = {
            "gemini-only": _model("gemini-only", [1.0, 0.0], provider="gemini"),
            "empty": _model("empty", []),
            "none": _model("none", None),
            "openai": _model("openai", [-1.0, 0.0]),
        }

        matches = rank([1.0, 0.0], items, "openai", 10)

        assert [m.key for m in matches] == ["openai"]

    def test_mismatched_dimensions_are_skipped(self, caplog) -> None:
        """Test entries embedded with a different model width are left out."""
        items = {
            "narrow": _model("narrow", [1.0, 0.0]),
            "wide": _model("wide", [0.0, 1.0, 0.0]),
            "match": _model("match", [1.0, 0.0, 0.0]),
        }

        with caplog.at_level("WARNING", logger="concerto_copilot.corpus.similarity"):
            matches = rank([1.0, 0.0, 0.0], items, "openai", 4)

        assert [m.key for m in matches] == ["match", "wide"]
        assert "Skipping 'narrow'" in caplog.text

    def test_ties_keep_insertion_order(self) -> None:
        """Test equal similarities keep the corpus order."""
        items = {
            "first": _model("first", [1.0, 1.0]),
            "second": _model("second", [2.0, 2.0]),
            "third": _model("third", [3.0, 3.0]),
        }
        matches = rank([1.0, 1.0], items, "openai", 3)
        assert [m.key for m in matches] == ["first", "second", "third"]

    def test_empty_corpus_returns_empty(self) -> None:
        """Test an empty corpus yields an empty list, not an error."""
        assert rank([1.0, 0.0], {}, "openai", 4) == []

    def test_no_matching_provider_returns_empty(self) -> None:
        """Test a corpus without the provider yields an empty list."""
        items = {"a": _model("a", [1.0, 0.0], provider="gemini")}
        assert rank([1.0, 0.0], items, "openai", 4) == []


class TestRenderers:
    """Test consumer-specific rendering of ranked entries."""

    def test_namespaces_render_keys(self, sample_corpus) -> None:
        """Test namespace matches render as newline-terminated keys."""
        rendered = fetch_relevant_namespaces(sample_corpus.models, [1.0, 0.0], "openai")
        assert rendered == ["vehicle.cto\n", "money.cto\n"]

    def test_templates_render_grammar_and_cleaned_model(self, sample_corpus) -> None:
        """Test template rendering strips imports from the model only."""
        rendered = fetch_relevant_templates(sample_corpus.templates, [1.0, 0.0], "openai")

        assert len(rendered) == 2
        first = rendered[0]
        assert first.startswith("Template: late-delivery\n")
        assert "Template grammar: Late Delivery. {{penalty}} per day.\n" in first
        assert "Corresponding model: @template concept LateDelivery" in first
        assert "import " not in first

    def test_template_without_model_shows_grammar(self, sample_corpus) -> None:
        """Test a template with no stored model shows its grammar as the model."""
        rendered = fetch_relevant_templates(sample_corpus.templates, [0.0, 1.0], "openai")
        assert rendered[0] == (
            "Template: helloworld\n"
            "Template grammar: Name of the person to greet: {{name}}.\n"
            "Corresponding model: Name of the person to greet: {{name}}.\n"
        )

    def test_grammar_defaults_to_three(self) -> None:
        """Test grammar matching returns at most three sample/grammar pairs."""
        templates = {
            f"t{i}": TemplateEmbeddings(
                name=f"t{i}",
                grammar=f"grammar {i}",
                sample=f"sample {i}",
                grammar_embeddings={"openai": [1.0, float(i)]},
            )
            for i in range(5)
        }

        rendered = fetch_relevant_grammar(templates, [1.0, 0.0], "openai")

        assert len(rendered) == 3
        assert rendered[0] == "Template sample: sample 0\n and corresponding grammar: grammar 0\n"


class TestStripImports:
    """Test removal of import lines from model source."""

    def test_removes_every_import_line(self) -> None:
        """Test all import lines go, other lines stay in order."""
        content = (
            "namespace org.example@1.0.0\n"
            "import org.accordproject.money@0.3.0.{MonetaryAmount} from https://x\n"
            "  import org.accordproject.time@0.3.0.Duration\n"
            "concept A {}\n"
            "import trailing.without.newline"
        )
        assert strip_imports(content) == "namespace org.example@1.0.0\nconcept A {}\n"

    def test_keeps_text_mentioning_import_mid_line(self) -> None:
        """Test a line that only mentions import is untouched."""
        content = "// see import rules\nconcept A {}\n"
        assert strip_imports(content) == content
