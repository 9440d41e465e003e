"""Unit tests for the classifier fallback chain."""

# pylint: disable=missing-class-docstring,missing-function-docstring

from smart_format.classify.chain import ClassifierChain, ParagraphClassifier, default_chain
from smart_format.classify.local import LocalClassifier
from smart_format.config import RemoteSettings
from smart_format.errors import CREDENTIALS_STATUS, ClassificationError, MissingCredentialsError, describe_failure
from smart_format.schema import Element


class FailingClassifier:
    name = "failing"

    def __init__(self, error: Exception):
        self.error = error

    def classify(self, text: str) -> list[Element]:
        raise self.error


# ===========================================================================
# ParagraphClassifier
# ===========================================================================


class TestParagraphClassifier:

    def test_every_chunk_is_a_paragraph(self):
        assert ParagraphClassifier().classify("a\n\nb\r\n\r\n  c  ") == [
            Element(type="p", content="a"),
            Element(type="p", content="b"),
            Element(type="p", content="c"),
        ]

    def test_empty(self):
        assert ParagraphClassifier().classify("") == []


# ===========================================================================
# ClassifierChain
# ===========================================================================


class TestClassifierChain:

    def test_first_success_wins(self):
        chain = ClassifierChain([LocalClassifier(), ParagraphClassifier()])
        elements, name, failures = chain.run("- a\n- b")
        assert elements == [Element(type="ul", items=["a", "b"])]
        assert name == "local"
        assert failures == []

    def test_falls_through_on_classification_error(self):
        chain = ClassifierChain([FailingClassifier(ClassificationError("down")), LocalClassifier()])
        elements, name, failures = chain.run("- a\n- b")
        assert name == "local"
        assert elements[0].type == "ul"
        assert [str(f) for f in failures] == ["down"]

    def test_unexpected_exception_is_wrapped(self):
        chain = ClassifierChain([FailingClassifier(RuntimeError("bug")), ParagraphClassifier()])
        _, name, failures = chain.run("text")
        assert name == "paragraph"
        assert isinstance(failures[0], ClassificationError)
        assert isinstance(failures[0].__cause__, RuntimeError)

    def test_paragraph_split_when_every_strategy_fails(self):
        chain = ClassifierChain([FailingClassifier(ClassificationError("a")), FailingClassifier(ValueError("b"))])
        elements, name, failures = chain.run("one\n\ntwo")
        assert name == "paragraph"
        assert len(failures) == 2
        assert [e.content for e in elements] == ["one", "two"]


class TestDefaultChain:

    def test_strategy_order(self):
        assert default_chain(settings=RemoteSettings()).names == ["remote", "local", "paragraph"]
        assert default_chain(local_only=True).names == ["local", "paragraph"]

    def test_missing_credentials_fall_back_to_local(self):
        elements, name, failures = default_chain(settings=RemoteSettings()).run("- a\n- b")
        assert name == "local"
        assert elements == [Element(type="ul", items=["a", "b"])]
        assert isinstance(failures[0], MissingCredentialsError)
        assert describe_failure(failures[0]) == CREDENTIALS_STATUS
