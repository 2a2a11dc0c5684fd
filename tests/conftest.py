"""Shared test fixtures for apicompat engine tests."""

import pytest

from apicompat.config import ComparerSettings
from apicompat.engine import ApiComparer
from apicompat.symbols.containers import ElementContainer, MetadataInformation
from apicompat.symbols.factory import assembly, field, namespace, type_decl


@pytest.fixture
def comparer():
    """Comparer with default settings (public surface, no suppressions)."""
    return ApiComparer()


@pytest.fixture
def make_comparer():
    """Factory for comparers built from keyword settings."""

    def _make(**kwargs):
        return ApiComparer(ComparerSettings(**kwargs))

    return _make


@pytest.fixture
def forwarded_type():
    """A type declared once in a referenced assembly and forwarded from others."""
    return type_decl("ForwardedTestType")


@pytest.fixture
def nested_chain():
    """First > FirstNested > SecondNested > ThirdNested { MyField }."""
    return assembly(
        "CompatTests",
        namespace(
            "CompatTests",
            type_decl(
                "First",
                type_decl(
                    "FirstNested",
                    type_decl("SecondNested", type_decl("ThirdNested", field("MyField"))),
                ),
            ),
        ),
    )


@pytest.fixture
def ref_container():
    """Wrap a tree as the left container labelled 'ref'."""

    def _wrap(tree):
        return ElementContainer(tree, MetadataInformation("", "", "ref"))

    return _wrap
