"""Tests for user-facing messages"""
import pytest

from rocketcart.cart.service import _message_key
from rocketcart.errors import ErrorKind
from rocketcart.i18n import DEFAULT_LANGUAGE, detect_language, get_text, reload_translations

MESSAGE_KEYS = [
    "cart.out_of_stock",
    "cart.invalid_amount",
    "cart.add_failed",
    "cart.remove_failed",
    "cart.update_failed",
]


@pytest.fixture(autouse=True)
def fresh_translations(monkeypatch):
    monkeypatch.delenv("CART_LANGUAGE", raising=False)
    reload_translations()
    yield
    reload_translations()


def test_default_language_is_portuguese():
    assert DEFAULT_LANGUAGE == "pt"
    assert get_text("cart.add_failed") == "Erro na adição do produto"


@pytest.mark.parametrize("lang", ["pt", "en"])
def test_all_messages_translated(lang):
    """Test every cart message exists in every shipped language"""
    for key in MESSAGE_KEYS:
        assert get_text(key, lang) != key


def test_language_from_environment(monkeypatch):
    monkeypatch.setenv("CART_LANGUAGE", "en-US")

    assert get_text("cart.remove_failed") == "Could not remove the product"


def test_unknown_language_falls_back():
    assert get_text("cart.out_of_stock", "de") == "Quantidade solicitada fora de estoque"


def test_missing_key():
    assert get_text("cart.nope") == "cart.nope"
    assert get_text("cart.nope", default="fallback") == "fallback"
    assert get_text("cart") == "cart"


def test_detect_language():
    assert detect_language("pt-BR") == "pt"
    assert detect_language("EN") == "en"
    assert detect_language(None) == "pt"
    assert detect_language("fr") == "pt"


@pytest.mark.parametrize(
    "operation, kind, expected",
    [
        ("add", ErrorKind.NOT_FOUND, "cart.add_failed"),
        ("add", ErrorKind.TRANSPORT, "cart.add_failed"),
        ("add", ErrorKind.OUT_OF_STOCK, "cart.out_of_stock"),
        ("remove", ErrorKind.NOT_FOUND, "cart.remove_failed"),
        ("update", ErrorKind.INVALID_AMOUNT, "cart.invalid_amount"),
        ("update", ErrorKind.NOT_FOUND, "cart.update_failed"),
        ("update", ErrorKind.OUT_OF_STOCK, "cart.out_of_stock"),
    ],
)
def test_message_key(operation, kind, expected):
    """Test which of the five messages each failure gets"""
    assert _message_key(operation, kind) == expected
