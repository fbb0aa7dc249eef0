# Overview: Flask extensions that attach one ShopStore, one document parser and one AI assistant to each app instance.

from __future__ import annotations

from flask import Flask, current_app

from .store import ShopState, ShopStore


EXTENSION_KEY = "shopdesk.store"
PARSER_EXTENSION_KEY = "shopdesk.document_parser"
ASSISTANT_EXTENSION_KEY = "shopdesk.assistant"


class ShopStoreExtension:
    """
    Builds the store when the app is created and hands it to request code.

    Each app gets its own store: two apps in one process (e.g. parallel
    test fixtures) never share state.
    """

    def init_app(self, app: Flask, initial_state: ShopState | None = None) -> ShopStore:
        store = ShopStore(initial_state)
        app.extensions[EXTENSION_KEY] = store
        return store

    @property
    def store(self) -> ShopStore:
        return current_app.extensions[EXTENSION_KEY]


shop_store = ShopStoreExtension()


def get_store() -> ShopStore:
    return shop_store.store


def init_document_parser(app: Flask, parser=None):
    """Register the VAT document parser; built from app config unless given."""
    if parser is None:
        from .services.document_intelligence import parser_from_config
        parser = parser_from_config(app.config)
    app.extensions[PARSER_EXTENSION_KEY] = parser
    return parser


def get_document_parser():
    return current_app.extensions[PARSER_EXTENSION_KEY]


def init_assistant(app: Flask, assistant=None):
    """Register the AI assistant; built from app config unless given."""
    if assistant is None:
        from .services.document_intelligence import assistant_from_config
        assistant = assistant_from_config(app.config)
    app.extensions[ASSISTANT_EXTENSION_KEY] = assistant
    return assistant


def get_assistant():
    return current_app.extensions[ASSISTANT_EXTENSION_KEY]
