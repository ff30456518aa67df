"""Minimal LSP server for nestlex — delimiter balance diagnostics only."""

from __future__ import annotations

from pathlib import Path

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from nestlex.config import DEFAULT_CONFIG, LexerConfig, load_config
from nestlex.errors import ConfigError, LexError, UnbalancedDelimiterError
from nestlex.lexer import Lexer

server = LanguageServer("nestlex-lsp", "0.1.0", text_document_sync_kind=TextDocumentSyncKind.Full)


def _diagnostic(line: int, column: int, width: int, message: str) -> Diagnostic:
    # nestlex positions are 1-based, LSP positions 0-based
    return Diagnostic(
        range=Range(
            start=Position(line=line - 1, character=column - 1),
            end=Position(line=line - 1, character=column - 1 + width),
        ),
        message=message,
        severity=DiagnosticSeverity.Error,
        source="nestlex",
    )


def _document_config(path: str | None) -> LexerConfig:
    """Config from the nestlex.toml beside *path*, or the defaults."""
    if not path:
        return DEFAULT_CONFIG
    return LexerConfig.from_dict(load_config(None, Path(path).parent))


def _validate(ls: LanguageServer, uri: str, config: LexerConfig | None = None) -> None:
    """Group the document's tokens and publish any structural error.

    Without an explicit *config* the document's directory is searched for
    nestlex.toml; a broken config file is reported on the first line.
    """
    doc = ls.workspace.get_text_document(uri)
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    if config is None:
        try:
            config = _document_config(doc.path if uri.startswith("file:") else None)
        except ConfigError as exc:
            diagnostics.append(_diagnostic(1, 1, 1, f"nestlex.toml: {exc}"))
            ls.text_document_publish_diagnostics(
                PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
            )
            return

    try:
        Lexer(doc.source, config=config, filename=filename).group_tokens()
    except LexError as exc:
        diagnostics.append(
            _diagnostic(exc.position.line, exc.position.column, 1, exc.message)
        )
    except UnbalancedDelimiterError as exc:
        pos = exc.position
        diagnostics.append(_diagnostic(pos.line, pos.column, len(exc.lexeme), exc.message))

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
