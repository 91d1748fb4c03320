"""Minimal LSP server for picolit: diagnostics only."""

from __future__ import annotations

import tomllib
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
from pygls.uris import to_fs_path

from picolit.cli import load_config, markers_table
from picolit.errors import ConfigurationError, ParseError
from picolit.markers import Markers
from picolit.parser import Parser

server = LanguageServer("picolit-lsp", "0.1.0", text_document_sync_kind=TextDocumentSyncKind.Full)


def _parser_for(uri: str) -> Parser:
    """Parser using the picolit.toml next to a local document, if there is one."""
    path = to_fs_path(uri)
    if path is None:
        return Parser()
    config = load_config(None, Path(path).parent)
    return Parser(Markers.from_mapping(markers_table(config)))


def _diagnostic(line: int, col: int, message: str) -> Diagnostic:
    return Diagnostic(
        range=Range(
            start=Position(line=line, character=col),
            end=Position(line=line, character=col + 1),
        ),
        message=message,
        severity=DiagnosticSeverity.Error,
        source="picolit",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Parse the document's comments and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    try:
        _parser_for(uri).parse(source, filename)
    except ConfigurationError as exc:
        diagnostics.append(_diagnostic(0, 0, f"picolit.toml: {exc}"))
    except tomllib.TOMLDecodeError as exc:
        diagnostics.append(_diagnostic(0, 0, f"picolit.toml: invalid config file: {exc}"))
    except ParseError as exc:
        line = exc.position.line - 1
        col = exc.position.column - 1
        diagnostics.append(_diagnostic(line, col, exc.message))

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
