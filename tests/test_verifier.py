"""Tests for digest verification."""

import logging
import threading

import pytest

from formula_installer.errors import FetchFailed, IntegrityMismatch
from formula_installer.models import VersionEntry
from formula_installer.verifier import IntegrityVerifier, download_url, sha256_hex

from conftest import FakeTransport


PAYLOAD = b"#!/bin/sh\necho hello\n"
URL = "https://example.test/v1.tar.gz"


def _pinned(content=PAYLOAD):
    return VersionEntry(version="1.0.0", url=URL, sha256=sha256_hex(content))


def test_matching_digest_returns_bytes():
    verifier = IntegrityVerifier(FakeTransport({URL: PAYLOAD}), timeout=5)

    assert verifier.fetch_and_verify(_pinned()) == PAYLOAD


def test_timeout_is_passed_to_transport():
    transport = FakeTransport({URL: PAYLOAD})
    IntegrityVerifier(transport, timeout=7.5).fetch_and_verify(_pinned())

    assert transport.calls == [(URL, 7.5)]


def test_single_byte_corruption_is_detected():
    corrupted = bytearray(PAYLOAD)
    corrupted[3] ^= 0x01
    verifier = IntegrityVerifier(FakeTransport({URL: bytes(corrupted)}))

    with pytest.raises(IntegrityMismatch) as excinfo:
        verifier.fetch_and_verify(_pinned())

    assert excinfo.value.expected == sha256_hex(PAYLOAD)
    assert excinfo.value.actual == sha256_hex(bytes(corrupted))


def test_uppercase_digest_still_matches():
    entry = VersionEntry(version="1.0.0", url=URL, sha256=sha256_hex(PAYLOAD).upper())
    assert IntegrityVerifier(FakeTransport()).verify(entry, PAYLOAD) == PAYLOAD


def test_head_is_returned_unverified_with_warning(caplog):
    entry = VersionEntry(version="head", url="https://example.test/repo.git", branch="main")
    transport = FakeTransport({"https://example.test/repo/archive/refs/heads/main.tar.gz": PAYLOAD})

    with caplog.at_level(logging.WARNING):
        content = IntegrityVerifier(transport).fetch_and_verify(entry)

    assert content == PAYLOAD
    assert "UNVERIFIED" in caplog.text


def test_fetch_failure_is_not_an_integrity_failure():
    verifier = IntegrityVerifier(FakeTransport(error=FetchFailed(URL, "connection refused")))

    with pytest.raises(FetchFailed):
        verifier.fetch_and_verify(_pinned())


def test_cancel_event_reaches_transport():
    seen = {}

    class RecordingTransport:
        def fetch(self, url, timeout, cancel_event=None):
            seen["event"] = cancel_event
            return PAYLOAD

    event = threading.Event()
    IntegrityVerifier(RecordingTransport()).fetch_and_verify(_pinned(), cancel_event=event)

    assert seen["event"] is event


def test_download_url_for_head_branch():
    entry = VersionEntry(version="head", url="https://github.com/o/r.git", branch="dev")
    assert download_url(entry) == "https://github.com/o/r/archive/refs/heads/dev.tar.gz"


def test_download_url_for_pinned_entry_is_unchanged():
    assert download_url(_pinned()) == URL
