"""
Unit tests for probe failure classification.
"""

import pytest

from nrfjprog_fetch.binding.classifier import (
    Classification,
    FailureKind,
    classify_failure,
)
from nrfjprog_fetch.binding.prober import ProbeFailure


class TestClassifyFailure:
    """Tests for classify_failure()."""

    def test_library_missing(self, linux_config, library_missing):
        """Test errno 2 with CouldNotFindJprogDLL means the library is missing."""
        result = classify_failure(library_missing, linux_config)

        assert result.kind is FailureKind.LIBRARY_MISSING
        assert result.failure is library_missing

    def test_errno_alone_is_not_enough(self, linux_config):
        """Test errno 2 with another errcode is unrelated."""
        failure = ProbeFailure("nope", errno=2, errcode="SomethingElse")

        assert classify_failure(failure, linux_config).kind is FailureKind.UNRELATED

    def test_errcode_alone_is_not_enough(self, linux_config):
        """Test the errcode without errno 2 is unrelated."""
        failure = ProbeFailure("nope", errno=None, errcode="CouldNotFindJprogDLL")

        assert classify_failure(failure, linux_config).kind is FailureKind.UNRELATED

    def test_bindings_missing(self, linux_config, bindings_missing):
        """Test the bindings-file message is recognized."""
        result = classify_failure(bindings_missing, linux_config)

        assert result.kind is FailureKind.BINDINGS_MISSING

    def test_bindings_message_must_be_prefix(self, linux_config):
        """Test the bindings message only matches at the start."""
        failure = ProbeFailure("Error: Could not locate the bindings file")

        assert classify_failure(failure, linux_config).kind is FailureKind.UNRELATED

    def test_unrelated(self, linux_config, unrelated_failure):
        """Test J-Link failures are not fixable by a fetch."""
        result = classify_failure(unrelated_failure, linux_config)

        assert result.kind is FailureKind.UNRELATED

    def test_header_override_present(self, win32_config, library_missing):
        """Test an existing override header wins over every other check."""
        result = classify_failure(library_missing, win32_config, exists=lambda p: True)

        assert result.kind is FailureKind.HEADERS_PRESENT

    def test_header_override_checks_configured_path(
        self, win32_config, unrelated_failure
    ):
        """Test the override header path is the one probed."""
        seen = []

        def exists(path):
            seen.append(path)
            return True

        classify_failure(unrelated_failure, win32_config, exists=exists)

        assert seen == [str(win32_config.header_override)]

    def test_header_override_absent(self, win32_config, library_missing):
        """Test a missing override header falls through to errno checks."""
        result = classify_failure(library_missing, win32_config, exists=lambda p: False)

        assert result.kind is FailureKind.LIBRARY_MISSING

    def test_no_override_ignores_exists(self, linux_config, unrelated_failure):
        """Test platforms without an override never call exists."""

        def exists(path):
            raise AssertionError("exists() should not be called")

        result = classify_failure(unrelated_failure, linux_config, exists=exists)

        assert result.kind is FailureKind.UNRELATED


class TestClassification:
    """Tests for Classification properties."""

    @pytest.mark.parametrize(
        "kind,fixable,reprobe",
        [
            (FailureKind.HEADERS_PRESENT, False, False),
            (FailureKind.LIBRARY_MISSING, True, True),
            (FailureKind.BINDINGS_MISSING, True, False),
            (FailureKind.UNRELATED, False, False),
        ],
    )
    def test_flags(self, kind, fixable, reprobe):
        classification = Classification(kind=kind, failure=ProbeFailure("x"))

        assert classification.fixable_by_fetch is fixable
        assert classification.reprobe_after_fetch is reprobe
