"""
Tests for the I/O edges: registry loading, catalog discovery, the pipeline,
and the presentation helpers.

Remote sources are served by httpx.MockTransport — no real network.
"""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from doc_validator.catalog import (
    ValidationCatalog,
    format_type_name,
    http_exists,
    icon_for_type,
)
from doc_validator.exceptions import (
    ConfigurationError,
    NoValidationTypesError,
    RegistryFormatError,
    RegistryLoadError,
    SourceNotFoundError,
    SourceUnreachableError,
)
from doc_validator.models import (
    DocumentRecord,
    Latest,
    NoId,
    NotFound,
    Outdated,
    Tone,
)
from doc_validator.pipeline import DocumentValidationPipeline
from doc_validator.presentation import (
    contact_links,
    describe,
    describe_load_error,
    format_date,
    record_links,
)
from doc_validator.registry import load_registry, parse_records


# ─── Test Data ───────────────────────────────────────────────────────

REGISTRY = [
    {"documentId": "D1", "validationId": "A", "version": "1.0.0", "date": "2024-01-01"},
    {"documentId": "D1", "validationId": "B", "version": "2.0.0", "date": "2024-02-01"},
]

MANIFEST = [
    {
        "id": "certificate",
        "name": "Certificate Validation",
        "description": "Validate certificates.",
        "path": "certificate",
        "icon": "📜",
        "exampleId": "CERT01",
    },
]


def _write_json(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def _mock_client(routes: dict[tuple[str, str], httpx.Response]) -> httpx.Client:
    """Client answering (method, path) pairs; everything else is a 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        return routes.get((request.method, request.url.path), httpx.Response(404))

    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture
def registry_file(tmp_path: Path) -> Path:
    return _write_json(tmp_path / "documents.json", REGISTRY)


# ═══════════════════════════════════════════════════════════════════════
# REGISTRY — LOCAL FILES
# ═══════════════════════════════════════════════════════════════════════


class TestLoadRegistryLocal:
    def test_loads_records_in_order(self, registry_file: Path):
        records = load_registry(registry_file)
        assert [r.validation_id for r in records] == ["A", "B"]
        assert isinstance(records[0], DocumentRecord)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(SourceNotFoundError) as exc:
            load_registry(tmp_path / "nope.json")
        assert exc.value.code == "SOURCE_NOT_FOUND"

    def test_missing_file_is_a_load_error(self, tmp_path: Path):
        with pytest.raises(RegistryLoadError):
            load_registry(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "documents.json"
        path.write_text("[{not json", encoding="utf-8")
        with pytest.raises(RegistryFormatError) as exc:
            load_registry(path)
        assert "Invalid JSON" in str(exc.value)

    def test_top_level_must_be_array(self, tmp_path: Path):
        path = _write_json(tmp_path / "documents.json", {"documents": REGISTRY})
        with pytest.raises(RegistryFormatError, match="must be an array"):
            load_registry(path)

    def test_record_missing_required_field(self, tmp_path: Path):
        path = _write_json(tmp_path / "documents.json", [{"documentId": "D1"}])
        with pytest.raises(RegistryFormatError) as exc:
            load_registry(path)
        assert exc.value.code == "REGISTRY_FORMAT_INVALID"

    def test_strict_versions_rejects_malformed(self, tmp_path: Path):
        bad = REGISTRY + [
            {"documentId": "D1", "validationId": "C", "version": "2.x", "date": "2024-03-01"},
        ]
        path = _write_json(tmp_path / "documents.json", bad)
        with pytest.raises(RegistryFormatError) as exc:
            load_registry(path, strict_versions=True)
        assert exc.value.details["validation_id"] == "C"

    def test_lenient_versions_accepts_malformed(self, tmp_path: Path):
        bad = [{"documentId": "D1", "validationId": "C", "version": "2.x", "date": "2024-03-01"}]
        path = _write_json(tmp_path / "documents.json", bad)
        assert len(load_registry(path)) == 1

    def test_parse_records_from_memory(self):
        assert len(parse_records(REGISTRY)) == 2


# ═══════════════════════════════════════════════════════════════════════
# REGISTRY — REMOTE SOURCES
# ═══════════════════════════════════════════════════════════════════════


class TestLoadRegistryRemote:
    URL = "https://validate.example.com/document/documents.json"

    def test_fetches_over_http(self):
        client = _mock_client({("GET", "/document/documents.json"): httpx.Response(200, json=REGISTRY)})
        records = load_registry(self.URL, client=client)
        assert [r.validation_id for r in records] == ["A", "B"]

    def test_http_404(self):
        client = _mock_client({})
        with pytest.raises(SourceNotFoundError) as exc:
            load_registry(self.URL, client=client)
        assert exc.value.details["status"] == 404

    def test_http_500(self):
        client = _mock_client({("GET", "/document/documents.json"): httpx.Response(500)})
        with pytest.raises(RegistryLoadError) as exc:
            load_registry(self.URL, client=client)
        assert not isinstance(exc.value, SourceNotFoundError)
        assert "status: 500" in str(exc.value)

    def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        with pytest.raises(SourceUnreachableError, match="Failed to fetch") as exc:
            load_registry(self.URL, client=client)
        assert exc.value.code == "SOURCE_UNREACHABLE"
        assert isinstance(exc.value, RegistryLoadError)

    def test_remote_not_an_array(self):
        client = _mock_client({("GET", "/document/documents.json"): httpx.Response(200, json={"a": 1})})
        with pytest.raises(RegistryFormatError):
            load_registry(self.URL, client=client)


# ═══════════════════════════════════════════════════════════════════════
# PIPELINE
# ═══════════════════════════════════════════════════════════════════════


class TestPipeline:
    def test_end_to_end_states(self, registry_file: Path):
        pipeline = DocumentValidationPipeline(registry_file)

        outdated = pipeline.run("A").resolution
        assert isinstance(outdated, Outdated)
        assert outdated.record.validation_id == "A"
        assert outdated.latest.validation_id == "B"

        assert isinstance(pipeline.run("B").resolution, Latest)
        assert isinstance(pipeline.run("Z").resolution, NotFound)
        assert isinstance(pipeline.run(None).resolution, NoId)

    def test_report_carries_status_and_size(self, registry_file: Path):
        report = DocumentValidationPipeline(registry_file).run("B")
        assert report.status.tone == Tone.VALID
        assert report.registry_size == 2
        assert report.validation_id == "B"

    def test_registry_read_fresh_per_run(self, registry_file: Path):
        pipeline = DocumentValidationPipeline(registry_file)
        assert isinstance(pipeline.run("B").resolution, Latest)

        newer = REGISTRY + [
            {"documentId": "D1", "validationId": "C", "version": "3.0.0", "date": "2024-03-01"},
        ]
        _write_json(registry_file, newer)
        assert isinstance(pipeline.run("B").resolution, Outdated)

    def test_injected_records_skip_loading(self, tmp_path: Path):
        records = parse_records(REGISTRY)
        pipeline = DocumentValidationPipeline(tmp_path / "missing.json", records=records)
        assert isinstance(pipeline.run("B").resolution, Latest)

    def test_load_error_propagates(self, tmp_path: Path):
        pipeline = DocumentValidationPipeline(tmp_path / "missing.json")
        with pytest.raises(SourceNotFoundError):
            pipeline.run("A")

    def test_idempotent(self, registry_file: Path):
        pipeline = DocumentValidationPipeline(registry_file)
        assert pipeline.run("A") == pipeline.run("A")

    def test_report_id_matches_resolution_id(self, registry_file: Path):
        report = DocumentValidationPipeline(registry_file).run("  Z ")
        assert report.validation_id == "Z"
        assert report.resolution == NotFound(validation_id="Z")

    def test_blank_id_reported_as_none(self, registry_file: Path):
        assert DocumentValidationPipeline(registry_file).run("   ").validation_id is None

    def test_bundled_registry(self):
        """The sample documents.json at the project root resolves as documented."""
        pipeline = DocumentValidationPipeline()
        report = pipeline.run("CNLA78")
        assert isinstance(report.resolution, Outdated)
        assert report.resolution.latest.validation_id == "XK29PQ"


# ═══════════════════════════════════════════════════════════════════════
# CATALOG
# ═══════════════════════════════════════════════════════════════════════


class TestCatalogManifest:
    def test_manifest_loaded(self, tmp_path: Path):
        manifest = _write_json(tmp_path / "validation-types.json", MANIFEST)
        types = ValidationCatalog(manifest).load()
        assert [t.id for t in types] == ["certificate"]
        assert types[0].example_id == "CERT01"

    def test_manifest_must_be_array(self, tmp_path: Path):
        manifest = _write_json(tmp_path / "validation-types.json", {"types": MANIFEST})
        with pytest.raises(RegistryFormatError, match="must be an array"):
            ValidationCatalog(manifest).load()

    def test_manifest_with_bad_entry(self, tmp_path: Path):
        manifest = _write_json(tmp_path / "validation-types.json", [{"id": "x"}])
        with pytest.raises(RegistryFormatError):
            ValidationCatalog(manifest).load()

    def test_unreadable_manifest_does_not_fall_back(self, tmp_path: Path):
        manifest = tmp_path / "validation-types.json"
        manifest.mkdir()
        catalog = ValidationCatalog(manifest, exists=lambda type_id: True)
        with pytest.raises(RegistryLoadError) as exc:
            catalog.load()
        assert exc.value.code == "REGISTRY_LOAD_FAILED"

    def test_bundled_manifest(self):
        types = ValidationCatalog().load()
        assert types[0].id == "document"


class TestCatalogDiscovery:
    def test_missing_manifest_falls_back(self, tmp_path: Path):
        catalog = ValidationCatalog(
            tmp_path / "validation-types.json",
            known_types=["document", "contract"],
            exists=lambda type_id: type_id == "document",
        )
        types = catalog.load()
        assert len(types) == 1
        doc = types[0]
        assert doc.id == "document"
        assert doc.name == "Document Validation"
        assert doc.description == "Validate documents by their validation ID."
        assert doc.path == "document"
        assert doc.icon == "📄"
        assert doc.example_id is None

    def test_nothing_discovered(self, tmp_path: Path):
        catalog = ValidationCatalog(
            tmp_path / "validation-types.json", exists=lambda type_id: False
        )
        with pytest.raises(NoValidationTypesError):
            catalog.load()

    def test_failing_check_is_skipped(self, tmp_path: Path):
        def exists(type_id: str) -> bool:
            if type_id == "license":
                raise OSError("permission denied")
            return True

        catalog = ValidationCatalog(
            tmp_path / "validation-types.json",
            known_types=["license", "certificate"],
            exists=exists,
        )
        assert [t.id for t in catalog.load()] == ["certificate"]

    def test_default_local_check(self, tmp_path: Path):
        (tmp_path / "document").mkdir()
        (tmp_path / "document" / "index.html").write_text("<html></html>", encoding="utf-8")
        catalog = ValidationCatalog(
            tmp_path / "validation-types.json", known_types=["document", "contract"]
        )
        assert [t.id for t in catalog.load()] == ["document"]

    def test_remote_manifest_404_probes_with_head(self):
        client = _mock_client({("HEAD", "/validate/document/index.html"): httpx.Response(200)})
        catalog = ValidationCatalog(
            "https://example.com/validate/validation-types.json",
            known_types=["document", "contract"],
            client=client,
        )
        assert [t.id for t in catalog.load()] == ["document"]

    def test_remote_server_error_does_not_fall_back(self):
        client = _mock_client({("GET", "/validation-types.json"): httpx.Response(503)})
        catalog = ValidationCatalog(
            "https://example.com/validation-types.json",
            exists=lambda type_id: True,
            client=client,
        )
        with pytest.raises(RegistryLoadError):
            catalog.load()

    def test_remote_unreachable_falls_back(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("offline", request=request)

        catalog = ValidationCatalog(
            "https://example.com/validation-types.json",
            exists=lambda type_id: True,
            client=httpx.Client(transport=httpx.MockTransport(handler)),
        )
        assert [t.id for t in catalog.load()] == ["document"]

    def test_http_exists(self):
        client = _mock_client({("HEAD", "/base/contract/index.html"): httpx.Response(200)})
        check = http_exists("https://example.com/base", client)
        assert check("contract") is True
        assert check("license") is False


class TestCatalogNaming:
    def test_format_type_name(self):
        assert format_type_name("document") == "Document Validation"
        assert format_type_name("user-guide") == "User Guide Validation"

    def test_icons(self):
        assert icon_for_type("license") == "🔐"
        assert icon_for_type("unknown") == "✓"


# ═══════════════════════════════════════════════════════════════════════
# PRESENTATION
# ═══════════════════════════════════════════════════════════════════════

_RECORD = DocumentRecord(
    document_id="D1", validation_id="A", version="1.0.0", date="2024-01-01"
)


class TestDescribe:
    def test_no_id(self):
        view = describe(NoId())
        assert view.tone == Tone.GRAY
        assert view.title == "No validation ID provided"

    def test_not_found_names_the_id(self):
        view = describe(NotFound(validation_id="Z9"))
        assert view.tone == Tone.GRAY
        assert '"Z9"' in view.message

    def test_latest(self):
        view = describe(Latest(record=_RECORD))
        assert view.tone == Tone.VALID
        assert view.title == "Document Valid"

    def test_outdated(self):
        view = describe(Outdated(record=_RECORD, latest=_RECORD))
        assert view.tone == Tone.INVALID
        assert view.title == "Document Not Latest"

    def test_load_errors(self):
        assert describe_load_error(SourceNotFoundError("gone")).title == "Error"
        assert "format" in describe_load_error(RegistryFormatError("bad")).message

    def test_http_status_errors_share_wording(self):
        for status in (404, 500):
            error_cls = SourceNotFoundError if status == 404 else RegistryLoadError
            error = error_cls(f"HTTP error! status: {status} (u)", details={"status": status})
            message = describe_load_error(error).message
            assert message.startswith("Failed to load documents database. HTTP Status:")
            assert f"status: {status}" in message

    def test_unreachable_source(self):
        message = describe_load_error(SourceUnreachableError("Failed to fetch u")).message
        assert message.startswith("Unable to load documents database.")

    def test_missing_local_file(self):
        message = describe_load_error(SourceNotFoundError("File not found: x")).message
        assert message == "Failed to load documents database. File not found: x"

    def test_configuration_and_other_errors(self):
        assert describe_load_error(ConfigurationError("bad timeout")).message.startswith(
            "Invalid configuration."
        )
        assert describe_load_error(RegistryLoadError("Could not read x")).message == (
            "Error: Could not read x"
        )


class TestFormatting:
    def test_format_date_only(self):
        assert format_date("2024-01-01") == "January 1, 2024, 12:00 AM"

    def test_format_datetime_utc(self):
        assert format_date("2024-06-01T14:05:00Z") == "June 1, 2024, 02:05 PM"

    def test_unparseable_date_passthrough(self):
        assert format_date("soon") == "soon"

    def test_contact_links(self):
        text = "Mail qa@example.com, see www.example.com/help or https://example.org/x"
        assert contact_links(text) == [
            "https://www.example.com/help",
            "https://example.org/x",
        ]

    def test_contact_links_empty(self):
        assert contact_links(None) == []
        assert contact_links("call 555-0100") == []

    def test_record_links_prefers_contact(self):
        record = _RECORD.model_copy(
            update={"contact": "www.example.com", "url": "https://example.com/doc.pdf"}
        )
        assert record_links(record) == ["https://www.example.com"]

    def test_record_links_falls_back_to_url(self):
        record = _RECORD.model_copy(update={"url": "https://example.com/doc.pdf"})
        assert record_links(record) == ["https://example.com/doc.pdf"]

    def test_record_links_none(self):
        assert record_links(_RECORD) == []
