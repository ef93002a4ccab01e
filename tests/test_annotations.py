"""Tests for reading phase annotations from manifests."""

import pytest

from releasehooks.errors import UnrecognizedPhaseError
from releasehooks.hooks.annotations import (
    HOOK_ANNOTATION,
    describe_manifest,
    extract_phases,
    format_phases,
    manifest_kind,
    manifest_name,
)
from releasehooks.hooks.phases import HookPhase


def _manifest(value=None, kind="Job", name="hook", key=HOOK_ANNOTATION):
    metadata = {"name": name}
    if value is not None:
        metadata["annotations"] = {key: value}
    return {"apiVersion": "batch/v1", "kind": kind, "metadata": metadata}


class TestExtractPhases:
    """Parsing the hook annotation into phases."""

    def test_single_phase(self):
        result = extract_phases(_manifest("pre-install"))
        assert result.phases == {HookPhase.PRE_INSTALL}
        assert result.unrecognized == ()

    def test_multiple_phases_trimmed(self):
        result = extract_phases(_manifest(" post-install , post-upgrade "))
        assert result.phases == {HookPhase.POST_INSTALL, HookPhase.POST_UPGRADE}

    def test_duplicates_collapse(self):
        result = extract_phases(_manifest("pre-delete,pre-delete"))
        assert result.phases == {HookPhase.PRE_DELETE}

    @pytest.mark.parametrize("manifest", [
        {"kind": "ConfigMap"},
        {"kind": "ConfigMap", "metadata": None},
        {"kind": "ConfigMap", "metadata": {"name": "x"}},
        {"kind": "ConfigMap", "metadata": {"annotations": {}}},
        {"kind": "ConfigMap", "metadata": {"annotations": {"other": "pre-install"}}},
        _manifest(""),
        _manifest(" , "),
    ])
    def test_absent_or_empty_yields_nothing(self, manifest):
        assert extract_phases(manifest).phases == frozenset()

    def test_mixed_permissive_keeps_valid(self):
        result = extract_phases(_manifest("pre-install,test-success,Post-Install"))
        assert result.phases == {HookPhase.PRE_INSTALL}
        assert result.unrecognized == ("test-success", "Post-Install")

    def test_mixed_permissive_logs_warning(self, caplog):
        with caplog.at_level("WARNING", logger="releasehooks"):
            extract_phases(_manifest("pre-install,bogus", name="migrate"))
        assert "bogus" in caplog.text
        assert "Job/migrate" in caplog.text

    def test_mixed_strict_raises(self):
        with pytest.raises(UnrecognizedPhaseError) as exc:
            extract_phases(_manifest("pre-install,bogus", name="migrate"), strict=True)
        assert exc.value.value == "bogus"
        assert exc.value.manifest == "Job/migrate"

    def test_fully_valid_strict(self):
        result = extract_phases(_manifest("pre-install,post-delete"), strict=True)
        assert result.phases == {HookPhase.PRE_INSTALL, HookPhase.POST_DELETE}

    def test_custom_annotation_key(self):
        manifest = _manifest("pre-upgrade", key="example.com/hook")
        assert extract_phases(manifest).phases == frozenset()
        result = extract_phases(manifest, annotation="example.com/hook")
        assert result.phases == {HookPhase.PRE_UPGRADE}


class TestFormatPhases:
    """Serializing phases back to an annotation value."""

    def test_sorted_and_joined(self):
        value = format_phases({HookPhase.POST_UPGRADE, HookPhase.POST_INSTALL})
        assert value == "post-install,post-upgrade"

    @pytest.mark.parametrize("phases", [
        {HookPhase.PRE_INSTALL},
        {HookPhase.POST_INSTALL, HookPhase.POST_UPGRADE, HookPhase.PRE_ROLLBACK},
        set(HookPhase),
    ])
    def test_extract_preserves_set(self, phases):
        value = format_phases(phases)
        assert extract_phases(_manifest(value)).phases == phases

    def test_list_order_does_not_matter(self):
        a = extract_phases(_manifest("post-upgrade,post-install")).phases
        b = extract_phases(_manifest("post-install,post-upgrade")).phases
        assert a == b


class TestManifestIdentity:
    """Kind and name lookup on raw manifests."""

    def test_kind_and_name(self):
        manifest = _manifest(kind="Secret", name="creds")
        assert manifest_kind(manifest) == "Secret"
        assert manifest_name(manifest) == "creds"
        assert describe_manifest(manifest) == "Secret/creds"

    def test_missing_fields(self):
        assert manifest_kind({}) == ""
        assert manifest_name({}) == "<unnamed>"
        assert describe_manifest({}) == "Unknown/<unnamed>"
