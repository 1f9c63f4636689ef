"""
Unit tests for PayloadBuilder Module

Tests:
- FieldBuilder: Direct and composite field building
- TemplateEngine: Token resolution against submissions
- Custom data: YAML parsing, fail-open behaviour
- PayloadBuilder: Complete payload construction and precedence
"""

import pytest

from web2lead.builder.payload_builder import PayloadBuilder, build_lead_payload
from web2lead.builder.field_builder import FieldBuilder, flatten_submission, to_payload_value
from web2lead.builder.template_engine import TemplateEngine
from web2lead.builder.custom_data import load_custom_data, parse_custom_data
from web2lead.errors import MappingError


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def sample_submission():
    """Sample contact form submission"""
    return {
        "name": {"first": "Jane", "last": "Doe"},
        "mail": "jane@example.com",
        "phone": "",
        "message": "Please call me back",
        "newsletter": True,
        "internal_notes": "not for the CRM",
    }


@pytest.fixture
def field_mapping():
    """Sample mapping table"""
    return {
        "name_first": "first_name",
        "mail": "email",
        "phone": "phone",
        "message": "description",
    }


# ============================================================================
# TEST: FieldBuilder
# ============================================================================


class TestFieldBuilder:
    """Tests for FieldBuilder class"""

    def test_build_direct_field(self):
        """Test building a direct field mapping"""
        builder = FieldBuilder({"mail": "email"})

        target, value = builder.build_field("mail", "jane@example.com")

        assert target == "email"
        assert value == "jane@example.com"

    def test_unmapped_field_skipped(self):
        """Test that unmapped keys produce nothing"""
        builder = FieldBuilder({"mail": "email"})

        target, value = builder.build_field("comments", "hello")

        assert target is None
        assert value is None

    def test_empty_destination_skipped(self):
        """Test that a mapping with empty destination is ignored"""
        builder = FieldBuilder({"mail": ""})

        assert list(builder.build_fields({"mail": "jane@example.com"})) == []

    def test_empty_values_skipped(self):
        """Test None and blank values are never emitted"""
        builder = FieldBuilder({"a": "x", "b": "y", "c": "z"})

        fields = list(builder.build_fields({"a": None, "b": "  ", "c": "ok"}))

        assert fields == [("z", "ok")]

    def test_composite_field_flattened(self):
        """Test composite values are evaluated as <parent>_<child>"""
        builder = FieldBuilder({"name_first": "first_name"})

        fields = dict(builder.build_fields({"name": {"first": "Jane", "last": "Doe"}}))

        assert fields == {"first_name": "Jane"}

    def test_composite_parent_not_mapped_directly(self):
        """Test a mapping on the composite key itself does not post the dict"""
        builder = FieldBuilder({"name": "last_name"})

        assert list(builder.build_fields({"name": {"first": "Jane"}})) == []

    def test_list_field_flattened_by_index(self):
        """Test multi-value fields flatten to <parent>_<index>"""
        builder = FieldBuilder({"interests_1": "description"})

        fields = dict(builder.build_fields({"interests": ["cars", "boats"]}))

        assert fields == {"description": "boats"}

    def test_flatten_submission(self, sample_submission):
        """Test flattening helper"""
        flat = flatten_submission(sample_submission)

        assert flat["name_first"] == "Jane"
        assert flat["name_last"] == "Doe"
        assert flat["mail"] == "jane@example.com"
        assert "name" not in flat

    def test_payload_value_conversion(self):
        """Test scalar stringification"""
        assert to_payload_value(True) == "1"
        assert to_payload_value(False) == "0"
        assert to_payload_value(42) == "42"
        assert to_payload_value("x") == "x"


# ============================================================================
# TEST: TemplateEngine
# ============================================================================


class TestTemplateEngine:
    """Tests for TemplateEngine class"""

    def test_variable_substitution_simple(self):
        """Test simple variable substitution"""
        result = TemplateEngine().resolve("Lead: ${mail}", {"mail": "jane@example.com"})

        assert result == "Lead: jane@example.com"

    def test_variable_substitution_missing(self):
        """Test missing variable returns empty string"""
        result = TemplateEngine().resolve("Name: ${name}, Code: ${code}", {"name": "Jane"})

        assert result == "Name: Jane, Code: "

    def test_defaults_used_for_missing_tokens(self):
        """Test engine defaults fill tokens the submission lacks"""
        engine = TemplateEngine({"site": "acme", "mail": "fallback@example.com"})
        result = engine.resolve("${site}: ${mail}", {"mail": "jane@example.com"})

        assert result == "acme: jane@example.com"

    def test_resolve_against_submission(self, sample_submission):
        """Test tokens resolve against the flattened submission"""
        engine = TemplateEngine()
        result = engine.resolve("${name_first} ${name_last} <${mail}>", sample_submission)

        assert result == "Jane Doe <jane@example.com>"

    def test_composite_parent_not_substituted(self, sample_submission):
        """Test a composite parent never posts its raw structure"""
        result = TemplateEngine().resolve("Name: ${name}", sample_submission)

        assert result == "Name: "

    def test_boolean_token(self, sample_submission):
        """Test booleans resolve to their posted form"""
        assert TemplateEngine().resolve("${newsletter}", sample_submission) == "1"

    def test_conditional(self, sample_submission):
        """Test conditional expression"""
        engine = TemplateEngine()

        assert engine.resolve("${if newsletter ? Opt-in : Opt-out}", sample_submission) == "Opt-in"
        assert engine.resolve("${if phone ? Call : Email}", sample_submission) == "Email"

    def test_conditional_on_composite_parent(self, sample_submission):
        """Test conditionals on a composite check its sub-values"""
        engine = TemplateEngine()

        assert engine.resolve("${if name ? named : anonymous}", sample_submission) == "named"
        assert engine.resolve("${if name ? named : anonymous}", {"name": {"first": ""}}) == "anonymous"

    def test_non_string_passthrough(self):
        """Test non-string values are returned unchanged"""
        assert TemplateEngine().resolve(5, {}) == 5


# ============================================================================
# TEST: Custom data
# ============================================================================


class TestCustomData:
    """Tests for custom data parsing"""

    def test_parse_yaml_block(self):
        """Test a YAML mapping is parsed"""
        data = load_custom_data("lead_source: Web\ncampaign: '${utm}'\n")

        assert data == {"lead_source": "Web", "campaign": "${utm}"}

    def test_empty_block(self):
        """Test empty blocks parse to empty dict"""
        assert load_custom_data("") == {}
        assert load_custom_data(None) == {}
        assert load_custom_data("   \n") == {}

    def test_malformed_block_raises(self):
        """Test invalid YAML raises MappingError"""
        with pytest.raises(MappingError):
            load_custom_data("key: [unclosed")

    def test_non_mapping_raises(self):
        """Test a YAML list is rejected"""
        with pytest.raises(MappingError):
            load_custom_data("- a\n- b\n")

    def test_malformed_block_fails_open(self):
        """Test parse_custom_data treats malformed blocks as empty"""
        assert parse_custom_data("key: [unclosed") == {}


# ============================================================================
# TEST: PayloadBuilder
# ============================================================================


class TestPayloadBuilder:
    """Tests for PayloadBuilder class"""

    def test_oid_always_present(self):
        """Test oid is set even for an empty submission"""
        payload = PayloadBuilder().build({}, {}, None, "00D123")

        assert payload == {"oid": "00D123"}

    def test_mapped_field_cannot_replace_oid(self):
        """Test a submission value mapped to oid never replaces the organization id"""
        payload = PayloadBuilder().build({"ref": "00DOTHER"}, {"ref": "oid"}, None, "00D123")

        assert payload["oid"] == "00D123"

    def test_custom_data_cannot_replace_oid(self):
        """Test custom data cannot change the organization id"""
        payload = PayloadBuilder().build(
            {"ref": "00DOTHER"},
            {},
            {"oid": "${ref}"},
            "00D123",
            operation_overrides={"oid": "00DFIXED"},
        )

        assert payload["oid"] == "00D123"

    def test_hook_may_change_oid(self):
        """Test alter hooks keep full control over the payload"""
        builder = PayloadBuilder(hooks=[lambda payload, form, submission: payload.update(oid="00D999")])

        assert builder.build({}, {}, None, "00D123")["oid"] == "00D999"

    def test_build_simple_payload(self, sample_submission, field_mapping):
        """Test building a payload from mapped fields"""
        payload = PayloadBuilder().build(sample_submission, field_mapping, None, "00D123")

        assert payload == {
            "oid": "00D123",
            "first_name": "Jane",
            "email": "jane@example.com",
            "description": "Please call me back",
        }

    def test_unmapped_fields_never_posted(self, sample_submission, field_mapping):
        """Test fields absent from the mapping never reach the payload"""
        payload = PayloadBuilder().build(sample_submission, field_mapping, None, "00D123")

        assert "internal_notes" not in payload
        assert "newsletter" not in payload
        assert "name" not in payload
        assert "name_last" not in payload
        assert "last_name" not in payload

    def test_custom_data_wins_over_submission(self):
        """Test custom overrides take precedence"""
        payload = PayloadBuilder().build(
            {"mail": "a@x.com"},
            {"mail": "email"},
            {"email": "b@x.com"},
            "00D123",
        )

        assert payload["email"] == "b@x.com"

    def test_operation_data_wins_over_custom_data(self):
        """Test operation-specific data wins over general custom data"""
        payload = PayloadBuilder().build(
            {"mail": "a@x.com"},
            {"mail": "email"},
            custom_overrides={"email": "b@x.com", "lead_source": "Web"},
            organization_id="00D123",
            operation_overrides={"email": "c@x.com"},
        )

        assert payload["email"] == "c@x.com"
        assert payload["lead_source"] == "Web"

    def test_custom_data_tokens_resolved(self, sample_submission):
        """Test override values are resolved against the submission"""
        payload = PayloadBuilder().build(
            sample_submission,
            {},
            {"description": "From ${name_first}: ${message}"},
            "00D123",
        )

        assert payload["description"] == "From Jane: Please call me back"

    def test_custom_resolver_injected(self):
        """Test an injected resolver is used for override values"""
        calls = []

        def resolver(template, submission):
            calls.append((template, submission))
            return template.upper()

        payload = PayloadBuilder(resolver=resolver).build({"x": "1"}, {}, {"lead_source": "web"}, "00D123")

        assert payload["lead_source"] == "WEB"
        assert calls == [("web", {"x": "1"})]

    def test_empty_override_does_not_blank_value(self):
        """Test an override resolving to empty keeps the mapped value"""
        payload = PayloadBuilder().build(
            {"mail": "a@x.com"},
            {"mail": "email"},
            {"email": "${missing}"},
            "00D123",
        )

        assert payload["email"] == "a@x.com"

    def test_hooks_run_last(self, sample_submission, field_mapping):
        """Test alter hooks see the final payload and may mutate it"""
        seen = {}

        def hook(payload, form, submission):
            seen.update(payload)
            seen["form"] = form
            payload["Campaign_ID"] = "701000000000001"
            del payload["description"]

        builder = PayloadBuilder(hooks=[hook])
        payload = builder.build(
            sample_submission,
            field_mapping,
            {"lead_source": "Web"},
            "00D123",
            form="contact",
        )

        assert seen["lead_source"] == "Web"
        assert seen["form"] == "contact"
        assert payload["Campaign_ID"] == "701000000000001"
        assert "description" not in payload

    def test_add_hook(self):
        """Test hooks can be registered after construction"""
        builder = PayloadBuilder()
        builder.add_hook(lambda payload, form, submission: payload.update(extra="1"))

        assert builder.build({}, {}, None, "00D123")["extra"] == "1"

    def test_convenience_function(self, sample_submission, field_mapping):
        """Test build_lead_payload convenience function"""
        payload = build_lead_payload(sample_submission, field_mapping, {"lead_source": "Web"}, "00D123")

        assert payload["oid"] == "00D123"
        assert payload["first_name"] == "Jane"
        assert payload["lead_source"] == "Web"


# ============================================================================
# RUN TESTS
# ============================================================================


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
