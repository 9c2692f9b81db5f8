"""Tests for the advisory naming rules."""

from smell_sentinel.detectors import NamingAdvisoryDetector
from smell_sentinel.detectors.naming import split_identifier
from smell_sentinel.rules import AMBIGUOUS_VERB, CONJUNCTION_NAME


class TestSplitIdentifier:
    """Test identifier word splitting."""

    def test_camel_case(self):
        assert split_identifier("validateAndSave") == ["validate", "and", "save"]

    def test_acronyms(self):
        assert split_identifier("parseHTTPResponse") == ["parse", "http", "response"]

    def test_snake_case(self):
        assert split_identifier("get_user_name") == ["get", "user", "name"]


class TestNamingAdvisory:
    """Test the naming detector on parsed sources."""

    SOURCE = """\
        class Jobs {
            Jobs() {}
            void checkAndSave() {}
            void handle() {}
            void readOrWrite() {}
            void order() {}
            void android() {}
            @Override
            public void process() {}
        }
        """

    def test_findings(self, build_unit, context):
        findings = NamingAdvisoryDetector().detect(build_unit(self.SOURCE), context)
        assert [(f.rule_id, f.location.line) for f in findings] == [
            (AMBIGUOUS_VERB, 3),
            (CONJUNCTION_NAME, 3),
            (AMBIGUOUS_VERB, 4),
            (CONJUNCTION_NAME, 5),
        ]

    def test_messages(self, build_unit, context):
        findings = NamingAdvisoryDetector().detect(build_unit(self.SOURCE), context)
        assert "'check'" in findings[0].message
        assert "'and'" in findings[1].message
