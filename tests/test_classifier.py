"""Tests for keyword classification."""

from varuna.analysis import KeywordClassifier
from varuna.schemas import StatusLevel


class TestKeywordClassifier:

    def setup_method(self):
        self.classifier = KeywordClassifier()

    def test_warning_keywords(self, feed_item):
        result = self.classifier.classify(feed_item("investigating degraded performance"))

        assert result.status_level == StatusLevel.WARNING
        assert result.services == []
        assert result.has_service_names is False
        assert result.matched_keywords == ["investigating", "degraded"]
        assert result.word_count == 3

    def test_critical_beats_warning(self, feed_item):
        result = self.classifier.classify(
            feed_item("EC2 outage", "We are investigating the outage in us-east-1")
        )
        assert result.status_level == StatusLevel.CRITICAL
        assert result.matched_keywords == ["outage"]
        assert result.services == ["ec2"]

    def test_no_keywords_is_informational(self, feed_item):
        result = self.classifier.classify(feed_item("New region launched"))
        assert result.status_level == StatusLevel.INFORMATIONAL
        assert result.matched_keywords == []

    def test_informational_keywords_are_reported(self, feed_item):
        result = self.classifier.classify(feed_item("Scheduled maintenance completed"))
        assert result.status_level == StatusLevel.INFORMATIONAL
        assert result.matched_keywords == ["completed", "maintenance", "scheduled"]

    def test_services_in_list_order(self, feed_item):
        result = self.classifier.classify(feed_item("Lambda and S3 issues", "CloudFront too"))
        assert result.services == ["s3", "lambda", "cloudfront"]
        assert result.has_service_names is True

    def test_description_is_searched(self, feed_item):
        result = self.classifier.classify(feed_item("Update", "Cloud SQL instances unavailable"))
        assert result.status_level == StatusLevel.CRITICAL
        assert result.services == ["cloud sql"]

    def test_substring_matching(self, feed_item):
        # "download" contains "down"
        result = self.classifier.classify(feed_item("Slow download speeds"))
        assert result.status_level == StatusLevel.CRITICAL

    def test_deterministic(self, feed_item):
        item = feed_item("RDS degraded", "Kubernetes delayed")
        assert self.classifier.classify(item) == self.classifier.classify(item)

    def test_copies_identity_fields(self, feed_item):
        item = feed_item("Outage", link="https://status.test/1", guid="incident-1")
        result = self.classifier.classify(item)
        assert result.id == "incident-1"
        assert result.link == "https://status.test/1"
        assert result.timestamp == item.published_at

    def test_custom_tables(self, feed_item):
        classifier = KeywordClassifier(
            status_keywords={StatusLevel.CRITICAL: ["fire"], StatusLevel.WARNING: ["smoke"]},
            services=["dns"],
        )
        result = classifier.classify(feed_item("smoke near dns"))
        assert result.status_level == StatusLevel.WARNING
        assert result.services == ["dns"]
        assert classifier.keyword_categories == ["critical", "warning"]
