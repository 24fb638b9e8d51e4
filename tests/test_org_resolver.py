"""
Unit tests for Ringotel organization resolution.

Run with: pytest tests/test_org_resolver.py -v
"""

from softphone.models.ringotel import RemoteOrganization
from softphone.services.org_resolver import first_label, resolve

SUFFIX = "-ringotel"
DOMAIN = "acme.example.com"


def org(id_: str, domain: str, name: str = "Other") -> RemoteOrganization:
    return RemoteOrganization(id=id_, name=name, domain=domain, region="1")


class TestFirstLabel:

    def test_first_label(self):
        assert first_label("acme.example.com") == "acme"
        assert first_label("localhost") == "localhost"


class TestResolve:
    """Цепочка правил сопоставления организации."""

    def test_compacted_domain_match(self):
        target = org("1", "acme-ringotel")
        result = resolve(DOMAIN, [org("0", "globex-ringotel"), target], SUFFIX)
        assert result is target

    def test_name_match(self):
        target = org("2", "whatever", name=DOMAIN)
        assert resolve(DOMAIN, [target], SUFFIX) is target

    def test_underscored_domain_match(self):
        target = org("3", "acme_example_com")
        assert resolve(DOMAIN, [target], SUFFIX) is target

    def test_underscored_first_label_match(self):
        target = org("4", "acme_legacy")
        assert resolve(DOMAIN, [target], SUFFIX) is target

    def test_hyphen_first_label_match(self):
        target = org("5", "acme-old")
        assert resolve(DOMAIN, [target], SUFFIX) is target

    def test_no_match(self):
        candidates = [org("1", "acmecorp-ringotel"), org("2", "globex-ringotel")]
        assert resolve(DOMAIN, candidates, SUFFIX) is None

    def test_empty_listing(self):
        assert resolve(DOMAIN, [], SUFFIX) is None

    def test_last_match_wins(self):
        first = org("1", "acme-ringotel")
        last = org("2", "acme-old")
        assert resolve(DOMAIN, [first, last], SUFFIX) is last

    def test_override_beats_other_rules(self):
        pinned = org("7", "pinned-tenant")
        later = org("8", "acme-ringotel")
        result = resolve(DOMAIN, [pinned, later], SUFFIX, override_domain="pinned-tenant")
        assert result is pinned

    def test_override_without_candidate_falls_back(self):
        target = org("1", "acme-ringotel")
        assert resolve(DOMAIN, [target], SUFFIX, override_domain="missing") is target

    def test_long_domain_uses_compaction(self):
        local = "superlongcompanynamehere.example.com"
        target = org("9", "superlongcompan-ringotel")
        assert resolve(local, [org("1", "other"), target], SUFFIX) is target

    def test_null_fields_in_listing(self):
        broken = RemoteOrganization.model_validate(
            {"id": "3", "name": None, "domain": None, "region": None}
        )
        target = org("4", "acme-ringotel")
        assert broken.domain == ""
        assert resolve(DOMAIN, [broken, target], SUFFIX) is target
        assert resolve(DOMAIN, [broken], SUFFIX) is None
