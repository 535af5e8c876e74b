from local_pages.credentials import EnvCredentialSource, StaticCredentialSource, validate_key_format
from local_pages.pacing import FixedIntervalPacer, NoopPacer
from local_pages.reference_data import KeywordCatalog, RegionCatalog, default_keywords, default_regions


def test_default_regions_cover_fifty_states_with_six_sub_regions():
    regions = default_regions()

    assert len(regions) == 50
    assert regions.keys()[0] == "Alabama"
    assert all(len(regions.sub_regions(name)) == 6 for name in regions)
    assert regions.has_sub_region("California", "Los Angeles")
    assert not regions.has_sub_region("California", "Austin")
    assert regions.get("Atlantis") is None
    assert regions.sub_regions("Atlantis") == ()


def test_region_catalog_is_read_only_copy():
    source = {"Iowa": ["Ames"]}
    regions = RegionCatalog(source)
    source["Iowa"].append("Waterloo")

    assert regions.sub_regions("Iowa") == ("Ames",)


def test_keyword_urls_resolve_against_site():
    keywords = default_keywords("https://example.com/")

    assert keywords.get("WordPress development") == "https://example.com/work/"
    assert keywords.keys()[0] == "API integrations"
    assert all(url.startswith("https://example.com/") for _, url in keywords.items())


def test_keyword_catalog_keeps_first_duplicate():
    keywords = KeywordCatalog([("a", "/one/"), ("a", "/two/")], "https://x.test")
    assert len(keywords) == 1
    assert keywords.get("a") == "https://x.test/one/"


def test_key_format():
    assert validate_key_format("sk-ant-api03-" + "a" * 93)
    assert not validate_key_format("sk-ant-api03-short")
    assert not validate_key_format("")


def test_credential_sources(monkeypatch):
    assert not StaticCredentialSource("").has_key()
    assert StaticCredentialSource("key", "model").get_model() == "model"

    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    source = EnvCredentialSource()
    assert not source.has_key()
    monkeypatch.setenv("ANTHROPIC_API_KEY", "  sk-test  ")
    assert source.get_key() == "sk-test"
    assert source.has_key()


def test_pacers_record_waits():
    sleeps = []
    pacer = FixedIntervalPacer(2.0, sleep=sleeps.append)
    pacer.wait()
    pacer.wait()

    assert sleeps == [2.0, 2.0]
    assert pacer.waits == 2 and pacer.total_waited == 4.0

    noop = NoopPacer()
    noop.wait()
    assert noop.waits == 1 and noop.total_waited == 0.0
