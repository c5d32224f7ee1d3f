"""Property-based tests for the pipeline models."""

import pytest
from hypothesis import given, strategies as st
from pydantic import ValidationError

from content_to_reader.errors import FetchError, ValidationError as SnippetsInvalid
from content_to_reader.models.config_models import DeviceDeliveryConfig, PageInput
from content_to_reader.models.fetch_models import FetchedPage, FetchResult


# Custom URL strategy since Hypothesis doesn't have st.urls()
def url_strategy():
    """Generate valid URL strings."""
    return st.builds(
        lambda scheme, domain, path: f"{scheme}://{domain}.com/{path}",
        scheme=st.sampled_from(["http", "https"]),
        domain=st.text(
            alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz0123456789"),
            min_size=3,
            max_size=20
        ),
        path=st.text(
            alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz0123456789-_/"),
            min_size=0,
            max_size=50
        )
    )


class TestPageInput:
    """Test page entries of the configuration file."""

    @given(url=url_strategy())
    def test_bare_url_properties(self, url: str):
        """Property: a bare http(s) string is a page without selectors."""
        page = PageInput.model_validate(url)
        assert page.url == url
        assert page.selectors is None

    @pytest.mark.parametrize("url", ["ftp://example.com", "example.com", "https://", "   "])
    def test_rejects_non_http_urls(self, url):
        with pytest.raises(ValidationError):
            PageInput.model_validate(url)


class TestDeviceDeliveryConfig:
    def test_accepts_aliases_and_names(self):
        by_alias = DeviceDeliveryConfig.model_validate(
            {"deviceEmail": "a@kindle.com", "senderEmail": "b@gmail.com", "senderPassword": "x"}
        )
        by_name = DeviceDeliveryConfig(
            device_email="a@kindle.com", sender_email="b@gmail.com", sender_password="x"
        )
        assert by_alias == by_name

    def test_rejects_unknown_keys(self):
        with pytest.raises(ValidationError):
            DeviceDeliveryConfig.model_validate(
                {
                    "deviceEmail": "a@kindle.com",
                    "senderEmail": "b@gmail.com",
                    "senderPassword": "x",
                    "smtp": "smtp.gmail.com",
                }
            )


class TestFetchResult:
    """Test the URL-keyed view over fetched pages."""

    @given(urls=st.lists(url_strategy(), min_size=1, max_size=20))
    def test_one_page_per_position(self, urls):
        """Property: pages keep request order; keys are the distinct URLs."""
        pages = [FetchedPage(url=url, html=f"<p>{i}</p>", order=i) for i, url in enumerate(urls)]

        result = FetchResult(list(reversed(pages)))

        assert [page.order for page in result.pages] == list(range(len(urls)))
        assert list(result) == list(dict.fromkeys(urls))
        for url in result:
            assert result[url].order == urls.index(url)

    def test_empty(self):
        result = FetchResult()
        assert len(result) == 0
        assert "https://a.com" not in result
        with pytest.raises(KeyError):
            result["https://a.com"]


class TestErrorMessages:
    def test_fetch_error_lists_every_failure(self):
        error = FetchError({"https://a.com": "Timeout", "https://b.com": "404"})
        assert str(error) == "https://a.com -> Timeout\nhttps://b.com -> 404"
        assert error.failures["https://b.com"] == "404"

    def test_validation_error_lists_every_url(self):
        error = SnippetsInvalid({"https://a.com": ["EMPTY_TITLE", "INVALID_HTML"]})
        assert str(error) == "https://a.com: [EMPTY_TITLE, INVALID_HTML]"
