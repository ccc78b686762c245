"""Tests for markdown rendering, link policy and the hostname cache."""

from sitegen.services.markdown_renderer import HostnameCache, MarkdownRenderer, normalize_host


def render_markdown(text):
    return MarkdownRenderer().render(text)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestRenderMarkdown:
    def test_headings_and_paragraphs(self):
        html = render_markdown("## Title\n\nSome text.")
        assert "<h2>Title</h2>" in html
        assert "<p>Some text.</p>" in html

    def test_tables_extension(self):
        html = render_markdown("| A | B |\n|---|---|\n| 1 | 2 |")
        assert "<table>" in html
        assert "<td>1</td>" in html

    def test_raw_script_is_removed(self):
        html = render_markdown("Hello\n\n<script>alert(1)</script>")
        assert "<script" not in html

    def test_placeholders_are_stripped(self):
        html = render_markdown("Read [INTERNAL_LINK: guide] more.")
        assert "INTERNAL_LINK" not in html

    def test_empty_input(self):
        assert render_markdown("") == ""


class TestLinkPolicy:
    def test_external_link_opens_in_new_tab(self):
        html = MarkdownRenderer(current_domain="mysite.com").render("[Gov](https://www.usa.gov/page)")
        assert 'target="_blank"' in html
        assert 'rel="noopener noreferrer"' in html

    def test_same_domain_link_untouched(self):
        html = MarkdownRenderer(current_domain="mysite.com").render("[Home](https://www.mysite.com/about)")
        assert "target=" not in html

    def test_relative_link_untouched(self):
        html = MarkdownRenderer(current_domain="mysite.com").render("[About](/about/)")
        assert 'href="/about/"' in html
        assert "target=" not in html

    def test_portfolio_link_is_replaced_by_span(self):
        renderer = MarkdownRenderer(
            current_domain="mysite.com",
            portfolio_loader=lambda: ["mysite.com", "sister-site.com"],
        )
        html = renderer.render("Visit [our sister](https://sister-site.com/x) today.")
        assert "href" not in html
        assert '<span class="portfolio-link-blocked">our sister</span>' in html

    def test_own_domain_is_never_blocked(self):
        renderer = MarkdownRenderer(current_domain="mysite.com", portfolio_loader=lambda: ["mysite.com"])
        html = renderer.render("[Self](https://mysite.com/)")
        assert 'href="https://mysite.com/"' in html

    def test_loader_failure_means_no_stripping(self):
        def boom():
            raise RuntimeError("db down")

        renderer = MarkdownRenderer(current_domain="mysite.com", portfolio_loader=boom)
        html = renderer.render("[Other](https://other.com/)")
        assert 'href="https://other.com/"' in html


class TestHostnameCache:
    def test_normalizes_and_dedupes(self):
        cache = HostnameCache()
        assert cache.get_or_refresh(lambda: ["WWW.A.com", "a.com", " b.com ", ""]) == ["a.com", "b.com"]

    def test_reuses_value_within_ttl(self):
        clock = FakeClock()
        cache = HostnameCache(ttl=300, clock=clock)
        calls = []

        def loader():
            calls.append(1)
            return ["a.com"]

        cache.get_or_refresh(loader)
        clock.now = 299
        cache.get_or_refresh(loader)
        assert len(calls) == 1

    def test_refreshes_after_ttl(self):
        clock = FakeClock()
        cache = HostnameCache(ttl=300, clock=clock)
        cache.get_or_refresh(lambda: ["a.com"])
        clock.now = 301
        assert cache.get_or_refresh(lambda: ["b.com"]) == ["b.com"]

    def test_new_key_reloads_within_ttl(self):
        clock = FakeClock()
        cache = HostnameCache(ttl=300, clock=clock)
        cache.get_or_refresh(lambda: ["a.com"], key=("a.com",))
        clock.now = 10
        assert cache.get_or_refresh(lambda: ["b.com"], key=("b.com",)) == ["b.com"]
        assert cache.get_or_refresh(lambda: ["z.com"], key=("b.com",)) == ["b.com"]

    def test_shared_cache_strips_each_callers_hosts(self):
        cache = HostnameCache()
        first = MarkdownRenderer("mysite.com", cache, lambda: ["unrelated.com"], ("unrelated.com",))
        first.render("[x](https://unrelated.com/)")
        second = MarkdownRenderer("mysite.com", cache, lambda: ["othersite.com"], ("othersite.com",))
        assert "portfolio-link-blocked" in second.render("[y](https://othersite.com/x)")

    def test_invalidate_forces_reload(self):
        cache = HostnameCache()
        cache.get_or_refresh(lambda: ["a.com"])
        cache.invalidate()
        assert cache.get_or_refresh(lambda: ["c.com"]) == ["c.com"]

    def test_normalize_host(self):
        assert normalize_host(" WWW.Example.COM ") == "example.com"
