"""Tests for the cross-page keyword linking pass."""

from sitegen.config import MAX_LINKS_PER_PAGE
from sitegen.models.files import GeneratedFile
from sitegen.services.internal_linker import (
    LinkTarget,
    PageKeywords,
    apply_internal_linking,
    extract_keywords,
    inject_links,
    route_to_file_path,
)


class TestExtractKeywords:
    def test_title_variants_and_slug(self):
        keywords = extract_keywords("Best Solar Panels (2025)", "/solar-panel-guide/")
        assert keywords == ["best solar panels (2025)", "best solar panels", "solar panel guide"]

    def test_short_slug_is_skipped(self):
        assert extract_keywords("Home Insurance", "/faq/") == ["home insurance"]

    def test_empty_title(self):
        assert extract_keywords("", "/roof-repair/") == ["roof repair"]


class TestRouteToFilePath:
    def test_root(self):
        assert route_to_file_path("/") == "index.html"

    def test_nested(self):
        assert route_to_file_path("/guides/roof/") == "guides/roof/index.html"


class TestInjectLinks:
    def test_links_first_mention(self):
        html = "<p>Compare roof repair costs. More roof repair tips.</p>"
        pages = [PageKeywords("/roof-repair/", ["roof repair"])]
        result = inject_links(html, "/", pages)
        assert result.count('<a href="/roof-repair/">roof repair</a>') == 1

    def test_keeps_original_case(self):
        html = "<li>Roof Repair basics</li>"
        result = inject_links(html, "/", [PageKeywords("/roof/", ["roof repair"])])
        assert '<a href="/roof/">Roof Repair</a>' in result

    def test_skips_current_route(self):
        html = "<p>roof repair</p>"
        assert inject_links(html, "/roof/", [PageKeywords("/roof/", ["roof repair"])]) == html

    def test_one_link_per_target(self):
        html = "<p>roof repair</p><p>roof cost</p>"
        result = inject_links(html, "/", [PageKeywords("/roof/", ["roof repair", "roof cost"])])
        assert result.count("<a ") == 1

    def test_ignores_short_keywords(self):
        html = "<p>car</p>"
        assert inject_links(html, "/", [PageKeywords("/car/", ["car"])]) == html

    def test_skips_text_after_existing_anchor(self):
        html = '<p>See <a href="/x/">this</a> roof repair guide</p>'
        assert inject_links(html, "/", [PageKeywords("/roof/", ["roof repair"])]) == html

    def test_ignores_headings_and_pre(self):
        html = "<h2>roof repair</h2><pre>roof repair</pre>"
        assert inject_links(html, "/", [PageKeywords("/roof/", ["roof repair"])]) == html

    def test_caps_links_per_page(self):
        names = [f"topic{i:02d}" for i in range(12)]
        html = "".join(f"<p>About {name} here</p>" for name in names)
        pages = [PageKeywords(f"/{name}/", [name]) for name in names]
        result = inject_links(html, "/", pages)
        assert result.count("<a ") == MAX_LINKS_PER_PAGE


class TestApplyInternalLinking:
    def test_rewrites_only_target_pages(self):
        files = [
            GeneratedFile(path="index.html", content="<p>Read our roof repair guide</p>"),
            GeneratedFile(path="roof-repair/index.html", content="<p>Start on the main page</p>"),
            GeneratedFile(path="styles.css", content="p { roof repair: none }"),
        ]
        targets = [LinkTarget("/", "Home"), LinkTarget("/roof-repair/", "Roof Repair")]
        apply_internal_linking(files, targets)
        assert '<a href="/roof-repair/">roof repair</a>' in files[0].content
        assert files[1].content == "<p>Start on the main page</p>"
        assert files[2].content == "p { roof repair: none }"
