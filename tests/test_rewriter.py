import textwrap

import pytest

from singlefile.errors import SubstitutionError
from singlefile.rewriter import (
    escape_script_text,
    inline_loader,
    insert_blob_script,
    rewrite_config_urls,
)

from conftest import HOST_DOCUMENT


def test_inline_loader_replaces_external_reference():
    loader = "function createUnityInstance() {}"

    html = inline_loader(HOST_DOCUMENT, loader)

    assert 'src="Build/Game.loader.js"' not in html
    assert f"<script>{loader}</script>" in html
    assert html.count("<script") == HOST_DOCUMENT.count("<script")


def test_inline_loader_accepts_single_quotes_and_query_strings():
    html = "<body><script src='Build/Game.loader.js?v=3' defer></script></body>"

    assert inline_loader(html, "load()") == "<body><script>load()</script></body>"


def test_inline_loader_escapes_closing_script_sequences():
    html = inline_loader(
        '<script src="Build/x.loader.js"></script>',
        'document.write("</script>");',
    )

    assert html == '<script>document.write("<\\/script>");</script>'
    assert escape_script_text("a</SCRIPT>b") == "a<\\/SCRIPT>b"


def test_inline_loader_strict_mode_raises_when_reference_is_missing():
    with pytest.raises(SubstitutionError, match="loader was not inlined"):
        inline_loader("<script>var x = 1;</script>", "loader()", strict=True)


def test_inline_loader_passes_document_through_by_default():
    html = "<script>var x = 1;</script>"

    with pytest.warns(UserWarning, match="loader was not inlined"):
        assert inline_loader(html, "loader()") == html


def test_insert_blob_script_goes_before_first_inline_script():
    html = '<script src="ext.js"></script><script>one()</script><script>two()</script>'

    result = insert_blob_script(html, "<script>blob()</script>\n")

    assert result == (
        '<script src="ext.js"></script>'
        "<script>blob()</script>\n<script>one()</script><script>two()</script>"
    )


def test_insert_blob_script_falls_back_to_body_end_by_default():
    html = '<body><script src="ext.js"></script></body>'

    with pytest.warns(UserWarning, match="No inline <script>"):
        result = insert_blob_script(html, "<script>blob()</script>")
    assert result == '<body><script src="ext.js"></script><script>blob()</script></body>'


def test_insert_blob_script_strict_mode_raises_without_inline_script():
    with pytest.raises(SubstitutionError):
        insert_blob_script("<body></body>", "<script></script>", strict=True)


def test_rewrite_config_urls_points_entries_at_blob_urls():
    html = rewrite_config_urls(HOST_DOCUMENT)

    assert "dataUrl: unityBlobUrls.data," in html
    assert "frameworkUrl: unityBlobUrls.framework," in html
    assert "codeUrl: unityBlobUrls.code," in html
    assert 'dataUrl: "' not in html
    assert 'productName: "Game"' in html


def test_rewrite_config_urls_handles_quoted_keys_and_spacing():
    html = textwrap.dedent(
        """\
        <script>
        var config = {"dataUrl" : 'Build/a.data', 'frameworkUrl':"Build/a.framework.js",
                      codeUrl:   "Build/a.wasm"};
        </script>
        """
    )

    result = rewrite_config_urls(html)

    assert '"dataUrl" : unityBlobUrls.data,' in result
    assert "'frameworkUrl':unityBlobUrls.framework," in result
    assert "codeUrl:   unityBlobUrls.code}" in result


def test_rewrite_config_urls_only_rewrites_first_occurrence():
    html = '<script>a = {dataUrl: "x.data"}; b = {dataUrl: "y.data"}; c = {frameworkUrl: "f", codeUrl: "c"};</script>'

    result = rewrite_config_urls(html)

    assert "a = {dataUrl: unityBlobUrls.data}" in result
    assert 'b = {dataUrl: "y.data"}' in result


def test_rewrite_config_urls_ignores_non_script_text():
    html = (
        '<p>dataUrl: "docs.data"</p>'
        '<script>var c = {dataUrl: "x", frameworkUrl: "y", codeUrl: "z"};</script>'
    )

    result = rewrite_config_urls(html)

    assert '<p>dataUrl: "docs.data"</p>' in result
    assert "dataUrl: unityBlobUrls.data" in result


def test_rewrite_config_urls_strict_mode_lists_missing_keys():
    html = '<script>var c = {dataUrl: buildUrl + "/x.data", frameworkUrl: "f", codeUrl: "c"};</script>'

    with pytest.raises(SubstitutionError, match="dataUrl"):
        rewrite_config_urls(html, strict=True)


def test_rewrite_config_urls_rewrites_what_it_finds_by_default():
    html = '<script>var c = {frameworkUrl: "f", codeUrl: "c"};</script>'

    with pytest.warns(UserWarning, match="dataUrl"):
        result = rewrite_config_urls(html)
    assert "frameworkUrl: unityBlobUrls.framework" in result
    assert "codeUrl: unityBlobUrls.code" in result


def test_rewrite_config_urls_leaves_optional_locators_and_warns():
    html = (
        '<script>var c = {dataUrl: "d", frameworkUrl: "f", codeUrl: "c", '
        'symbolsUrl: "Build/x.symbols.json", streamingAssetsUrl: "StreamingAssets"};</script>'
    )

    with pytest.warns(UserWarning) as records:
        result = rewrite_config_urls(html)

    assert 'symbolsUrl: "Build/x.symbols.json"' in result
    assert 'streamingAssetsUrl: "StreamingAssets"' in result
    messages = [str(record.message) for record in records]
    assert any("symbolsUrl" in message for message in messages)
    assert any("streamingAssetsUrl" in message for message in messages)


def test_build_blob_script_requires_all_three_payloads():
    from singlefile.blob_script import build_blob_script

    with pytest.raises(ValueError, match="framework script"):
        build_blob_script([])
