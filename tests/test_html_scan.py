import textwrap

from singlefile.html_scan import find_body_close, find_script_elements


def test_find_script_elements_reports_exact_source_spans():
    html = textwrap.dedent(
        """\
        <html>
        <head><script src="Build/Game.loader.js"></script></head>
        <body>
          <SCRIPT type="text/javascript">var a = "<b>" < 3;</SCRIPT>
        </body>
        </html>
        """
    )

    elements = find_script_elements(html)

    assert len(elements) == 2
    loader, inline = elements
    assert html[loader.start : loader.end] == '<script src="Build/Game.loader.js"></script>'
    assert loader.src == "Build/Game.loader.js"
    assert not loader.is_inline_javascript
    assert html[inline.start_tag_end : inline.content_end] == 'var a = "<b>" < 3;'
    assert html[inline.end - len("</SCRIPT>") : inline.end] == "</SCRIPT>"
    assert inline.is_inline_javascript


def test_find_script_elements_ignores_commented_out_scripts():
    html = '<!-- <script>old()</script> --><script id="live">run()</script>'

    elements = find_script_elements(html)

    assert len(elements) == 1
    assert elements[0].attributes == {"id": "live"}
    assert html[elements[0].start :].startswith('<script id="live">')


def test_non_javascript_types_are_not_inline_javascript():
    html = (
        '<script type="text/template"><p>x</p></script>'
        '<script type="module">import "./x.js";</script>'
    )

    template, module = find_script_elements(html)

    assert not template.is_inline_javascript
    assert module.is_inline_javascript


def test_find_body_close_uses_last_closing_body_tag():
    html = "<body><script>'</body>'</script></BODY>\n"

    assert find_body_close(html) == html.index("</BODY>")
    assert find_body_close("<div></div>") is None
