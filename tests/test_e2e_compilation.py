"""
End-to-end compilation tests

Tests the full pipeline: Markdown source -> events -> pikchr transform ->
title + HTML body -> template -> output document, and the command line
that drives it.
"""

import os
import stat

import pytest

from mdnotebook.__main__ import main
from mdnotebook.config import AppSettings, appsettings
from mdnotebook.lib.compiler import Compiler, InputError, OutputError
from mdnotebook.lib.pikchr import DiagramError, Pikchr
from mdnotebook.lib.template import Template, TemplateError


def fake_render(source):
    """Stand-in diagram engine: '@' is a syntax error"""
    if "@" in source:
        raise DiagramError("ERROR: syntax error at '@' <line 1>")
    return '<svg class="fake"><text>rendered</text></svg>\n'


@pytest.fixture
def compiler():
    return Compiler(render=fake_render)


class TestDocumentRendering:
    """Test rendering complete documents"""

    def test_title_and_body(self, compiler):
        """Heading becomes the page title and stays in the body"""
        document = compiler.document_render("# Title\n\nHello.")

        assert "<title>Title</title>" in document
        assert "<h1>Title</h1>\n<p>Hello.</p>" in document

    def test_body_without_heading(self, compiler):
        document = compiler.document_render("Body only.")

        assert "<title></title>" in document
        assert "<p>Body only.</p>" in document

    def test_empty_source(self, compiler):
        """Empty source still expands the template"""
        title, content = compiler.html_compile("")
        assert title == ""
        assert content == ""

        document = compiler.document_render("")
        assert document == Template().render({"title": "", "content": ""})

    def test_heading_only(self, compiler):
        title, content = compiler.html_compile("# Hello")
        assert title == "Hello"
        assert content == "<h1>Hello</h1>\n"

    def test_title_is_escaped_in_default_template(self, compiler):
        document = compiler.document_render("# Fish & Chips\n")
        assert "<title>Fish &amp; Chips</title>" in document

    def test_custom_template(self):
        compiler = Compiler(Template("[{{title}}]{{{content}}}"), render=fake_render)
        assert compiler.document_render("# T\n\nx") == "[T]<h1>T</h1>\n<p>x</p>\n"

    def test_template_error(self):
        compiler = Compiler(Template("{{title"), render=fake_render)
        with pytest.raises(TemplateError):
            compiler.document_render("# T")

    def test_rendering_is_repeatable(self, compiler):
        source = "# T\n\n```pikchr\nbox\n```\n\nText[^1]\n\n[^1]: note\n"
        assert compiler.document_render(source) == compiler.document_render(source)


class TestDiagrams:
    """Test pikchr blocks inside documents"""

    def test_valid_diagram_becomes_svg(self, compiler):
        _, content = compiler.html_compile('Before\n\n```pikchr\nbox "A"; arrow; box "B"\n```\n\nAfter\n')

        assert content.count("<svg") == 1
        assert 'box "A"' not in content
        assert "<code" not in content
        assert content.index("Before") < content.index("<svg") < content.index("After")

    def test_invalid_diagram_shows_error(self, compiler):
        """Diagram errors are shown escaped in the page; rendering succeeds"""
        _, content = compiler.html_compile("```pikchr\n@\n```\n")

        assert "ERROR: syntax error at '@' &lt;line 1&gt;" in content
        assert "<svg" not in content

    def test_other_languages_untouched(self, compiler):
        _, content = compiler.html_compile("```rust\nfn main() {}\n```\n")
        assert content == '<pre><code class="language-rust">fn main() {}\n</code></pre>\n'

    def test_diagram_in_list_item(self, compiler):
        _, content = compiler.html_compile("- item\n\n  ```pikchr\n  box\n  ```\n")
        assert "<li>" in content
        assert '<svg class="fake">' in content

    def test_diagram_does_not_become_title(self, compiler):
        title, _ = compiler.html_compile("```pikchr\nbox\n```\n\n# Real title\n")
        assert title == "Real title"

    @pytest.mark.skipif(os.name != "posix", reason="stand-in executable is a shell script")
    def test_empty_diagram_output_is_inlined(self, tmp_path):
        """Whatever pikchr prints for an empty block is inserted as HTML"""
        command = tmp_path / "fake-pikchr"
        command.write_text('#!/bin/sh\necho "<!-- empty pikchr diagram -->"\n', encoding="utf-8")
        command.chmod(command.stat().st_mode | stat.S_IXUSR)
        engine = Pikchr(AppSettings(pikchr_command=str(command)))

        _, content = Compiler(render=engine.render).html_compile("```pikchr\n```\n")

        assert content == "<!-- empty pikchr diagram -->"


class TestFiles:
    """Test reading sources and writing documents"""

    def test_document_compile(self, compiler, tmp_path):
        source = tmp_path / "notes.md"
        source.write_text("# Notes\n", encoding="utf-8")
        assert "<title>Notes</title>" in compiler.document_compile(source)

    def test_missing_source(self, compiler, tmp_path):
        with pytest.raises(InputError):
            compiler.document_compile(tmp_path / "absent.md")

    def test_write_file(self, compiler, tmp_path):
        output = tmp_path / "out.html"
        compiler.document_write("<p>x</p>", str(output))
        assert output.read_text(encoding="utf-8") == "<p>x</p>"

    def test_write_stdout(self, compiler, capsys):
        compiler.document_write("<p>x</p>")
        assert capsys.readouterr().out == "<p>x</p>"

    def test_write_to_missing_directory(self, compiler, tmp_path):
        with pytest.raises(OutputError):
            compiler.document_write("x", str(tmp_path / "no" / "such" / "out.html"))


class TestCommandLine:
    """Test the mdnotebook command"""

    @pytest.fixture
    def notes(self, tmp_path):
        path = tmp_path / "notes.md"
        path.write_text("# Notes\n\nSome *text*.\n", encoding="utf-8")
        return path

    def test_render_to_stdout(self, notes, capsys):
        main([str(notes)])
        out = capsys.readouterr().out
        assert "<title>Notes</title>" in out
        assert "<p>Some <em>text</em>.</p>" in out

    def test_render_to_file(self, notes, tmp_path, capsys):
        output = tmp_path / "notes.html"
        main([str(notes), "-o", str(output)])

        assert "<h1>Notes</h1>" in output.read_text(encoding="utf-8")
        assert capsys.readouterr().out == ""

    def test_custom_template(self, notes, tmp_path, capsys):
        template = tmp_path / "page.mustache"
        template.write_text("TITLE={{title}}\n{{{content}}}", encoding="utf-8")

        main([str(notes), "--template", str(template)])

        assert capsys.readouterr().out.startswith("TITLE=Notes\n<h1>Notes</h1>")

    def test_diagram_failure_is_not_fatal(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(appsettings, "pikchr_command", str(tmp_path / "no-such-pikchr"))
        source = tmp_path / "d.md"
        source.write_text("```pikchr\nbox\n```\n", encoding="utf-8")

        main([str(source)])

        assert "pikchr executable not found" in capsys.readouterr().out

    def test_missing_input(self, tmp_path, capsys):
        output = tmp_path / "out.html"
        with pytest.raises(SystemExit) as excinfo:
            main([str(tmp_path / "absent.md"), "-o", str(output)])

        assert excinfo.value.code == 1
        assert "Error:" in capsys.readouterr().err
        assert not output.exists()

    def test_template_error_writes_nothing(self, notes, tmp_path):
        template = tmp_path / "broken.mustache"
        template.write_text("{{title", encoding="utf-8")
        output = tmp_path / "out.html"

        with pytest.raises(SystemExit) as excinfo:
            main([str(notes), "-t", str(template), "-o", str(output)])

        assert excinfo.value.code == 1
        assert not output.exists()

    def test_missing_template(self, notes, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            main([str(notes), "-t", str(tmp_path / "absent.mustache")])
        assert excinfo.value.code == 1

    def test_unwritable_output(self, notes, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            main([str(notes), "-o", str(tmp_path / "no" / "dir" / "out.html")])
        assert excinfo.value.code == 1

    def test_bad_serve_address(self, notes, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main([str(notes), "--serve", "localhost"])
        assert excinfo.value.code == 1
        assert "Invalid address" in capsys.readouterr().err

    def test_no_arguments(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code != 0
        assert "usage:" in capsys.readouterr().err

    def test_help(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--help"])
        assert excinfo.value.code == 0
        out = capsys.readouterr().out
        assert "--output" in out
        assert "--template" in out
        assert "--serve" in out
