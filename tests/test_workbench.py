"""Tests for the workbench helpers behind the streamlit app."""

from pygments.token import Comment, Keyword, Name, String

from sponge.codegen_tac import TACBuilder
from sponge.parser import parse
from workbench.backends import SpongeBackend
from workbench.cfg_generic import cfg_from_sponge
from workbench.lexers import SpongeLexer, highlight_html, pygments_tokens
from workbench.viz_cfg import cfg_graphviz


def test_backend_run_fixture(fixture_source):
    r = SpongeBackend().run(fixture_source)
    assert r.ok
    assert r.stdout == "30\nok\n"
    assert r.tokens[0]["kind"] == "FUNC"
    assert r.ast_repr["_type"] == "Program"
    assert "func test_semantic()" in r.ir_text


def test_backend_run_keeps_output_before_runtime_error():
    r = SpongeBackend().run('func main() { print(1); print("a" + 1); }')
    assert not r.ok
    assert r.stage == "run"
    assert r.stdout == "1\n"
    assert r.stage_error.startswith("SpongeTypeError")
    assert (r.error_line, r.error_col) == (1, 35)


def test_backend_reports_failing_stage():
    r = SpongeBackend().run("func main() { $ }")
    assert not r.ok and r.stage == "tokens"
    r = SpongeBackend().run("func main() { print(x); }")
    assert not r.ok and r.stage == "check"
    r = SpongeBackend().run("func main() { print(x); }", check=False)
    assert not r.ok and r.stage == "run"


def test_pygments_lexer_classifies_tokens():
    rows = pygments_tokens('# hi\nfunc main() { print("x"); helper(); }')
    kinds = {row["lexeme"]: row["kind"] for row in rows}
    assert kinds["func"] == str(Keyword)
    assert kinds["print"] == str(Name.Builtin)
    assert kinds["helper"] == str(Name.Function)
    assert kinds['"x"'] == str(String.Double)
    assert kinds["# hi"] == str(Comment.Single)


def test_lexer_metadata():
    assert "sponge" in SpongeLexer.aliases
    assert "*.sp" in SpongeLexer.filenames


def test_highlight_html():
    html = highlight_html("let a = 1;")
    assert "<pre" in html and "let" in html


def test_cfg_view(fixture_source):
    funcs = dict(TACBuilder().lower_prog(parse(fixture_source)))
    blocks = cfg_from_sponge(funcs["test_semantic"])
    assert blocks["entry"].succs == ["then1", "else2"]
    assert any(line.startswith("cbr ") for line in blocks["entry"].lines)
    src = cfg_graphviz(blocks, "test_semantic").source
    assert "entry -> then1" in src
    assert "else2 -> endif3" in src
