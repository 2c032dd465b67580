from pygments import highlight, lex
from pygments.formatters import HtmlFormatter
from pygments.lexer import RegexLexer, words
from pygments.token import (Comment, Keyword, Name, Number, Operator,
                            Punctuation, String, Text)

class SpongeLexer(RegexLexer):
    """Pygments lexer for Sponge source (``.sp``)."""
    name = "Sponge"
    aliases = ["sponge"]
    filenames = ["*.sp"]

    tokens = {
        "root": [
            (r"[ \t\r\f\n]+", Text),
            (r"#.*?$", Comment.Single),
            (words(("func", "let", "if", "else", "return"), suffix=r"\b"), Keyword),
            (words(("print",), suffix=r"\b"), Name.Builtin),
            (r"[A-Za-z_][A-Za-z0-9_]*(?=\s*\()", Name.Function),
            (r"[A-Za-z_][A-Za-z0-9_]*", Name),
            (r"[0-9]+", Number.Integer),
            (r'"[^"\n]*"', String.Double),
            (r"==|!=|[+\-*/<>=]", Operator),
            (r"[(){},;]", Punctuation),
        ],
    }

def pygments_tokens(code:str):
    rows = []
    for ttype, value in lex(code, SpongeLexer()):
        if ttype is Text:
            continue
        rows.append({"kind": str(ttype), "lexeme": value})
    return rows

def highlight_html(code:str) -> str:
    fmt = HtmlFormatter(noclasses=True, style="monokai")
    return highlight(code, SpongeLexer(), fmt)
