# streamlit_app.py
import re, time, traceback
import streamlit as st
from streamlit_ace import st_ace

from sponge.errors import SpongeError
from sponge.parser import Parser
from sponge.sema import Sema
from sponge.interpreter import Interpreter
from sponge.inspectors import ast_ascii_tree, ast_to_dict, ast_graphviz
from sponge.codegen_tac import TACBuilder
from workbench.backends import SpongeBackend
from workbench.cfg_generic import cfg_from_sponge
from workbench.lexers import highlight_html, pygments_tokens
from workbench.viz_cfg import cfg_graphviz

# ---------- Session state init (must be BEFORE UI renders) ----------
st.session_state.setdefault("ace_annotations", [])

# ---------- Tab indices ----------
TAB_TOKENS = 0
TAB_AST    = 1
TAB_IR     = 2
TAB_CFG    = 3
TAB_RUN    = 4
TAB_DEBUG  = 5

DEFAULT_SOURCE = """# Sponge sample
func test_arithmetic() {
    let a = 10;
    let b = 20;
    let c = a + b;
    print(c);
}

func test_semantic() {
    let x = 1;
    let y = x * 4 + 2;
    if y > 4 {
        print("ok");
    } else {
        print("fail");
    }
}

func main() {
    test_arithmetic();
    test_semantic();
}
"""

# ---------- Helpers ----------
def timeit(fn):
    t0 = time.perf_counter()
    out = fn()
    return out, (time.perf_counter() - t0) * 1000.0  # ms


LINECOL_RE = re.compile(r'at\s+(\d+):(\d+)')

def extract_line_col(err):
    if isinstance(err, SpongeError) and err.line is not None:
        return err.line, err.col
    m = LINECOL_RE.search(str(err) or "")
    if not m:
        return None, None
    return int(m.group(1)), int(m.group(2))

def annotate(err):
    ln, col = extract_line_col(err)
    st.session_state["ace_annotations"] = [{
        "row": (ln - 1) if ln else 0,
        "column": max(0, (col or 1) - 1),
        "text": str(err),
        "type": "error",
    }]

def show_error(stage, err):
    st.error(f"{stage} error: {type(err).__name__}: {err}")
    if not isinstance(err, SpongeError):
        st.code(traceback.format_exc())
    annotate(err)


perf = {}  # collected timings

def perf_badge(*pairs):
    if not pairs:
        return
    cols = st.columns(len(pairs))
    for c, (label, ms) in zip(cols, pairs):
        with c:
            st.metric(label, f"{ms:.1f} ms")

# ---------- Page ----------
st.set_page_config(page_title="Sponge Workbench", layout="wide")
st.title("🧽 Sponge Workbench")
st.caption("Tokens → AST → TAC → CFG → Run → Debug")

# ---------- Sidebar (Ace editor) ----------
with st.sidebar:
    st.header("Controls")
    code = st_ace(
        value=DEFAULT_SOURCE,
        language="text",
        theme="tomorrow_night_eighties",
        min_lines=16,
        max_lines=32,
        annotations=st.session_state["ace_annotations"],
        auto_update=True,
        key="ace_sponge",
    )

    check = st.checkbox("Static checks before run", value=True)
    autorun = st.checkbox("Auto-run", value=True)
    run_btn = st.button("Compile / Run")

if st.session_state["ace_annotations"]:
    last_err = st.session_state["ace_annotations"][-1]["text"]
    st.error(f"Last error: {last_err}")
do = autorun or run_btn
b = SpongeBackend()
tabs = st.tabs(["Tokens", "AST", "IR", "CFG", "Run", "Debug"])

# ---------- TOKENS ----------
with tabs[TAB_TOKENS]:
    st.subheader("Tokens")
    st.session_state["ace_annotations"] = []  # clear previous errors
    try:
        toks, t_tok = timeit(lambda: b.tokens(code))
        perf["tokens_ms"] = t_tok
        st.dataframe(toks, hide_index=True, use_container_width=True)
        st.success("Tokenization OK.")
    except Exception as e:
        show_error("Tokenization", e)
    with st.expander("Highlighted source (Pygments)"):
        st.markdown(highlight_html(code), unsafe_allow_html=True)
        st.dataframe(pygments_tokens(code), hide_index=True, use_container_width=True)
    perf_badge(("Tokens", perf.get("tokens_ms", 0.0)))

# ---------- AST ----------
with tabs[TAB_AST]:
    st.subheader("Parser / AST")
    try:
        prog, t_parse = timeit(lambda: Parser(code).parse())
        perf["parse_ms"] = t_parse
        st.success("Parsed successfully.")

        c1, c2 = st.columns(2)
        with c1:
            st.markdown("**AST — ASCII**")
            st.code(ast_ascii_tree(prog), language="text")
        with c2:
            st.markdown("**AST — JSON**")
            st.json(ast_to_dict(prog))

        st.markdown("**AST — Graphviz**")
        st.graphviz_chart(ast_graphviz(prog).source)
    except Exception as e:
        show_error("AST", e)
    perf_badge(("Parse", perf.get("parse_ms", 0.0)))

# ---------- IR ----------
with tabs[TAB_IR]:
    st.subheader("Three-address code")
    try:
        ir, t_ir = timeit(lambda: b.ir(code))
        perf["ir_ms"] = t_ir
        st.code(ir, language="text")
        st.success("IR stage OK.")
    except Exception as e:
        show_error("IR", e)
    perf_badge(("IR", perf.get("ir_ms", 0.0)))

# ---------- CFG ----------
with tabs[TAB_CFG]:
    st.subheader("Control-Flow Graph")
    try:
        prog, t_parse = timeit(lambda: Parser(code).parse())
        _, t_sema = timeit(lambda: Sema(prog).analyze())
        funcs, t_ir = timeit(lambda: TACBuilder().lower_prog(prog))
        perf.update(parse_ms=t_parse, sema_ms=t_sema, ir_ms=t_ir)
        for fname, ir in funcs:
            blocks, t_cfg = timeit(lambda: cfg_from_sponge(ir))
            perf["cfg_ms"] = t_cfg
            st.markdown(f"**Function** `{fname}`")
            st.graphviz_chart(cfg_graphviz(blocks, fname).source)
        st.success("CFG generated.")
    except Exception as e:
        show_error("CFG", e)

    perf_badge(
        ("Parse", perf.get("parse_ms", 0.0)),
        ("Sema",  perf.get("sema_ms", 0.0)),
        ("IR",    perf.get("ir_ms", 0.0)),
        ("CFG",   perf.get("cfg_ms", 0.0)),
    )

# ---------- RUN ----------
with tabs[TAB_RUN]:
    st.subheader("Run")
    if do:
        r, t_run = timeit(lambda: b.run(code, check=check))
        perf["run_ms"] = t_run
        if not r.ok:
            st.error(f"Run failed during {r.stage}: {r.stage_error}")
            st.session_state["ace_annotations"] = [{
                "row": (r.error_line - 1) if r.error_line else 0,
                "column": max(0, (r.error_col or 1) - 1),
                "text": str(r.stage_error), "type": "error"
            }]
        if r.stdout.strip():
            st.code(r.stdout, language="text")
        else:
            st.info("(no output)")
    perf_badge(("Run", perf.get("run_ms", 0.0)))

# ---------- DEBUG ----------
with tabs[TAB_DEBUG]:
    st.subheader("Debugger")
    try:
        prog = Parser(code).parse()
        if check:
            Sema(prog).analyze()

        def fresh_session():
            import io
            st.session_state.sp_dbg_gen = Interpreter(prog, out=io.StringIO()).run_debug()
            st.session_state.sp_events = []

        if "sp_dbg_gen" not in st.session_state:
            fresh_session()
        cols = st.columns(3)
        if cols[0].button("Step"):
            try:
                ev = next(st.session_state.sp_dbg_gen)
                st.session_state.sp_events.append(ev)
            except StopIteration:
                st.success("Program finished.")
        if cols[1].button("Reset"):
            fresh_session()
        events = st.session_state.sp_events
        if events and "locals" in events[-1]:
            st.markdown("**Bindings**")
            st.json(events[-1]["locals"])
        st.markdown("**Events**")
        st.write(events)
    except Exception as e:
        show_error("Debug", e)
