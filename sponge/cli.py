import argparse, json, logging, os, sys, pathlib
from .errors import SpongeError
from .lexer import Lexer
from .parser import Parser
from .sema import Sema
from .interpreter import Interpreter
from .inspectors import ast_ascii_tree, ast_graphviz, ast_to_dict
from .codegen_tac import TACBuilder
from .ir import pretty_tac
from .render import to_source

logger = logging.getLogger(__name__)

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog='sponge', description='Sponge language interpreter')
    ap.add_argument('--log-level', choices=LOG_LEVELS,
                    default=os.environ.get('SPONGE_LOG_LEVEL', 'WARNING').upper(),
                    help='logging verbosity (default: $SPONGE_LOG_LEVEL or WARNING)')
    sub = ap.add_subparsers(dest='cmd', required=True)

    runp = sub.add_parser('run', help='Check and run a program')
    runp.add_argument('file')
    runp.add_argument('--no-check', action='store_true', help='skip static checks before running')

    sub.add_parser('check', help='Lex, parse and check a program').add_argument('file')
    sub.add_parser('tokens', help='Print the token stream').add_argument('file')

    astp = sub.add_parser('ast', help='Print the syntax tree')
    astp.add_argument('file')
    astp.add_argument('--format', choices=('ascii', 'json', 'dot'), default='ascii')

    sub.add_parser('ir', help='Print three-address code for every function').add_argument('file')
    sub.add_parser('fmt', help='Print the program in canonical layout').add_argument('file')
    return ap

def execute(args, out) -> int:
    src = pathlib.Path(args.file).read_text(encoding='utf-8')
    logger.info("loaded %s (%d bytes)", args.file, len(src))

    if args.cmd == 'tokens':
        for t in Lexer(src).tokens():
            out.write(f"{t.line}:{t.col}\t{t.kind}\t{t.lexeme}\n")
        return 0

    prog = Parser(src).parse()
    if args.cmd == 'run':
        if not args.no_check:
            Sema(prog).analyze()
        Interpreter(prog, out=out).run()
    elif args.cmd == 'check':
        Sema(prog).analyze()
        out.write(f"{args.file}: ok\n")
    elif args.cmd == 'ast':
        if args.format == 'json':
            out.write(json.dumps(ast_to_dict(prog), indent=2) + "\n")
        elif args.format == 'dot':
            out.write(ast_graphviz(prog).source)
        else:
            out.write(ast_ascii_tree(prog) + "\n")
    elif args.cmd == 'ir':
        funcs = TACBuilder().lower_prog(prog)
        out.write("\n\n".join(pretty_tac(n, c) for n, c in funcs) + "\n")
    elif args.cmd == 'fmt':
        out.write(to_source(prog))
    return 0

def main(argv=None):
    ap = build_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level, logging.WARNING),
                        format='%(levelname)s %(name)s: %(message)s')
    try:
        rc = execute(args, sys.stdout)
    except SpongeError as e:
        sys.stdout.flush()
        print(f"error: {type(e).__name__}: {e}", file=sys.stderr)
        rc = 1
    except OSError as e:
        print(f"error: cannot read {args.file}: {e.strerror}", file=sys.stderr)
        rc = 1
    except UnicodeDecodeError as e:
        print(f"error: {args.file} is not valid UTF-8 (byte {e.start})", file=sys.stderr)
        rc = 1
    except RecursionError:
        print(f"error: {args.file} is nested too deeply to process", file=sys.stderr)
        rc = 1
    sys.exit(rc)

if __name__ == '__main__':
    main()
