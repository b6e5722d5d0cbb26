"""Bundle the browser-side player element into a single ES module.

Relative imports are inlined in dependency order (scope hoisting, so imported
names must not be renamed), exports are kept only for the entry module, and
the result is minified at token level: comments and redundant whitespace are
dropped, line breaks are kept so automatic semicolon insertion still holds.
The source map records one segment per emitted token, pointing back at the
token's line and column in the unstripped module source.
"""

import json
import logging
import os
import re
from bisect import bisect_right
from dataclasses import dataclass, field
from pathlib import Path

import esprima
from esprima.error_handler import Error as EsprimaError

from tutorial_videos.exceptions import BuildError

logger = logging.getLogger(__name__)

_WORD_CHAR = re.compile(r"[A-Za-z0-9_$\\]")
_MERGING_CHARS = {"+", "-", "/"}
_BASE64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"


@dataclass
class SourceModule:
    path: Path
    source: str
    code: str
    # (start, end) ranges of `source` dropped to produce `code`, ascending
    removed: list[tuple[int, int]] = field(default_factory=list)

    def source_offset(self, offset: int) -> int:
        """Translate an offset in `code` back to the same character in `source`."""
        shift = 0
        for start, end in self.removed:
            if offset + shift < start:
                break
            shift += end - start
        return offset + shift


@dataclass
class Bundle:
    code: str
    source_map: dict
    modules: list[SourceModule] = field(default_factory=list)


def parse_module(source: str, path: Path):
    try:
        return esprima.parseModule(source, {"range": True})
    except EsprimaError as e:
        raise BuildError(f"Syntax error in {path}: {e}") from e


def resolve_import(importer: Path, specifier: str) -> Path:
    if not specifier.startswith((".", "/")):
        raise BuildError(f"Cannot bundle bare import '{specifier}' in {importer}")
    target = (importer.parent / specifier).resolve()
    if target.suffix != ".js" and not target.exists():
        target = target.with_suffix(".js")
    return target


def _check_import(node, path: Path) -> None:
    for spec in node.specifiers:
        if spec.type != "ImportSpecifier" or spec.local.name != spec.imported.name:
            raise BuildError(f"Only plain named imports can be bundled ({path})")


def strip_module(
    source: str, program, path: Path, keep_exports: bool
) -> tuple[str, list[tuple[int, int]]]:
    """Remove import statements and, for dependencies, export syntax.

    Returns the stripped code and the removed ranges of `source`.
    """
    edits: list[tuple[int, int]] = []
    for node in program.body:
        start, end = node.range
        if node.type == "ImportDeclaration":
            edits.append((start, end))
        elif keep_exports:
            continue
        elif node.type == "ExportNamedDeclaration":
            if node.source is not None:
                raise BuildError(f"Re-exports are not supported in bundled modules ({path})")
            if node.declaration is not None:
                edits.append((start, node.declaration.range[0]))
            else:
                edits.append((start, end))
        elif node.type in ("ExportDefaultDeclaration", "ExportAllDeclaration"):
            raise BuildError(f"Only named exports can be bundled ({path})")

    edits.sort()
    code = source
    for start, end in reversed(edits):
        code = code[:start] + code[end:]
    return code, edits


def _needs_space(previous: str, current: str) -> bool:
    a, b = previous[-1], current[0]
    if _WORD_CHAR.match(a) and _WORD_CHAR.match(b):
        return True
    if a == b and a in _MERGING_CHARS:
        return True
    return a.isdigit() and b == "."


def _minify_tokens(code: str, path: Path | None = None) -> tuple[str, list[tuple[int, int, int]]]:
    """Minify `code`, also returning (line, column, offset in code) for every emitted token."""
    try:
        tokens = esprima.tokenize(code, {"range": True})
    except EsprimaError as e:
        raise BuildError(f"Could not tokenize {path or 'bundle'}: {e}") from e

    out: list[str] = []
    positions: list[tuple[int, int, int]] = []
    line = column = 0
    previous_end = None
    previous_text = ""
    for token in tokens:
        start, end = token.range
        text = code[start:end]
        if previous_end is not None:
            gap = code[previous_end:start]
            if "\n" in _strip_comments(gap):
                out.append("\n")
                line += 1
                column = 0
            elif _needs_space(previous_text, text):
                out.append(" ")
                column += 1
        positions.append((line, column, start))
        out.append(text)
        # Template literals and continued strings may span lines
        breaks = text.count("\n")
        if breaks:
            line += breaks
            column = len(text) - text.rfind("\n") - 1
        else:
            column += len(text)
        previous_end = end
        previous_text = text
    return "".join(out), positions


def minify(code: str, path: Path | None = None) -> str:
    """Drop comments and collapse whitespace between tokens."""
    return _minify_tokens(code, path)[0]


def _strip_comments(gap: str) -> str:
    # Line comments end in a newline, which must survive for ASI
    gap = re.sub(r"/\*.*?\*/", lambda m: "\n" if "\n" in m.group(0) else " ", gap, flags=re.S)
    return re.sub(r"//[^\n]*", "", gap)


def _vlq(value: int) -> str:
    value = (-value << 1) | 1 if value < 0 else value << 1
    encoded = ""
    while True:
        digit = value & 31
        value >>= 5
        if value:
            digit |= 32
        encoded += _BASE64[digit]
        if not value:
            return encoded


def encode_mappings(segments: list[tuple[int, int, int, int, int]]) -> str:
    """Encode (gen_line, gen_col, source, line, col) segments, ordered by output position."""
    lines: list[list[str]] = []
    previous = [0, 0, 0]
    previous_col = 0
    for gen_line, gen_col, source, line, column in segments:
        while len(lines) <= gen_line:
            lines.append([])
            previous_col = 0
        fields = (
            gen_col - previous_col,
            source - previous[0],
            line - previous[1],
            column - previous[2],
        )
        lines[gen_line].append("".join(_vlq(v) for v in fields))
        previous_col = gen_col
        previous = [source, line, column]
    return ";".join(",".join(group) for group in lines)


def _line_starts(text: str) -> list[int]:
    return [0] + [m.end() for m in re.finditer("\n", text)]


class Bundler:
    """Collects an entry module and its relative imports."""

    def __init__(self, entry: Path):
        self.entry = Path(entry).resolve()
        self._modules: list[SourceModule] = []
        self._done: set[Path] = set()
        self._visiting: list[Path] = []

    def _visit(self, path: Path, is_entry: bool) -> None:
        if path in self._done:
            return
        if path in self._visiting:
            cycle = " -> ".join(p.name for p in [*self._visiting, path])
            raise BuildError(f"Circular import: {cycle}")
        if not path.is_file():
            raise BuildError(f"Module not found: {path}")

        self._visiting.append(path)
        source = path.read_text(encoding="utf-8")
        program = parse_module(source, path)

        for node in program.body:
            if node.type == "ImportDeclaration":
                _check_import(node, path)
                self._visit(resolve_import(path, node.source.value), is_entry=False)

        code, removed = strip_module(source, program, path, keep_exports=is_entry)
        self._modules.append(SourceModule(path=path, source=source, code=code, removed=removed))
        self._visiting.pop()
        self._done.add(path)

    def build(self, outfile: Path) -> Bundle:
        self._visit(self.entry, is_entry=True)

        chunks: list[str] = []
        segments: list[tuple[int, int, int, int, int]] = []
        first_line = 0
        for index, module in enumerate(self._modules):
            text, positions = _minify_tokens(module.code, module.path)
            line_starts = _line_starts(module.source)
            for gen_line, gen_col, offset in positions:
                original = module.source_offset(offset)
                line = bisect_right(line_starts, original) - 1
                segments.append(
                    (first_line + gen_line, gen_col, index, line, original - line_starts[line])
                )
            chunks.append(text)
            first_line += text.count("\n") + 1

        code = "\n".join(chunks)
        # The joined output must still be a valid module
        parse_module(code, outfile)

        map_name = f"{outfile.name}.map"
        source_map = {
            "version": 3,
            "file": outfile.name,
            "sources": [_relative(m.path, outfile.parent) for m in self._modules],
            "sourcesContent": [m.source for m in self._modules],
            "names": [],
            "mappings": encode_mappings(segments),
        }
        code = f"{code}\n//# sourceMappingURL={map_name}\n"
        return Bundle(code=code, source_map=source_map, modules=list(self._modules))


def _relative(path: Path, start: Path) -> str:
    return Path(os.path.relpath(path, start.resolve())).as_posix()


def build_web_component(entry: Path, outfile: Path) -> Bundle:
    """Bundle `entry` into `outfile` and write `outfile`.map beside it."""
    if not Path(entry).is_file():
        raise BuildError(f"Entry point not found: {entry}")

    outfile = Path(outfile)
    bundle = Bundler(entry).build(outfile)

    outfile.parent.mkdir(parents=True, exist_ok=True)
    outfile.write_text(bundle.code, encoding="utf-8")
    map_path = outfile.with_name(f"{outfile.name}.map")
    map_path.write_text(json.dumps(bundle.source_map), encoding="utf-8")

    logger.info(f"Bundled {len(bundle.modules)} module(s) into {outfile}")
    return bundle
