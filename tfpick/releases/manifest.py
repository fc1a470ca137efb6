"""Reading ``required_version`` from the Terraform module in scope.

The module is the nearest directory, starting at the working directory and
walking up its ancestors, that contains ``*.tf`` or ``*.tf.json`` files.
Every ``required_version`` declared inside a top-level ``terraform`` block
of that module contributes to the constraint; multiple declarations are
joined with ``", "`` so that all of them must hold.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path

from tfpick.core.result import Err, Ok, Result
from tfpick.core.structured import as_str_dict, get_str

__all__ = ["ManifestError", "find_module_dir", "read_required_version"]

_TERRAFORM_BLOCK_RE = re.compile(r"(?m)^\s*terraform\s*\{")
_REQUIRED_VERSION_RE = re.compile(r'required_version\s*=\s*"([^"]*)"')


@dataclass(frozen=True, slots=True)
class ManifestError:
    """A module file could not be read or parsed."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.path}"


def _module_files(directory: Path) -> list[Path]:
    files = [*directory.glob("*.tf"), *directory.glob("*.tf.json")]
    return sorted(p for p in files if p.is_file())


def find_module_dir(start: Path) -> Path | None:
    """Return the nearest directory (start or an ancestor) holding module files."""
    start = start.resolve()
    for directory in (start, *start.parents):
        if _module_files(directory):
            return directory
    return None


def _strip_comments(text: str) -> str:
    """Blank out ``#``, ``//`` and ``/* */`` comments, leaving strings intact."""
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue
        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif ch == "#" or text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
            out.append(" ")
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def _block_body(text: str, open_brace: int) -> str:
    """Body between ``text[open_brace]`` (a ``{``) and its matching ``}``."""
    depth = 0
    in_string = False
    i = open_brace
    while i < len(text):
        ch = text[i]
        if in_string:
            if ch == "\\":
                i += 2
                continue
            if ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[open_brace + 1 : i]
        i += 1
    return text[open_brace + 1 :]


def _nested_bodies_removed(body: str) -> str:
    """Drop nested blocks (e.g. ``required_providers``) from a block body."""
    out: list[str] = []
    i = 0
    while i < len(body):
        if body[i] == "{":
            inner = _block_body(body, i)
            i += len(inner) + 2
            continue
        out.append(body[i])
        i += 1
    return "".join(out)


def _constraints_from_hcl(text: str) -> list[str]:
    text = _strip_comments(text)
    found: list[str] = []
    for m in _TERRAFORM_BLOCK_RE.finditer(text):
        body = _nested_bodies_removed(_block_body(text, m.end() - 1))
        found.extend(v.strip() for v in _REQUIRED_VERSION_RE.findall(body))
    return found


def _constraints_from_json(path: Path, text: str) -> Result[list[str], ManifestError]:
    try:
        data = as_str_dict(json.loads(text))
    except json.JSONDecodeError as e:
        return Err(ManifestError(path=path, message=f"invalid JSON ({e})"))
    if data is None:
        return Ok([])

    blocks = data.get("terraform")
    if not isinstance(blocks, list):
        blocks = [blocks]
    found: list[str] = []
    for block in blocks:
        table = as_str_dict(block)
        if table is None:
            continue
        value = get_str(table, "required_version")
        if value is not None:
            found.append(value)
    return Ok(found)


def read_required_version(start: Path) -> Result[str | None, ManifestError]:
    """Collect the module's ``required_version`` constraint.

    Args:
        start: Directory to start searching from (usually the cwd)

    Returns:
        Ok(constraint), Ok(None) if there is no module or no declaration,
        Err(ManifestError) if a module file cannot be read.
    """
    module_dir = find_module_dir(start)
    if module_dir is None:
        return Ok(None)

    constraints: list[str] = []
    for path in _module_files(module_dir):
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return Err(ManifestError(path=path, message=f"cannot read module file ({e})"))

        if path.name.endswith(".tf.json"):
            result = _constraints_from_json(path, text)
            if isinstance(result, Err):
                return result
            constraints.extend(result.value)
        else:
            constraints.extend(_constraints_from_hcl(text))

    constraints = [c for c in constraints if c]
    if not constraints:
        return Ok(None)
    return Ok(", ".join(constraints))
